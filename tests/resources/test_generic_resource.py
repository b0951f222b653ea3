"""
Tests for GenericResource and ResourceGroup.
"""

import pytest

from armforge.core.scopes import DeploymentScope
from armforge.exceptions import PropertyValidationError
from armforge.resources.generic import GenericResource, GenericResourceProps
from armforge.resources.resource_group import ResourceGroup
from armforge.synthesis.synthesizer import synthesize

PLAN_ID = (
    "/subscriptions/sub/resourceGroups/rg-web/providers/"
    "Microsoft.Web/serverfarms/plan-web"
)


def site_props(**overrides):
    values = {
        "name": "app-web",
        "resource_type": "Microsoft.Web/sites",
        "api_version": "2024-04-01",
        "properties": {"serverFarmId": PLAN_ID, "httpsOnly": True},
    }
    values.update(overrides)
    return GenericResourceProps(**values)


class TestGenericResource:
    """Test cases for GenericResource."""

    def test_render(self, rg_stack):
        site = GenericResource(
            rg_stack, "Web", site_props(top_level={"kind": "app,linux"})
        )

        template = site.to_arm_template()

        assert template["type"] == "Microsoft.Web/sites"
        assert template["apiVersion"] == "2024-04-01"
        assert template["kind"] == "app,linux"
        assert template["properties"]["httpsOnly"] is True

    def test_id_references_normalized(self, rg_stack):
        """Test that literal IDs under an "id" key become expressions."""
        site = GenericResource(
            rg_stack,
            "Web",
            site_props(properties={"virtualNetworkSubnet": {"id": PLAN_ID}}),
        )

        reference = site.to_arm_template()["properties"]["virtualNetworkSubnet"]

        assert reference == {
            "id": "[resourceId('Microsoft.Web/serverfarms', 'plan-web')]"
        }

    def test_normalization_can_be_disabled(self, rg_stack):
        site = GenericResource(
            rg_stack,
            "Web",
            site_props(
                properties={"subnet": {"id": PLAN_ID}}, normalize_references=False
            ),
        )

        assert site.to_arm_template()["properties"]["subnet"]["id"] == PLAN_ID

    def test_properties_copied(self, rg_stack):
        """Test that rendering never hands out the caller's mapping."""
        properties = {"siteConfig": {"alwaysOn": True}}
        site = GenericResource(rg_stack, "Web", site_props(properties=properties))

        site.to_arm_template()["properties"]["siteConfig"]["alwaysOn"] = False

        assert properties["siteConfig"]["alwaysOn"] is True
        assert site.to_arm_template()["properties"]["siteConfig"]["alwaysOn"] is True

    @pytest.mark.parametrize(
        "overrides",
        [
            {"resource_type": "sites"},
            {"api_version": "latest"},
            {"top_level": {"name": "other"}},
        ],
    )
    def test_invalid_props(self, rg_stack, overrides):
        with pytest.raises(PropertyValidationError):
            GenericResource(rg_stack, "Web", site_props(**overrides))

    def test_naming_kind(self, rg_stack):
        """Test that the naming kind follows the type unless given."""
        generated = GenericResource(rg_stack, "Api", site_props(name=None))
        explicit = GenericResource(
            rg_stack, "Func", site_props(name=None, naming_kind="app")
        )

        assert generated.naming_kind == "default"
        assert generated.name == "res-dp-authr-api-nonprod-eus-01"
        assert explicit.name == "app-dp-authr-func-nonprod-eus-01"

    def test_literal_ids_pass_synthesis_after_normalization(self, rg_stack):
        GenericResource(
            rg_stack, "Web", site_props(properties={"plan": {"id": PLAN_ID}})
        )

        result = synthesize(rg_stack)

        assert result.validation.errors == ()


class TestResourceGroup:
    """Test cases for ResourceGroup."""

    def test_render(self, subscription_stack):
        group = ResourceGroup(subscription_stack, "DataRG")

        assert group.to_arm_template() == {
            "type": "Microsoft.Resources/resourceGroups",
            "apiVersion": "2025-04-01",
            "name": "rg-dp-authr-datarg-nonprod-eus-01",
            "location": "eastus",
            "properties": {},
        }
        assert group.resource_group_name == group.name
        assert group.deployment_scope is DeploymentScope.SUBSCRIPTION

    def test_resource_id(self, subscription_stack):
        group = ResourceGroup(subscription_stack, "DataRG")

        assert group.resource_id == (
            "/subscriptions/{subscriptionId}/resourceGroups/"
            "rg-dp-authr-datarg-nonprod-eus-01"
        )
