"""
Tests for SubscriptionStack and ResourceGroupStack.
"""

import pytest

from armforge.config.models import ArmForgeConfig, NamingSettings
from armforge.core.app import App
from armforge.core.construct import Construct
from armforge.core.scopes import DeploymentScope
from armforge.core.stack import ResourceGroupStack, SubscriptionStack
from armforge.exceptions import InvalidResourceNameError, MissingStackError


def make_subscription_stack(scope, id="Foundation", **kwargs):
    params = dict(
        organization="dp",
        project="authr",
        environment="nonprod",
        geography="eastus",
    )
    params.update(kwargs)
    return SubscriptionStack(scope, id, **params)


class TestSubscriptionStack:
    """Test cases for SubscriptionStack."""

    def test_naming_context(self, subscription_stack):
        """Test that the stack owns a normalized naming context."""
        context = subscription_stack.naming_context

        assert context.organization.resource_name == "dp"
        assert context.project.resource_name == "authr"
        assert context.environment.resource_name == "nonprod"
        assert context.geography.abbreviation == "eus"
        assert context.instance.resource_name == "01"

    def test_scope_and_location(self, subscription_stack):
        """Test deployment scope and location."""
        assert subscription_stack.deployment_scope is DeploymentScope.SUBSCRIPTION
        assert subscription_stack.location == "eastus"

    def test_stack_name_joins_path(self, app):
        """Test that the artifact name joins path segments with '-'."""
        group = Construct(app, "Platform")
        stack = make_subscription_stack(group)

        assert stack.stack_name == "Platform-Foundation"

    def test_default_tags_from_app(self):
        """Test that App default tags are merged under stack tags."""
        app = App(
            config=ArmForgeConfig(default_tags={"owner": "platform", "env": "x"})
        )
        stack = make_subscription_stack(app, tags={"env": "nonprod"})

        assert stack.tags == {"owner": "platform", "env": "nonprod"}

    def test_subscription_id_from_app(self):
        """Test that the App subscription id is the fallback."""
        app = App(config=ArmForgeConfig(subscription_id="sub-123"))

        assert make_subscription_stack(app).subscription_id == "sub-123"

    def test_conventions_from_app(self):
        """Test that stacks pick up the App naming conventions."""
        app = App(config=ArmForgeConfig(naming=NamingSettings(hash_length=8)))

        assert make_subscription_stack(app).naming_conventions.hash_length == 8

    def test_generate_resource_name(self, subscription_stack):
        """Test the public name generation helper."""
        assert (
            subscription_stack.generate_resource_name("rg", "DataRG")
            == "rg-dp-authr-datarg-nonprod-eus-01"
        )

    def test_stack_without_app(self):
        """Test that a stack may be the root of its own tree."""
        stack = make_subscription_stack(None, "Standalone")

        assert stack.path == "Standalone"
        assert stack.naming_conventions.separator == "-"


class TestResourceGroupStack:
    """Test cases for ResourceGroupStack."""

    def test_inherits_context_and_tags(self, app):
        """Test that the parent context, conventions and tags are inherited."""
        parent = make_subscription_stack(app, tags={"owner": "platform"})
        child = ResourceGroupStack(parent, "Data", tags={"tier": "data"})

        assert child.naming_context is parent.naming_context
        assert child.naming_conventions is parent.naming_conventions
        assert child.tags == {"owner": "platform", "tier": "data"}
        assert child.parent_stack is parent

    def test_generated_resource_group_name(self, subscription_stack):
        """Test that the resource group name is generated from the id."""
        child = ResourceGroupStack(subscription_stack, "DataRG")

        assert child.resource_group_name == "rg-dp-authr-datarg-nonprod-eus-01"
        assert child.deployment_scope is DeploymentScope.RESOURCE_GROUP

    def test_explicit_resource_group_name(self, rg_stack):
        """Test that an explicit name is kept."""
        assert rg_stack.resource_group_name == "rg-network"

    def test_invalid_resource_group_name(self, subscription_stack):
        """Test that explicit names are validated."""
        with pytest.raises(InvalidResourceNameError) as exc_info:
            ResourceGroupStack(
                subscription_stack, "Bad", resource_group_name="ends-with-dot."
            )

        assert exc_info.value.path == "Foundation/Bad"

    def test_location_override(self, subscription_stack):
        """Test that the location defaults to the parent geography."""
        default = ResourceGroupStack(subscription_stack, "A")
        moved = ResourceGroupStack(subscription_stack, "B", location="westeurope")

        assert default.location == "eastus"
        assert moved.location == "westeurope"

    def test_requires_subscription_stack(self, app):
        """Test that a resource group stack needs a subscription stack parent."""
        with pytest.raises(MissingStackError) as exc_info:
            ResourceGroupStack(app, "Data")

        assert exc_info.value.path == "Data"

    def test_subscription_id_inherited(self, rg_stack, subscription_stack):
        """Test that the subscription id comes from the parent."""
        assert rg_stack.subscription_id == subscription_stack.subscription_id
