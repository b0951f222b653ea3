"""
Tests for KeyVault.
"""

import pytest

from armforge.exceptions import PropertyValidationError, TemplateValidationError
from armforge.resources.key_vault import KeyVault, KeyVaultProps, KeyVaultSku
from armforge.synthesis.synthesizer import synthesize

TENANT_ID = "11111111-2222-3333-4444-555555555555"


class TestKeyVault:
    """Test cases for KeyVault."""

    def test_defaults(self, rg_stack):
        vault = KeyVault(rg_stack, "Secrets")

        assert vault.to_arm_template()["properties"] == {
            "tenantId": "[subscription().tenantId]",
            "sku": {"family": "A", "name": "standard"},
            "enableRbacAuthorization": True,
        }
        assert vault.name.startswith("kv-")
        assert len(vault.name) <= 24

    def test_access_policies_without_rbac(self, rg_stack):
        vault = KeyVault(
            rg_stack,
            "Secrets",
            KeyVaultProps(
                tenant_id=TENANT_ID,
                sku=KeyVaultSku.PREMIUM,
                enable_rbac_authorization=False,
                soft_delete_retention_days=30,
                enable_purge_protection=True,
            ),
        )

        properties = vault.to_arm_template()["properties"]

        assert properties["tenantId"] == TENANT_ID
        assert properties["sku"]["name"] == "premium"
        assert properties["accessPolicies"] == []
        assert properties["softDeleteRetentionInDays"] == 30
        assert properties["enablePurgeProtection"] is True

    @pytest.mark.parametrize(
        "props",
        [
            KeyVaultProps(tenant_id="not-a-guid"),
            KeyVaultProps(soft_delete_retention_days=3),
            KeyVaultProps(soft_delete_retention_days=91),
            KeyVaultProps(enable_purge_protection=False),
            KeyVaultProps(sku="gold"),
            KeyVaultProps(public_network_access="Sometimes"),
        ],
    )
    def test_invalid_props(self, rg_stack, props):
        with pytest.raises(PropertyValidationError):
            KeyVault(rg_stack, "Secrets", props)

    def test_disabled_public_access_fails_synthesis(self, rg_stack):
        """Test that ARM004 is reported for a locked-down vault."""
        KeyVault(rg_stack, "Secrets", KeyVaultProps(public_network_access="Disabled"))

        with pytest.raises(TemplateValidationError) as exc_info:
            synthesize(rg_stack)

        assert [i.code for i in exc_info.value.result.errors] == ["ARM004"]
