"""
Tests for StorageAccount.
"""

import pytest

from armforge.exceptions import InvalidResourceNameError, PropertyValidationError
from armforge.naming.validation import validate_resource_name
from armforge.resources.storage import (
    AccessTier,
    StorageAccount,
    StorageAccountProps,
    StorageKind,
    StorageSku,
)


class TestStorageAccount:
    """Test cases for StorageAccount."""

    def test_defaults(self, rg_stack):
        """Test the secure defaults rendered for a new account."""
        template = StorageAccount(rg_stack, "Data").to_arm_template()

        assert template["sku"] == {"name": "Standard_LRS"}
        assert template["kind"] == "StorageV2"
        assert template["properties"] == {
            "supportsHttpsTrafficOnly": True,
            "minimumTlsVersion": "TLS1_2",
            "allowBlobPublicAccess": False,
        }

    def test_generated_name_is_valid(self, rg_stack):
        account = StorageAccount(rg_stack, "Data")

        assert len(account.name) <= 24
        assert validate_resource_name(account.name, "st").valid

    def test_access_tier_and_sku(self, rg_stack):
        account = StorageAccount(
            rg_stack,
            "Archive",
            StorageAccountProps(
                sku=StorageSku.STANDARD_GRS,
                access_tier=AccessTier.COOL,
                public_network_access="Enabled",
            ),
        )

        template = account.to_arm_template()

        assert template["sku"] == {"name": "Standard_GRS"}
        assert template["properties"]["accessTier"] == "Cool"
        assert template["properties"]["publicNetworkAccess"] == "Enabled"

    def test_unknown_sku(self, rg_stack):
        with pytest.raises(PropertyValidationError) as exc_info:
            StorageAccount(rg_stack, "Data", StorageAccountProps(sku="Ultra_LRS"))

        assert "sku must be one of" in exc_info.value.violations[0].message

    def test_access_tier_requires_tiered_kind(self, rg_stack):
        props = StorageAccountProps(
            kind=StorageKind.STORAGE, access_tier=AccessTier.HOT
        )

        with pytest.raises(PropertyValidationError):
            StorageAccount(rg_stack, "Data", props)

    def test_premium_kind_requires_premium_sku(self, rg_stack):
        with pytest.raises(PropertyValidationError):
            StorageAccount(
                rg_stack, "Files", StorageAccountProps(kind=StorageKind.FILE_STORAGE)
            )

        account = StorageAccount(
            rg_stack,
            "Blobs",
            StorageAccountProps(
                kind=StorageKind.BLOCK_BLOB_STORAGE, sku=StorageSku.PREMIUM_LRS
            ),
        )
        assert account.to_arm_template()["kind"] == "BlockBlobStorage"

    def test_explicit_name_checked(self, rg_stack):
        with pytest.raises(InvalidResourceNameError):
            StorageAccount(rg_stack, "Data", StorageAccountProps(name="st-data"))
