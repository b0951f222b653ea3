"""Azure storage accounts."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from ..core.construct import Construct
from ..core.resource import (
    Resource,
    ResourceProps,
    choice_error,
    enum_value,
    property_error,
)
from ..core.validation import ValidationIssue


class StorageSku(str, Enum):
    STANDARD_LRS = "Standard_LRS"
    STANDARD_GRS = "Standard_GRS"
    STANDARD_RAGRS = "Standard_RAGRS"
    STANDARD_ZRS = "Standard_ZRS"
    STANDARD_GZRS = "Standard_GZRS"
    STANDARD_RAGZRS = "Standard_RAGZRS"
    PREMIUM_LRS = "Premium_LRS"
    PREMIUM_ZRS = "Premium_ZRS"


class StorageKind(str, Enum):
    STORAGE_V2 = "StorageV2"
    STORAGE = "Storage"
    BLOB_STORAGE = "BlobStorage"
    BLOCK_BLOB_STORAGE = "BlockBlobStorage"
    FILE_STORAGE = "FileStorage"


class AccessTier(str, Enum):
    HOT = "Hot"
    COOL = "Cool"
    COLD = "Cold"


class TlsVersion(str, Enum):
    TLS1_0 = "TLS1_0"
    TLS1_1 = "TLS1_1"
    TLS1_2 = "TLS1_2"


class PublicNetworkAccess(str, Enum):
    ENABLED = "Enabled"
    DISABLED = "Disabled"


# Kinds that accept an access tier
_TIERED_KINDS = {StorageKind.STORAGE_V2.value, StorageKind.BLOB_STORAGE.value}
_PREMIUM_ONLY_KINDS = {
    StorageKind.BLOCK_BLOB_STORAGE.value,
    StorageKind.FILE_STORAGE.value,
}


@dataclass(frozen=True, kw_only=True)
class StorageAccountProps(ResourceProps):
    """Properties of a storage account.

    Attributes:
        sku: Replication SKU
        kind: Account kind
        access_tier: Default blob access tier (StorageV2 and BlobStorage only)
        https_only: Reject plain HTTP traffic
        minimum_tls_version: Lowest TLS version accepted
        allow_blob_public_access: Allow anonymous blob access
        public_network_access: Leave unset (or Enabled) at deployment time
    """

    sku: Union[StorageSku, str] = StorageSku.STANDARD_LRS
    kind: Union[StorageKind, str] = StorageKind.STORAGE_V2
    access_tier: Optional[Union[AccessTier, str]] = None
    https_only: bool = True
    minimum_tls_version: Union[TlsVersion, str] = TlsVersion.TLS1_2
    allow_blob_public_access: bool = False
    public_network_access: Optional[Union[PublicNetworkAccess, str]] = None

    def validate(self) -> List[ValidationIssue]:
        issues = super().validate()
        choices = [
            ("sku", self.sku, StorageSku),
            ("kind", self.kind, StorageKind),
            ("minimum_tls_version", self.minimum_tls_version, TlsVersion),
        ]
        if self.access_tier is not None:
            choices.append(("access_tier", self.access_tier, AccessTier))
        if self.public_network_access is not None:
            choices.append(
                ("public_network_access", self.public_network_access, PublicNetworkAccess)
            )
        for field_name, value, enum_class in choices:
            issue = choice_error(field_name, value, enum_class)
            if issue:
                issues.append(issue)

        kind = enum_value(self.kind)
        if self.access_tier is not None and kind not in _TIERED_KINDS:
            issues.append(
                property_error(f"access_tier is not supported for kind '{kind}'")
            )
        if kind in _PREMIUM_ONLY_KINDS and not str(enum_value(self.sku)).startswith(
            "Premium"
        ):
            issues.append(property_error(f"Kind '{kind}' requires a Premium SKU"))
        return issues


class StorageAccount(Resource):
    """A storage account; its name is globally unique and hash-suffixed."""

    RESOURCE_TYPE = "Microsoft.Storage/storageAccounts"
    API_VERSION = "2025-01-01"
    NAMING_KIND = "st"

    def __init__(
        self,
        scope: Construct,
        id: str,
        props: Optional[StorageAccountProps] = None,
    ) -> None:
        super().__init__(scope, id, props or StorageAccountProps())

    @property
    def props(self) -> StorageAccountProps:
        return self._props  # type: ignore[return-value]

    def _render_top_level(self) -> Dict[str, Any]:
        return {
            "sku": {"name": enum_value(self.props.sku)},
            "kind": enum_value(self.props.kind),
        }

    def _render_properties(self) -> Dict[str, Any]:
        props = self.props
        properties: Dict[str, Any] = {
            "supportsHttpsTrafficOnly": props.https_only,
            "minimumTlsVersion": enum_value(props.minimum_tls_version),
            "allowBlobPublicAccess": props.allow_blob_public_access,
        }
        if props.access_tier is not None:
            properties["accessTier"] = enum_value(props.access_tier)
        if props.public_network_access is not None:
            properties["publicNetworkAccess"] = enum_value(props.public_network_access)
        return properties
