"""Azure key vaults."""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from ..core.construct import Construct
from ..core.references import is_expression
from ..core.resource import (
    Resource,
    ResourceProps,
    choice_error,
    enum_value,
    property_error,
)
from ..core.validation import ValidationIssue
from .storage import PublicNetworkAccess

DEFAULT_TENANT_ID = "[subscription().tenantId]"
MIN_RETENTION_DAYS = 7
MAX_RETENTION_DAYS = 90

_TENANT_ID_PATTERN = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)


class KeyVaultSku(str, Enum):
    STANDARD = "standard"
    PREMIUM = "premium"


@dataclass(frozen=True, kw_only=True)
class KeyVaultProps(ResourceProps):
    """Properties of a key vault.

    Attributes:
        tenant_id: Entra tenant GUID or an ARM expression; defaults to the
            deploying subscription's tenant
        sku: Vault SKU
        enable_rbac_authorization: Use Azure RBAC instead of access policies
        soft_delete_retention_days: Soft delete retention, 7-90 days
        enable_purge_protection: Enable purge protection (cannot be disabled)
        public_network_access: Leave unset (or Enabled) at deployment time
    """

    tenant_id: str = DEFAULT_TENANT_ID
    sku: Union[KeyVaultSku, str] = KeyVaultSku.STANDARD
    enable_rbac_authorization: bool = True
    soft_delete_retention_days: Optional[int] = None
    enable_purge_protection: Optional[bool] = None
    public_network_access: Optional[Union[PublicNetworkAccess, str]] = None

    def validate(self) -> List[ValidationIssue]:
        issues = super().validate()
        if not is_expression(self.tenant_id) and not _TENANT_ID_PATTERN.match(
            self.tenant_id or ""
        ):
            issues.append(
                property_error(
                    f"tenant_id '{self.tenant_id}' must be a GUID or an ARM expression"
                )
            )
        issue = choice_error("sku", self.sku, KeyVaultSku)
        if issue:
            issues.append(issue)
        retention = self.soft_delete_retention_days
        if retention is not None and not (
            MIN_RETENTION_DAYS <= retention <= MAX_RETENTION_DAYS
        ):
            issues.append(
                property_error(
                    f"soft_delete_retention_days must be between "
                    f"{MIN_RETENTION_DAYS} and {MAX_RETENTION_DAYS} (got {retention})"
                )
            )
        if self.enable_purge_protection is False:
            issues.append(
                property_error(
                    "enable_purge_protection cannot be set to False; leave it unset"
                )
            )
        if self.public_network_access is not None:
            issue = choice_error(
                "public_network_access", self.public_network_access, PublicNetworkAccess
            )
            if issue:
                issues.append(issue)
        return issues


class KeyVault(Resource):
    """A key vault; its name is globally unique and hash-suffixed."""

    RESOURCE_TYPE = "Microsoft.KeyVault/vaults"
    API_VERSION = "2024-11-01"
    NAMING_KIND = "kv"

    def __init__(
        self,
        scope: Construct,
        id: str,
        props: Optional[KeyVaultProps] = None,
    ) -> None:
        super().__init__(scope, id, props or KeyVaultProps())

    @property
    def props(self) -> KeyVaultProps:
        return self._props  # type: ignore[return-value]

    def _render_properties(self) -> Dict[str, Any]:
        props = self.props
        properties: Dict[str, Any] = {
            "tenantId": props.tenant_id,
            "sku": {"family": "A", "name": enum_value(props.sku)},
            "enableRbacAuthorization": props.enable_rbac_authorization,
        }
        if not props.enable_rbac_authorization:
            properties["accessPolicies"] = []
        if props.soft_delete_retention_days is not None:
            properties["softDeleteRetentionInDays"] = props.soft_delete_retention_days
        if props.enable_purge_protection:
            properties["enablePurgeProtection"] = True
        if props.public_network_access is not None:
            properties["publicNetworkAccess"] = enum_value(props.public_network_access)
        return properties
