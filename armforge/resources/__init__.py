"""Resource types shipped with armforge."""

from .generic import GenericResource, GenericResourceProps
from .key_vault import KeyVault, KeyVaultProps, KeyVaultSku
from .network import (
    NetworkSecurityGroup,
    NetworkSecurityGroupProps,
    SecurityRule,
    SecurityRuleAccess,
    SecurityRuleDirection,
    SecurityRuleProtocol,
    Subnet,
    SubnetDelegation,
    SubnetProps,
    VirtualNetwork,
    VirtualNetworkProps,
)
from .resource_group import ResourceGroup
from .storage import (
    AccessTier,
    PublicNetworkAccess,
    StorageAccount,
    StorageAccountProps,
    StorageKind,
    StorageSku,
    TlsVersion,
)

__all__ = [
    "AccessTier",
    "GenericResource",
    "GenericResourceProps",
    "KeyVault",
    "KeyVaultProps",
    "KeyVaultSku",
    "NetworkSecurityGroup",
    "NetworkSecurityGroupProps",
    "PublicNetworkAccess",
    "ResourceGroup",
    "SecurityRule",
    "SecurityRuleAccess",
    "SecurityRuleDirection",
    "SecurityRuleProtocol",
    "StorageAccount",
    "StorageAccountProps",
    "StorageKind",
    "StorageSku",
    "Subnet",
    "SubnetDelegation",
    "SubnetProps",
    "TlsVersion",
    "VirtualNetwork",
    "VirtualNetworkProps",
]
