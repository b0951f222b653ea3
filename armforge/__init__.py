"""
armforge: synthesize Azure Resource Manager templates from a construct tree.

Describe a deployment as a tree of stacks and resources, then call
``App.synth()`` to get one validated, dependency-ordered ARM template per
stack.
"""

__version__ = "0.1.0"

from .exceptions import (
    ArmForgeError,
    ConfigError,
    DependencyCycleError,
    DuplicateConstructIdError,
    InvalidConstructIdError,
    InvalidResourceNameError,
    MissingStackError,
    PropertyValidationError,
    ResourceScopeError,
    TemplateValidationError,
    TreeCycleError,
)
from .core import (
    App,
    Construct,
    DeploymentScope,
    Resource,
    ResourceGroupStack,
    ResourceProps,
    Stack,
    SubscriptionStack,
    ValidationResult,
)
from .naming import NamingConventions, validate_resource_name
from .synthesis import (
    CloudAssembly,
    StackSynthesisResult,
    Synthesizer,
    TreeTraverser,
    synthesize,
    traverse,
)
from .resources import (
    GenericResource,
    GenericResourceProps,
    KeyVault,
    KeyVaultProps,
    NetworkSecurityGroup,
    NetworkSecurityGroupProps,
    ResourceGroup,
    SecurityRule,
    StorageAccount,
    StorageAccountProps,
    Subnet,
    SubnetDelegation,
    SubnetProps,
    VirtualNetwork,
    VirtualNetworkProps,
)
from .config import ArmForgeConfig, load_config
from .logging_config import configure_logging

__all__ = [
    "App",
    "ArmForgeConfig",
    "ArmForgeError",
    "CloudAssembly",
    "ConfigError",
    "Construct",
    "DependencyCycleError",
    "DeploymentScope",
    "DuplicateConstructIdError",
    "GenericResource",
    "GenericResourceProps",
    "InvalidConstructIdError",
    "InvalidResourceNameError",
    "KeyVault",
    "KeyVaultProps",
    "MissingStackError",
    "NamingConventions",
    "NetworkSecurityGroup",
    "NetworkSecurityGroupProps",
    "PropertyValidationError",
    "Resource",
    "ResourceGroup",
    "ResourceGroupStack",
    "ResourceProps",
    "ResourceScopeError",
    "SecurityRule",
    "Stack",
    "StackSynthesisResult",
    "StorageAccount",
    "StorageAccountProps",
    "Subnet",
    "SubnetDelegation",
    "SubnetProps",
    "SubscriptionStack",
    "Synthesizer",
    "TemplateValidationError",
    "TreeCycleError",
    "TreeTraverser",
    "ValidationResult",
    "VirtualNetwork",
    "VirtualNetworkProps",
    "configure_logging",
    "load_config",
    "synthesize",
    "traverse",
    "validate_resource_name",
]
