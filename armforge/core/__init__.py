"""Construct tree model: nodes, constructs, resources, stacks and the App."""

from .app import App
from .construct import Construct
from .naming_components import (
    Environment,
    Geography,
    Instance,
    NamingComponent,
    Organization,
    Project,
)
from .node import (
    PATH_SEPARATOR,
    STACK_METADATA_TYPE,
    ConstructRole,
    MetadataEntry,
    Node,
)
from .references import build_resource_id, resource_id_expression
from .resource import Resource, ResourceProps
from .scopes import DeploymentScope, get_schema_for_scope
from .stack import ResourceGroupStack, Stack, SubscriptionStack
from .validation import (
    ERROR_CATALOG,
    ValidationIssue,
    ValidationResult,
    ValidationResultBuilder,
    ValidationSeverity,
)

__all__ = [
    "App",
    "Construct",
    "ConstructRole",
    "DeploymentScope",
    "ERROR_CATALOG",
    "Environment",
    "Geography",
    "Instance",
    "MetadataEntry",
    "NamingComponent",
    "Node",
    "Organization",
    "PATH_SEPARATOR",
    "Project",
    "Resource",
    "ResourceGroupStack",
    "ResourceProps",
    "STACK_METADATA_TYPE",
    "Stack",
    "SubscriptionStack",
    "ValidationIssue",
    "ValidationResult",
    "ValidationResultBuilder",
    "ValidationSeverity",
    "build_resource_id",
    "get_schema_for_scope",
    "resource_id_expression",
]
