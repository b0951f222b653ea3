"""Naming conventions, generation and validation for Azure resources."""

from .context import NamingContext
from .conventions import (
    BUILTIN_RULES,
    RESOURCE_TYPE_KINDS,
    NamingConventions,
    NamingRule,
    kind_for_resource_type,
)
from .generator import ResourceNameGenerator, derive_purpose
from .resolver import NamingResolver
from .validation import validate_resource_name

__all__ = [
    "BUILTIN_RULES",
    "NamingContext",
    "NamingConventions",
    "NamingResolver",
    "NamingRule",
    "RESOURCE_TYPE_KINDS",
    "ResourceNameGenerator",
    "derive_purpose",
    "kind_for_resource_type",
    "validate_resource_name",
]
