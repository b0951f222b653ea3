"""Template validators for synthesized ARM templates.

Validators register themselves by name. The default pipeline runs every
registered validator in registration order:

- arm_structure: template keys, subnet and delegation shape, reference objects
- arm_expression: dependsOn expressions, literal IDs, placeholders
- dependency: dependsOn targets exist and precede their dependents
- naming: rendered names satisfy the provider rules
- subnet_address: subnet ranges inside the VNet, no overlaps
- limits: ARM resource, parameter, variable, output and size limits
"""

from typing import Dict, Type

from .base import TemplateValidator, ValidationContext, resource_key

# Global validator registry
_VALIDATOR_REGISTRY: Dict[str, Type[TemplateValidator]] = {}


def register_validator(name: str, validator_class: Type[TemplateValidator]) -> None:
    """Register a validator class under ``name``.

    Args:
        name: Validator name (e.g. 'naming', 'limits')
        validator_class: Class implementing the TemplateValidator interface
    """
    _VALIDATOR_REGISTRY[name.lower()] = validator_class


def get_validator_registry() -> Dict[str, Type[TemplateValidator]]:
    """Get a copy of the current validator registry."""
    return _VALIDATOR_REGISTRY.copy()


def get_validator(name: str) -> Type[TemplateValidator]:
    """Get the validator class registered under ``name``.

    Raises:
        KeyError: If no validator is registered under that name
    """
    key = name.lower()
    if key not in _VALIDATOR_REGISTRY:
        available = list(_VALIDATOR_REGISTRY.keys())
        raise KeyError(
            f"No validator registered as '{name}'. Available validators: {available}"
        )
    return _VALIDATOR_REGISTRY[key]


from .arm_expression import ArmExpressionValidator  # noqa: E402
from .arm_structure import ArmStructureValidator  # noqa: E402
from .dependency import DependencyValidator  # noqa: E402
from .limits import LimitValidator  # noqa: E402
from .naming import NamingValidator  # noqa: E402
from .subnet_address import SubnetAddressValidator  # noqa: E402

for _validator_class in (
    ArmStructureValidator,
    ArmExpressionValidator,
    DependencyValidator,
    NamingValidator,
    SubnetAddressValidator,
    LimitValidator,
):
    register_validator(_validator_class.name, _validator_class)

__all__ = [
    "ArmExpressionValidator",
    "ArmStructureValidator",
    "DependencyValidator",
    "LimitValidator",
    "NamingValidator",
    "SubnetAddressValidator",
    "TemplateValidator",
    "ValidationContext",
    "get_validator",
    "get_validator_registry",
    "register_validator",
    "resource_key",
]
