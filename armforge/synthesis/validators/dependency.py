"""Dependency validation for synthesized templates.

Every resource is declared once, and every ``dependsOn`` target should be
declared in the same template, ahead of the resource that depends on it.
Targets outside the template are reported as warnings because they may be
existing resources. Subnets embedded in a VNet count as declared by the VNet.
"""

from typing import Any, Dict, Optional, Tuple

from ...core.references import (
    is_literal_resource_id,
    parse_expression,
    parse_resource_id,
)
from ...core.validation import ValidationResult, ValidationResultBuilder
from .base import TemplateValidator, ValidationContext, describe, resource_key

VNET_TYPE = "microsoft.network/virtualnetworks"
SUBNET_TYPE = "microsoft.network/virtualnetworks/subnets"


def _target_of(entry: Any) -> Optional[Tuple[str, str]]:
    if not isinstance(entry, str):
        return None
    if is_literal_resource_id(entry):
        parsed = parse_resource_id(entry)
    else:
        parsed = parse_expression(entry)
    if parsed is None:
        return None
    return parsed[0].lower(), parsed[1].lower()


class DependencyValidator(TemplateValidator):
    """Checks for duplicate resources and that ``dependsOn`` targets exist and
    precede their dependents."""

    name = "dependency"
    description = "dependsOn targets exist in the template and are declared first"

    def validate(
        self, template: Dict[str, Any], context: ValidationContext
    ) -> ValidationResult:
        builder = ValidationResultBuilder(validator=self.name)

        positions: Dict[Tuple[str, str], int] = {}
        for index, resource in enumerate(self.iter_resources(template)):
            keys = [resource_key(resource)]
            if keys[0][0] == VNET_TYPE:
                for subnet in self.embedded_subnets(resource):
                    subnet_name = str(subnet.get("name", ""))
                    keys.append((SUBNET_TYPE, f"{keys[0][1]}/{subnet_name.lower()}"))
            for key in keys:
                if key in positions:
                    builder.add_error(
                        f"{key[0]} '{key[1]}' is declared more than once",
                        path=context.path_for(resource),
                        code="DUPLICATE_RESOURCE",
                        suggestion="Give each resource of a type a unique name",
                    )
                else:
                    positions[key] = index

        for index, resource in enumerate(self.iter_resources(template)):
            path = context.path_for(resource)
            label = describe(resource)
            depends_on = resource.get("dependsOn", [])
            if not isinstance(depends_on, list):
                continue
            for entry in depends_on:
                target = _target_of(entry)
                if target is None:
                    builder.add_warning(
                        f"{label} dependsOn entry '{entry}' cannot be resolved to a "
                        f"resource",
                        path=path,
                        code="DEPENDENCY_UNRESOLVED",
                    )
                    continue
                target_index = positions.get(target)
                if target_index is None:
                    builder.add_warning(
                        f"{label} depends on '{entry}', which is not declared in "
                        f"this template (it may be an existing resource)",
                        path=path,
                        code="DEPENDENCY_NOT_IN_TEMPLATE",
                    )
                elif target_index == index:
                    builder.add_error(
                        f"{label} depends on itself",
                        path=path,
                        code="DEPENDENCY_SELF_REFERENCE",
                    )
                elif target_index > index:
                    builder.add_error(
                        f"{label} depends on '{entry}', which is declared after it",
                        path=path,
                        code="DEPENDENCY_ORDER",
                        suggestion="Declare dependencies before their dependents",
                    )

        return builder.build()
