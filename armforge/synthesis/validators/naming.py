"""Validates rendered resource names against their type's naming rule."""

from typing import Any, Dict

from ...core.references import is_expression
from ...core.validation import ValidationResult, ValidationResultBuilder
from ...naming.conventions import kind_for_resource_type
from ...naming.validation import validate_resource_name
from .base import TemplateValidator, ValidationContext

SUBNET_KIND = "snet"


class NamingValidator(TemplateValidator):
    """Checks every rendered name, including embedded subnet names."""

    name = "naming"
    description = "Resource names satisfy the provider rules for their type"

    def validate(
        self, template: Dict[str, Any], context: ValidationContext
    ) -> ValidationResult:
        builder = ValidationResultBuilder(validator=self.name)

        for resource in self.iter_resources(template):
            name = resource.get("name")
            if not isinstance(name, str) or is_expression(name):
                continue
            path = context.path_for(resource)
            kind = kind_for_resource_type(str(resource.get("type", "")))
            # Child resources are named "<parent>/<child>"; the rule applies to
            # the last segment.
            leaf = name.rsplit("/", 1)[-1]
            builder.extend(
                validate_resource_name(leaf, kind, context.conventions, path).issues
            )

            for subnet in self.embedded_subnets(resource):
                subnet_name = subnet.get("name")
                if isinstance(subnet_name, str) and not is_expression(subnet_name):
                    builder.extend(
                        validate_resource_name(
                            subnet_name, SUBNET_KIND, context.conventions, path
                        ).issues
                    )

        return builder.build()
