"""ARM expression validation.

``dependsOn`` entries must be ``resourceId()`` expressions, literal
``/subscriptions/...`` IDs must not appear in the template and placeholder
strings such as ``{subscriptionId}`` must never reach the output.
"""

from typing import Any, Dict, Iterator, Tuple

from ...core.references import (
    PLACEHOLDER_PATTERN,
    is_expression,
    is_literal_resource_id,
)
from ...core.validation import (
    ValidationResult,
    ValidationResultBuilder,
    catalog_suggestion,
)
from .base import TemplateValidator, ValidationContext, describe

# Keys whose values are checked elsewhere or are never resource references.
_SKIPPED_KEYS = {"type", "apiVersion", "dependsOn"}


def _walk(value: Any, trail: str) -> Iterator[Tuple[str, str, str]]:
    """Yield ``(trail, key, string)`` for every string below ``value``."""
    if isinstance(value, dict):
        for key, item in value.items():
            if isinstance(item, str):
                yield f"{trail}.{key}", key, item
            else:
                yield from _walk(item, f"{trail}.{key}")
    elif isinstance(value, list):
        for index, item in enumerate(value):
            if isinstance(item, str):
                yield f"{trail}[{index}]", "", item
            else:
                yield from _walk(item, f"{trail}[{index}]")


def _balanced(expression: str) -> bool:
    depth = 0
    in_string = False
    for char in expression[1:-1]:
        if char == "'":
            in_string = not in_string
        elif not in_string:
            if char == "(":
                depth += 1
            elif char == ")":
                depth -= 1
                if depth < 0:
                    return False
    return depth == 0 and not in_string


class ArmExpressionValidator(TemplateValidator):
    """Checks ARM expression syntax and flags literal IDs and placeholders."""

    name = "arm_expression"
    description = "dependsOn expressions, literal IDs, unresolved placeholders"

    def validate(
        self, template: Dict[str, Any], context: ValidationContext
    ) -> ValidationResult:
        builder = ValidationResultBuilder(validator=self.name)

        for resource in self.iter_resources(template):
            path = context.path_for(resource)
            label = describe(resource)

            depends_on = resource.get("dependsOn", [])
            if not isinstance(depends_on, list):
                builder.add_error(
                    f"{label} 'dependsOn' must be a list",
                    path=path,
                    code="DEPENDS_ON_NOT_LIST",
                )
                depends_on = []
            for entry in depends_on:
                if is_literal_resource_id(entry):
                    builder.add_error(
                        f"{label} dependsOn entry '{entry}' is a literal resource ID",
                        path=path,
                        code="ARM003",
                        suggestion=catalog_suggestion("ARM003"),
                    )
                elif not is_expression(entry):
                    builder.add_error(
                        f"{label} dependsOn entry '{entry}' is not an ARM expression",
                        path=path,
                        code="DEPENDS_ON_NOT_EXPRESSION",
                        suggestion="Use [resourceId('<type>', '<name>')]",
                    )

            checked = {k: v for k, v in resource.items() if k not in _SKIPPED_KEYS}
            for trail, key, text in _walk(checked, "resource"):
                if is_expression(text):
                    if not _balanced(text):
                        builder.add_error(
                            f"{label} has a malformed expression at '{trail}': {text}",
                            path=path,
                            code="MALFORMED_EXPRESSION",
                        )
                    continue
                if is_literal_resource_id(text):
                    # Reference objects ({"id": ...}) are reported by the
                    # structure validator.
                    if key != "id":
                        builder.add_error(
                            f"{label} contains a literal resource ID at '{trail}'",
                            path=path,
                            code="ARM003",
                            suggestion=catalog_suggestion("ARM003"),
                        )
                    continue
                if PLACEHOLDER_PATTERN.search(text):
                    builder.add_error(
                        f"{label} has an unresolved placeholder at '{trail}': {text}",
                        path=path,
                        code="UNRESOLVED_PLACEHOLDER",
                        suggestion="Replace the placeholder with a parameter or "
                        "an ARM expression",
                    )

        return builder.build()
