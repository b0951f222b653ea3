"""ARM template size and count limits."""

import json
from typing import Any, Dict

from ...core.validation import ValidationResult, ValidationResultBuilder
from .base import TemplateValidator, ValidationContext

MAX_RESOURCES = 800
MAX_PARAMETERS = 256
MAX_VARIABLES = 256
MAX_OUTPUTS = 64
MAX_TEMPLATE_BYTES = 4 * 1024 * 1024
WARNING_THRESHOLD = 0.8


class LimitValidator(TemplateValidator):
    """Errors when an ARM limit is exceeded, warns at 80% of it."""

    name = "limits"
    description = "Resource, parameter, variable, output and size limits"

    SECTION_LIMITS = (
        ("resources", "Resource count", MAX_RESOURCES),
        ("parameters", "Parameter count", MAX_PARAMETERS),
        ("variables", "Variable count", MAX_VARIABLES),
        ("outputs", "Output count", MAX_OUTPUTS),
    )

    def validate(
        self, template: Dict[str, Any], context: ValidationContext
    ) -> ValidationResult:
        builder = ValidationResultBuilder(validator=self.name)

        for section, label, limit in self.SECTION_LIMITS:
            value = template.get(section)
            count = len(value) if isinstance(value, (list, dict)) else 0
            self._check(builder, context, label, count, limit, "TEMPLATE_LIMIT")

        size = len(json.dumps(template).encode("utf-8"))
        self._check(
            builder,
            context,
            "Template size in bytes",
            size,
            MAX_TEMPLATE_BYTES,
            "TEMPLATE_SIZE",
        )
        return builder.build()

    @staticmethod
    def _check(
        builder: ValidationResultBuilder,
        context: ValidationContext,
        label: str,
        value: int,
        limit: int,
        code: str,
    ) -> None:
        if value > limit:
            builder.add_error(
                f"{label} ({value}) exceeds the ARM limit of {limit}",
                path=context.stack_path,
                code=code,
                suggestion="Split the stack into several stacks",
            )
        elif value >= limit * WARNING_THRESHOLD:
            builder.add_warning(
                f"{label} ({value}) is approaching the ARM limit of {limit}",
                path=context.stack_path,
                code=code,
            )
