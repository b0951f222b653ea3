"""Runs template validators and combines their results."""

import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional, Sequence

from ..config.models import ValidationSettings
from ..core.validation import ValidationResult, ValidationSeverity
from .validators import TemplateValidator, ValidationContext, get_validator_registry

logger = logging.getLogger(__name__)


class ValidationPipeline:
    """Runs every validator over a template and collects all issues.

    Validators never short-circuit each other: an error from one validator
    does not stop the rest from running.

    Args:
        validators: Validator instances to run, defaults to every registered one
        strict: Promote warnings to errors
    """

    def __init__(
        self,
        validators: Optional[Sequence[TemplateValidator]] = None,
        strict: bool = False,
    ) -> None:
        if validators is None:
            validators = [cls() for cls in get_validator_registry().values()]
        self.validators: List[TemplateValidator] = list(validators)
        self.strict = strict

    @classmethod
    def from_settings(cls, settings: ValidationSettings) -> "ValidationPipeline":
        """Build the pipeline described by ``settings``.

        Unknown names in ``disabled_validators`` are logged and ignored.
        """
        registry = get_validator_registry()
        disabled = {name.lower() for name in settings.disabled_validators}
        for name in sorted(disabled - set(registry)):
            logger.warning(f"Unknown validator '{name}' in disabled_validators")
        validators = [
            validator_class()
            for name, validator_class in registry.items()
            if name not in disabled
        ]
        return cls(validators=validators, strict=settings.strict)

    def validate(
        self, template: Dict[str, Any], context: ValidationContext
    ) -> ValidationResult:
        result = ValidationResult()
        for validator in self.validators:
            validator_result = validator.validate(template, context)
            logger.debug(
                f"Validator '{validator.name}' reported "
                f"{len(validator_result.errors)} error(s), "
                f"{len(validator_result.warnings)} warning(s) for "
                f"'{context.stack_path}'"
            )
            result = result.merge(validator_result)

        if self.strict:
            result = ValidationResult(
                issues=tuple(
                    replace(issue, severity=ValidationSeverity.ERROR)
                    if issue.severity is ValidationSeverity.WARNING
                    else issue
                    for issue in result.issues
                )
            )
        return result
