"""Synthesizes one ARM template per stack.

Synthesis runs collect -> render -> order -> validate. It never mutates the
construct tree, so different stacks can be synthesized concurrently.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..config.models import ValidationSettings
from ..core.scopes import DeploymentScope, get_schema_for_scope
from ..core.stack import ResourceGroupStack, Stack, SubscriptionStack
from ..core.validation import ValidationResult
from ..exceptions import TemplateValidationError
from .collector import ResourceCollector
from .dependency_resolver import DependencyResolver
from .pipeline import ValidationPipeline
from .transformer import ResourceTransformer
from .validators import ValidationContext, resource_key

logger = logging.getLogger(__name__)

CONTENT_VERSION = "1.0.0.0"


def build_template(
    scope: DeploymentScope, resources: List[Dict[str, Any]]
) -> Dict[str, Any]:
    """Empty-section ARM template document around ``resources``."""
    return {
        "$schema": get_schema_for_scope(scope),
        "contentVersion": CONTENT_VERSION,
        "parameters": {},
        "variables": {},
        "resources": resources,
        "outputs": {},
    }


@dataclass(frozen=True)
class StackSynthesisResult:
    """Template synthesized for one stack plus its validation result."""

    stack_name: str
    stack_path: str
    scope: DeploymentScope
    template: Dict[str, Any]
    validation: ValidationResult
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def resource_count(self) -> int:
        return len(self.template.get("resources", []))

    def to_json(self, indent: Optional[int] = 2) -> str:
        """Deterministic JSON rendering of the template."""
        return json.dumps(self.template, indent=indent)


class Synthesizer:
    """Turns a stack into a validated ARM template.

    Args:
        validation_settings: Whether to validate, strict mode and which
            validators to skip
        pipeline: Explicit pipeline, overriding the one built from settings
    """

    def __init__(
        self,
        validation_settings: Optional[ValidationSettings] = None,
        pipeline: Optional[ValidationPipeline] = None,
    ) -> None:
        self.validation_settings = validation_settings or ValidationSettings()
        self.pipeline = pipeline or ValidationPipeline.from_settings(
            self.validation_settings
        )
        self.collector = ResourceCollector()
        self.transformer = ResourceTransformer()
        self.dependency_resolver = DependencyResolver()

    def synthesize(self, stack: Stack) -> StackSynthesisResult:
        """Synthesize ``stack`` into a template.

        Raises:
            ResourceScopeError: If a resource cannot deploy at the stack's scope
            DependencyCycleError: If resource references form a cycle
            TemplateValidationError: If validation reports any error
        """
        logger.info(f"Synthesizing stack '{stack.path}'")
        resources = self.collector.collect(stack)
        rendered = self.transformer.transform(resources)
        ordered = self.dependency_resolver.resolve(rendered)

        template = build_template(
            stack.deployment_scope, [item.template for item in ordered]
        )

        validation = ValidationResult()
        if self.validation_settings.enabled:
            context = ValidationContext(
                stack_path=stack.path,
                deployment_scope=stack.deployment_scope,
                conventions=stack.naming_conventions,
                resource_paths={
                    resource_key(item.template): item.path for item in ordered
                },
            )
            validation = self.pipeline.validate(template, context)

        for warning in validation.warnings:
            logger.warning(warning.format())

        if not validation.valid:
            raise TemplateValidationError(
                f"Template for stack '{stack.path}' failed validation with "
                f"{len(validation.errors)} error(s):\n{validation.format_report()}",
                path=stack.path,
                result=validation,
            )

        logger.info(
            f"Synthesized stack '{stack.path}' with {len(ordered)} resource(s)"
        )
        return StackSynthesisResult(
            stack_name=stack.stack_name,
            stack_path=stack.path,
            scope=stack.deployment_scope,
            template=template,
            validation=validation,
            metadata=self._stack_metadata(stack),
        )

    @staticmethod
    def _stack_metadata(stack: Stack) -> Dict[str, Any]:
        metadata: Dict[str, Any] = {"location": stack.location}
        if isinstance(stack, (SubscriptionStack, ResourceGroupStack)):
            if stack.subscription_id:
                metadata["subscriptionId"] = stack.subscription_id
        if isinstance(stack, ResourceGroupStack):
            metadata["resourceGroupName"] = stack.resource_group_name
        return metadata


def synthesize(stack: Stack, strict: bool = False) -> StackSynthesisResult:
    """Synthesize ``stack`` with the default validators."""
    return Synthesizer(ValidationSettings(strict=strict)).synthesize(stack)
