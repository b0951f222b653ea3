"""Validation of resource names against their kind's naming rule."""

from typing import Optional, Union

from ..core.validation import ValidationResult, ValidationResultBuilder
from .conventions import NamingConventions, NamingRule

_DEFAULT_CONVENTIONS = NamingConventions()


def validate_resource_name(
    name: str,
    kind: Union[str, NamingRule],
    conventions: Optional[NamingConventions] = None,
    path: Optional[str] = None,
) -> ValidationResult:
    """Check ``name`` against the naming rule for ``kind``.

    Args:
        name: Candidate resource name
        kind: Resource kind (``"st"``, ``"kv"``...) or an explicit rule
        conventions: Conventions to look the kind up in
        path: Construct path recorded on each issue

    Returns:
        ValidationResult with one error per violated constraint
    """
    if isinstance(kind, NamingRule):
        rule = kind
    else:
        rule = (conventions or _DEFAULT_CONVENTIONS).rule_for(kind)

    builder = ValidationResultBuilder(validator="naming")
    if not name:
        builder.add_error(
            f"{rule.kind} name cannot be empty", path=path, code="NAME_EMPTY"
        )
        return builder.build()

    if len(name) < rule.min_length:
        builder.add_error(
            f"{rule.kind} name '{name}' must be at least {rule.min_length} "
            f"characters (current: {len(name)})",
            path=path,
            code="NAME_TOO_SHORT",
        )
    if len(name) > rule.max_length:
        builder.add_error(
            f"{rule.kind} name '{name}' must not exceed {rule.max_length} "
            f"characters (current: {len(name)})",
            path=path,
            code="NAME_TOO_LONG",
        )
    if rule.pattern is not None and not rule.pattern.match(name):
        builder.add_error(
            f"{rule.kind} name '{name}' has invalid format: {rule.description}",
            path=path,
            code="NAME_INVALID_FORMAT",
        )
    if rule.must_start_with_letter and not name[0].isalpha():
        builder.add_error(
            f"{rule.kind} name '{name}' must start with a letter",
            path=path,
            code="NAME_INVALID_START",
        )
    if not rule.allow_consecutive_hyphens and "--" in name:
        builder.add_error(
            f"{rule.kind} name '{name}' cannot contain consecutive hyphens",
            path=path,
            code="NAME_CONSECUTIVE_HYPHENS",
        )
    return builder.build()
