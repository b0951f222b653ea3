"""
Custom Exception Hierarchy for armforge

Every fatal condition raised while defining a construct tree or synthesizing
templates derives from ``ArmForgeError``. Errors carry an error code, a context
dictionary (always including the offending construct ``path`` where one
exists) and an optional recovery suggestion.
"""

from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence

if TYPE_CHECKING:
    from .core.validation import ValidationIssue, ValidationResult


class ArmForgeError(Exception):
    """
    Base exception class for all armforge errors.

    Provides structured error information including context, error codes,
    and optional recovery suggestions.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        recovery_suggestion: Optional[str] = None,
    ) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error message
            error_code: Optional error code for programmatic handling
            context: Optional dictionary with error context
            cause: Optional underlying exception that caused this error
            recovery_suggestion: Optional suggestion for error recovery
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        self.cause = cause
        self.recovery_suggestion = recovery_suggestion

    @property
    def path(self) -> Optional[str]:
        """Construct path implicated by this error, if any."""
        return self.context.get("path")

    def __str__(self) -> str:
        """Return a formatted error message with context."""
        result = self.message
        if self.error_code:
            result = f"[{self.error_code}] {result}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            result += f" (context: {context_str})"
        if self.cause:
            result += f" (caused by: {self.cause})"
        if self.recovery_suggestion:
            result += f" (suggestion: {self.recovery_suggestion})"
        return result

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "context": self.context,
            "cause": str(self.cause) if self.cause else None,
            "recovery_suggestion": self.recovery_suggestion,
        }


def _with_path(kwargs: Dict[str, Any], path: Optional[str]) -> Dict[str, Any]:
    context = kwargs.get("context", {})
    if path is not None:
        context["path"] = path
    kwargs["context"] = context
    return kwargs


# Construct tree exceptions
class ConstructError(ArmForgeError):
    """Base class for structural construct tree errors."""

    pass


class DuplicateConstructIdError(ConstructError):
    """Raised when a scope already has a child with the requested id."""

    def __init__(self, message: str, path: Optional[str] = None, **kwargs: Any) -> None:
        kwargs = _with_path(kwargs, path)
        kwargs.setdefault("error_code", "DUPLICATE_CONSTRUCT_ID")
        kwargs.setdefault(
            "recovery_suggestion", "Give each child of a scope a distinct id"
        )
        super().__init__(message, **kwargs)


class InvalidConstructIdError(ConstructError):
    """Raised when a construct id is empty or contains a path separator."""

    def __init__(self, message: str, path: Optional[str] = None, **kwargs: Any) -> None:
        kwargs = _with_path(kwargs, path)
        kwargs.setdefault("error_code", "INVALID_CONSTRUCT_ID")
        super().__init__(message, **kwargs)


class ResourceScopeError(ConstructError):
    """Raised when a resource is placed in a stack that cannot deploy it."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        resource_type: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        kwargs = _with_path(kwargs, path)
        if resource_type:
            kwargs["context"]["resource_type"] = resource_type
        kwargs.setdefault("error_code", "RESOURCE_SCOPE_MISMATCH")
        kwargs.setdefault(
            "recovery_suggestion",
            "Move subscription-scoped resources into a SubscriptionStack",
        )
        super().__init__(message, **kwargs)


# Cycle exceptions
class CycleError(ArmForgeError):
    """Base class for cycles in the construct tree or the dependency graph."""

    def __init__(
        self, message: str, cycle: Optional[Sequence[str]] = None, **kwargs: Any
    ) -> None:
        self.cycle: List[str] = list(cycle or [])
        context = kwargs.get("context", {})
        if self.cycle:
            context["cycle"] = " -> ".join(self.cycle)
        kwargs["context"] = context
        super().__init__(message, **kwargs)


class TreeCycleError(CycleError):
    """Raised when traversal revisits a construct that is still being visited."""

    def __init__(self, message: str, path: Optional[str] = None, **kwargs: Any) -> None:
        kwargs = _with_path(kwargs, path)
        kwargs.setdefault("error_code", "CONSTRUCT_TREE_CYCLE")
        super().__init__(message, **kwargs)


class DependencyCycleError(CycleError):
    """Raised when resources reference each other (or themselves) in a loop."""

    def __init__(self, message: str, path: Optional[str] = None, **kwargs: Any) -> None:
        kwargs = _with_path(kwargs, path)
        kwargs.setdefault("error_code", "DEPENDENCY_CYCLE")
        kwargs.setdefault(
            "recovery_suggestion",
            "Break the loop by removing one of the resource references",
        )
        super().__init__(message, **kwargs)


# Property validation exceptions
class PropertyValidationError(ArmForgeError):
    """Raised by a resource constructor when its properties violate constraints."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        violations: Optional[Sequence["ValidationIssue"]] = None,
        **kwargs: Any,
    ) -> None:
        self.violations = list(violations or [])
        kwargs = _with_path(kwargs, path)
        if self.violations:
            kwargs["context"]["violations"] = [v.message for v in self.violations]
        kwargs.setdefault("error_code", "PROPERTY_VALIDATION_FAILED")
        super().__init__(message, **kwargs)


# Naming exceptions
class NamingError(ArmForgeError):
    """Base class for naming resolution errors."""

    pass


class MissingStackError(NamingError):
    """Raised when a resource has no stack anywhere in its scope chain."""

    def __init__(self, message: str, path: Optional[str] = None, **kwargs: Any) -> None:
        kwargs = _with_path(kwargs, path)
        kwargs.setdefault("error_code", "MISSING_STACK")
        kwargs.setdefault(
            "recovery_suggestion",
            "Create the resource inside a SubscriptionStack or ResourceGroupStack",
        )
        super().__init__(message, **kwargs)


class InvalidResourceNameError(NamingError):
    """Raised when an explicit resource name breaks the provider rules."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        name: Optional[str] = None,
        errors: Optional[Sequence[str]] = None,
        **kwargs: Any,
    ) -> None:
        kwargs = _with_path(kwargs, path)
        if name is not None:
            kwargs["context"]["name"] = name
        if errors:
            kwargs["context"]["errors"] = list(errors)
        kwargs.setdefault("error_code", "INVALID_RESOURCE_NAME")
        super().__init__(message, **kwargs)


class InvalidNamingComponentError(NamingError):
    """Raised when a naming component normalizes to an unusable value."""

    def __init__(self, message: str, value: Optional[str] = None, **kwargs: Any) -> None:
        context = kwargs.get("context", {})
        if value is not None:
            context["value"] = value
        kwargs["context"] = context
        kwargs.setdefault("error_code", "INVALID_NAMING_COMPONENT")
        super().__init__(message, **kwargs)


# Synthesis exceptions
class TemplateValidationError(ArmForgeError):
    """Raised when cross-resource validation finds error-severity issues."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        result: Optional["ValidationResult"] = None,
        **kwargs: Any,
    ) -> None:
        self.result = result
        kwargs = _with_path(kwargs, path)
        if result is not None:
            kwargs["context"]["error_count"] = len(result.errors)
            kwargs["context"]["warning_count"] = len(result.warnings)
        kwargs.setdefault("error_code", "TEMPLATE_VALIDATION_FAILED")
        super().__init__(message, **kwargs)


# Configuration exceptions
class ConfigError(ArmForgeError):
    """Configuration loading or validation error."""

    def __init__(
        self, message: str, config_path: Optional[str] = None, **kwargs: Any
    ) -> None:
        context = kwargs.get("context", {})
        if config_path:
            context["config_path"] = config_path
        kwargs["context"] = context
        kwargs.setdefault("error_code", "INVALID_CONFIG")
        kwargs.setdefault(
            "recovery_suggestion", "Check configuration file and environment variables"
        )
        super().__init__(message, **kwargs)
