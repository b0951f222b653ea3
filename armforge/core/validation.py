"""Validation result types shared by property checks and template validators.

A ``ValidationResult`` is read-only once built. Issues are accumulated through
``ValidationResultBuilder`` and frozen with ``build()``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple


class ValidationSeverity(str, Enum):
    """Severity of a validation issue."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class ValidationIssue:
    """A single problem found while validating a resource or template."""

    message: str
    severity: ValidationSeverity = ValidationSeverity.ERROR
    code: Optional[str] = None
    path: Optional[str] = None
    suggestion: Optional[str] = None
    validator: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.severity is ValidationSeverity.ERROR

    def format(self) -> str:
        """Render the issue as a single human-readable line."""
        prefix = f"[{self.code}] " if self.code else ""
        location = f"{self.path}: " if self.path else ""
        line = f"{self.severity.value.upper()}: {location}{prefix}{self.message}"
        if self.suggestion:
            line += f" (suggestion: {self.suggestion})"
        return line


@dataclass(frozen=True)
class ValidationResult:
    """Immutable collection of validation issues."""

    issues: Tuple[ValidationIssue, ...] = field(default_factory=tuple)

    @property
    def errors(self) -> Tuple[ValidationIssue, ...]:
        return tuple(i for i in self.issues if i.severity is ValidationSeverity.ERROR)

    @property
    def warnings(self) -> Tuple[ValidationIssue, ...]:
        return tuple(
            i for i in self.issues if i.severity is ValidationSeverity.WARNING
        )

    @property
    def infos(self) -> Tuple[ValidationIssue, ...]:
        return tuple(i for i in self.issues if i.severity is ValidationSeverity.INFO)

    @property
    def valid(self) -> bool:
        """True when no error-severity issue is present."""
        return not self.errors

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        """Return a new result containing the issues of both results."""
        return ValidationResult(issues=self.issues + other.issues)

    def format_report(self) -> str:
        """Format all issues into a multi-line report."""
        lines = [
            f"Validation: {len(self.errors)} error(s), "
            f"{len(self.warnings)} warning(s)"
        ]
        lines.extend(f"  {issue.format()}" for issue in self.issues)
        return "\n".join(lines)


class ValidationResultBuilder:
    """Accumulates issues and produces a frozen ``ValidationResult``."""

    def __init__(self, validator: Optional[str] = None) -> None:
        self.validator = validator
        self._issues: List[ValidationIssue] = []

    def add_error(
        self,
        message: str,
        path: Optional[str] = None,
        code: Optional[str] = None,
        suggestion: Optional[str] = None,
    ) -> "ValidationResultBuilder":
        return self._add(message, ValidationSeverity.ERROR, path, code, suggestion)

    def add_warning(
        self,
        message: str,
        path: Optional[str] = None,
        code: Optional[str] = None,
        suggestion: Optional[str] = None,
    ) -> "ValidationResultBuilder":
        return self._add(message, ValidationSeverity.WARNING, path, code, suggestion)

    def add_info(
        self,
        message: str,
        path: Optional[str] = None,
        code: Optional[str] = None,
    ) -> "ValidationResultBuilder":
        return self._add(message, ValidationSeverity.INFO, path, code, None)

    def extend(self, issues: Iterable[ValidationIssue]) -> "ValidationResultBuilder":
        self._issues.extend(issues)
        return self

    def _add(
        self,
        message: str,
        severity: ValidationSeverity,
        path: Optional[str],
        code: Optional[str],
        suggestion: Optional[str],
    ) -> "ValidationResultBuilder":
        self._issues.append(
            ValidationIssue(
                message=message,
                severity=severity,
                code=code,
                path=path,
                suggestion=suggestion,
                validator=self.validator,
            )
        )
        return self

    @property
    def has_errors(self) -> bool:
        return any(i.is_error for i in self._issues)

    def build(self) -> ValidationResult:
        return ValidationResult(issues=tuple(self._issues))


@dataclass(frozen=True)
class ErrorDefinition:
    """Catalog entry describing a well-known validation failure."""

    code: str
    title: str
    suggestion: str


ERROR_CATALOG: Dict[str, ErrorDefinition] = {
    "ARM001": ErrorDefinition(
        code="ARM001",
        title="Invalid Delegation Structure",
        suggestion="Wrap the delegation serviceName in a properties object",
    ),
    "ARM002": ErrorDefinition(
        code="ARM002",
        title="Subnet Address Prefix Incorrect",
        suggestion="Move addressPrefix into the subnet properties object",
    ),
    "ARM003": ErrorDefinition(
        code="ARM003",
        title="Invalid Resource Reference",
        suggestion="Reference resources with a resourceId() expression instead of "
        "a literal ID",
    ),
    "ARM004": ErrorDefinition(
        code="ARM004",
        title="Network Access Lockdown Before Deployment",
        suggestion="Deploy with publicNetworkAccess 'Enabled' and lock it down after "
        "provisioning",
    ),
    "NET001": ErrorDefinition(
        code="NET001",
        title="Subnet CIDR Outside VNet Range",
        suggestion="Choose a subnet prefix inside the VNet address space",
    ),
    "NET002": ErrorDefinition(
        code="NET002",
        title="Overlapping Subnet Address Spaces",
        suggestion="Assign non-overlapping CIDR ranges to each subnet",
    ),
    "SEC001": ErrorDefinition(
        code="SEC001",
        title="NSG Rule Priority Conflict",
        suggestion="Give every rule of the same direction a unique priority",
    ),
}


def catalog_suggestion(code: str) -> Optional[str]:
    entry = ERROR_CATALOG.get(code)
    return entry.suggestion if entry else None
