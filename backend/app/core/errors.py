"""Error Hierarchy — typed, categorized exceptions for all registry failure modes.

Invariants:
    - Every error has a code (str), kind (ErrorKind), severity (ErrorSeverity);
      all three appear in the response envelope and the log record
    - ErrorKind is a closed set: validation, not_found, storage, internal
    - ErrorReport.to_response() produces the REST envelope; public messages never carry
      file paths or tracebacks (internal detail stays on the exception)

Design Decisions:
    - Single hierarchy with RegistryError base: the error reporter classifies all
    - ErrorReport is the sanitized, serializable view that crosses the service boundary
    - FieldViolation is structured (field + message), joined only for display
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorKind(str, Enum):
    """The four failure kinds surfaced to callers."""
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    STORAGE = "storage"
    INTERNAL = "internal"


# Public messages per kind, never derived from internal detail
PUBLIC_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.VALIDATION: "Validation failed",
    ErrorKind.NOT_FOUND: "Student not found",
    ErrorKind.STORAGE: "Database operation failed",
    ErrorKind.INTERNAL: "An unexpected error occurred",
}

HTTP_STATUS: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.STORAGE: 503,
    ErrorKind.INTERNAL: 500,
}


@dataclass(frozen=True)
class FieldViolation:
    """One violated field constraint."""
    field: str
    message: str

    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    operation: str | None = None
    student_id: str | None = None


@dataclass
class ErrorReport:
    """Sanitized failure description handed to the API layer."""
    kind: ErrorKind
    code: str
    message: str
    severity: ErrorSeverity = ErrorSeverity.ERROR
    violations: list[FieldViolation] = field(default_factory=list)
    operation: str | None = None
    committed_ids: list[str] | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def http_status(self) -> int:
        return HTTP_STATUS[self.kind]

    @property
    def partial(self) -> bool:
        """True when a bulk call committed some items before failing."""
        return bool(self.committed_ids)

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        body: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "kind": self.kind.value,
            "severity": self.severity.value,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.violations:
            body["details"] = [v.to_dict() for v in self.violations]
        if self.operation:
            body["operation"] = self.operation
        if self.committed_ids is not None:
            body["partial"] = self.partial
            body["committed_ids"] = list(self.committed_ids)
        return {"error": body}


class RegistryError(Exception):
    """Base exception for all student registry errors."""

    def __init__(
        self,
        message: str,
        code: str,
        kind: ErrorKind,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.kind = kind
        self.severity = severity
        self.context = context or ErrorContext()

    @property
    def public_message(self) -> str:
        """Message safe to show a caller."""
        return PUBLIC_MESSAGES[self.kind]

    def to_report(self) -> ErrorReport:
        return ErrorReport(
            kind=self.kind,
            code=self.code,
            message=self.public_message,
            severity=self.severity,
            operation=self.context.operation,
            timestamp=self.context.timestamp,
        )


# ─── Domain Errors (400-level) ──────────────────────────────────

class RecordValidationError(RegistryError):
    """One or more field constraints violated."""
    def __init__(
        self, violations: list[FieldViolation], context: ErrorContext | None = None,
    ):
        super().__init__(
            "; ".join(v.message for v in violations),
            "VALIDATION_ERROR", ErrorKind.VALIDATION,
            ErrorSeverity.WARNING, context,
        )
        self.violations = list(violations)

    @property
    def public_message(self) -> str:
        # Violation messages describe user input only, so they are safe to surface
        return f"{PUBLIC_MESSAGES[ErrorKind.VALIDATION]}: {self.message}"

    def to_report(self) -> ErrorReport:
        report = super().to_report()
        report.violations = list(self.violations)
        return report


class StudentNotFoundError(RegistryError):
    """Referenced id does not exist in the current record set."""
    def __init__(self, student_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.student_id = student_id
        super().__init__(
            f"Student '{student_id}' not found",
            "STUDENT_NOT_FOUND", ErrorKind.NOT_FOUND,
            ErrorSeverity.WARNING, ctx,
        )
        self.student_id = student_id


# ─── Infrastructure Errors (500-level) ──────────────────────────

class StorageError(RegistryError):
    """Backing file could not be read, parsed, or written."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Storage {operation} failed: {message}",
            "STORAGE_ERROR", ErrorKind.STORAGE,
            ErrorSeverity.CRITICAL, context,
        )
        self.operation = operation


class InternalError(RegistryError):
    """Anything not classified by the other kinds."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INTERNAL_ERROR", ErrorKind.INTERNAL,
            ErrorSeverity.CRITICAL, context,
        )
