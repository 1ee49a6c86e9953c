"""Error Reporter — classifies any failure into an ErrorReport and logs full detail.

Invariants:
    - Every exception maps to exactly one ErrorKind (unknown → INTERNAL)
    - Internal detail (paths, stack) goes to the log only; the report carries
      the public message and structured field violations
    - Validation / not-found log at WARNING; storage / internal at ERROR with exc_info
"""

import logging

from app.core.errors import (
    ErrorKind,
    ErrorReport,
    InternalError,
    RegistryError,
)

logger = logging.getLogger(__name__)


def classify(exc: BaseException) -> RegistryError:
    """Wrap unknown exceptions as InternalError; registry errors pass through."""
    if isinstance(exc, RegistryError):
        return exc
    return InternalError(f"{type(exc).__name__}: {exc}")


def report_failure(
    exc: BaseException,
    operation: str,
    student_id: str | None = None,
    committed_ids: list[str] | None = None,
) -> ErrorReport:
    """Log `exc` with full detail and return its sanitized report."""
    error = classify(exc)
    if error.context.operation is None:
        error.context.operation = operation

    extra = {
        "operation": operation,
        "error_kind": error.kind.value,
        "error_code": error.code,
        "error_severity": error.severity.value,
        "student_id": student_id or error.context.student_id,
        "committed_ids": committed_ids,
    }
    if error.kind in (ErrorKind.VALIDATION, ErrorKind.NOT_FOUND):
        logger.warning(f"{operation} rejected: {error.message}", extra=extra)
    else:
        logger.error(
            f"{operation} failed: {error.message}",
            extra=extra, exc_info=exc,
        )

    report = error.to_report()
    report.operation = operation
    if committed_ids is not None:
        report.committed_ids = list(committed_ids)
    return report

