"""Error Hierarchy — typed, categorized exceptions for all Session Tracker failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Remote store errors carry the originating cause in their message
    - to_response() produces the REST error envelope
    - Read failures never escape the local store; write/create failures always propagate

Design Decisions:
    - Single hierarchy with SessionTrackerError base: FastAPI global handler catches all
    - ErrorContext as dataclass: observability fields without coupling to logging
    - TasksNotCreatedError subclasses CreateError: callers that only care about
      "create failed" catch one type, callers that care about the orphaned
      session row read session_id
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    AUTH = "auth"
    RESOURCE_NOT_FOUND = "resource_not_found"
    STORAGE = "storage"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    session_id: str | None = None
    task_id: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class SessionTrackerError(Exception):
    """Base exception for all Session Tracker errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "session_id": self.context.session_id,
                    "task_id": self.context.task_id,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class EntryValidationError(SessionTrackerError):
    """Draft entry failed a presence check before any IO."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.field = field


class AuthRequiredError(SessionTrackerError):
    """Remote operation attempted without an authenticated identity."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Not authenticated", "AUTH_REQUIRED", ErrorCategory.AUTH,
            ErrorSeverity.WARNING, context, 401,
        )


# ─── Local Storage Errors ───────────────────────────────────────

class StorageReadError(SessionTrackerError):
    """Persisted payload is unreachable or malformed."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Failed to read sessions: {message}",
            "STORAGE_READ_ERROR", ErrorCategory.STORAGE,
            ErrorSeverity.WARNING, context, 500,
        )


class StorageWriteError(SessionTrackerError):
    """Storage rejected the write of the session list."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Failed to save sessions: {message}",
            "STORAGE_WRITE_ERROR", ErrorCategory.STORAGE,
            ErrorSeverity.ERROR, context, 500,
        )


# ─── Remote Store Errors (500-level) ────────────────────────────

class FetchError(SessionTrackerError):
    """Session or task query rejected by the remote store."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"fetch_all failed: {message}",
            "FETCH_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.ERROR, context, 503,
        )


class CreateError(SessionTrackerError):
    """Session insert rejected or returned no row."""
    def __init__(
        self, message: str, code: str = "CREATE_ERROR",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"create failed: {message}",
            code, ErrorCategory.DATABASE,
            ErrorSeverity.ERROR, context, 503,
        )


class TasksNotCreatedError(CreateError):
    """Task batch insert failed after the session row was committed."""
    def __init__(self, message: str, session_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.session_id = session_id
        super().__init__(
            f"Failed to create tasks: {message} (session {session_id} remains persisted)",
            "TASKS_FAILED_SESSION_PERSISTED", ctx,
        )
        self.session_id = session_id


class UpdateError(SessionTrackerError):
    """Task update rejected, or the target row does not exist."""
    def __init__(
        self, message: str, not_found: bool = False,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"update_task_completed failed: {message}",
            "UPDATE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.ERROR, context, 404 if not_found else 503,
        )
        self.not_found = not_found


class DeleteError(SessionTrackerError):
    """Session delete rejected by the remote store."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"delete failed: {message}",
            "DELETE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.ERROR, context, 503,
        )


class DatabaseError(SessionTrackerError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
