"""Error Hierarchy — typed, categorized exceptions for all UrbanEstate failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400-level) are recoverable; upstream/infrastructure errors (5xx) are critical
    - to_response() produces the REST envelope used by every handler
    - No provider or database details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with UrbanEstateError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - RateLimitExceededError carries retry_after_seconds so the handler can emit Retry-After
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
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    RATE_LIMIT = "rate_limit"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    CONFIGURATION = "configuration"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    client_id: str | None = None
    endpoint: str | None = None
    entity_id: str | None = None
    debug_info: dict[str, Any] | None = None
    retry_after_ms: int | None = None


class UrbanEstateError(Exception):
    """Base exception for all UrbanEstate errors."""

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
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
            }
        }


# ─── Client Errors (400-level) ──────────────────────────────────

class ValidationFailedError(UrbanEstateError):
    """Request input failed a domain validation rule."""
    def __init__(
        self, message: str, field: str | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field

    def to_response(self) -> dict:
        body = super().to_response()
        if self.field:
            body["error"]["field"] = self.field
        return body


class AuthenticationRequiredError(UrbanEstateError):
    """No verified user on the request."""
    def __init__(
        self, message: str = "Authentication required",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "AUTHENTICATION_REQUIRED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class PermissionDeniedError(UrbanEstateError):
    """Authenticated user lacks the role or ownership for this action."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "FORBIDDEN", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )


class ResourceNotFoundError(UrbanEstateError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


class ConflictError(UrbanEstateError):
    """Write rejected by a uniqueness or state rule."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


class ComplianceRejectedError(UrbanEstateError):
    """Generated listing content failed the fair-housing pre-screen."""
    def __init__(
        self, violations: list[dict], generated: dict,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            "Generated content contains compliance issues",
            "COMPLIANCE_VIOLATION", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 422,
        )
        self.violations = violations
        self.generated = generated

    def to_response(self) -> dict:
        body = super().to_response()
        body["error"]["violations"] = self.violations
        body["error"]["generated"] = self.generated
        return body


class RateLimitExceededError(UrbanEstateError):
    """Client exceeded the request budget for an endpoint group."""
    def __init__(
        self, retry_after_seconds: int, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.retry_after_ms = retry_after_seconds * 1000
        super().__init__(
            "Too many requests. Please try again later.",
            "RATE_LIMITED", ErrorCategory.RATE_LIMIT,
            ErrorSeverity.WARNING, ctx, 429,
        )
        self.retry_after_seconds = retry_after_seconds


# ─── Upstream / Infrastructure Errors (500-level) ───────────────

class DatabaseError(UrbanEstateError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class AIProviderError(UrbanEstateError):
    """Text-generation provider call failed.

    The provider's own error body stays in the logs; the client only sees
    a generic message.
    """
    def __init__(
        self,
        message: str,
        api_error_type: str,
        retry_after_ms: int | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.retry_after_ms = retry_after_ms
        super().__init__(
            "AI service is temporarily unavailable",
            "AI_PROVIDER_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, ctx, 503,
        )
        self.detail = message
        self.api_error_type = api_error_type


class ServiceUnavailableError(UrbanEstateError):
    """A required credential or upstream service is not configured."""
    def __init__(self, service: str, context: ErrorContext | None = None):
        super().__init__(
            f"{service} is not configured",
            "SERVICE_UNAVAILABLE", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.service = service
