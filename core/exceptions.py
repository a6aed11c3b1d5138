"""Custom exception classes for the application.

Every domain failure is raised as an `AppException` subclass and turned into
a JSON response by the handlers in `core.error_handlers`.
"""

from typing import Optional, Any, Dict, List


class AppException(Exception):
    """Base exception class for all application exceptions.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code to return.
        details: Optional additional error details.
        error: Short machine-readable error code.
    """

    error = "application_error"

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(AppException):
    """Raised when input validation fails.

    Carries one entry per violated field so clients can show every problem
    at once.
    """

    error = "validation_error"

    def __init__(self, message: str = "Validation failed", errors: Optional[List[Dict[str, str]]] = None,
                 field: Optional[str] = None):
        """Initialize validation error.

        Args:
            message: Summary message.
            errors: List of ``{"field", "message"}`` dicts.
            field: Shortcut for a single failing field; `message` is used as
                its message.
        """
        errors = list(errors or [])
        if field and not errors:
            errors.append({"field": field, "message": message})
        self.errors = errors
        super().__init__(message, status_code=400, details={"errors": errors} if errors else None)


class AuthenticationError(AppException):
    """Raised when a credential is missing, malformed or expired."""

    error = "authentication_error"

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, status_code=401)


class InvalidCredentialsError(AppException):
    """Raised on a failed login. The message never says which part was wrong."""

    error = "invalid_credentials"

    def __init__(self):
        super().__init__("Invalid credentials", status_code=400)


class AuthorizationError(AppException):
    """Raised when the caller's role does not grant the requested operation."""

    error = "authorization_error"

    def __init__(self, message: str = "You do not have permission to perform this action"):
        super().__init__(message, status_code=403)


class CsrfError(AppException):
    """Raised when the double-submit CSRF check fails."""

    error = "csrf_error"

    def __init__(self):
        super().__init__("Invalid or missing CSRF token", status_code=403)


class NotFoundError(AppException):
    """Exception raised when a requested resource is not found."""

    error = "not_found"

    def __init__(self, resource: str, identifier: Any):
        """Initialize not found error.

        Args:
            resource: Type of resource (e.g., 'Subscription', 'MealPlan').
            identifier: ID or identifier that was not found.
        """
        message = f"{resource} with id '{identifier}' not found"
        super().__init__(message, status_code=404, details={"resource": resource, "id": identifier})


class ConflictError(AppException):
    """Raised when a request conflicts with stored state (e.g. duplicate email)."""

    error = "conflict"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=409, details=details)


class SubscriptionLimitError(ConflictError):
    """Raised when a user already holds the maximum number of active subscriptions."""

    error = "subscription_limit_reached"

    def __init__(self, limit: int):
        super().__init__(
            f"You already have {limit} active subscriptions. "
            "Please cancel one before creating a new subscription.",
            details={"limit": limit},
        )


class InvalidTransitionError(ConflictError):
    """Raised when a subscription status change is not allowed."""

    error = "invalid_transition"

    def __init__(self, current: str, requested: str):
        super().__init__(
            f"Cannot change subscription status from '{current}' to '{requested}'",
            details={"current": current, "requested": requested},
        )


class DatabaseError(AppException):
    """Exception raised when database operations fail."""

    error = "database_error"

    def __init__(self, message: str, operation: Optional[str] = None):
        details = {"operation": operation} if operation else {}
        super().__init__(message, status_code=500, details=details)
