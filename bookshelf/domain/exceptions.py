"""Domain exceptions for the bookshelf service.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class BookshelfException(Exception):
    """Base exception for all bookshelf application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body used by the exception handlers."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(BookshelfException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(BookshelfException):
    """Raised when authentication fails (e.g. invalid credentials or token)."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(BookshelfException):
    """Raised when the user's role does not allow the operation."""

    def __init__(
        self,
        required_roles: list[str] | None = None,
        message: str = "Permission denied",
    ) -> None:
        """Initialize with the roles that would have been accepted.

        Args:
            required_roles: Roles allowed on the route, if known.
            message: Human-readable message; replaced when roles are given.
        """
        details: dict[str, Any] = {}
        if required_roles:
            message = f"Access denied. Required roles: {', '.join(required_roles)}"
            details["required_roles"] = required_roles
        super().__init__(message, "PERMISSION_DENIED", details)


class ResourceNotFoundException(BookshelfException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'book', 'audit_log').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class UserAlreadyExistsException(BookshelfException):
    """Raised when creating a user whose email or API key is already taken."""

    def __init__(self, email: str) -> None:
        super().__init__(
            "A user with this email already exists",
            "USER_ALREADY_EXISTS",
            {"email": email},
        )


class InvalidFilterException(BookshelfException):
    """Raised when an audit query filter names an entity that is not tracked."""

    def __init__(self, entity: str, tracked_entities: list[str]) -> None:
        """Initialize with the rejected entity and the accepted ones.

        Args:
            entity: Entity name given in the filter.
            tracked_entities: Entity names the audit trail tracks.
        """
        super().__init__(
            f"Entity '{entity}' is not auditable. "
            f"Valid entities: {', '.join(tracked_entities)}",
            "INVALID_ENTITY",
            {"entity": entity, "valid_entities": tracked_entities},
        )


class InvalidDateRangeException(BookshelfException):
    """Raised when an audit query has from > to."""

    def __init__(self, from_value: str, to_value: str) -> None:
        super().__init__(
            "From date must be before to date",
            "INVALID_DATE_RANGE",
            {"from": from_value, "to": to_value},
        )


class AlreadyDeletedException(BookshelfException):
    """Raised when soft-deleting a record that is already soft-deleted."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f"{resource_type} with ID {resource_id} is already deleted",
            "ALREADY_DELETED",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class NotDeletedException(BookshelfException):
    """Raised when restoring a record that is not soft-deleted."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f"{resource_type} with ID {resource_id} is not deleted",
            "NOT_DELETED",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class SqlNotConfiguredException(BookshelfException):
    """Raised when an operation requires the database but no engine could be built."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
