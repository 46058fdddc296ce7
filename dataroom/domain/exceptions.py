"""Domain exceptions for the data room service.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class DataRoomException(Exception):
    """Base exception for all data room application errors.

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
        """Return the failure envelope sent to clients."""
        body: dict[str, Any] = {
            "success": False,
            "error": self.error_code,
            "message": self.message,
        }
        if self.details:
            body["details"] = self.details
        return body


class ValidationException(DataRoomException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(DataRoomException):
    """Raised when authentication fails (e.g. missing, invalid or expired credential)."""

    def __init__(
        self,
        message: str = "Authentication failed",
        error_code: str = "AUTHENTICATION_ERROR",
    ) -> None:
        """Initialize with optional message and code.

        Args:
            message: Description of the authentication failure.
            error_code: Machine-readable reason; subclasses pin a specific one.
        """
        super().__init__(message, error_code)


class TokenMalformedException(AuthenticationException):
    """Bearer token could not be decoded or lacks required claims."""

    def __init__(self) -> None:
        super().__init__("Invalid token", "TOKEN_MALFORMED")


class TokenExpiredException(AuthenticationException):
    """Bearer token signature is valid but exp is in the past."""

    def __init__(self) -> None:
        super().__init__("Token expired", "TOKEN_EXPIRED")


class TokenSignerUnknownException(AuthenticationException):
    """Bearer token was not signed by this service (bad signature or issuer)."""

    def __init__(self) -> None:
        super().__init__("Token signer not recognized", "TOKEN_SIGNER_UNKNOWN")


class ResourceNotFoundException(DataRoomException):
    """Raised when a requested resource is not found or not owned by the caller.

    The two cases are deliberately indistinguishable to the caller.
    """

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'folder', 'file').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type.replace('_', ' ').capitalize()} not found",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class ConflictException(DataRoomException):
    """Raised when a name is already taken within its sibling scope."""

    def __init__(self, resource_type: str, name: str, scope: str) -> None:
        """Initialize with resource type, conflicting name, and scope description.

        Args:
            resource_type: 'data_room', 'folder' or 'file'.
            name: The name that collided.
            scope: Where the collision happened (e.g. 'this location').
        """
        label = resource_type.replace("_", " ").capitalize()
        super().__init__(
            f"{label} with this name already exists in {scope}",
            "CONFLICT",
            {"resource_type": resource_type, "name": name},
        )


class SignInMethodConflictException(DataRoomException):
    """Raised when an external sign-in matches an email held by another account.

    The other account uses a different sign-in method (or a different
    subject at the same provider). Accounts are never merged.
    """

    def __init__(self, provider: str) -> None:
        super().__init__(
            "This email is already registered with a different sign-in method",
            "CONFLICT",
            {"provider": provider},
        )


class HierarchyCycleException(DataRoomException):
    """Raised when a parent chain revisits a folder or exceeds the depth bound.

    Indicates a corrupted store; reported to callers as an internal error.
    """

    def __init__(self, folder_id: str, reason: str) -> None:
        """Initialize with the folder where traversal started and the reason.

        Args:
            folder_id: Folder whose ancestry could not be resolved.
            reason: 'cycle' or 'depth_exceeded'.
        """
        super().__init__(
            f"Folder hierarchy is inconsistent for {folder_id}",
            "HIERARCHY_INTEGRITY_ERROR",
            {"folder_id": folder_id, "reason": reason},
        )


class IdentityProviderException(DataRoomException):
    """Raised when the external identity provider cannot be reached or errors."""

    def __init__(self, reason: str) -> None:
        super().__init__(
            "Identity provider unavailable",
            "IDENTITY_PROVIDER_ERROR",
            {"reason": reason},
        )


class SqlNotConfiguredException(DataRoomException):
    """Raised when an operation requires the database but it is not configured."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
