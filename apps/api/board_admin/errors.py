"""Pipeline exception types."""


class PipelineError(Exception):
    """Typed pipeline failure that carries the caller-facing message and status."""

    status_code: int = 500
    default_message: str = "An unexpected error occurred."

    def __init__(self, message: str | None = None, status_code: int | None = None) -> None:
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ConfigurationError(PipelineError):
    status_code = 500
    default_message = "Internal Server Configuration Error"


class AuthenticationError(PipelineError):
    status_code = 401
    default_message = "Authentication failed or invalid token."


class ProfileNotFound(PipelineError):
    status_code = 404
    default_message = "User profile not found."


class RoleLookupError(PipelineError):
    status_code = 500
    default_message = "Could not verify user role due to database error."


class PermissionDenied(PipelineError):
    status_code = 403

    def __init__(self, required_role: str) -> None:
        super().__init__(f"Permission denied. {required_role} role required.")


class ValidationError(PipelineError):
    # Caller input errors share the 500 status of server faults.
    status_code = 500
    default_message = "Invalid request payload."


class MethodNotAllowed(PipelineError):
    status_code = 405
    default_message = "Method Not Allowed"


class Conflict(PipelineError):
    status_code = 409


class MutationNotFound(PipelineError):
    status_code = 404


class MutationError(PipelineError):
    status_code = 500


class UnexpectedError(PipelineError):
    status_code = 500


__all__ = [
    "AuthenticationError",
    "ConfigurationError",
    "Conflict",
    "MethodNotAllowed",
    "MutationError",
    "MutationNotFound",
    "PermissionDenied",
    "PipelineError",
    "ProfileNotFound",
    "RoleLookupError",
    "UnexpectedError",
    "ValidationError",
]
