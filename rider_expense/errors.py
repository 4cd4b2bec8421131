"""
Error taxonomy shared by services and routes.

Services raise these; the application maps each one to a JSON body of the
form ``{"success": false, "message": ...}`` with the class's status code.
"""


class AppError(Exception):
    """Base class for errors that are reported to the caller."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """Malformed, missing or out-of-range input."""
    status_code = 400


class AuthenticationError(AppError):
    """Missing/invalid/expired token or wrong credentials."""
    status_code = 401


class NotFoundError(AppError):
    """Entity absent, or present but owned by someone else."""
    status_code = 404


class ConflictError(AppError):
    """Uniqueness violation."""
    status_code = 409


class DownstreamError(AppError):
    """Store or email collaborator failure."""
    status_code = 500


class EmailDeliveryError(DownstreamError):
    pass
