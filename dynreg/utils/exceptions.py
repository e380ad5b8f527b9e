from typing import Dict, Optional


class RegistrationAppError(Exception):
    """Base error for the registration core.

    ``status_code`` is only a hint for whoever maps the error onto a transport;
    nothing in the core depends on it.
    """

    status_code: int = 500

    def __init__(self, message: str, errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors


class InvalidRequestError(RegistrationAppError):
    status_code = 400


class ValidationFailedError(RegistrationAppError):
    """Submitted data did not satisfy the tenant's field schema."""

    status_code = 400

    def __init__(self, errors: Dict[str, str], message: str = "Validation failed"):
        super().__init__(message, errors=errors)


class NotFoundError(RegistrationAppError):
    status_code = 404


class ConflictError(RegistrationAppError):
    status_code = 400


class StorageUnavailableError(RegistrationAppError):
    status_code = 500
