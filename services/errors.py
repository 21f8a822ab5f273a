class VaultError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(VaultError):
    status_code = 400

    def __init__(self, field_errors: dict[str, list[str]], message: str = "Validation failed"):
        super().__init__(message)
        self.field_errors = field_errors


class DuplicateError(VaultError):
    status_code = 409


class NotFoundError(VaultError):
    status_code = 404


class AuthenticationError(VaultError):
    status_code = 401


class CsvProcessingError(VaultError):
    """The upload could not be read as CSV at all; no row-level report is possible."""

    status_code = 400
