class AppError(Exception):
    """Base class for all application errors."""

    status_code = 500
    code = "INTERNAL_SERVER_ERROR"

    def __init__(self, detail: str, *, details: dict[str, str] | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.details = details


class InvalidRequestBodyError(AppError):
    """Request body could not be decoded into the expected shape (400)."""

    status_code = 400
    code = "INVALID_REQUEST_BODY"


class ValidationError(AppError):
    """Request body decoded but its values are out of range (400)."""

    status_code = 400
    code = "VALIDATION_ERROR"


class NotFoundError(AppError):
    """No route matches the requested path (404)."""

    status_code = 404
    code = "NOT_FOUND"


class MethodNotAllowedError(AppError):
    """Route exists but not for the requested method (405)."""

    status_code = 405
    code = "METHOD_NOT_ALLOWED"


class InternalServerError(AppError):
    """Unexpected fault caught at the recovery boundary (500)."""

    status_code = 500
    code = "INTERNAL_SERVER_ERROR"
