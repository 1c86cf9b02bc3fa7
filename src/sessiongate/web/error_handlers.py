import structlog
from fastapi import Request
from fastapi.responses import JSONResponse, Response

from sessiongate.errors import AuthenticationError, RegistrationError, ValidationError

logger = structlog.get_logger(__name__)


def create_json_error_response(status_code: int, message: str, error_type: str | None = None) -> JSONResponse:
    """Create JSON error response with optional type for machine parsing."""
    content = {"message": message}
    if error_type:
        content["type"] = error_type
    return JSONResponse(status_code=status_code, content=content)


async def user_error_handler(_: Request, exc: Exception) -> Response:
    """Handle all UserError subclasses with appropriate status codes."""
    if isinstance(exc, AuthenticationError):
        status_code = 401
        error_type = "authentication_error"
    elif isinstance(exc, ValidationError):
        status_code = 400
        error_type = "validation_error"
    elif isinstance(exc, RegistrationError):
        status_code = 400
        error_type = "registration_error"
    else:
        # Default for any other UserError subclass
        status_code = 400
        error_type = "bad_request"

    return create_json_error_response(status_code=status_code, message=str(exc), error_type=error_type)


async def store_unavailable_handler(_: Request, exc: Exception) -> Response:
    """Handle backend outages (503) without exposing backend details."""
    logger.error("store_unavailable", error_type=type(exc).__name__, error=str(exc))
    return create_json_error_response(
        status_code=503, message="Service temporarily unavailable.", error_type="service_unavailable"
    )


async def general_exception_handler(_: Request, exc: Exception) -> Response:
    """Handle unexpected errors (500)."""
    logger.error("unexpected_error", error_type=type(exc).__name__, exc_info=exc)
    return create_json_error_response(
        status_code=500, message="An unexpected error occurred.", error_type="internal_server_error"
    )
