"""Error taxonomy and the exception handlers that turn errors into responses."""
import logging
from contextlib import contextmanager
from urllib.parse import quote

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi_users import exceptions as fastapi_users_exceptions

logger = logging.getLogger(__name__)


class DomainError(Exception):
    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ValidationError(DomainError):
    def __init__(self, message: str):
        super().__init__(message, 400)


class InvalidIdError(ValidationError):
    def __init__(self, message: str = "Invalid product id"):
        super().__init__(message)


class NotFoundError(DomainError):
    def __init__(self, message: str):
        super().__init__(message, 404)


class UnauthorizedError(DomainError):
    def __init__(self, message: str):
        super().__init__(message, 401)


class PersistenceError(DomainError):
    def __init__(self, message: str = "Database operation failed"):
        super().__init__(message, 500)


class AuthError(DomainError):
    """No valid session on a protected page. Answered with a login redirect."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, 401)


@contextmanager
def failure_message(message: str):
    """Replace the message of a PersistenceError raised inside the block."""
    try:
        yield
    except PersistenceError as exc:
        raise PersistenceError(message) from exc


def login_redirect(login_path: str, original_path: str) -> RedirectResponse:
    """Redirect to the login page, carrying the requested path along."""
    url = f"{login_path}?redirect={quote(original_path, safe='/')}"
    return RedirectResponse(url=url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            f"{request.method} {request.url.path} failed: {exc.message}",
            exc_info=exc.__cause__ or exc,
        )
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def auth_error_handler(request: Request, exc: AuthError) -> RedirectResponse:
    login_path = request.app.state.settings.login_path
    logger.info(f"Redirecting unauthenticated request for {request.url.path}")
    return login_redirect(login_path, request.url.path)


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request body"},
    )


async def user_already_exists_handler(
    request: Request, exc: fastapi_users_exceptions.UserAlreadyExists
) -> JSONResponse:
    logger.warning(f"Sign-up rejected on {request.url.path}: email already registered")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "An account with this email already exists"},
    )


async def invalid_password_handler(
    request: Request, exc: fastapi_users_exceptions.InvalidPasswordException
) -> JSONResponse:
    logger.warning(f"Sign-up rejected on {request.url.path}: {exc.reason}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": exc.reason})


async def general_500_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled exception on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


# Exception handler mapping
EXCEPTION_HANDLERS = {
    AuthError: auth_error_handler,
    DomainError: domain_error_handler,
    RequestValidationError: validation_error_handler,
    fastapi_users_exceptions.UserAlreadyExists: user_already_exists_handler,
    fastapi_users_exceptions.InvalidPasswordException: invalid_password_handler,
    Exception: general_500_exception_handler,
}


def register_exception_handlers(app):
    for exception_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)
