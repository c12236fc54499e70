from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from loguru import logger
from uuid import uuid4
import traceback


class AppException(Exception):
    """Base exception for application-specific exceptions"""
    def __init__(self, status_code: int, detail: str, error_code: str = None, headers: dict = None):
        self.status_code = status_code
        self.detail = detail
        self.error_code = error_code or "general_error"
        self.headers = headers


class MissingCredential(AppException):
    """Raised when a request carries no usable identity token"""
    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code="unauthorized",
            headers={"WWW-Authenticate": "Bearer"}
        )


class InsufficientRole(AppException):
    """Raised when a verified identity lacks the role an endpoint requires"""
    def __init__(self, required_role: str):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"{required_role} role required",
            error_code="insufficient_role"
        )


class InvalidCredentials(AppException):
    """Raised when a login attempt fails"""
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            error_code="invalid_credentials"
        )


class QuotaExceeded(AppException):
    """Raised when a client has used up its daily plan generation quota"""
    def __init__(self, limit: int):
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=f"Daily request limit ({limit}) reached. Try again tomorrow.",
            error_code="quota_exceeded"
        )


class BadRequest(AppException):
    """Raised for semantically invalid request data"""
    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code="bad_request"
        )


class ResourceNotFound(AppException):
    """Exception raised when a requested resource is not found"""
    def __init__(self, resource: str, detail: str = None):
        message = detail or f"{resource} not found"
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=message,
            error_code="resource_not_found"
        )


class ServiceUnavailable(AppException):
    """Raised when an upstream dependency (AI service) is missing or failing"""
    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            error_code="upstream_error"
        )


def setup_exception_handlers(app: FastAPI):
    """Register exception handlers with the FastAPI app"""

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException):
        """Handler for application-specific exceptions"""
        error_id = str(uuid4())
        log = logger.warning if exc.status_code < 500 else logger.error
        log(
            "Application exception: {detail}",
            detail=exc.detail,
            error_id=error_id,
            status_code=exc.status_code,
            error_code=exc.error_code,
            path=request.url.path
        )

        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error_id": error_id,
                "error_code": exc.error_code,
                "error": exc.detail
            },
            headers=exc.headers
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handler for request validation errors"""
        error_id = str(uuid4())
        errors = exc.errors()

        logger.warning(
            "Request validation error",
            error_id=error_id,
            errors=errors,
            path=request.url.path
        )

        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "error_id": error_id,
                "error_code": "validation_error",
                "error": "Invalid request data",
                "errors": [
                    {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
                    for err in errors
                ]
            }
        )

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError):
        """Handler for database errors"""
        error_id = str(uuid4())

        logger.error(
            "Database error: {error}",
            error=str(exc),
            error_id=error_id,
            error_type=type(exc).__name__,
            path=request.url.path,
            traceback=traceback.format_exc()
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error_id": error_id,
                "error_code": "database_error",
                "error": "A database error occurred"
            }
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        """Handler for all other exceptions"""
        error_id = str(uuid4())

        logger.error(
            "Unhandled exception: {error}",
            error=str(exc),
            error_id=error_id,
            error_type=type(exc).__name__,
            path=request.url.path,
            traceback=traceback.format_exc()
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error_id": error_id,
                "error_code": "server_error",
                "error": "Internal server error. Please try again later."
            }
        )
