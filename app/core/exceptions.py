"""
Exception handling

Business exceptions and the global exception handlers
"""
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from .response import error_response


class AppException(Exception):
    """Base application exception"""

    def __init__(
        self,
        message: str = "Internal server error",
        code: int = 500,
        data: dict = None
    ):
        self.message = message
        self.code = code
        self.data = data
        super().__init__(self.message)


class ValidationException(AppException):
    """Missing or malformed input"""

    def __init__(self, message: str = "Invalid request data", data: dict = None):
        super().__init__(message=message, code=400, data=data)


class IllegalTransitionException(AppException):
    """Requested status change is not an edge of the workflow for this actor"""

    def __init__(self, message: str = "Illegal status transition", data: dict = None):
        super().__init__(message=message, code=400, data=data)


class UnauthorizedException(AppException):
    """Missing or invalid bearer token"""

    def __init__(self, message: str = "Authorization token required"):
        super().__init__(message=message, code=401)


class ForbiddenException(AppException):
    """Role or ownership mismatch"""

    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(message=message, code=403)


class NotFoundException(AppException):
    """Resource does not exist"""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message=message, code=404)


class ConflictException(AppException):
    """Resource already exists"""

    def __init__(self, message: str = "Resource already exists"):
        super().__init__(message=message, code=409)


class ServerException(AppException):
    """Storage or other internal failure, surfaced with a safe message"""

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message=message, code=500)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Application exception handler"""
    if exc.code >= 500:
        logger.error(f"AppException: {exc.message} | Path: {request.url.path}")
    else:
        logger.warning(f"AppException: {exc.message} | Path: {request.url.path}")
    return JSONResponse(
        status_code=exc.code,
        content=error_response(message=exc.message, code=exc.code, data=exc.data)
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """HTTP exception handler"""
    logger.warning(f"HTTPException: {exc.detail} | Path: {request.url.path}")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(message=str(exc.detail), code=exc.status_code),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Request validation handler, reported as a 400 like every other bad input"""
    errors = []
    for error in exc.errors():
        errors.append({
            "loc": [str(l) for l in error.get("loc", ())],
            "msg": error.get("msg", ""),
            "type": error.get("type", ""),
        })

    message = "; ".join(f"{' -> '.join(e['loc'])}: {e['msg']}" for e in errors)
    logger.warning(f"ValidationError: {message} | Path: {request.url.path}")

    return JSONResponse(
        status_code=400,
        content=error_response(
            message=message or "Request validation failed",
            code=400,
            data={"errors": errors}
        )
    )


async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Storage failure handler"""
    logger.exception(f"DatabaseError: {exc} | Path: {request.url.path}")
    return JSONResponse(
        status_code=500,
        content=error_response(message="Database operation failed", code=500)
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler"""
    logger.exception(f"Unhandled Exception: {exc} | Path: {request.url.path}")
    return JSONResponse(
        status_code=500,
        content=error_response(message="Internal server error", code=500)
    )
