import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from app.utils.response import error_response

logger = logging.getLogger(__name__)


class AppException(Exception):
    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class InvalidInputError(AppException):
    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class InvalidTransitionError(AppException):
    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class NotFoundError(AppException):
    def __init__(self, message: str = "Vehicle not found"):
        super().__init__(message, status_code=404)


class ConflictError(AppException):
    def __init__(self, message: str):
        super().__init__(message, status_code=409)


class DuplicatePlateError(ConflictError):
    def __init__(self, license_plate: str):
        super().__init__(f"Vehicle with license plate {license_plate} already exists.")
        self.license_plate = license_plate


class CapacityExceededError(ConflictError):
    pass


class VehicleNotDeletableError(ConflictError):
    def __init__(self):
        super().__init__("Vehicle is InUse or in Maintenance and cannot be deleted.")


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
    if first.get("type") == "missing":
        return f"{field or 'Request body'} is required"
    message = first.get("msg", "Invalid value")
    return f"{field}: {message}" if field else message


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(exc.message),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content=error_response(_validation_message(exc)),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content=error_response("Internal server error"),
        )
