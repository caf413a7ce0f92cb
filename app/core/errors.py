"""Erreurs applicatives et mise en forme centralisée des réponses d'erreur.

Toutes les réponses non-2xx ont la même enveloppe:

    {"error": "<message court>", "details": {"message": "...", "type": "<ErrorKind>", ...}}
"""

import logging
import traceback
from typing import List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.schemas.task import Violation

logger = logging.getLogger(__name__)

AVAILABLE_ROUTES = [
    "GET /",
    "GET /health",
    "GET /api/tasks",
    "GET /api/tasks/:id",
    "POST /api/tasks",
    "PUT /api/tasks/:id",
    "DELETE /api/tasks/:id",
]


class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "Internal server error"
    error_type = "ServerError"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.error
        super().__init__(self.message)

    def details(self) -> dict:
        return {"message": self.message, "type": self.error_type}


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Validation failed"
    error_type = "ValidationError"

    def __init__(self, violations: List[Violation]):
        super().__init__("Please check the provided data and try again")
        self.violations = violations

    def details(self) -> dict:
        details = super().details()
        details["validationErrors"] = [v.model_dump() for v in self.violations]
        return details


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Task not found"
    error_type = "NotFoundError"

    def __init__(self, task_id: str):
        super().__init__(f"No task found with id {task_id}")
        self.task_id = task_id


class CastError(AppError):
    # 400: c'est le client qui a envoyé un id mal formé
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Invalid task ID format"
    error_type = "CastError"

    def __init__(self, value):
        super().__init__(f"Invalid ID format: {value}")
        self.value = value


class DuplicateKeyError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Duplicate field value"
    error_type = "DuplicateKeyError"

    def __init__(self, message: str = "A resource with this value already exists"):
        super().__init__(message)


def error_envelope(error: str, details: dict) -> dict:
    return {"error": error, "details": details}


def _respond(status_code: int, error: str, details: dict) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=error_envelope(error, details))


async def app_error_handler(request: Request, exc: AppError):
    logger.warning(f"{request.method} {request.url.path} -> {exc.error_type}: {exc.message}")
    return _respond(exc.status_code, exc.error, exc.details())


async def request_validation_handler(request: Request, exc: RequestValidationError):
    # corps JSON illisible ou mal typé avant même d'atteindre le service
    violations = [
        Violation(
            field=".".join(str(p) for p in err.get("loc", ())[1:]) or "body",
            message=err.get("msg", "Invalid value"),
            value=err.get("input"),
        )
        for err in exc.errors()
    ]
    return await app_error_handler(request, ValidationError(violations))


async def integrity_error_handler(request: Request, exc: IntegrityError):
    return await app_error_handler(request, DuplicateKeyError())


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        logger.warning(f"Route not found: {request.method} {request.url.path}")
        return _respond(status.HTTP_404_NOT_FOUND, "Route not found", {
            "message": f"The requested route {request.url.path} does not exist",
            "type": "NotFoundError",
            "availableRoutes": AVAILABLE_ROUTES,
        })
    if exc.status_code == status.HTTP_400_BAD_REQUEST:
        # corps illisible (encodage, multipart...) rejeté par Starlette
        violation = Violation(field="body", message=str(exc.detail), value=None)
        return await app_error_handler(request, ValidationError([violation]))
    return _respond(exc.status_code, str(exc.detail), {"message": str(exc.detail), "type": "ServerError"})


async def server_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    if settings.is_production:
        details = {"message": "Something went wrong on our end", "type": "ServerError"}
    else:
        details = {
            "message": str(exc) or "Server Error",
            "type": "ServerError",
            "stack": "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
        }
    return _respond(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", details)


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, server_error_handler)
