"""
Exception handlers - every failure leaves the API in one JSON envelope

    {"error": {"code", "message", "details", "timestamp"}, "request_id": ...}

Request validation failures add a ``validation_errors`` list with one entry
per offending field.
"""

import uuid
from typing import Any, Dict, List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from api.schemas.error import ErrorDetail, ErrorResponse, ValidationErrorResponse
from models.enums import LogCategory, MapLayer
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.API)


class DomainError(Exception):
    """Error a route raises on purpose; ``code`` and ``status_code`` reach the client."""

    code = "DOMAIN_ERROR"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = details


class ServiceUnavailableError(DomainError):
    code = "SERVICE_UNAVAILABLE"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self, what: str):
        super().__init__(f"{what} not initialized. Dashboard may still be starting.", component=what)


class ElementNotFoundError(DomainError):
    code = "ELEMENT_NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, element_id: str):
        super().__init__(f"Display element '{element_id}' not found", element_id=element_id)


class ChartNotFoundError(DomainError):
    code = "CHART_NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, chart_id: str, valid_charts: List[str]):
        super().__init__(f"Chart '{chart_id}' not found", chart_id=chart_id, valid_charts=valid_charts)


class InvalidPeriodError(DomainError):
    code = "INVALID_PERIOD"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY

    def __init__(self, days: int, reason: str):
        super().__init__(f"Period of {days} days is not supported", days=days, reason=reason)


class InvalidLayerError(DomainError):
    code = "INVALID_LAYER"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY

    def __init__(self, layer: str):
        super().__init__(
            f"Map layer '{layer}' is not supported",
            layer=layer,
            valid_layers=[m.value for m in MapLayer],
        )


class InvalidVisibilityError(DomainError):
    code = "INVALID_VISIBILITY"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY

    def __init__(self, element_id: str, reason: str):
        super().__init__(f"Invalid visibility report for '{element_id}'", element_id=element_id, reason=reason)


def _json(status_code: int, body: BaseModel) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def _field_path(loc) -> str:
    # loc starts with the source ("body", "query", "path")
    return ".".join(str(part) for part in loc[1:]) or str(loc[0])


def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def on_validation_error(request: Request, exc: RequestValidationError):
        request_id = uuid.uuid4().hex
        problems = [
            {"field": _field_path(e["loc"]), "message": e["msg"], "type": e["type"]}
            for e in exc.errors()
        ]
        log.warn(
            f"{request.method} {request.url.path} rejected",
            request_id=request_id,
            fields=", ".join(p["field"] for p in problems),
        )
        return _json(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            ValidationErrorResponse(
                error=ErrorDetail(
                    code="VALIDATION_ERROR",
                    message="Request validation failed",
                    details={"error_count": len(problems)},
                ),
                validation_errors=problems,
                request_id=request_id,
            ),
        )

    @app.exception_handler(DomainError)
    async def on_domain_error(request: Request, exc: DomainError):
        request_id = uuid.uuid4().hex
        log.warn(f"{request.method} {request.url.path} -> {exc.code}", request_id=request_id, reason=exc.message)
        return _json(
            exc.status_code,
            ErrorResponse(
                error=ErrorDetail(code=exc.code, message=exc.message, details=exc.details),
                request_id=request_id,
            ),
        )

    @app.exception_handler(Exception)
    async def on_unexpected_error(request: Request, exc: Exception):
        request_id = uuid.uuid4().hex
        log.error(
            f"{request.method} {request.url.path} crashed: {exc}",
            request_id=request_id,
            exception_type=type(exc).__name__,
        )
        return _json(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            ErrorResponse(
                error=ErrorDetail(
                    code="INTERNAL_SERVER_ERROR",
                    message="An unexpected error occurred. Please try again.",
                    details={"request_id": request_id},
                ),
                request_id=request_id,
            ),
        )
