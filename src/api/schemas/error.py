"""Error envelope returned by every failing API call."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorDetail(BaseModel):
    code: str = Field(description="Machine-readable code, e.g. ELEMENT_NOT_FOUND")
    message: str
    details: Optional[Dict[str, Any]] = Field(None, description="Offending values and accepted alternatives")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ErrorResponse(BaseModel):
    model_config = ConfigDict(json_schema_extra={
        "example": {
            "error": {
                "code": "INVALID_LAYER",
                "message": "Map layer 'thermal' is not supported",
                "details": {"layer": "thermal", "valid_layers": ["satellite", "ndvi", "drone"]},
                "timestamp": "2025-09-28T14:30:00Z",
            },
            "request_id": "3f2a9c0e5b7d4e1f8a6c2b9d0e4f7a1c",
        }
    })

    error: ErrorDetail
    request_id: Optional[str] = None


class ValidationErrorResponse(ErrorResponse):
    """Request body or query failed pydantic validation."""

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Request validation failed",
                "details": {"error_count": 1},
                "timestamp": "2025-09-28T14:30:00Z",
            },
            "validation_errors": [
                {"field": "ratio", "message": "Input should be less than or equal to 1", "type": "less_than_equal"}
            ],
            "request_id": "3f2a9c0e5b7d4e1f8a6c2b9d0e4f7a1c",
        }
    })

    validation_errors: List[Dict[str, Any]] = Field(description="One entry per offending field")
