"""
SeaFood Delivery Backend — Shared Schema Pieces
================================================

What:  The response envelope, the error model, the health model and the
       Money type used by every resource module.

Envelope:
    Every response is `{"success": bool, "message"?: str, ...payload}`.
    Resource envelopes subclass Envelope and add their payload fields.
"""

from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

from seafood.services.money import to_money

# Decimal in Python, rounded-to-cents JSON number on the wire
Money = Annotated[
    Decimal,
    PlainSerializer(lambda v: float(to_money(v)), return_type=float, when_used="json"),
]


class CamelModel(BaseModel):
    """Base for every API model: camelCase aliases, ORM attribute loading."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Envelope(CamelModel):
    success: bool = Field(default=True, description="Whether the operation succeeded")
    message: Optional[str] = Field(default=None, description="Human-readable outcome")


class ErrorResponse(BaseModel):
    """
    Error envelope returned by the global exception handlers.

    Example:
        {
            "success": false,
            "error": "insufficient_balance",
            "message": "Insufficient balance. Available: 105.00",
            "details": {"available": 105.0, "requested": 200.0},
            "request_id": "a1b2c3d4"
        }
    """

    success: bool = Field(default=False)
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
