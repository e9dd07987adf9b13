"""
SeaFood Delivery Backend — Custom Exception Hierarchy
======================================================

What:  Application-specific exceptions for every recoverable error scenario.
Why:   Services raise typed errors; global handlers in main.py turn them into
       the uniform `{success: false, ...}` envelope with the right HTTP status.
How:   Each exception carries a user-facing message and an optional context
       dict. Context is logged, and selectively exposed as `details`.

Exception Hierarchy:
    SeafoodError (base)
    ├── ValidationError           → 400 Bad Request
    ├── InvalidAmountError        → 400 Bad Request
    ├── InsufficientBalanceError  → 400 Bad Request (carries available balance)
    ├── NotFoundError             → 404 Not Found
    ├── InvalidTransitionError    → 409 Conflict
    └── StoreUnavailableError     → 500 Internal Server Error

None of these are fatal to the process, and the core never retries on them.
"""

from decimal import Decimal
from typing import Any, Dict, Optional


class SeafoodError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(SeafoodError):
    """
    Raised when client input fails a business rule (not a schema rule).

    Schema validation is handled by FastAPI/pydantic with 422. This one covers
    things like a duplicate driver email.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(SeafoodError):
    """Raised when a referenced order, driver or other record does not exist."""

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource.capitalize()} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class InvalidTransitionError(SeafoodError):
    """
    Raised when an order status change is not one of the allowed edges.

    Carries both ends of the attempted edge so the client can tell
    "already delivered" apart from "skipped a step".
    """

    def __init__(
        self,
        current: str,
        target: str,
        reason: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"Cannot move order from '{current}' to '{target}'"
        if reason:
            message = f"{message}: {reason}"
        ctx = context or {}
        ctx.update({"current_status": current, "target_status": target})
        super().__init__(message=message, context=ctx)
        self.current = current
        self.target = target


class InvalidAmountError(SeafoodError):
    """Raised when a withdrawal amount is zero or negative."""

    def __init__(
        self,
        amount: Decimal,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["amount"] = str(amount)
        super().__init__(message="Withdrawal amount must be greater than zero", context=ctx)
        self.amount = amount


class InsufficientBalanceError(SeafoodError):
    """
    Raised when a withdrawal exceeds the driver's available balance.

    `available` is already rounded for display.
    """

    def __init__(
        self,
        available: Decimal,
        requested: Decimal,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"Insufficient balance. Available: {available}"
        ctx = context or {}
        ctx.update({"available": str(available), "requested": str(requested)})
        super().__init__(message=message, context=ctx)
        self.available = available
        self.requested = requested


class StoreUnavailableError(SeafoodError):
    """
    Raised when a Data Store call fails.

    The message returned to the client is always generic; the underlying
    driver error is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
