"""Custom exception hierarchy for the Chore Coins API."""

from __future__ import annotations

from typing import Any


class AppError(Exception):
    """Base application error with a stable machine-readable code."""

    def __init__(self, message: str, code: str, status_code: int = 400) -> None:
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error in the API standard shape."""
        return {"error": self.message, "code": self.code}


class InsufficientCoinsError(AppError):
    """Raised when a purchase is attempted below the spending floor."""

    def __init__(self, balance: Any, floor: Any) -> None:
        super().__init__(
            message=f"Not enough coins: balance {balance} is below {floor}",
            code="INSUFFICIENT_COINS",
        )


class NotFoundError(AppError):
    """Raised when a requested resource does not exist."""

    def __init__(self, resource: str) -> None:
        super().__init__(message=f"{resource} not found", code="NOT_FOUND", status_code=404)


class ConflictError(AppError):
    """Raised on duplicate records or failed conditional writes."""

    def __init__(self, reason: str, code: str = "CONFLICT") -> None:
        super().__init__(message=reason, code=code, status_code=409)


class UnauthorizedError(AppError):
    """Raised when the caller is not authenticated."""

    def __init__(self, reason: str = "Unauthorized") -> None:
        super().__init__(message=reason, code="UNAUTHORIZED", status_code=401)


class InvalidInputError(AppError):
    """Raised for request payload or parameter validation issues."""

    def __init__(self, reason: str) -> None:
        super().__init__(message=reason, code="INVALID_INPUT", status_code=422)


class StoreError(AppError):
    """Raised when the underlying item store request fails."""

    def __init__(self, reason: str, details: str | None = None) -> None:
        self.details = details
        super().__init__(message=reason, code="STORE_ERROR", status_code=502)

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        if self.details:
            payload["details"] = self.details
        return payload
