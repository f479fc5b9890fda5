"""Balance and balance-log schemas."""

from pydantic import BaseModel, Field

from chorecoins.utils.money import Money


class BalanceSetRequest(BaseModel):
    """Request body for overwriting a balance with an explanation."""

    balance: Money
    reason: str = Field(..., min_length=1, max_length=500)


class BalanceAdjustRequest(BaseModel):
    """Request body for applying a signed delta directly."""

    amount: Money
    reason: str = Field(..., min_length=1, max_length=500)


class BackupRequest(BaseModel):
    """Restore the balance to a log point and drop every later log."""

    log_id: str = Field(..., min_length=1)
    target_balance: Money
