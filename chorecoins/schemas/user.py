"""User and settings schemas."""

from pydantic import BaseModel, Field

from chorecoins.utils.money import NonNegativeMoney


class RegisterRequest(BaseModel):
    user_id: str = Field(..., min_length=1, max_length=128)
    username: str | None = Field(default=None, max_length=128)


class SettingsUpdateRequest(BaseModel):
    """Partial settings update; ``None`` leaves a setting unchanged."""

    complete_award: NonNegativeMoney | None = None
    uncomplete_fine: NonNegativeMoney | None = None
    auto_reset: bool | None = None
