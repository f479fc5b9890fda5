"""Reset request schemas."""

from pydantic import BaseModel

from chorecoins.domain.activity import RepeatType


class ResetRequest(BaseModel):
    reset_type: RepeatType = RepeatType.DAILY
