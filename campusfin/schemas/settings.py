"""User settings schemas."""
from pydantic import BaseModel, Field
from typing import Optional


class SettingsUpdate(BaseModel):
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    safe_threshold: Optional[float] = None
    tight_threshold: Optional[float] = None
    enable_warnings: Optional[bool] = None
    warning_threshold: Optional[float] = None
    default_payment_method: Optional[str] = Field(None, max_length=50)
    default_account_id: Optional[str] = None


class SettingsResponse(BaseModel):
    user_id: str
    currency: str
    safe_threshold: Optional[float] = None
    tight_threshold: Optional[float] = None
    enable_warnings: bool
    warning_threshold: Optional[float] = None
    default_payment_method: Optional[str] = None
    default_account_id: Optional[str] = None

    class Config:
        from_attributes = True
