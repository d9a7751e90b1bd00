"""
Application configuration using Pydantic Settings.
"""

from __future__ import annotations

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from ``CREDIT_LEDGER_*`` environment variables or ``.env``."""

    app_name: str = "credit_ledger"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    # Ledger
    currency: str = "LKR"
    balance_update_max_attempts: int = Field(default=5, ge=1)

    # Access
    allowed_emails: List[str] = []

    # Notifications
    notifications_enabled: bool = True
    business_name: str = "DP Communication"
    emailjs_api_url: str = "https://api.emailjs.com/api/v1.0/email/send"
    emailjs_service_id: str = ""
    emailjs_public_key: str = ""
    bill_template_id: str = "bill"
    payment_template_id: str = "payment_confirmation"
    notification_timeout_seconds: float = 10.0

    model_config = SettingsConfigDict(env_prefix="CREDIT_LEDGER_", env_file=".env")
