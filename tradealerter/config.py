"""Configuration management for TradeAlerter."""

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ANR bulletin board
    anr_base_url: str = Field(default="https://ebb.anrpl.com")
    anr_lookback_days: int = Field(default=31)
    http_timeout_seconds: float = Field(default=15.0)

    # Location reference table
    location_csv_path: str = Field(default="data/anr_locations.csv")

    # Email Configuration (SMTP provider, e.g., SendGrid/SES/Gmail)
    smtp_host: Optional[str] = Field(default=None)
    smtp_port: int = Field(default=587)
    smtp_username: Optional[str] = Field(default=None)
    smtp_password: Optional[str] = Field(default=None)
    smtp_use_tls: bool = Field(default=True)
    email_from_address: Optional[str] = Field(default=None)
    email_to: Optional[str] = Field(
        default=None,
        description="Comma-separated recipient list for trading alerts",
    )
    email_subject_prefix: str = Field(default="TradeAlerter")

    # Bot Configuration
    log_level: str = Field(default="INFO")
    dry_run: bool = Field(default=False)
    log_json: bool = Field(default=False, description="Emit logs as JSON lines")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def email_configured(self) -> bool:
        """Whether enough SMTP settings are present to send email."""
        return bool(self.smtp_host and self.email_from_address and self.email_to)

    def validate_notifier_config(self) -> None:
        """Validate that the email notifier is properly configured."""
        missing = [
            key
            for key, value in {
                "SMTP_HOST": self.smtp_host,
                "EMAIL_FROM_ADDRESS": self.email_from_address,
                "EMAIL_TO": self.email_to,
            }.items()
            if not value
        ]
        if missing:
            raise ValueError(
                "Email notifier misconfigured; missing: " + ", ".join(missing)
            )

    def get_email_recipients(self) -> List[str]:
        """Return parsed recipient list for email notifications."""
        if not self.email_to:
            return []
        return [addr.strip() for addr in self.email_to.split(",") if addr.strip()]


# Global settings instance
settings = Settings()
