"""
Application settings with Pydantic v2 validation.

Loads configuration from environment variables with sensible defaults.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BillingSettings(BaseSettings):
    """Billing and tax configuration."""

    model_config = SettingsConfigDict(env_prefix="BILLING_")

    currency_code: str = "INR"
    currency_symbol: str = "₹"

    # Flat IGST rate applied on the invoice tax table
    default_tax_rate: float = 18.0

    bill_number_prefix: str = "INV"

    # Idle billing sessions with an empty draft are dropped after this long
    session_idle_minutes: int = Field(default=60, ge=1)

    @field_validator("default_tax_rate")
    @classmethod
    def check_tax_rate(cls, v: float) -> float:
        if v < 0 or v > 100:
            raise ValueError("default_tax_rate must be between 0 and 100")
        return v


class PdfSettings(BaseSettings):
    """Invoice PDF rendering configuration."""

    model_config = SettingsConfigDict(env_prefix="PDF_")

    title: str = "Tax Invoice"
    footer_text: str = "This is a Computer Generated Invoice"

    # TTF font with the rupee glyph; core fonts are used when empty
    unicode_font_path: str = ""
    # Optional bold face of the same font, used for bold non-latin-1 text
    unicode_bold_font_path: str = ""


class ExportSettings(BaseSettings):
    """Invoice export configuration."""

    model_config = SettingsConfigDict(env_prefix="EXPORT_")

    output_dir: Path = Path("data/invoices")
    print_command: list[str] = ["lp"]
    print_timeout: int = 30  # seconds


class IssuerSettings(BaseSettings):
    """Business profile printed on every invoice."""

    model_config = SettingsConfigDict(env_prefix="ISSUER_")

    business_name: str = "My Business"
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    state_code: str = "09"
    tax_id: str = ""
    phone: str = ""
    email: str = ""
    bank_name: str = ""
    account_number: str = ""
    swift_code: str = ""


class APISettings(BaseSettings):
    """API server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["*"]


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Billing Service"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Sub-settings
    billing: BillingSettings = Field(default_factory=BillingSettings)
    pdf: PdfSettings = Field(default_factory=PdfSettings)
    export: ExportSettings = Field(default_factory=ExportSettings)
    issuer: IssuerSettings = Field(default_factory=IssuerSettings)
    api: APISettings = Field(default_factory=APISettings)


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
