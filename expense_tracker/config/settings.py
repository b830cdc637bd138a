"""
Configuration Management for Expense Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see what external dependencies exist and
ensures all required configuration is validated at startup.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    credentials_path: str = Field(
        ...,
        description="Path to Google service account credentials JSON"
    )
    spreadsheet_id: str = Field(
        ...,
        description="ID of the Google Sheets spreadsheet to use"
    )

    # Sheet names within the spreadsheet
    expenses_sheet_name: str = Field(
        default="Expenses",
        description="Name of the sheet for expenses"
    )
    categories_sheet_name: str = Field(
        default="Categories",
        description="Name of the sheet for expense categories"
    )
    suppliers_sheet_name: str = Field(
        default="Suppliers",
        description="Name of the sheet for suppliers"
    )
    audit_sheet_name: str = Field(
        default="AuditLog",
        description="Name of the sheet for audit logs"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: str) -> str:
        """Warn if credentials file doesn't exist (but don't fail - might be mounted later)."""
        if not Path(v).exists():
            import warnings
            warnings.warn(
                f"Google credentials file not found at {v}. "
                "Make sure it exists before running the application."
            )
        return v


class AnimationSettings(BaseSettings):
    """Background particle animation configuration."""

    model_config = SettingsConfigDict(
        env_prefix="BACKGROUND_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    enabled: bool = Field(
        default=True,
        description="Show the animated particle background"
    )
    frame_rate: int = Field(
        default=60,
        ge=1,
        le=240,
        description="Frames per second for timer-driven schedulers"
    )
    background_color: str = Field(
        default="#FFFFFF",
        description="Color the render surface is cleared to"
    )
    gif_frames: int = Field(
        default=120,
        ge=1,
        le=1000,
        description="Number of frames rendered into the exported backdrop GIF"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Display
    currency_symbol: str = Field(
        default="$",
        max_length=3,
        description="Symbol shown in front of amounts"
    )
    refetch_interval_seconds: int = Field(
        default=5,
        ge=1,
        le=300,
        description="How often totals are refreshed in the UI"
    )

    # Add-expense form
    description_suggestion_limit: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="How many previous descriptions feed the suggestion list"
    )


class Settings(BaseSettings):
    """
    Combined settings object.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Sub-settings are loaded lazily to allow partial configuration

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def animation(self) -> AnimationSettings:
        return AnimationSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.google_sheets
        results["google_sheets"] = True
    except Exception as e:
        results["google_sheets"] = False
        results["google_sheets_error"] = str(e)

    try:
        _ = settings.animation
        results["animation"] = True
    except Exception as e:
        results["animation"] = False
        results["animation_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
