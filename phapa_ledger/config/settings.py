"""
Configuration Management for Pha Pa Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The event constants (goal, unit price, storage key) live next to the
API settings so every tunable value has one home.
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GeminiSettings(BaseSettings):
    """Gemini LLM configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    api_key: str = Field(
        ...,
        description="Gemini API key"
    )
    model_name: str = Field(
        default="gemini-3-flash-preview",
        description="Gemini model to use"
    )
    max_tokens: int = Field(
        default=1024,
        ge=100,
        le=8192,
        description="Maximum tokens in response"
    )
    temperature: float = Field(
        default=0.4,
        ge=0.0,
        le=1.0,
        description="Model temperature"
    )
    sample_size: int = Field(
        default=10,
        ge=1,
        le=100,
        description="How many recent entries to include in the prompt"
    )


class LedgerSettings(BaseSettings):
    """
    Event and storage settings.

    The goal target and unit price drive the progress bar and the
    "how many computers can we buy" projection.
    """

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Storage
    storage_path: str = Field(
        default="phapa_ledger.json",
        description="Path of the local key-value file"
    )
    storage_key: str = Field(
        default="phapa_transactions",
        description="Key of the slot holding the entry list"
    )

    # Event
    event_name: str = Field(
        default="ผ้าป่าจัดหาคอมพิวเตอร์เพื่อการศึกษา",
        description="Event title shown in headers and reports"
    )
    organizer: str = Field(
        default="โรงเรียนประจักษ์ศิลปาคม",
        description="Organizing school"
    )
    event_date: str = Field(
        default="12 เมษายน 2569",
        description="Event date as displayed"
    )
    currency_label: str = Field(
        default="บาท",
        description="Currency unit shown after amounts"
    )

    # Projection
    goal_target: Decimal = Field(
        default=Decimal("200000"),
        gt=0,
        description="Fundraising goal (net balance)"
    )
    unit_price: Decimal = Field(
        default=Decimal("20000"),
        gt=0,
        description="Price of one computer"
    )
    unit_name: str = Field(
        default="เครื่อง",
        description="Counting word for one unit"
    )

    @field_validator('storage_key')
    @classmethod
    def validate_storage_key(cls, v: str) -> str:
        """Storage key must not be blank."""
        if not v.strip():
            raise ValueError("storage_key cannot be blank")
        return v.strip()


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

    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for structured logs"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        level = v.upper()
        if level not in allowed:
            raise ValueError(f"Unknown log level: {v}. Allowed: {sorted(allowed)}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Note: sub-settings are loaded lazily so the ledger works
    # without a Gemini key configured

    @property
    def gemini(self) -> GeminiSettings:
        return GeminiSettings()

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, object]:
    """
    Validate all settings are properly configured.

    Returns a dict of {section_name: is_valid}, plus
    {section_name}_error entries for the sections that failed.
    """
    results: dict[str, object] = {}

    settings = get_settings()

    for name in ("gemini", "ledger", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
