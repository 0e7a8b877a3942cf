"""Environment-driven settings for the liquidation service."""

from datetime import date
from typing import Optional

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from liquidador.models.parameters import LiquidationParameters

PLACEHOLDER_SECRET_KEY = "your-secret-key-here-change-in-production"

CHOICES = {
    "app_env": {"development", "testing", "production"},
    "log_level": {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"},
    "storage_type": {"local", "sql"},
    "historical_number_locale": {"es_CO", "en_US"},
    "historical_value_field": {"before", "after"},
    "sharing_split_strategy": {"prorated", "fixed"},
}


class Settings(BaseSettings):
    """Settings read from the environment or a .env file."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    app_env: str = Field(default="development", alias="APP_ENV")
    secret_key: str = Field(..., alias="SECRET_KEY")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Where pensioner documents live
    storage_type: str = Field(default="local", alias="STORAGE_TYPE")
    storage_base_path: str = Field(default="storage", alias="STORAGE_BASE_PATH")
    db_url: str = Field(default="sqlite:///liquidador.db", alias="DB_URL")

    # Reference data
    reference_table_path: Optional[str] = Field(
        default=None, alias="REFERENCE_TABLE_PATH"
    )

    # Liquidation parameters
    include_bonus_mesadas: bool = Field(default=True, alias="INCLUDE_BONUS_MESADAS")
    historical_number_locale: str = Field(
        default="es_CO", alias="HISTORICAL_NUMBER_LOCALE"
    )
    historical_value_field: str = Field(default="after", alias="HISTORICAL_VALUE_FIELD")
    sharing_split_strategy: str = Field(
        default="prorated", alias="SHARING_SPLIT_STRATEGY"
    )
    fixed_split_date: date = Field(default=date(2014, 6, 13), alias="FIXED_SPLIT_DATE")
    fixed_split_before_count: int = Field(
        default=11, ge=0, alias="FIXED_SPLIT_BEFORE_COUNT"
    )
    fixed_split_after_count: int = Field(
        default=3, ge=0, alias="FIXED_SPLIT_AFTER_COUNT"
    )
    certificado_start_year: int = Field(
        default=2003, ge=1982, alias="CERTIFICADO_START_YEAR"
    )
    liquidation_cutoff_year: Optional[int] = Field(
        default=None, ge=1982, le=2100, alias="LIQUIDATION_CUTOFF_YEAR"
    )

    @field_validator("secret_key")
    @classmethod
    def validate_secret_key(cls, v):
        """Reject an empty or placeholder SECRET_KEY."""
        if not v or v == PLACEHOLDER_SECRET_KEY:
            raise ValueError("SECRET_KEY must be set to a secure value")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        level = v.upper()
        if level not in CHOICES["log_level"]:
            raise ValueError(f"LOG_LEVEL must be one of {CHOICES['log_level']}")
        return level

    @field_validator(
        "app_env",
        "storage_type",
        "historical_number_locale",
        "historical_value_field",
        "sharing_split_strategy",
    )
    @classmethod
    def validate_choice(cls, v, info: ValidationInfo):
        """Check enumerated settings against their allowed values."""
        allowed = CHOICES[info.field_name]
        if v not in allowed:
            raise ValueError(f"{info.field_name.upper()} must be one of {allowed}")
        return v

    def to_liquidation_parameters(self) -> LiquidationParameters:
        """Build the immutable parameter object injected into the engine."""
        return LiquidationParameters(
            include_bonus_mesadas=self.include_bonus_mesadas,
            historical_number_locale=self.historical_number_locale,
            historical_value_field=self.historical_value_field,
            sharing_split_strategy=self.sharing_split_strategy,
            fixed_split_date=self.fixed_split_date,
            fixed_split_before_count=self.fixed_split_before_count,
            fixed_split_after_count=self.fixed_split_after_count,
            certificado_start_year=self.certificado_start_year,
            cutoff_year=self.liquidation_cutoff_year,
        )


def get_settings(env_file: Optional[str] = None) -> Settings:
    """Load settings, optionally from a specific .env file."""
    if env_file is not None:
        return Settings(_env_file=env_file)
    return Settings()


# Created on first use by get_global_settings()
_settings: Optional[Settings] = None


def get_global_settings() -> Settings:
    """Return the process-wide settings, loading them once."""
    global _settings
    if _settings is None:
        _settings = get_settings()
    return _settings


def reset_global_settings() -> None:
    """Forget the cached settings so the next call reloads them."""
    global _settings
    _settings = None
