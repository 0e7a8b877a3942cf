"""Tests for application configuration management."""

import os
from datetime import date
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from liquidador.config import (
    Settings,
    get_global_settings,
    get_settings,
    reset_global_settings,
)
from liquidador.models.parameters import LiquidationParameters


class TestSettings:
    """Test cases for Settings class."""

    def test_settings_loads_from_env_file(self, tmp_path):
        """Test that settings can load from a .env file."""
        env_file = tmp_path / ".env"
        env_file.write_text(
            "APP_ENV=production\n"
            "SECRET_KEY=test-secret-key-123\n"
            "STORAGE_TYPE=sql\n"
            "DB_URL=sqlite:///test.db\n"
            "LOG_LEVEL=debug\n"
            "LIQUIDATION_CUTOFF_YEAR=2022\n"
        )

        with patch.dict(os.environ, {}, clear=True):
            settings = get_settings(str(env_file))

        assert settings.app_env == "production"
        assert settings.secret_key == "test-secret-key-123"
        assert settings.storage_type == "sql"
        assert settings.db_url == "sqlite:///test.db"
        assert settings.log_level == "DEBUG"
        assert settings.liquidation_cutoff_year == 2022

    def test_defaults(self):
        """Test default values of the liquidation settings."""
        with patch.dict(os.environ, {"SECRET_KEY": "valid-secret-key-123"}, clear=True):
            settings = Settings(_env_file=None)

        assert settings.app_env == "development"
        assert settings.storage_type == "local"
        assert settings.include_bonus_mesadas is True
        assert settings.historical_number_locale == "es_CO"
        assert settings.sharing_split_strategy == "prorated"
        assert settings.fixed_split_date == date(2014, 6, 13)
        assert settings.fixed_split_before_count == 11
        assert settings.fixed_split_after_count == 3
        assert settings.certificado_start_year == 2003
        assert settings.liquidation_cutoff_year is None
        assert settings.reference_table_path is None

    def test_missing_secret_key_raises_exception(self):
        """Test that missing SECRET_KEY raises ValidationError."""
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValidationError) as exc_info:
                Settings(_env_file=None)

            assert "SECRET_KEY" in str(exc_info.value)

    def test_placeholder_secret_key_raises_exception(self):
        """Test that placeholder SECRET_KEY raises ValidationError."""
        with patch.dict(
            os.environ,
            {"SECRET_KEY": "your-secret-key-here-change-in-production"},
            clear=True,
        ):
            with pytest.raises(ValidationError) as exc_info:
                Settings(_env_file=None)

            assert "SECRET_KEY must be set to a secure value" in str(exc_info.value)

    def test_app_env_validation(self):
        """Test APP_ENV validation."""
        with patch.dict(
            os.environ,
            {"SECRET_KEY": "valid-secret-key-123", "APP_ENV": "invalid-env"},
            clear=True,
        ):
            with pytest.raises(ValidationError) as exc_info:
                Settings(_env_file=None)

            assert "APP_ENV must be one of" in str(exc_info.value)

    def test_storage_type_validation(self):
        """Test STORAGE_TYPE validation."""
        with patch.dict(
            os.environ,
            {"SECRET_KEY": "valid-secret-key-123", "STORAGE_TYPE": "s3"},
            clear=True,
        ):
            with pytest.raises(ValidationError) as exc_info:
                Settings(_env_file=None)

            assert "STORAGE_TYPE must be one of" in str(exc_info.value)

    @pytest.mark.parametrize(
        "name,value,message",
        [
            ("HISTORICAL_NUMBER_LOCALE", "fr_FR", "HISTORICAL_NUMBER_LOCALE must be one of"),
            ("HISTORICAL_VALUE_FIELD", "middle", "HISTORICAL_VALUE_FIELD must be one of"),
            ("SHARING_SPLIT_STRATEGY", "weekly", "SHARING_SPLIT_STRATEGY must be one of"),
            ("LOG_LEVEL", "VERBOSE", "LOG_LEVEL must be one of"),
        ],
    )
    def test_liquidation_setting_validation(self, name, value, message):
        """Test validation of the liquidation settings."""
        with patch.dict(
            os.environ, {"SECRET_KEY": "valid-secret-key-123", name: value}, clear=True
        ):
            with pytest.raises(ValidationError) as exc_info:
                Settings(_env_file=None)

            assert message in str(exc_info.value)

    def test_to_liquidation_parameters(self):
        """Test that settings produce the immutable engine parameters."""
        with patch.dict(
            os.environ,
            {
                "SECRET_KEY": "valid-secret-key-123",
                "INCLUDE_BONUS_MESADAS": "false",
                "SHARING_SPLIT_STRATEGY": "fixed",
                "HISTORICAL_NUMBER_LOCALE": "en_US",
                "LIQUIDATION_CUTOFF_YEAR": "2019",
            },
            clear=True,
        ):
            parameters = Settings(_env_file=None).to_liquidation_parameters()

        assert isinstance(parameters, LiquidationParameters)
        assert parameters.include_bonus_mesadas is False
        assert parameters.mesadas_per_year == 12
        assert parameters.sharing_split_strategy == "fixed"
        assert parameters.historical_number_locale == "en_US"
        assert parameters.resolve_cutoff_year() == 2019

        with pytest.raises(ValidationError):
            parameters.cutoff_year = 2020


class TestGlobalSettings:
    """Test cases for the lazily created global settings."""

    def test_global_settings_are_cached(self):
        """Test that the global instance is reused until reset."""
        first = get_global_settings()
        assert get_global_settings() is first

        reset_global_settings()
        assert get_global_settings() is not first


class TestLiquidationParameters:
    """Test cases for LiquidationParameters."""

    def test_cutoff_defaults_to_current_year(self):
        """Test that a missing cutoff resolves to the current year."""
        from datetime import datetime

        assert LiquidationParameters().resolve_cutoff_year() == datetime.now().year

    def test_mesadas_per_year(self):
        """Test 14 mesadas with bonuses and 12 without."""
        assert LiquidationParameters().mesadas_per_year == 14
        assert LiquidationParameters(include_bonus_mesadas=False).mesadas_per_year == 12

    def test_invalid_cutoff_year(self):
        """Test that a cutoff before the reference data is rejected."""
        with pytest.raises(ValidationError):
            LiquidationParameters(cutoff_year=1900)
