"""
Unit tests for wastebank_impact/config.py

Environment variables are cleared for every test so a developer's shell
cannot leak into the results.
"""
import pytest

from wastebank_impact.config import DEFAULT_SETTINGS, Settings, get_settings
from wastebank_impact.emission_factors import EMISSION_FACTORS

ENV_VARS = (
    "WASTEBANK_TRANSPORT_EMISSION_FACTOR",
    "WASTEBANK_VEHICLE_CAPACITY_KG",
    "WASTEBANK_DEFAULT_DISTANCE_KM",
    "WASTEBANK_CREDIT_RATE",
    "WASTEBANK_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestGetSettings:

    def test_defaults(self):
        settings = get_settings()
        assert settings.transport_emission_factor == 0.0000191
        assert settings.vehicle_capacity_kg == 2500.0
        assert settings.default_distance_km == 5.0
        assert settings.credit_rate == 0.001
        assert settings.log_level == "WARNING"

    def test_overrides_from_env(self, monkeypatch):
        monkeypatch.setenv("WASTEBANK_VEHICLE_CAPACITY_KG", "1000")
        monkeypatch.setenv("WASTEBANK_CREDIT_RATE", " 0.01 ")
        settings = get_settings()
        assert settings.vehicle_capacity_kg == 1000.0
        assert settings.credit_rate == 0.01

    def test_empty_value_ignored(self, monkeypatch):
        monkeypatch.setenv("WASTEBANK_DEFAULT_DISTANCE_KM", "")
        assert get_settings().default_distance_km == 5.0

    def test_non_number_raises(self, monkeypatch):
        monkeypatch.setenv("WASTEBANK_TRANSPORT_EMISSION_FACTOR", "lots")
        with pytest.raises(EnvironmentError, match="must be a number"):
            get_settings()

    def test_negative_raises(self, monkeypatch):
        monkeypatch.setenv("WASTEBANK_DEFAULT_DISTANCE_KM", "-5")
        with pytest.raises(EnvironmentError, match="must not be negative"):
            get_settings()

    def test_zero_capacity_raises(self, monkeypatch):
        monkeypatch.setenv("WASTEBANK_VEHICLE_CAPACITY_KG", "0")
        with pytest.raises(EnvironmentError, match="greater than 0"):
            get_settings()

    def test_log_level_argument_wins(self, monkeypatch):
        monkeypatch.setenv("WASTEBANK_LOG_LEVEL", "error")
        assert get_settings().log_level == "ERROR"
        assert get_settings(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level_raises(self, monkeypatch):
        monkeypatch.setenv("WASTEBANK_LOG_LEVEL", "chatty")
        with pytest.raises(EnvironmentError, match="Unknown log level"):
            get_settings()


class TestSettings:

    def test_default_factor_table_is_read_only_copy(self):
        assert dict(DEFAULT_SETTINGS.emission_factors) == EMISSION_FACTORS
        with pytest.raises(TypeError):
            DEFAULT_SETTINGS.emission_factors["aluminium"] = 0.0

    def test_frozen(self):
        with pytest.raises(AttributeError):
            DEFAULT_SETTINGS.credit_rate = 1.0

    def test_custom_values(self):
        settings = Settings(vehicle_capacity_kg=100.0, emission_factors={"x": 1.0})
        assert settings.vehicle_capacity_kg == 100.0
        assert settings.emission_factors == {"x": 1.0}
