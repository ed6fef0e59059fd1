"""
Tests for priobus.config — bus settings and environment overrides.
"""

from dataclasses import FrozenInstanceError

import pytest

from priobus.config import BusConfig


class TestBusConfig:
    def test_defaults(self):
        config = BusConfig()
        assert config.stop_on_first_failure is False
        assert config.strict_unregister is False
        assert config.log_handler_failures is True

    def test_frozen(self):
        config = BusConfig()
        with pytest.raises(FrozenInstanceError):
            config.stop_on_first_failure = True

    def test_rejects_non_bool(self):
        with pytest.raises(ValueError, match="stop_on_first_failure"):
            BusConfig(stop_on_first_failure="yes")


class TestFromEnv:
    def test_empty_env_is_default(self):
        assert BusConfig.from_env({}) == BusConfig()

    def test_overrides(self):
        config = BusConfig.from_env({
            "PRIOBUS_STOP_ON_FIRST_FAILURE": "true",
            "PRIOBUS_STRICT_UNREGISTER": "1",
            "PRIOBUS_LOG_HANDLER_FAILURES": "off",
        })
        assert config == BusConfig(
            stop_on_first_failure=True,
            strict_unregister=True,
            log_handler_failures=False,
        )

    def test_case_and_whitespace(self):
        config = BusConfig.from_env({"PRIOBUS_STRICT_UNREGISTER": "  YES "})
        assert config.strict_unregister is True

    def test_invalid_value(self):
        with pytest.raises(ValueError, match="PRIOBUS_STOP_ON_FIRST_FAILURE"):
            BusConfig.from_env({"PRIOBUS_STOP_ON_FIRST_FAILURE": "maybe"})

    def test_custom_prefix(self):
        config = BusConfig.from_env(
            {"APP_BUS_STOP_ON_FIRST_FAILURE": "1"}, prefix="APP_BUS_"
        )
        assert config.stop_on_first_failure is True

    def test_reads_os_environ(self, monkeypatch):
        monkeypatch.setenv("PRIOBUS_STRICT_UNREGISTER", "true")
        assert BusConfig.from_env().strict_unregister is True
