"""Unit tests for config settings & validation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

import pytest

from mp_metrics.config import (
    ConfigError,
    EnvSettingsLoader,
    InvalidSettingValueError,
    MissingRequiredSettingError,
    PushSettings,
    Settings,
)
from mp_metrics.registry import Registry


# ---------------------------------------------------------------------------
# Concrete settings class used across tests
# ---------------------------------------------------------------------------


@dataclass
class AppSettings(Settings):
    _prefix: ClassVar[str] = "APP"

    host: str = "localhost"
    port: int = 8080
    debug: bool = False
    allowed_origins: list[str] = field(default_factory=list)


@dataclass
class RequiredSettings(Settings):
    _prefix: ClassVar[str] = "REQ"

    token: str


# ---------------------------------------------------------------------------
# EnvSettingsLoader
# ---------------------------------------------------------------------------


class TestEnvSettingsLoader:
    def test_loads_from_process_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_HOST", "example.com")
        settings = EnvSettingsLoader().load(AppSettings)
        assert settings.host == "example.com"

    def test_loads_int(self) -> None:
        settings = EnvSettingsLoader({"APP_PORT": "9000"}).load(AppSettings)
        assert settings.port == 9000

    @pytest.mark.parametrize("raw", ["true", "True", "1", "yes", "on"])
    def test_loads_bool_true(self, raw: str) -> None:
        assert EnvSettingsLoader({"APP_DEBUG": raw}).load(AppSettings).debug is True

    @pytest.mark.parametrize("raw", ["false", "False", "0", "no", "off", ""])
    def test_loads_bool_false(self, raw: str) -> None:
        assert EnvSettingsLoader({"APP_DEBUG": raw}).load(AppSettings).debug is False

    def test_loads_list(self) -> None:
        settings = EnvSettingsLoader({"APP_ALLOWED_ORIGINS": "http://a.com, http://b.com,"}).load(AppSettings)
        assert settings.allowed_origins == ["http://a.com", "http://b.com"]

    def test_defaults_preserved_when_env_absent(self) -> None:
        settings = EnvSettingsLoader({}).load(AppSettings)
        assert settings == AppSettings()

    def test_bad_int_raises_invalid_value(self) -> None:
        with pytest.raises(InvalidSettingValueError) as exc_info:
            EnvSettingsLoader({"APP_PORT": "eighty"}).load(AppSettings)
        assert exc_info.value.setting_name == "APP_PORT"
        assert exc_info.value.value == "eighty"

    def test_bad_bool_raises_invalid_value(self) -> None:
        with pytest.raises(InvalidSettingValueError):
            EnvSettingsLoader({"APP_DEBUG": "maybe"}).load(AppSettings)

    def test_missing_required_setting(self) -> None:
        with pytest.raises(MissingRequiredSettingError) as exc_info:
            EnvSettingsLoader({}).load(RequiredSettings)
        assert exc_info.value.setting_name == "REQ_TOKEN"
        assert exc_info.value.code == "missing_required_setting"

    def test_required_setting_present(self) -> None:
        assert EnvSettingsLoader({"REQ_TOKEN": "abc"}).load(RequiredSettings).token == "abc"

    def test_invalid_value_keeps_cause_and_detail(self) -> None:
        with pytest.raises(InvalidSettingValueError) as exc_info:
            EnvSettingsLoader({"APP_PORT": "eighty"}).load(AppSettings)
        assert isinstance(exc_info.value.cause, ValueError)
        assert exc_info.value.detail == {"setting": "APP_PORT", "value": "eighty"}

    def test_env_key(self) -> None:
        assert AppSettings.env_key("allowed_origins") == "APP_ALLOWED_ORIGINS"
        assert PushSettings.env_key("job") == "MP_METRICS_JOB"

    def test_from_env(self) -> None:
        settings = AppSettings.from_env({"APP_HOST": "svc", "APP_DEBUG": "yes"})
        assert (settings.host, settings.debug) == ("svc", True)


# ---------------------------------------------------------------------------
# PushSettings
# ---------------------------------------------------------------------------


class TestPushSettings:
    def test_defaults(self) -> None:
        settings = EnvSettingsLoader({}).load(PushSettings)
        assert settings.gateway_url == ""
        assert settings.interval_seconds == 15.0
        assert settings.timeout_seconds == 10.0
        assert settings.metric_prefix == ""
        assert settings.log_level == "INFO"

    def test_loads_full_environment(self) -> None:
        environ = {
            "MP_METRICS_GATEWAY_URL": "http://pushgateway:9091",
            "MP_METRICS_JOB": "importer",
            "MP_METRICS_GROUPING": "region=eu,instance=host-1",
            "MP_METRICS_INTERVAL_SECONDS": "2.5",
            "MP_METRICS_TIMEOUT_SECONDS": "1",
            "MP_METRICS_METRIC_PREFIX": "importer_",
            "MP_METRICS_LOG_LEVEL": "debug",
        }
        settings = EnvSettingsLoader(environ).load(PushSettings)
        assert settings.interval_seconds == 2.5
        assert settings.timeout_seconds == 1.0
        assert settings.grouping_labels() == {"region": "eu", "instance": "host-1"}
        assert settings.push_url() == (
            "http://pushgateway:9091/metrics/job/importer/instance/host-1/region/eu"
        )

    @pytest.mark.parametrize("name", ["MP_METRICS_INTERVAL_SECONDS", "MP_METRICS_TIMEOUT_SECONDS"])
    def test_non_positive_durations_rejected(self, name: str) -> None:
        with pytest.raises(InvalidSettingValueError):
            EnvSettingsLoader({name: "0"}).load(PushSettings)

    def test_non_numeric_interval_rejected(self) -> None:
        with pytest.raises(InvalidSettingValueError) as exc_info:
            EnvSettingsLoader({"MP_METRICS_INTERVAL_SECONDS": "soon"}).load(PushSettings)
        assert exc_info.value.setting_name == "MP_METRICS_INTERVAL_SECONDS"

    def test_unknown_log_level_rejected(self) -> None:
        with pytest.raises(InvalidSettingValueError):
            PushSettings(log_level="loud")

    def test_invalid_metric_prefix_rejected(self) -> None:
        with pytest.raises(InvalidSettingValueError) as exc_info:
            PushSettings(metric_prefix="9lives_")
        assert exc_info.value.setting_name == "MP_METRICS_METRIC_PREFIX"

    def test_malformed_grouping_rejected(self) -> None:
        with pytest.raises(InvalidSettingValueError):
            PushSettings(grouping=["instance"])
        with pytest.raises(InvalidSettingValueError):
            PushSettings(grouping=["=value"])

    def test_all_validation_errors_are_config_errors(self) -> None:
        with pytest.raises(ConfigError):
            PushSettings(interval_seconds=-1)

    def test_push_url_requires_gateway(self) -> None:
        with pytest.raises(MissingRequiredSettingError) as exc_info:
            PushSettings(job="importer").push_url()
        assert exc_info.value.setting_name == "MP_METRICS_GATEWAY_URL"

    def test_push_url_requires_job(self) -> None:
        with pytest.raises(MissingRequiredSettingError) as exc_info:
            PushSettings(gateway_url="http://gw:9091").push_url()
        assert exc_info.value.setting_name == "MP_METRICS_JOB"

    def test_registry_from_settings_uses_prefix(self) -> None:
        registry = Registry.from_settings(PushSettings(metric_prefix="importer_"))
        assert registry.prefix == "importer_"
        registry.counter("rows_total").inc()
        assert "importer_rows_total 1\n" in registry.render_exposition()
