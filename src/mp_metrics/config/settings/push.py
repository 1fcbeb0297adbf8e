"""Config settings – PushSettings."""
from __future__ import annotations

import dataclasses
from typing import ClassVar

from mp_metrics.config.settings.base import Settings
from mp_metrics.config.validation import InvalidSettingValueError, MissingRequiredSettingError
from mp_metrics.kernel.errors import InvalidNameError

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


@dataclasses.dataclass
class PushSettings(Settings):
    """Where and how often the registry is pushed.

    Environment variables (all optional)::

        MP_METRICS_GATEWAY_URL=http://pushgateway:9091
        MP_METRICS_JOB=batch_importer
        MP_METRICS_GROUPING=instance=host-1,region=eu
        MP_METRICS_INTERVAL_SECONDS=15
        MP_METRICS_TIMEOUT_SECONDS=10
        MP_METRICS_METRIC_PREFIX=importer_
        MP_METRICS_LOG_LEVEL=INFO
    """

    _prefix: ClassVar[str] = "MP_METRICS"

    gateway_url: str = ""
    job: str = ""
    grouping: list[str] = dataclasses.field(default_factory=list)
    interval_seconds: float = 15.0
    timeout_seconds: float = 10.0
    metric_prefix: str = ""
    log_level: str = "INFO"

    def _validate(self) -> None:
        if self.interval_seconds <= 0:
            raise InvalidSettingValueError(self.env_key("interval_seconds"), self.interval_seconds, "must be positive")
        if self.timeout_seconds <= 0:
            raise InvalidSettingValueError(self.env_key("timeout_seconds"), self.timeout_seconds, "must be positive")
        if self.log_level.upper() not in _LOG_LEVELS:
            raise InvalidSettingValueError(self.env_key("log_level"), self.log_level, f"must be one of {sorted(_LOG_LEVELS)}")
        from mp_metrics.registry.definition import validate_prefix

        try:
            validate_prefix(self.metric_prefix)
        except InvalidNameError as exc:
            raise InvalidSettingValueError(self.env_key("metric_prefix"), self.metric_prefix, exc.reason, cause=exc) from exc
        self.grouping_labels()

    def grouping_labels(self) -> dict[str, str]:
        """Parse ``grouping`` (``["key=value", ...]``) into a dict."""
        labels: dict[str, str] = {}
        for pair in self.grouping:
            key, sep, value = pair.partition("=")
            key = key.strip()
            if not sep or not key:
                raise InvalidSettingValueError(self.env_key("grouping"), pair, "expected key=value")
            labels[key] = value.strip()
        return labels

    def push_url(self) -> str:
        """Full Pushgateway URL for ``job`` and the grouping labels."""
        if not self.gateway_url:
            raise MissingRequiredSettingError(self.env_key("gateway_url"))
        if not self.job:
            raise MissingRequiredSettingError(self.env_key("job"))
        from mp_metrics.push.grouping import build_push_url

        return build_push_url(self.gateway_url, self.job, self.grouping_labels())


__all__ = ["PushSettings"]
