"""Timer and rollover defaults for the background jobs."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import time, timedelta, timezone

from .env import optional_env_int
from .errors import ConfigurationError

DEFAULT_PUBLISH_INTERVAL_SECONDS = 60
DEFAULT_AMBIENT_POLL_SECONDS = 60
DEFAULT_AMBIENT_MINUTE = 0
DEFAULT_CHART_CUTOVER_HOUR = 0
# Release times in the hub are entered in Moscow time.
DEFAULT_CHART_UTC_OFFSET_HOURS = 3


@dataclass(frozen=True, slots=True)
class SchedulerConfig:
    publish_interval_seconds: int = DEFAULT_PUBLISH_INTERVAL_SECONDS
    ambient_poll_seconds: int = DEFAULT_AMBIENT_POLL_SECONDS
    ambient_minute: int = DEFAULT_AMBIENT_MINUTE
    chart_cutover_hour: int = DEFAULT_CHART_CUTOVER_HOUR
    chart_utc_offset_hours: int = DEFAULT_CHART_UTC_OFFSET_HOURS

    def __post_init__(self) -> None:
        if self.publish_interval_seconds <= 0 or self.ambient_poll_seconds <= 0:
            raise ConfigurationError("Timer intervals must be positive")
        if not 0 <= self.ambient_minute < 60:
            raise ConfigurationError("Ambient minute must be within 0..59")
        if not 0 <= self.chart_cutover_hour < 24:
            raise ConfigurationError("Chart cutover hour must be within 0..23")
        if not -12 <= self.chart_utc_offset_hours <= 14:
            raise ConfigurationError("Chart UTC offset must be within -12..14")

    @property
    def chart_cutover(self) -> time:
        """Daily chart cutover as a timezone-aware wall-clock time."""

        tz = timezone(timedelta(hours=self.chart_utc_offset_hours))
        return time(hour=self.chart_cutover_hour, tzinfo=tz)


def get_scheduler_config() -> SchedulerConfig:
    return SchedulerConfig(
        publish_interval_seconds=optional_env_int(
            "HUEVIFY_PUBLISH_INTERVAL_SECONDS", DEFAULT_PUBLISH_INTERVAL_SECONDS, minimum=1
        ),
        ambient_poll_seconds=optional_env_int(
            "HUEVIFY_AMBIENT_POLL_SECONDS", DEFAULT_AMBIENT_POLL_SECONDS, minimum=1
        ),
        ambient_minute=optional_env_int("HUEVIFY_AMBIENT_MINUTE", DEFAULT_AMBIENT_MINUTE),
        chart_cutover_hour=optional_env_int(
            "HUEVIFY_CHART_CUTOVER_HOUR", DEFAULT_CHART_CUTOVER_HOUR
        ),
        chart_utc_offset_hours=optional_env_int(
            "HUEVIFY_CHART_UTC_OFFSET_HOURS", DEFAULT_CHART_UTC_OFFSET_HOURS, minimum=-12
        ),
    )
