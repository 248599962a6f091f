import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from cycling_events.exceptions import ConfigurationError

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)
DEFAULT_TIMEOUT_SECONDS = 30.0


def _default_headers() -> Mapping[str, str]:
    return MappingProxyType({"User-Agent": DEFAULT_USER_AGENT})


@dataclass(frozen=True)
class FetchConfig:
    """Settings shared by every source fetch in an aggregation run.

    Built once and handed to the Scraper; nothing reads fetch settings from
    module state.
    """

    headers: Mapping[str, str] = field(default_factory=_default_headers)
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    strava_access_token: str | None = None

    def __post_init__(self) -> None:
        # Freeze a plain dict passed by the caller.
        if not isinstance(self.headers, MappingProxyType):
            object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "FetchConfig":
        """Builds a config from environment variables.

        Reads CYCLING_EVENTS_USER_AGENT, CYCLING_EVENTS_TIMEOUT and
        STRAVA_ACCESS_TOKEN. Unset variables keep their defaults.

        Raises:
            ConfigurationError: If CYCLING_EVENTS_TIMEOUT is not a positive number.
        """
        env = os.environ if environ is None else environ

        user_agent = env.get("CYCLING_EVENTS_USER_AGENT") or DEFAULT_USER_AGENT

        raw_timeout = env.get("CYCLING_EVENTS_TIMEOUT")
        timeout = DEFAULT_TIMEOUT_SECONDS
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                timeout = -1.0
            if timeout <= 0:
                raise ConfigurationError(
                    f"Invalid request timeout: {raw_timeout!r}",
                    parameter="CYCLING_EVENTS_TIMEOUT",
                    expected_format="positive number of seconds",
                    example="30",
                )

        return cls(
            headers={"User-Agent": user_agent},
            timeout_seconds=timeout,
            strava_access_token=env.get("STRAVA_ACCESS_TOKEN") or None,
        )
