"""Shared pytest fixtures for cycling events tests."""

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
import structlog

from cycling_events.config import FetchConfig
from cycling_events.models import Event, Source

EventFactory = Callable[..., Event]


@pytest.fixture(autouse=True)
def reset_structlog() -> Iterator[None]:
    """Undo any structlog configuration a CLI test applied."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def test_data_dir() -> Path:
    """Returns the path to the test data directory."""
    return Path(__file__).parent / "data"


@pytest.fixture
def bikereg_html(test_data_dir: Path) -> str:
    return (test_data_dir / "bikereg_events.html").read_text(encoding="utf-8")


@pytest.fixture
def nycc_rides_html(test_data_dir: Path) -> str:
    return (test_data_dir / "nycc_rides.html").read_text(encoding="utf-8")


@pytest.fixture
def nycc_calendar_html(test_data_dir: Path) -> str:
    return (test_data_dir / "nycc_calendar.html").read_text(encoding="utf-8")


@pytest.fixture
def fetch_config() -> FetchConfig:
    return FetchConfig(
        headers={"User-Agent": "cycling-events-tests"}, timeout_seconds=5.0
    )


@pytest.fixture
def make_event() -> EventFactory:
    """Builds minimal Events for aggregation tests."""

    def _make(
        name: str,
        date: str,
        source: Source = Source.BIKEREG,
        location: str = "",
    ) -> Event:
        return Event(source=source, name=name, date=date, location=location)

    return _make
