from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import NotRequired, TypedDict

from cycling_events.exceptions import ValidationError
from cycling_events.utils.date_and_time import is_iso_instant


class Source(StrEnum):
    """Known event sources, in registration order."""

    BIKEREG = "bikereg"
    STRAVA = "strava"
    NYCC = "nycc"
    NYCC_CALENDAR = "nycc_calendar"


class EventDict(TypedDict):
    """JSON representation of an Event."""

    source: str
    name: str
    date: str
    location: str
    url: str | None
    discipline: NotRequired[str]
    distance: NotRequired[str]
    leader: NotRequired[str]
    pace: NotRequired[str]
    time: NotRequired[str]
    type: NotRequired[str]


OPTIONAL_FIELDS = ("discipline", "distance", "leader", "pace", "time", "type")


@dataclass(frozen=True)
class Event:
    """A cycling event in the common schema.

    Date format:
    - ISO 8601 instant in UTC (2024-05-10T00:00:00.000Z) when the source text
      could be parsed
    - otherwise the raw date text exactly as the source printed it

    Optional fields are None when the source does not provide them at all, and
    an empty string when the source provides them but the listing left them
    blank.
    """

    source: Source
    name: str
    date: str
    location: str = ""
    url: str | None = None

    # Source-specific details
    discipline: str | None = None  # bikereg
    distance: str | None = None  # bikereg, nycc
    leader: str | None = None  # nycc
    pace: str | None = None  # nycc
    time: str | None = None  # nycc_calendar
    type: str | None = None  # nycc_calendar

    @property
    def is_date_parsed(self) -> bool:
        """True when `date` holds a normalized ISO instant."""
        return is_iso_instant(self.date)

    def to_dict(self) -> EventDict:
        data: EventDict = {
            "source": str(self.source),
            "name": self.name,
            "date": self.date,
            "location": self.location,
            "url": self.url,
        }
        for name in OPTIONAL_FIELDS:
            value = getattr(self, name)
            if value is not None:
                data[name] = value  # type: ignore[literal-required]
        return data


@dataclass(frozen=True)
class SourceResult:
    """Outcome of one source fetch: either events or the reason it failed."""

    source: Source
    events: tuple[Event, ...] = ()
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def succeeded(cls, source: Source, events: Iterable[Event]) -> "SourceResult":
        return cls(source=source, events=tuple(events))

    @classmethod
    def failed(cls, source: Source, reason: str) -> "SourceResult":
        return cls(source=source, error=reason)


@dataclass(frozen=True)
class BikeRegParams:
    """BikeReg search filters. Empty strings mean "any"."""

    state: str = ""
    discipline: str = ""
    month: str = ""


@dataclass(frozen=True)
class StravaParams:
    """Search area for Strava club events, defaulting to New York City."""

    lat: float = 40.7128
    lng: float = -74.0060
    radius: float = 50


SourceParams = BikeRegParams | StravaParams | None


@dataclass(frozen=True)
class AggregationRequest:
    """Which sources to query for one aggregation run, and with what filters.

    The NYCC flag covers both the ride listing and the club calendar.
    """

    include_bikereg: bool = True
    include_strava: bool = False
    include_nycc: bool = True
    merge_across_sources: bool = False
    bikereg: BikeRegParams = field(default_factory=BikeRegParams)
    strava: StravaParams = field(default_factory=StravaParams)

    def is_enabled(self, source: Source) -> bool:
        if source is Source.BIKEREG:
            return self.include_bikereg
        if source is Source.STRAVA:
            return self.include_strava
        return self.include_nycc

    def enabled_sources(self) -> list[Source]:
        """Returns the enabled sources in registration order."""
        return [s for s in Source if self.is_enabled(s)]

    def params_for(self, source: Source) -> SourceParams:
        if source is Source.BIKEREG:
            return self.bikereg
        if source is Source.STRAVA:
            return self.strava
        return None

    @classmethod
    def from_query(cls, query: Mapping[str, str]) -> "AggregationRequest":
        """Builds a request from query-string style parameters.

        `bikereg` and `nycc` are on unless set to "false"; `strava` and `merge`
        are off unless set to "true". `state`, `discipline` and `month` filter BikeReg;
        `lat`, `lng` and `radius` set the Strava search area.

        Raises:
            ValidationError: If a numeric parameter is not a number.
        """
        defaults = StravaParams()
        return cls(
            include_bikereg=query.get("bikereg") != "false",
            include_strava=query.get("strava") == "true",
            include_nycc=query.get("nycc") != "false",
            merge_across_sources=query.get("merge") == "true",
            bikereg=BikeRegParams(
                state=query.get("state") or "",
                discipline=query.get("discipline") or "",
                month=query.get("month") or "",
            ),
            strava=StravaParams(
                lat=_float_param(query, "lat", defaults.lat),
                lng=_float_param(query, "lng", defaults.lng),
                radius=_float_param(query, "radius", defaults.radius),
            ),
        )


def _float_param(query: Mapping[str, str], name: str, default: float) -> float:
    raw = query.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValidationError(
            f"Invalid value for '{name}': {raw!r}",
            field=name,
            expected="a number",
            received=raw,
        ) from None
