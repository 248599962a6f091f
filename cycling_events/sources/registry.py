"""Source registry.

Maps each Source tag to its implementation. Iteration order follows the
Source enum, which is the order results are concatenated in.
"""

from cycling_events.exceptions import ValidationError
from cycling_events.models import Source
from cycling_events.sources.base_source import BaseSource
from cycling_events.sources.bikereg import BikeRegSource
from cycling_events.sources.nycc import NyccCalendarSource, NyccRidesSource
from cycling_events.sources.strava import StravaSource

SOURCE_CLASSES: dict[Source, type[BaseSource]] = {
    Source.BIKEREG: BikeRegSource,
    Source.STRAVA: StravaSource,
    Source.NYCC: NyccRidesSource,
    Source.NYCC_CALENDAR: NyccCalendarSource,
}


def create_sources() -> dict[Source, BaseSource]:
    """Instantiates every registered source, in registration order."""
    return {source: SOURCE_CLASSES[source]() for source in Source}


def resolve_source(name: str) -> Source:
    """Looks up a Source by its tag.

    Raises:
        ValidationError: If no source has that name.
    """
    try:
        return Source(name)
    except ValueError:
        raise ValidationError(
            f"Unknown source: {name!r}",
            field="source",
            expected=" | ".join(s.value for s in Source),
            received=name,
        ) from None
