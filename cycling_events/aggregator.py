import asyncio
from collections.abc import Iterable, Mapping
from datetime import datetime

import structlog

from cycling_events.config import FetchConfig
from cycling_events.models import (
    AggregationRequest,
    Event,
    Source,
    SourceParams,
    SourceResult,
)
from cycling_events.scraper import Scraper
from cycling_events.sources.base_source import BaseSource
from cycling_events.sources.registry import create_sources
from cycling_events.utils.date_and_time import parse_date

logger = structlog.get_logger(__name__)

DedupKey = tuple[str, str] | tuple[str, str, Source]


def dedup_key(event: Event, across_sources: bool = False) -> DedupKey:
    """Returns the identity of an event for deduplication.

    The date is compared exactly as stored, so a parsed ISO date and an
    unparsed raw string for the same day are different keys.
    """
    if across_sources:
        return (event.name, event.date)
    return (event.name, event.date, event.source)


def remove_duplicates(
    events: Iterable[Event], across_sources: bool = False
) -> list[Event]:
    """Drops repeated events, keeping the first occurrence of each key."""
    seen: set[DedupKey] = set()
    unique = []
    for event in events:
        key = dedup_key(event, across_sources)
        if key in seen:
            continue
        seen.add(key)
        unique.append(event)
    return unique


def date_sort_key(event: Event) -> tuple[int, datetime]:
    """Sort key placing parseable dates chronologically and the rest last."""
    parsed = parse_date(event.date)
    if parsed is None:
        return (1, datetime.min)
    return (0, parsed)


def sort_events_by_date(events: Iterable[Event]) -> list[Event]:
    """Returns a new list ordered by date.

    Events whose date cannot be parsed go to the end and keep their relative
    order, since the sort is stable.
    """
    return sorted(events, key=date_sort_key)


class Aggregator:
    """Runs the enabled sources and merges their events into one feed."""

    def __init__(
        self,
        config: FetchConfig | None = None,
        sources: Mapping[Source, BaseSource] | None = None,
    ) -> None:
        """Initializes the Aggregator.

        Args:
            config: Fetch settings for every request of a run.
            sources: Source implementations keyed by tag. Defaults to all
                registered sources.
        """
        self.config = config or FetchConfig()
        self.sources = dict(sources) if sources is not None else create_sources()

    def _scraper(self) -> Scraper:
        return Scraper(self.config)

    async def _fetch(
        self, scraper: Scraper, source: Source, params: SourceParams
    ) -> SourceResult:
        return await self.sources[source].fetch_events(scraper, params)

    async def collect(
        self, request: AggregationRequest | None = None
    ) -> list[SourceResult]:
        """Fetches every enabled source concurrently.

        Returns:
            One SourceResult per enabled source, in registration order
            regardless of which request finished first.
        """
        request = request or AggregationRequest()
        enabled = [s for s in request.enabled_sources() if s in self.sources]
        if not enabled:
            logger.info("no_sources_enabled")
            return []

        async with self._scraper() as scraper:
            outcomes = await asyncio.gather(
                *(self._fetch(scraper, s, request.params_for(s)) for s in enabled),
                return_exceptions=True,
            )

        results = []
        for source, outcome in zip(enabled, outcomes, strict=True):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                logger.error(
                    "source_raised",
                    source=str(source),
                    error=f"{outcome.__class__.__name__}: {outcome}",
                )
                outcome = SourceResult.failed(source, str(outcome))
            results.append(outcome)
        return results

    async def run(self, request: AggregationRequest | None = None) -> list[Event]:
        """Fetches, deduplicates and sorts events from the enabled sources.

        Failed sources contribute nothing. An unexpected error anywhere in the
        run is logged and yields an empty list.
        """
        request = request or AggregationRequest()
        try:
            results = await self.collect(request)
            events = [event for result in results for event in result.events]
            unique = remove_duplicates(events, request.merge_across_sources)
            ordered = sort_events_by_date(unique)
        except Exception:
            logger.exception("aggregation_failed")
            return []

        logger.info(
            "aggregation_completed",
            sources=len(results),
            failed=[str(r.source) for r in results if not r.ok],
            events=len(events),
            unique=len(ordered),
        )
        return ordered

    async def fetch_source(
        self, source: Source, params: SourceParams = None
    ) -> SourceResult:
        """Runs a single source, without deduplication or sorting."""
        async with self._scraper() as scraper:
            return await self._fetch(scraper, source, params)
