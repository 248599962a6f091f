from abc import ABC, abstractmethod
from typing import ClassVar

import structlog

from cycling_events.exceptions import CyclingEventsError, ParseError
from cycling_events.models import Event, Source, SourceParams, SourceResult
from cycling_events.scraper import Scraper
from cycling_events.sources.listing import ListingLayout, parse_listing
from cycling_events.utils.date_and_time import normalize_date
from cycling_events.utils.url import normalize_url

logger = structlog.get_logger(__name__)


class BaseSource(ABC):
    """Abstract base class for event sources."""

    source: ClassVar[Source]

    @abstractmethod
    async def fetch_events(
        self, scraper: Scraper, params: SourceParams = None
    ) -> SourceResult:
        """Fetches the current event listing of this source.

        Implementations never raise: any failure is logged and returned as a
        failed SourceResult.

        Args:
            scraper: The open Scraper of the current run.
            params: Source-specific filters, or None for defaults.

        Returns:
            A SourceResult holding the events or the failure reason.
        """


class ListingSource(BaseSource):
    """A source that publishes its events as an HTML listing page.

    Subclasses provide the base URL, the listing layout, the names of the
    optional fields they fill in, and how to build the page URL.
    """

    base_url: ClassVar[str]
    layout: ClassVar[ListingLayout]
    extra_fields: ClassVar[tuple[str, ...]] = ()

    @abstractmethod
    def build_url(self, params: SourceParams = None) -> str:
        """Returns the listing URL for the given filters."""

    async def fetch_events(
        self, scraper: Scraper, params: SourceParams = None
    ) -> SourceResult:
        log = logger.bind(source=str(self.source))
        try:
            url = self.build_url(params)
            html = await scraper.get(url)
            events = self.parse_events(html)
        except CyclingEventsError as e:
            log.warning("source_fetch_failed", **e.to_dict())
            return SourceResult.failed(self.source, e.message)
        except Exception as e:
            log.error("source_fetch_failed", error=str(e), exc_info=True)
            return SourceResult.failed(self.source, f"{e.__class__.__name__}: {e}")

        log.info("events_found", count=len(events))
        return SourceResult.succeeded(self.source, events)

    def parse_events(self, html_content: str) -> list[Event]:
        """Parses a listing page into events.

        Fragments without a name or without date text are skipped.

        Raises:
            ParseError: If the document cannot be processed at all.
        """
        try:
            records = parse_listing(html_content, self.layout)
        except Exception as e:
            raise ParseError(
                f"Could not parse {self.source} listing: {e}",
                source=str(self.source),
                html_snippet=html_content,
            ) from e

        events = [e for e in (self.build_event(r) for r in records) if e]
        skipped = len(records) - len(events)
        if skipped:
            logger.debug(
                "fragments_skipped", source=str(self.source), count=skipped
            )
        return events

    def build_event(self, record: dict[str, str]) -> Event | None:
        """Builds an Event from one raw record, or None if it is incomplete."""
        name = record.get("name", "")
        raw_date = record.get("date", "")
        if not name or not raw_date:
            return None

        return Event(
            source=self.source,
            name=name,
            date=normalize_date(raw_date) or raw_date,
            location=record.get("location", ""),
            url=normalize_url(record.get("url"), self.base_url),
            **{f: record.get(f, "") for f in self.extra_fields},
        )
