from cycling_events.models import Source, SourceParams
from cycling_events.sources.base_source import ListingSource
from cycling_events.sources.listing import LINK, FieldRule, ListingLayout

NYCC_BASE_URL = "https://nycc.org"


class NyccRidesSource(ListingSource):
    """Club rides posted on the New York Cycle Club ride listing."""

    source = Source.NYCC
    base_url = NYCC_BASE_URL
    layout = ListingLayout(
        fragments=(".ride-item", ".event-item", ".ride-listing"),
        fields={
            "name": FieldRule((".ride-title", ".event-title", "h3", "h4")),
            "date": FieldRule((".ride-date", ".event-date", ".date")),
            "location": FieldRule((".ride-location", ".location", ".start-location")),
            "url": LINK,
            "leader": FieldRule((".ride-leader", ".leader")),
            "pace": FieldRule((".pace", ".ride-pace")),
            "distance": FieldRule((".distance", ".ride-distance")),
        },
    )
    extra_fields = ("leader", "pace", "distance")

    def build_url(self, params: SourceParams = None) -> str:
        return f"{self.base_url}/rides"


class NyccCalendarSource(ListingSource):
    """Club events (meetings, clinics, socials) on the NYCC calendar page."""

    source = Source.NYCC_CALENDAR
    base_url = NYCC_BASE_URL
    layout = ListingLayout(
        fragments=(".calendar-event", ".event"),
        fields={
            "name": FieldRule((".event-title", ".title")),
            "date": FieldRule((".event-date", ".date")),
            "location": FieldRule((".event-location", ".location")),
            "url": LINK,
            "time": FieldRule((".event-time", ".time")),
            "type": FieldRule((".event-type", ".type")),
        },
    )
    extra_fields = ("time", "type")

    def build_url(self, params: SourceParams = None) -> str:
        return f"{self.base_url}/calendar"
