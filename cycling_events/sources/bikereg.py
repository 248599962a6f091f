from urllib.parse import urlencode

from cycling_events.models import BikeRegParams, Source, SourceParams
from cycling_events.sources.base_source import ListingSource
from cycling_events.sources.listing import LINK, FieldRule, ListingLayout


class BikeRegSource(ListingSource):
    """Race and ride registrations listed on bikereg.com."""

    source = Source.BIKEREG
    base_url = "https://www.bikereg.com"
    layout = ListingLayout(
        fragments=(".event-item", ".event-row"),
        fields={
            "name": FieldRule((".event-title", ".event-name a")),
            "date": FieldRule((".event-date", ".date")),
            "location": FieldRule((".event-location", ".location")),
            "url": LINK,
            "discipline": FieldRule((".event-discipline", ".discipline")),
            "distance": FieldRule((".event-distance", ".distance")),
        },
    )
    extra_fields = ("discipline", "distance")

    def build_url(self, params: SourceParams = None) -> str:
        filters = params if isinstance(params, BikeRegParams) else BikeRegParams()
        # BikeReg expects every key, even when empty.
        query = urlencode(
            {
                "state": filters.state,
                "discipline": filters.discipline,
                "month": filters.month,
            }
        )
        return f"{self.base_url}/events?{query}"
