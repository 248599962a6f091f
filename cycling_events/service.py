"""Query functions for callers that serve events (CLI, web handlers).

`get_events` runs the full aggregation; `get_source_events` runs one source
as-is. `build_response` wraps results in the JSON envelope clients expect.
"""

from typing import Any

from cycling_events.aggregator import Aggregator
from cycling_events.config import FetchConfig
from cycling_events.models import AggregationRequest, Event
from cycling_events.sources.registry import resolve_source


async def get_events(
    request: AggregationRequest | None = None,
    config: FetchConfig | None = None,
) -> list[Event]:
    """Returns the merged, deduplicated, date-ordered feed.

    Never raises for source failures; they only shrink the result.
    """
    return await Aggregator(config).run(request)


async def get_source_events(
    source_name: str,
    request: AggregationRequest | None = None,
    config: FetchConfig | None = None,
) -> list[Event]:
    """Returns the events of one source in page order.

    The request supplies that source's filters; its include flags are ignored.

    Raises:
        ValidationError: If `source_name` is not a known source.
    """
    source = resolve_source(source_name)
    request = request or AggregationRequest()
    result = await Aggregator(config).fetch_source(source, request.params_for(source))
    return list(result.events)


def build_response(events: list[Event]) -> dict[str, Any]:
    return {
        "success": True,
        "count": len(events),
        "events": [event.to_dict() for event in events],
    }
