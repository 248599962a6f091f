import json
import os

import jsonschema
import pytest
from jsonschema import validate

from cycling_events.aggregator import sort_events_by_date
from cycling_events.service import build_response
from cycling_events.sources.bikereg import BikeRegSource
from cycling_events.sources.nycc import NyccCalendarSource, NyccRidesSource


@pytest.fixture
def schema() -> dict:
    base_dir = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    schema_path = os.path.join(base_dir, "schema.json")

    assert os.path.exists(schema_path), "Schema file not found"

    with open(schema_path, encoding="utf-8") as f:
        return json.load(f)


def test_validate_json_schema(
    schema: dict, bikereg_html: str, nycc_rides_html: str, nycc_calendar_html: str
) -> None:
    """
    Validates a response built from the fixture pages against schema.json.
    """
    events = (
        BikeRegSource().parse_events(bikereg_html)
        + NyccRidesSource().parse_events(nycc_rides_html)
        + NyccCalendarSource().parse_events(nycc_calendar_html)
    )
    response = build_response(sort_events_by_date(events))

    # Round-trip through JSON so the check sees what clients receive
    data = json.loads(json.dumps(response))

    validate(instance=data, schema=schema)
    assert data["count"] == 7


def test_schema_rejects_unknown_source(schema: dict) -> None:
    data = {
        "success": True,
        "count": 1,
        "events": [
            {
                "source": "meetup",
                "name": "Ride",
                "date": "TBA",
                "location": "",
                "url": None,
            }
        ],
    }
    with pytest.raises(jsonschema.ValidationError):
        validate(instance=data, schema=schema)
