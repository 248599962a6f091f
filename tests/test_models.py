import dataclasses

import pytest

from cycling_events.exceptions import ValidationError
from cycling_events.models import (
    AggregationRequest,
    BikeRegParams,
    Event,
    Source,
    SourceResult,
    StravaParams,
)


class TestEvent:
    def test_event_is_immutable(self) -> None:
        event = Event(source=Source.NYCC, name="Ride", date="TBA")
        with pytest.raises(dataclasses.FrozenInstanceError):
            event.name = "Other"  # type: ignore[misc]

    def test_to_dict_omits_fields_the_source_does_not_supply(self) -> None:
        event = Event(
            source=Source.BIKEREG,
            name="Spring Road Race",
            date="2024-05-10T00:00:00.000Z",
            location="Albany, NY",
            url="https://www.bikereg.com/events/1",
            discipline="Road",
            distance="",
        )
        assert event.to_dict() == {
            "source": "bikereg",
            "name": "Spring Road Race",
            "date": "2024-05-10T00:00:00.000Z",
            "location": "Albany, NY",
            "url": "https://www.bikereg.com/events/1",
            "discipline": "Road",
            "distance": "",
        }

    def test_is_date_parsed(self) -> None:
        assert Event(Source.NYCC, "Ride", "2024-05-10T00:00:00.000Z").is_date_parsed
        assert not Event(Source.NYCC, "Ride", "TBA").is_date_parsed


class TestSourceResult:
    def test_succeeded(self) -> None:
        event = Event(Source.NYCC, "Ride", "TBA")
        result = SourceResult.succeeded(Source.NYCC, [event])
        assert result.ok
        assert result.events == (event,)

    def test_failed_has_no_events(self) -> None:
        result = SourceResult.failed(Source.BIKEREG, "timeout")
        assert not result.ok
        assert result.events == ()
        assert result.error == "timeout"


class TestAggregationRequest:
    def test_defaults_enable_bikereg_and_nycc(self) -> None:
        request = AggregationRequest()
        assert request.enabled_sources() == [
            Source.BIKEREG,
            Source.NYCC,
            Source.NYCC_CALENDAR,
        ]

    def test_enabled_sources_follow_registration_order(self) -> None:
        request = AggregationRequest(include_strava=True)
        assert request.enabled_sources() == list(Source)

    def test_all_disabled(self) -> None:
        request = AggregationRequest(
            include_bikereg=False, include_strava=False, include_nycc=False
        )
        assert request.enabled_sources() == []

    def test_params_for(self) -> None:
        request = AggregationRequest(bikereg=BikeRegParams(state="NY"))
        assert request.params_for(Source.BIKEREG) == BikeRegParams(state="NY")
        assert request.params_for(Source.STRAVA) == StravaParams()
        assert request.params_for(Source.NYCC) is None

    def test_from_query_defaults(self) -> None:
        request = AggregationRequest.from_query({})
        assert request == AggregationRequest()

    def test_from_query_flags_and_filters(self) -> None:
        request = AggregationRequest.from_query(
            {
                "bikereg": "false",
                "strava": "true",
                "nycc": "0",
                "state": "NY",
                "discipline": "Road",
                "month": "5",
                "lat": "42.65",
                "radius": "25",
                "merge": "true",
            }
        )
        assert not request.include_bikereg
        assert request.include_strava
        # Only the literal "false" disables NYCC.
        assert request.include_nycc
        assert request.merge_across_sources
        assert request.bikereg == BikeRegParams(state="NY", discipline="Road", month="5")
        assert request.strava == StravaParams(lat=42.65, lng=-74.0060, radius=25.0)

    def test_from_query_rejects_non_numeric_coordinates(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            AggregationRequest.from_query({"lat": "north"})
        assert exc_info.value.field == "lat"
