from __future__ import annotations

from datetime import date
from unittest.mock import AsyncMock

import httpx
import pytest

from courtwatch.services.lta.api_models import LtaVenueSessions
from courtwatch.services.lta.client import LtaClient
from courtwatch.services.lta.config import LTA_VENUES, SOURCE_NAME, LtaVenueConfig, find_venue
from courtwatch.services.lta.service import LtaSource, tally_sessions, transform_sessions
from tests.mocks.models import TODAY, day

FINSBURY = find_venue("finsbury-park")


def _session(start: int, end: int, capacity: int) -> dict:
    return {"Name": "Session", "Category": 0, "StartTime": start, "EndTime": end, "Capacity": capacity}


def _resource(name: str, date_str: str, *sessions: dict) -> dict:
    return {"Name": name, "Days": [{"Date": f"{date_str}T00:00:00", "Sessions": list(sessions)}]}


def _response(*resources: dict) -> LtaVenueSessions:
    return LtaVenueSessions.model_validate({"Resources": list(resources)})


class TestLtaModels:
    def test_missing_lists_default_to_empty(self):
        parsed = LtaVenueSessions.model_validate({"Resources": [{"Name": "Court 1", "Days": [{"Date": "2024-06-01T00:00:00"}]}]})
        assert tally_sessions(parsed) == {}
        assert LtaVenueSessions.model_validate({}).Resources == []

    def test_finsbury_park_in_catalog(self):
        assert FINSBURY in LTA_VENUES
        assert FINSBURY.venue == "FinsburyPark"
        assert FINSBURY.slot_duration_minutes == 60


class TestTallySessions:
    def test_counts_across_resources(self):
        response = _response(
            _resource("Court 1", "2024-06-01", _session(1080, 1140, 1)),
            _resource("Court 2", "2024-06-01", _session(1080, 1140, 0)),
        )
        tallies = tally_sessions(response)
        tally = tallies[("2024-06-01", "18:00:00")]
        assert tally.total == 2
        assert tally.available == 1

    def test_session_exploded_into_buckets(self):
        response = _response(_resource("Court 1", "2024-06-01", _session(420, 600, 1)))
        tallies = tally_sessions(response, duration_minutes=60)
        assert sorted(t for _, t in tallies) == ["07:00:00", "08:00:00", "09:00:00"]

    def test_partial_bucket_dropped(self):
        response = _response(_resource("Court 1", "2024-06-01", _session(420, 510, 1)))
        assert list(tally_sessions(response)) == [("2024-06-01", "07:00:00")]

    def test_session_without_capacity_skipped_alone(self, caplog):
        response = _response(
            _resource("Court 1", "2024-06-01", {"StartTime": 600, "EndTime": 660}),
            _resource("Court 2", "2024-06-01", _session(600, 660, 1)),
        )
        tally = tally_sessions(response)[("2024-06-01", "10:00:00")]
        assert (tally.total, tally.available) == (1, 1)
        assert "Skipped 1 malformed LTA sessions" in caplog.text

    def test_resource_with_null_days_skipped_alone(self):
        response = _response(
            {"Name": "Court 1", "Days": None},
            _resource("Court 2", "2024-06-01", _session(600, 660, 1)),
        )
        assert tally_sessions(response)[("2024-06-01", "10:00:00")].available == 1

    def test_day_with_non_list_sessions_skipped_alone(self):
        response = _response(
            {
                "Name": "Court 1",
                "Days": [
                    {"Date": "2024-06-01T00:00:00", "Sessions": "closed"},
                    {"Date": "2024-06-02T00:00:00", "Sessions": [_session(600, 660, 1)]},
                ],
            }
        )
        assert list(tally_sessions(response)) == [("2024-06-02", "10:00:00")]

    def test_custom_duration(self):
        response = _response(_resource("Court 1", "2024-06-01", _session(420, 480, 1)))
        assert len(tally_sessions(response, duration_minutes=30)) == 2


class TestTransformSessions:
    def test_two_resources_one_free(self):
        d = day(1)
        response = _response(
            _resource("Court 1", d, _session(1080, 1140, 1)),
            _resource("Court 2", d, _session(1080, 1140, 0)),
        )
        slots = transform_sessions(response, FINSBURY, today=TODAY)
        assert len(slots) == 1
        assert slots[0].key == (d, "18:00:00", "finsbury-park")
        assert slots[0].spaces == 1

    def test_fully_booked_bucket_recorded_with_zero(self):
        d = day(1)
        response = _response(_resource("Court 1", d, _session(1080, 1140, 0)))
        slots = transform_sessions(response, FINSBURY, today=TODAY)
        assert [s.spaces for s in slots] == [0]

    def test_outside_operating_hours_discarded(self):
        d = day(1)
        # 06:00–08:00 and 22:00–23:00; only 07:00 and 22:00 are within 07:00–22:00
        response = _response(
            _resource("Court 1", d, _session(360, 480, 1), _session(1320, 1380, 1)),
        )
        slots = transform_sessions(response, FINSBURY, today=TODAY)
        assert [s.time for s in slots] == ["07:00:00", "22:00:00"]

    def test_malformed_session_keeps_rest_of_venue(self):
        d = day(1)
        response = _response(
            _resource("Court 1", d, {"StartTime": 1080, "EndTime": 1140}),
            _resource("Court 2", d, _session(1080, 1140, 1)),
        )
        slots = transform_sessions(response, FINSBURY, today=TODAY)
        assert [(s.time, s.spaces) for s in slots] == [("18:00:00", 1)]

    def test_no_resources(self):
        assert transform_sessions(_response(), FINSBURY, today=TODAY) == []

    def test_sorted_output(self):
        d1, d2 = day(1), day(2)
        response = _response(
            _resource("Court 1", d2, _session(600, 660, 1)),
            _resource("Court 2", d1, _session(720, 780, 1)),
        )
        slots = transform_sessions(response, FINSBURY, today=TODAY)
        assert [s.date for s in slots] == [d1, d2]


class TestLtaClient:
    async def test_request_parameters(self):
        captured: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["path"] = request.url.path
            captured["params"] = dict(request.url.params)
            return httpx.Response(200, json={"Resources": []})

        client = LtaClient("https://clubspark.example.test")
        client._client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        try:
            result = await client.get_venue_sessions("FinsburyPark", date(2024, 6, 1), date(2024, 6, 7))
        finally:
            await client.close()

        assert result.Resources == []
        assert captured["path"] == "/FinsburyPark/GetVenueSessions"
        assert captured["params"]["startDate"] == "2024-06-01"
        assert captured["params"]["endDate"] == "2024-06-07"
        assert captured["params"]["_"].isdigit()


class TestLtaSource:
    def test_name(self):
        assert LtaSource(AsyncMock(spec=LtaClient)).name == SOURCE_NAME

    async def test_fetches_all_venues_and_tolerates_failure(self):
        other = LtaVenueConfig(
            id="other-park",
            name="Other Park",
            venue="OtherPark",
            display_name="Other Park Tennis",
            operating_hours=FINSBURY.operating_hours,
        )
        d = day(1)

        async def get_sessions(venue, start_date, end_date):
            if venue == "OtherPark":
                raise httpx.ReadTimeout("slow")
            return _response(_resource("Court 1", d, _session(1080, 1140, 1)))

        mock_client = AsyncMock(spec=LtaClient)
        mock_client.get_venue_sessions = AsyncMock(side_effect=get_sessions)

        source = LtaSource(mock_client, (FINSBURY, other), days=3)
        slots = await source.fetch_all()

        assert mock_client.get_venue_sessions.await_count == 2
        assert [s.location for s in slots] == ["finsbury-park"]

    async def test_days_override_sets_range(self):
        mock_client = AsyncMock(spec=LtaClient)
        mock_client.get_venue_sessions = AsyncMock(return_value=_response())

        await LtaSource(mock_client, (FINSBURY,), days=7).fetch_all(days=3)

        _, start_date, end_date = mock_client.get_venue_sessions.await_args.args
        assert (end_date - start_date).days == 2


@pytest.mark.parametrize("capacity, expected", [(1, 1), (0, 0)])
def test_single_session_capacity(capacity, expected):
    d = day(1)
    response = _response(_resource("Court 1", d, _session(600, 660, capacity)))
    assert transform_sessions(response, FINSBURY, today=TODAY)[0].spaces == expected
