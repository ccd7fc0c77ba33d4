"""Unit tests for the Open States people provider."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from civic_snapshot.lib.officials import Legislator, OpenStatesPeopleProvider
from civic_snapshot.lib.upstream import DecodeError, ResilientAPIClient, TransportError

BASE = "https://v3.openstates.org"

_SAMPLE_PERSON = {
    "id": "ocd-person/abc-123",
    "name": "Sally Harrell",
    "party": "Democratic",
    "image": "https://example.com/photo.jpg",
    "email": "sally@senate.ga.gov",
    "links": [{"url": "https://harrell.senate.ga.gov"}],
    "current_role": {
        "title": "Senator",
        "org_classification": "upper",
        "district": 39,
        "division_id": "ocd-division/country:us/state:ga/sldu:39",
    },
    "offices": [
        {
            "name": "Capitol Office",
            "address": "121-C State Capitol, Atlanta, GA 30334",
            "voice": "404-463-1367",
            "classification": "capitol",
        }
    ],
}

_SAMPLE_HOUSE_PERSON = {
    "id": "ocd-person/def-456",
    "name": "Stacey Evans",
    "party": [{"name": "Democratic"}],
    "current_role": {"title": "Representative", "org_classification": "lower", "district": "57"},
    "offices": [],
}


def _response(status_code: int, json_data: object, path: str = "/people.geo") -> httpx.Response:
    return httpx.Response(status_code, json=json_data, request=httpx.Request("GET", f"{BASE}{path}"))


@pytest.fixture
def provider() -> OpenStatesPeopleProvider:
    client = ResilientAPIClient("open_states", BASE, api_key="test-key", sleep=AsyncMock())
    return OpenStatesPeopleProvider(client)


class TestLegislatorMapping:
    def test_maps_senate_person(self) -> None:
        person = Legislator.from_api(_SAMPLE_PERSON)

        assert person.name == "Sally Harrell"
        assert person.title == "Senator"
        assert person.current_role is not None
        assert person.current_role.district == "39"
        assert person.current_role.org_classification == "upper"
        assert person.party == ("Democratic",)
        assert person.phone == "404-463-1367"
        assert person.links == ("https://harrell.senate.ga.gov",)

    def test_party_as_list_of_objects(self) -> None:
        person = Legislator.from_api(_SAMPLE_HOUSE_PERSON)
        assert person.party == ("Democratic",)
        assert person.phone is None

    def test_missing_role(self) -> None:
        person = Legislator.from_api({"id": "ocd-person/x", "name": "No Role"})
        assert person.current_role is None
        assert person.title == ""

    def test_non_string_role_title_becomes_empty(self) -> None:
        person = Legislator.from_api({"id": "ocd-person/x", "name": "Odd Role", "current_role": {"title": 5}})
        assert person.title == ""


class TestFindByLocation:
    @pytest.mark.asyncio
    async def test_returns_people(self, provider: OpenStatesPeopleProvider) -> None:
        mock_get = AsyncMock(return_value=_response(200, {"results": [_SAMPLE_HOUSE_PERSON, _SAMPLE_PERSON]}))

        with patch.object(provider._client._client, "get", mock_get):
            page = await provider.find_by_location(33.749, -84.388)

        assert [p.name for p in page.results] == ["Stacey Evans", "Sally Harrell"]
        assert page.pagination is None
        assert mock_get.await_args.args[0] == "/people.geo"
        params = mock_get.await_args.kwargs["params"]
        assert params["lat"] == "33.749"
        assert params["lng"] == "-84.388"
        assert params["apikey"] == "test-key"

    @pytest.mark.asyncio
    async def test_skips_people_without_name(self, provider: OpenStatesPeopleProvider) -> None:
        results = [{"id": "ocd-person/x"}, {"id": "ocd-person/y", "name": 7}, _SAMPLE_PERSON]
        mock_get = AsyncMock(return_value=_response(200, {"results": results}))

        with patch.object(provider._client._client, "get", mock_get):
            page = await provider.find_by_location(33.749, -84.388)

        assert [p.id for p in page.results] == ["ocd-person/abc-123"]

    @pytest.mark.asyncio
    async def test_bad_shape_raises_decode_error(self, provider: OpenStatesPeopleProvider) -> None:
        mock_get = AsyncMock(return_value=_response(200, {"results": "nope"}))

        with (
            patch.object(provider._client._client, "get", mock_get),
            pytest.raises(DecodeError),
        ):
            await provider.find_by_location(33.749, -84.388)

    @pytest.mark.asyncio
    async def test_network_failure_raises_transport_error(self, provider: OpenStatesPeopleProvider) -> None:
        mock_get = AsyncMock(side_effect=httpx.ConnectTimeout("timed out"))

        with (
            patch.object(provider._client._client, "get", mock_get),
            pytest.raises(TransportError),
        ):
            await provider.find_by_location(33.749, -84.388)


class TestSearchPeople:
    @pytest.mark.asyncio
    async def test_paginated(self, provider: OpenStatesPeopleProvider) -> None:
        body = {
            "results": [_SAMPLE_PERSON],
            "pagination": {"per_page": 20, "page": 1, "max_page": 4, "total_items": 70},
        }
        mock_get = AsyncMock(return_value=_response(200, body, path="/people"))

        with patch.object(provider._client._client, "get", mock_get):
            page = await provider.search_people("ocd-jurisdiction/country:us/state:ga/government")

        assert len(page.results) == 1
        assert page.pagination is not None
        assert page.pagination.total_items == 70
        params = mock_get.await_args.kwargs["params"]
        assert params["jurisdiction"] == "ocd-jurisdiction/country:us/state:ga/government"
        assert params["per_page"] == "20"
