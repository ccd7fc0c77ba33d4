"""Unit tests for the Open States bills provider."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from civic_snapshot.lib.legislation import Bill, BillCategory, OpenStatesBillsProvider, score_bills
from civic_snapshot.lib.legislation.base import NO_DESCRIPTION
from civic_snapshot.lib.upstream import DecodeError, RateLimitedError, ResilientAPIClient

BASE = "https://v3.openstates.org"
JURISDICTION = "ocd-jurisdiction/country:us/state:ma/government"

_SAMPLE_BILL = {
    "id": "ocd-bill/0a1b2c",
    "session": "193rd",
    "jurisdiction": {"id": JURISDICTION, "name": "Massachusetts", "classification": "state"},
    "from_organization": {"id": "ocd-organization/1", "name": "House", "classification": "lower"},
    "identifier": "H 1234",
    "title": "An Act relative to affordable housing",
    "classification": ["bill"],
    "subject": ["Housing"],
    "openstates_url": "https://openstates.org/ma/bills/193rd/H1234/",
    "first_action_date": "2025-01-10",
    "latest_action_date": "2025-03-12",
    "latest_action_description": "Referred to the committee on Housing",
    "latest_passage_date": None,
    "updated_at": "2025-03-12T18:04:11.123456+00:00",
    "abstracts": [{"abstract": "Expands the housing voucher program.", "note": ""}],
    "sources": [{"url": "https://malegislature.gov/Bills/193/H1234", "note": ""}],
}


def _page(results: list, page: int = 1, max_page: int = 1) -> dict:
    return {
        "results": results,
        "pagination": {"per_page": 10, "page": page, "max_page": max_page, "total_items": len(results)},
    }


def _response(status_code: int, json_data: object) -> httpx.Response:
    return httpx.Response(status_code, json=json_data, request=httpx.Request("GET", f"{BASE}/bills"))


@pytest.fixture
def provider() -> OpenStatesBillsProvider:
    client = ResilientAPIClient("open_states", BASE, api_key="test-key", sleep=AsyncMock())
    return OpenStatesBillsProvider(client)


class TestBillMapping:
    def test_maps_fields(self) -> None:
        bill = Bill.from_api(_SAMPLE_BILL)

        assert bill.id == "ocd-bill/0a1b2c"
        assert bill.display_title == "H 1234: An Act relative to affordable housing"
        assert bill.subject == ("Housing",)
        assert bill.latest_action_date == datetime(2025, 3, 12, tzinfo=UTC)
        assert bill.latest_passage_date is None
        assert bill.updated_at is not None and bill.updated_at.tzinfo is not None
        assert bill.from_organization == "House"
        assert bill.summary == "Expands the housing voucher program."
        assert bill.source_url == "https://openstates.org/ma/bills/193rd/H1234/"

    def test_summary_falls_back_to_latest_action(self) -> None:
        bill = Bill.from_api({**_SAMPLE_BILL, "abstracts": []})
        assert bill.summary == "Referred to the committee on Housing"

    def test_summary_placeholder_when_nothing_available(self) -> None:
        bill = Bill.from_api({**_SAMPLE_BILL, "abstracts": [], "latest_action_description": None})
        assert bill.summary == NO_DESCRIPTION

    def test_source_url_falls_back_to_sources(self) -> None:
        bill = Bill.from_api({**_SAMPLE_BILL, "openstates_url": None})
        assert bill.source_url == "https://malegislature.gov/Bills/193/H1234"

    def test_unparseable_date_becomes_none(self) -> None:
        bill = Bill.from_api({**_SAMPLE_BILL, "latest_action_date": "sometime in March"})
        assert bill.latest_action_date is None

    def test_non_string_list_items_are_dropped(self) -> None:
        bill = Bill.from_api(
            {
                **_SAMPLE_BILL,
                "subject": [None, "Housing", 7, {"name": "Transit"}],
                "classification": "bill",
                "abstracts": [{"abstract": None}, {"abstract": "Expands vouchers."}],
                "latest_action_description": ["Referred"],
            }
        )
        assert bill.subject == ("Housing",)
        assert bill.classification == ()
        assert bill.abstracts == ("Expands vouchers.",)
        assert bill.latest_action_description is None

    def test_malformed_subjects_still_score(self) -> None:
        bill = Bill.from_api({**_SAMPLE_BILL, "title": "An Act about ferries", "subject": [None, 3]})
        [scored] = score_bills([bill], datetime(2025, 3, 20, tzinfo=UTC))
        assert scored.category is BillCategory.MISC


class TestSearchBills:
    @pytest.mark.asyncio
    async def test_builds_query_and_parses_page(self, provider: OpenStatesBillsProvider) -> None:
        mock_get = AsyncMock(return_value=_response(200, _page([_SAMPLE_BILL], max_page=3)))

        with patch.object(provider._client._client, "get", mock_get):
            page = await provider.search_bills(JURISDICTION, per_page=10, page=2)

        assert len(page.results) == 1
        assert page.results[0].identifier == "H 1234"
        assert page.pagination is not None
        assert page.pagination.max_page == 3

        path = mock_get.await_args.args[0]
        params = mock_get.await_args.kwargs["params"]
        assert path == "/bills"
        assert params == {
            "jurisdiction": JURISDICTION,
            "per_page": "10",
            "page": "2",
            "sort": "updated_desc",
            "apikey": "test-key",
        }

    @pytest.mark.asyncio
    async def test_session_is_forwarded(self, provider: OpenStatesBillsProvider) -> None:
        mock_get = AsyncMock(return_value=_response(200, _page([])))

        with patch.object(provider._client._client, "get", mock_get):
            await provider.search_bills(JURISDICTION, session="193rd")

        assert mock_get.await_args.kwargs["params"]["session"] == "193rd"

    @pytest.mark.asyncio
    async def test_skips_records_without_id_or_title(self, provider: OpenStatesBillsProvider) -> None:
        broken = [
            {"identifier": "H 1"},
            {**_SAMPLE_BILL, "title": ""},
            {**_SAMPLE_BILL, "title": ["An Act"]},
            {**_SAMPLE_BILL, "id": 42},
            "not-a-bill",
        ]
        mock_get = AsyncMock(return_value=_response(200, _page([*broken, _SAMPLE_BILL])))

        with patch.object(provider._client._client, "get", mock_get):
            page = await provider.search_bills(JURISDICTION)

        assert [b.id for b in page.results] == ["ocd-bill/0a1b2c"]

    @pytest.mark.asyncio
    async def test_missing_results_raises_decode_error(self, provider: OpenStatesBillsProvider) -> None:
        mock_get = AsyncMock(return_value=_response(200, {"detail": "unexpected"}))

        with (
            patch.object(provider._client._client, "get", mock_get),
            pytest.raises(DecodeError),
        ):
            await provider.search_bills(JURISDICTION)

    @pytest.mark.asyncio
    async def test_non_list_results_raises_decode_error(self, provider: OpenStatesBillsProvider) -> None:
        mock_get = AsyncMock(return_value=_response(200, {"results": {"id": "x"}}))

        with (
            patch.object(provider._client._client, "get", mock_get),
            pytest.raises(DecodeError, match="must be a list"),
        ):
            await provider.search_bills(JURISDICTION)

    @pytest.mark.asyncio
    async def test_rate_limit_surfaces_as_rate_limited_error(self, provider: OpenStatesBillsProvider) -> None:
        mock_get = AsyncMock(return_value=_response(429, {"detail": "Rate limited"}))

        with (
            patch.object(provider._client._client, "get", mock_get),
            pytest.raises(RateLimitedError),
        ):
            await provider.search_bills(JURISDICTION)

    @pytest.mark.asyncio
    async def test_invalid_sort_raises(self, provider: OpenStatesBillsProvider) -> None:
        with pytest.raises(ValueError, match="Unsupported bill sort"):
            await provider.search_bills(JURISDICTION, sort="random")

    def test_provider_name(self, provider: OpenStatesBillsProvider) -> None:
        assert provider.provider_name == "open_states"
