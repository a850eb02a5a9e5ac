import httpx
import pytest

from hfdaily.exceptions import SourceFetchError
from hfdaily.sources.huggingface import HuggingFaceSource, parse_daily_papers

from conftest import FakeHTTP


def test_parse_skips_records_without_paper(sample_listing):
    papers = parse_daily_papers(sample_listing, "2025-01-15")

    assert [p.id for p in papers] == ["2501.00001", "2501.00002"]
    assert "Record Without Paper" not in [p.title for p in papers]


def test_parse_normalizes_fields(sample_listing):
    first, second = parse_daily_papers(sample_listing, "2025-01-15")

    # outer record values win over the nested paper's
    assert first.title == "First Paper"
    assert first.abstract == "Abstract of the first paper."
    assert first.organization == "Hugging Face"
    assert first.paper_url == "https://huggingface.co/papers/2501.00001"
    assert first.published_date == "2025-01-15"

    assert second.title == "Second Paper"
    assert second.authors == ["Alice", "Bob", ""]
    assert second.organization == "Unknown"


def test_parse_defaults_missing_upvotes_to_zero():
    papers = parse_daily_papers([{"paper": {"id": "1", "title": "T"}}], "2025-01-15")

    assert papers[0].upvotes == 0
    assert papers[0].authors == []
    assert papers[0].abstract == ""


def test_parse_coerces_malformed_fields():
    records = [
        {
            "paper": {
                "id": "1",
                "upvotes": "many",
                "authors": [{"name": 42}, {"name": "Kim"}, None],
            }
        },
        {"paper": {"id": "2", "upvotes": "12"}},
        {"paper": {"id": "3", "upvotes": -4}},
    ]

    papers = parse_daily_papers(records, "2025-01-15")

    assert [(p.id, p.upvotes) for p in papers] == [("2", 12), ("1", 0), ("3", 0)]
    assert papers[1].authors == ["", "Kim", ""]


def test_parse_sorts_by_upvotes_with_stable_ties():
    records = [
        {"paper": {"id": "a", "upvotes": 3}},
        {"paper": {"id": "b", "upvotes": 7}},
        {"paper": {"id": "c", "upvotes": 3}},
        {"paper": {"id": "d"}},
        {"paper": {"id": "e", "upvotes": 7}},
    ]

    papers = parse_daily_papers(records, "2025-01-15")

    assert [p.id for p in papers] == ["b", "e", "a", "c", "d"]


def test_parse_empty_listing():
    assert parse_daily_papers([], "2025-01-15") == []


async def test_fetch_papers_queries_date(sample_listing):
    fake = FakeHTTP(listing=sample_listing)
    source = HuggingFaceSource(transport=fake.transport)

    papers = await source.fetch_papers("2025-01-15")

    assert len(papers) == 2
    request = fake.listing_requests[0]
    assert request.url.params["date"] == "2025-01-15"
    assert request.headers["Accept"] == "application/json"
    assert "HuggingFaceDailyBot" in request.headers["User-Agent"]


async def test_fetch_papers_http_error_raises():
    fake = FakeHTTP(listing_status=500)
    source = HuggingFaceSource(transport=fake.transport)

    with pytest.raises(SourceFetchError) as exc_info:
        await source.fetch_papers("2025-01-15")

    assert exc_info.value.status_code == 500
    assert "500 Internal Server Error" in str(exc_info.value)


async def test_fetch_papers_timeout_raises_source_error():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    source = HuggingFaceSource(transport=httpx.MockTransport(handler))

    with pytest.raises(SourceFetchError, match="timed out"):
        await source.fetch_papers("2025-01-15")


async def test_fetch_papers_non_list_payload_raises():
    source = HuggingFaceSource(
        transport=httpx.MockTransport(lambda r: httpx.Response(200, json={"error": "x"}))
    )

    with pytest.raises(SourceFetchError, match="Unexpected payload"):
        await source.fetch_papers("2025-01-15")


async def test_fetch_papers_rejects_invalid_date():
    fake = FakeHTTP()
    source = HuggingFaceSource(transport=fake.transport)

    with pytest.raises(ValueError):
        await source.fetch_papers("2025-13-01")
    assert fake.requests == []
