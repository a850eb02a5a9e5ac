"""Test configuration and fixtures."""

import json

import httpx
import pytest

from hfdaily.config.settings import Settings
from hfdaily.models.paper import Paper

WEBHOOK_URL = "https://chat.googleapis.com/v1/spaces/TEST/messages?key=k&token=t"
# port is not a number, so httpx rejects it before any request is made
BAD_WEBHOOK_URL = "https://chat.example.com:abc/webhook"


class FakeHTTP:
    """Routes listing API and webhook requests to canned responses."""

    def __init__(self, listing=None, listing_status: int = 200, webhook_status: int = 200):
        self.listing = listing if listing is not None else []
        self.listing_status = listing_status
        self.webhook_status = webhook_status
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == "huggingface.co":
            return httpx.Response(self.listing_status, json=self.listing)
        return httpx.Response(self.webhook_status, json={"name": "spaces/TEST/messages/1"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def listing_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == "huggingface.co"]

    @property
    def webhook_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == "POST"]

    def webhook_payloads(self) -> list[dict]:
        return [json.loads(r.content) for r in self.webhook_requests]


def make_paper(
    paper_id: str = "2501.00001",
    title: str = "Test Paper Title",
    authors: list[str] | None = None,
    abstract: str = "This is a test abstract for the paper.",
    upvotes: int = 0,
    organization: str = "Unknown",
    date: str = "2025-01-15",
) -> Paper:
    url = f"https://huggingface.co/papers/{paper_id}"
    return Paper(
        id=paper_id,
        title=title,
        authors=authors if authors is not None else ["John Doe", "Jane Smith"],
        organization=organization,
        abstract=abstract,
        published_date=date,
        paper_url=url,
        pdf_url=url,
        upvotes=upvotes,
    )


@pytest.fixture
def sample_listing():
    """Raw listing payload: one record lacks the nested paper object."""
    return [
        {
            "paper": {
                "id": "2501.00002",
                "title": "Second Paper",
                "summary": "Abstract of the second paper.",
                "authors": [{"name": "Alice"}, {"fullname": "Bob"}, {"user": "x"}],
                "upvotes": 5,
            },
        },
        {"title": "Record Without Paper", "summary": "ignored", "upvotes": 99},
        {
            "paper": {
                "id": "2501.00001",
                "title": "Nested Title",
                "summary": "Nested summary.",
                "authors": ["Carol", "Dave"],
                "organization": {"name": "Hugging Face"},
                "upvotes": 10,
            },
            "title": "First Paper",
            "summary": "Abstract of the first paper.",
        },
    ]


@pytest.fixture
def sample_papers():
    """Five papers sorted by upvotes."""
    return [
        make_paper(
            paper_id=f"2501.0000{i}",
            title=f"Paper {i}",
            authors=[f"Author {i}-{j}" for j in range(i + 1)],
            abstract=f"Abstract {i} " + "x" * 400,
            upvotes=100 - i,
        )
        for i in range(1, 6)
    ]


@pytest.fixture
def test_settings():
    """Settings isolated from the environment: no model key, webhook set."""
    return Settings(
        _env_file=None,
        openai_api_key=None,
        google_chat_webhook_url=WEBHOOK_URL,
        analysis_strategy="per_item",
        notification_format="structured",
    )
