"""Hugging Face daily papers source implementation."""

from typing import Any

import httpx
import structlog

from hfdaily.exceptions import SourceFetchError
from hfdaily.models.paper import Paper
from hfdaily.utils.dates import parse_date
from hfdaily.utils.http_client import create_http_client

logger = structlog.get_logger()

HF_DAILY_PAPERS_API_URL = "https://huggingface.co/api/daily_papers"
HF_PAPERS_URL = "https://huggingface.co/papers"


class HuggingFaceSource:
    """Hugging Face Daily Papers source.

    Fetches the JSON listing for one date and normalizes it into Paper models.
    """

    def __init__(
        self,
        api_url: str = HF_DAILY_PAPERS_API_URL,
        papers_url: str = HF_PAPERS_URL,
        timeout: int = 30,
        user_agent: str = "Mozilla/5.0 (compatible; HuggingFaceDailyBot/1.0)",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the source.

        Args:
            api_url: Listing endpoint, queried with ?date=YYYY-MM-DD.
            papers_url: Base URL for paper pages.
            timeout: Request timeout in seconds.
            user_agent: User-Agent header for requests.
            transport: Optional httpx transport override.
        """
        self._api_url = api_url
        self._papers_url = papers_url.rstrip("/")
        self._timeout = timeout
        self._user_agent = user_agent
        self._transport = transport

    @property
    def source_id(self) -> str:
        return "huggingface.daily_papers"

    async def fetch_papers(self, date: str) -> list[Paper]:
        """Fetch and normalize the papers listed for `date`.

        Returns:
            Papers sorted by upvotes, descending. May be empty.

        Raises:
            ValueError: If `date` is not a YYYY-MM-DD calendar date.
            SourceFetchError: On timeout, transport error, non-2xx status,
                or a body that is not a JSON array.
        """
        parse_date(date)
        log = logger.bind(date=date, url=self._api_url)
        log.info("Fetching papers from API")

        data = await self._fetch_json(date)
        papers = parse_daily_papers(data, date, papers_url=self._papers_url)

        log.info("Papers fetched", paper_count=len(papers), record_count=len(data))
        return papers

    async def _fetch_json(self, date: str) -> list[Any]:
        try:
            async with create_http_client(
                timeout=self._timeout,
                user_agent=self._user_agent,
                transport=self._transport,
            ) as client:
                response = await client.get(
                    self._api_url,
                    params={"date": date},
                    headers={"Accept": "application/json"},
                )
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException as e:
            raise SourceFetchError(self._api_url, f"Request timed out: {e}") from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise SourceFetchError(
                self._api_url,
                f"{status} {e.response.reason_phrase}",
                status_code=status,
            ) from e
        except httpx.RequestError as e:
            raise SourceFetchError(self._api_url, f"Request failed: {e}") from e
        except ValueError as e:
            raise SourceFetchError(self._api_url, f"Invalid JSON body: {e}") from e

        if not isinstance(data, list):
            raise SourceFetchError(
                self._api_url, f"Unexpected payload type: {type(data).__name__}"
            )
        return data


def parse_daily_papers(
    data: list[Any],
    date: str,
    papers_url: str = HF_PAPERS_URL,
) -> list[Paper]:
    """Normalize raw listing records into Papers sorted by upvotes.

    Records without a nested "paper" object are skipped.
    """
    papers: list[Paper] = []

    for item in data:
        if not isinstance(item, dict):
            continue
        paper = item.get("paper")
        if not isinstance(paper, dict):
            continue

        paper_id = str(paper.get("id") or "")
        page_url = f"{papers_url}/{paper_id}"
        organization = paper.get("organization")

        papers.append(
            Paper(
                id=paper_id,
                title=item.get("title") or paper.get("title") or "",
                authors=[_author_name(author) for author in paper.get("authors") or []],
                organization=(
                    organization.get("name") if isinstance(organization, dict) else None
                )
                or "Unknown",
                abstract=item.get("summary") or paper.get("summary") or "",
                published_date=date,
                paper_url=page_url,
                pdf_url=page_url,
                upvotes=_upvotes(paper.get("upvotes")),
            )
        )

    # sort() is stable, so equal upvotes keep listing order
    papers.sort(key=lambda p: p.upvotes, reverse=True)
    return papers


def _author_name(author: Any) -> str:
    if isinstance(author, str):
        return author
    if isinstance(author, dict):
        name = author.get("name") or author.get("fullname")
        if isinstance(name, str):
            return name
    return ""


def _upvotes(value: Any) -> int:
    try:
        return max(int(value or 0), 0)
    except (TypeError, ValueError):
        return 0
