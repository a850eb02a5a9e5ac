"""Google Chat notification implementation.

Sends the daily digest as a card message through an incoming webhook.
"""

import re
from datetime import datetime
from typing import Any

import httpx
import structlog

from hfdaily.exceptions import DeliveryError
from hfdaily.models.paper import AnalysisBatchResult, Paper
from hfdaily.utils.dates import format_korean_date, format_korean_timestamp
from hfdaily.utils.format import display_authors, truncate
from hfdaily.utils.http_client import JSON_CONTENT_TYPE, create_http_client

logger = structlog.get_logger()

HF_PAPERS_URL = "https://huggingface.co/papers"
CARD_TITLE = "🤗 Hugging Face 데일리 논문"
ERROR_TITLE = "⚠️ 오류 발생"
ERROR_SUBTITLE = "Hugging Face 논문 수집 중 오류"
MORE_PAPERS_TEXT = "더 많은 논문 보기"

# Free-text summaries number each paper as **[1], **[2], ...
SUMMARY_MARKER = re.compile(r"\*\*\[\d+\]")


def _text_section(text: str) -> dict[str, Any]:
    return {"widgets": [{"textParagraph": {"text": text}}]}


def _button_section(text: str, url: str) -> dict[str, Any]:
    return {
        "widgets": [
            {
                "buttons": [
                    {
                        "textButton": {
                            "text": text,
                            "onClick": {"openLink": {"url": url}},
                        }
                    }
                ]
            }
        ]
    }


class GoogleChatNotifier:
    """Google Chat incoming webhook notifier."""

    channel = "googlechat"

    def __init__(
        self,
        webhook_url: str,
        papers_url: str = HF_PAPERS_URL,
        max_authors_in_card: int = 2,
        max_summary_length: int = 300,
        timeout: int = 30,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize Google Chat notifier.

        Args:
            webhook_url: Google Chat incoming webhook URL.
            papers_url: Target of the "more papers" button.
            max_authors_in_card: Authors shown per paper in text digests.
            max_summary_length: Max characters per paper in text digests.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport override.
        """
        self._webhook_url = webhook_url
        self._papers_url = papers_url
        self._max_authors_in_card = max_authors_in_card
        self._max_summary_length = max_summary_length
        self._timeout = timeout
        self._transport = transport

    async def _send_request(self, payload: dict[str, Any]) -> None:
        """POST a payload to the webhook.

        Raises:
            DeliveryError: On transport failure or non-2xx status.
        """
        try:
            async with create_http_client(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    self._webhook_url,
                    json=payload,
                    headers={"Content-Type": JSON_CONTENT_TYPE},
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise DeliveryError(
                self.channel,
                f"HTTP {e.response.status_code}: {e.response.text[:200]}",
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise DeliveryError(self.channel, f"Request failed: {e}") from e

    async def send_digest(self, result: AnalysisBatchResult) -> None:
        """Send the structured daily digest card."""
        await self._send_request(self.build_digest_card(result))
        logger.info(
            "Google Chat digest sent",
            date=result.date,
            paper_count=len(result.papers),
        )

    async def send_text_digest(self, papers: list[Paper], summary: str, date: str) -> None:
        """Send the digest card built from a free-text summary."""
        await self._send_request(self.build_text_digest_card(papers, summary, date))
        logger.info("Google Chat text digest sent", date=date)

    async def send_error(self, error: BaseException | str, now: datetime | None = None) -> bool:
        """Send an error card; failures are logged, never raised."""
        try:
            await self._send_request(self.build_error_card(error, now))
        except DeliveryError as e:
            logger.error("Failed to send error to Google Chat", error=str(e))
            return False
        logger.info("Google Chat error report sent")
        return True

    def build_digest_card(self, result: AnalysisBatchResult) -> dict[str, Any]:
        """Build the card message for a structured analysis result."""
        sections = [
            _text_section(
                f"오늘 {result.count}개의 인기 논문 중 상위 {len(result.papers)}개를 "
                "AI가 분석했습니다."
            )
        ]

        if result.trend:
            sections.append(_text_section(f"<b>오늘의 트렌드:</b> {result.trend}"))

        for index, paper in enumerate(result.papers):
            if paper.title_ko:
                title_text = f"{paper.title_ko}\n<i>{paper.title}</i>"
            else:
                title_text = paper.title

            content = f"<b>{index + 1}. {title_text}</b>\n"
            content += f"⭐ {paper.upvotes or 0} | 👥 {paper.authors}"
            if paper.organization:
                content += f" | 🏢 {paper.organization}"

            content += f"\n\n{paper.summary}"

            if paper.key_points:
                content += "\n\n<b>주요 포인트:</b>"
                for point in paper.key_points:
                    content += f"\n• {point}"

            if paper.significance:
                content += f"\n\n<b>의의:</b> {paper.significance}"

            if paper.eli5:
                content += f"\n\n<b>쉽게 설명하면:</b> {paper.eli5}"

            content += f'\n\n<a href="{paper.paper_url}">논문 보기 →</a>'
            sections.append(_text_section(content))

        sections.append(_button_section(MORE_PAPERS_TEXT, self._papers_url))
        return self._card(CARD_TITLE, format_korean_date(result.date), sections)

    def build_text_digest_card(
        self, papers: list[Paper], summary: str, date: str
    ) -> dict[str, Any]:
        """Build the card message for a free-text summary.

        The summary is split on its **[n] markers; the n-th chunk is shown
        under the n-th paper; papers without a chunk show no summary text.
        A summary without markers already lists its papers and is sent as a
        single section.
        """
        intro, *chunks = SUMMARY_MARKER.split(summary)
        if not chunks:
            return self._card(
                CARD_TITLE,
                format_korean_date(date),
                [
                    _text_section(summary.strip()),
                    _button_section(MORE_PAPERS_TEXT, self._papers_url),
                ],
            )

        sections = []
        if intro.strip():
            sections.append(_text_section(intro.strip()))

        for index, paper in enumerate(papers):
            chunk = chunks[index].strip() if index < len(chunks) else ""
            if len(chunk) > self._max_summary_length:
                chunk = truncate(chunk, self._max_summary_length)

            content = f"<b>{index + 1}. {paper.title}</b>\n"
            content += (
                f"⭐ {paper.upvotes or 0} | 👥 "
                f"{display_authors(paper.authors, self._max_authors_in_card)}"
            )
            if chunk:
                content += f"\n\n{chunk}"
            content += f'\n\n<a href="{paper.paper_url}">논문 보기 →</a>'
            sections.append(_text_section(content))

        sections.append(_button_section(MORE_PAPERS_TEXT, self._papers_url))
        return self._card(CARD_TITLE, format_korean_date(date), sections)

    def build_error_card(
        self, error: BaseException | str, now: datetime | None = None
    ) -> dict[str, Any]:
        """Build the error report card."""
        message = str(error)
        return self._card(
            ERROR_TITLE,
            ERROR_SUBTITLE,
            [
                _text_section(
                    f"오류 내용: {message}\n\n시간: {format_korean_timestamp(now)}"
                )
            ],
        )

    @staticmethod
    def _card(title: str, subtitle: str, sections: list[dict[str, Any]]) -> dict[str, Any]:
        return {
            "cards": [
                {
                    "header": {"title": title, "subtitle": subtitle},
                    "sections": sections,
                }
            ]
        }
