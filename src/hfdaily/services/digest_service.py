"""Daily digest service - main orchestration layer.

Coordinates fetching, AI analysis, formatting, and Google Chat delivery.
"""

from typing import Any

import httpx
import structlog

from hfdaily.ai.agents import OpenAICompleter
from hfdaily.ai.analyzer import PaperAnalyzer
from hfdaily.config.settings import Settings
from hfdaily.exceptions import AnalysisError
from hfdaily.models.paper import AnalysisBatchResult, Paper
from hfdaily.notifiers.base import Notifier
from hfdaily.notifiers.googlechat import GoogleChatNotifier
from hfdaily.sources.base import PaperSource
from hfdaily.sources.huggingface import HuggingFaceSource
from hfdaily.utils.dates import get_yesterday_date

logger = structlog.get_logger()


class DigestService:
    """Daily digest pipeline.

    FetchPapers -> (empty: stop) -> Analyze (model, or deterministic fallback)
    -> Deliver (webhook, or log when no notifier is configured).

    Any error escaping the pipeline is reported to the notifier as an error
    card and then re-raised.
    """

    def __init__(
        self,
        source: PaperSource,
        analyzer: PaperAnalyzer,
        notifier: Notifier | None = None,
        notification_format: str = "structured",
    ):
        """Initialize digest service.

        Args:
            source: Daily paper listing source.
            analyzer: Paper analyzer (with or without a model).
            notifier: Chat notifier; None means log-only mode.
            notification_format: "structured" or "text".
        """
        self._source = source
        self._analyzer = analyzer
        self._notifier = notifier
        self._notification_format = notification_format

    @classmethod
    def from_settings(
        cls,
        config: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
        complete=None,
    ) -> "DigestService":
        """Wire the service from settings.

        Args:
            config: Application settings.
            transport: Optional httpx transport for the listing API and webhook.
            complete: Optional completion callable replacing the OpenAI client.
        """
        source = HuggingFaceSource(
            api_url=config.hf_api_url,
            papers_url=config.hf_papers_url,
            timeout=config.http_timeout,
            user_agent=config.http_user_agent,
            transport=transport,
        )

        if complete is None and config.openai_api_key:
            complete = OpenAICompleter.from_settings(
                config.openai_api_key.get_secret_value(), config
            )
        analyzer = PaperAnalyzer.from_settings(config, complete=complete)

        notifier = None
        if config.google_chat_webhook_url:
            notifier = GoogleChatNotifier(
                webhook_url=config.google_chat_webhook_url.get_secret_value(),
                papers_url=config.hf_papers_url,
                max_authors_in_card=config.max_authors_in_card,
                max_summary_length=config.max_summary_length,
                timeout=config.http_timeout,
                transport=transport,
            )

        return cls(
            source=source,
            analyzer=analyzer,
            notifier=notifier,
            notification_format=config.notification_format,
        )

    @property
    def notifier(self) -> Notifier | None:
        return self._notifier

    async def fetch_papers(self, date: str) -> list[Paper]:
        """Fetch the ranked papers for a date without analyzing them."""
        return await self._source.fetch_papers(date)

    async def analyze(self, date: str) -> AnalysisBatchResult | None:
        """Fetch and analyze papers without sending anything.

        Returns:
            The analysis result, or None when no papers were listed.
        """
        papers = await self._source.fetch_papers(date)
        if not papers:
            return None
        result, _ = await self._analyze_with_fallback(papers, date)
        return result

    async def run_daily_pipeline(self, date: str) -> dict[str, Any]:
        """Execute the daily pipeline for one date.

        Returns:
            dict: Pipeline execution statistics.

        Raises:
            SourceFetchError: When the listing could not be fetched.
            DeliveryError: When the digest could not be delivered.
        """
        log = logger.bind(job="daily_pipeline", date=date, source=self._source.source_id)
        log.info("Starting daily pipeline")

        stats: dict[str, Any] = {
            "date": date,
            "papers_found": 0,
            "papers_analyzed": 0,
            "analysis_mode": "none",
            "delivered": False,
        }

        try:
            papers = await self._source.fetch_papers(date)
            stats["papers_found"] = len(papers)

            if not papers:
                log.info("No papers found for date")
                return stats

            if self._notification_format == "text":
                await self._run_text_digest(papers, date, stats)
            else:
                await self._run_structured_digest(papers, date, stats)

        except Exception as e:
            log.error("Daily pipeline failed", error=str(e), error_type=type(e).__name__)
            await self._report_error(e)
            raise

        log.info("Daily pipeline completed", **stats)
        return stats

    async def run_scheduled(self) -> dict[str, Any] | None:
        """Timer entry point: process yesterday's papers.

        There is no caller to report to, so failures are logged (the error
        card has already been sent by run_daily_pipeline).
        """
        date = get_yesterday_date()
        try:
            return await self.run_daily_pipeline(date)
        except Exception as e:
            logger.error("Scheduled run failed", date=date, error=str(e))
            return None

    async def _run_structured_digest(
        self, papers: list[Paper], date: str, stats: dict[str, Any]
    ) -> None:
        result, mode = await self._analyze_with_fallback(papers, date)
        stats["papers_analyzed"] = len(result.papers)
        stats["analysis_mode"] = mode

        if self._notifier is None:
            logger.warning("No Google Chat webhook configured")
            logger.info("Analysis result", result=result.to_json_dict())
            return

        await self._notifier.send_digest(result)
        stats["delivered"] = True

    async def _run_text_digest(
        self, papers: list[Paper], date: str, stats: dict[str, Any]
    ) -> None:
        top = self._analyzer.top_papers(papers)
        stats["papers_analyzed"] = len(top)

        summary = None
        if self._analyzer.ai_enabled:
            try:
                summary = await self._analyzer.summarize_text(papers)
                stats["analysis_mode"] = "ai"
            except AnalysisError as e:
                logger.warning("Text summary failed, using simple summary", error=str(e))

        if summary is None:
            summary = self._analyzer.generate_simple_summary(papers)
            stats["analysis_mode"] = "fallback"

        if self._notifier is None:
            logger.warning("No Google Chat webhook configured")
            logger.info("Summary", summary=summary)
            return

        await self._notifier.send_text_digest(top, summary, date)
        stats["delivered"] = True

    async def _analyze_with_fallback(
        self, papers: list[Paper], date: str
    ) -> tuple[AnalysisBatchResult, str]:
        """Analyze with the model, downgrading once to the deterministic path."""
        if not self._analyzer.ai_enabled:
            logger.info("No model credential, using basic info")
            return self._analyzer.build_fallback_result(papers, date), "fallback"

        try:
            return await self._analyzer.analyze(papers, date), "ai"
        except AnalysisError as e:
            logger.warning("AI analysis failed, using fallback", error=str(e))
            return self._analyzer.build_fallback_result(papers, date), "fallback"

    async def _report_error(self, error: BaseException) -> None:
        if self._notifier is None:
            return
        await self._notifier.send_error(error)
