"""Paper analysis with a language model and a deterministic fallback.

Two strategies produce the same AnalysisBatchResult:

- PER_ITEM: one structured request per top paper, sent concurrently. A failed
  or unparseable answer degrades only that paper to the fallback shape.
- BATCH: one request for all top papers. A failed call or a response without a
  JSON array raises; missing or malformed entries degrade individually.
"""

import asyncio
import json
from enum import Enum
from typing import Any

import structlog

from hfdaily.ai import prompts
from hfdaily.config.settings import Settings
from hfdaily.exceptions import AnalysisError, ModelServiceError, ResponseParseError
from hfdaily.models.paper import AnalysisBatchResult, AnalyzedPaper, Paper
from hfdaily.utils.format import (
    display_authors,
    format_authors,
    format_paper_for_prompt,
    format_paper_preview,
    replace_paper_urls,
    truncate,
)

logger = structlog.get_logger()

PROMPT_SEPARATOR = "\n---\n"


class AnalysisStrategy(str, Enum):
    PER_ITEM = "per_item"
    BATCH = "batch"


class PaperAnalyzer:
    """Turns ranked papers into an AnalysisBatchResult.

    Without a completion function every result comes from the deterministic
    fallback; no model request is made.
    """

    def __init__(
        self,
        complete=None,
        strategy: AnalysisStrategy = AnalysisStrategy.PER_ITEM,
        top_n: int = 5,
        max_authors_short: int = 3,
        max_authors_long: int = 5,
        abstract_preview_short: int = 200,
        abstract_preview_long: int = 300,
        max_concurrent: int = 5,
        max_tokens_summary: int = 4096,
        max_tokens_structured: int = 2048,
    ):
        """Initialize the analyzer.

        Args:
            complete: Async callable (prompt, max_tokens) -> text, or None for
                deterministic mode.
            strategy: Request granularity when a model is available.
            top_n: Number of top papers analyzed.
            max_authors_short: Authors shown in results.
            max_authors_long: Authors sent in per-paper prompts.
            abstract_preview_short: Abstract length in the simple text summary.
            abstract_preview_long: Abstract length in fallback results.
            max_concurrent: Concurrent per-paper requests.
            max_tokens_summary: Token cap for free-text and batch requests.
            max_tokens_structured: Token cap for per-paper requests.
        """
        self._complete_fn = complete
        self._strategy = AnalysisStrategy(strategy)
        self._top_n = top_n
        self._max_authors_short = max_authors_short
        self._max_authors_long = max_authors_long
        self._abstract_preview_short = abstract_preview_short
        self._abstract_preview_long = abstract_preview_long
        self._max_concurrent = max_concurrent
        self._max_tokens_summary = max_tokens_summary
        self._max_tokens_structured = max_tokens_structured

    @classmethod
    def from_settings(cls, config: Settings, complete=None) -> "PaperAnalyzer":
        return cls(
            complete=complete,
            strategy=AnalysisStrategy(config.analysis_strategy),
            top_n=config.top_papers_count,
            max_authors_short=config.max_authors_short,
            max_authors_long=config.max_authors_long,
            abstract_preview_short=config.abstract_preview_short,
            abstract_preview_long=config.abstract_preview_long,
            max_concurrent=config.ai_max_concurrent,
            max_tokens_summary=config.ai_max_tokens_summary,
            max_tokens_structured=config.ai_max_tokens_structured,
        )

    @property
    def ai_enabled(self) -> bool:
        return self._complete_fn is not None

    @property
    def strategy(self) -> AnalysisStrategy:
        return self._strategy

    def top_papers(self, papers: list[Paper]) -> list[Paper]:
        return papers[: self._top_n]

    # Deterministic path

    def fallback_paper(self, paper: Paper) -> AnalyzedPaper:
        """Build an AnalyzedPaper from source fields only."""
        return AnalyzedPaper(
            title=paper.title,
            authors=display_authors(paper.authors, self._max_authors_short),
            organization=paper.organization,
            summary=truncate(paper.abstract or paper.title, self._abstract_preview_long),
            key_points=[],
            significance="",
            paper_url=paper.paper_url,
            upvotes=paper.upvotes,
        )

    def build_fallback_result(self, papers: list[Paper], date: str) -> AnalysisBatchResult:
        """Analyze the top papers without any model request."""
        return AnalysisBatchResult(
            date=date,
            count=len(papers),
            papers=[self.fallback_paper(p) for p in self.top_papers(papers)],
        )

    def generate_simple_summary(self, papers: list[Paper]) -> str:
        """Free-text digest built only from truncated source fields."""
        blocks = [
            format_paper_preview(
                paper,
                index,
                preview_length=self._abstract_preview_short,
                max_authors=self._max_authors_short,
            )
            for index, paper in enumerate(self.top_papers(papers))
        ]
        return (
            "📊 **오늘의 Hugging Face 인기 논문**\n\n"
            + "\n".join(blocks)
            + f"\n\n총 {len(papers)}개의 논문이 발견되었습니다."
        )

    # Model path

    async def analyze(self, papers: list[Paper], date: str | None = None) -> AnalysisBatchResult:
        """Analyze the top papers.

        Args:
            papers: Papers sorted by upvotes.
            date: Listing date; defaults to the first paper's date.

        Raises:
            AnalysisError: Only with the BATCH strategy, when the request
                fails or the response holds no JSON array.
        """
        if date is None:
            date = papers[0].published_date if papers else ""

        if not self.ai_enabled:
            logger.info("No model configured, using fallback analysis", date=date)
            return self.build_fallback_result(papers, date)

        top = self.top_papers(papers)
        log = logger.bind(date=date, strategy=self._strategy.value, paper_count=len(top))
        log.info("Starting paper analysis")

        if self._strategy is AnalysisStrategy.BATCH:
            analyzed = await self._analyze_batch(top)
        else:
            analyzed = await self._analyze_per_item(top)

        log.info("Paper analysis completed")
        return AnalysisBatchResult(date=date, count=len(papers), papers=analyzed)

    async def _analyze_per_item(self, papers: list[Paper]) -> list[AnalyzedPaper]:
        semaphore = asyncio.Semaphore(self._max_concurrent)

        async def analyze_single(paper: Paper) -> AnalyzedPaper:
            async with semaphore:
                try:
                    return await self._analyze_paper(paper)
                except AnalysisError as e:
                    logger.warning(
                        "Paper analysis failed, using fallback",
                        paper_id=paper.id,
                        error=str(e),
                    )
                    return self.fallback_paper(paper)

        # gather keeps input order regardless of completion order
        return list(await asyncio.gather(*[analyze_single(p) for p in papers]))

    async def _analyze_paper(self, paper: Paper) -> AnalyzedPaper:
        prompt = prompts.STRUCTURED_ANALYSIS.format(
            title=paper.title,
            authors=format_authors(paper.authors, self._max_authors_long),
            abstract=paper.abstract,
        )
        text = await self._complete(prompt, self._max_tokens_structured)
        return self._to_analyzed(paper, extract_json_object(text))

    async def _analyze_batch(self, papers: list[Paper]) -> list[AnalyzedPaper]:
        papers_text = PROMPT_SEPARATOR.join(
            format_paper_for_prompt(paper, index) for index, paper in enumerate(papers)
        )
        text = await self._complete(
            prompts.BATCH_ANALYSIS.format(papers=papers_text),
            self._max_tokens_summary,
        )
        records = extract_json_array(text)

        if len(records) != len(papers):
            logger.warning(
                "Batch response size mismatch",
                expected=len(papers),
                received=len(records),
            )

        analyzed: list[AnalyzedPaper] = []
        for index, paper in enumerate(papers):
            try:
                if index >= len(records):
                    raise ResponseParseError("Missing entry in batch response")
                analyzed.append(self._to_analyzed(paper, records[index]))
            except ResponseParseError as e:
                logger.warning(
                    "Batch entry unusable, using fallback",
                    paper_id=paper.id,
                    error=str(e),
                )
                analyzed.append(self.fallback_paper(paper))
        return analyzed

    async def summarize_text(self, papers: list[Paper]) -> str:
        """Ask the model for a free-text digest of the top papers.

        Link placeholders in the answer are replaced with the paper URLs.

        Raises:
            AnalysisError: If no model is configured, the request fails, or
                the answer is empty.
        """
        if not self.ai_enabled:
            raise AnalysisError("No model configured")

        top = self.top_papers(papers)
        papers_text = PROMPT_SEPARATOR.join(
            format_paper_for_prompt(paper, index) for index, paper in enumerate(top)
        )
        text = await self._complete(
            prompts.PAPER_SUMMARY.format(papers=papers_text),
            self._max_tokens_summary,
        )
        if not text.strip():
            raise ResponseParseError("Empty summary from model")
        return replace_paper_urls(text, [p.paper_url for p in top])

    async def _complete(self, prompt: str, max_tokens: int) -> str:
        try:
            return await self._complete_fn(prompt, max_tokens)
        except AnalysisError:
            raise
        except Exception as e:
            raise ModelServiceError(f"Model request failed: {e}") from e

    def _to_analyzed(self, paper: Paper, record: Any) -> AnalyzedPaper:
        """Map one parsed model record onto its paper.

        Raises:
            ResponseParseError: If the record is not an object with a summary.
        """
        if not isinstance(record, dict):
            raise ResponseParseError(f"Expected JSON object, got {type(record).__name__}")

        summary = record.get("summary")
        if not isinstance(summary, str) or not summary.strip():
            raise ResponseParseError("Missing summary in model response")

        key_points = record.get("keyPoints") or []
        if not isinstance(key_points, list):
            key_points = [key_points]

        return AnalyzedPaper(
            title=paper.title,
            title_ko=_optional_str(record.get("titleKo")),
            authors=display_authors(paper.authors, self._max_authors_short),
            organization=paper.organization,
            summary=summary.strip(),
            key_points=[str(point) for point in key_points if str(point).strip()],
            significance=_optional_str(record.get("significance")) or "",
            eli5=_optional_str(record.get("eliFor5")),
            paper_url=paper.paper_url,
            upvotes=paper.upvotes,
        )


def extract_json_object(text: str) -> dict:
    """Extract the JSON object spanning the first '{' to the last '}'.

    Raises:
        ResponseParseError: If no span is found or it is not a valid object.
    """
    parsed = _extract_span(text, "{", "}")
    if not isinstance(parsed, dict):
        raise ResponseParseError("Model response JSON is not an object")
    return parsed


def extract_json_array(text: str) -> list:
    """Extract the JSON array spanning the first '[' to the last ']'.

    Raises:
        ResponseParseError: If no span is found or it is not a valid array.
    """
    parsed = _extract_span(text, "[", "]")
    if not isinstance(parsed, list):
        raise ResponseParseError("Model response JSON is not an array")
    return parsed


def _extract_span(text: str, opening: str, closing: str) -> Any:
    start = text.find(opening)
    end = text.rfind(closing)
    if start == -1 or end < start:
        raise ResponseParseError(f"No JSON {opening}{closing} span in model response")
    try:
        return json.loads(text[start : end + 1])
    except json.JSONDecodeError as e:
        raise ResponseParseError(f"Invalid JSON in model response: {e}") from e


def _optional_str(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None
