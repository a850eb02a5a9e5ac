"""Text formatting helpers for papers.

All functions here are pure: the same input always yields the same text.
"""

import re

from hfdaily.models.paper import Paper

AUTHORS_SEPARATOR = ", "
AND_OTHERS_SUFFIX = " 외"
ELLIPSIS = "..."
UNKNOWN_AUTHORS = "Unknown"

# Link placeholder the summary prompt asks the model to emit for each paper
PAPER_LINK_PLACEHOLDER = "[논문 보기]"

PROMPT_AUTHORS_COUNT = 3


def format_authors(authors: list[str], max_count: int) -> str:
    """Join at most `max_count` authors, adding ' 외' when truncated."""
    shown = AUTHORS_SEPARATOR.join(authors[:max_count])
    if len(authors) > max_count:
        return f"{shown}{AND_OTHERS_SUFFIX}"
    return shown


def display_authors(authors: list[str], max_count: int) -> str:
    """Like format_authors, but never returns an empty string."""
    return format_authors(authors, max_count) or UNKNOWN_AUTHORS


def truncate(text: str, length: int) -> str:
    """Cut `text` to `length` characters and append an ellipsis."""
    return f"{text[:length]}{ELLIPSIS}"


def format_paper_for_prompt(paper: Paper, index: int) -> str:
    """Render a paper as a text block for a model prompt.

    The abstract is sent in full.

    Args:
        paper: Paper to render.
        index: 0-based position; rendered 1-based.
    """
    return (
        f"\n논문 {index + 1}:\n"
        f"제목: {paper.title}\n"
        f"저자: {format_authors(paper.authors, PROMPT_AUTHORS_COUNT)}\n"
        f"초록: {paper.abstract}\n"
        f"추천수: {paper.upvotes or 0}\n"
    )


def format_paper_preview(
    paper: Paper,
    index: int,
    preview_length: int = 200,
    max_authors: int = 3,
) -> str:
    """Render a paper as a short block for the non-AI summary."""
    lines = [
        f"**{index + 1}. {paper.title}**",
        f"👥 저자: {format_authors(paper.authors, max_authors)}",
        f"📝 초록: {truncate(paper.abstract, preview_length)}",
        f"🔗 링크: {paper.paper_url}",
    ]
    if paper.upvotes:
        lines.append(f"👍 추천: {paper.upvotes}")
    return "\n".join(lines) + "\n"


def replace_paper_urls(summary: str, paper_urls: list[str]) -> str:
    """Replace each link placeholder in model output with the matching paper URL.

    The n-th placeholder gets the n-th URL; placeholders beyond the number of
    URLs are left as they are.
    """
    urls = iter(paper_urls)

    def _substitute(match: re.Match) -> str:
        return next(urls, match.group(0))

    return re.sub(re.escape(PAPER_LINK_PLACEHOLDER), _substitute, summary)
