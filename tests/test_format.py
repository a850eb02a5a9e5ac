from datetime import datetime, timezone

import pytest

from hfdaily.utils.dates import (
    format_korean_date,
    format_korean_timestamp,
    get_today_date,
    get_yesterday_date,
    parse_date,
)
from hfdaily.utils.format import (
    display_authors,
    format_authors,
    format_paper_for_prompt,
    format_paper_preview,
    replace_paper_urls,
    truncate,
)

from conftest import make_paper


@pytest.mark.parametrize(
    "authors, expected",
    [
        ([], ""),
        (["A"], "A"),
        (["A", "B", "C"], "A, B, C"),
        (["A", "B", "C", "D"], "A, B, C 외"),
    ],
)
def test_format_authors(authors, expected):
    assert format_authors(authors, 3) == expected


def test_format_authors_is_idempotent_for_same_n():
    authors = ["A", "B", "C", "D", "E"]
    once = format_authors(authors, 3)
    assert format_authors(once.split(", "), 3) == once


def test_display_authors_never_empty():
    assert display_authors([], 3) == "Unknown"
    assert display_authors(["A"], 3) == "A"


def test_truncate_appends_ellipsis():
    assert truncate("abcdef", 3) == "abc..."
    assert truncate("ab", 3) == "ab..."


def test_format_paper_for_prompt_keeps_full_abstract():
    abstract = "word " * 500
    paper = make_paper(authors=["A", "B", "C", "D"], abstract=abstract, upvotes=7)

    text = format_paper_for_prompt(paper, 0)

    assert "논문 1:" in text
    assert "제목: Test Paper Title" in text
    assert "저자: A, B, C 외" in text
    assert abstract in text
    assert "추천수: 7" in text
    assert text == format_paper_for_prompt(paper, 0)


def test_format_paper_preview_truncates_abstract():
    paper = make_paper(abstract="y" * 500, upvotes=0)

    text = format_paper_preview(paper, 2, preview_length=200)

    assert text.startswith("**3. Test Paper Title**")
    assert f"📝 초록: {'y' * 200}..." in text
    assert "👍 추천" not in text
    assert "https://huggingface.co/papers/2501.00001" in text


def test_replace_paper_urls_in_order_and_keeps_surplus():
    summary = "one [논문 보기] two [논문 보기] three [논문 보기]"

    result = replace_paper_urls(summary, ["u1", "u2"])

    assert result == "one u1 two u2 three [논문 보기]"


def test_yesterday_uses_kst_offset():
    # 16:00 UTC is already the next day in KST
    now = datetime(2025, 1, 15, 16, 0, tzinfo=timezone.utc)
    assert get_today_date(now) == "2025-01-16"
    assert get_yesterday_date(now) == "2025-01-15"


def test_parse_date_rejects_invalid():
    assert parse_date("2025-01-15").day == 15
    with pytest.raises(ValueError):
        parse_date("2025-02-30")
    with pytest.raises(ValueError):
        parse_date("15/01/2025")


def test_korean_date_and_timestamp():
    assert format_korean_date("2025-01-15") == "2025년 1월 15일 수요일"
    moment = datetime(2025, 1, 15, 6, 4, 5, tzinfo=timezone.utc)
    assert format_korean_timestamp(moment) == "2025. 1. 15. 오후 3:04:05"
