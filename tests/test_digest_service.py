import json

import pytest
import structlog.testing
from pydantic import SecretStr

from hfdaily.ai.analyzer import PaperAnalyzer
from hfdaily.exceptions import DeliveryError, SourceFetchError
from hfdaily.notifiers.googlechat import GoogleChatNotifier
from hfdaily.services.digest_service import DigestService
from hfdaily.sources.huggingface import parse_daily_papers

from conftest import BAD_WEBHOOK_URL, WEBHOOK_URL, FakeHTTP


class CountingCompletion:
    def __init__(self, answer=None, error: Exception | None = None):
        self._answer = answer
        self._error = error
        self.calls = 0

    async def __call__(self, prompt: str, max_tokens: int) -> str:
        self.calls += 1
        if self._error is not None:
            raise self._error
        return self._answer(prompt)


def _listing(count: int) -> list[dict]:
    return [
        {
            "paper": {
                "id": f"2501.{i:05d}",
                "title": f"Paper {i}",
                "summary": f"Abstract {i}",
                "authors": [{"name": f"Author {i}"}],
                "upvotes": i,
            }
        }
        for i in range(count)
    ]


def _service(test_settings, fake: FakeHTTP, complete=None, **overrides) -> DigestService:
    config = test_settings.model_copy(update=overrides)
    return DigestService.from_settings(config, transport=fake.transport, complete=complete)


async def test_end_to_end_without_credential(test_settings):
    listing = [
        {
            "paper": {
                "id": "2501.11111",
                "title": "Only Valid Paper",
                "summary": "A valid abstract.",
                "authors": ["Kim", "Lee"],
                "upvotes": 10,
            }
        },
        {"title": "Missing paper object", "upvotes": 5},
    ]
    fake = FakeHTTP(listing=listing)
    service = _service(test_settings, fake)

    stats = await service.run_daily_pipeline("2025-01-15")

    assert stats == {
        "date": "2025-01-15",
        "papers_found": 1,
        "papers_analyzed": 1,
        "analysis_mode": "fallback",
        "delivered": True,
    }
    payloads = fake.webhook_payloads()
    assert len(payloads) == 1
    cards = payloads[0]["cards"]
    assert len(cards) == 1
    sections = cards[0]["sections"]
    paper_sections = [
        s for s in sections
        if "textParagraph" in s["widgets"][0]
        and s["widgets"][0]["textParagraph"]["text"].startswith("<b>")
    ]
    assert len(paper_sections) == 1
    assert "Only Valid Paper" in paper_sections[0]["widgets"][0]["textParagraph"]["text"]
    assert sections[-1]["widgets"][0]["buttons"][0]["textButton"]["text"] == "더 많은 논문 보기"


async def test_end_to_end_listing_failure_reports_and_reraises(test_settings):
    fake = FakeHTTP(listing_status=500)
    service = _service(test_settings, fake)

    with pytest.raises(SourceFetchError) as exc_info:
        await service.run_daily_pipeline("2025-01-15")

    payloads = fake.webhook_payloads()
    assert len(payloads) == 1
    assert payloads[0]["cards"][0]["header"]["title"] == "⚠️ 오류 발생"
    text = payloads[0]["cards"][0]["sections"][0]["widgets"][0]["textParagraph"]["text"]
    assert str(exc_info.value) in text


async def test_zero_papers_does_nothing(test_settings):
    fake = FakeHTTP(listing=[])
    completion = CountingCompletion(answer=lambda p: "[]")
    service = _service(test_settings, fake, complete=completion)

    stats = await service.run_daily_pipeline("2025-01-15")

    assert stats["papers_found"] == 0
    assert stats["delivered"] is False
    assert completion.calls == 0
    assert fake.webhook_requests == []


async def test_batch_failure_delivers_exact_fallback_payload(test_settings):
    listing = _listing(7)
    fake = FakeHTTP(listing=listing)
    completion = CountingCompletion(error=RuntimeError("service unavailable"))
    service = _service(test_settings, fake, complete=completion, analysis_strategy="batch")

    stats = await service.run_daily_pipeline("2025-01-15")

    assert completion.calls == 1
    assert stats["analysis_mode"] == "fallback"
    papers = parse_daily_papers(listing, "2025-01-15")
    expected = GoogleChatNotifier(WEBHOOK_URL).build_digest_card(
        PaperAnalyzer.from_settings(test_settings).build_fallback_result(papers, "2025-01-15")
    )
    assert len(fake.webhook_requests) == 1
    assert json.loads(fake.webhook_requests[0].content) == expected


async def test_ai_success_delivers_structured_card(test_settings):
    fake = FakeHTTP(listing=_listing(3))
    answer = json.dumps({"titleKo": "번역 제목", "summary": "AI 요약", "keyPoints": ["k"]})
    completion = CountingCompletion(answer=lambda p: answer)
    service = _service(test_settings, fake, complete=completion)

    stats = await service.run_daily_pipeline("2025-01-15")

    assert stats["analysis_mode"] == "ai"
    assert completion.calls == 3
    text = json.dumps(fake.webhook_payloads()[0], ensure_ascii=False)
    assert "번역 제목" in text
    assert "AI 요약" in text


async def test_delivery_failure_is_fatal(test_settings):
    fake = FakeHTTP(listing=_listing(2), webhook_status=500)
    service = _service(test_settings, fake)

    with pytest.raises(DeliveryError):
        await service.run_daily_pipeline("2025-01-15")

    # digest attempt plus the best-effort error report
    assert len(fake.webhook_requests) == 2


async def test_no_webhook_logs_only(test_settings):
    fake = FakeHTTP(listing=_listing(2))
    service = _service(test_settings, fake, google_chat_webhook_url=None)

    stats = await service.run_daily_pipeline("2025-01-15")

    assert service.notifier is None
    assert stats["papers_analyzed"] == 2
    assert stats["delivered"] is False
    assert fake.webhook_requests == []


async def test_no_webhook_failure_still_raises(test_settings):
    fake = FakeHTTP(listing_status=503)
    service = _service(test_settings, fake, google_chat_webhook_url=None)

    with pytest.raises(SourceFetchError):
        await service.run_daily_pipeline("2025-01-15")
    assert fake.webhook_requests == []


async def test_text_format_uses_model_summary(test_settings):
    fake = FakeHTTP(listing=_listing(6))
    completion = CountingCompletion(answer=lambda p: "소개 **[1] 첫 요약 [논문 보기] **[2] 둘째 요약")
    service = _service(test_settings, fake, complete=completion, notification_format="text")

    stats = await service.run_daily_pipeline("2025-01-15")

    assert stats["analysis_mode"] == "ai"
    assert stats["papers_analyzed"] == 5
    text = json.dumps(fake.webhook_payloads()[0], ensure_ascii=False)
    assert "첫 요약 https://huggingface.co/papers/2501.00005" in text


async def test_text_format_falls_back_to_simple_summary(test_settings):
    fake = FakeHTTP(listing=_listing(2))
    completion = CountingCompletion(error=RuntimeError("down"))
    service = _service(test_settings, fake, complete=completion, notification_format="text")

    stats = await service.run_daily_pipeline("2025-01-15")

    assert stats["analysis_mode"] == "fallback"
    assert stats["delivered"] is True
    payload = fake.webhook_payloads()[0]
    sections = payload["cards"][0]["sections"]
    assert len(sections) == 2
    text = sections[0]["widgets"][0]["textParagraph"]["text"]
    assert text.startswith("📊 **오늘의 Hugging Face 인기 논문**")
    assert text.count("Paper 1") == 1
    assert text.count("Paper 0") == 1
    assert "총 2개의 논문이 발견되었습니다." in text


async def test_analyze_returns_none_when_empty(test_settings):
    service = _service(test_settings, FakeHTTP(listing=[]))

    assert await service.analyze("2025-01-15") is None


async def test_analyze_does_not_notify(test_settings):
    fake = FakeHTTP(listing=_listing(4))
    service = _service(test_settings, fake)

    result = await service.analyze("2025-01-15")

    assert result.count == 4
    assert fake.webhook_requests == []


async def test_run_scheduled_swallows_after_reporting(test_settings, monkeypatch):
    fake = FakeHTTP(listing_status=500)
    service = _service(test_settings, fake)
    monkeypatch.setattr(
        "hfdaily.services.digest_service.get_yesterday_date", lambda: "2025-01-14"
    )

    assert await service.run_scheduled() is None
    assert fake.listing_requests[0].url.params["date"] == "2025-01-14"
    assert len(fake.webhook_requests) == 1


async def test_unusable_webhook_url_keeps_original_error(test_settings):
    fake = FakeHTTP(listing_status=500)
    service = _service(
        test_settings, fake, google_chat_webhook_url=SecretStr(BAD_WEBHOOK_URL)
    )

    with pytest.raises(SourceFetchError):
        await service.run_daily_pipeline("2025-01-15")
    assert fake.webhook_requests == []


async def test_pipeline_logs_source_id(test_settings):
    fake = FakeHTTP(listing=[])
    service = _service(test_settings, fake)

    with structlog.testing.capture_logs() as logs:
        await service.run_daily_pipeline("2025-01-15")

    start = next(entry for entry in logs if entry["event"] == "Starting daily pipeline")
    assert start["source"] == "huggingface.daily_papers"
