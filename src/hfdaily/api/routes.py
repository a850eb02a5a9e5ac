"""API routes for hfdaily.

Manual triggers and inspection endpoints for the daily digest pipeline.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse

from hfdaily.services.digest_service import DigestService
from hfdaily.utils.dates import get_yesterday_date

logger = structlog.get_logger()

router = APIRouter(tags=["papers"])

RAW_PREVIEW_COUNT = 5


def get_digest_service(request: Request) -> DigestService:
    """Get the digest service stored on app.state during startup."""
    service = getattr(request.app.state, "digest_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Digest service not available.",
        )
    return service


def _error_response(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={**extra, "error": message})


@router.get("/", response_class=PlainTextResponse)
async def index() -> str:
    return "Hugging Face Daily Papers Bot"


@router.get("/health", response_class=PlainTextResponse)
async def health_check() -> str:
    """Health check endpoint."""
    return "OK"


@router.get("/trigger")
async def trigger(
    date: str | None = Query(None, description="Date to process (YYYY-MM-DD), default yesterday KST"),
    service: DigestService = Depends(get_digest_service),
):
    """Run the full pipeline for a date and deliver the digest."""
    date = date or get_yesterday_date()
    log = logger.bind(endpoint="trigger", date=date)
    log.info("Manual trigger requested")

    try:
        stats = await service.run_daily_pipeline(date)
    except Exception as e:
        log.error("Manual trigger failed", error=str(e))
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, str(e), success=False
        )

    return {
        "success": True,
        "date": date,
        "message": "Papers analyzed and sent to Google Chat",
        "stats": stats,
    }


@router.get("/test")
async def test_fetch(
    date: str | None = Query(None, description="Date to fetch (YYYY-MM-DD), default yesterday KST"),
    service: DigestService = Depends(get_digest_service),
):
    """Fetch the raw listing for a date and return the top entries."""
    date = date or get_yesterday_date()
    try:
        papers = await service.fetch_papers(date)
    except Exception as e:
        logger.error("Raw fetch failed", date=date, error=str(e))
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e))

    return {
        "date": date,
        "count": len(papers),
        "papers": [p.model_dump(by_alias=True) for p in papers[:RAW_PREVIEW_COUNT]],
    }


@router.get("/analyze")
async def analyze(
    date: str | None = Query(None, description="Date to analyze (YYYY-MM-DD), default yesterday KST"),
    service: DigestService = Depends(get_digest_service),
):
    """Analyze the papers for a date without sending a notification."""
    date = date or get_yesterday_date()
    try:
        result = await service.analyze(date)
    except Exception as e:
        logger.error("Analysis request failed", date=date, error=str(e))
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e))

    if result is None:
        return _error_response(status.HTTP_404_NOT_FOUND, "No papers found for this date")

    return result.to_json_dict()
