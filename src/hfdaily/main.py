"""Main application entry point.

Starts the API server with the daily scheduler, or runs the pipeline once.
"""

import argparse
import asyncio
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from hfdaily import __version__
from hfdaily.api import router
from hfdaily.config.settings import Settings, get_settings
from hfdaily.scheduler import create_scheduler, run_once
from hfdaily.services.digest_service import DigestService
from hfdaily.utils.dates import get_yesterday_date
from hfdaily.utils.logger import configure_logging, get_logger


def create_app(
    config: Settings | None = None,
    digest_service: DigestService | None = None,
    enable_scheduler: bool = True,
) -> FastAPI:
    """Create FastAPI application.

    Args:
        config: Application settings; the global instance when None.
        digest_service: Prebuilt service; built from settings when None.
        enable_scheduler: Whether the lifespan starts the daily timer.
    """
    config = config or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger = get_logger("lifespan")
        logger.info("Starting application", app=config.app_name)

        service = digest_service or DigestService.from_settings(config)
        app.state.digest_service = service

        scheduler = None
        if enable_scheduler:
            scheduler = create_scheduler(
                service,
                hour=config.schedule_hour,
                minute=config.schedule_minute,
                timezone=config.schedule_timezone,
            )
            scheduler.start()
            logger.info("Scheduler started")

        yield

        if scheduler is not None:
            scheduler.shutdown()
        logger.info("Application stopped", app=config.app_name)

    app = FastAPI(
        title=config.app_name,
        description="Hugging Face daily papers digest for Google Chat",
        version=__version__,
        lifespan=lifespan,
    )
    app.include_router(router)
    return app


async def run_cli_once(date: str | None = None) -> dict:
    """Run pipeline once via CLI without API server."""
    logger = get_logger("cli")
    date = date or get_yesterday_date()
    logger.info("Running one-time pipeline", date=date)

    service = DigestService.from_settings(get_settings())
    stats = await run_once(service, date)

    logger.info("Pipeline completed", **stats)
    return stats


def main():
    """Main entry point."""
    settings = get_settings()
    parser = argparse.ArgumentParser(description="hfdaily - Hugging Face daily papers digest")
    parser.add_argument(
        "--run-once",
        action="store_true",
        help="Run pipeline once and exit (no API server)",
    )
    parser.add_argument(
        "--date",
        default=None,
        help="Date to process with --run-once (YYYY-MM-DD, default: yesterday KST)",
    )
    parser.add_argument(
        "--host",
        default=settings.api_host,
        help=f"API server host (default: {settings.api_host})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.api_port,
        help=f"API server port (default: {settings.api_port})",
    )
    args = parser.parse_args()

    configure_logging(
        log_level=settings.log_level,
        json_format=settings.log_json,
    )

    if args.run_once:
        try:
            asyncio.run(run_cli_once(args.date))
        except Exception as e:
            get_logger("cli").error("Daily papers processing failed", error=str(e))
            sys.exit(1)
    else:
        uvicorn.run(
            create_app(),
            host=args.host,
            port=args.port,
            log_level=settings.log_level.lower(),
        )


if __name__ == "__main__":
    main()
