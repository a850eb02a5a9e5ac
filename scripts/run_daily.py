#!/usr/bin/env python
"""Script to run the daily digest once, e.g. from a CI cron job.

Usage:
    python scripts/run_daily.py [--date YYYY-MM-DD]

Processes today's listing (KST) unless a date is given. Exits non-zero when
the run fails; the error card has already been sent if a webhook is set.
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add src to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from hfdaily.config.settings import get_settings
from hfdaily.services.digest_service import DigestService
from hfdaily.utils.dates import get_today_date
from hfdaily.utils.logger import configure_logging, get_logger


async def main(date: str | None = None) -> dict:
    """Run the daily pipeline once."""
    settings = get_settings()
    configure_logging(log_level=settings.log_level, json_format=settings.log_json)
    logger = get_logger("run_daily")

    date = date or get_today_date()
    logger.info("Initializing components", date=date)

    service = DigestService.from_settings(settings)
    stats = await service.run_daily_pipeline(date)

    logger.info("Daily papers processing completed successfully", **stats)
    return stats


if __name__ == "__main__":
    arg_parser = argparse.ArgumentParser(description="Run the Hugging Face daily digest once")
    arg_parser.add_argument(
        "--date",
        default=None,
        help="Listing date (YYYY-MM-DD), default: today in KST",
    )
    args = arg_parser.parse_args()

    try:
        asyncio.run(main(date=args.date))
    except Exception as e:
        get_logger("run_daily").error("Daily papers processing failed", error=str(e))
        sys.exit(1)
