"""Utils package."""

from hfdaily.utils.http_client import create_http_client
from hfdaily.utils.logger import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
    "create_http_client",
]
