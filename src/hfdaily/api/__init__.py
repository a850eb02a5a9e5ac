"""API package."""

from hfdaily.api.routes import get_digest_service, router

__all__ = [
    "get_digest_service",
    "router",
]
