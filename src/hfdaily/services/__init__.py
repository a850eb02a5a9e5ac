"""Services package."""

from hfdaily.services.digest_service import DigestService

__all__ = ["DigestService"]
