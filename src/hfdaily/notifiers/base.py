"""Notifier interface using Protocol."""

from typing import Protocol

from hfdaily.models.paper import AnalysisBatchResult, Paper


class Notifier(Protocol):
    """Chat notification channel abstraction protocol."""

    async def send_digest(self, result: AnalysisBatchResult) -> None:
        """Send the daily digest built from structured analysis.

        Raises:
            DeliveryError: When the message could not be delivered.
        """
        ...

    async def send_text_digest(self, papers: list[Paper], summary: str, date: str) -> None:
        """Send the daily digest built from a free-text summary.

        Raises:
            DeliveryError: When the message could not be delivered.
        """
        ...

    async def send_error(self, error: BaseException | str) -> bool:
        """Report a pipeline failure. Never raises.

        Returns:
            bool: True if the report was delivered.
        """
        ...
