"""Paper source interface using Protocol."""

from typing import Protocol

from hfdaily.models.paper import Paper


class PaperSource(Protocol):
    """Daily paper listing abstraction protocol."""

    @property
    def source_id(self) -> str:
        """Unique identifier for this source."""
        ...

    async def fetch_papers(self, date: str) -> list[Paper]:
        """Fetch the papers listed for a date, most upvoted first.

        Args:
            date: Calendar date, YYYY-MM-DD.

        Raises:
            SourceFetchError: When the listing cannot be retrieved.
        """
        ...
