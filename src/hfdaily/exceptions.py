"""Custom exceptions for the hfdaily application.

Provides a structured exception hierarchy for the stages of the daily pipeline.
"""


class HFDailyError(Exception):
    """Base exception class for all hfdaily errors."""

    pass


class SourceFetchError(HFDailyError):
    """Raised when the paper listing API is unreachable or returns non-2xx.

    Attributes:
        url: The listing URL that failed.
        status_code: HTTP status code, if a response was received.
    """

    def __init__(self, url: str, message: str, status_code: int | None = None):
        self.url = url
        self.status_code = status_code
        super().__init__(f"Failed to fetch papers: {message}")


class AnalysisError(HFDailyError):
    """Raised when the language-model analysis cannot produce a result."""

    pass


class ModelServiceError(AnalysisError):
    """Raised when the model completion call itself fails (network, auth, timeout)."""

    pass


class ResponseParseError(AnalysisError):
    """Raised when no valid JSON can be extracted from a model response."""

    pass


class DeliveryError(HFDailyError):
    """Raised when webhook delivery fails.

    Attributes:
        channel: The notification channel that failed (e.g., 'googlechat').
    """

    def __init__(self, channel: str, message: str):
        self.channel = channel
        super().__init__(f"Notification failed via {channel}: {message}")
