"""HTTP client utilities.

Every outbound call (listing API, webhook) goes through `create_http_client`,
so tests can swap the transport in one place.
"""

import httpx

JSON_CONTENT_TYPE = "application/json; charset=UTF-8"


def create_http_client(
    timeout: int = 30,
    user_agent: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create a configured async HTTP client.

    Args:
        timeout: Request timeout in seconds.
        user_agent: Optional User-Agent header value.
        transport: Optional transport override (e.g. httpx.MockTransport).

    Returns:
        Configured httpx.AsyncClient.
    """
    headers = {"User-Agent": user_agent} if user_agent else None
    return httpx.AsyncClient(
        timeout=timeout,
        headers=headers,
        follow_redirects=True,
        transport=transport,
    )
