"""Shared httpx client construction for feed requests."""

import httpx

# Feed servers sometimes content-negotiate; ask for XML first
FEED_ACCEPT = (
    "application/rss+xml, application/atom+xml, application/xml;q=0.9, "
    "text/xml;q=0.9, */*;q=0.8"
)

# One refresh fans out to every feed at once
FEED_LIMITS = httpx.Limits(max_connections=20, max_keepalive_connections=10)


def create_http_client(
    timeout: float = 10.0,
    user_agent: str = "feedkeep/0.1",
    headers: dict[str, str] | None = None,
    follow_redirects: bool = True,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create the async client used to download feed documents.

    Args:
        timeout: Request timeout in seconds.
        user_agent: User-Agent header value.
        headers: Extra headers sent with every request; they override the
            defaults, including ``Accept``.
        follow_redirects: Whether to follow redirects.
        transport: Optional transport override (tests use httpx.MockTransport).
    """
    request_headers = {"User-Agent": user_agent, "Accept": FEED_ACCEPT}
    request_headers.update(headers or {})
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout),
        headers=request_headers,
        limits=FEED_LIMITS,
        follow_redirects=follow_redirects,
        transport=transport,
    )
