"""HTTP(S) feed transport with a local-file fallback."""

import asyncio
from pathlib import Path
from urllib.parse import urlparse
from urllib.request import url2pathname

import httpx

from feedkeep.exceptions import FetchError, FetchTimeoutError
from feedkeep.utils.http_client import create_http_client


class HttpFeedTransport:
    """Reads feed documents over HTTP(S), or from disk for local paths.

    ``file://`` URLs and plain filesystem paths are read directly, which
    keeps fixtures and offline feeds on the same code path as remote ones.
    """

    def __init__(
        self,
        timeout: float = 10.0,
        user_agent: str = "feedkeep/0.1 (RSS Reader)",
        headers: dict[str, str] | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize the transport.

        Args:
            timeout: HTTP request timeout in seconds.
            user_agent: User-Agent header for requests.
            headers: Extra request headers.
            client: Shared client; when omitted one is created lazily and
                closed by ``aclose()``.
        """
        self._timeout = timeout
        self._user_agent = user_agent
        self._headers = headers or {}
        self._client = client
        self._owns_client = client is None

    async def read_feed_document(self, url: str) -> str:
        """Read a feed document.

        Raises:
            FetchTimeoutError: When the HTTP request times out.
            FetchError: On HTTP status errors, network errors or unreadable files.
        """
        path = self._local_path(url)
        if path is not None:
            return await self._read_file(url, path)
        return await self._read_http(url)

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _read_http(self, url: str) -> str:
        if self._client is None:
            self._client = create_http_client(
                timeout=self._timeout,
                user_agent=self._user_agent,
                headers=self._headers,
            )

        try:
            response = await self._client.get(url)
            response.raise_for_status()
            return response.text
        except httpx.TimeoutException as e:
            raise FetchTimeoutError(url, f"Request timed out: {e}") from e
        except httpx.HTTPStatusError as e:
            raise FetchError(url, f"HTTP {e.response.status_code}") from e
        except httpx.RequestError as e:
            raise FetchError(url, f"Request failed: {e}") from e

    async def _read_file(self, url: str, path: Path) -> str:
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise FetchError(url, f"Cannot read file: {e}") from e

    @staticmethod
    def _local_path(url: str) -> Path | None:
        """Filesystem path for ``file://`` URLs and bare paths, else None."""
        parsed = urlparse(url)
        if parsed.scheme == "file":
            return Path(url2pathname(parsed.path))
        if parsed.scheme in ("http", "https"):
            return None
        # Windows drive letters parse as a one-letter scheme
        if not parsed.scheme or len(parsed.scheme) == 1:
            return Path(url)
        return None
