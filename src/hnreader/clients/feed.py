"""HTTP client for the HN Daily digest feed."""

import httpx

from hnreader import __version__
from hnreader.utils.logging import get_logger

logger = get_logger(__name__)


class FetchError(Exception):
    """Raised when the feed cannot be retrieved."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class FeedFetcher:
    """Fetches the raw digest feed document."""

    def __init__(self, feed_url: str, timeout: float = 30.0) -> None:
        self._feed_url = feed_url
        self._client = httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            headers={"User-Agent": f"HNReader/{__version__} (RSS Reader)"},
        )

    @property
    def feed_url(self) -> str:
        return self._feed_url

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "FeedFetcher":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    async def fetch(self) -> bytes:
        """Fetch the feed body.

        Returns:
            The raw response body of a successful response.

        Raises:
            FetchError: On timeout, transport failure or a non-success status.
        """
        logger.info("Fetching feed", url=self._feed_url)
        try:
            response = await self._client.get(self._feed_url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "HTTP error fetching feed", url=self._feed_url, status=e.response.status_code
            )
            raise FetchError(f"HTTP {e.response.status_code}") from e
        except httpx.TimeoutException as e:
            logger.warning("Timeout fetching feed", url=self._feed_url)
            raise FetchError("timeout") from e
        except httpx.RequestError as e:
            logger.warning("Request error fetching feed", url=self._feed_url, error=str(e))
            raise FetchError(f"request error: {e}") from e

        logger.info("Feed fetched", url=self._feed_url, size=len(response.content))
        return response.content
