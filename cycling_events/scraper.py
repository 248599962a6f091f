import httpx
import structlog

from cycling_events.config import FetchConfig
from cycling_events.exceptions import NetworkError

logger = structlog.get_logger(__name__)


class Scraper:
    """Async HTTP fetcher shared by all sources during one aggregation run.

    Use as an async context manager; the underlying client is opened on
    enter and closed on exit:

        async with Scraper(config) as scraper:
            html = await scraper.get("https://nycc.org/rides")

    There is no retry. A failed request raises NetworkError and the calling
    source decides what to do with it.
    """

    def __init__(
        self,
        config: FetchConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the Scraper.

        Args:
            config: Headers and timeout for every request.
            client: An optional pre-built client. It is not closed on exit.
        """
        self.config = config or FetchConfig()
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> "Scraper":
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers=dict(self.config.headers),
                timeout=httpx.Timeout(self.config.timeout_seconds),
                follow_redirects=True,
            )
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def get(self, url: str) -> str:
        """Performs a GET request and returns the response body.

        Args:
            url: Target URL, query string included.

        Returns:
            The decoded response text.

        Raises:
            NetworkError: On transport failure, timeout or a non-2xx status.
        """
        if self._client is None:
            raise RuntimeError("Scraper used outside of 'async with'")

        logger.info("fetching_url", url=url)
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise NetworkError(
                f"{url} returned HTTP {e.response.status_code}",
                url=url,
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise NetworkError(
                f"Request to {url} failed: {e.__class__.__name__}: {e}",
                url=url,
            ) from e

        return response.text
