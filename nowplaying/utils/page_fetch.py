"""
Page fetch operations

Fetches the raw text content of source pages with retry logic. Every failure
surfaces as PageFetchError so callers can isolate it per source.
"""
import asyncio
import logging

import httpx


logger = logging.getLogger(__name__)


class PageFetchError(Exception):
    """Raised when a page could not be fetched after all attempts"""

    def __init__(self, url: str, message: str):
        super().__init__(message)
        self.url = url


class PageFetcher:
    """
    Fetches page text with a custom client identifier.

    Retries on transient network errors (timeouts, connection errors, 5xx).
    Does NOT retry on 4xx HTTP errors (client errors).
    """

    def __init__(
        self,
        client_identifier: str,
        *,
        timeout: float = 10.0,
        max_retries: int = 2,
        backoff_factor: float = 2.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.client_identifier = client_identifier
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.backoff_factor = backoff_factor
        self._transport = transport

    async def fetch_text(self, url: str) -> str:
        """
        Fetch a page and return its decoded text

        Args:
            url: Page URL

        Returns:
            Response body as text

        Raises:
            PageFetchError: If the page could not be fetched
        """
        logger.debug("Fetching %s as %s", url, self.client_identifier)

        last_error: Exception | None = None

        for attempt in range(self.max_retries):
            try:
                async with httpx.AsyncClient(
                    timeout=self.timeout,
                    headers={"User-Agent": self.client_identifier},
                    follow_redirects=True,
                    transport=self._transport,
                ) as client:
                    response = await client.get(url)
                    response.raise_for_status()
                    logger.debug("Fetched %s (%s chars)", url, len(response.text))
                    return response.text

            except (httpx.TimeoutException, httpx.TransportError) as e:
                # Transient network errors - retry
                last_error = e
                if attempt < self.max_retries - 1:
                    wait_time = self.backoff_factor ** attempt
                    logger.warning(
                        "Fetch attempt %s/%s for %s failed (transient error): %s. Retrying in %.1fs...",
                        attempt + 1,
                        self.max_retries,
                        url,
                        type(e).__name__,
                        wait_time,
                    )
                    await asyncio.sleep(wait_time)

            except httpx.HTTPStatusError as e:
                status_code = e.response.status_code
                if 400 <= status_code < 500:
                    logger.warning("HTTP %s (client error) for %s", status_code, url)
                    raise PageFetchError(url, f"HTTP {status_code} fetching {url}") from e

                # 5xx server error - retry
                last_error = e
                if attempt < self.max_retries - 1:
                    wait_time = self.backoff_factor ** attempt
                    logger.warning(
                        "Fetch attempt %s/%s for %s failed (HTTP %s server error). Retrying in %.1fs...",
                        attempt + 1,
                        self.max_retries,
                        url,
                        status_code,
                        wait_time,
                    )
                    await asyncio.sleep(wait_time)

        logger.error("Fetch of %s failed after %s attempts", url, self.max_retries)
        if isinstance(last_error, httpx.HTTPStatusError):
            message = f"HTTP {last_error.response.status_code} fetching {url}"
        else:
            message = f"{type(last_error).__name__} fetching {url}: {last_error}"
        raise PageFetchError(url, message) from last_error
