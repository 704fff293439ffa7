"""
Download the Red cog index.

The index is fetched fresh for every request; nothing is cached here.
"""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, Optional

import httpx

from cog_browser.domain.models import BrowserConfig

logger = logging.getLogger(__name__)


class IndexUnavailable(Exception):
    """The cog index could not be downloaded or decoded."""


class IndexFetcher:
    """Fetches and decodes ``1-min.json`` from the configured index URL."""

    def __init__(
        self,
        config: BrowserConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        retry_delay: float = 1.0,
    ):
        self.config = config
        self.transport = transport
        self.retry_delay = retry_delay

    async def _download(self, url: str) -> bytes:
        last_error: Exception | None = None
        attempts = self.config.fetch_attempts

        # Basic retry loop for flaky connections.
        for attempt in range(1, attempts + 1):
            try:
                async with httpx.AsyncClient(
                    follow_redirects=True,
                    timeout=self.config.fetch_timeout_seconds,
                    transport=self.transport,
                ) as client:
                    response = await client.get(url)
                    response.raise_for_status()
                    return response.content
            except httpx.InvalidURL as e:
                # configuration error, not retried
                logger.error(f"Invalid index URL {url}: {e}")
                raise IndexUnavailable(f"Invalid index URL {url}") from e
            except httpx.HTTPError as e:
                last_error = e
                if attempt < attempts:
                    logger.warning(f"Index download failed (attempt {attempt}/{attempts}): {e}. Retrying...")
                    await asyncio.sleep(self.retry_delay * attempt)

        logger.error(f"Index download failed after {attempts} attempts: {last_error}")
        raise IndexUnavailable(f"Could not download {url}") from last_error

    async def fetch(self) -> Dict[str, Any]:
        """
        Return the decoded index as a mapping of source key to repository data.

        Raises:
            IndexUnavailable: If the download fails, the body is not JSON, or
                the top-level value is not an object.
        """
        url = self.config.index_json_url
        logger.debug(f"Fetching cog index from {url}")
        body = await self._download(url)

        try:
            data = json.loads(body)
        except (ValueError, RecursionError) as e:
            logger.error(f"Index at {url} is not valid JSON: {e}")
            raise IndexUnavailable(f"Malformed index at {url}") from e

        if not isinstance(data, dict):
            logger.error(f"Index at {url} is a {type(data).__name__}, expected an object")
            raise IndexUnavailable(f"Malformed index at {url}")

        return data
