"""Async client for the Electron release feed.

Fetches ``releases.json`` and normalises it into ``ReleaseDescriptor``
objects.  Any failure to obtain a JSON array of releases is reported as a
single ``FeedUnavailableError`` so the caller can fall back to manual entry.

Typical usage::

    client = ReleaseFeedClient()
    try:
        releases = await client.fetch_releases()
    except FeedUnavailableError as exc:
        print_error(str(exc))
"""

from __future__ import annotations

import httpx

from ..errors import FeedUnavailableError
from .matcher import ReleaseDescriptor, normalize_releases

RELEASES_URL = "https://releases.electronjs.org/releases.json"


class ReleaseFeedClient:
    """Fetches the Electron release feed over HTTPS.

    ``timeout`` of ``None`` waits indefinitely; the tool is interactive and a
    human can interrupt a hung request.
    """

    def __init__(self, url: str = RELEASES_URL, timeout: float | None = None) -> None:
        self.url = url
        self.timeout = timeout

    def _client(self) -> httpx.AsyncClient:
        """Return a fresh ``AsyncClient`` configured with our timeout."""
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            follow_redirects=True,
        )

    async def fetch_json(self) -> list:
        """GET the feed and return its decoded top-level array.

        Raises:
            FeedUnavailableError: On any network, HTTP or decoding failure.
        """
        try:
            async with self._client() as client:
                response = await client.get(self.url)
        except httpx.TimeoutException:
            raise FeedUnavailableError(self.url, f"timed out after {self.timeout}s") from None
        except httpx.HTTPError as exc:
            raise FeedUnavailableError(self.url, str(exc) or type(exc).__name__) from exc

        if response.status_code != 200:
            raise FeedUnavailableError(self.url, f"HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as exc:
            raise FeedUnavailableError(self.url, f"malformed JSON: {exc}") from exc

        if not isinstance(data, list):
            raise FeedUnavailableError(self.url, "expected a JSON array of releases")
        return data

    async def fetch_releases(self) -> list[ReleaseDescriptor]:
        """Fetch the feed and return it as release descriptors."""
        return normalize_releases(await self.fetch_json())
