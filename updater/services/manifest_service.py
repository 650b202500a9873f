"""
Manifest Service

Fetches the remote release manifest over HTTP. Each failure mode raises a
distinct UpdaterError subclass; no retries are attempted here.
"""

import logging

import httpx

from updater.constants import MANIFEST_REQUEST_HEADERS
from updater.exceptions import EmptyBodyError, HttpStatusError, NetworkError
from updater.schemas.manifest import RemoteManifest

logger = logging.getLogger(__name__)

# Default request timeout (seconds)
DEFAULT_TIMEOUT = 10.0


class ManifestClient:
    """GETs and parses the manifest document from a fixed URL."""

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ):
        self.url = url
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient()
        return self._client

    async def fetch(self) -> RemoteManifest:
        """
        Fetch and parse the manifest.

        Raises:
            NetworkError: timeout or connection failure
            HttpStatusError: any status other than 200
            EmptyBodyError: 200 with an empty body
            ManifestParseError: body is not a valid manifest
        """
        client = await self._get_client()
        try:
            response = await client.get(
                self.url,
                headers=MANIFEST_REQUEST_HEADERS,
                timeout=self.timeout,
            )
        except httpx.TimeoutException as exc:
            raise NetworkError(f"Manifest request timed out after {self.timeout}s", url=self.url) from exc
        except httpx.RequestError as exc:
            raise NetworkError(f"Manifest request error: {exc}", url=self.url) from exc
        except httpx.InvalidURL as exc:
            raise NetworkError(f"Invalid manifest URL: {exc}", url=self.url) from exc

        if response.status_code != 200:
            raise HttpStatusError(response.status_code, url=self.url)

        body = response.content
        if not body or not body.strip():
            raise EmptyBodyError(url=self.url)

        manifest = RemoteManifest.from_json(body)
        logger.debug("Fetched manifest from %s (version=%s)", self.url, manifest.version)
        return manifest

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
