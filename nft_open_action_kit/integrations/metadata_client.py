"""
Token Metadata Client

Fetches off-chain JSON documents (token metadata, Lens publication metadata)
over HTTP, IPFS and Arweave gateways, or decodes them from data: URIs.
"""

import base64
import json
import logging
import time
from typing import Any, Dict, Optional
from urllib.parse import unquote

import httpx

from nft_open_action_kit.config import MetadataConfig
from nft_open_action_kit.exceptions import MetadataFetchFailed
from nft_open_action_kit.utils.logging_config import performance_logger

logger = logging.getLogger(__name__)


class MetadataClient:
    """
    Async client for token metadata documents.
    """

    def __init__(
        self,
        config: Optional[MetadataConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config or MetadataConfig()
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout=self.config.http_timeout, connect=10.0),
            limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
            follow_redirects=True,
            max_redirects=self.config.max_redirects,
        )

    def resolve_uri(self, uri: str) -> str:
        """Rewrite ipfs:// and ar:// URIs to their configured gateways."""
        if uri.startswith("ipfs://"):
            path = uri[len("ipfs://"):]
            if path.startswith("ipfs/"):
                path = path[len("ipfs/"):]
            return self.config.ipfs_gateway_url.rstrip("/") + "/" + path
        if uri.startswith("ar://"):
            return self.config.arweave_gateway_url.rstrip("/") + "/" + uri[len("ar://"):]
        return uri

    async def fetch_json(self, uri: str) -> Dict[str, Any]:
        """
        Return the JSON object behind `uri`.

        Raises:
            MetadataFetchFailed: If the document is unreachable, not JSON, or not an object
        """
        if not uri:
            raise MetadataFetchFailed(uri)

        if uri.startswith("data:"):
            document = self._decode_data_uri(uri)
        else:
            document = await self._fetch_remote(uri)

        if not isinstance(document, dict):
            raise MetadataFetchFailed(uri, ValueError("metadata is not a JSON object"))
        return document

    async def _fetch_remote(self, uri: str) -> Any:
        url = self.resolve_uri(uri)
        if not url.startswith(("http://", "https://")):
            raise MetadataFetchFailed(uri, ValueError(f"unsupported URI scheme: {url}"))

        started = time.monotonic()
        status_code = None
        try:
            logger.debug(f"Fetching metadata from {url}")
            response = await self._client.get(url, headers={"accept": "application/json"})
            status_code = response.status_code
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Metadata fetch from {url} failed: {e}")
            raise MetadataFetchFailed(uri, e) from e
        finally:
            performance_logger.log_metadata_fetch(
                uri=url,
                duration_ms=(time.monotonic() - started) * 1000,
                status_code=status_code,
            )

    def _decode_data_uri(self, uri: str) -> Any:
        header, sep, payload = uri.partition(",")
        if not sep:
            raise MetadataFetchFailed(uri, ValueError("data URI has no payload"))
        try:
            if header.endswith(";base64"):
                text = base64.b64decode(payload).decode("utf-8")
            else:
                text = unquote(payload)
            return json.loads(text)
        except (ValueError, UnicodeDecodeError) as e:
            raise MetadataFetchFailed(uri[:64], e) from e

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()
