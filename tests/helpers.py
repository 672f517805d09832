"""
Shared fakes and constants for the test suite.
"""

from typing import Any, Dict
from unittest.mock import AsyncMock, MagicMock

import httpx

from nft_open_action_kit.config import MetadataConfig
from nft_open_action_kit.core.structures import CHAINS_BY_ID, ETHEREUM
from nft_open_action_kit.integrations.chain_client import ChainClient, ChainClientProvider
from nft_open_action_kit.integrations.metadata_client import MetadataClient

SENDER = "0x1111111111111111111111111111111111111111"
PROFILE_OWNER = "0x2222222222222222222222222222222222222222"
ARTIST = "0x3333333333333333333333333333333333333333"
MODULE_ADDRESS = "0x4444444444444444444444444444444444444444"
COLLECTION = "0x5555555555555555555555555555555555555555"

SUPERRARE_URL = "https://superrare.com/artwork-v2/dawn-42"
TOKEN_URI = "https://metadata.test/tokens/42.json"
TOKEN_METADATA = {"name": "Dawn", "image": "ipfs://QmDawnImage", "description": "First light"}


def make_chain_client(responses: Dict[str, Any], chain=ETHEREUM) -> MagicMock:
    """
    Fake ChainClient answering view calls by function name.

    A response may be a plain value, an exception instance to raise, or a
    callable taking (address, *args).
    """
    client = MagicMock(spec=ChainClient)
    client.chain = chain

    async def read_contract(address, abi, function_name, args=()):
        response = responses[function_name]
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(address, *args)
        return response

    client.read_contract = AsyncMock(side_effect=read_contract)
    return client


def make_metadata_client(documents: Dict[str, Any]) -> MetadataClient:
    """MetadataClient backed by an in-memory httpx transport."""

    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        if url not in documents:
            return httpx.Response(404, json={"error": "not found"})
        document = documents[url]
        if isinstance(document, str):
            return httpx.Response(200, text=document)
        return httpx.Response(200, json=document)

    transport = httpx.MockTransport(handler)
    return MetadataClient(MetadataConfig(), httpx.AsyncClient(transport=transport))


def make_provider(client: MagicMock) -> ChainClientProvider:
    return ChainClientProvider({chain_id: client for chain_id in CHAINS_BY_ID})
