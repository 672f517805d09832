"""
Global test configuration and fixtures.
"""

from typing import Any, Callable, Dict

import pytest
import pytest_asyncio

from nft_open_action_kit.config import PlatformsConfig
from nft_open_action_kit.core.assembler import ActionAssembler
from nft_open_action_kit.core.registry import PlatformRegistry, create_default_registry
from nft_open_action_kit.core.structures import ActionRequest
from nft_open_action_kit.platforms.base import ZERO_ADDRESS
from tests.helpers import (
    ARTIST,
    MODULE_ADDRESS,
    PROFILE_OWNER,
    SENDER,
    SUPERRARE_URL,
    TOKEN_METADATA,
    TOKEN_URI,
    make_chain_client,
    make_metadata_client,
    make_provider,
)


@pytest.fixture
def superrare_responses() -> Dict[str, Any]:
    """Chain state for a SuperRare listing of token 42 at 100 wei."""
    return {
        "tokenSalePrices": (ARTIST, ZERO_ADDRESS, 100),
        "tokenCreator": ARTIST,
        "owner": ARTIST,
        "tokenURI": TOKEN_URI,
    }


@pytest.fixture
def metadata_documents() -> Dict[str, Any]:
    return {TOKEN_URI: dict(TOKEN_METADATA)}


@pytest.fixture
def chain_client(superrare_responses):
    return make_chain_client(superrare_responses)


@pytest_asyncio.fixture
async def metadata_client(metadata_documents):
    client = make_metadata_client(metadata_documents)
    yield client
    await client.close()


@pytest.fixture
def registry() -> PlatformRegistry:
    return create_default_registry(PlatformsConfig())


@pytest.fixture
def assembler(registry, chain_client, metadata_client) -> ActionAssembler:
    return ActionAssembler(
        registry=registry,
        clients=make_provider(chain_client),
        metadata=metadata_client,
        action_module_address=MODULE_ADDRESS,
    )


@pytest.fixture
def make_request() -> Callable[..., ActionRequest]:
    """Build an ActionRequest with sensible Lens identifiers."""

    def _make(source_url: str = SUPERRARE_URL, **overrides) -> ActionRequest:
        fields = dict(
            source_url=source_url,
            publication_acted_profile_id=1,
            publication_acted_id=2,
            actor_profile_id=3,
            sender_address=SENDER,
            profile_owner_address=PROFILE_OWNER,
        )
        fields.update(overrides)
        return ActionRequest(**fields)

    return _make
