"""
Platform Registry

Read-only table of supported marketplaces. Given a URL it finds the owning
marketplace and parses the NFT identity out of the URL.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from nft_open_action_kit.config import PlatformsConfig
from nft_open_action_kit.core.structures import UrlMatch
from nft_open_action_kit.exceptions import MalformedReference, UnsupportedPlatform
from nft_open_action_kit.platforms.base import NFTPlatform, compile_pattern
from nft_open_action_kit.platforms.foundation import (
    FoundationService,
    extract_foundation_nft,
)
from nft_open_action_kit.platforms.superrare import (
    SuperRareService,
    extract_superrare_nft,
)
from nft_open_action_kit.platforms.zora import ZoraService, extract_zora_nft

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistryMatch:
    """A URL resolved to its marketplace and on-chain identity."""

    key: str
    platform: NFTPlatform
    url_match: UrlMatch


class PlatformRegistry:
    """
    Immutable, ordered mapping from platform key to NFTPlatform.

    The first platform whose URL rule matches wins.
    """

    def __init__(self, platforms: Iterable[Tuple[str, NFTPlatform]]):
        table: Dict[str, NFTPlatform] = {}
        for key, platform in platforms:
            if key in table:
                raise ValueError(f"Platform {key} is registered twice")
            table[key] = platform
        self._platforms: Mapping[str, NFTPlatform] = MappingProxyType(table)
        logger.debug(f"Platform registry built with: {', '.join(table) or 'nothing'}")

    @property
    def platforms(self) -> Mapping[str, NFTPlatform]:
        return self._platforms

    def find(self, url: str) -> Optional[Tuple[str, NFTPlatform]]:
        """First (key, platform) whose URL rule matches, or None."""
        for key, platform in self._platforms.items():
            if platform.matches(url):
                return key, platform
        return None

    def is_supported(self, url: str) -> bool:
        return self.find(url) is not None

    async def match(self, url: str) -> RegistryMatch:
        """
        Resolve `url` to its platform and NFT identity.

        Raises:
            UnsupportedPlatform: No platform matches the URL
            MalformedReference: A platform matched but no NFT could be extracted
        """
        found = self.find(url)
        if found is None:
            raise UnsupportedPlatform(url)

        key, platform = found
        try:
            url_match = await platform.url_extractor(url)
        except ValueError as e:
            raise MalformedReference(url, platform.platform_name, str(e)) from e

        if url_match is None:
            raise MalformedReference(url, platform.platform_name)

        logger.debug(
            f"Matched {url} to {platform.platform_name}: "
            f"{url_match.contract_address} #{url_match.token_id} on {url_match.chain.name}"
        )
        return RegistryMatch(key=key, platform=platform, url_match=url_match)


def default_platforms(config: Optional[PlatformsConfig] = None) -> List[Tuple[str, NFTPlatform]]:
    """The marketplaces supported out of the box."""
    config = config or PlatformsConfig()
    return [
        (
            "superrare",
            NFTPlatform(
                platform_name="SuperRare",
                platform_logo_url=config.superrare_logo_url,
                url_pattern=compile_pattern(r"^https://superrare\.com/"),
                url_extractor=extract_superrare_nft,
                platform_service=SuperRareService,
                api_key=config.superrare_api_key,
            ),
        ),
        (
            "foundation",
            NFTPlatform(
                platform_name="Foundation",
                platform_logo_url=config.foundation_logo_url,
                url_pattern=compile_pattern(r"^https://foundation\.app/"),
                url_extractor=extract_foundation_nft,
                platform_service=FoundationService,
                api_key=config.foundation_api_key,
            ),
        ),
        (
            "zora",
            NFTPlatform(
                platform_name="Zora",
                platform_logo_url=config.zora_logo_url,
                url_pattern=compile_pattern(r"^https://zora\.co/collect/"),
                url_extractor=extract_zora_nft,
                platform_service=ZoraService,
                api_key=config.zora_api_key,
            ),
        ),
    ]


def create_default_registry(config: Optional[PlatformsConfig] = None) -> PlatformRegistry:
    return PlatformRegistry(default_platforms(config))
