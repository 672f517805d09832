"""
Platform Service Interface

Defines the capability contract every marketplace adapter implements:
mint signature, price, sale validity, purchase arguments and display data.
Shared helpers cover fee application, sell-contract resolution from the
source URL, optional creator lookups and token metadata validation.
"""

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Pattern, Type

from nft_open_action_kit.core.calldata import encode_function_call
from nft_open_action_kit.core.structures import Chain, NFTExtraction, SalePrice, UIData, UrlMatch
from nft_open_action_kit.exceptions import ChainReadFailed, MetadataIncomplete
from nft_open_action_kit.integrations.abis import OWNABLE_ABI
from nft_open_action_kit.integrations.chain_client import ChainClient
from nft_open_action_kit.integrations.metadata_client import MetadataClient

logger = logging.getLogger(__name__)

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


@dataclass(frozen=True)
class ServiceConfig:
    """Everything a platform service needs for one chain."""

    chain: Chain
    client: ChainClient
    metadata: MetadataClient
    platform_name: str
    platform_logo_url: str
    api_key: Optional[str] = None


@dataclass(frozen=True)
class TokenMetadata:
    """The required fields of a token metadata document."""

    name: str
    image: str


class PlatformService(ABC):
    """
    Base interface for all marketplace services.

    Subclasses set `FEE_PERCENT`, optionally `DEFAULT_CONTRACT_ADDRESS` and
    `CONTRACT_URL_PATTERN`, and implement the abstract capabilities.
    """

    # Buyer fee on top of the sale price, in whole percent
    FEE_PERCENT: int = 0
    # Canonical selling contract; None means the NFT's own contract
    DEFAULT_CONTRACT_ADDRESS: Optional[str] = None
    # Group 1 captures a contract address embedded in a source URL
    CONTRACT_URL_PATTERN: Optional[Pattern[str]] = None
    TOKEN_STANDARD: str = "erc721"
    # Currency the purchase is paid in; the zero address is the native coin
    PAYMENT_TOKEN: str = ZERO_ADDRESS
    # ABI holding the purchase functions, keyed below by mint signature
    PURCHASE_ABI: List[dict] = []
    PURCHASE_FUNCTIONS: Dict[str, str] = {}

    def __init__(self, config: ServiceConfig):
        self.config = config
        self.client = config.client
        self.metadata = config.metadata
        self.platform_name = config.platform_name
        self.platform_logo_url = config.platform_logo_url

    @abstractmethod
    async def get_minter_address(self, contract: str, token_id: int) -> Optional[str]:
        """Contract that accepts the purchase call, or None if this NFT cannot be bought here."""
        pass

    @abstractmethod
    async def get_mint_signature(self, nft_details: NFTExtraction) -> Optional[str]:
        """Purchase function signature, only while the sale is valid."""
        pass

    @abstractmethod
    async def get_ui_data(
        self,
        signature: str,
        contract: str,
        token_id: int,
        dst_chain_id: int,
        source_url: Optional[str] = None,
    ) -> UIData:
        """Display metadata for the NFT. Raises on missing name or image."""
        pass

    @abstractmethod
    async def get_price(
        self,
        contract: str,
        token_id: int,
        signature: str,
        user_address: str,
        unit: int = 1,
        source_url: Optional[str] = None,
    ) -> Optional[int]:
        """Total price for `unit` copies including fees, or None without a valid sale."""
        pass

    @abstractmethod
    async def get_args(
        self,
        contract: str,
        token_id: int,
        sender_address: str,
        signature: str,
        price: int,
        quantity: int,
        profile_owner_address: str,
        source_url: Optional[str] = None,
    ) -> List[Any]:
        """Positional arguments for the purchase function."""
        pass

    def encode_purchase(self, signature: str, args: List[Any]) -> bytes:
        """Calldata for the purchase function behind `signature`."""
        function_name = self.PURCHASE_FUNCTIONS.get(signature)
        if not function_name:
            raise ValueError(f"{self.platform_name} has no purchase function for {signature!r}")
        return encode_function_call(self.PURCHASE_ABI, function_name, args)

    def is_sale_valid(self, sale_price: Optional[SalePrice]) -> bool:
        """A sale is valid iff it exists and its price is strictly positive."""
        if not sale_price:
            return False
        return sale_price.price > 0

    def apply_fees(self, base_price: int, unit: int = 1) -> int:
        """(base * fee% / 100 + base) * unit, with floor division."""
        return (base_price * self.FEE_PERCENT // 100 + base_price) * unit

    def resolve_sell_address(self, contract: str, source_url: Optional[str] = None) -> str:
        """
        The contract the sale lives on: an address embedded in `source_url`
        wins over the platform default, which wins over `contract`.
        """
        sell_address = self.DEFAULT_CONTRACT_ADDRESS or contract
        if source_url and self.CONTRACT_URL_PATTERN is not None:
            match = self.CONTRACT_URL_PATTERN.match(source_url)
            if match and match.group(1):
                sell_address = match.group(1)
        return sell_address

    def is_default_contract(self, address: str) -> bool:
        return bool(self.DEFAULT_CONTRACT_ADDRESS) and (
            address.lower() == self.DEFAULT_CONTRACT_ADDRESS.lower()
        )

    async def read_owner(self, address: str) -> Optional[str]:
        """owner() of a contract, or None when the contract is not Ownable."""
        try:
            return await self.client.read_contract(address, OWNABLE_ABI, "owner")
        except ChainReadFailed as e:
            logger.warning(
                f"Not ownable contract {address}, nft creator address not found: {e.original_error}"
            )
            return None

    async def read_optional(self, address: str, abi: List[dict], function_name: str, *args: Any) -> Optional[Any]:
        """A view call whose failure only means the attribute is unknown."""
        try:
            return await self.client.read_contract(address, abi, function_name, args)
        except ChainReadFailed as e:
            logger.warning(f"Could not read {function_name} on {address}: {e.original_error}")
            return None

    async def fetch_token_metadata(self, token_uri: str) -> TokenMetadata:
        """
        Fetch the metadata document behind `token_uri` and require a name and an image.

        Raises:
            MetadataFetchFailed: Document unreachable or not JSON
            MetadataIncomplete: `name` or `image` missing or empty
        """
        document = await self.metadata.fetch_json(token_uri)

        name = document.get("name")
        if not name or not isinstance(name, str):
            raise MetadataIncomplete(token_uri, "name")

        image = document.get("image")
        if not image or not isinstance(image, str):
            raise MetadataIncomplete(token_uri, "image")

        return TokenMetadata(name=name, image=image)

    def build_ui_data(
        self,
        metadata: TokenMetadata,
        dst_chain_id: int,
        creator: Optional[str] = None,
    ) -> UIData:
        return UIData(
            platform_name=self.platform_name,
            platform_logo_url=self.platform_logo_url,
            nft_name=metadata.name,
            nft_uri=metadata.image,
            token_standard=self.TOKEN_STANDARD,
            dst_chain_id=int(dst_chain_id),
            nft_creator_address=creator if creator and creator != ZERO_ADDRESS else None,
        )


UrlExtractor = Callable[[str], Awaitable[Optional[UrlMatch]]]
PlatformServiceConstructor = Type[PlatformService]


@dataclass(frozen=True)
class NFTPlatform:
    """
    Static description of one marketplace.

    Attributes:
        platform_name: Display name
        platform_logo_url: Logo shown next to the NFT
        url_pattern: Rule deciding whether a URL belongs to this marketplace
        url_extractor: Parses (chain, contract, token id) out of a matching URL
        platform_service: Service class instantiated per resolution
        api_key: Optional marketplace API key
    """
    platform_name: str
    platform_logo_url: str
    url_pattern: Pattern[str]
    url_extractor: UrlExtractor
    platform_service: PlatformServiceConstructor
    api_key: Optional[str] = None

    def matches(self, url: str) -> bool:
        return bool(self.url_pattern.match(url))


def compile_pattern(pattern: str) -> Pattern[str]:
    return re.compile(pattern, re.IGNORECASE)
