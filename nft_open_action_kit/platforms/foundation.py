"""
Foundation Service

Buys Foundation "buy now" listings through the Foundation NFT market.
The buyer pays the listed price; Foundation takes its fee from the seller.
"""

import logging
from typing import Any, List, Optional

from nft_open_action_kit.core.structures import ETHEREUM, NFTExtraction, SalePrice, UIData, UrlMatch
from nft_open_action_kit.integrations.abis import ERC721_ABI, FOUNDATION_MARKET_ABI, TOKEN_CREATOR_ABI
from nft_open_action_kit.platforms.base import ZERO_ADDRESS, PlatformService, compile_pattern

logger = logging.getLogger(__name__)

FOUNDATION_NFT_ADDRESS = "0x3B3ee1931Dc30C1957379FAc9aba94D1C48a5405"
FOUNDATION_MARKET_ADDRESS = "0xcDA72070E455bb31C7690a170224Ce43623d0B6f"

# getBuyPrice returns this price when no buy now is set
NO_BUY_PRICE = 2**256 - 1

# https://foundation.app/mint/eth/<contract>/<tokenId>
# https://foundation.app/@<creator>/foundation/<tokenId>
FOUNDATION_URL_PATTERN = compile_pattern(
    r"^https://foundation\.app/(?:mint/eth/(0x[a-f0-9]{40})|@[^/]+/foundation)/(\d+)(?:[/?#].*)?$"
)
FOUNDATION_CONTRACT_PATTERN = compile_pattern(r"^https://foundation\.app/mint/eth/(0x[a-f0-9]{40})")


async def extract_foundation_nft(url: str) -> Optional[UrlMatch]:
    match = FOUNDATION_URL_PATTERN.match(url)
    if not match:
        return None
    return UrlMatch(
        chain=ETHEREUM,
        contract_address=match.group(1) or FOUNDATION_NFT_ADDRESS,
        token_id=int(match.group(2)),
    )


class FoundationService(PlatformService):
    """Service for Foundation buy now listings."""

    FEE_PERCENT = 0
    DEFAULT_CONTRACT_ADDRESS = FOUNDATION_NFT_ADDRESS
    CONTRACT_URL_PATTERN = FOUNDATION_CONTRACT_PATTERN
    TOKEN_STANDARD = "erc721"

    mint_signature = (
        "function buyV2(address nftContract, uint256 tokenId, "
        "uint256 maxPrice, address referrer) external payable"
    )
    PURCHASE_ABI = FOUNDATION_MARKET_ABI
    PURCHASE_FUNCTIONS = {mint_signature: "buyV2"}

    async def get_minter_address(self, contract: str, token_id: int) -> Optional[str]:
        return FOUNDATION_MARKET_ADDRESS

    async def get_mint_signature(self, nft_details: NFTExtraction) -> Optional[str]:
        sale_price = await self._get_buy_price(nft_details.contract_address, nft_details.nft_id)
        if not self.is_sale_valid(sale_price):
            return None
        return self.mint_signature

    async def get_ui_data(
        self,
        signature: str,
        contract: str,
        token_id: int,
        dst_chain_id: int,
        source_url: Optional[str] = None,
    ) -> UIData:
        sell_address = self.resolve_sell_address(contract, source_url)

        # The shared Foundation collection records a creator per token
        if self.is_default_contract(sell_address):
            creator = await self.read_optional(sell_address, TOKEN_CREATOR_ABI, "tokenCreator", token_id)
        else:
            creator = await self.read_owner(sell_address)

        token_uri = await self.client.read_contract(sell_address, ERC721_ABI, "tokenURI", (token_id,))
        metadata = await self.fetch_token_metadata(token_uri)

        return self.build_ui_data(metadata, dst_chain_id, creator)

    async def get_price(
        self,
        contract: str,
        token_id: int,
        signature: str,
        user_address: str,
        unit: int = 1,
        source_url: Optional[str] = None,
    ) -> Optional[int]:
        sell_address = self.resolve_sell_address(contract, source_url)
        sale_price = await self._get_buy_price(sell_address, token_id)
        if not self.is_sale_valid(sale_price):
            return None
        return self.apply_fees(sale_price.price, unit)

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
        sell_address = self.resolve_sell_address(contract, source_url)
        referrer = profile_owner_address or ZERO_ADDRESS
        return [sell_address, token_id, price, referrer]

    async def _get_buy_price(self, contract: str, token_id: int) -> Optional[SalePrice]:
        seller, price = await self.client.read_contract(
            FOUNDATION_MARKET_ADDRESS,
            FOUNDATION_MARKET_ABI,
            "getBuyPrice",
            (contract, token_id),
        )
        if seller == ZERO_ADDRESS or int(price) == NO_BUY_PRICE:
            return None
        return SalePrice(price=int(price), token=ZERO_ADDRESS, seller=seller)
