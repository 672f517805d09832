"""
SuperRare Service

Buys SuperRare ERC-721 listings through the SuperRare Bazaar marketplace.
SuperRare charges the buyer a 3% marketplace fee on top of the sale price.
"""

import logging
from typing import Any, List, Optional

from nft_open_action_kit.core.structures import ETHEREUM, NFTExtraction, SalePrice, UIData, UrlMatch
from nft_open_action_kit.integrations.abis import (
    ERC721_ABI,
    SUPERRARE_MARKETPLACE_ABI,
    TOKEN_CREATOR_ABI,
)
from nft_open_action_kit.platforms.base import ZERO_ADDRESS, PlatformService, compile_pattern

logger = logging.getLogger(__name__)

SUPER_RARE_ADDRESS = "0xb932a70a57673d89f4acffbe830e8ed7f75fb9e0"
SUPER_RARE_MINTER_ADDRESS = "0x6D7c44773C52D396F43c2D511B81aa168E9a7a42"

# https://superrare.com/artwork-v2/<slug>-<tokenId>
# https://superrare.com/<contract>/<slug>-<tokenId>
SUPER_RARE_URL_PATTERN = compile_pattern(
    r"^https://superrare\.com/(?:artwork-v2|(0x[a-f0-9]{40}))/(?:[^/?#]*-)?(\d+)(?:[/?#].*)?$"
)
SUPER_RARE_CONTRACT_PATTERN = compile_pattern(r"^https://superrare\.com/(0x[a-f0-9]{40})")


async def extract_superrare_nft(url: str) -> Optional[UrlMatch]:
    match = SUPER_RARE_URL_PATTERN.match(url)
    if not match:
        return None
    return UrlMatch(
        chain=ETHEREUM,
        contract_address=match.group(1) or SUPER_RARE_ADDRESS,
        token_id=int(match.group(2)),
    )


class SuperRareService(PlatformService):
    """Service for SuperRare marketplace listings."""

    FEE_PERCENT = 3
    DEFAULT_CONTRACT_ADDRESS = SUPER_RARE_ADDRESS
    CONTRACT_URL_PATTERN = SUPER_RARE_CONTRACT_PATTERN
    TOKEN_STANDARD = "erc721"

    mint_signature = (
        "function buy(address _originContract, uint256 _tokenId, "
        "address _currencyAddress, uint256 _amount) external payable"
    )
    PURCHASE_ABI = SUPERRARE_MARKETPLACE_ABI
    PURCHASE_FUNCTIONS = {mint_signature: "buy"}

    async def get_minter_address(self, contract: str, token_id: int) -> Optional[str]:
        return SUPER_RARE_MINTER_ADDRESS

    async def get_mint_signature(self, nft_details: NFTExtraction) -> Optional[str]:
        sale_price = await self._get_sale_price(nft_details.contract_address, nft_details.nft_id)
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
        sale_price = await self._get_sale_price(sell_address, token_id)
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
        return [sell_address, token_id, ZERO_ADDRESS, price]

    async def _get_sale_price(self, contract: str, token_id: int) -> Optional[SalePrice]:
        sale = await self.client.read_contract(
            SUPER_RARE_MINTER_ADDRESS,
            SUPERRARE_MARKETPLACE_ABI,
            "tokenSalePrices",
            (contract, token_id, ZERO_ADDRESS),
        )
        if not sale or len(sale) != 3:
            return None

        seller, currency, amount = sale
        return SalePrice(price=int(amount), token=currency, seller=seller)
