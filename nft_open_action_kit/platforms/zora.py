"""
Zora Service

Mints Zora ERC-1155 tokens that are on a fixed price sale. The protocol mint
fee is charged per token, so it is folded into the base price of the sale.
"""

import logging
import time
from typing import Any, List, Optional

from eth_abi import encode
from eth_utils import to_checksum_address

from nft_open_action_kit.core.structures import (
    BASE,
    CHAINS_BY_NAME,
    ETHEREUM,
    OPTIMISM,
    ZORA,
    NFTExtraction,
    SalePrice,
    UIData,
    UrlMatch,
)
from nft_open_action_kit.integrations.abis import ZORA_1155_ABI, ZORA_FIXED_PRICE_STRATEGY_ABI
from nft_open_action_kit.platforms.base import ZERO_ADDRESS, PlatformService, compile_pattern

logger = logging.getLogger(__name__)

ZORA_FIXED_PRICE_STRATEGY_ADDRESS = "0x04E2516A2c207E84a1839755675dfd8eF6302F0a"

ZORA_CHAINS = {chain.chain_id for chain in (ETHEREUM, OPTIMISM, BASE, ZORA)}

# https://zora.co/collect/<chain>:<contract>/<tokenId>
ZORA_URL_PATTERN = compile_pattern(
    r"^https://zora\.co/collect/([a-z]+):(0x[a-f0-9]{40})/(\d+)(?:[/?#].*)?$"
)
ZORA_CONTRACT_PATTERN = compile_pattern(r"^https://zora\.co/collect/[a-z]+:(0x[a-f0-9]{40})")


async def extract_zora_nft(url: str) -> Optional[UrlMatch]:
    match = ZORA_URL_PATTERN.match(url)
    if not match:
        return None

    chain = CHAINS_BY_NAME.get(match.group(1).lower())
    if chain is None or chain.chain_id not in ZORA_CHAINS:
        logger.debug(f"Zora URL on unsupported chain '{match.group(1)}': {url}")
        return None

    return UrlMatch(chain=chain, contract_address=match.group(2), token_id=int(match.group(3)))


class ZoraService(PlatformService):
    """Service for Zora ERC-1155 fixed price mints."""

    FEE_PERCENT = 0
    CONTRACT_URL_PATTERN = ZORA_CONTRACT_PATTERN
    TOKEN_STANDARD = "erc1155"

    mint_signature = (
        "function mintWithRewards(address minter, uint256 tokenId, uint256 quantity, "
        "bytes minterArguments, address mintReferral) external payable"
    )
    PURCHASE_ABI = ZORA_1155_ABI
    PURCHASE_FUNCTIONS = {mint_signature: "mintWithRewards"}

    async def get_minter_address(self, contract: str, token_id: int) -> Optional[str]:
        # Zora mints are called on the collection itself
        return contract

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

        creator = await self.read_owner(sell_address)

        token_uri = await self.client.read_contract(sell_address, ZORA_1155_ABI, "uri", (token_id,))
        # ERC-1155 clients substitute {id} with the zero-padded hex token id
        token_uri = token_uri.replace("{id}", f"{token_id:064x}")
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
        # minterArguments: abi.encode(address mintTo, string comment)
        minter_arguments = encode(["address", "string"], [to_checksum_address(sender_address), ""])
        return [
            ZORA_FIXED_PRICE_STRATEGY_ADDRESS,
            token_id,
            quantity,
            minter_arguments,
            profile_owner_address or ZERO_ADDRESS,
        ]

    async def _get_sale_price(self, contract: str, token_id: int) -> Optional[SalePrice]:
        sale_start, sale_end, _max_per_address, price_per_token, funds_recipient = (
            await self.client.read_contract(
                ZORA_FIXED_PRICE_STRATEGY_ADDRESS,
                ZORA_FIXED_PRICE_STRATEGY_ABI,
                "sale",
                (contract, token_id),
            )
        )

        # An unconfigured sale reads back as all zeroes
        if sale_end == 0:
            return None

        now = self._now()
        if now < sale_start or now > sale_end:
            logger.info(f"Zora sale for {contract} #{token_id} is outside its window")
            return None

        mint_fee = await self.client.read_contract(contract, ZORA_1155_ABI, "mintFee")
        return SalePrice(
            price=int(price_per_token) + int(mint_fee),
            token=ZERO_ADDRESS,
            seller=funds_recipient,
        )

    def _now(self) -> int:
        return int(time.time())
