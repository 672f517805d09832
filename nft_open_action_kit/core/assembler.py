"""
Action Assembler

Turns a marketplace URL plus caller-supplied Lens identifiers into a complete
ActionData. Each step feeds the next; any failure aborts the assembly and no
partial ActionData is ever returned.
"""

import logging
from typing import Optional

from nft_open_action_kit.core.calldata import encode_action_module_data
from nft_open_action_kit.core.registry import PlatformRegistry
from nft_open_action_kit.core.structures import ActArguments, ActionData, ActionRequest, Chain, NFTExtraction
from nft_open_action_kit.exceptions import (
    ConfigurationError,
    NFTKitBaseException,
    SaleInvalid,
    SaleNotFound,
)
from nft_open_action_kit.integrations.chain_client import ChainClientProvider
from nft_open_action_kit.integrations.metadata_client import MetadataClient
from nft_open_action_kit.platforms.base import NFTPlatform, PlatformService, ServiceConfig

logger = logging.getLogger(__name__)


class ActionAssembler:
    """
    Orchestrates registry lookup, platform service queries and encoding.

    Holds only read-only collaborators, so one instance can serve concurrent
    resolutions.
    """

    def __init__(
        self,
        registry: PlatformRegistry,
        clients: ChainClientProvider,
        metadata: MetadataClient,
        action_module_address: Optional[str] = None,
    ):
        self.registry = registry
        self.clients = clients
        self.metadata = metadata
        self.action_module_address = action_module_address

    def create_service(self, platform: NFTPlatform, chain: Chain) -> PlatformService:
        """Instantiate the platform's service bound to the NFT's chain."""
        config = ServiceConfig(
            chain=chain,
            client=self.clients.get(chain),
            metadata=self.metadata,
            platform_name=platform.platform_name,
            platform_logo_url=platform.platform_logo_url,
            api_key=platform.api_key,
        )
        return platform.platform_service(config)

    async def resolve(self, url: str) -> NFTExtraction:
        """
        Match `url` to a platform and bind its service.

        Raises:
            UnsupportedPlatform, MalformedReference, ConfigurationError
        """
        matched = await self.registry.match(url)
        url_match = matched.url_match
        service = self.create_service(matched.platform, url_match.chain)
        return NFTExtraction(
            chain=url_match.chain,
            contract_address=url_match.contract_address,
            nft_id=url_match.token_id,
            service=service,
            source_url=url,
        )

    async def assemble(self, request: ActionRequest) -> ActionData:
        """
        Build the complete ActionData for `request`.

        Raises:
            UnsupportedPlatform: URL matches no platform
            MalformedReference: URL matched but holds no NFT reference
            SaleInvalid: NFT is not currently purchasable
            SaleNotFound: No valid sale for the requested quantity
            MetadataFetchFailed, MetadataIncomplete: Token metadata problems
            ChainReadFailed: A required contract read failed
            ConfigurationError: Missing chain or action module configuration
        """
        if request.quantity < 1:
            raise ValueError(f"Quantity must be at least 1, got {request.quantity}")
        if not self.action_module_address:
            raise ConfigurationError("Open action module address is not configured")

        try:
            return await self._assemble(request)
        except NFTKitBaseException as e:
            logger.error(
                f"Action assembly for {request.source_url} aborted: {type(e).__name__}: {e}",
                extra={"source_url": request.source_url},
            )
            raise

    async def _assemble(self, request: ActionRequest) -> ActionData:
        extraction = await self.resolve(request.source_url)
        service = extraction.service
        contract = extraction.contract_address
        token_id = extraction.nft_id
        dst_chain_id = extraction.chain.chain_id

        minter = await service.get_minter_address(contract, token_id)
        if not minter:
            raise SaleInvalid(contract, token_id)

        signature = await service.get_mint_signature(extraction)
        if not signature:
            raise SaleInvalid(contract, token_id)

        price = await service.get_price(
            contract,
            token_id,
            signature,
            request.sender_address,
            request.quantity,
            request.source_url,
        )
        if not price:
            raise SaleNotFound(contract, token_id)

        ui_data = await service.get_ui_data(
            signature, contract, token_id, dst_chain_id, request.source_url
        )

        args = await service.get_args(
            contract,
            token_id,
            request.sender_address,
            signature,
            price,
            request.quantity,
            request.profile_owner_address,
            request.source_url,
        )
        calldata = service.encode_purchase(signature, args)

        action_module_data = encode_action_module_data(
            dst_chain_id=dst_chain_id,
            target=minter,
            payment_token=service.PAYMENT_TOKEN,
            value=price,
            sender=request.sender_address,
            calldata=calldata,
        )

        logger.info(
            f"Assembled {service.platform_name} action for {contract} #{token_id} "
            f"on chain {dst_chain_id}: total {price} for {request.quantity}",
            extra={"source_url": request.source_url, "platform": service.platform_name},
        )

        return ActionData(
            act_arguments=ActArguments(
                publication_acted_profile_id=request.publication_acted_profile_id,
                publication_acted_id=request.publication_acted_id,
                actor_profile_id=request.actor_profile_id,
                referrer_profile_ids=tuple(request.referrer_profile_ids),
                referrer_pub_ids=tuple(request.referrer_pub_ids),
                action_module_address=self.action_module_address,
                action_module_data=action_module_data,
            ),
            ui_data=ui_data,
        )
