"""
NFT Open Action Kit

Entry point for callers: detects purchasable NFTs in Lens publication content
and builds ActionData for publications that carry the NFT open action.
"""

import logging
import re
from typing import Any, Dict, Iterable, List, Optional

from nft_open_action_kit.config import AppConfig, settings as default_settings
from nft_open_action_kit.core.assembler import ActionAssembler
from nft_open_action_kit.core.calldata import decode_init_data, encode_init_data
from nft_open_action_kit.core.registry import PlatformRegistry, create_default_registry
from nft_open_action_kit.core.structures import ActionData, ActionRequest, PublicationInfo
from nft_open_action_kit.exceptions import MalformedReference
from nft_open_action_kit.integrations.chain_client import ChainClientProvider
from nft_open_action_kit.integrations.metadata_client import MetadataClient

logger = logging.getLogger(__name__)

URL_PATTERN = re.compile(r"https?://[^\s<>\"'()\[\]]+")
_TRAILING_PUNCTUATION = ".,;:!?"


def extract_urls(text: str) -> List[str]:
    """URLs in `text`, in order of appearance, without trailing punctuation."""
    urls = []
    for raw in URL_PATTERN.findall(text or ""):
        url = raw.rstrip(_TRAILING_PUNCTUATION)
        if url and url not in urls:
            urls.append(url)
    return urls


def publication_text(document: Dict[str, Any]) -> str:
    """Text content of a Lens publication metadata document (v1 or v2 layout)."""
    parts: List[str] = []
    lens = document.get("lens")
    if isinstance(lens, dict):
        for key in ("content", "sharingLink"):
            value = lens.get(key)
            if isinstance(value, str):
                parts.append(value)
    for key in ("content", "external_url", "description"):
        value = document.get(key)
        if isinstance(value, str):
            parts.append(value)
    return "\n".join(parts)


class NftOpenActionKit:
    """
    Detects NFTs in publications and turns publications into ActionData.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        registry: Optional[PlatformRegistry] = None,
        clients: Optional[ChainClientProvider] = None,
        metadata: Optional[MetadataClient] = None,
    ):
        self.config = config or default_settings
        self.registry = registry or create_default_registry(self.config.platforms)
        self.clients = clients or ChainClientProvider.from_config(self.config.chains)
        self.metadata = metadata or MetadataClient(self.config.metadata)
        self.assembler = ActionAssembler(
            registry=self.registry,
            clients=self.clients,
            metadata=self.metadata,
            action_module_address=self.config.lens.open_action_module_address,
        )

    async def detect_and_return_calldata(self, content_uri: str) -> Optional[str]:
        """
        Find the first purchasable NFT linked from a publication.

        Args:
            content_uri: URI of the Lens publication metadata document

        Returns:
            Hex open action init data, or None if no linked NFT is purchasable
        """
        document = await self.metadata.fetch_json(content_uri)
        return await self.detect_in_urls(extract_urls(publication_text(document)))

    async def detect_in_urls(self, urls: Iterable[str]) -> Optional[str]:
        for url in urls:
            if not self.registry.is_supported(url):
                continue

            try:
                extraction = await self.assembler.resolve(url)
            except MalformedReference as e:
                logger.info(f"Skipping {url}: {e}")
                continue

            signature = await extraction.service.get_mint_signature(extraction)
            if not signature:
                logger.info(f"Skipping {url}: not currently purchasable")
                continue

            logger.info(f"Detected {extraction.service.platform_name} NFT at {url}")
            return encode_init_data(
                extraction.chain.chain_id,
                extraction.contract_address,
                extraction.nft_id,
                url,
            )

        return None

    async def action_data_from_post(
        self,
        post: PublicationInfo,
        profile_id: int,
        sender_address: str,
        src_chain_id: int,
        quantity: int = 1,
        referrer_profile_ids: Iterable[int] = (),
        referrer_pub_ids: Iterable[int] = (),
    ) -> ActionData:
        """
        Build ActionData for a publication that carries the NFT open action.

        Args:
            post: Publication with its action modules and their init data
            profile_id: Profile acting on the publication
            sender_address: Address paying for the NFT
            src_chain_id: Chain the act transaction is submitted on
            quantity: Number of copies to buy

        Raises:
            MalformedReference: The publication has no NFT open action or its
                init data disagrees with its source URL
        """
        init_data = self._find_init_data(post)
        decoded = decode_init_data(init_data)

        extraction = await self.assembler.resolve(decoded.source_url)
        if (
            extraction.chain.chain_id != decoded.chain_id
            or extraction.contract_address.lower() != decoded.contract_address.lower()
            or extraction.nft_id != decoded.token_id
        ):
            raise MalformedReference(
                decoded.source_url,
                extraction.service.platform_name,
                "Open action init data does not match its source URL",
            )

        if src_chain_id != decoded.chain_id:
            logger.info(
                f"Cross-chain action: act on chain {src_chain_id}, NFT on chain {decoded.chain_id}"
            )

        request = ActionRequest(
            source_url=decoded.source_url,
            publication_acted_profile_id=post.profile_id,
            publication_acted_id=post.pub_id,
            actor_profile_id=profile_id,
            sender_address=sender_address,
            profile_owner_address=post.profile_owner_address,
            referrer_profile_ids=tuple(referrer_profile_ids),
            referrer_pub_ids=tuple(referrer_pub_ids),
            quantity=quantity,
        )
        return await self.assembler.assemble(request)

    async def action_data_from_url(self, request: ActionRequest) -> ActionData:
        return await self.assembler.assemble(request)

    def _find_init_data(self, post: PublicationInfo) -> str:
        module_address = (self.config.lens.open_action_module_address or "").lower()
        for address, init_data in zip(post.action_modules, post.action_modules_init_datas):
            if module_address and address.lower() == module_address:
                return init_data
        raise MalformedReference(
            f"lens://publication/{post.profile_id}-{post.pub_id}",
            "Lens",
            "Publication has no NFT open action",
        )

    async def close(self) -> None:
        await self.metadata.close()

    async def __aenter__(self) -> "NftOpenActionKit":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
