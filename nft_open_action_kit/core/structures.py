"""
Open Action Data Structures

Immutable records passed between the registry, the platform services and the
action assembler.
"""

from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple

if TYPE_CHECKING:
    from nft_open_action_kit.platforms.base import PlatformService


@dataclass(frozen=True)
class Chain:
    """An EVM chain an NFT can live on."""

    chain_id: int
    name: str


ETHEREUM = Chain(chain_id=1, name="ethereum")
OPTIMISM = Chain(chain_id=10, name="optimism")
POLYGON = Chain(chain_id=137, name="polygon")
BASE = Chain(chain_id=8453, name="base")
ZORA = Chain(chain_id=7777777, name="zora")

CHAINS_BY_ID: Dict[int, Chain] = {
    chain.chain_id: chain for chain in (ETHEREUM, OPTIMISM, POLYGON, BASE, ZORA)
}

# Short names used in marketplace URLs, e.g. zora.co/collect/base:0x...
CHAINS_BY_NAME: Dict[str, Chain] = {
    "eth": ETHEREUM,
    "ethereum": ETHEREUM,
    "oeth": OPTIMISM,
    "optimism": OPTIMISM,
    "matic": POLYGON,
    "polygon": POLYGON,
    "base": BASE,
    "zora": ZORA,
}


@dataclass(frozen=True)
class UrlMatch:
    """On-chain identity parsed out of a marketplace URL."""

    chain: Chain
    contract_address: str
    token_id: int


@dataclass(frozen=True)
class NFTExtraction:
    """
    An NFT detected in a URL together with the service that can sell it.

    Attributes:
        chain: Chain the NFT contract is deployed on
        contract_address: NFT contract address
        nft_id: Token id
        service: Platform service bound to `chain`
        source_url: URL the extraction was parsed from
    """
    chain: Chain
    contract_address: str
    nft_id: int
    service: "PlatformService" = field(repr=False, compare=False)
    source_url: str = ""


@dataclass(frozen=True)
class SalePrice:
    """On-chain sale record: price in the payment token's smallest unit."""

    price: int
    token: str
    seller: str


@dataclass(frozen=True)
class UIData:
    """Display metadata for the NFT behind an action."""

    platform_name: str
    platform_logo_url: str
    nft_name: str
    nft_uri: str
    token_standard: str
    dst_chain_id: int
    nft_creator_address: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if data["nft_creator_address"] is None:
            del data["nft_creator_address"]
        return data


@dataclass(frozen=True)
class ActArguments:
    """Arguments for the Lens `act` call."""

    publication_acted_profile_id: int
    publication_acted_id: int
    actor_profile_id: int
    referrer_profile_ids: Tuple[int, ...]
    referrer_pub_ids: Tuple[int, ...]
    action_module_address: str
    action_module_data: str


@dataclass(frozen=True)
class ActionData:
    """Complete output of one resolution, ready for on-chain submission."""

    act_arguments: ActArguments
    ui_data: UIData

    def to_dict(self) -> Dict[str, Any]:
        act = asdict(self.act_arguments)
        act["referrer_profile_ids"] = list(act["referrer_profile_ids"])
        act["referrer_pub_ids"] = list(act["referrer_pub_ids"])
        return {"act_arguments": act, "ui_data": self.ui_data.to_dict()}


@dataclass(frozen=True)
class ActionRequest:
    """
    Everything a caller supplies to assemble one action.

    Attributes:
        source_url: Marketplace URL of the NFT
        publication_acted_profile_id: Profile that authored the publication
        publication_acted_id: Publication carrying the open action
        actor_profile_id: Profile performing the action
        sender_address: Address paying for and receiving the NFT
        profile_owner_address: Owner of the publication's profile, used as referral
        referrer_profile_ids: Lens referrer profiles
        referrer_pub_ids: Lens referrer publications
        quantity: Number of copies to buy
    """
    source_url: str
    publication_acted_profile_id: int
    publication_acted_id: int
    actor_profile_id: int
    sender_address: str
    profile_owner_address: str
    referrer_profile_ids: Tuple[int, ...] = ()
    referrer_pub_ids: Tuple[int, ...] = ()
    quantity: int = 1


@dataclass(frozen=True)
class PublicationInfo:
    """The parts of a Lens publication the kit reads."""

    profile_id: int
    pub_id: int
    action_modules: Tuple[str, ...]
    action_modules_init_datas: Tuple[str, ...]
    profile_owner_address: str = ""
