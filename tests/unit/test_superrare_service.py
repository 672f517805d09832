from unittest.mock import MagicMock

import pytest
from eth_utils import function_signature_to_4byte_selector

from nft_open_action_kit.core.structures import ETHEREUM, NFTExtraction, SalePrice
from nft_open_action_kit.exceptions import ChainReadFailed, MetadataFetchFailed, MetadataIncomplete
from nft_open_action_kit.integrations.metadata_client import MetadataClient
from nft_open_action_kit.platforms.base import ZERO_ADDRESS, ServiceConfig
from nft_open_action_kit.platforms.superrare import (
    SUPER_RARE_ADDRESS,
    SUPER_RARE_MINTER_ADDRESS,
    SuperRareService,
)
from tests.helpers import (
    ARTIST,
    COLLECTION,
    PROFILE_OWNER,
    SENDER,
    SUPERRARE_URL,
    TOKEN_URI,
    make_chain_client,
)


def make_service(chain_client, metadata_client) -> SuperRareService:
    return SuperRareService(
        ServiceConfig(
            chain=ETHEREUM,
            client=chain_client,
            metadata=metadata_client,
            platform_name="SuperRare",
            platform_logo_url="https://superrare.com/favicon.ico",
        )
    )


class TestSuperRareService:
    """Unit tests for SuperRareService."""

    @pytest.fixture
    def service(self, chain_client, metadata_client):
        return make_service(chain_client, metadata_client)

    @pytest.mark.asyncio
    async def test_minter_is_marketplace(self, service):
        assert await service.get_minter_address(SUPER_RARE_ADDRESS, 42) == SUPER_RARE_MINTER_ADDRESS

    @pytest.mark.asyncio
    async def test_signature_while_listed(self, service):
        extraction = NFTExtraction(ETHEREUM, SUPER_RARE_ADDRESS, 42, service, SUPERRARE_URL)
        assert await service.get_mint_signature(extraction) == SuperRareService.mint_signature

    @pytest.mark.asyncio
    async def test_no_signature_for_zero_price(self, superrare_responses, metadata_client):
        superrare_responses["tokenSalePrices"] = (ARTIST, ZERO_ADDRESS, 0)
        service = make_service(make_chain_client(superrare_responses), metadata_client)
        extraction = NFTExtraction(ETHEREUM, SUPER_RARE_ADDRESS, 42, service, SUPERRARE_URL)

        assert await service.get_mint_signature(extraction) is None
        assert await service.get_price(SUPER_RARE_ADDRESS, 42, service.mint_signature, SENDER) is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("unit,expected", [(1, 103), (2, 206)])
    async def test_price_includes_three_percent_fee(self, service, unit, expected):
        price = await service.get_price(SUPER_RARE_ADDRESS, 42, service.mint_signature, SENDER, unit)
        assert price == expected

    @pytest.mark.asyncio
    async def test_fee_uses_floor_division(self, superrare_responses, metadata_client):
        superrare_responses["tokenSalePrices"] = (ARTIST, ZERO_ADDRESS, 99)
        service = make_service(make_chain_client(superrare_responses), metadata_client)

        # 99 * 3 // 100 == 2
        assert await service.get_price(SUPER_RARE_ADDRESS, 1, service.mint_signature, SENDER) == 101

    @pytest.mark.asyncio
    async def test_sale_read_queries_marketplace(self, service, chain_client):
        await service.get_price(SUPER_RARE_ADDRESS, 42, service.mint_signature, SENDER)

        address, _abi, function_name, args = chain_client.read_contract.call_args.args
        assert address == SUPER_RARE_MINTER_ADDRESS
        assert function_name == "tokenSalePrices"
        assert args == (SUPER_RARE_ADDRESS, 42, ZERO_ADDRESS)

    @pytest.mark.asyncio
    async def test_price_reads_sale_on_contract_embedded_in_url(self, service, chain_client):
        url = f"https://superrare.com/{COLLECTION}/x-7"

        price = await service.get_price(SUPER_RARE_ADDRESS, 7, service.mint_signature, SENDER, 1, url)

        assert price == 103
        address, _abi, function_name, args = chain_client.read_contract.call_args.args
        assert address == SUPER_RARE_MINTER_ADDRESS
        assert function_name == "tokenSalePrices"
        assert args[0] == COLLECTION
        assert args[1:] == (7, ZERO_ADDRESS)

    def test_encode_purchase_calls_marketplace_buy(self, service):
        calldata = service.encode_purchase(service.mint_signature, [SUPER_RARE_ADDRESS, 42, ZERO_ADDRESS, 103])
        assert calldata[:4] == function_signature_to_4byte_selector("buy(address,uint256,address,uint256)")

    def test_encode_purchase_rejects_unknown_signature(self, service):
        with pytest.raises(ValueError, match="no purchase function"):
            service.encode_purchase("function bid(uint256 amount) external payable", [1])

    @pytest.mark.asyncio
    async def test_args_use_default_contract(self, service):
        args = await service.get_args(
            SUPER_RARE_ADDRESS, 42, SENDER, service.mint_signature, 103, 1, PROFILE_OWNER
        )
        assert args == [SUPER_RARE_ADDRESS, 42, ZERO_ADDRESS, 103]

    @pytest.mark.asyncio
    async def test_args_prefer_contract_embedded_in_url(self, service):
        url = f"https://superrare.com/{COLLECTION}/sunrise-7"
        args = await service.get_args(
            SUPER_RARE_ADDRESS, 7, SENDER, service.mint_signature, 103, 1, PROFILE_OWNER, url
        )
        assert args[0] == COLLECTION

    @pytest.mark.asyncio
    async def test_ui_data_for_shared_contract(self, service, chain_client):
        ui_data = await service.get_ui_data(service.mint_signature, SUPER_RARE_ADDRESS, 42, 1, SUPERRARE_URL)

        assert ui_data.platform_name == "SuperRare"
        assert ui_data.nft_name == "Dawn"
        assert ui_data.nft_uri == "ipfs://QmDawnImage"
        assert ui_data.token_standard == "erc721"
        assert ui_data.dst_chain_id == 1
        assert ui_data.nft_creator_address == ARTIST

        function_names = [call.args[2] for call in chain_client.read_contract.call_args_list]
        assert "tokenCreator" in function_names
        assert "owner" not in function_names

    @pytest.mark.asyncio
    async def test_ui_data_uses_owner_for_custom_contract(self, service, chain_client):
        url = f"https://superrare.com/{COLLECTION}/sunrise-42"
        ui_data = await service.get_ui_data(service.mint_signature, COLLECTION, 42, 1, url)

        assert ui_data.nft_creator_address == ARTIST
        function_names = [call.args[2] for call in chain_client.read_contract.call_args_list]
        assert "owner" in function_names

    @pytest.mark.asyncio
    async def test_non_ownable_contract_has_unknown_creator(self, superrare_responses, metadata_client):
        superrare_responses["owner"] = ChainReadFailed(COLLECTION, "owner", ValueError("execution reverted"))
        service = make_service(make_chain_client(superrare_responses), metadata_client)
        url = f"https://superrare.com/{COLLECTION}/sunrise-42"

        ui_data = await service.get_ui_data(service.mint_signature, COLLECTION, 42, 1, url)

        assert ui_data.nft_creator_address is None
        assert "nft_creator_address" not in ui_data.to_dict()
        assert ui_data.nft_name == "Dawn"

    @pytest.mark.asyncio
    async def test_missing_image_is_fatal(self, service, metadata_documents):
        del metadata_documents[TOKEN_URI]["image"]

        with pytest.raises(MetadataIncomplete) as exc_info:
            await service.get_ui_data(service.mint_signature, SUPER_RARE_ADDRESS, 42, 1)
        assert exc_info.value.field_name == "image"

    @pytest.mark.asyncio
    async def test_missing_name_is_fatal(self, service, metadata_documents):
        metadata_documents[TOKEN_URI]["name"] = ""

        with pytest.raises(MetadataIncomplete) as exc_info:
            await service.get_ui_data(service.mint_signature, SUPER_RARE_ADDRESS, 42, 1)
        assert exc_info.value.field_name == "name"

    @pytest.mark.asyncio
    async def test_unreachable_metadata_is_fatal(self, service, metadata_documents):
        metadata_documents.clear()

        with pytest.raises(MetadataFetchFailed):
            await service.get_ui_data(service.mint_signature, SUPER_RARE_ADDRESS, 42, 1)

    @pytest.mark.asyncio
    async def test_token_uri_read_failure_propagates(self, superrare_responses, metadata_client):
        superrare_responses["tokenURI"] = ChainReadFailed(SUPER_RARE_ADDRESS, "tokenURI", ValueError("rpc down"))
        service = make_service(make_chain_client(superrare_responses), metadata_client)

        with pytest.raises(ChainReadFailed):
            await service.get_ui_data(service.mint_signature, SUPER_RARE_ADDRESS, 42, 1)


class TestPlatformServiceHelpers:
    """Tests for the shared PlatformService behaviour."""

    @pytest.fixture
    def service(self, chain_client):
        return make_service(chain_client, MagicMock(spec=MetadataClient))

    def test_is_sale_valid(self, service):
        assert service.is_sale_valid(SalePrice(1, ZERO_ADDRESS, ARTIST))
        assert not service.is_sale_valid(SalePrice(0, ZERO_ADDRESS, ARTIST))
        assert not service.is_sale_valid(None)

    def test_apply_fees(self, service):
        assert service.apply_fees(100) == 103
        assert service.apply_fees(100, 2) == 206
        assert service.apply_fees(0, 5) == 0

    def test_resolve_sell_address(self, service):
        assert service.resolve_sell_address(COLLECTION) == SUPER_RARE_ADDRESS
        assert service.resolve_sell_address(COLLECTION, SUPERRARE_URL) == SUPER_RARE_ADDRESS
        assert (
            service.resolve_sell_address(SUPER_RARE_ADDRESS, f"https://superrare.com/{COLLECTION}/x-1")
            == COLLECTION
        )

    def test_is_default_contract_ignores_case(self, service):
        assert service.is_default_contract(SUPER_RARE_ADDRESS.upper().replace("0X", "0x"))
        assert not service.is_default_contract(COLLECTION)
