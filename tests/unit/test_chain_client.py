from unittest.mock import AsyncMock, MagicMock

import pytest

from nft_open_action_kit.config import ChainsConfig
from nft_open_action_kit.core.structures import BASE, ETHEREUM, ZORA
from nft_open_action_kit.exceptions import ChainReadFailed, ConfigurationError
from nft_open_action_kit.integrations.abis import ERC721_ABI
from nft_open_action_kit.integrations.chain_client import ChainClient, ChainClientProvider
from tests.helpers import COLLECTION


def stub_contract_call(client: ChainClient, result=None, error=None) -> MagicMock:
    """Replace the web3 instance so `read_contract` resolves without a node."""
    call = AsyncMock(return_value=result, side_effect=error)
    function = MagicMock(return_value=MagicMock(call=call))
    contract = MagicMock()
    contract.get_function_by_name.return_value = function

    w3 = MagicMock()
    w3.eth.contract.return_value = contract
    client._w3 = w3
    return function


class TestChainClient:
    """Unit tests for ChainClient."""

    def test_requires_rpc_url(self):
        with pytest.raises(ConfigurationError):
            ChainClient(ETHEREUM, "")

    @pytest.mark.asyncio
    async def test_read_contract(self):
        client = ChainClient(ETHEREUM, "https://rpc.test")
        function = stub_contract_call(client, result="ipfs://QmToken")

        result = await client.read_contract(COLLECTION, ERC721_ABI, "tokenURI", (42,))

        assert result == "ipfs://QmToken"
        function.assert_called_once_with(42)
        contract_kwargs = client._w3.eth.contract.call_args.kwargs
        assert contract_kwargs["address"].lower() == COLLECTION
        assert contract_kwargs["abi"] is ERC721_ABI

    @pytest.mark.asyncio
    async def test_read_failure_wrapped(self):
        client = ChainClient(BASE, "https://rpc.test")
        original_error = ValueError("execution reverted")
        stub_contract_call(client, error=original_error)

        with pytest.raises(ChainReadFailed) as exc_info:
            await client.read_contract(COLLECTION, ERC721_ABI, "tokenURI", (42,))

        assert exc_info.value.original_error is original_error
        assert exc_info.value.chain_id == BASE.chain_id
        assert exc_info.value.function_name == "tokenURI"

    @pytest.mark.asyncio
    async def test_invalid_address_wrapped(self):
        client = ChainClient(ETHEREUM, "https://rpc.test")

        with pytest.raises(ChainReadFailed):
            await client.read_contract("0x1234", ERC721_ABI, "tokenURI", (1,))


class TestChainClientProvider:
    """Tests for per-chain client lookup."""

    def test_from_config_builds_configured_chains(self):
        config = ChainsConfig(ethereum_rpc_url="https://eth.test", zora_rpc_url="https://zora.test")

        provider = ChainClientProvider.from_config(config)

        assert provider.get(ETHEREUM).rpc_url == "https://eth.test"
        assert provider.get(ZORA).rpc_url == "https://zora.test"
        with pytest.raises(ConfigurationError):
            provider.get(BASE)

    def test_missing_chain_is_configuration_error(self):
        provider = ChainClientProvider({})

        with pytest.raises(ConfigurationError, match="base"):
            provider.get(BASE)
