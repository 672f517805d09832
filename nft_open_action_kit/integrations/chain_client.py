"""
Chain Client

Read-only contract calls against a configured EVM chain. Every failure is
surfaced as ChainReadFailed; nothing is retried here.
"""

import logging
import time
from typing import Any, Dict, List, Sequence

from web3 import AsyncWeb3

from nft_open_action_kit.config import ChainsConfig
from nft_open_action_kit.core.structures import CHAINS_BY_ID, Chain
from nft_open_action_kit.exceptions import ChainReadFailed, ConfigurationError
from nft_open_action_kit.utils.logging_config import performance_logger

logger = logging.getLogger(__name__)


class ChainClient:
    """
    Thin async wrapper around AsyncWeb3 for view calls on one chain.
    """

    def __init__(self, chain: Chain, rpc_url: str, timeout: float = 30.0):
        if not rpc_url:
            raise ConfigurationError(f"RPC URL is required for chain {chain.name}")
        self.chain = chain
        self.rpc_url = rpc_url
        self._w3 = AsyncWeb3(
            AsyncWeb3.AsyncHTTPProvider(rpc_url, request_kwargs={"timeout": timeout})
        )

    async def read_contract(
        self,
        address: str,
        abi: List[Dict[str, Any]],
        function_name: str,
        args: Sequence[Any] = (),
    ) -> Any:
        """
        Call a view function and return its decoded result.

        Args:
            address: Contract address (any casing)
            abi: ABI containing at least `function_name`
            function_name: Name of the view function
            args: Positional arguments for the call

        Raises:
            ChainReadFailed: On any provider, decoding or revert error
        """
        started = time.monotonic()
        try:
            contract = self._w3.eth.contract(
                address=AsyncWeb3.to_checksum_address(address), abi=abi
            )
            function = contract.get_function_by_name(function_name)
            result = await function(*args).call()
        except Exception as e:
            self._log_read(address, function_name, started, success=False)
            logger.debug(
                f"Contract read {function_name} on {address} (chain {self.chain.chain_id}) failed: {e}"
            )
            raise ChainReadFailed(address, function_name, e, chain_id=self.chain.chain_id) from e

        self._log_read(address, function_name, started, success=True)
        return result

    def _log_read(self, address: str, function_name: str, started: float, success: bool) -> None:
        performance_logger.log_chain_read(
            chain_id=self.chain.chain_id,
            contract=address,
            function_name=function_name,
            duration_ms=(time.monotonic() - started) * 1000,
            success=success,
        )


class ChainClientProvider:
    """
    One ChainClient per configured chain, built once and read-only afterwards.
    """

    def __init__(self, clients: Dict[int, ChainClient]):
        self._clients = dict(clients)

    @classmethod
    def from_config(cls, config: ChainsConfig) -> "ChainClientProvider":
        clients = {}
        for chain_id, rpc_url in config.rpc_urls().items():
            chain = CHAINS_BY_ID[chain_id]
            clients[chain_id] = ChainClient(chain, rpc_url, timeout=config.request_timeout)
            logger.debug(f"Configured chain client for {chain.name} ({chain_id})")
        return cls(clients)

    def get(self, chain: Chain) -> ChainClient:
        """Return the client for `chain` or raise ConfigurationError."""
        client = self._clients.get(chain.chain_id)
        if client is None:
            raise ConfigurationError(
                f"No RPC URL configured for chain {chain.name} ({chain.chain_id})"
            )
        return client
