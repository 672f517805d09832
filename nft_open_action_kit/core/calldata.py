"""
Calldata Encoding

Encodes purchase calls from ABI fragments, and packs/unpacks the open action
init and module data.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError
from eth_utils import to_bytes, to_checksum_address
from web3 import Web3

from nft_open_action_kit.exceptions import MalformedReference

logger = logging.getLogger(__name__)

# abi.encode(uint256 chainId, address contract, uint256 tokenId, string sourceUrl)
INIT_DATA_TYPES = ["uint256", "address", "uint256", "string"]

# abi.encode(uint256 dstChainId, address target, address paymentToken,
#            uint256 value, address sender, bytes calldata)
ACTION_MODULE_DATA_TYPES = ["uint256", "address", "address", "uint256", "address", "bytes"]

# Encoding needs no provider
_w3 = Web3()


@dataclass(frozen=True)
class InitData:
    """Decoded open action init data."""

    chain_id: int
    contract_address: str
    token_id: int
    source_url: str


def find_function(abi: List[Dict[str, Any]], function_name: str) -> Dict[str, Any]:
    """The function fragment named `function_name` in `abi`."""
    for fragment in abi:
        if fragment.get("type") == "function" and fragment.get("name") == function_name:
            return fragment
    raise ValueError(f"Function {function_name} not found in ABI")


def _normalize(abi_type: str, value: Any) -> Any:
    if abi_type == "address" and isinstance(value, str):
        return to_checksum_address(value)
    if abi_type.startswith("uint") or abi_type.startswith("int"):
        return int(value)
    return value


def encode_function_call(abi: List[Dict[str, Any]], function_name: str, args: Sequence[Any]) -> bytes:
    """
    Selector + ABI-encoded arguments for `function_name`.

    Raises:
        ValueError: Unknown function or wrong number of arguments
    """
    fragment = find_function(abi, function_name)
    inputs = fragment["inputs"]
    if len(inputs) != len(args):
        raise ValueError(f"{function_name} takes {len(inputs)} arguments, got {len(args)}")

    values = [_normalize(param["type"], value) for param, value in zip(inputs, args)]
    contract = _w3.eth.contract(abi=[fragment])
    return to_bytes(hexstr=contract.encode_abi(function_name, args=values))


def encode_init_data(chain_id: int, contract_address: str, token_id: int, source_url: str) -> str:
    """Hex-encoded open action init data for a detected NFT."""
    payload = encode(
        INIT_DATA_TYPES,
        [chain_id, to_checksum_address(contract_address), token_id, source_url],
    )
    return "0x" + payload.hex()


def decode_init_data(init_data: str) -> InitData:
    """
    Unpack open action init data.

    Raises:
        MalformedReference: The data is not valid hex or not the init data layout
    """
    try:
        raw = bytes.fromhex(init_data[2:] if init_data.startswith("0x") else init_data)
        chain_id, contract_address, token_id, source_url = decode(INIT_DATA_TYPES, raw)
    except (DecodingError, ValueError) as e:
        raise MalformedReference(
            init_data[:66], "Lens", f"Open action init data could not be decoded: {e}"
        ) from e

    return InitData(
        chain_id=chain_id,
        contract_address=to_checksum_address(contract_address),
        token_id=token_id,
        source_url=source_url,
    )


def encode_action_module_data(
    dst_chain_id: int,
    target: str,
    payment_token: str,
    value: int,
    sender: str,
    calldata: bytes,
) -> str:
    """Hex-encoded data field handed to the open action module."""
    payload = encode(
        ACTION_MODULE_DATA_TYPES,
        [
            dst_chain_id,
            to_checksum_address(target),
            to_checksum_address(payment_token),
            value,
            to_checksum_address(sender),
            calldata,
        ],
    )
    return "0x" + payload.hex()
