"""Extract native and token transfers from a trace of account accesses."""

from collections.abc import Iterable

from eth_abi import decode as abi_decode
from eth_abi.exceptions import DecodingError
from eth_utils import decode_hex, function_signature_to_4byte_selector

from stateaudit.trace.types import ETHER, AccountAccess, DecodedTransfer

TRANSFER_SELECTOR = function_signature_to_4byte_selector("transfer(address,uint256)")
TRANSFER_FROM_SELECTOR = function_signature_to_4byte_selector("transferFrom(address,address,uint256)")

# 4-byte selector plus at least one byte of arguments
MIN_CALLDATA_LENGTH = 5


def get_native_transfer(access: AccountAccess) -> DecodedTransfer | None:
    """Native value moved by the access itself (accessor -> account)."""
    if access.reverted or access.value == 0:
        return None
    return DecodedTransfer(
        from_address=access.accessor,
        to_address=access.account,
        value=access.value,
        token_address=ETHER,
    )


def get_token_transfer(access: AccountAccess) -> DecodedTransfer | None:
    """ERC20 transfer()/transferFrom() call payload, asset = called account.

    The target is not checked to be a token and success is only judged by the
    reverted flag. Anything unrecognised or malformed yields None.
    """
    if access.reverted:
        return None
    payload = decode_hex(access.data)
    if len(payload) < MIN_CALLDATA_LENGTH:
        return None

    selector, args = payload[:4], payload[4:]
    try:
        if selector == TRANSFER_SELECTOR:
            to_address, value = abi_decode(["address", "uint256"], args)
            from_address = access.accessor
        elif selector == TRANSFER_FROM_SELECTOR:
            from_address, to_address, value = abi_decode(["address", "address", "uint256"], args)
        else:
            return None
    except DecodingError:
        return None

    if value == 0:
        return None
    return DecodedTransfer(
        from_address=from_address,
        to_address=to_address,
        value=value,
        token_address=access.account,
    )


def extract_transfers(trace: Iterable[AccountAccess]) -> list[DecodedTransfer]:
    """At most one native and one token transfer per access, in trace order."""
    transfers: list[DecodedTransfer] = []
    for access in trace:
        native = get_native_transfer(access)
        if native is not None:
            transfers.append(native)
        token = get_token_transfer(access)
        if token is not None:
            transfers.append(token)
    return transfers


def contains_value_transfer(trace: Iterable[AccountAccess]) -> bool:
    return any(get_native_transfer(access) is not None for access in trace)
