"""Well-known unstructured storage slots and how to read them.

Each slot is keccak256 of a fixed label, minus one where the contract family
follows the EIP-1967 convention.
"""

from eth_utils import keccak
from pydantic import BaseModel, ConfigDict

from stateaudit.domain.enums import SlotKind
from stateaudit.trace.types import normalize_word


class KnownSlot(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    kind: SlotKind
    summary: str
    detail: str


def unstructured_slot(label: str, minus_one: bool = True) -> str:
    digest = int.from_bytes(keccak(text=label), "big")
    if minus_one:
        digest -= 1
    return normalize_word(digest)


_DEFINITIONS: list[tuple[str, bool, SlotKind, str, str]] = [
    # EIP-1967 proxies
    ("eip1967.proxy.implementation", True, SlotKind.ADDRESS, "Proxy implementation address",
     "Unstructured storage slot for the address of the implementation contract."),
    ("eip1967.proxy.admin", True, SlotKind.ADDRESS, "Proxy owner address",
     "Unstructured storage slot for the owner (admin) of the proxy contract."),
    ("eip1967.proxy.beacon", True, SlotKind.ADDRESS, "Proxy beacon address",
     "Unstructured storage slot for the beacon the proxy reads its implementation from."),
    # Safe
    ("guard_manager.guard.address", False, SlotKind.ADDRESS, "Safe guard address",
     "Transaction guard consulted by the Safe before and after every execution."),
    ("fallback_manager.handler.address", False, SlotKind.ADDRESS, "Safe fallback handler address",
     "Contract receiving calls to functions the Safe does not implement."),
    ("module_manager.module_guard.address", False, SlotKind.ADDRESS, "Safe module guard address",
     "Guard consulted for transactions executed through Safe modules."),
    # SystemConfig
    ("systemconfig.unsafeblocksigner", False, SlotKind.ADDRESS, "Unsafe block signer address",
     "Address whose signature the sequencer uses for unsafe blocks."),
    ("systemconfig.l1crossdomainmessenger", True, SlotKind.ADDRESS, "L1CrossDomainMessenger address",
     "SystemConfig pointer to the L1CrossDomainMessenger proxy."),
    ("systemconfig.l1erc721bridge", True, SlotKind.ADDRESS, "L1ERC721Bridge address",
     "SystemConfig pointer to the L1ERC721Bridge proxy."),
    ("systemconfig.l1standardbridge", True, SlotKind.ADDRESS, "L1StandardBridge address",
     "SystemConfig pointer to the L1StandardBridge proxy."),
    ("systemconfig.l2outputoracle", True, SlotKind.ADDRESS, "L2OutputOracle address",
     "SystemConfig pointer to the L2OutputOracle proxy."),
    ("systemconfig.optimismportal", True, SlotKind.ADDRESS, "OptimismPortal address",
     "SystemConfig pointer to the OptimismPortal proxy."),
    ("systemconfig.optimismmintableerc20factory", True, SlotKind.ADDRESS, "OptimismMintableERC20Factory address",
     "SystemConfig pointer to the OptimismMintableERC20Factory proxy."),
    ("systemconfig.disputegamefactory", True, SlotKind.ADDRESS, "DisputeGameFactory address",
     "SystemConfig pointer to the DisputeGameFactory proxy."),
    ("systemconfig.batchinbox", True, SlotKind.ADDRESS, "Batch inbox address",
     "Address batchers submit L2 transaction data to."),
    ("systemconfig.startBlock", True, SlotKind.UINT256, "Start block",
     "L1 block at which the chain's derivation starts."),
    # SuperchainConfig
    ("superchainConfig.guardian", True, SlotKind.ADDRESS, "Guardian address",
     "Address allowed to pause withdrawals across the superchain."),
    ("superchainConfig.paused", True, SlotKind.BOOL, "Paused flag",
     "Whether withdrawals are paused across the superchain."),
    # ProtocolVersions
    ("protocolversion.required", True, SlotKind.STRING, "Required protocol version",
     "Packed protocol version nodes must support."),
    ("protocolversion.recommended", True, SlotKind.STRING, "Recommended protocol version",
     "Packed protocol version nodes should support."),
    # Custom gas token
    ("opstack.gaspayingtoken", True, SlotKind.ADDRESS, "Gas paying token address",
     "Token used to pay for gas on L2 (low 20 bytes, decimals packed above)."),
]

KNOWN_SLOTS: dict[str, KnownSlot] = {
    unstructured_slot(label, minus_one): KnownSlot(label=label, kind=kind, summary=summary, detail=detail)
    for label, minus_one, kind, summary, detail in _DEFINITIONS
}


def lookup_known_slot(slot: str | int) -> KnownSlot | None:
    return KNOWN_SLOTS.get(normalize_word(slot))
