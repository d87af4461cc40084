from enum import Enum


class SlotKind(str, Enum):
    """Decoding rule for a storage slot. UNKNOWN means no automatic decoding."""

    UNKNOWN = ""
    ADDRESS = "address"
    BOOL = "bool"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    UINT128 = "uint128"
    UINT256 = "uint256"
    STRING = "string"  # raw word, rendered verbatim
