"""Fixed-width values packed into 32-byte storage words."""

from eth_utils import to_checksum_address

from stateaudit.domain.enums import SlotKind
from stateaudit.trace.types import normalize_word

WORD_BYTES = 32

# Byte width per decodable kind
KIND_WIDTHS: dict[SlotKind, int] = {
    SlotKind.ADDRESS: 20,
    SlotKind.BOOL: 1,
    SlotKind.UINT8: 1,
    SlotKind.UINT16: 2,
    SlotKind.UINT32: 4,
    SlotKind.UINT64: 8,
    SlotKind.UINT128: 16,
    SlotKind.UINT256: 32,
    SlotKind.STRING: 32,
}


def _check_span(offset: int, width: int) -> None:
    if offset < 0 or width <= 0 or offset + width > WORD_BYTES:
        raise ValueError(f"Span offset={offset} width={width} does not fit in a {WORD_BYTES}-byte word")


def extract_value(word: str | int, offset: int, width: int) -> int:
    """Shift right by offset bytes, then keep the low width bytes."""
    _check_span(offset, width)
    raw = int(normalize_word(word), 16)
    return (raw >> (offset * 8)) & ((1 << (width * 8)) - 1)


def insert_value(value: int, offset: int, width: int, word: str | int = 0) -> str:
    """Write value into word at offset, leaving the other bytes untouched."""
    _check_span(offset, width)
    if value < 0 or value >= 1 << (width * 8):
        raise ValueError(f"Value {value} does not fit in {width} bytes")
    raw = int(normalize_word(word), 16)
    mask = ((1 << (width * 8)) - 1) << (offset * 8)
    return normalize_word((raw & ~mask) | (value << (offset * 8)))


def format_value(kind: SlotKind, word: str | int, offset: int = 0) -> str:
    """Render the kind-sized value found at offset as review text."""
    if kind is SlotKind.STRING:
        return normalize_word(word)
    value = extract_value(word, offset, KIND_WIDTHS[kind])
    if kind is SlotKind.ADDRESS:
        return to_checksum_address(f"0x{value:040x}")
    if kind is SlotKind.BOOL:
        return "true" if value else "false"
    return str(value)
