"""SlotDecoder: gives a changed storage slot a human-readable meaning.

Strategies run in order and the first non-None result wins:
    1. the fixed table of well-known unstructured slots
    2. the contract's storage layout schema (only with a known contract name)
Falling through both leaves the slot undecoded, which is a normal outcome.
"""

import logging
from collections.abc import Callable

from stateaudit.decoder.known_slots import lookup_known_slot
from stateaudit.decoder.layout import StorageLayoutStore
from stateaudit.decoder.words import format_value
from stateaudit.domain.enums import SlotKind
from stateaudit.exceptions import ExternalServiceError
from stateaudit.trace.types import DecodedSlot, normalize_word

logger = logging.getLogger(__name__)

# Schema types decoded at their byte offset; everything else keeps its label only
LAYOUT_KINDS: frozenset[SlotKind] = frozenset({
    SlotKind.BOOL,
    SlotKind.ADDRESS,
    SlotKind.UINT8,
    SlotKind.UINT16,
    SlotKind.UINT32,
    SlotKind.UINT64,
    SlotKind.UINT128,
    SlotKind.UINT256,
})

DecodeStrategy = Callable[[str, str, str, str], DecodedSlot | None]


def layout_contract_name(display_name: str) -> str:
    """Strip behavioural markers such as " (GnosisSafe)" from a display name."""
    return display_name.split(" (", 1)[0].strip()


class SlotDecoder:
    def __init__(self, layout_store: StorageLayoutStore) -> None:
        self._layout_store = layout_store
        self._strategies: tuple[DecodeStrategy, ...] = (
            self._decode_known_slot,
            self._decode_from_layout,
        )

    def decode(self, contract_name: str, slot: str, old_value: str, new_value: str) -> DecodedSlot:
        slot = normalize_word(slot)
        old_value = normalize_word(old_value)
        new_value = normalize_word(new_value)
        for strategy in self._strategies:
            decoded = strategy(contract_name, slot, old_value, new_value)
            if decoded is not None:
                return decoded
        return DecodedSlot()

    def _decode_known_slot(self, contract_name: str, slot: str, old_value: str, new_value: str) -> DecodedSlot | None:
        known = lookup_known_slot(slot)
        if known is None:
            return None
        return DecodedSlot(
            kind=known.kind.value,
            old_value=format_value(known.kind, old_value),
            new_value=format_value(known.kind, new_value),
            summary=known.summary,
            detail=known.detail,
        )

    def _decode_from_layout(self, contract_name: str, slot: str, old_value: str, new_value: str) -> DecodedSlot | None:
        name = layout_contract_name(contract_name)
        if not name:
            return None

        try:
            layout = self._layout_store.get_layout(name)
        except ExternalServiceError as e:
            logger.warning("No storage layout for %s, slot %s left undecoded: %s", name, slot, e)
            return DecodedSlot(warning=f"Storage layout for {name} unavailable: {e}")

        slot_number = int(slot, 16)
        matches = [entry for entry in layout if entry.slot == slot_number]
        if not matches:
            return None
        if len(matches) > 1:
            # Packed fields share the slot; leave it for manual review
            logger.info(
                "Slot %s of %s is shared by %s, not decoding",
                slot, name, ", ".join(entry.label for entry in matches),
            )
            return DecodedSlot()

        entry = matches[0]
        try:
            kind = SlotKind(entry.type_tag)
        except ValueError:
            kind = None
        if kind not in LAYOUT_KINDS:
            return DecodedSlot(kind=entry.type_tag, summary=entry.label)

        try:
            old_text = format_value(kind, old_value, entry.offset)
            new_text = format_value(kind, new_value, entry.offset)
        except ValueError:
            logger.warning("Field %s of %s has offset %d outside the word", entry.label, name, entry.offset)
            return DecodedSlot(kind=kind.value, summary=entry.label)

        return DecodedSlot(kind=kind.value, old_value=old_text, new_value=new_text, summary=entry.label)
