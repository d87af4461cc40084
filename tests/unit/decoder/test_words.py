"""Tests for fixed-width values at sub-word offsets."""

import pytest
from eth_utils import to_checksum_address

from stateaudit.decoder.words import KIND_WIDTHS, extract_value, format_value, insert_value
from stateaudit.domain.enums import SlotKind

WIDTHS = sorted(set(KIND_WIDTHS.values()))


class TestExtractInsert:
    def test_round_trip_every_offset(self):
        for width in WIDTHS:
            max_value = (1 << (width * 8)) - 1
            for offset in range(0, 32 - width + 1):
                for value in (0, 1, max_value, max_value // 3):
                    word = insert_value(value, offset, width)
                    assert extract_value(word, offset, width) == value, (width, offset, value)

    def test_insert_preserves_neighbours(self):
        word = insert_value(0xAB, 0, 1)
        word = insert_value(0xCDEF, 1, 2, word)
        assert extract_value(word, 0, 1) == 0xAB
        assert extract_value(word, 1, 2) == 0xCDEF
        assert word.endswith("cdefab")

    def test_span_outside_word(self):
        with pytest.raises(ValueError):
            extract_value(0, 31, 2)
        with pytest.raises(ValueError):
            insert_value(1, -1, 1)

    def test_value_too_wide(self):
        with pytest.raises(ValueError):
            insert_value(256, 0, 1)


class TestFormatValue:
    def test_address_low_20_bytes(self):
        addr = "0x" + "ab" * 20
        word = "0x" + "ff" * 12 + "ab" * 20
        assert format_value(SlotKind.ADDRESS, word) == to_checksum_address(addr)

    def test_address_at_offset(self):
        word = insert_value(0x1234, 1, 20)
        assert format_value(SlotKind.ADDRESS, word, 1) == to_checksum_address("0x" + "0" * 36 + "1234")

    def test_bool(self):
        assert format_value(SlotKind.BOOL, 1) == "true"
        assert format_value(SlotKind.BOOL, 0) == "false"
        assert format_value(SlotKind.BOOL, 0x0100) == "false"  # only the low byte counts
        assert format_value(SlotKind.BOOL, 0x0100, 1) == "true"

    def test_integers(self):
        assert format_value(SlotKind.UINT256, (1 << 256) - 1) == str((1 << 256) - 1)
        assert format_value(SlotKind.UINT8, 0x1FF) == "255"
        word = insert_value(1_000_000, 8, 8)
        assert format_value(SlotKind.UINT64, word, 8) == "1000000"

    def test_string_is_verbatim_word(self):
        word = "0x" + "12" * 32
        assert format_value(SlotKind.STRING, word) == word
