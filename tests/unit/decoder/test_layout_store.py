"""Tests for StorageLayoutStore: schema fetching and parsing."""

import json
from unittest.mock import MagicMock

import httpx
import pytest

from stateaudit.decoder.layout import StorageLayoutEntry, StorageLayoutStore
from stateaudit.decoder.slot_decoder import SlotDecoder
from stateaudit.exceptions import ExternalServiceError

OPTIMISM_STYLE = [
    {"bytes": "1", "label": "_initialized", "offset": 0, "slot": "0", "type": "uint8"},
    {"bytes": "20", "label": "_owner", "offset": 0, "slot": "51", "type": "address"},
    {"bytes": "8", "label": "gasLimit", "offset": 8, "slot": "0x68", "type": "uint64"},
]

SOLC_STYLE = {
    "storage": [
        {"astId": 1, "contract": "A.sol:A", "label": "paused", "offset": 0, "slot": "3", "type": "t_bool"},
    ],
    "types": {"t_bool": {"encoding": "inplace", "label": "bool", "numberOfBytes": "1"}},
}


def _mock_response(status: int, payload) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.text = json.dumps(payload)
    return resp


class TestStorageLayoutEntry:
    def test_slot_formats(self):
        assert StorageLayoutEntry(slot="0x10", label="a", type="bool").slot == 16
        assert StorageLayoutEntry(slot="10", label="a", type="bool").slot == 10
        assert StorageLayoutEntry(slot=10, label="a", type="bool").slot == 10

    def test_solc_type_prefix_stripped(self):
        assert StorageLayoutEntry(slot=0, label="a", type="t_uint256").type_tag == "uint256"


class TestLocalStore:
    def test_reads_entry_list(self, tmp_path):
        (tmp_path / "SystemConfig.json").write_text(json.dumps(OPTIMISM_STYLE))
        layout = StorageLayoutStore(str(tmp_path)).get_layout("SystemConfig")
        assert [e.slot for e in layout] == [0, 51, 104]
        assert layout[2].offset == 8
        assert layout[2].type_tag == "uint64"

    def test_reads_solc_output(self, tmp_path):
        (tmp_path / "A.json").write_text(json.dumps(SOLC_STYLE))
        layout = StorageLayoutStore(str(tmp_path)).get_layout("A")
        assert layout == [StorageLayoutEntry(slot=3, label="paused", type="bool")]

    def test_missing_file(self, tmp_path):
        with pytest.raises(ExternalServiceError):
            StorageLayoutStore(str(tmp_path)).get_layout("Nope")

    def test_invalid_entries(self, tmp_path):
        (tmp_path / "Bad.json").write_text(json.dumps([{"label": "x"}]))
        with pytest.raises(ExternalServiceError, match="Invalid storage layout"):
            StorageLayoutStore(str(tmp_path)).get_layout("Bad")


class TestRemoteStore:
    def test_fetches_and_caches(self):
        http = MagicMock()
        http.get.return_value = _mock_response(200, OPTIMISM_STYLE)
        store = StorageLayoutStore("https://example.org/layouts/", http)

        first = store.get_layout("SystemConfig")
        second = store.get_layout("SystemConfig")

        assert first is second
        http.get.assert_called_once_with("https://example.org/layouts/SystemConfig.json")

    def test_http_error_status(self):
        http = MagicMock()
        http.get.return_value = _mock_response(404, {})
        with pytest.raises(ExternalServiceError, match="404"):
            StorageLayoutStore("https://example.org", http).get_layout("X")

    def test_transport_error(self):
        http = MagicMock()
        http.get.side_effect = httpx.ConnectError("boom")
        with pytest.raises(ExternalServiceError):
            StorageLayoutStore("https://example.org", http).get_layout("X")

    def test_failed_fetch_not_repeated(self):
        http = MagicMock()
        http.get.return_value = _mock_response(404, {})
        store = StorageLayoutStore("https://example.org", http)

        for _ in range(10):
            with pytest.raises(ExternalServiceError, match="404"):
                store.get_layout("SystemConfig")
        assert http.get.call_count == 1

    def test_failure_scoped_to_contract(self):
        http = MagicMock()
        http.get.side_effect = [_mock_response(404, {}), _mock_response(200, OPTIMISM_STYLE)]
        store = StorageLayoutStore("https://example.org", http)

        with pytest.raises(ExternalServiceError):
            store.get_layout("Missing")
        assert len(store.get_layout("SystemConfig")) == 3


class TestDecodingAfterFailedFetch:
    def test_one_request_for_many_slots(self):
        http = MagicMock()
        http.get.return_value = _mock_response(404, {})
        decoder = SlotDecoder(StorageLayoutStore("https://example.org", http))

        results = [decoder.decode("SystemConfig", slot, 0, 1) for slot in range(1000, 1010)]

        assert http.get.call_count == 1
        assert all(result.warning and not result.is_decoded for result in results)
