"""Tests for EVMRPCClient: JSON-RPC eth_call handling."""

from unittest.mock import MagicMock

import httpx
import pytest

from stateaudit.exceptions import ExternalServiceError
from stateaudit.identity.probes import MULTISIG, OnChainProber
from stateaudit.infra.blockchain.evm.rpc_client import CallResult, EVMRPCClient

TARGET = "0x" + "12" * 20


@pytest.fixture()
def mock_http():
    return MagicMock()


@pytest.fixture()
def rpc(mock_http):
    return EVMRPCClient(rpc_url="http://localhost:8545", http_client=mock_http)


def _mock_response(data):
    resp = MagicMock()
    resp.json.return_value = data
    return resp


class TestEthCall:
    def test_success(self, rpc, mock_http):
        mock_http.post.return_value = _mock_response({"jsonrpc": "2.0", "id": 1, "result": "0x" + "00" * 31 + "01"})
        result = rpc.eth_call(TARGET, "0xe75235b8")
        assert result.success
        assert result.size == 32

        payload = mock_http.post.call_args[1]["json"]
        assert payload["method"] == "eth_call"
        assert payload["params"][0] == {"to": TARGET, "data": "0xe75235b8"}
        assert payload["params"][1] == "latest"

    def test_revert_is_failure(self, rpc, mock_http):
        mock_http.post.return_value = _mock_response({"jsonrpc": "2.0", "id": 1, "error": {"code": 3, "message": "execution reverted"}})
        assert rpc.eth_call(TARGET, "0x") == CallResult(success=False)

    def test_empty_result_is_success_with_no_data(self, rpc, mock_http):
        mock_http.post.return_value = _mock_response({"jsonrpc": "2.0", "id": 1, "result": "0x"})
        result = rpc.eth_call(TARGET, "0x")
        assert result.success
        assert result.size == 0

    def test_transport_error_raises(self, rpc, mock_http):
        mock_http.post.side_effect = httpx.ConnectError("refused")
        with pytest.raises(ExternalServiceError):
            rpc.eth_call(TARGET, "0x")

    def test_non_json_response_raises(self, rpc, mock_http):
        resp = MagicMock()
        resp.json.side_effect = ValueError("not json")
        mock_http.post.return_value = resp
        with pytest.raises(ExternalServiceError):
            rpc.eth_call(TARGET, "0x")

    @pytest.mark.parametrize("body", [None, [], ["0x01"], "0x01", 1])
    def test_non_object_reply_raises(self, rpc, mock_http, body):
        mock_http.post.return_value = _mock_response(body)
        with pytest.raises(ExternalServiceError, match="Malformed RPC reply"):
            rpc.eth_call(TARGET, "0x")

    def test_non_object_reply_means_no_capability(self, rpc, mock_http):
        mock_http.post.return_value = _mock_response(None)
        assert not OnChainProber(rpc).has_capability(TARGET, MULTISIG)
