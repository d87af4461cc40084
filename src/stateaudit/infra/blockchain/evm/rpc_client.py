"""Minimal EVM JSON-RPC client for read-only calls."""

import logging

import httpx
from pydantic import BaseModel, ConfigDict

from stateaudit.exceptions import ExternalServiceError, RPCError
from stateaudit.infra.http.rate_limited_client import RateLimitedClient

logger = logging.getLogger(__name__)


class CallResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool
    data: str = "0x"

    @property
    def size(self) -> int:
        """Response length in bytes."""
        return (len(self.data) - 2) // 2


class EVMRPCClient:
    def __init__(self, rpc_url: str, http_client: RateLimitedClient) -> None:
        self._rpc_url = rpc_url
        self._http = http_client

    def _call(self, method: str, params: list) -> dict | list | int | str | None:
        """Execute a JSON-RPC call and return the result field."""
        payload = {
            "jsonrpc": "2.0",
            "id": 1,
            "method": method,
            "params": params,
        }
        try:
            resp = self._http.post(self._rpc_url, json=payload)
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ExternalServiceError(f"RPC transport error ({method}): {e}") from e

        if not isinstance(data, dict):
            raise ExternalServiceError(f"Malformed RPC reply ({method}): expected an object, got {type(data).__name__}")

        if "error" in data:
            error = data["error"]
            msg = error.get("message", str(error)) if isinstance(error, dict) else str(error)
            code = error.get("code") if isinstance(error, dict) else None
            raise RPCError(f"RPC error ({method}): {msg}", code=code)

        return data.get("result")

    def eth_call(self, to: str, data: str, block: str = "latest") -> CallResult:
        """Read-only call. A revert is a failed result, not an exception."""
        try:
            result = self._call("eth_call", [{"to": to, "data": data}, block])
        except RPCError as e:
            logger.debug("eth_call to %s failed (code %s): %s", to, e.code, e)
            return CallResult(success=False)
        if not isinstance(result, str) or not result.startswith("0x"):
            return CallResult(success=False)
        return CallResult(success=True, data=result.lower())
