"""Cheap read-only probes that guess an account's role from its call interface.

Each probe is approximate: it only checks that a call succeeds and returns a
response of the expected length.
"""

import logging

from eth_abi import encode as abi_encode
from eth_utils import function_signature_to_4byte_selector
from pydantic import BaseModel, ConfigDict

from stateaudit.exceptions import ExternalServiceError
from stateaudit.infra.blockchain.evm.rpc_client import EVMRPCClient
from stateaudit.trace.types import ZERO_ADDRESS

logger = logging.getLogger(__name__)


class CapabilityProbe(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    signature: str
    args: tuple = ()
    response_length: int = 32

    @property
    def calldata(self) -> str:
        arg_types = [t for t in self.signature[self.signature.index("(") + 1:-1].split(",") if t]
        selector = function_signature_to_4byte_selector(self.signature)
        return "0x" + (selector + abi_encode(arg_types, list(self.args))).hex()


MULTISIG = CapabilityProbe(name="GnosisSafe", signature="getThreshold()")
LIVENESS_GUARD = CapabilityProbe(name="LivenessGuard", signature="lastLive(address)", args=(ZERO_ADDRESS,))
LIVENESS_MODULE = CapabilityProbe(name="LivenessModule", signature="ownershipTransferredToFallback()")

# Tried in order when the registry has no entry
FALLBACK_PROBES: tuple[CapabilityProbe, ...] = (MULTISIG, LIVENESS_GUARD, LIVENESS_MODULE)


class OnChainProber:
    def __init__(self, rpc: EVMRPCClient) -> None:
        self._rpc = rpc

    def has_capability(self, account: str, probe: CapabilityProbe) -> bool:
        try:
            result = self._rpc.eth_call(account, probe.calldata)
        except ExternalServiceError as e:
            logger.debug("%s probe on %s unavailable: %s", probe.name, account, e)
            return False
        return result.success and result.size == probe.response_length

    def is_multisig(self, account: str) -> bool:
        return self.has_capability(account, MULTISIG)
