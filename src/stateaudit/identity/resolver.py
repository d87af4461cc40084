"""IdentityResolver: account -> (chain id, display name)."""

import logging

from stateaudit.exceptions import ExternalServiceError
from stateaudit.identity.probes import FALLBACK_PROBES, OnChainProber
from stateaudit.identity.registry import RegistryClient
from stateaudit.trace.types import AccountIdentity, normalize_address

logger = logging.getLogger(__name__)

PROXY_SUFFIX = "Proxy"
MULTISIG_MARKER = " (GnosisSafe)"

# Registry labels whose deployed contract goes by another name
RENAMES: dict[str, str] = {
    "OptimismPortal": "OptimismPortal2",
}


def display_name(label: str) -> str:
    if label.endswith(PROXY_SUFFIX) and len(label) > len(PROXY_SUFFIX):
        label = label[: -len(PROXY_SUFFIX)]
    return RENAMES.get(label, label)


class IdentityResolver:
    def __init__(self, registry: RegistryClient, prober: OnChainProber, chain_id: int = 0) -> None:
        self._registry = registry
        self._prober = prober
        self._chain_id = chain_id

    def resolve(self, account: str) -> AccountIdentity:
        """Registry first, then behavioural probes. Unresolved is an empty identity, never an error."""
        account = normalize_address(account)

        match = self._lookup_registry(account)
        if match is not None:
            chain_id, label = match
            name = display_name(label)
            if self._prober.is_multisig(account):
                name += MULTISIG_MARKER
            return AccountIdentity(chain_id=chain_id, name=name)

        for probe in FALLBACK_PROBES:
            if self._prober.has_capability(account, probe):
                return AccountIdentity(chain_id=self._chain_id, name=probe.name)

        logger.warning("Could not resolve a name for %s", account)
        return AccountIdentity()

    def _lookup_registry(self, account: str) -> tuple[int, str] | None:
        try:
            return self._registry.find(account)
        except ExternalServiceError as e:
            logger.warning("Registry lookup for %s failed: %s", account, e)
            return None
