"""Chain-scoped address registry: chain id -> contract label -> address."""

import logging

from stateaudit.exceptions import ExternalServiceError
from stateaudit.infra.documents import load_json_document
from stateaudit.infra.http.rate_limited_client import RateLimitedClient
from stateaudit.trace.types import normalize_address

logger = logging.getLogger(__name__)


class RegistryClient:
    def __init__(self, source: str, http_client: RateLimitedClient | None = None) -> None:
        self._source = source
        self._http = http_client
        self._document: dict[str, dict[str, str]] | None = None
        self._failure: ExternalServiceError | None = None

    def get_document(self) -> dict[str, dict[str, str]]:
        """Fetch once per run. Raises ExternalServiceError when unavailable or malformed."""
        if self._failure is not None:
            raise self._failure
        if self._document is None:
            try:
                document = load_json_document(self._source, self._http)
                if not isinstance(document, dict) or not all(isinstance(v, dict) for v in document.values()):
                    raise ExternalServiceError(f"Registry {self._source} is not a chain -> label -> address mapping")
            except ExternalServiceError as e:
                self._failure = e
                raise
            self._document = document
            logger.info("Loaded registry with %d chains from %s", len(document), self._source)
        return self._document

    def find(self, address: str) -> tuple[int, str] | None:
        """First (chain_id, label) whose address matches exactly, in document order."""
        target = normalize_address(address)
        for chain_key, contracts in self.get_document().items():
            if not str(chain_key).isdigit():
                logger.debug("Skipping non-numeric registry chain key %r", chain_key)
                continue
            for label, candidate in contracts.items():
                try:
                    if normalize_address(candidate) != target:
                        continue
                except ValueError:
                    continue
                return int(chain_key), label
        return None
