"""Per-contract storage layout schemas."""

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from stateaudit.exceptions import ExternalServiceError
from stateaudit.infra.documents import join_source, load_json_document
from stateaudit.infra.http.rate_limited_client import RateLimitedClient

logger = logging.getLogger(__name__)


class StorageLayoutEntry(BaseModel):
    """One named field. Its byte width follows from type_tag."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    label: str
    slot: int
    offset: int = 0
    type_tag: str = Field(alias="type")

    @field_validator("slot", mode="before")
    @classmethod
    def _parse_slot(cls, value: Any) -> int:
        if isinstance(value, str):
            text = value.strip().lower()
            return int(text, 16) if text.startswith("0x") else int(text)
        return value

    @field_validator("type_tag", mode="before")
    @classmethod
    def _strip_solc_prefix(cls, value: Any) -> Any:
        # solc storageLayout output uses type ids such as "t_uint256"
        if isinstance(value, str) and value.startswith("t_"):
            return value[2:]
        return value


StorageLayout = list[StorageLayoutEntry]


class StorageLayoutStore:
    """Fetches <base>/<ContractName>.json, caching one schema per contract per run."""

    def __init__(self, base: str, http_client: RateLimitedClient | None = None) -> None:
        self._base = base
        self._http = http_client
        self._cache: dict[str, StorageLayout] = {}
        self._failures: dict[str, ExternalServiceError] = {}

    def get_layout(self, contract_name: str) -> StorageLayout:
        """Each contract is fetched at most once per run; a failed fetch re-raises its error."""
        if contract_name in self._failures:
            raise self._failures[contract_name]
        if contract_name not in self._cache:
            try:
                self._cache[contract_name] = self._fetch(contract_name)
            except ExternalServiceError as e:
                self._failures[contract_name] = e
                raise
        return self._cache[contract_name]

    def _fetch(self, contract_name: str) -> StorageLayout:
        source = join_source(self._base, f"{contract_name}.json")
        document = load_json_document(source, self._http)

        # Either a bare entry list or a solc {"storage": [...], "types": {...}} object
        if isinstance(document, dict):
            document = document.get("storage", [])
        if not isinstance(document, list):
            raise ExternalServiceError(f"Unexpected storage layout shape in {source}")

        try:
            layout = [StorageLayoutEntry.model_validate(item) for item in document]
        except ValidationError as e:
            raise ExternalServiceError(f"Invalid storage layout in {source}: {e}") from e

        logger.info("Loaded storage layout for %s (%d entries)", contract_name, len(layout))
        return layout
