"""Core data types for trace auditing.

Addresses are lowercase ``0x`` + 40 hex digits, storage slots and values are
lowercase ``0x`` + 64 hex digits. Everything is frozen once built.
"""

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

from stateaudit.domain.enums import AccountAccessKind

ZERO_ADDRESS = "0x" + "00" * 20
ZERO_WORD = "0x" + "00" * 32
ETHER = "0x" + "ee" * 20  # sentinel token address for the native asset


def _hex_digits(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex()
    text = str(value).strip().lower()
    if text.startswith("0x"):
        text = text[2:]
    if text:
        int(text, 16)  # raises ValueError on junk
    return text


def normalize_address(value: Any) -> str:
    if isinstance(value, int):
        return f"0x{value:040x}"
    digits = _hex_digits(value)
    if len(digits) > 40:
        raise ValueError(f"Address too long: {value!r}")
    return "0x" + digits.rjust(40, "0")


def normalize_word(value: Any) -> str:
    if isinstance(value, int):
        if value < 0 or value >= 1 << 256:
            raise ValueError(f"Word out of range: {value}")
        return f"0x{value:064x}"
    digits = _hex_digits(value)
    if len(digits) > 64:
        raise ValueError(f"Word too long: {value!r}")
    return "0x" + digits.rjust(64, "0")


def normalize_data(value: Any) -> str:
    if value is None:
        return "0x"
    digits = _hex_digits(value)
    if len(digits) % 2:
        raise ValueError(f"Odd-length hex payload: {value!r}")
    return "0x" + digits


def parse_quantity(value: Any) -> int:
    """Parse an integer given as int, decimal string, or 0x-hex string."""
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if text.lower().startswith("0x"):
        return int(text, 16) if len(text) > 2 else 0
    return int(text or 0)


Address = Annotated[str, BeforeValidator(normalize_address)]
Word = Annotated[str, BeforeValidator(normalize_word)]
HexData = Annotated[str, BeforeValidator(normalize_data)]
Quantity = Annotated[int, BeforeValidator(parse_quantity)]
AccessKind = Annotated[AccountAccessKind, BeforeValidator(AccountAccessKind.from_raw)]

_TRACE_CONFIG = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class StorageAccess(BaseModel):
    """One observed read or write of a storage slot."""

    model_config = _TRACE_CONFIG

    account: Address
    slot: Word
    previous_value: Word = ZERO_WORD
    new_value: Word = ZERO_WORD
    is_write: bool = False
    reverted: bool = False


class AccountAccess(BaseModel):
    """One execution unit interacting with an account (a touch record)."""

    model_config = _TRACE_CONFIG

    accessor: Address
    account: Address
    kind: AccessKind = AccountAccessKind.CALL
    value: Quantity = 0
    data: HexData = "0x"
    reverted: bool = False
    storage_accesses: tuple[StorageAccess, ...] = ()


class StateDiff(BaseModel):
    """Net change of one slot across a whole trace. old_value never equals new_value."""

    model_config = ConfigDict(frozen=True)

    account: Address
    slot: Word
    old_value: Word
    new_value: Word


class DecodedSlot(BaseModel):
    """Semantic reading of a state diff. An empty kind means "not automatically decoded"."""

    model_config = ConfigDict(frozen=True)

    kind: str = ""  # SlotKind value, or the raw schema type tag when unsupported
    old_value: str = ""
    new_value: str = ""
    summary: str = ""
    detail: str = ""
    warning: str = ""  # non-fatal problem hit while decoding

    @property
    def is_decoded(self) -> bool:
        return bool(self.kind)


class DecodedTransfer(BaseModel):
    """Net asset movement. token_address == ETHER for the native asset."""

    model_config = ConfigDict(frozen=True)

    from_address: Address
    to_address: Address
    value: int
    token_address: Address = ETHER

    @property
    def is_native(self) -> bool:
        return self.token_address == ETHER


class AccountIdentity(BaseModel):
    """Display name and chain scope of an account. chain_id 0 / empty name = unresolved."""

    model_config = ConfigDict(frozen=True)

    chain_id: int = 0
    name: str = ""

    @property
    def is_resolved(self) -> bool:
        return bool(self.name)


class DecodedStateDiff(BaseModel):
    """One report row: who, what changed, and what it means."""

    model_config = ConfigDict(frozen=True)

    identity: AccountIdentity = Field(default_factory=AccountIdentity)
    diff: StateDiff
    decoded: DecodedSlot = Field(default_factory=DecodedSlot)

    @property
    def account(self) -> str:
        return self.diff.account


class DecodedReport(BaseModel):
    """Everything one pipeline run produced, in render order."""

    model_config = ConfigDict(frozen=True)

    transfers: tuple[DecodedTransfer, ...] = ()
    state_diffs: tuple[DecodedStateDiff, ...] = ()
    new_contracts: tuple[Address, ...] = ()
    warnings: tuple[str, ...] = ()
    moves_native_value: bool = False
