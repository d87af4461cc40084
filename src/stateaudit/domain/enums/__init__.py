from stateaudit.domain.enums.account_access import AccountAccessKind
from stateaudit.domain.enums.slot_kind import SlotKind

__all__ = [
    "AccountAccessKind",
    "SlotKind",
]
