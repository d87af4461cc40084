"""Collapse storage writes of a trace into net per-slot state diffs."""

from collections.abc import Sequence

from stateaudit.domain.enums import AccountAccessKind
from stateaudit.trace.types import AccountAccess, StateDiff, StorageAccess, normalize_address


def _is_effective_write(storage_access: StorageAccess) -> bool:
    return (
        storage_access.is_write
        and not storage_access.reverted
        and storage_access.previous_value != storage_access.new_value
    )


def _numeric(hex_value: str) -> int:
    return int(hex_value, 16)


def get_unique_touched_accounts(trace: Sequence[AccountAccess], sort: bool = False) -> list[str]:
    """Accounts with at least one effective storage write, each listed once.

    The access's own reverted flag is not consulted here, only the write's.
    First-seen order unless sort is set (ascending by numeric address).
    """
    seen: dict[str, None] = {}
    for access in trace:
        for storage_access in access.storage_accesses:
            if _is_effective_write(storage_access):
                seen.setdefault(storage_access.account, None)

    accounts = list(seen)
    if sort:
        accounts.sort(key=_numeric)
    return accounts


def get_state_diff_for(trace: Sequence[AccountAccess], account: str, sort: bool = False) -> list[StateDiff]:
    """Net state diffs for one account: first old value, last new value, no-ops dropped."""
    account = normalize_address(account)
    # slot -> (first previous value, last new value)
    slots: dict[str, tuple[str, str]] = {}

    for access in trace:
        if access.reverted:
            continue
        for storage_access in access.storage_accesses:
            if storage_access.account != account:
                continue
            if not storage_access.is_write or storage_access.reverted:
                continue
            if storage_access.slot in slots:
                first_old, _ = slots[storage_access.slot]
                slots[storage_access.slot] = (first_old, storage_access.new_value)
            else:
                slots[storage_access.slot] = (storage_access.previous_value, storage_access.new_value)

    diffs = [
        StateDiff(account=account, slot=slot, old_value=old_value, new_value=new_value)
        for slot, (old_value, new_value) in slots.items()
        if old_value != new_value
    ]
    if sort:
        diffs.sort(key=lambda diff: _numeric(diff.slot))
    return diffs


def get_state_diffs(trace: Sequence[AccountAccess], sort: bool = False) -> list[StateDiff]:
    """All net state diffs, grouped by account (primary key), then by slot."""
    diffs: list[StateDiff] = []
    for account in get_unique_touched_accounts(trace, sort):
        diffs.extend(get_state_diff_for(trace, account, sort))
    return diffs


def get_new_contracts(trace: Sequence[AccountAccess]) -> list[str]:
    """Accounts created by non-reverted Create accesses, first-seen order."""
    created: dict[str, None] = {}
    for access in trace:
        if access.kind is AccountAccessKind.CREATE and not access.reverted:
            created.setdefault(access.account, None)
    return list(created)
