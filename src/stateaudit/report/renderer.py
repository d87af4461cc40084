"""MarkdownRenderer: deterministic review text for a DecodedReport."""

from collections.abc import Sequence

from eth_abi import encode as abi_encode
from eth_utils import decode_hex, keccak, to_checksum_address
from pydantic import BaseModel, ConfigDict

from stateaudit.domain.enums import SlotKind
from stateaudit.exceptions import MissingStateChangesError
from stateaudit.trace.types import (
    Address,
    DecodedReport,
    DecodedSlot,
    DecodedStateDiff,
    DecodedTransfer,
    Word,
    normalize_word,
)

# Safe storage: uint256 nonce at slot 5, approvedHashes[owner][hash] mapping at slot 8
SAFE_NONCE_SLOT = normalize_word(5)
SAFE_APPROVED_HASHES_SLOT = 8

NOT_DECODED_SUMMARY = (
    "not automatically decoded. Please provide a summary and detail for manual review."
)


def approved_hash_slot(owner: str, operation_hash: str) -> str:
    """Storage slot of approvedHashes[owner][operation_hash] in a Safe."""
    owner_slot = keccak(abi_encode(["address", "uint256"], [owner, SAFE_APPROVED_HASHES_SLOT]))
    return normalize_word(keccak(abi_encode(["bytes32", "bytes32"], [decode_hex(operation_hash), owner_slot])))


class SignerContext(BaseModel):
    """The multisig whose owners approve the operation, and the operation's hash."""

    model_config = ConfigDict(frozen=True)

    address: Address
    owners: tuple[Address, ...] = ()
    operation_hash: Word

    def approval_slots(self) -> dict[str, str]:
        """Expected approvedHashes slot -> owner address."""
        return {approved_hash_slot(owner, self.operation_hash): owner for owner in self.owners}


class MarkdownRenderer:
    def render(
        self,
        report: DecodedReport,
        signer: SignerContext | None = None,
        expect_state_changes: bool = True,
    ) -> str:
        lines: list[str] = []
        lines.extend(self._render_transfers(report.transfers, report.moves_native_value))
        if report.new_contracts:
            lines.append("")
            lines.extend(self._render_new_contracts(report.new_contracts))
        lines.append("")
        lines.extend(self.render_state_diffs(report.state_diffs, signer, expect_state_changes))
        if report.warnings:
            lines.append("")
            lines.extend(f"> **Warning:** {warning}" for warning in report.warnings)
        return "\n".join(lines) + "\n"

    def render_state_diffs(
        self,
        rows: Sequence[DecodedStateDiff],
        signer: SignerContext | None = None,
        expect_state_changes: bool = True,
    ) -> list[str]:
        """Rows must already be grouped by account; a header is emitted whenever it changes."""
        if not rows:
            if expect_state_changes:
                raise MissingStateChangesError("Expected state changes but the decoded trace has none")
            return ["## State Changes", "", "No state changes."]

        approval_slots = signer.approval_slots() if signer else {}
        lines = ["## State Changes"]
        current_account: str | None = None

        for row in rows:
            if row.account != current_account:
                current_account = row.account
                lines.append("")
                lines.append(self._account_header(row))
                lines.append("")

            decoded = row.decoded
            if signer is not None and row.account == signer.address:
                decoded = self._annotate_signer_slot(row, signer, approval_slots) or decoded
            lines.extend(self._render_row(row, decoded))

        return lines

    def _account_header(self, row: DecodedStateDiff) -> str:
        name = row.identity.name if row.identity.is_resolved else "Unknown"
        return f"### `{to_checksum_address(row.account)}` ({name}) - Chain ID: {row.identity.chain_id}"

    def _render_row(self, row: DecodedStateDiff, decoded: DecodedSlot) -> list[str]:
        lines = [
            f"- **Key:** `{row.diff.slot}`",
            f"  - **Before:** `{row.diff.old_value}`",
            f"  - **After:** `{row.diff.new_value}`",
        ]
        if not decoded.is_decoded:
            lines.append(f"  - **Summary:** {NOT_DECODED_SUMMARY}")
            lines.append("  - **Detail:** <manual annotation required>")
            return lines

        lines.append(f"  - **Value Type:** {decoded.kind}")
        if decoded.old_value or decoded.new_value:
            lines.append(f"  - **Decoded Old Value:** `{decoded.old_value}`")
            lines.append(f"  - **Decoded New Value:** `{decoded.new_value}`")
        lines.append(f"  - **Summary:** {decoded.summary}")
        if decoded.detail:
            lines.append(f"  - **Detail:** {decoded.detail}")
        return lines

    def _annotate_signer_slot(
        self,
        row: DecodedStateDiff,
        signer: SignerContext,
        approval_slots: dict[str, str],
    ) -> DecodedSlot | None:
        old_value = str(int(row.diff.old_value, 16))
        new_value = str(int(row.diff.new_value, 16))

        owner = approval_slots.get(row.diff.slot)
        if owner is not None:
            return DecodedSlot(
                kind=SlotKind.UINT256.value,
                old_value=old_value,
                new_value=new_value,
                summary=f"`approvedHashes` update for owner `{to_checksum_address(owner)}`",
                detail=f"Owner approves operation hash `{signer.operation_hash}` via `approveHash()`.",
            )
        if row.diff.slot == SAFE_NONCE_SLOT:
            return DecodedSlot(
                kind=SlotKind.UINT256.value,
                old_value=old_value,
                new_value=new_value,
                summary="Signer Safe nonce",
                detail="Nonce of the signing Safe, incremented once per executed transaction.",
            )
        return None

    def _render_transfers(self, transfers: Sequence[DecodedTransfer], moves_native_value: bool = False) -> list[str]:
        lines = ["## Transfers", ""]
        if moves_native_value:
            lines.extend(["> **Note:** this transaction moves native value.", ""])
        if not transfers:
            lines.append("No asset transfers.")
            return lines
        for transfer in transfers:
            asset = "native" if transfer.is_native else f"`{to_checksum_address(transfer.token_address)}`"
            lines.append(
                f"- **From:** `{to_checksum_address(transfer.from_address)}` "
                f"**To:** `{to_checksum_address(transfer.to_address)}` "
                f"**Value:** {transfer.value} **Asset:** {asset}"
            )
        return lines

    def _render_new_contracts(self, accounts: Sequence[str]) -> list[str]:
        lines = ["## New Contracts", ""]
        lines.extend(f"- `{to_checksum_address(account)}`" for account in accounts)
        return lines
