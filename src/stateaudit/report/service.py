"""AuditService: trace -> transfers and net diffs -> identities -> decoded report."""

import logging
from collections.abc import Sequence

from stateaudit.decoder.slot_decoder import SlotDecoder
from stateaudit.identity.resolver import IdentityResolver
from stateaudit.report.renderer import MarkdownRenderer, SignerContext
from stateaudit.trace.diffs import get_new_contracts, get_state_diffs
from stateaudit.trace.transfers import contains_value_transfer, extract_transfers
from stateaudit.trace.types import AccountAccess, AccountIdentity, DecodedReport, DecodedStateDiff

logger = logging.getLogger(__name__)


class AuditService:
    """Runs one decode pass over an in-memory trace. Nothing persists between runs."""

    def __init__(
        self,
        resolver: IdentityResolver,
        decoder: SlotDecoder,
        renderer: MarkdownRenderer | None = None,
        sort: bool = True,
    ) -> None:
        self._resolver = resolver
        self._decoder = decoder
        self._renderer = renderer or MarkdownRenderer()
        self._sort = sort

    def decode(self, trace: Sequence[AccountAccess], sort: bool | None = None) -> DecodedReport:
        sort = self._sort if sort is None else sort
        transfers = extract_transfers(trace)
        diffs = get_state_diffs(trace, sort)

        identities: dict[str, AccountIdentity] = {}
        rows: list[DecodedStateDiff] = []
        warnings: list[str] = []

        for diff in diffs:
            if diff.account not in identities:
                identities[diff.account] = self._resolver.resolve(diff.account)
            identity = identities[diff.account]

            decoded = self._decoder.decode(identity.name, diff.slot, diff.old_value, diff.new_value)
            if decoded.warning and decoded.warning not in warnings:
                warnings.append(decoded.warning)
            rows.append(DecodedStateDiff(identity=identity, diff=diff, decoded=decoded))

        logger.info(
            "Decoded %d transfers and %d state diffs across %d accounts",
            len(transfers), len(rows), len(identities),
        )
        return DecodedReport(
            transfers=tuple(transfers),
            state_diffs=tuple(rows),
            new_contracts=tuple(get_new_contracts(trace)),
            warnings=tuple(warnings),
            moves_native_value=contains_value_transfer(trace),
        )

    def render(
        self,
        report: DecodedReport,
        signer: SignerContext | None = None,
        expect_state_changes: bool = True,
    ) -> str:
        return self._renderer.render(report, signer, expect_state_changes)

    def audit(
        self,
        trace: Sequence[AccountAccess],
        signer: SignerContext | None = None,
        expect_state_changes: bool = True,
    ) -> str:
        """decode() then render() in one call."""
        return self.render(self.decode(trace), signer, expect_state_changes)
