"""Decode a simulated transaction's account accesses and print the review report.

Usage:
    PYTHONPATH=src python scripts/audit_trace.py trace.json [--signer 0x... --owners 0x..,0x.. --hash 0x...]

The trace is the JSON dump of account accesses recorded by the simulator.
Settings (RPC URL, registry, layout location) come from STATEAUDIT_* env vars or .env.
"""

import argparse
import logging
import sys

from stateaudit.config import settings

logging.basicConfig(level=logging.DEBUG if settings.debug else logging.INFO, format="%(asctime)s %(levelname)-5s %(name)s - %(message)s")
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


def main() -> int:
    from stateaudit.container import Container
    from stateaudit.exceptions import MissingStateChangesError
    from stateaudit.report.renderer import SignerContext
    from stateaudit.trace.loader import load_trace

    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("trace", help="path to the account accesses JSON file")
    parser.add_argument("--signer", help="address of the signing Safe")
    parser.add_argument("--owners", default="", help="comma-separated owners of the signing Safe")
    parser.add_argument("--hash", dest="operation_hash", help="hash of the operation being approved")
    parser.add_argument("--no-sort", action="store_true", help="keep trace order instead of sorting")
    parser.add_argument("--allow-empty", action="store_true", help="do not fail when no state changes are found")
    args = parser.parse_args()

    signer = None
    if args.signer:
        if not args.operation_hash:
            parser.error("--signer requires --hash")
        signer = SignerContext(
            address=args.signer,
            owners=tuple(o for o in args.owners.split(",") if o),
            operation_hash=args.operation_hash,
        )

    container = Container()
    service = container.audit_service()
    trace = load_trace(args.trace)

    with container.http_client():
        try:
            report = service.decode(trace, sort=not args.no_sort)
            print(service.render(report, signer, expect_state_changes=not args.allow_empty), end="")
        except MissingStateChangesError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
