"""Load a simulator's JSON dump of account accesses into trace models."""

import json
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter

from stateaudit.trace.types import AccountAccess

_TRACE_ADAPTER = TypeAdapter(list[AccountAccess])

# Keys a wrapping object may store the access list under
TRACE_KEYS = ("accountAccesses", "accesses", "stateDiff")


def parse_trace(raw: Any) -> list[AccountAccess]:
    """Validate a decoded JSON document. Accepts a bare list or an object wrapping one."""
    if isinstance(raw, dict):
        for key in TRACE_KEYS:
            if key in raw:
                raw = raw[key]
                break
        else:
            raise ValueError(f"No account accesses found, expected one of {', '.join(TRACE_KEYS)}")
    return _TRACE_ADAPTER.validate_python(raw)


def load_trace(path: str | Path) -> list[AccountAccess]:
    return parse_trace(json.loads(Path(path).read_text()))
