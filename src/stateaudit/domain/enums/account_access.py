from enum import Enum


class AccountAccessKind(str, Enum):
    """How an execution unit touched an account. Order matches the simulator's numeric encoding."""

    CALL = "Call"
    DELEGATE_CALL = "DelegateCall"
    CALL_CODE = "CallCode"
    STATIC_CALL = "StaticCall"
    CREATE = "Create"
    SELF_DESTRUCT = "SelfDestruct"
    RESUME = "Resume"
    BALANCE = "Balance"
    EXTCODESIZE = "Extcodesize"
    EXTCODEHASH = "Extcodehash"
    EXTCODECOPY = "Extcodecopy"

    @classmethod
    def from_raw(cls, raw: "AccountAccessKind | str | int") -> "AccountAccessKind":
        """Accept the enum, its name/value in any case, or the numeric index."""
        if isinstance(raw, cls):
            return raw
        members = list(cls)
        text = str(raw).strip()
        if text.isdigit():
            index = int(text)
            if index >= len(members):
                raise ValueError(f"Unknown account access kind index: {raw}")
            return members[index]
        for member in members:
            if text.lower() in (member.value.lower(), member.name.lower()):
                return member
        raise ValueError(f"Unknown account access kind: {raw}")
