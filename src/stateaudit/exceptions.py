class AuditError(Exception):
    """Base class for errors raised while auditing a trace."""


class ExternalServiceError(AuditError):
    """A collaborator (registry, layout store, RPC node) could not be reached or answered badly."""


class RPCError(ExternalServiceError):
    """The JSON-RPC node returned an error object (reverts included)."""

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


class MissingStateChangesError(AuditError):
    """A decode pass that was expected to find state changes found none."""
