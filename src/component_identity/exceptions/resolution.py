"""Resolution and store exceptions raised while mapping report keys to uuids."""

from typing import Optional, Sequence

from .base import ComponentIdentityError


class ResolutionError(ComponentIdentityError):
    """Base class for faults that prevent a report key from being resolved.

    A lookup miss is *not* a resolution error: it simply means the component
    is new and gets a freshly minted uuid.
    """

    pass


class AmbiguousComponentError(ResolutionError):
    """Raised when a legacy lookup matches more than one candidate.

    Picking one of them would silently break identity continuity, so the
    caller has to repair the data instead.
    """

    def __init__(self, key: str, candidates: Sequence[str], reason: str = "multiple matches"):
        super().__init__(
            f"Ambiguous legacy match for {key}",
            details={"key": key, "candidates": ",".join(candidates), "reason": reason},
        )
        self.key = key
        self.candidates = list(candidates)
        self.reason = reason


class InvalidReportKeyError(ResolutionError):
    """Raised when a report key cannot possibly be resolved."""

    def __init__(self, key: object, reason: str):
        super().__init__(f"Invalid report key: {key!r}", details={"reason": reason})
        self.key = key
        self.reason = reason


class ResolverClosedError(ResolutionError):
    """Raised when a resolver is used after its ingestion run ended."""

    def __init__(self, root_key: str):
        super().__init__("Resolver is closed", details={"root_key": root_key})
        self.root_key = root_key


class ComponentStoreError(ComponentIdentityError):
    """Raised when the durable component store fails to answer a query."""

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        details = {"operation": operation}
        if cause is not None:
            details["cause"] = str(cause)
        super().__init__(f"Component store query failed: {operation}", details=details)
        self.operation = operation
        self.cause = cause
