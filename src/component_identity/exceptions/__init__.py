"""Exception hierarchy for component identity resolution."""

from .base import ComponentIdentityError
from .config import ConfigurationError, InvalidConfigError
from .resolution import (
    AmbiguousComponentError,
    ComponentStoreError,
    InvalidReportKeyError,
    ResolutionError,
    ResolverClosedError,
)

__all__ = [
    "ComponentIdentityError",
    "ConfigurationError",
    "InvalidConfigError",
    "ResolutionError",
    "AmbiguousComponentError",
    "InvalidReportKeyError",
    "ResolverClosedError",
    "ComponentStoreError",
]
