"""git-identities common - Shared configuration and types"""

__version__ = "0.1.0"

from .errors import GitIdentitiesError
from .config import ConfigLoader, ConfigError
from .types import AccountSpec, AccountEntry, ExistingKeyPolicy, IdentitiesConfig

__all__ = [
    "GitIdentitiesError",
    "ConfigLoader",
    "ConfigError",
    "AccountSpec",
    "AccountEntry",
    "ExistingKeyPolicy",
    "IdentitiesConfig",
]
