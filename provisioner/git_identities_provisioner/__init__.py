"""git-identities provisioner - SSH keys and per-directory Git identities"""

from .errors import (
    AccountNotFoundError,
    AgentRegistrationError,
    ConfigWriteError,
    HomeEnvironmentError,
    KeyGenerationError,
)
from .environment import resolve_home
from .provisioner import AccountProvisioner
from .registry import Account, AccountRegistry

__all__ = [
    "AccountNotFoundError",
    "AgentRegistrationError",
    "ConfigWriteError",
    "HomeEnvironmentError",
    "KeyGenerationError",
    "resolve_home",
    "AccountProvisioner",
    "Account",
    "AccountRegistry",
]
