"""Provisioning errors"""

from git_identities_common.errors import GitIdentitiesError


class KeyGenerationError(GitIdentitiesError):
    """ssh-keygen failed or the key directory could not be prepared"""
    pass


class AgentRegistrationError(GitIdentitiesError):
    """ssh-add failed (e.g. no agent running)"""
    pass


class AccountNotFoundError(GitIdentitiesError):
    """Account name is not in the registry"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Account not found: {name}")


class ConfigWriteError(GitIdentitiesError):
    """A Git or SSH config file could not be read or written"""

    def __init__(self, path, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to write {path}: {cause}")


class HomeEnvironmentError(GitIdentitiesError):
    """HOME is not set, so no home-relative path can be resolved"""
    pass
