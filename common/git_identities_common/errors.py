"""Base error for git-identities"""


class GitIdentitiesError(Exception):
    """Base class for every error the CLI reports to the user"""
    pass
