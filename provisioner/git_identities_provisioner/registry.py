"""In-memory account registry"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from .errors import AccountNotFoundError


@dataclass(frozen=True)
class Account:
    """Account record"""
    name: str
    email: str
    ssh_key: Path
    codebase_dir: Path

    @property
    def local_gitconfig(self) -> Path:
        return self.codebase_dir / ".gitconfig"


class AccountRegistry:
    """Accounts provisioned during this run, keyed by name.

    Nothing here is persisted; the generated files are the record.
    """

    def __init__(self):
        self._accounts: dict[str, Account] = {}

    def add(self, account: Account) -> None:
        """Insert an account, replacing any previous one with the same name"""
        self._accounts[account.name] = account

    def get(self, name: str) -> Account:
        """Look up an account

        Raises:
            AccountNotFoundError: If no account with that name was added
        """
        try:
            return self._accounts[name]
        except KeyError:
            raise AccountNotFoundError(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._accounts

    def __iter__(self) -> Iterator[Account]:
        return iter(self._accounts.values())

    def __len__(self) -> int:
        return len(self._accounts)
