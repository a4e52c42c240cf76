"""Account provisioning"""

import logging
from pathlib import Path
from typing import Iterable, Union

from git_identities_common import AccountSpec, ExistingKeyPolicy
from .config_files import write_global_gitconfig, write_local_gitconfig, write_ssh_config
from .environment import resolve_codebase_dir
from .registry import Account, AccountRegistry
from .ssh_keys import add_to_agent, generate_ssh_key

logger = logging.getLogger(__name__)


class AccountProvisioner:
    """Generate keys and wire Git/SSH config for each identity

    Every step raises on failure and nothing is rolled back: a failed run
    leaves whatever earlier steps wrote on disk.
    """

    def __init__(
        self,
        home_dir: Path,
        registry: AccountRegistry,
        on_existing_key: Union[ExistingKeyPolicy, str] = ExistingKeyPolicy.FAIL,
        dedupe_gitconfig: bool = False
    ):
        self.home_dir = Path(home_dir)
        self.registry = registry
        self.on_existing_key = ExistingKeyPolicy(on_existing_key)
        self.dedupe_gitconfig = dedupe_gitconfig

    @property
    def ssh_dir(self) -> Path:
        return self.home_dir / ".ssh"

    @property
    def global_gitconfig(self) -> Path:
        return self.home_dir / ".gitconfig"

    @property
    def ssh_config(self) -> Path:
        return self.ssh_dir / "config"

    def generate_ssh_key(self, account_name: str, email: str) -> Path:
        return generate_ssh_key(self.ssh_dir, account_name, email, self.on_existing_key)

    def add_ssh_agent(self, key_file: Path) -> None:
        add_to_agent(key_file)

    def add_account(
        self,
        name: str,
        email: str,
        ssh_key: Path,
        codebase_dir: Union[str, Path]
    ) -> Account:
        """Record an account; an existing one with the same name is replaced"""
        account = Account(
            name=name,
            email=email,
            ssh_key=Path(ssh_key),
            codebase_dir=resolve_codebase_dir(str(codebase_dir), self.home_dir),
        )
        self.registry.add(account)
        return account

    def associate_account_with_dir(self, account_name: str) -> Account:
        """Write the codebase .gitconfig and the global includeIf for it

        Raises:
            AccountNotFoundError: If the account was never added
            ConfigWriteError: If either file can't be written
        """
        account = self.registry.get(account_name)

        write_local_gitconfig(
            account.local_gitconfig,
            account.name,
            account.email,
            dedupe=self.dedupe_gitconfig
        )
        write_global_gitconfig(
            self.global_gitconfig,
            account.codebase_dir,
            account.local_gitconfig,
            dedupe=self.dedupe_gitconfig
        )

        return account

    def setup_ssh_config(self, account_name: str, host: str) -> bool:
        """Add a Host block for the account unless the host is already configured"""
        account = self.registry.get(account_name)
        return write_ssh_config(self.ssh_config, host, account.ssh_key)

    def setup_account(
        self,
        name: str,
        email: str,
        codebase_dir: Union[str, Path],
        host: str
    ) -> Account:
        """Provision one identity end to end, stopping at the first failure"""
        logger.info(f"Setting up account {name}")

        # Step 1: keypair
        ssh_key = self.generate_ssh_key(name, email)

        # Step 2: agent
        self.add_ssh_agent(ssh_key)

        # Step 3: registry
        self.add_account(name, email, ssh_key, codebase_dir)

        # Steps 4-5: local + global git config
        account = self.associate_account_with_dir(name)

        # Step 6: ssh host alias
        self.setup_ssh_config(name, host)

        logger.info(f"Account {name} ready: {account.codebase_dir}")
        return account

    def setup_spec(self, spec: AccountSpec) -> Account:
        return self.setup_account(spec.name, spec.email, spec.codebase_dir, spec.host)

    def setup_accounts(self, specs: Iterable[AccountSpec]) -> list[Account]:
        """Provision specs in order; the first failure aborts the rest"""
        return [self.setup_spec(spec) for spec in specs]
