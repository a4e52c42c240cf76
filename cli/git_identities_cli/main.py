"""CLI command definitions"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from git_identities_common import AccountSpec, ConfigError, ConfigLoader, GitIdentitiesError, IdentitiesConfig
from git_identities_common.types import ExistingKeyPolicy
from git_identities_provisioner import Account, AccountProvisioner, AccountRegistry, resolve_home
from git_identities_provisioner.environment import resolve_codebase_dir
from git_identities_provisioner.ssh_keys import get_public_key, key_path_for, public_key_path


console = Console()

CONFIG_ENV_VAR = "GIT_IDENTITIES_CONFIG"

KEY_POLICY_CHOICE = click.Choice([p.value for p in ExistingKeyPolicy])


def default_config_path(home_dir: Path) -> Path:
    """--config falls back to $GIT_IDENTITIES_CONFIG, then ~/.git-identities/config.yaml"""
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return home_dir / ".git-identities" / "config.yaml"


def fail(message: str):
    console.print(f"[red]Error: {escape(message)}[/red]")
    sys.exit(1)


def load_config(config_path: Optional[str], home_dir: Path) -> IdentitiesConfig:
    path = Path(config_path) if config_path else default_config_path(home_dir)
    return ConfigLoader().load(path)


def print_account(account: Account, host: str):
    console.print(f"[green]✓ Account '{account.name}' is set up[/green]")
    console.print(f"  Key:       {account.ssh_key}")
    console.print(f"  Codebase:  {account.codebase_dir}")
    console.print(f"  Host:      {host}")
    console.print(f"  [dim]Add {public_key_path(account.ssh_key)} to the GitHub account[/dim]")


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Show detailed progress logging')
def cli(verbose):
    """git-identities - one SSH key and Git identity per codebase directory"""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@cli.command()
@click.argument('name')
@click.option('--email', required=True, help='Commit email for this identity')
@click.option('--codebase-dir', required=True,
              help='Directory whose repositories use this identity (relative paths resolve against $HOME)')
@click.option('--host', help='SSH host alias (default: github.com-NAME)')
@click.option('--on-existing-key', type=KEY_POLICY_CHOICE, default=ExistingKeyPolicy.FAIL.value,
              show_default=True, help='What to do if the key file already exists')
@click.option('--dedupe', is_flag=True, help='Skip Git config blocks that are already present')
def setup(name, email, codebase_dir, host, on_existing_key, dedupe):
    """Provision a single identity

    Examples:
        git-identities setup work --email me@company.example --codebase-dir ~/Code/work
        git-identities setup personal --email me@example.com --codebase-dir Code/personal --host github.com-pers
    """
    try:
        spec = AccountSpec(name=name, email=email, codebase_dir=codebase_dir, host=host)
    except ValidationError as e:
        fail("; ".join(err["msg"] for err in e.errors()))

    try:
        home_dir = resolve_home()
        provisioner = AccountProvisioner(
            home_dir,
            AccountRegistry(),
            on_existing_key=on_existing_key,
            dedupe_gitconfig=dedupe
        )
        account = provisioner.setup_spec(spec)
        print_account(account, spec.host)
    except GitIdentitiesError as e:
        fail(str(e))


@cli.command()
@click.argument('names', nargs=-1)
@click.option('--config', 'config_path', help=f'Config file (default: ${CONFIG_ENV_VAR} or ~/.git-identities/config.yaml)')
@click.option('--on-existing-key', type=KEY_POLICY_CHOICE, default=ExistingKeyPolicy.FAIL.value,
              show_default=True, help='What to do if a key file already exists')
@click.option('--dedupe', is_flag=True, help='Skip Git config blocks that are already present')
def apply(names, config_path, on_existing_key, dedupe):
    """Provision accounts from a config file

    Provisions every account in the file, or only NAMES if given. Stops at the
    first failure.
    """
    try:
        home_dir = resolve_home()
        config = load_config(config_path, home_dir)

        if names:
            # Command-line order, each name once
            selected = {n: config.get_spec(n) for n in names}
            unknown = [n for n, spec in selected.items() if spec is None]
            if unknown:
                raise ConfigError(f"Unknown account(s): {', '.join(unknown)}")
            specs = list(selected.values())
        else:
            specs = config.specs()

        provisioner = AccountProvisioner(
            home_dir,
            AccountRegistry(),
            on_existing_key=on_existing_key,
            dedupe_gitconfig=dedupe
        )

        for spec in specs:
            console.print(f"Setting up {spec.name}...")
            account = provisioner.setup_spec(spec)
            print_account(account, spec.host)
    except GitIdentitiesError as e:
        fail(str(e))


@cli.command(name="list")
@click.option('--config', 'config_path', help='Config file')
def list_accounts(config_path):
    """List configured accounts"""
    try:
        home_dir = resolve_home()
        config = load_config(config_path, home_dir)
    except GitIdentitiesError as e:
        fail(str(e))

    table = Table(title="Git Identities")
    table.add_column("NAME")
    table.add_column("EMAIL")
    table.add_column("CODEBASE")
    table.add_column("HOST")
    table.add_column("KEY")

    for spec in config.specs():
        key_file = key_path_for(home_dir / ".ssh", spec.name)
        table.add_row(
            spec.name,
            spec.email,
            str(resolve_codebase_dir(spec.codebase_dir, home_dir)),
            spec.host,
            "present" if key_file.exists() else "missing"
        )

    console.print(table)


@cli.command()
@click.argument('name')
def pubkey(name):
    """Print an account's public key"""
    try:
        home_dir = resolve_home()
    except GitIdentitiesError as e:
        fail(str(e))

    key_file = key_path_for(home_dir / ".ssh", name)

    if not public_key_path(key_file).exists():
        fail(f"No public key for {name}: {public_key_path(key_file)}")

    # Plain print so the key can be piped without rich markup
    click.echo(get_public_key(key_file))


if __name__ == "__main__":
    cli()
