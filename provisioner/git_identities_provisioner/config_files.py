"""Git and SSH client config writers

All writes are appends. Git config blocks are appended unconditionally unless
dedupe is requested; SSH host blocks are only appended when the host is not
already present.
"""

import logging
from pathlib import Path
from typing import Optional

from git_identities_common.types import GITHUB_HOSTNAME
from .errors import ConfigWriteError

logger = logging.getLogger(__name__)


def render_local_gitconfig(name: str, email: str) -> str:
    """URL rewrite to the account's host alias plus its user section"""
    return (
        f'[url "git@{GITHUB_HOSTNAME}-{name}:"]\n'
        f"    insteadOf = git@{GITHUB_HOSTNAME}:\n"
        f"[user]\n"
        f"    name = {name}\n"
        f"    email = {email}\n"
    )


def render_include_if(codebase_dir: Path, local_gitconfig: Path) -> str:
    # Trailing slash makes git match every repository below the directory
    gitdir = f"{str(codebase_dir).rstrip('/')}/"
    return (
        f'[includeIf "gitdir/i:{gitdir}"]\n'
        f"    path = {local_gitconfig}\n"
        f"\n"
    )


def render_ssh_host(host: str, key_file: Path) -> str:
    return (
        f"\nHost {host}\n"
        f"    HostName {GITHUB_HOSTNAME}\n"
        f"    User git\n"
        f"    AddKeysToAgent yes\n"
        f"    UseKeychain yes\n"
        f"    IdentityFile {key_file}\n"
    )


def read_bytes(path: Path) -> bytes:
    """Existing file content, empty if the file doesn't exist

    Raw bytes so files in any encoding can be guard-checked.
    """
    if not path.exists():
        return b""
    try:
        return path.read_bytes()
    except OSError as e:
        raise ConfigWriteError(path, e)


def append_block(path: Path, block: str, guard: Optional[str] = None) -> bool:
    """Append block to path, creating parent directories.

    Args:
        path: File to append to
        block: Text to append
        guard: If given, skip the append when the file already contains it

    Returns:
        True if the block was written, False if the guard matched

    Raises:
        ConfigWriteError: On any filesystem failure
    """
    if guard is not None and guard.encode() in read_bytes(path):
        logger.info(f"{path} already contains {guard!r}, skipping")
        return False

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "a", encoding="utf-8") as f:
            f.write(block)
    except OSError as e:
        raise ConfigWriteError(path, e)

    logger.info(f"Appended to {path}")
    logger.debug(f"Content:\n{block}")
    return True


def write_local_gitconfig(
    path: Path,
    name: str,
    email: str,
    dedupe: bool = False
) -> bool:
    """Append the per-codebase config block"""
    block = render_local_gitconfig(name, email)
    guard = block.splitlines()[0] if dedupe else None
    return append_block(path, block, guard)


def write_global_gitconfig(
    path: Path,
    codebase_dir: Path,
    local_gitconfig: Path,
    dedupe: bool = False
) -> bool:
    """Append the includeIf stanza pointing at the local config"""
    block = render_include_if(codebase_dir, local_gitconfig)
    guard = block.splitlines()[0] if dedupe else None
    return append_block(path, block, guard)


def write_ssh_config(path: Path, host: str, key_file: Path) -> bool:
    """Append a Host block unless `Host <host>` is already present"""
    return append_block(path, render_ssh_host(host, key_file), guard=f"Host {host}")
