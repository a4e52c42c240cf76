"""SSH key generation and agent registration"""

import logging
import subprocess
from pathlib import Path
from typing import Union

from git_identities_common.types import ExistingKeyPolicy
from .errors import AgentRegistrationError, KeyGenerationError

logger = logging.getLogger(__name__)


def key_path_for(ssh_dir: Path, account_name: str) -> Path:
    """Deterministic private key location for an account"""
    return ssh_dir / f"id_ed25519_{account_name}"


def public_key_path(key_path: Path) -> Path:
    return Path(f"{key_path}.pub")


def _run_tool(cmd: list[str], error_cls, action: str) -> subprocess.CompletedProcess:
    """Run an SSH tool, raising error_cls with its output on failure"""
    logger.debug(f"Running {' '.join(cmd)}")

    try:
        result = subprocess.run(cmd, capture_output=True, text=True, errors="replace")
    except OSError as e:
        # Tool missing from PATH or not executable
        raise error_cls(f"Failed to {action}: {e}")

    if result.returncode != 0:
        raise error_cls(
            f"Failed to {action}: {result.stdout}, {result.stderr}"
        )

    return result


def generate_ssh_key(
    ssh_dir: Path,
    account_name: str,
    email: str,
    on_existing: Union[ExistingKeyPolicy, str] = ExistingKeyPolicy.FAIL
) -> Path:
    """Generate an ed25519 keypair without passphrase.

    Args:
        ssh_dir: Directory that holds the keys (created if missing)
        account_name: Used in the key filename
        email: Key comment
        on_existing: What to do if the private key already exists

    Returns:
        Path to the private key (public key gets .pub suffix)

    Raises:
        KeyGenerationError: If the directory can't be created, the key exists
            under the "fail" policy, or ssh-keygen exits non-zero
    """
    on_existing = ExistingKeyPolicy(on_existing)

    try:
        ssh_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
    except OSError as e:
        raise KeyGenerationError(f"Failed to create {ssh_dir}: {e}")

    key_file = key_path_for(ssh_dir, account_name)

    if key_file.exists():
        if on_existing is ExistingKeyPolicy.REUSE:
            logger.info(f"Reusing existing key {key_file}")
            return key_file

        if on_existing is ExistingKeyPolicy.FAIL:
            raise KeyGenerationError(
                f"Key file already exists: {key_file} "
                f"(use the reuse or overwrite policy)"
            )

        logger.info(f"Overwriting existing key {key_file}")
        try:
            key_file.unlink()
            public_key_path(key_file).unlink(missing_ok=True)
        except OSError as e:
            raise KeyGenerationError(f"Failed to remove old key {key_file}: {e}")

    _run_tool(
        [
            "ssh-keygen",
            "-t", "ed25519",
            "-C", email,
            "-f", str(key_file),
            "-N", "",  # No passphrase
        ],
        KeyGenerationError,
        "generate SSH key",
    )

    logger.info(f"Key file: {key_file}")
    return key_file


def add_to_agent(key_file: Path) -> None:
    """Register a private key with the running ssh-agent

    Raises:
        AgentRegistrationError: If ssh-add exits non-zero
    """
    _run_tool(["ssh-add", str(key_file)], AgentRegistrationError, "add SSH key to agent")
    logger.info(f"Added {key_file} to ssh-agent")


def get_public_key(key_file: Path) -> str:
    """Read public key content.

    Args:
        key_file: Path to private key (will append .pub)

    Returns:
        Public key content as string
    """
    return public_key_path(key_file).read_text().strip()
