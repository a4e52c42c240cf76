"""Home directory resolution"""

import os
from pathlib import Path
from typing import Mapping, Optional

from .errors import HomeEnvironmentError


def resolve_home(environ: Optional[Mapping[str, str]] = None) -> Path:
    """Return $HOME as a Path

    Raises:
        HomeEnvironmentError: If HOME is unset or empty
    """
    if environ is None:
        environ = os.environ

    home = environ.get("HOME")
    if not home:
        raise HomeEnvironmentError("$HOME directory not found")

    return Path(home)


def resolve_codebase_dir(codebase_dir: str, home_dir: Path) -> Path:
    """Absolute, normalized codebase path; relative paths and ~ resolve against home_dir"""
    if codebase_dir == "~" or codebase_dir.startswith("~/"):
        codebase_dir = codebase_dir[2:]

    path = Path(codebase_dir)
    if not path.is_absolute():
        path = home_dir / path

    # includeIf gitdir patterns are matched against real paths, so no ".." segments
    return Path(os.path.normpath(path))
