"""Type definitions for git-identities configuration"""

import re
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator


GITHUB_HOSTNAME = "github.com"

# Names go unquoted into .gitconfig values, key filenames and SSH Host aliases
ACCOUNT_NAME_RE = re.compile(r"[A-Za-z0-9._-]+")


class ExistingKeyPolicy(str, Enum):
    """What to do when an account's private key is already on disk."""
    FAIL = "fail"
    REUSE = "reuse"
    OVERWRITE = "overwrite"


class AccountSpec(BaseModel):
    """An identity to provision"""
    name: str
    email: str
    codebase_dir: str
    host: Optional[str] = None  # e.g., "github.com-work"

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        """Name ends up in key filenames and config section names"""
        if not v:
            raise ValueError("name must not be empty")
        if not ACCOUNT_NAME_RE.fullmatch(v):
            raise ValueError("name may only contain letters, digits, '.', '_' and '-'")
        return v

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        if "@" not in v:
            raise ValueError("email must contain '@'")
        return v

    @field_validator('codebase_dir')
    @classmethod
    def validate_codebase_dir(cls, v):
        if not v.strip():
            raise ValueError("codebase_dir must not be empty")
        return v

    @model_validator(mode='after')
    def default_host(self):
        """Host alias defaults to github.com-<name>"""
        if not self.host:
            self.host = f"{GITHUB_HOSTNAME}-{self.name}"
        return self


class AccountEntry(BaseModel):
    """Account body as written in the config file (name comes from the key)"""
    email: str
    codebase_dir: str
    host: Optional[str] = None


class IdentitiesConfig(BaseModel):
    """Root configuration"""
    version: str
    accounts: dict[str, AccountEntry] = Field(default_factory=dict)

    @field_validator('version', mode='before')
    @classmethod
    def coerce_version(cls, v):
        # YAML reads `version: 1` as an int
        if isinstance(v, (int, float)):
            return str(v)
        return v

    def specs(self) -> list[AccountSpec]:
        """Build validated account specs in file order"""
        return [
            AccountSpec(name=name, **entry.model_dump())
            for name, entry in self.accounts.items()
        ]

    def get_spec(self, name: str) -> Optional[AccountSpec]:
        entry = self.accounts.get(name)
        if entry is None:
            return None
        return AccountSpec(name=name, **entry.model_dump())
