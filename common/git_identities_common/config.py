"""Configuration loading and validation"""

from pathlib import Path
from typing import Union
import yaml
from pydantic import ValidationError

from .errors import GitIdentitiesError
from .types import IdentitiesConfig


class ConfigError(GitIdentitiesError):
    """Configuration loading or validation error"""
    pass


class ConfigLoader:
    """Load and validate git-identities configuration files"""

    def load(self, config_path: Union[str, Path]) -> IdentitiesConfig:
        """Load configuration from YAML file"""
        config_path = Path(config_path)

        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")

        try:
            with open(config_path, 'r') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML: {e}")

        if not isinstance(data, dict):
            raise ConfigError(f"Config file must contain a mapping: {config_path}")

        return self.load_from_dict(data)

    def load_from_dict(self, data: dict) -> IdentitiesConfig:
        """Load configuration from dictionary"""
        # Validate required fields
        if "version" not in data:
            raise ConfigError("version is required")

        if "accounts" not in data or not data["accounts"]:
            raise ConfigError("accounts section is required")

        # Validate with pydantic, including per-account name/email rules
        try:
            config = IdentitiesConfig(**data)
            config.specs()
            return config
        except ValidationError as e:
            # Convert pydantic errors to ConfigError
            errors = []
            for error in e.errors():
                field = ".".join(str(x) for x in error["loc"])
                msg = error["msg"]
                errors.append(f"{field}: {msg}" if field else msg)
            raise ConfigError("Validation errors:\n" + "\n".join(errors))
