"""Configuration management."""

import configparser
import os
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from clockrules.clockify.debug import DEFAULT_DEBUG_DIR
from clockrules.errors import ConfigNotFoundError
from clockrules.overrides import DEFAULT_SETTINGS_PATH

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "clockrules" / "config.ini"
TOKEN_ENV_VARS = ("CLOCKIFY_TOKEN", "TOKEN")


@dataclass
class Config:
    """Clockify authentication configuration."""

    clockify_token: str

    @classmethod
    def from_env(cls) -> "Config | None":
        """Load configuration from environment variables."""
        for name in TOKEN_ENV_VARS:
            token = os.environ.get(name)
            if token:
                return cls(clockify_token=token)
        return None

    @classmethod
    def load(cls, path: Path = DEFAULT_CONFIG_PATH) -> "Config | None":
        """Load configuration from file."""
        if not path.is_file():
            return None

        config = configparser.ConfigParser(interpolation=None)
        try:
            config.read(path)
            return cls(clockify_token=config["clockify"]["token"])
        except (configparser.Error, KeyError) as e:
            msg = f"No Clockify token in {path}, run 'clockrules config' to store one"
            raise ConfigNotFoundError(msg) from e

    def save(self, path: Path = DEFAULT_CONFIG_PATH) -> None:
        """Save configuration to file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        config = configparser.ConfigParser(interpolation=None)
        config["clockify"] = {"token": self.clockify_token}
        with path.open("w") as config_file:
            config.write(config_file)
        path.chmod(0o600)


@dataclass(frozen=True)
class RunOptions:
    """Validated options for one balance calculation."""

    token: str
    start_date: date | None = None
    start_balance_minutes: int | None = None
    include_today: bool = False
    debug: bool = False
    debug_dir: Path = DEFAULT_DEBUG_DIR
    settings_path: Path = DEFAULT_SETTINGS_PATH
