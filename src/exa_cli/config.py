import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError

from exa_cli.errors import ConfigError, ConfigSaveError

logger = logging.getLogger(__name__)

CONFIG_DIR = "exa"
CONFIG_FILE = "config.yaml"
CONFIG_HOME_ENV_VAR = "XDG_CONFIG_HOME"

CONFIG_DIR_MODE = 0o700
CONFIG_FILE_MODE = 0o600


class Config(BaseModel):
    api_key: str | None = None


def config_path() -> Path:
    """The per-user config file, `$XDG_CONFIG_HOME/exa/config.yaml` or `~/.config/exa/config.yaml`."""
    if config_home := os.getenv(CONFIG_HOME_ENV_VAR):
        return Path(config_home) / CONFIG_DIR / CONFIG_FILE

    return Path.home() / ".config" / CONFIG_DIR / CONFIG_FILE


def load_config(path: Path | None = None) -> Config:
    """Load the config file.

    A missing or empty file is an empty config, not an error.

    Raises:
        ConfigError: If the file cannot be read or does not hold a valid config mapping.
    """
    path = path or config_path()

    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Config()
    except OSError as e:
        raise ConfigError(path, str(e)) from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(path, str(e)) from e

    if data is None:
        return Config()

    if not isinstance(data, dict):
        msg = f"expected a mapping, got {type(data).__name__}"
        raise ConfigError(path, msg)

    try:
        return Config.model_validate(data)
    except ValidationError as e:
        raise ConfigError(path, str(e)) from e


def save_config(config: Config, path: Path | None = None) -> Path:
    """Write the config file, replacing any existing one. Returns the path written.

    Raises:
        ConfigSaveError: If the directory or the file cannot be written.
    """
    path = path or config_path()

    content = yaml.safe_dump(config.model_dump(exclude_none=True), sort_keys=False, default_flow_style=False)

    try:
        path.parent.mkdir(mode=CONFIG_DIR_MODE, parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigSaveError("create config directory", path.parent, str(e)) from e

    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, CONFIG_FILE_MODE)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)

        # os.open only applies the mode to newly created files
        path.chmod(CONFIG_FILE_MODE)
    except OSError as e:
        raise ConfigSaveError("write config file", path, str(e)) from e

    logger.debug("Saved config to %s", path)

    return path


def get_api_key(path: Path | None = None) -> str | None:
    try:
        config = load_config(path)
    except ConfigError as e:
        logger.warning("Ignoring config file: %s", e)
        return None

    return config.api_key or None
