import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from srs_check.config import ValidatorConfig
from srs_check.errors import ConfigError

DEFAULT_CONFIG_FILES = (".srs-check.toml", "pyproject.toml")


class CheckConfig:
    """Handles loading and validation of [tool.srs-check] configuration"""

    def __init__(self, config_path: Path | None = None, root: Path | None = None):
        self.source: Path | None = None
        self.settings: dict[str, Any] = {}

        if config_path is not None:
            if not config_path.exists():
                raise ConfigError(f"config file does not exist: {config_path}")
            self._load_from_file(config_path)
        elif root is not None:
            for name in DEFAULT_CONFIG_FILES:
                candidate = root / name
                if candidate.is_file():
                    self._load_from_file(candidate)
                    break

    def _load_from_file(self, path: Path):
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"cannot read config file {path}: {e}") from e

        self.source = path
        self.settings = data.get("tool", {}).get("srs-check", {})

    def build(self, **overrides: Any) -> ValidatorConfig:
        """Return the validated settings, with non-None overrides applied on top"""
        values = {**self.settings, **{k: v for k, v in overrides.items() if v is not None}}
        try:
            return ValidatorConfig.model_validate(values)
        except ValidationError as e:
            where = self.source or "command line"
            raise ConfigError(f"invalid configuration in {where}: {e}") from e
