"""
Configuration management for sketching and duplicate checks.

Settings come from a YAML file (``.dupsketch.yml`` by default, or the file
named by ``DUPSKETCH_CONFIG``) with ``DUPSKETCH_*`` environment variables
applied on top.
"""

import logging
import numbers
import os
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple, Union

import yaml
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax

from .errors import ConfigError, InvalidArgumentError

logger = logging.getLogger(__name__)


_TRUE_WORDS = ("true", "yes", "1", "on")
_FALSE_WORDS = ("false", "no", "0", "off")
_BOOL_FIELDS = ("lowercase", "unicode_normalize", "script_unify", "punct_norm", "add_if_dup")


def _parse_bool(value: str) -> bool:
    word = value.strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    raise ValueError(f"expected one of {', '.join(_TRUE_WORDS + _FALSE_WORDS)}")


@dataclass
class SketchConfig:
    """Sketcher and index settings."""

    # Sketcher
    size: int = 128  # Signature slots
    n_gram: int = 5  # Shingle width in code points
    lowercase: bool = True
    unicode_normalize: bool = True
    script_unify: bool = True
    punct_norm: bool = True

    # Duplicate check
    threshold: float = 0.5
    add_if_dup: bool = False

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Raise InvalidArgumentError on values of the wrong type or out of range."""
        for name in ("size", "n_gram"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidArgumentError(f"{name} must be an integer, got {value!r}", parameter=name, value=value)
        if isinstance(self.threshold, bool) or not isinstance(self.threshold, numbers.Real):
            raise InvalidArgumentError(
                f"threshold must be a number, got {self.threshold!r}",
                parameter="threshold",
                value=self.threshold,
            )
        for name in _BOOL_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise InvalidArgumentError(f"{name} must be true or false, got {value!r}", parameter=name, value=value)

        if self.size <= 0:
            raise InvalidArgumentError("size must be greater than 0", parameter="size", value=self.size)
        if self.n_gram <= 0:
            raise InvalidArgumentError("n_gram must be greater than 0", parameter="n_gram", value=self.n_gram)
        if not 0.0 <= self.threshold <= 1.0:
            raise InvalidArgumentError(
                f"threshold must be between 0 and 1, got {self.threshold}",
                parameter="threshold",
                value=self.threshold,
            )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SketchConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")
        try:
            return cls(**data)
        except TypeError as e:
            raise ConfigError(f"Invalid configuration value: {e}") from e


# env var suffix -> (field, parser)
ENV_OVERRIDES: Dict[str, Tuple[str, Callable[[str], Any]]] = {
    "SIZE": ("size", int),
    "N_GRAM": ("n_gram", int),
    "THRESHOLD": ("threshold", float),
    "LOWERCASE": ("lowercase", _parse_bool),
    "UNICODE_NORMALIZE": ("unicode_normalize", _parse_bool),
    "SCRIPT_UNIFY": ("script_unify", _parse_bool),
    "PUNCT_NORM": ("punct_norm", _parse_bool),
    "ADD_IF_DUP": ("add_if_dup", _parse_bool),
}


class ConfigManager:
    """Loads, saves and displays ``SketchConfig`` files."""

    DEFAULT_CONFIG_FILE = ".dupsketch.yml"
    ENV_PREFIX = "DUPSKETCH_"

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """
        Initialize config manager.

        Args:
            config_path: Path to configuration file; falls back to
                ``DUPSKETCH_CONFIG`` and then ``.dupsketch.yml``
        """
        self.console = Console()
        if config_path is None:
            config_path = os.getenv(f"{self.ENV_PREFIX}CONFIG") or self.DEFAULT_CONFIG_FILE
        self.config_path = Path(config_path)
        self._config: Optional[SketchConfig] = None

    def load(self) -> SketchConfig:
        """
        Load configuration from file, or defaults if the file is missing.

        Raises:
            ConfigError: if the file can't be parsed or holds unknown keys
        """
        if self._config is not None:
            return self._config

        data: Dict[str, Any] = {}
        if self.config_path.exists():
            try:
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {self.config_path}: {e}", source=str(self.config_path)) from e
            if not isinstance(data, dict):
                raise ConfigError(f"{self.config_path} must contain a mapping", source=str(self.config_path))
            logger.info("Loaded config from %s", self.config_path)
        else:
            logger.debug("No config file at %s, using defaults", self.config_path)

        data.update(self.environment_overrides())
        self._config = SketchConfig.from_dict(data)
        return self._config

    def save(self, config: Optional[SketchConfig] = None) -> Path:
        """Write configuration as YAML and return the path written."""
        config = config or self._config or SketchConfig()
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, 'w', encoding='utf-8') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
        self._config = config
        logger.info("Saved config to %s", self.config_path)
        return self.config_path

    def environment_overrides(self) -> Dict[str, Any]:
        overrides: Dict[str, Any] = {}
        for suffix, (name, parse) in ENV_OVERRIDES.items():
            env_var = f"{self.ENV_PREFIX}{suffix}"
            raw = os.getenv(env_var)
            if raw is None:
                continue
            try:
                overrides[name] = parse(raw)
            except ValueError as e:
                raise ConfigError(f"Invalid environment variable {env_var}={raw}: {e}", source=env_var) from e
            logger.debug("Applied env override: %s=%r", name, overrides[name])
        return overrides

    def display(self, config: Optional[SketchConfig] = None):
        config = config or self.load()
        yaml_str = yaml.dump(config.to_dict(), default_flow_style=False, sort_keys=False)
        syntax = Syntax(yaml_str, "yaml", theme="monokai", line_numbers=True)
        panel = Panel(
            syntax,
            title=f"[bold cyan]dupsketch configuration[/bold cyan] ({self.config_path})",
            border_style="cyan"
        )
        self.console.print(panel)


def get_config(config_path: Optional[Union[str, Path]] = None) -> SketchConfig:
    return ConfigManager(config_path).load()


def create_default_config_file(path: Optional[Union[str, Path]] = None) -> Path:
    """Write a configuration file holding the defaults."""
    manager = ConfigManager(path or ConfigManager.DEFAULT_CONFIG_FILE)
    return manager.save(SketchConfig())
