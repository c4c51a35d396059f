"""Configuration data and loading.

Provides immutable configuration loaded from ~/.branchstack/config.toml.
A missing file is not an error: every field has a default.
"""

import tomllib
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from pathlib import Path

import tomlkit

from branchstack.core.graph_store import DEFAULT_STACK_FILE

DEFAULT_HISTORY_DEPTH = 250

CONFIG_KEYS = ("history_depth", "stack_file", "default_author")


@dataclass(frozen=True)
class StackConfig:
    """Immutable configuration.

    Loaded once at CLI entry point and stored in StackContext.
    """

    history_depth: int = DEFAULT_HISTORY_DEPTH
    stack_file: str = DEFAULT_STACK_FILE
    default_author: str | None = None


def parse_config(data: dict, source: Path) -> StackConfig:
    """Build a StackConfig from parsed TOML, validating each field.

    Raises:
        ValueError: If a field has the wrong type or an unusable value
    """
    config = StackConfig()

    if "history_depth" in data:
        depth = data["history_depth"]
        if not isinstance(depth, int) or isinstance(depth, bool) or depth < 1:
            raise ValueError(f"'history_depth' must be a positive integer in {source}")
        config = replace(config, history_depth=depth)

    if "stack_file" in data:
        stack_file = data["stack_file"]
        if not isinstance(stack_file, str) or not stack_file or "/" in stack_file:
            raise ValueError(f"'stack_file' must be a plain file name in {source}")
        config = replace(config, stack_file=stack_file)

    if "default_author" in data:
        author = data["default_author"]
        if not isinstance(author, str) or not author.strip():
            raise ValueError(f"'default_author' must be a non-empty string in {source}")
        config = replace(config, default_author=author)

    return config


def apply_setting(config: StackConfig, key: str, value: str, source: Path) -> StackConfig:
    """Return `config` with one key set from its command-line string form.

    Raises:
        ValueError: If the key is unknown or the value is invalid
    """
    if key not in CONFIG_KEYS:
        raise ValueError(f"Unknown config key '{key}'. Valid keys: {', '.join(CONFIG_KEYS)}")

    parsed: object = value
    if key == "history_depth":
        if not value.isdigit():
            raise ValueError(f"'history_depth' must be a positive integer, got '{value}'")
        parsed = int(value)

    data = config_to_dict(config)
    data[key] = parsed
    return parse_config(data, source)


def config_to_dict(config: StackConfig) -> dict:
    data: dict = {
        "history_depth": config.history_depth,
        "stack_file": config.stack_file,
    }
    if config.default_author is not None:
        data["default_author"] = config.default_author
    return data


class ConfigStore(ABC):
    """Abstract interface for config operations.

    Provides dependency injection for config access, enabling in-memory
    implementations for tests without touching the filesystem.
    """

    @abstractmethod
    def exists(self) -> bool:
        """Check if a config has been saved."""
        ...

    @abstractmethod
    def load(self) -> StackConfig:
        """Load config, falling back to defaults when none exists.

        Raises:
            ValueError: If the config is malformed
        """
        ...

    @abstractmethod
    def save(self, config: StackConfig) -> None:
        """Save config."""
        ...

    @abstractmethod
    def path(self) -> Path:
        """Get the path to the config file (for error messages and debugging)."""
        ...


class FilesystemConfigStore(ConfigStore):
    """Production implementation that reads/writes ~/.branchstack/config.toml."""

    def __init__(self, config_path: Path | None = None) -> None:
        self._config_path = config_path

    def exists(self) -> bool:
        return self.path().exists()

    def load(self) -> StackConfig:
        config_path = self.path()
        if not config_path.exists():
            return StackConfig()

        try:
            data = tomllib.loads(config_path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Cannot parse {config_path}: {e}") from e

        return parse_config(data, config_path)

    def save(self, config: StackConfig) -> None:
        config_path = self.path()
        config_path.parent.mkdir(parents=True, exist_ok=True)

        doc = tomlkit.document()
        doc.add(tomlkit.comment("branchstack configuration"))
        for key, value in config_to_dict(config).items():
            doc[key] = value

        config_path.write_text(tomlkit.dumps(doc), encoding="utf-8")

    def path(self) -> Path:
        if self._config_path is not None:
            return self._config_path
        return Path.home() / ".branchstack" / "config.toml"


class InMemoryConfigStore(ConfigStore):
    """Test implementation that stores config in memory without touching filesystem."""

    def __init__(self, config: StackConfig | None = None) -> None:
        """Initialize in-memory config store.

        Args:
            config: Initial config state (None = config doesn't exist)
        """
        self._config = config

    def exists(self) -> bool:
        return self._config is not None

    def load(self) -> StackConfig:
        if self._config is None:
            return StackConfig()
        return self._config

    def save(self, config: StackConfig) -> None:
        self._config = config

    def path(self) -> Path:
        return Path("/fake/branchstack/config.toml")

