"""
Configuration module for the Leaf playground.

Supports loading from YAML/JSON files with environment variable overrides.
Default values are loaded from defaults.yaml for maintainability.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

# Path to the default configuration file
_DEFAULTS_CONFIG_PATH = Path(__file__).parent / "defaults.yaml"

# Cache for default values
_defaults_cache: dict[str, Any] | None = None

RUN_POLICIES = ("concurrent", "serial", "reject")


def _load_defaults() -> dict[str, Any]:
    """Load default configuration values from defaults.yaml."""
    global _defaults_cache

    if _defaults_cache is not None:
        return _defaults_cache

    if not _DEFAULTS_CONFIG_PATH.exists():
        logger.warning(f"Defaults config not found: {_DEFAULTS_CONFIG_PATH}")
        _defaults_cache = {}
        return _defaults_cache

    try:
        content = _DEFAULTS_CONFIG_PATH.read_text(encoding="utf-8")
        _defaults_cache = yaml.safe_load(content) or {}
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse defaults config: {e}")
        _defaults_cache = {}

    return _defaults_cache


def _get_default(section: str, key: str, fallback: Any = None) -> Any:
    """Get a default value from the defaults config."""
    defaults = _load_defaults()
    section_defaults = defaults.get(section) or {}
    return section_defaults.get(key, fallback)


@dataclass
class SessionConfig:
    """Initial values of a new session."""

    theme: str = field(default_factory=lambda: _get_default("session", "theme", "light"))
    font_size: int = field(default_factory=lambda: _get_default("session", "font_size", 16))
    transcript_visible: bool = field(
        default_factory=lambda: _get_default("session", "transcript_visible", False)
    )


@dataclass
class RunConfig:
    """Configuration of the run pipeline."""

    engine: str = field(default_factory=lambda: _get_default("run", "engine", ""))
    policy: str = field(default_factory=lambda: _get_default("run", "policy", "concurrent"))
    timeout: Optional[float] = field(default_factory=lambda: _get_default("run", "timeout", None))
    offload: bool = field(default_factory=lambda: _get_default("run", "offload", True))

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """
        Check policy and timeout values.

        Raises:
            ValueError: If the policy is unknown or the timeout not positive.
        """
        if self.policy not in RUN_POLICIES:
            raise ValueError(
                f"Unknown run policy '{self.policy}', expected one of {', '.join(RUN_POLICIES)}"
            )
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError(f"Run timeout must be positive, got {self.timeout}")
        if self.timeout is not None and not self.offload:
            logger.warning(
                "run.timeout only bounds coroutine engines when run.offload is false; "
                "a synchronous engine blocks the event loop until it returns"
            )


@dataclass
class EditorConfig:
    """Configuration of the program editor."""

    default_text: str = field(
        default_factory=lambda: _get_default(
            "editor",
            "default_text",
            "# write some leaf code here\n# press F1 for command pallete",
        )
    )


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = field(default_factory=lambda: _get_default("logging", "level", "WARNING"))
    format: str = field(
        default_factory=lambda: _get_default(
            "logging", "format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    )


@dataclass
class PlaygroundConfig:
    """Main configuration class for the Leaf playground."""

    session: SessionConfig = field(default_factory=SessionConfig)
    run: RunConfig = field(default_factory=RunConfig)
    editor: EditorConfig = field(default_factory=EditorConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, path: Path | str) -> "PlaygroundConfig":
        """
        Load configuration from a YAML or JSON file.

        Args:
            path: Path to the configuration file (.yaml, .yml, or .json)

        Returns:
            PlaygroundConfig instance with loaded values

        Raises:
            FileNotFoundError: If the config file doesn't exist
            ValueError: If the file format is unsupported or its content invalid
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        content = path.read_text(encoding="utf-8")

        if path.suffix in (".yaml", ".yml"):
            try:
                data = yaml.safe_load(content) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid configuration file {path}: {e}") from e
        elif path.suffix == ".json":
            data = json.loads(content) if content.strip() else {}
        else:
            raise ValueError(f"Unsupported config file format: {path.suffix}")

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> "PlaygroundConfig":
        """
        Create PlaygroundConfig from a dictionary.

        Raises:
            ValueError: If a section is not a mapping or has unknown keys
        """
        if not isinstance(data, dict):
            raise ValueError(
                f"Invalid configuration: expected a mapping, got {type(data).__name__}"
            )

        config = cls()

        try:
            if "session" in data:
                config.session = SessionConfig(**data["session"])
            if "run" in data:
                config.run = RunConfig(**data["run"])
            if "editor" in data:
                config.editor = EditorConfig(**data["editor"])
            if "logging" in data:
                config.logging = LoggingConfig(**data["logging"])
        except TypeError as e:
            # Unknown keys or a section that is not a mapping
            raise ValueError(f"Invalid configuration: {e}") from e

        return config

    def apply_env_overrides(self) -> "PlaygroundConfig":
        """
        Apply environment variable overrides to the configuration.

        Environment variables follow the pattern: LEAF_<SECTION>_<KEY>
        Examples:
            - LEAF_SESSION_THEME
            - LEAF_RUN_ENGINE
            - LEAF_RUN_TIMEOUT
            - LEAF_LOGGING_LEVEL

        Returns:
            Self with environment overrides applied

        Raises:
            ValueError: If an override has an invalid value
        """
        env_mappings = {
            # Session config
            "LEAF_SESSION_THEME": ("session", "theme", str),
            "LEAF_SESSION_FONT_SIZE": ("session", "font_size", int),
            "LEAF_SESSION_TRANSCRIPT_VISIBLE": ("session", "transcript_visible", _parse_bool),
            # Run config
            "LEAF_RUN_ENGINE": ("run", "engine", str),
            "LEAF_RUN_POLICY": ("run", "policy", str),
            "LEAF_RUN_TIMEOUT": ("run", "timeout", _parse_optional_float),
            "LEAF_RUN_OFFLOAD": ("run", "offload", _parse_bool),
            # Editor config
            "LEAF_EDITOR_DEFAULT_TEXT": ("editor", "default_text", str),
            # Logging config
            "LEAF_LOGGING_LEVEL": ("logging", "level", str),
        }

        for env_var, (section, key, converter) in env_mappings.items():
            value = os.environ.get(env_var)
            if value is not None:
                section_obj = getattr(self, section)
                setattr(section_obj, key, converter(value))

        # Re-validate sections whose fields were replaced
        self.run.validate()

        return self

    def to_dict(self) -> dict:
        """Convert configuration to a dictionary."""
        return asdict(self)

    def to_yaml(self) -> str:
        """Serialize configuration to YAML string."""
        return yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False)

    def to_json(self) -> str:
        """Serialize configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=2)

    def save(self, path: Path | str) -> None:
        """
        Save configuration to a file.

        Args:
            path: Path to save the configuration (.yaml, .yml, or .json)

        Raises:
            ValueError: If the file format is unsupported
        """
        path = Path(path)

        if path.suffix in (".yaml", ".yml"):
            content = self.to_yaml()
        elif path.suffix == ".json":
            content = self.to_json()
        else:
            raise ValueError(f"Unsupported config file format: {path.suffix}")

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


def _parse_bool(value: str) -> bool:
    """Parse a string to boolean."""
    return value.lower() in ("true", "1", "yes", "on")


def _parse_optional_float(value: str) -> Optional[float]:
    """Parse a float, treating empty/none/null as no value."""
    if value.strip().lower() in ("", "none", "null"):
        return None
    return float(value)


def load_config(config_path: Optional[Path | str] = None, apply_env: bool = True) -> PlaygroundConfig:
    """
    Load configuration with optional environment variable overrides.

    Args:
        config_path: Optional path to config file. If None, uses defaults.
        apply_env: Whether to apply environment variable overrides.

    Returns:
        PlaygroundConfig instance
    """
    if config_path:
        config = PlaygroundConfig.from_file(config_path)
    else:
        config = PlaygroundConfig()

    if apply_env:
        config.apply_env_overrides()

    return config
