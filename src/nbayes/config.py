# =============================================================================
# Configuration Management
# =============================================================================
# Handles loading, saving, and validating nbayes configuration.
#
# XDG Base Directory Compliance (https://specifications.freedesktop.org/basedir-spec/):
#   - Config:  $XDG_CONFIG_HOME/nbayes/  (default: ~/.config/nbayes/)
#   - Data:    $XDG_DATA_HOME/nbayes/    (default: ~/.local/share/nbayes/)
#
# Files:
#   - config.toml: User configuration (classifier options, paths, logging)
#   - model.json:  Serialized classifier (in data directory)
#   - nbayes.db:   SQLite store (in data directory)
# =============================================================================

import logging
import os
import tomllib  # Built into Python 3.11+
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli_w  # For writing TOML (tomllib is read-only)

from nbayes.tokenizer import TokenizerConfig


# =============================================================================
# XDG Directory Management
# =============================================================================

# Application identifier used in all XDG paths
APP_NAME = "nbayes"

# Accepted values for [logging] level
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def get_xdg_config_home() -> Path:
    """
    Returns the XDG config directory for nbayes.

    Respects $XDG_CONFIG_HOME if set, otherwise uses ~/.config/nbayes/
    """
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        base = Path(xdg_config)
    else:
        base = Path.home() / ".config"
    return base / APP_NAME


def get_xdg_data_home() -> Path:
    """
    Returns the XDG data directory for nbayes.

    Respects $XDG_DATA_HOME if set, otherwise uses ~/.local/share/nbayes/
    This is where trained models and the SQLite store live.
    """
    xdg_data = os.environ.get("XDG_DATA_HOME")
    if xdg_data:
        base = Path(xdg_data)
    else:
        base = Path.home() / ".local" / "share"
    return base / APP_NAME


# =============================================================================
# Configuration Data Structures
# =============================================================================

@dataclass
class ClassifierConfig:
    """
    Options for new classifiers.

    Attributes:
        k: Laplace smoothing constant (non-negative).
        binarized: Count each token once per training example.
        assume_uniform: Assume all categories are equally likely a priori.
        log_vocab: Smooth with ln(vocabulary size) instead of the size.
    """
    k: float = 1.0
    binarized: bool = False
    assume_uniform: bool = False
    log_vocab: bool = False


@dataclass
class StorageConfig:
    """
    Where models are kept.

    Attributes:
        model_path: JSON model file. Empty = XDG data default.
        database_path: SQLite database. Empty = XDG data default.
    """
    model_path: str = ""
    database_path: str = ""


@dataclass
class LoggingConfig:
    """
    Attributes:
        level: Root log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    level: str = "WARNING"


@dataclass
class Config:
    """
    Main configuration container for nbayes.

    Usage:
        >>> config = Config.load()
        >>> config.classifier.k
        1.0
    """
    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    tokenizer: TokenizerConfig = field(default_factory=TokenizerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # -------------------------------------------------------------------------
    # File Paths
    # -------------------------------------------------------------------------

    @staticmethod
    def config_file_path() -> Path:
        """Returns the path to the main config file."""
        return get_xdg_config_home() / "config.toml"

    def model_path(self) -> Path:
        """Returns the path to the JSON model file."""
        if self.storage.model_path:
            return Path(self.storage.model_path).expanduser()
        return get_xdg_data_home() / "model.json"

    def database_path(self) -> Path:
        """Returns the path to the SQLite database."""
        if self.storage.database_path:
            return Path(self.storage.database_path).expanduser()
        return get_xdg_data_home() / "nbayes.db"

    @property
    def log_level(self) -> int:
        """Numeric logging level for the configured level name."""
        return getattr(logging, self.logging.level.upper())

    # -------------------------------------------------------------------------
    # Loading and Saving
    # -------------------------------------------------------------------------

    @classmethod
    def load(cls, path: Path | None = None) -> "Config":
        """
        Load configuration from a config file.

        If the config file doesn't exist, returns default configuration.

        Args:
            path: Config file to read. Defaults to the XDG location.

        Returns:
            Loaded Config object.

        Raises:
            ConfigError: If the config file exists but is invalid.
        """
        config_path = path or cls.config_file_path()

        if not config_path.exists():
            # No config file yet - return defaults
            return cls()

        # Load and parse the TOML file
        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid config file: {e}") from e

        config = cls._from_dict(data)
        config.validate()
        return config

    def save(self, path: Path | None = None) -> None:
        """
        Save configuration to a config file.

        Creates the config directory if it doesn't exist.
        """
        config_path = path or self.config_file_path()
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "wb") as f:
            tomli_w.dump(self._to_dict(), f)

    def validate(self) -> None:
        """
        Check option values.

        Raises:
            ConfigError: On the first invalid value.
        """
        k = self.classifier.k
        if isinstance(k, bool) or not isinstance(k, (int, float)) or k < 0:
            raise ConfigError(f"classifier.k must be a non-negative number, got {k!r}")
        for name in ("binarized", "assume_uniform", "log_vocab"):
            if not isinstance(getattr(self.classifier, name), bool):
                raise ConfigError(f"classifier.{name} must be true or false")

        level = self.logging.level
        if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
            raise ConfigError(
                f"logging.level must be one of {', '.join(LOG_LEVELS)}, got {level!r}"
            )

        for name in ("min_token_length", "max_token_length"):
            value = getattr(self.tokenizer, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"tokenizer.{name} must be an integer, got {value!r}")
        for name in ("include_urls", "normalize_case", "drop_stop_words"):
            if not isinstance(getattr(self.tokenizer, name), bool):
                raise ConfigError(f"tokenizer.{name} must be true or false")
        if self.tokenizer.min_token_length < 1:
            raise ConfigError("tokenizer.min_token_length must be at least 1")
        if self.tokenizer.max_token_length < self.tokenizer.min_token_length:
            raise ConfigError("tokenizer.max_token_length must be >= min_token_length")

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "Config":
        """
        Create a Config object from a dictionary (parsed TOML).
        """
        config = cls()

        # Classifier settings
        classifier = data.get("classifier", {})
        config.classifier = ClassifierConfig(
            k=classifier.get("k", 1.0),
            binarized=classifier.get("binarized", False),
            assume_uniform=classifier.get("assume_uniform", False),
            log_vocab=classifier.get("log_vocab", False),
        )

        # Storage settings
        storage = data.get("storage", {})
        config.storage = StorageConfig(
            model_path=storage.get("model_path", ""),
            database_path=storage.get("database_path", ""),
        )

        # Tokenizer settings
        tokenizer = data.get("tokenizer", {})
        config.tokenizer = TokenizerConfig(
            min_token_length=tokenizer.get("min_token_length", 2),
            max_token_length=tokenizer.get("max_token_length", 50),
            include_urls=tokenizer.get("include_urls", True),
            normalize_case=tokenizer.get("normalize_case", True),
            drop_stop_words=tokenizer.get("drop_stop_words", False),
        )

        # Logging settings
        logging_section = data.get("logging", {})
        config.logging = LoggingConfig(
            level=logging_section.get("level", "WARNING"),
        )

        return config

    def _to_dict(self) -> dict[str, Any]:
        """
        Convert Config to a dictionary for TOML serialization.
        """
        data: dict[str, Any] = {}

        data["classifier"] = {
            "k": self.classifier.k,
            "binarized": self.classifier.binarized,
            "assume_uniform": self.classifier.assume_uniform,
            "log_vocab": self.classifier.log_vocab,
        }

        data["storage"] = {
            "model_path": self.storage.model_path,
            "database_path": self.storage.database_path,
        }

        data["tokenizer"] = {
            "min_token_length": self.tokenizer.min_token_length,
            "max_token_length": self.tokenizer.max_token_length,
            "include_urls": self.tokenizer.include_urls,
            "normalize_case": self.tokenizer.normalize_case,
            "drop_stop_words": self.tokenizer.drop_stop_words,
        }

        data["logging"] = {
            "level": self.logging.level,
        }

        return data


# =============================================================================
# Exceptions
# =============================================================================

class ConfigError(Exception):
    """Raised when there's an error loading or parsing configuration."""
    pass


# =============================================================================
# Utility Functions
# =============================================================================

def print_paths(config: Config | None = None) -> None:
    """
    Print all paths for debugging.
    Useful for users wondering where their config/data is stored.
    """
    config = config or Config()
    print(f"Config:  {get_xdg_config_home()}")
    print(f"Data:    {get_xdg_data_home()}")
    print()
    print(f"Config file:  {Config.config_file_path()}")
    print(f"Model:        {config.model_path()}")
    print(f"Database:     {config.database_path()}")
