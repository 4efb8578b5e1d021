"""Configuration objects for strict XML parsing.

Configuration is an immutable dataclass validated on construction, with JSON
round-tripping for configuration files and keyword overrides for callers that
need a variant of an existing configuration.
"""

import codecs
import difflib
import json
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

DEFAULT_SOURCE_NAME = "<INPUT>"
DEFAULT_MAX_DEPTH = 200

VALID_LOGGING_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class ParserConfig:
    """Configuration for the grammar engine and the API built around it.

    Thread-safe due to frozen dataclass implementation, so one instance can be
    shared by any number of parsers.
    """

    # Name reported in syntax errors when the caller does not supply one
    source_name: str = DEFAULT_SOURCE_NAME

    # Deepest element nesting accepted before parsing is aborted
    max_depth: int = DEFAULT_MAX_DEPTH

    # Codec used when reading documents from files
    encoding: str = "utf-8"

    # Logging and diagnostics
    logging_level: str = "WARNING"
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not isinstance(self.source_name, str) or not self.source_name:
            raise ConfigValidationError(
                "source_name must be a non-empty string",
                field_name="source_name",
            )
        if not isinstance(self.max_depth, int) or self.max_depth <= 0:
            raise ConfigValidationError(
                "max_depth must be > 0",
                field_name="max_depth",
            )
        try:
            codecs.lookup(self.encoding)
        except LookupError as e:
            raise ConfigValidationError(
                f"Unknown encoding: {self.encoding}",
                field_name="encoding",
                suggestions=["utf-8", "latin-1", "utf-16"],
            ) from e
        if self.logging_level not in VALID_LOGGING_LEVELS:
            raise ConfigValidationError(
                f"logging_level must be one of {VALID_LOGGING_LEVELS}",
                field_name="logging_level",
                suggestions=difflib.get_close_matches(
                    str(self.logging_level).upper(), VALID_LOGGING_LEVELS
                ),
            )

    @classmethod
    def field_names(cls) -> List[str]:
        """Names of all configuration fields."""
        return [f.name for f in fields(cls)]

    @classmethod
    def _check_field_names(cls, names: List[str]) -> None:
        known = cls.field_names()
        for name in names:
            if name not in known:
                raise ConfigValidationError(
                    f"Unknown configuration field: {name}",
                    field_name=name,
                    suggestions=difflib.get_close_matches(name, known),
                )

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Keyword arguments for configuration fields to override

        Returns:
            New ParserConfig instance with overrides applied

        Example:
            >>> config = ParserConfig()
            >>> config.override(source_name="feed.xml").source_name
            'feed.xml'
        """
        self._check_field_names(list(kwargs))
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        return {name: getattr(self, name) for name in self.field_names()}

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from dictionary.

        Args:
            data: Mapping of field names to values; unknown keys are rejected

        Returns:
            ParserConfig instance created from dictionary
        """
        if not isinstance(data, dict):
            raise ConfigValidationError(
                f"Configuration data must be an object, not {type(data).__name__}"
            )
        cls._check_field_names(list(data))
        return cls(**data)

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid configuration JSON: {e}") from e
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ParserConfig":
        """Load configuration from a JSON file."""
        path_obj = Path(path)
        try:
            content = path_obj.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Could not read configuration file {path_obj}: {e}") from e
        return cls.from_json(content)

    # Preset factory methods
    @classmethod
    def default(cls) -> "ParserConfig":
        """Create the default configuration."""
        return cls()

    @classmethod
    def debugging(cls) -> "ParserConfig":
        """Create configuration that logs every parse at debug level."""
        return cls(logging_level="DEBUG")
