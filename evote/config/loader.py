"""
evote TOML Configuration Loader

Loads evote.toml with environment variable overrides
(dataclass + from_dict + from_file, one dataclass per [section]).

Environment variable mapping:
    [election] administrator          → EVOTE_ADMINISTRATOR
    [election] reset_cooldown_seconds → EVOTE_RESET_COOLDOWN
    [election] tie_break              → EVOTE_TIE_BREAK
    [logging]  level                  → EVOTE_LOG_LEVEL
    [logging]  file                   → EVOTE_LOG_FILE

Example:
    [election]
    administrator = "admin"
    reset_cooldown_seconds = 60
    tie_break = "timestamp"

    [logging]
    level = "INFO"
    console = true
    file = ""
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

try:
    import tomllib as tomli  # Python 3.11+
except ImportError:
    import tomli  # type: ignore[no-redef]

from ..constants import (
    ELECTION_RESET_COOLDOWN_SECONDS,
    ELECTION_TIE_BREAK_SOURCES,
    EVOTE_ADMINISTRATOR,
    EVOTE_TIE_BREAK,
    LOG_LEVEL,
)
from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ElectionSectionConfig:
    """[election] section."""
    administrator: str = str(EVOTE_ADMINISTRATOR)
    reset_cooldown_seconds: float = ELECTION_RESET_COOLDOWN_SECONDS
    tie_break: str = str(EVOTE_TIE_BREAK)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ElectionSectionConfig":
        return cls(
            administrator=data.get("administrator", str(EVOTE_ADMINISTRATOR)),
            reset_cooldown_seconds=data.get(
                "reset_cooldown_seconds", ELECTION_RESET_COOLDOWN_SECONDS
            ),
            tie_break=data.get("tie_break", str(EVOTE_TIE_BREAK)),
        )

    def apply_env(self) -> None:
        """Override from environment variables."""
        if v := os.environ.get("EVOTE_ADMINISTRATOR"):
            self.administrator = v
        if v := os.environ.get("EVOTE_RESET_COOLDOWN"):
            try:
                self.reset_cooldown_seconds = float(v)
            except ValueError:
                raise ConfigurationError(
                    f"EVOTE_RESET_COOLDOWN must be a number, got {v!r}"
                ) from None
        if v := os.environ.get("EVOTE_TIE_BREAK"):
            self.tie_break = v

    def validate(self) -> None:
        if not self.administrator:
            raise ConfigurationError("election.administrator is required")
        if not isinstance(self.reset_cooldown_seconds, (int, float)) or isinstance(
            self.reset_cooldown_seconds, bool
        ):
            raise ConfigurationError("election.reset_cooldown_seconds must be a number")
        if self.reset_cooldown_seconds < 0:
            raise ConfigurationError("election.reset_cooldown_seconds must be >= 0")
        if self.tie_break not in ELECTION_TIE_BREAK_SOURCES:
            raise ConfigurationError(
                f"Invalid election.tie_break: {self.tie_break!r}. "
                f"Allowed: {list(ELECTION_TIE_BREAK_SOURCES)}"
            )


@dataclass
class LoggingSectionConfig:
    """[logging] section."""
    level: str = str(LOG_LEVEL)
    console: bool = True
    file: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LoggingSectionConfig":
        return cls(
            level=data.get("level", str(LOG_LEVEL)),
            console=data.get("console", True),
            file=data.get("file", ""),
        )

    def apply_env(self) -> None:
        if v := os.environ.get("EVOTE_LOG_LEVEL"):
            self.level = v
        if v := os.environ.get("EVOTE_LOG_FILE"):
            self.file = v

    def validate(self) -> None:
        if str(self.level).upper() not in _LOG_LEVELS:
            raise ConfigurationError(f"Invalid logging.level: {self.level}")


@dataclass
class ElectionConfig:
    """Complete evote configuration."""
    election: ElectionSectionConfig = field(default_factory=ElectionSectionConfig)
    logging: LoggingSectionConfig = field(default_factory=LoggingSectionConfig)

    # --- factories --------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ElectionConfig":
        """Create ElectionConfig from a parsed TOML dict."""
        return cls(
            election=ElectionSectionConfig.from_dict(data.get("election", {})),
            logging=LoggingSectionConfig.from_dict(data.get("logging", {})),
        )

    @classmethod
    def from_file(cls, config_path: str) -> "ElectionConfig":
        """
        Load configuration from a TOML file.

        A missing file yields defaults (with env overrides applied).
        """
        path = Path(config_path)
        if not path.exists():
            logger.warning("Config file not found: %s, using defaults", config_path)
            cfg = cls()
            cfg.apply_env()
            return cfg

        with open(path, "rb") as f:
            try:
                raw = tomli.load(f)
            except tomli.TOMLDecodeError as e:
                raise ConfigurationError(f"Cannot parse {config_path}: {e}") from e

        cfg = cls.from_dict(raw)
        cfg.apply_env()
        return cfg

    # --- env overrides ----------------------------------------------------

    def apply_env(self) -> None:
        """Apply environment variable overrides to all sections."""
        self.election.apply_env()
        self.logging.apply_env()

    # --- validation -------------------------------------------------------

    def validate(self) -> bool:
        """
        Validate all configuration sections.

        Raises:
            ConfigurationError: on invalid config
        """
        self.election.validate()
        self.logging.validate()
        return True

    def apply_logging(self) -> None:
        """Reconfigure the logging system from the [logging] section."""
        from ..logger import configure_logging

        self.logging.validate()
        configure_logging(
            log_level=str(self.logging.level).upper(),
            log_file=Path(self.logging.file) if self.logging.file else None,
            console_output=self.logging.console,
            file_output=bool(self.logging.file),
        )

    # --- serialisation ----------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dict (for diagnostics, NOT for re-creating TOML)."""
        return {
            "election": {
                "administrator": self.election.administrator,
                "reset_cooldown_seconds": self.election.reset_cooldown_seconds,
                "tie_break": self.election.tie_break,
            },
            "logging": {
                "level": self.logging.level,
                "console": self.logging.console,
                "file": self.logging.file,
            },
        }


# -----------------------------------------------------------------------
# Convenience function
# -----------------------------------------------------------------------

def load_config(path: Optional[str] = None) -> ElectionConfig:
    """
    Load election configuration.

    Resolution order:
        1. Explicit *path* argument
        2. EVOTE_CONFIG env var
        3. ./evote.toml in current directory
        4. Defaults (with env overrides)
    """
    if path is None:
        path = os.environ.get("EVOTE_CONFIG", "evote.toml")

    return ElectionConfig.from_file(path)
