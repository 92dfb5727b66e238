"""
Runtime Configuration

Central configuration for tree construction, leaf lookup and diagnostics.
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from layertree.crypto.hashing import DEFAULT_ALGORITHM, ensure_algorithm
from layertree.schemas.errors import ConfigurationException, UnsupportedAlgorithmException

load_dotenv()


DUPLICATE_POLICIES: tuple[str, ...] = ("first", "reject")
LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR")

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


def _parse_bool(value: Any, key: str) -> bool:
    """Accept a bool or one of the usual true/false strings."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_VALUES:
            return True
        if text in _FALSE_VALUES:
            return False
    raise ConfigurationException(
        f"{key} must be a boolean, got {value!r}",
        key=key,
    )


@dataclass
class TreeConfig:
    """
    Complete runtime configuration for layertree.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction

    Attributes:
        hash_algorithm: "sha3_256" (default) or "sha256"
        duplicate_policy: "first" returns the first matching leaf when an
            element occurs more than once; "reject" raises instead
        check_invariants: Validate the full layer structure after every
            build and insertion (slow, meant for debugging)
        log_level: Level used by setup_logging()
    """
    hash_algorithm: str = DEFAULT_ALGORITHM
    duplicate_policy: str = "first"
    check_invariants: bool = False
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        for key in ("hash_algorithm", "duplicate_policy", "log_level"):
            value = getattr(self, key)
            if not isinstance(value, str):
                raise ConfigurationException(
                    f"{key} must be a string, got {type(value).__name__}",
                    key=key,
                )

        try:
            self.hash_algorithm = ensure_algorithm(self.hash_algorithm)
        except UnsupportedAlgorithmException as e:
            raise ConfigurationException(
                f"Invalid hash_algorithm: {self.hash_algorithm!r}",
                key="hash_algorithm",
            ) from e

        self.duplicate_policy = self.duplicate_policy.lower()
        if self.duplicate_policy not in DUPLICATE_POLICIES:
            raise ConfigurationException(
                f"duplicate_policy must be one of {DUPLICATE_POLICIES}, "
                f"got {self.duplicate_policy!r}",
                key="duplicate_policy",
            )

        self.log_level = self.log_level.upper()
        if self.log_level not in LOG_LEVELS:
            raise ConfigurationException(
                f"log_level must be one of {LOG_LEVELS}, got {self.log_level!r}",
                key="log_level",
            )

        self.check_invariants = _parse_bool(self.check_invariants, "check_invariants")

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - LAYERTREE_HASH_ALGORITHM: sha3_256 or sha256
        - LAYERTREE_DUPLICATE_POLICY: first or reject
        - LAYERTREE_CHECK_INVARIANTS: Enable invariant checks (true/false)
        - LAYERTREE_LOG_LEVEL: DEBUG, INFO, WARNING or ERROR
        """
        overrides: dict[str, Any] = {}

        if os.getenv("LAYERTREE_HASH_ALGORITHM"):
            overrides["hash_algorithm"] = os.getenv("LAYERTREE_HASH_ALGORITHM")
        if os.getenv("LAYERTREE_DUPLICATE_POLICY"):
            overrides["duplicate_policy"] = os.getenv("LAYERTREE_DUPLICATE_POLICY")
        if os.getenv("LAYERTREE_CHECK_INVARIANTS"):
            overrides["check_invariants"] = os.getenv("LAYERTREE_CHECK_INVARIANTS")
        if os.getenv("LAYERTREE_LOG_LEVEL"):
            overrides["log_level"] = os.getenv("LAYERTREE_LOG_LEVEL")

        return overrides

    @classmethod
    def from_env(cls) -> "TreeConfig":
        """Load configuration purely from environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "TreeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TreeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        unknown = set(data) - {"hash_algorithm", "duplicate_policy", "check_invariants", "log_level"}
        if unknown:
            raise ConfigurationException(
                f"Unknown configuration keys: {sorted(unknown)}",
                details={"unknown": sorted(unknown)},
            )
        return cls(**data)

    def with_env_overrides(self) -> "TreeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        data = self.to_dict()
        data.update(overrides)
        return TreeConfig.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "hash_algorithm": self.hash_algorithm,
            "duplicate_policy": self.duplicate_policy,
            "check_invariants": self.check_invariants,
            "log_level": self.log_level,
        }


def setup_logging(level: str | None = None, log_file: str | None = None) -> None:
    """Configure logging for applications embedding layertree."""
    if level is None:
        level = get_default_config().log_level
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


# Global default configuration
_default_config: Optional[TreeConfig] = None


def get_default_config() -> TreeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = TreeConfig.from_env()
    return _default_config


def set_default_config(config: TreeConfig | None) -> None:
    """Set the default runtime configuration (None resets to env defaults)."""
    global _default_config
    _default_config = config
