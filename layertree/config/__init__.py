"""
Runtime Configuration Module

Provides configuration loading and management for layertree.
"""

from .runtime import (
    TreeConfig,
    DUPLICATE_POLICIES,
    get_default_config,
    set_default_config,
    setup_logging,
)

__all__ = [
    "TreeConfig",
    "DUPLICATE_POLICIES",
    "get_default_config",
    "set_default_config",
    "setup_logging",
]
