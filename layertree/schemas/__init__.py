"""
Shared schemas for layertree.

Currently holds the error taxonomy used by every other subpackage.
"""
from .errors import (
    ErrorCodes,
    LayerTreeError,
    LayerTreeException,
    TreeInvariantException,
    DuplicateLeafException,
    UnsupportedAlgorithmException,
    ConfigurationException,
)

__all__ = [
    "ErrorCodes",
    "LayerTreeError",
    "LayerTreeException",
    "TreeInvariantException",
    "DuplicateLeafException",
    "UnsupportedAlgorithmException",
    "ConfigurationException",
]
