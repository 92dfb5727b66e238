"""
Test fixtures package for layertree tests.

- trees.py: element factories, golden roots and a reference root function
"""

from .trees import (
    GOLDEN_ROOTS_SHA3,
    LEAF_1_SHA3,
    ROOT_1_2_SHA3,
    make_elements,
    sha3,
    reference_root,
)

__all__ = [
    "GOLDEN_ROOTS_SHA3",
    "LEAF_1_SHA3",
    "ROOT_1_2_SHA3",
    "make_elements",
    "sha3",
    "reference_root",
]
