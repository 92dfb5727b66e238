"""
Error taxonomy for layertree.

Defines both a Pydantic model for structured error reporting and Python
exceptions for control flow.

Not every unhappy path is an error here:
- proof generation for an absent element returns None
- verification against an empty tree returns False
Only internal defects, ambiguous lookups under the "reject" duplicate
policy, and bad configuration raise.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Tree structure
    TREE_INVARIANT_VIOLATION = "TREE_INVARIANT_VIOLATION"

    # Leaf lookup
    DUPLICATE_LEAF = "DUPLICATE_LEAF"

    # Hashing
    UNSUPPORTED_ALGORITHM = "UNSUPPORTED_ALGORITHM"

    # Configuration
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class LayerTreeError(BaseModel):
    """
    Structured error description.

    Lets callers that report failures (logs, API responses) serialize an
    error without carrying the exception object around.
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.TREE_INVARIANT_VIOLATION],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )

    def to_exception(self) -> "LayerTreeException":
        """Convert this error model to a raisable exception."""
        return LayerTreeException(
            message=self.message,
            code=self.code,
            details=self.details,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class LayerTreeException(Exception):
    """Base exception for all layertree errors."""

    def __init__(
        self,
        message: str,
        code: str = "LAYERTREE_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_error_model(self) -> LayerTreeError:
        """Convert this exception to a LayerTreeError model."""
        return LayerTreeError(
            code=self.code,
            message=self.message,
            details=self.details,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class TreeInvariantException(LayerTreeException):
    """
    Raised when the layer structure is inconsistent.

    This always indicates a defect in the builder or updater, never a
    caller mistake.
    """

    def __init__(
        self,
        message: str,
        layer_index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if layer_index is not None:
            full_details["layer_index"] = layer_index
        super().__init__(
            message=message,
            code=ErrorCodes.TREE_INVARIANT_VIOLATION,
            details=full_details,
        )


class DuplicateLeafException(LayerTreeException):
    """Raised when a leaf lookup is ambiguous and the policy forbids picking one."""

    def __init__(
        self,
        message: str,
        indices: list[int] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if indices:
            full_details["indices"] = list(indices)
        super().__init__(
            message=message,
            code=ErrorCodes.DUPLICATE_LEAF,
            details=full_details,
        )


class UnsupportedAlgorithmException(LayerTreeException):
    """Raised for a hash algorithm name outside the supported set."""

    def __init__(
        self,
        algorithm: str,
        supported: tuple[str, ...] = (),
    ) -> None:
        super().__init__(
            message=f"Unsupported hash algorithm: {algorithm!r}",
            code=ErrorCodes.UNSUPPORTED_ALGORITHM,
            details={"algorithm": algorithm, "supported": list(supported)},
        )


class ConfigurationException(LayerTreeException):
    """Raised when configuration values are invalid."""

    def __init__(
        self,
        message: str,
        key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if key:
            full_details["key"] = key
        super().__init__(
            message=message,
            code=ErrorCodes.CONFIGURATION_ERROR,
            details=full_details,
        )
