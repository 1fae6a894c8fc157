"""
Schemas & Canonicalization
File: errors.py

Purpose: Standard error taxonomy for tree construction, proof generation,
verification and (de)serialization. Defines both a Pydantic model for
structured error reporting and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Leaf encoding
    ENCODING_ERROR = "ENCODING_ERROR"
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"

    # Tree construction & lookup
    EMPTY_TREE = "EMPTY_TREE"
    INDEX_OUT_OF_RANGE = "INDEX_OUT_OF_RANGE"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"

    # Persistence
    CORRUPTED_TREE = "CORRUPTED_TREE"

    # Verification
    MALFORMED_PROOF = "MALFORMED_PROOF"


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class MerkleError(BaseModel):
    """
    Error model for structured error reporting (CLI JSON output, logs).

    Carries the same information as a raised MerkleException without
    requiring the caller to handle an exception.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.ENCODING_ERROR],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )

    def to_exception(self) -> "MerkleException":
        """Convert this error model to a raisable exception."""
        return MerkleException(
            code=self.code,
            message=self.message,
            details=self.details,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class MerkleException(Exception):
    """
    Base exception for all merkle-allowlist errors.

    Carries structured error information and can be converted to a
    MerkleError model.
    """

    def __init__(
        self,
        message: str,
        code: str = "MERKLE_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_error_model(self) -> MerkleError:
        """Convert this exception to a MerkleError model."""
        return MerkleError(
            code=self.code,
            message=self.message,
            details=self.details,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class CanonicalizationException(MerkleException):
    """Raised when canonical JSON serialization fails."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CANONICALIZATION_ERROR,
            details=details,
        )


class EncodingError(MerkleException, ValueError):
    """Raised when a record does not match its leaf encoding."""

    def __init__(
        self,
        message: str,
        field_index: int | None = None,
        field_type: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if field_index is not None:
            full_details["field_index"] = field_index
        if field_type:
            full_details["field_type"] = field_type
        super().__init__(
            message=message,
            code=ErrorCodes.ENCODING_ERROR,
            details=full_details,
        )


class EmptyTreeError(MerkleException, ValueError):
    """Raised when a tree is built from no leaves."""

    def __init__(self, message: str = "Cannot build a Merkle tree with no leaves") -> None:
        super().__init__(message=message, code=ErrorCodes.EMPTY_TREE)


class IndexOutOfRangeError(MerkleException, IndexError):
    """Raised when a proof or lookup targets a leaf that does not exist."""

    def __init__(
        self,
        message: str,
        index: int | None = None,
        leaf_count: int | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if index is not None:
            details["index"] = index
        if leaf_count is not None:
            details["leaf_count"] = leaf_count
        super().__init__(
            message=message,
            code=ErrorCodes.INDEX_OUT_OF_RANGE,
            details=details,
        )


class InvalidArgumentError(MerkleException, ValueError):
    """Raised for arguments that are the right type but unusable."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_ARGUMENT,
            details=details,
        )


class CorruptedTreeError(MerkleException, ValueError):
    """Raised when a loaded dump fails structural or root validation."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CORRUPTED_TREE,
            details=details,
        )


class MalformedProofError(MerkleException, ValueError):
    """
    Raised when proof input is structurally inconsistent.

    Distinct from a proof that simply does not match the root, which is a
    normal ``False`` verification result.
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.MALFORMED_PROOF,
            details=details,
        )
