"""
Schemas & Canonicalization

Error taxonomy, dump format markers, canonical JSON and the persisted
tree / proof models.
"""

from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonical_equals,
    canonicalize_value,
    dumps_canonical,
    loads_canonical,
)
from .dump import MultiproofOutput, ProofOutput, TreeDump, ValueEntry
from .errors import (
    CanonicalizationException,
    CorruptedTreeError,
    EmptyTreeError,
    EncodingError,
    ErrorCodes,
    IndexOutOfRangeError,
    InvalidArgumentError,
    MalformedProofError,
    MerkleError,
    MerkleException,
)
from .versioning import (
    FORMAT_VERSION,
    SUPPORTED_FORMAT_VERSIONS,
    is_supported_format,
)

__all__ = [
    # Canonical JSON
    "CANONICAL_JSON_SEPARATORS",
    "canonical_equals",
    "canonicalize_value",
    "dumps_canonical",
    "loads_canonical",
    # Persisted models
    "TreeDump",
    "ValueEntry",
    "ProofOutput",
    "MultiproofOutput",
    # Errors
    "ErrorCodes",
    "MerkleError",
    "MerkleException",
    "CanonicalizationException",
    "EncodingError",
    "EmptyTreeError",
    "IndexOutOfRangeError",
    "InvalidArgumentError",
    "CorruptedTreeError",
    "MalformedProofError",
    # Versioning
    "FORMAT_VERSION",
    "SUPPORTED_FORMAT_VERSIONS",
    "is_supported_format",
]
