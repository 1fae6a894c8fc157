"""
Error Taxonomy Unit Tests
Tests for merkle_core/schemas/errors.py

Tests:
- Every exception carries its stable code
- Exceptions stay catchable as the matching builtin
- MerkleException <-> MerkleError conversion
"""
import pytest
from pydantic import ValidationError

from merkle_core.schemas.errors import (
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


class TestErrorCodes:
    """Each exception maps to one code."""

    @pytest.mark.parametrize(
        "exc,code,builtin",
        [
            (EncodingError("bad"), ErrorCodes.ENCODING_ERROR, ValueError),
            (EmptyTreeError(), ErrorCodes.EMPTY_TREE, ValueError),
            (IndexOutOfRangeError("bad"), ErrorCodes.INDEX_OUT_OF_RANGE, IndexError),
            (InvalidArgumentError("bad"), ErrorCodes.INVALID_ARGUMENT, ValueError),
            (CorruptedTreeError("bad"), ErrorCodes.CORRUPTED_TREE, ValueError),
            (MalformedProofError("bad"), ErrorCodes.MALFORMED_PROOF, ValueError),
            (CanonicalizationException("bad"), ErrorCodes.CANONICALIZATION_ERROR, MerkleException),
        ],
    )
    def test_code_and_base(self, exc, code, builtin):
        assert exc.code == code
        assert isinstance(exc, MerkleException)
        assert isinstance(exc, builtin)

    def test_default_empty_tree_message(self):
        assert str(EmptyTreeError()) == "Cannot build a Merkle tree with no leaves"


class TestExceptionDetails:
    """Structured details on exceptions."""

    def test_encoding_error_details(self):
        exc = EncodingError("bad value", field_index=2, field_type="uint256")
        assert exc.details == {"field_index": 2, "field_type": "uint256"}

    def test_index_error_details(self):
        exc = IndexOutOfRangeError("out of range", index=9, leaf_count=5)
        assert exc.details == {"index": 9, "leaf_count": 5}

    def test_details_default_to_empty(self):
        assert CorruptedTreeError("broken").details == {}

    def test_repr(self):
        exc = MalformedProofError("short hash")
        assert repr(exc) == "MalformedProofError(code='MALFORMED_PROOF', message='short hash')"


class TestErrorModel:
    """MerkleError pydantic model."""

    def test_exception_to_model(self):
        exc = CorruptedTreeError("root mismatch", details={"slot": 10})
        model = exc.to_error_model()

        assert model.code == ErrorCodes.CORRUPTED_TREE
        assert model.message == "root mismatch"
        assert model.details == {"slot": 10}

    def test_model_to_exception(self):
        model = MerkleError(code=ErrorCodes.EMPTY_TREE, message="empty")
        exc = model.to_exception()

        assert isinstance(exc, MerkleException)
        assert exc.code == ErrorCodes.EMPTY_TREE
        assert exc.message == "empty"

    def test_model_forbids_extra_fields(self):
        with pytest.raises(ValidationError):
            MerkleError(code="X", message="y", unexpected=True)
