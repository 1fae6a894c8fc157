"""
Leaf Encoder
Turns an application record into its canonical bytes and leaf hash.

Canonical Leaf Rules (Hard Contracts):
1. Encoding: Solidity ``abi.encode(field_types, record)``. Static fields
   take one 32-byte word each; dynamic fields (bytes, string, T[]) are
   offset + length-prefixed, so two distinct records never share bytes.
2. Leaf hash: H(H(encoded)). Internal nodes hash exactly 64 bytes, while a
   leaf commits to the hash of the encoding, so a leaf can never be passed
   off as an internal node preimage (and vice versa).
3. bytesN values must be exactly N bytes long; nothing is padded implicitly.

An on-chain verifier computing
``keccak256(bytes.concat(keccak256(abi.encode(...))))`` reproduces the
same leaf hash.
"""
from __future__ import annotations

import re
from typing import Any, Sequence

from eth_abi import encode as abi_encode
from eth_abi.exceptions import ABITypeError, EncodingError as AbiEncodingError, ParseError
from eth_utils import (
    is_checksum_address,
    is_checksum_formatted_address,
    is_hex_address,
    to_checksum_address,
)

from merkle_core.crypto.hashing import DEFAULT_HASH, from_hex, get_hash_function
from merkle_core.schemas.errors import EncodingError

_ARRAY_SUFFIX = re.compile(r"^(?P<inner>.+)\[(?P<size>\d*)\]$")
_INT_TYPE = re.compile(r"^(?P<sign>u?)int(?P<bits>\d*)$")
_FIXED_BYTES_TYPE = re.compile(r"^bytes(?P<size>\d+)$")

_ALIASES = {"uint": "uint256", "int": "int256", "byte": "bytes1"}


def canonical_type(type_tag: str) -> str:
    """
    Validate a type tag and return its canonical spelling.

    ``uint`` and ``int`` become ``uint256`` / ``int256``; array suffixes are
    kept. Raises EncodingError for anything unsupported.
    """
    if not isinstance(type_tag, str) or not type_tag:
        raise EncodingError(f"Type tag must be a non-empty string, got {type_tag!r}")

    tag = type_tag.strip()
    match = _ARRAY_SUFFIX.match(tag)
    if match:
        size = match.group("size")
        if size and int(size) == 0:
            raise EncodingError(f"Fixed array size must be positive: {type_tag!r}")
        return f"{canonical_type(match.group('inner'))}[{size}]"

    tag = _ALIASES.get(tag, tag)

    if tag in ("address", "bool", "bytes", "string"):
        return tag

    match = _INT_TYPE.match(tag)
    if match:
        bits = int(match.group("bits"))
        if bits % 8 != 0 or not 8 <= bits <= 256:
            raise EncodingError(f"Invalid integer width in type {type_tag!r}")
        return f"{match.group('sign')}int{bits}"

    match = _FIXED_BYTES_TYPE.match(tag)
    if match:
        size = int(match.group("size"))
        if not 1 <= size <= 32:
            raise EncodingError(f"Invalid fixed bytes size in type {type_tag!r}")
        return f"bytes{size}"

    raise EncodingError(f"Unsupported type tag: {type_tag!r}")


def parse_leaf_encoding(field_types: Sequence[str]) -> tuple[str, ...]:
    """Canonicalize a whole leaf encoding. An empty encoding is rejected."""
    if isinstance(field_types, str) or not field_types:
        raise EncodingError("Leaf encoding must be a non-empty list of type tags")
    return tuple(canonical_type(t) for t in field_types)


def _to_int(value: Any, type_tag: str) -> int:
    if isinstance(value, bool):
        raise EncodingError(f"Boolean is not a valid {type_tag} value", field_type=type_tag)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            if text.lower().startswith(("0x", "-0x")):
                return int(text, 16)
            return int(text, 10)
        except ValueError:
            raise EncodingError(
                f"Cannot parse {value!r} as {type_tag}", field_type=type_tag
            ) from None
    raise EncodingError(
        f"Expected an integer for {type_tag}, got {type(value).__name__}",
        field_type=type_tag,
    )


def _to_bytes(value: Any, type_tag: str) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        try:
            return from_hex(value)
        except ValueError as e:
            raise EncodingError(str(e), field_type=type_tag) from e
    raise EncodingError(
        f"Expected bytes or 0x-hex for {type_tag}, got {type(value).__name__}",
        field_type=type_tag,
    )


def _to_address(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        if len(value) != 20:
            raise EncodingError(
                f"Address must be 20 bytes, got {len(value)}", field_type="address"
            )
        return to_checksum_address(bytes(value))
    if isinstance(value, str) and value.startswith("0x") and is_hex_address(value):
        # Mixed case means EIP-55; it must be the right checksum.
        if is_checksum_formatted_address(value) and not is_checksum_address(value):
            raise EncodingError(
                f"Address checksum mismatch: {value!r}", field_type="address"
            )
        return to_checksum_address(value)
    raise EncodingError(f"Invalid address: {value!r}", field_type="address")


def normalize_value(value: Any, type_tag: str) -> Any:
    """
    Convert a caller-supplied field into the Python value eth-abi expects.

    ``type_tag`` must already be canonical (see canonical_type).
    """
    match = _ARRAY_SUFFIX.match(type_tag)
    if match:
        if not isinstance(value, (list, tuple)):
            raise EncodingError(
                f"Expected a list for {type_tag}, got {type(value).__name__}",
                field_type=type_tag,
            )
        size = match.group("size")
        if size and len(value) != int(size):
            raise EncodingError(
                f"Expected {size} elements for {type_tag}, got {len(value)}",
                field_type=type_tag,
            )
        inner = match.group("inner")
        return [normalize_value(item, inner) for item in value]

    if type_tag == "address":
        return _to_address(value)

    if type_tag == "bool":
        if not isinstance(value, bool):
            raise EncodingError(
                f"Expected a boolean, got {type(value).__name__}", field_type=type_tag
            )
        return value

    if type_tag == "string":
        if not isinstance(value, str):
            raise EncodingError(
                f"Expected a string, got {type(value).__name__}", field_type=type_tag
            )
        return value

    if type_tag == "bytes":
        return _to_bytes(value, type_tag)

    match = _FIXED_BYTES_TYPE.match(type_tag)
    if match:
        data = _to_bytes(value, type_tag)
        size = int(match.group("size"))
        if len(data) != size:
            raise EncodingError(
                f"{type_tag} requires exactly {size} bytes, got {len(data)}",
                field_type=type_tag,
            )
        return data

    if _INT_TYPE.match(type_tag):
        return _to_int(value, type_tag)

    raise EncodingError(f"Unsupported type tag: {type_tag!r}")


def _check_shape(record: Sequence[Any], field_types: Sequence[str]) -> None:
    if isinstance(record, (str, bytes)) or not isinstance(record, (list, tuple)):
        raise EncodingError(
            f"Record must be a list or tuple, got {type(record).__name__}"
        )
    if len(record) != len(field_types):
        raise EncodingError(
            f"Record has {len(record)} fields but the leaf encoding declares "
            f"{len(field_types)}",
            details={"record_length": len(record), "encoding_length": len(field_types)},
        )


def normalize_record(record: Sequence[Any], field_types: Sequence[str]) -> list[Any]:
    """Normalize every field of a record against the leaf encoding."""
    types = parse_leaf_encoding(field_types)
    _check_shape(record, types)
    normalized = []
    for i, (value, type_tag) in enumerate(zip(record, types)):
        try:
            normalized.append(normalize_value(value, type_tag))
        except EncodingError as e:
            e.details.setdefault("field_index", i)
            raise
    return normalized


def encode_leaf(record: Sequence[Any], field_types: Sequence[str]) -> bytes:
    """
    ABI-encode a record.

    Args:
        record: Ordered field values
        field_types: One type tag per field, same order

    Returns:
        Canonical encoded bytes

    Raises:
        EncodingError: Shape mismatch, unsupported tag, or unrepresentable value

    Example:
        >>> len(encode_leaf(["0x" + "00" * 19 + "01", 0, 2],
        ...                 ["address", "uint256", "uint256"]))
        96
    """
    types = parse_leaf_encoding(field_types)
    values = normalize_record(record, types)
    try:
        return abi_encode(list(types), values)
    except (AbiEncodingError, ABITypeError, ParseError, OverflowError, TypeError) as e:
        raise EncodingError(
            f"Cannot ABI-encode record: {e}",
            details={"leaf_encoding": list(types)},
        ) from e


def hash_leaf(encoded: bytes, hash_name: str = DEFAULT_HASH) -> bytes:
    """Compute the leaf hash H(H(encoded))."""
    hash_fn = get_hash_function(hash_name)
    return hash_fn(hash_fn(encoded))


def leaf_hash(
    record: Sequence[Any],
    field_types: Sequence[str],
    hash_name: str = DEFAULT_HASH,
) -> bytes:
    """Encode a record and return its leaf hash."""
    return hash_leaf(encode_leaf(record, field_types), hash_name)


def _json_safe(value: Any, type_tag: str) -> Any:
    match = _ARRAY_SUFFIX.match(type_tag)
    if match:
        return [_json_safe(item, match.group("inner")) for item in value]
    if isinstance(value, bool) or isinstance(value, str):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, bytes):
        return "0x" + value.hex()
    return value


def to_json_value(record: Sequence[Any], field_types: Sequence[str]) -> list[Any]:
    """
    Convert a record into the form persisted in dumps.

    Integers become decimal strings (safe for 53-bit JSON consumers), bytes
    become 0x hex and addresses are checksummed. The leaf hash of the
    returned record equals the leaf hash of the input.
    """
    types = parse_leaf_encoding(field_types)
    normalized = normalize_record(record, types)
    return [_json_safe(value, type_tag) for value, type_tag in zip(normalized, types)]


__all__ = [
    "canonical_type",
    "parse_leaf_encoding",
    "normalize_value",
    "normalize_record",
    "encode_leaf",
    "hash_leaf",
    "leaf_hash",
    "to_json_value",
]
