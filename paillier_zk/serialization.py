"""
Serialization
=============

Canonical encoding of statements, proofs and their parts.

Every protocol type is a dataclass; the codec walks its fields by type
annotation and produces a dict with named fields:

- int                 → base64 of the minimal big-endian magnitude, with a
                        leading '-' for negative values ('' encodes zero)
- CurvePoint          → base64 of the compressed SEC1 encoding, the identity
                        is '__IDENTITY__'
- PaillierPublicKey   → the encoded modulus N
- bytes               → base64
- str                 → unchanged
- List[...]           → list of encoded items
- nested dataclass    → nested dict

``canonical_bytes`` (sorted keys, no whitespace) is what the Fiat-Shamir
transcript hashes, so two independent implementations agreeing on this
encoding agree on every challenge. ``dumps``/``loads`` are the optional wire
adapter on top of it.
"""

import base64
import binascii
import dataclasses
import json
import typing
from typing import Any, List, NewType

from . import groups
from .config import SecurityParams, resolve
from .errors import InvalidStatement, MalformedProof
from .paillier import PublicKey, public_key

# Annotation marker for elliptic-curve points inside protocol dataclasses
CurvePoint = NewType('CurvePoint', object)

IDENTITY = "__IDENTITY__"


def serialize_int(value: int) -> str:
    """Serialize an integer to a sign-prefixed base64 string."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected int, got {type(value).__name__}")
    magnitude = abs(value)
    raw = magnitude.to_bytes((magnitude.bit_length() + 7) // 8, 'big')
    encoded = base64.b64encode(raw).decode('ascii')
    return '-' + encoded if value < 0 else encoded


def deserialize_int(data: str, error=MalformedProof) -> int:
    """Deserialize an integer, rejecting non-canonical encodings."""
    if not isinstance(data, str):
        raise error(f"integer field must be a string, got {type(data).__name__}")
    negative = data.startswith('-')
    raw = deserialize_bytes(data[1:] if negative else data, error)
    if raw[:1] == b'\x00' or (negative and not raw):
        raise error("non-canonical integer encoding")
    value = int.from_bytes(raw, 'big')
    return -value if negative else value


def serialize_point(point) -> str:
    """Serialize a curve point, special-casing the identity."""
    if groups.is_identity(point):
        return IDENTITY
    return base64.b64encode(groups.point_to_bytes(point)).decode('ascii')


def deserialize_point(data: str, curve, error=MalformedProof):
    if data == IDENTITY:
        return groups.INFINITY
    raw = deserialize_bytes(data, error)
    if not raw:
        raise error("empty point encoding")
    try:
        return groups.point_from_bytes(curve, raw)
    except MalformedProof as e:
        raise error(str(e)) from e


def serialize_bytes(data: bytes) -> str:
    return base64.b64encode(data).decode('ascii')


def deserialize_bytes(data: str, error=MalformedProof) -> bytes:
    if not isinstance(data, str):
        raise error(f"bytes field must be a string, got {type(data).__name__}")
    try:
        return base64.b64decode(data.encode('ascii'), validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise error("invalid base64 data") from e


def _unwrap_optional(hint):
    if typing.get_origin(hint) is typing.Union:
        return next(arg for arg in typing.get_args(hint) if arg is not type(None))
    return hint


def _encode_value(value: Any, hint) -> Any:
    if value is None:
        return None
    hint = _unwrap_optional(hint)
    if hint is CurvePoint:
        return serialize_point(value)
    if hint is PublicKey:
        return serialize_int(value.n)
    if typing.get_origin(hint) in (list, List):
        (item_hint,) = typing.get_args(hint)
        return [_encode_value(item, item_hint) for item in value]
    if dataclasses.is_dataclass(value):
        return to_dict(value)
    if hint is bytes:
        return serialize_bytes(value)
    if hint is str:
        return value
    if hint is int:
        return serialize_int(value)
    raise TypeError(f"no encoding for field type {hint!r}")


def _decode_value(data: Any, hint, curve, error) -> Any:
    if typing.get_origin(hint) is typing.Union:
        # Optional[X]
        if data is None:
            return None
        hint = _unwrap_optional(hint)
    if data is None:
        raise error("missing value for required field")
    if hint is CurvePoint:
        return deserialize_point(data, curve, error)
    if hint is PublicKey:
        n = deserialize_int(data, error)
        try:
            return public_key(n)
        except InvalidStatement as e:
            raise error("invalid Paillier public key") from e
    if typing.get_origin(hint) in (list, List):
        if not isinstance(data, list):
            raise error("expected a list")
        (item_hint,) = typing.get_args(hint)
        return [_decode_value(item, item_hint, curve, error) for item in data]
    if dataclasses.is_dataclass(hint):
        return from_dict(hint, data, curve, error)
    if hint is bytes:
        return deserialize_bytes(data, error)
    if hint is str:
        if not isinstance(data, str):
            raise error("expected a string")
        return data
    if hint is int:
        return deserialize_int(data, error)
    raise TypeError(f"no decoding for field type {hint!r}")


def to_dict(obj) -> dict:
    """
    Encode a protocol dataclass into a dict of named, JSON-safe fields.

    Parameters
    ----------
    obj : dataclass instance
        A Statement, Commitment, Response, Proof or parameter object

    Returns
    -------
    dict
        Field name → encoded value, in declaration order
    """
    hints = typing.get_type_hints(type(obj))
    return {
        f.name: _encode_value(getattr(obj, f.name), hints[f.name])
        for f in dataclasses.fields(obj)
    }


def from_dict(cls, data: dict, curve=None, error=MalformedProof,
              params: SecurityParams = None):
    """
    Decode a dict produced by ``to_dict`` back into ``cls``.

    Parameters
    ----------
    cls : type
        The dataclass to rebuild
    data : dict
        The encoded fields
    curve : ecdsa Curve, optional
        Curve for point fields; defaults to the curve named by ``params``
    error : type, optional
        Exception raised on malformed input (MalformedProof by default,
        InvalidStatement is used for statements)
    params : SecurityParams, optional
        Parameters the decoded object will be verified with; a snapshot of
        the global config when omitted

    Raises
    ------
    MalformedProof
        On missing or extra fields and undecodable values.
    """
    if curve is None:
        curve = groups.setup(resolve(params).curve_name)['curve']
    if not isinstance(data, dict):
        raise error(f"expected an object for {cls.__name__}")
    hints = typing.get_type_hints(cls)
    names = [f.name for f in dataclasses.fields(cls)]
    unknown = set(data) - set(names)
    if unknown:
        raise error(f"unexpected fields for {cls.__name__}: {sorted(unknown)}")
    kwargs = {}
    for name in names:
        if name not in data:
            raise error(f"missing field {name!r} for {cls.__name__}")
        kwargs[name] = _decode_value(data[name], hints[name], curve, error)
    return cls(**kwargs)


def check_shape(obj, cls, lengths: dict = None) -> None:
    """
    Check that ``obj`` is a well-typed instance of the dataclass ``cls``.

    Parameters
    ----------
    obj : object
        The decoded or received proof
    cls : type
        Expected dataclass
    lengths : dict, optional
        Expected length of list fields, by field name (applies at any
        nesting depth)

    Raises
    ------
    MalformedProof
        On a wrong type, a missing point, or a wrong-length vector.
    """
    lengths = lengths or {}
    if not isinstance(obj, cls):
        raise MalformedProof(f"expected {cls.__name__}, got {type(obj).__name__}")
    hints = typing.get_type_hints(cls)
    for f in dataclasses.fields(cls):
        value, hint = getattr(obj, f.name), hints[f.name]
        if dataclasses.is_dataclass(hint):
            check_shape(value, hint, lengths)
        elif typing.get_origin(hint) in (list, List):
            if not isinstance(value, list):
                raise MalformedProof(f"field {f.name!r} must be a list")
            if f.name in lengths and len(value) != lengths[f.name]:
                raise MalformedProof(
                    f"field {f.name!r} has length {len(value)}, expected {lengths[f.name]}"
                )
            if not all(isinstance(v, int) and not isinstance(v, bool) for v in value):
                raise MalformedProof(f"field {f.name!r} must hold integers")
        elif hint is int:
            if isinstance(value, bool) or not isinstance(value, int):
                raise MalformedProof(f"field {f.name!r} must be an integer")
        elif hint is CurvePoint:
            if value is None or not (groups.is_identity(value) or hasattr(value, 'to_bytes')):
                raise MalformedProof(f"field {f.name!r} must be a curve point")
        elif hint is bytes:
            if not isinstance(value, bytes):
                raise MalformedProof(f"field {f.name!r} must be bytes")


def canonical_bytes(obj) -> bytes:
    """Canonical byte encoding used by the Fiat-Shamir transcript."""
    encoded = to_dict(obj) if dataclasses.is_dataclass(obj) else obj
    return json.dumps(encoded, sort_keys=True, separators=(',', ':')).encode('utf-8')


def dumps(obj) -> str:
    """Serialize a protocol object for transmission."""
    return json.dumps(to_dict(obj), sort_keys=True)


def loads(cls, text: str, curve=None, error=MalformedProof, params: SecurityParams = None):
    """Deserialize an object produced by ``dumps``, see ``from_dict``."""
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as e:
        raise error(f"invalid JSON for {cls.__name__}") from e
    return from_dict(cls, data, curve, error, params)
