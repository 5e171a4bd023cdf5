"""
Group Initialization and Setup
===============================

This module wraps the elliptic-curve group used by the proofs that link a
Paillier plaintext to a discrete logarithm (log* and aff-g).

Curves come from the ``ecdsa`` package:
- ``curve_by_name('SECP256k1')`` gives the curve object
- ``curve.generator`` is the canonical base point G (a PointJacobi)
- ``curve.order`` is the prime group order q
- Points support ``+`` (group law) and ``* int`` (scalar multiplication)
- ``ellipticcurve.INFINITY`` is the identity element
"""

from ecdsa import curves, ellipticcurve, numbertheory
from ecdsa.errors import MalformedPointError

from .errors import InvalidStatement, MalformedProof

INFINITY = ellipticcurve.INFINITY


def setup(curve_name: str = 'SECP256k1') -> dict:
    """
    Initialize the elliptic-curve group.

    Parameters
    ----------
    curve_name : str, optional
        The ``ecdsa`` curve identifier. Default is 'SECP256k1'.

    Returns
    -------
    dict
        A dictionary containing:
        - 'curve': The ecdsa Curve object
        - 'curve_name': The name of the curve used
        - 'generator': The base point G
        - 'order': The group order q

    Raises
    ------
    InvalidStatement
        If the curve is unknown to ``ecdsa``.

    Examples
    --------
    >>> group = setup('SECP256k1')
    >>> X = scalar_mult(group['generator'], 5)
    """
    try:
        curve = curves.curve_by_name(curve_name)
    except curves.UnknownCurveError as e:
        raise InvalidStatement(f"unknown curve {curve_name!r}") from e

    return {
        'curve': curve,
        'curve_name': curve.name,
        'generator': curve.generator,
        'order': int(curve.order),
    }


def scalar_mult(point, k: int, order: int = None):
    """Compute k·point, reducing k modulo the group order when given."""
    if order is not None:
        k %= order
    if k == 0 or is_identity(point):
        return INFINITY
    return point * k


def point_add(p1, p2):
    if is_identity(p1):
        return p2
    if is_identity(p2):
        return p1
    return p1 + p2


def is_identity(point) -> bool:
    return point is None or point == INFINITY


def points_equal(p1, p2) -> bool:
    """
    Compare two points through their canonical encoding.

    Encodings are compared instead of relying on ``==`` so that affine and
    Jacobian representations of the same point always agree.
    """
    return point_to_bytes(p1) == point_to_bytes(p2)


def point_to_bytes(point) -> bytes:
    """
    Serialize a point to compressed SEC1 bytes.

    The identity element has no SEC1 compressed form and is encoded as
    empty bytes.
    """
    if is_identity(point):
        return b""
    return point.to_bytes("compressed")


def point_from_bytes(curve, data: bytes):
    """
    Deserialize a compressed (or uncompressed) SEC1 point on ``curve``.

    Raises
    ------
    MalformedProof
        If the bytes do not encode a point on the curve.
    """
    if data == b"":
        return INFINITY
    p = int(curve.curve.p())
    width = (p.bit_length() + 7) // 8
    coordinates = [data[1:1 + width]]
    if len(data) == 2 * width + 1:
        coordinates.append(data[1 + width:])
    # ecdsa keeps coordinates >= p unreduced, so the same point would have two encodings
    if any(int.from_bytes(c, 'big') >= p for c in coordinates):
        raise MalformedProof(f"non-canonical {curve.name} point encoding")
    try:
        point = ellipticcurve.PointJacobi.from_bytes(
            curve.curve, data, order=curve.order
        )
    except (MalformedPointError, numbertheory.Error, ValueError, AssertionError) as e:
        raise MalformedProof(f"invalid {curve.name} point encoding") from e
    # hybrid (0x06, 0x07) encodings decode but do not round-trip
    if point.to_bytes("compressed" if len(data) == width + 1 else "uncompressed") != data:
        raise MalformedProof(f"non-canonical {curve.name} point encoding")
    return point


def is_on_curve(curve, point) -> bool:
    """True iff ``point`` is the identity or a point of ``curve``."""
    if is_identity(point):
        return True
    if not hasattr(point, 'curve') or point.curve() != curve.curve:
        return False
    return curve.curve.contains_point(point.x(), point.y())
