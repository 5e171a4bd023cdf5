"""
Group Element vs Paillier Encryption in Range
=============================================

ZK-proof called Πlog* in the CGGMP21 paper.

A party has X = x·g for a base point g and C = Enc_N0(x, ρ). It proves that
the plaintext of C is the discrete logarithm of X and that x < 2^l,
disclosing only N0, C, X, g and the ring-Pedersen parameters.

Protocol:
---------
Commitment (α < 2^(l+ε), μ < 2^l·N̂, γ < 2^(l+ε)·N̂, r ∈ Z_N0^*):
    S = s^x · t^μ        (mod N̂)
    A = Enc_N0(α, r)
    Y = α·g
    D = s^α · t^γ        (mod N̂)

Response:
    z1 = α + e·x
    z2 = r · ρ^e         (mod N0)
    z3 = γ + e·μ

Verification (all must hold):
    Enc_N0(z1, z2) == A · C^e   (mod N0^2)
    z1·g           == Y + e·X   (curve group)
    s^z1 · t^z3    == D · S^e   (mod N̂)
    0 <= z1 <= 2^(l+ε)
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from . import groups
from .config import SecurityParams, resolve
from .crs import RingPedersenParams
from .errors import InvalidStatement
from .fs_oracles import LABEL_LOG_STAR, challenge_scalar, check_parameters, parameters_digest
from .paillier import (
    PublicKey,
    check_public_key,
    encrypt_with_nonce,
    is_valid_ciphertext,
)
from .serialization import CurvePoint, check_shape
from .utils import (
    check_units,
    combine,
    in_interval,
    is_unit,
    require,
    sample_below,
    sample_unit,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Statement:
    """
    Public data.

    ``base`` is the point g with X = x·g; ``None`` stands for the curve
    generator.
    """

    key: PublicKey
    ciphertext: int
    x: CurvePoint
    aux: RingPedersenParams
    base: Optional[CurvePoint] = None


@dataclass(frozen=True)
class Witness:
    x: int = field(repr=False)
    nonce: int = field(repr=False)


@dataclass(frozen=True)
class Commitment:
    s: int
    a: int
    y: CurvePoint
    d: int


@dataclass(frozen=True)
class Response:
    z1: int
    z2: int
    z3: int


@dataclass(frozen=True)
class Proof:
    commitment: Commitment
    response: Response
    params_digest: bytes


def _setup(params: SecurityParams):
    params = resolve(params)
    group = groups.setup(params.curve_name)
    params.validate(group['order'].bit_length())
    return params, group


def _check_statement(statement: Statement, group: dict):
    """Validate the statement and return the base point in use."""
    if not isinstance(statement, Statement):
        raise InvalidStatement(f"expected Statement, got {type(statement).__name__}")
    check_public_key(statement.key)
    if not isinstance(statement.aux, RingPedersenParams):
        raise InvalidStatement("aux must be RingPedersenParams")
    statement.aux.validate()
    if not is_valid_ciphertext(statement.key, statement.ciphertext):
        raise InvalidStatement("ciphertext is not a unit modulo N0^2")
    base = group['generator'] if statement.base is None else statement.base
    for point in (statement.x, base):
        if not groups.is_on_curve(group['curve'], point):
            raise InvalidStatement(f"point is not on {group['curve_name']}")
    if groups.is_identity(base):
        raise InvalidStatement("base point must not be the identity")
    return base


def prove(statement: Statement, witness: Witness, rng, *, context: bytes = b"",
          params: SecurityParams = None) -> Proof:
    """
    Compute a non-interactive Πlog* proof.

    Raises
    ------
    InvalidStatement
        If X != x·g, C does not encrypt x under the given nonce, or
        x is not below 2^l.
    SamplingFailed
        If no unit nonce could be sampled.
    """
    params, group = _setup(params)
    base = _check_statement(statement, group)
    q = group['order']
    key, aux = statement.key, statement.aux
    x, rho = witness.x, witness.nonce

    if not in_interval(x, (1 << params.l) - 1):
        raise InvalidStatement(f"x is outside [0, 2^{params.l})")
    if not groups.points_equal(groups.scalar_mult(base, x, q), statement.x):
        raise InvalidStatement("X is not x·g")
    if encrypt_with_nonce(key, x, rho) != statement.ciphertext:
        raise InvalidStatement("witness does not open the ciphertext")

    two_to_l = 1 << params.l
    two_to_l_e = 1 << (params.l + params.epsilon)

    alpha = sample_below(rng, two_to_l_e)
    mu = sample_below(rng, two_to_l * aux.n_hat)
    gamma = sample_below(rng, two_to_l_e * aux.n_hat)
    r = sample_unit(rng, key.n, params.max_sampling_attempts)

    commitment = Commitment(
        s=aux.commit(x, mu),
        a=encrypt_with_nonce(key, alpha, r),
        y=groups.scalar_mult(base, alpha, q),
        d=aux.commit(alpha, gamma),
    )
    e = challenge_scalar(LABEL_LOG_STAR, statement, commitment, context, params, q)

    response = Response(
        z1=alpha + e * x,
        z2=combine(r, 1, rho, e, key.n),
        z3=gamma + e * mu,
    )
    logger.debug("computed log* proof")
    return Proof(commitment=commitment, response=response,
                 params_digest=parameters_digest(LABEL_LOG_STAR, params))


def verify(statement: Statement, proof: Proof, *, context: bytes = b"",
           params: SecurityParams = None) -> None:
    """
    Verify a Πlog* proof.

    Three equality checks and one range check; a mismatch in either the
    integer ring or the curve group rejects.

    Raises
    ------
    InvalidStatement, MalformedProof, VerificationFailed
    """
    params, group = _setup(params)
    base = _check_statement(statement, group)
    check_parameters(LABEL_LOG_STAR, proof, params)
    check_shape(proof, Proof)
    q = group['order']
    key, aux = statement.key, statement.aux
    comm, resp = proof.commitment, proof.response

    require(check_units(aux.n_hat, comm.s, comm.d), "commitment-units")
    require(is_valid_ciphertext(key, comm.a), "commitment-ciphertext")
    require(groups.is_on_curve(group['curve'], comm.y), "commitment-point")
    require(is_unit(resp.z2, key.n), "z2-unit")
    require(in_interval(resp.z1, 1 << (params.l + params.epsilon)), "z1-range")

    e = challenge_scalar(LABEL_LOG_STAR, statement, comm, context, params, q)

    lhs = encrypt_with_nonce(key, resp.z1, resp.z2)
    rhs = combine(comm.a, 1, statement.ciphertext, e, key.nsquare)
    require(lhs == rhs, "paillier")

    lhs = groups.scalar_mult(base, resp.z1, q)
    rhs = groups.point_add(comm.y, groups.scalar_mult(statement.x, e, q))
    require(groups.points_equal(lhs, rhs), "group")

    lhs = aux.commit(resp.z1, resp.z3)
    rhs = combine(comm.d, 1, comm.s, e, aux.n_hat)
    require(lhs == rhs, "ring-pedersen")

    logger.debug("verified log* proof")
