"""
Paillier Affine Operation with Group Commitment in Range
========================================================

ZK-proof called Πaff-g in the CGGMP21 paper.

In the multiplicative-to-additive step a party receives C under the other
party's key N0 and answers with D = C^x · Enc_N0(y, ρ). It proves that it
did so with the x committed in X = x·g and with the y encrypted under its
own key as Y = Enc_N1(y, ρ_y), and that x < 2^l and y < 2^l'.

Protocol:
---------
Commitment:
    A  = C^α · Enc_N0(β, r)      (mod N0^2)
    Bx = α·g
    By = Enc_N1(β, r_y)
    E  = s^α · t^γ               S = s^x · t^m
    F  = s^β · t^δ               T = s^y · t^μ        (mod N̂)

with α < 2^(l+ε), β < 2^(l'+ε), γ, δ < 2^(l+ε)·N̂, m, μ < 2^l·N̂,
r ∈ Z_N0^*, r_y ∈ Z_N1^*.

Response:
    z1 = α + e·x         z2 = β + e·y
    z3 = γ + e·m         z4 = δ + e·μ
    w  = r · ρ^e (mod N0)
    w_y = r_y · ρ_y^e (mod N1)

Verification (one shared challenge e):
    C^z1 · Enc_N0(z2, w) == A · D^e     (mod N0^2)
    z1·g                 == Bx + e·X
    Enc_N1(z2, w_y)      == By · Y^e    (mod N1^2)
    s^z1 · t^z3          == E · S^e     (mod N̂)
    s^z2 · t^z4          == F · T^e     (mod N̂)
    0 <= z1 <= 2^(l+ε),  0 <= z2 <= 2^(l'+ε)
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from . import groups
from .config import SecurityParams, resolve
from .crs import RingPedersenParams
from .errors import InvalidStatement
from .fs_oracles import LABEL_AFF_G, challenge_scalar, check_parameters, parameters_digest
from .paillier import (
    PublicKey,
    affine,
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
    mod_pow,
    require,
    sample_below,
    sample_unit,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Statement:
    """
    Public data.

    ``key0`` is the receiver's key (N0) under which C and D live, ``key1``
    the prover's own key (N1) under which Y lives. ``base`` is the point g
    with X = x·g; ``None`` stands for the curve generator.
    """

    key0: PublicKey
    key1: PublicKey
    c: int
    d: int
    y: int
    x: CurvePoint
    aux: RingPedersenParams
    base: Optional[CurvePoint] = None


@dataclass(frozen=True)
class Witness:
    """Multiplier x, additive term y and the nonces of D (under N0) and Y (under N1)."""

    x: int = field(repr=False)
    y: int = field(repr=False)
    nonce: int = field(repr=False)
    nonce_y: int = field(repr=False)


@dataclass(frozen=True)
class Commitment:
    a: int
    b_x: CurvePoint
    b_y: int
    e: int
    s: int
    f: int
    t: int


@dataclass(frozen=True)
class Response:
    z1: int
    z2: int
    z3: int
    z4: int
    w: int
    w_y: int


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
    check_public_key(statement.key0)
    check_public_key(statement.key1)
    if not isinstance(statement.aux, RingPedersenParams):
        raise InvalidStatement("aux must be RingPedersenParams")
    statement.aux.validate()
    for name in ('c', 'd'):
        if not is_valid_ciphertext(statement.key0, getattr(statement, name)):
            raise InvalidStatement(f"ciphertext {name} is not a unit modulo N0^2")
    if not is_valid_ciphertext(statement.key1, statement.y):
        raise InvalidStatement("ciphertext y is not a unit modulo N1^2")
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
    Compute a non-interactive Πaff-g proof.

    Parameters
    ----------
    statement : Statement
    witness : Witness
    rng : random.Random
        Caller-owned randomness source
    context : bytes, optional
        Session tag bound into the challenge
    params : SecurityParams, optional

    Returns
    -------
    Proof

    Raises
    ------
    InvalidStatement
        If x or y is out of range, or the witness does not explain D, Y
        and X.
    SamplingFailed
        If no unit nonce could be sampled.
    """
    params, group = _setup(params)
    g = _check_statement(statement, group)
    q = group['order']
    key0, key1, aux = statement.key0, statement.key1, statement.aux
    x, y = witness.x, witness.y

    if not in_interval(x, (1 << params.l) - 1):
        raise InvalidStatement(f"x is outside [0, 2^{params.l})")
    if not in_interval(y, (1 << params.l_prime) - 1):
        raise InvalidStatement(f"y is outside [0, 2^{params.l_prime})")
    if not groups.points_equal(groups.scalar_mult(g, x, q), statement.x):
        raise InvalidStatement("X is not x·g")
    if affine(key0, statement.c, x, encrypt_with_nonce(key0, y, witness.nonce)) != statement.d:
        raise InvalidStatement("D is not C^x · Enc_N0(y, ρ)")
    if encrypt_with_nonce(key1, y, witness.nonce_y) != statement.y:
        raise InvalidStatement("Y is not Enc_N1(y, ρ_y)")

    two_to_l = 1 << params.l
    two_to_l_e = 1 << (params.l + params.epsilon)
    two_to_lp_e = 1 << (params.l_prime + params.epsilon)

    alpha = sample_below(rng, two_to_l_e)
    beta = sample_below(rng, two_to_lp_e)
    r = sample_unit(rng, key0.n, params.max_sampling_attempts)
    r_y = sample_unit(rng, key1.n, params.max_sampling_attempts)
    gamma = sample_below(rng, two_to_l_e * aux.n_hat)
    delta = sample_below(rng, two_to_l_e * aux.n_hat)
    m = sample_below(rng, two_to_l * aux.n_hat)
    mu = sample_below(rng, two_to_l * aux.n_hat)

    commitment = Commitment(
        a=affine(key0, statement.c, alpha, encrypt_with_nonce(key0, beta, r)),
        b_x=groups.scalar_mult(g, alpha, q),
        b_y=encrypt_with_nonce(key1, beta, r_y),
        e=aux.commit(alpha, gamma),
        s=aux.commit(x, m),
        f=aux.commit(beta, delta),
        t=aux.commit(y, mu),
    )
    e = challenge_scalar(LABEL_AFF_G, statement, commitment, context, params, q)

    response = Response(
        z1=alpha + e * x,
        z2=beta + e * y,
        z3=gamma + e * m,
        z4=delta + e * mu,
        w=combine(r, 1, witness.nonce, e, key0.n),
        w_y=combine(r_y, 1, witness.nonce_y, e, key1.n),
    )
    logger.debug("computed aff-g proof")
    return Proof(commitment=commitment, response=response,
                 params_digest=parameters_digest(LABEL_AFF_G, params))


def verify(statement: Statement, proof: Proof, *, context: bytes = b"",
           params: SecurityParams = None) -> None:
    """
    Verify a Πaff-g proof.

    Raises
    ------
    InvalidStatement
        If the statement is malformed.
    MalformedProof
        If the proof does not have the expected shape.
    VerificationFailed
        If any of the five equations or two range checks fails.
    """
    params, group = _setup(params)
    g = _check_statement(statement, group)
    check_parameters(LABEL_AFF_G, proof, params)
    check_shape(proof, Proof)
    q = group['order']
    key0, key1, aux = statement.key0, statement.key1, statement.aux
    comm, resp = proof.commitment, proof.response

    require(check_units(aux.n_hat, comm.e, comm.s, comm.f, comm.t), "commitment-units")
    require(is_valid_ciphertext(key0, comm.a), "commitment-ciphertext")
    require(is_valid_ciphertext(key1, comm.b_y), "commitment-ciphertext-y")
    require(groups.is_on_curve(group['curve'], comm.b_x), "commitment-point")
    require(is_unit(resp.w, key0.n), "w-unit")
    require(is_unit(resp.w_y, key1.n), "w_y-unit")
    require(in_interval(resp.z1, 1 << (params.l + params.epsilon)), "z1-range")
    require(in_interval(resp.z2, 1 << (params.l_prime + params.epsilon)), "z2-range")

    e = challenge_scalar(LABEL_AFF_G, statement, comm, context, params, q)

    lhs = (mod_pow(statement.c, resp.z1, key0.nsquare)
           * encrypt_with_nonce(key0, resp.z2, resp.w)) % key0.nsquare
    rhs = combine(comm.a, 1, statement.d, e, key0.nsquare)
    require(lhs == rhs, "paillier-affine")

    lhs = groups.scalar_mult(g, resp.z1, q)
    rhs = groups.point_add(comm.b_x, groups.scalar_mult(statement.x, e, q))
    require(groups.points_equal(lhs, rhs), "group")

    lhs = encrypt_with_nonce(key1, resp.z2, resp.w_y)
    rhs = combine(comm.b_y, 1, statement.y, e, key1.nsquare)
    require(lhs == rhs, "paillier-y")

    lhs = aux.commit(resp.z1, resp.z3)
    rhs = combine(comm.e, 1, comm.s, e, aux.n_hat)
    require(lhs == rhs, "ring-pedersen-x")

    lhs = aux.commit(resp.z2, resp.z4)
    rhs = combine(comm.f, 1, comm.t, e, aux.n_hat)
    require(lhs == rhs, "ring-pedersen-y")

    logger.debug("verified aff-g proof")
