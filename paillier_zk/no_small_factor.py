"""
No Small Factor
===============

ZK-proof called Πfac in the CGGMP21 paper.

Proves that N0 = p·q with both factors bounded by 2^(l+ε)·√N0, i.e. that
N0 has no factor smaller than roughly 2^l. Commitments use the verifier's
ring-Pedersen parameters (N̂, s, t).

Protocol:
---------
Commitment:
    P = s^p · t^μ        Q = s^q · t^ν
    A = s^α · t^x        B = s^β · t^y
    T = Q^α · t^r        (all mod N̂)
    σ                    (sent in the clear)

with α, β < 2^(l+ε)·√N0, μ, ν < 2^l·N̂, σ < 2^l·N0·N̂,
r < 2^(l+ε)·N0·N̂, x, y < 2^(l+ε)·N̂.

Response:
    z1 = α + e·p         z2 = β + e·q
    w1 = x + e·μ         w2 = y + e·ν
    v  = r + e·(σ - ν·p)

Verification, with R = s^N0 · t^σ:
    s^z1 · t^w1 == A · P^e
    s^z2 · t^w2 == B · Q^e
    Q^z1 · t^v  == T · R^e
    0 <= z1, z2 <= 2^(l+ε)·√N0
"""

import logging
from dataclasses import dataclass, field

from . import groups
from .config import SecurityParams, resolve
from .crs import RingPedersenParams
from .errors import InvalidStatement
from .fs_oracles import LABEL_FAC, challenge_scalar, check_parameters, parameters_digest
from .serialization import check_shape
from .utils import (
    check_units,
    combine,
    in_interval,
    isqrt,
    require,
    sample_below,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Statement:
    n: int
    aux: RingPedersenParams


@dataclass(frozen=True)
class Witness:
    p: int = field(repr=False)
    q: int = field(repr=False)


@dataclass(frozen=True)
class Commitment:
    p: int
    q: int
    a: int
    b: int
    t: int
    sigma: int


@dataclass(frozen=True)
class Response:
    z1: int
    z2: int
    w1: int
    w2: int
    v: int


@dataclass(frozen=True)
class Proof:
    commitment: Commitment
    response: Response
    params_digest: bytes


def _setup(params: SecurityParams):
    params = resolve(params)
    q = groups.setup(params.curve_name)['order']
    params.validate(q.bit_length())
    return params, q


def _check_statement(statement: Statement) -> None:
    if not isinstance(statement, Statement):
        raise InvalidStatement(f"expected Statement, got {type(statement).__name__}")
    if not isinstance(statement.n, int) or statement.n <= 3 or statement.n % 2 == 0:
        raise InvalidStatement("modulus must be an odd integer > 3")
    if not isinstance(statement.aux, RingPedersenParams):
        raise InvalidStatement("aux must be RingPedersenParams")
    statement.aux.validate()


def _factor_bound(n: int, params: SecurityParams) -> int:
    """2^(l+ε)·√N0, the bound on the masked factors."""
    return (1 << (params.l + params.epsilon)) * isqrt(n)


def prove(statement: Statement, witness: Witness, rng, *, context: bytes = b"",
          params: SecurityParams = None) -> Proof:
    """
    Compute a non-interactive Πfac proof.

    Raises
    ------
    InvalidStatement
        If p·q != N0 or either factor is 1.
    """
    params, order = _setup(params)
    _check_statement(statement)
    n0, aux = statement.n, statement.aux
    p, q = witness.p, witness.q
    if not (isinstance(p, int) and isinstance(q, int)) or p <= 1 or q <= 1 or p * q != n0:
        raise InvalidStatement("witness is not a non-trivial factorization of N0")

    n_hat = aux.n_hat
    two_to_l = 1 << params.l
    two_to_l_e = 1 << (params.l + params.epsilon)
    bound = _factor_bound(n0, params)

    alpha = sample_below(rng, bound)
    beta = sample_below(rng, bound)
    mu = sample_below(rng, two_to_l * n_hat)
    nu = sample_below(rng, two_to_l * n_hat)
    sigma = sample_below(rng, two_to_l * n0 * n_hat)
    r = sample_below(rng, two_to_l_e * n0 * n_hat)
    x = sample_below(rng, two_to_l_e * n_hat)
    y = sample_below(rng, two_to_l_e * n_hat)

    big_q = aux.commit(q, nu)
    commitment = Commitment(
        p=aux.commit(p, mu),
        q=big_q,
        a=aux.commit(alpha, x),
        b=aux.commit(beta, y),
        t=combine(big_q, alpha, aux.t, r, n_hat),
        sigma=sigma,
    )
    e = challenge_scalar(LABEL_FAC, statement, commitment, context, params, order)

    response = Response(
        z1=alpha + e * p,
        z2=beta + e * q,
        w1=x + e * mu,
        w2=y + e * nu,
        v=r + e * (sigma - nu * p),
    )
    logger.debug("computed fac proof")
    return Proof(commitment=commitment, response=response,
                 params_digest=parameters_digest(LABEL_FAC, params))


def verify(statement: Statement, proof: Proof, *, context: bytes = b"",
           params: SecurityParams = None) -> None:
    """
    Verify a Πfac proof.

    Raises
    ------
    InvalidStatement, MalformedProof, VerificationFailed
    """
    params, order = _setup(params)
    _check_statement(statement)
    check_parameters(LABEL_FAC, proof, params)
    check_shape(proof, Proof)
    n0, aux = statement.n, statement.aux
    comm, resp = proof.commitment, proof.response

    require(check_units(aux.n_hat, comm.p, comm.q, comm.a, comm.b, comm.t),
            "commitment-units")
    bound = _factor_bound(n0, params)
    require(in_interval(resp.z1, bound), "z1-range")
    require(in_interval(resp.z2, bound), "z2-range")

    e = challenge_scalar(LABEL_FAC, statement, comm, context, params, order)

    lhs = aux.commit(resp.z1, resp.w1)
    rhs = combine(comm.a, 1, comm.p, e, aux.n_hat)
    require(lhs == rhs, "ring-pedersen-p")

    lhs = aux.commit(resp.z2, resp.w2)
    rhs = combine(comm.b, 1, comm.q, e, aux.n_hat)
    require(lhs == rhs, "ring-pedersen-q")

    r = aux.commit(n0, comm.sigma)
    lhs = combine(comm.q, resp.z1, aux.t, resp.v, aux.n_hat)
    rhs = combine(comm.t, 1, r, e, aux.n_hat)
    require(lhs == rhs, "product")

    logger.debug("verified fac proof")
