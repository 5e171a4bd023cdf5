"""
Ring-Pedersen Parameters
========================

ZK-proof called Πprm in the CGGMP21 paper.

Proves knowledge of λ with s = t^λ (mod N̂), i.e. that s lies in the
subgroup generated by t, so ring-Pedersen commitments under (N̂, s, t) are
hiding.

Protocol (m = prm_rounds parallel repetitions):
-----------------------------------------------
Commitment:  A_i = t^a_i (mod N̂),   a_i ∈ [0, φ(N̂))
Challenge:   e_i ∈ {0, 1}
Response:    z_i = a_i + e_i·λ (mod φ(N̂))
Verify:      t^z_i == A_i · s^e_i (mod N̂)   for every i
"""

import logging
from dataclasses import dataclass, field
from typing import List

from .config import SecurityParams, resolve
from .crs import RingPedersenParams
from .errors import InvalidStatement
from .fs_oracles import LABEL_PRM, challenge_bits, check_parameters, parameters_digest
from .serialization import check_shape
from .utils import combine, is_unit, mod_pow, require, sample_below

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Statement:
    aux: RingPedersenParams


@dataclass(frozen=True)
class Witness:
    """λ with s = t^λ, and φ(N̂)."""

    lambda_: int = field(repr=False)
    phi: int = field(repr=False)


@dataclass(frozen=True)
class Commitment:
    a: List[int]


@dataclass(frozen=True)
class Response:
    z: List[int]


@dataclass(frozen=True)
class Proof:
    commitment: Commitment
    response: Response
    params_digest: bytes


def _check_statement(statement: Statement) -> None:
    if not isinstance(statement, Statement):
        raise InvalidStatement(f"expected Statement, got {type(statement).__name__}")
    if not isinstance(statement.aux, RingPedersenParams):
        raise InvalidStatement("aux must be RingPedersenParams")
    statement.aux.validate()


def prove(statement: Statement, witness: Witness, rng, *, context: bytes = b"",
          params: SecurityParams = None) -> Proof:
    """
    Compute a non-interactive Πprm proof.

    Raises
    ------
    InvalidStatement
        If s != t^λ (mod N̂) or φ is not positive.
    """
    params = resolve(params).validate()
    _check_statement(statement)
    aux = statement.aux
    lam, phi = witness.lambda_, witness.phi
    if not isinstance(phi, int) or phi <= 0:
        raise InvalidStatement("φ(N̂) must be a positive integer")
    if mod_pow(aux.t, lam, aux.n_hat) != aux.s:
        raise InvalidStatement("s is not t^λ")

    secrets = [sample_below(rng, phi) for _ in range(params.prm_rounds)]
    commitment = Commitment(a=[mod_pow(aux.t, a, aux.n_hat) for a in secrets])
    bits = challenge_bits(LABEL_PRM, statement, commitment, context, params,
                          params.prm_rounds)

    response = Response(z=[(a + e * lam) % phi for a, e in zip(secrets, bits)])
    logger.debug("computed prm proof with %d rounds", params.prm_rounds)
    return Proof(commitment=commitment, response=response,
                 params_digest=parameters_digest(LABEL_PRM, params))


def verify(statement: Statement, proof: Proof, *, context: bytes = b"",
           params: SecurityParams = None) -> None:
    """
    Verify a Πprm proof.

    Raises
    ------
    InvalidStatement
        If the ring-Pedersen parameters are malformed, or the proof was
        made with another round count.
    MalformedProof
        If a vector does not have prm_rounds entries.
    VerificationFailed
        If a commitment is not a unit, a response is out of [0, N̂), or a
        round equation fails.
    """
    params = resolve(params).validate()
    _check_statement(statement)
    m = params.prm_rounds
    check_parameters(LABEL_PRM, proof, params)
    check_shape(proof, Proof, lengths={'a': m, 'z': m})
    aux = statement.aux
    a, z = proof.commitment.a, proof.response.z

    require(all(is_unit(v, aux.n_hat) for v in a), "commitment-units")
    require(all(0 <= v < aux.n_hat for v in z), "z-range")

    bits = challenge_bits(LABEL_PRM, statement, proof.commitment, context, params, m)
    for i, e in enumerate(bits):
        lhs = mod_pow(aux.t, z[i], aux.n_hat)
        rhs = combine(a[i], 1, aux.s, e, aux.n_hat)
        require(lhs == rhs, "round", f"round {i}")

    logger.debug("verified prm proof with %d rounds", m)
