"""
Paillier Encryption in Range
============================

ZK-proof called Πenc in the CGGMP21 paper.

A prover holding a ciphertext K = Enc_N0(k, ρ) proves that it knows k and ρ
and that k < 2^l, disclosing only N0, K and the ring-Pedersen parameters.

Protocol:
---------
Commitment (α < 2^(l+ε), μ < 2^l·N̂, γ < 2^(l+ε)·N̂, r ∈ Z_N0^*):
    S = s^k · t^μ        (mod N̂)
    A = Enc_N0(α, r)
    C = s^α · t^γ        (mod N̂)

Challenge e ∈ [0, q), derived from the transcript.

Response:
    z1 = α + e·k
    z2 = r · ρ^e         (mod N0)
    z3 = γ + e·μ

Verification:
    Enc_N0(z1, z2) == A · K^e      (mod N0^2)
    s^z1 · t^z3    == C · S^e      (mod N̂)
    0 <= z1 <= 2^(l+ε)

Examples
--------
>>> import random
>>> rng = random.SystemRandom()
>>> statement = Statement(key=pk, ciphertext=K, aux=aux)
>>> proof = prove(statement, Witness(plaintext=k, nonce=rho), rng, context=b"session-1")
>>> verify(statement, proof, context=b"session-1")
"""

import logging
from dataclasses import dataclass, field

from . import groups
from .config import SecurityParams, resolve
from .crs import RingPedersenParams
from .errors import InvalidStatement
from .fs_oracles import LABEL_ENC, challenge_scalar, check_parameters, parameters_digest
from .paillier import (
    PublicKey,
    check_public_key,
    encrypt_with_nonce,
    is_valid_ciphertext,
)
from .serialization import check_shape
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
    """Public data: key N0, ciphertext K and ring-Pedersen parameters."""

    key: PublicKey
    ciphertext: int
    aux: RingPedersenParams


@dataclass(frozen=True)
class Witness:
    """Prover's secret: plaintext k and nonce ρ with K = Enc(k, ρ)."""

    plaintext: int = field(repr=False)
    nonce: int = field(repr=False)


@dataclass(frozen=True)
class Commitment:
    s: int
    a: int
    c: int


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


def _check_statement(statement: Statement) -> None:
    if not isinstance(statement, Statement):
        raise InvalidStatement(f"expected Statement, got {type(statement).__name__}")
    check_public_key(statement.key)
    if not isinstance(statement.aux, RingPedersenParams):
        raise InvalidStatement("aux must be RingPedersenParams")
    statement.aux.validate()
    if not is_valid_ciphertext(statement.key, statement.ciphertext):
        raise InvalidStatement("ciphertext is not a unit modulo N0^2")


def _setup(params: SecurityParams):
    params = resolve(params)
    q = groups.setup(params.curve_name)['order']
    params.validate(q.bit_length())
    return params, q


def prove(statement: Statement, witness: Witness, rng, *, context: bytes = b"",
          params: SecurityParams = None) -> Proof:
    """
    Compute a non-interactive Πenc proof.

    Parameters
    ----------
    statement : Statement
        Public key, ciphertext and ring-Pedersen parameters
    witness : Witness
        Plaintext and nonce of the ciphertext
    rng : random.Random
        Caller-owned randomness source
    context : bytes, optional
        Session tag bound into the challenge
    params : SecurityParams, optional
        Security parameters; the global configuration by default

    Returns
    -------
    Proof

    Raises
    ------
    InvalidStatement
        If the statement is malformed, the witness does not open the
        ciphertext, or the plaintext is not below 2^l.
    SamplingFailed
        If no unit nonce could be sampled.
    """
    params, q = _setup(params)
    _check_statement(statement)
    key, aux = statement.key, statement.aux
    k, rho = witness.plaintext, witness.nonce

    if not in_interval(k, (1 << params.l) - 1):
        raise InvalidStatement(f"plaintext is outside [0, 2^{params.l})")
    if encrypt_with_nonce(key, k, rho) != statement.ciphertext:
        raise InvalidStatement("witness does not open the ciphertext")

    two_to_l = 1 << params.l
    two_to_l_e = 1 << (params.l + params.epsilon)

    alpha = sample_below(rng, two_to_l_e)
    mu = sample_below(rng, two_to_l * aux.n_hat)
    gamma = sample_below(rng, two_to_l_e * aux.n_hat)
    r = sample_unit(rng, key.n, params.max_sampling_attempts)

    commitment = Commitment(
        s=aux.commit(k, mu),
        a=encrypt_with_nonce(key, alpha, r),
        c=aux.commit(alpha, gamma),
    )
    e = challenge_scalar(LABEL_ENC, statement, commitment, context, params, q)

    response = Response(
        z1=alpha + e * k,
        z2=combine(r, 1, rho, e, key.n),
        z3=gamma + e * mu,
    )
    logger.debug("computed enc proof")
    return Proof(commitment=commitment, response=response,
                 params_digest=parameters_digest(LABEL_ENC, params))


def verify(statement: Statement, proof: Proof, *, context: bytes = b"",
           params: SecurityParams = None) -> None:
    """
    Verify a Πenc proof.

    Three checks, all of which must hold:
    1. paillier:       Enc(z1, z2) == A · K^e (mod N0^2)
    2. ring-pedersen:  s^z1 · t^z3 == C · S^e (mod N̂)
    3. z1-range:       0 <= z1 <= 2^(l+ε)

    Raises
    ------
    InvalidStatement
        If the statement is malformed.
    MalformedProof
        If the proof does not have the expected shape.
    VerificationFailed
        If any check fails.
    """
    params, q = _setup(params)
    _check_statement(statement)
    check_parameters(LABEL_ENC, proof, params)
    check_shape(proof, Proof)
    key, aux = statement.key, statement.aux
    comm, resp = proof.commitment, proof.response

    require(check_units(aux.n_hat, comm.s, comm.c), "commitment-units")
    require(is_valid_ciphertext(key, comm.a), "commitment-ciphertext")
    require(is_unit(resp.z2, key.n), "z2-unit")
    require(in_interval(resp.z1, 1 << (params.l + params.epsilon)), "z1-range")

    e = challenge_scalar(LABEL_ENC, statement, comm, context, params, q)

    lhs = encrypt_with_nonce(key, resp.z1, resp.z2)
    rhs = combine(comm.a, 1, statement.ciphertext, e, key.nsquare)
    require(lhs == rhs, "paillier")

    lhs = aux.commit(resp.z1, resp.z3)
    rhs = combine(comm.c, 1, comm.s, e, aux.n_hat)
    require(lhs == rhs, "ring-pedersen")

    logger.debug("verified enc proof")
