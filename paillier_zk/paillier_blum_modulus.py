"""
Paillier-Blum Modulus
=====================

ZK-proof called Πmod in the CGGMP21 paper.

Proves that N = p·q for distinct primes p ≡ q ≡ 3 (mod 4) and that
gcd(N, φ(N)) = 1, without revealing p or q.

Protocol:
---------
Commitment: a unit w with Jacobi symbol (w | N) = -1.

Challenge: y_1, ..., y_m ∈ [0, N) from the transcript over (N, w).

Response, for every i:
    (a_i, b_i) ∈ {0, 1}^2 such that y'_i = (-1)^a_i · w^b_i · y_i is a
    quadratic residue modulo p and q
    x_i = y'_i^(1/4)             (mod N)
    z_i = y_i^(N^-1 mod φ(N))    (mod N)

Verification:
    N odd, composite
    (w | N) = -1
    z_i^N == y_i                 (mod N)
    x_i^4 == (-1)^a_i · w^b_i · y_i   (mod N)

Each round has soundness error 1/2; m = mod_rounds rounds are run.
"""

import logging
from dataclasses import dataclass, field
from typing import List

from .config import SecurityParams, resolve
from .errors import InvalidStatement, SamplingFailed
from .fs_oracles import LABEL_MOD, challenge_vector, check_parameters, parameters_digest
from .serialization import check_shape
from .utils import (
    fourth_root,
    is_prime,
    is_quadratic_residue,
    is_unit,
    jacobi,
    mod_inverse,
    mod_pow,
    require,
    sample_with_jacobi,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Statement:
    n: int


@dataclass(frozen=True)
class Witness:
    p: int = field(repr=False)
    q: int = field(repr=False)


@dataclass(frozen=True)
class Commitment:
    w: int


@dataclass(frozen=True)
class Response:
    x: List[int]
    a: List[int]
    b: List[int]
    z: List[int]


@dataclass(frozen=True)
class Proof:
    commitment: Commitment
    response: Response
    params_digest: bytes


def _check_statement(statement: Statement) -> None:
    if not isinstance(statement, Statement):
        raise InvalidStatement(f"expected Statement, got {type(statement).__name__}")
    n = statement.n
    if not isinstance(n, int) or n <= 1 or n % 2 == 0:
        raise InvalidStatement("modulus must be an odd integer > 1")
    if is_prime(n):
        raise InvalidStatement("modulus is prime")


def _check_witness(n: int, witness: Witness) -> None:
    p, q = witness.p, witness.q
    if p * q != n:
        raise InvalidStatement("witness does not factor the modulus")
    if p == q:
        raise InvalidStatement("factors must be distinct")
    for prime in (p, q):
        if prime % 4 != 3 or not is_prime(prime):
            raise InvalidStatement("factors must be primes congruent to 3 mod 4")


def _challenges(statement, commitment, context, params):
    return challenge_vector(LABEL_MOD, statement, commitment, context, params,
                            statement.n, params.mod_rounds)


def _signed(a: int, b: int, w: int, y: int, n: int) -> int:
    """(-1)^a · w^b · y mod n"""
    value = (pow(w, b, n) * y) % n
    return (n - value) % n if a else value


def prove(statement: Statement, witness: Witness, rng, *, context: bytes = b"",
          params: SecurityParams = None) -> Proof:
    """
    Compute a non-interactive Πmod proof.

    If a derived challenge y_i is not a unit (only possible for a malformed
    modulus), w is resampled; the loop is bounded by max_sampling_attempts.

    Raises
    ------
    InvalidStatement
        If N is not a product of two distinct Blum primes given by the
        witness, or N is not invertible modulo φ(N).
    SamplingFailed
        If no suitable w was found.
    """
    params = resolve(params).validate()
    _check_statement(statement)
    _check_witness(statement.n, witness)
    n, p, q = statement.n, witness.p, witness.q

    n_inv = mod_inverse(n, (p - 1) * (q - 1))

    for _ in range(params.max_sampling_attempts):
        w = sample_with_jacobi(rng, n, -1, params.max_sampling_attempts)
        commitment = Commitment(w=w)
        ys = _challenges(statement, commitment, context, params)
        if all(is_unit(y, n) for y in ys):
            break
    else:
        logger.warning("no Πmod commitment with unit challenges in %d attempts",
                       params.max_sampling_attempts)
        raise SamplingFailed("commitment with unit challenges", params.max_sampling_attempts)

    xs, as_, bs, zs = [], [], [], []
    for y in ys:
        for a, b in ((0, 0), (1, 0), (0, 1), (1, 1)):
            candidate = _signed(a, b, w, y, n)
            if is_quadratic_residue(candidate, p) and is_quadratic_residue(candidate, q):
                break
        else:
            raise InvalidStatement("no quadratic residue among ±y, ±w·y")
        xs.append(fourth_root(candidate, p, q))
        as_.append(a)
        bs.append(b)
        zs.append(mod_pow(y, n_inv, n))

    logger.debug("computed mod proof with %d rounds", len(ys))
    return Proof(commitment=commitment, response=Response(x=xs, a=as_, b=bs, z=zs),
                 params_digest=parameters_digest(LABEL_MOD, params))


def verify(statement: Statement, proof: Proof, *, context: bytes = b"",
           params: SecurityParams = None) -> None:
    """
    Verify a Πmod proof. Any failing round rejects the whole proof.

    Raises
    ------
    InvalidStatement
        If N is even, not greater than 1, or prime, or the proof was made
        with another round count.
    MalformedProof
        If a response vector does not have mod_rounds entries.
    VerificationFailed
        If any check fails.
    """
    params = resolve(params).validate()
    _check_statement(statement)
    m = params.mod_rounds
    check_parameters(LABEL_MOD, proof, params)
    check_shape(proof, Proof, lengths={'x': m, 'a': m, 'b': m, 'z': m})
    n = statement.n
    w = proof.commitment.w
    resp = proof.response

    require(is_unit(w, n), "w-unit")
    require(jacobi(w, n) == -1, "w-jacobi")
    require(all(bit in (0, 1) for bit in resp.a + resp.b), "ab-bits")
    require(all(0 < v < n for v in resp.x + resp.z), "response-range")

    ys = _challenges(statement, proof.commitment, context, params)
    for i, y in enumerate(ys):
        require(mod_pow(resp.z[i], n, n) == y, "z-root", f"round {i}")
        require(mod_pow(resp.x[i], 4, n) == _signed(resp.a[i], resp.b[i], w, y, n),
                "fourth-root", f"round {i}")

    logger.debug("verified mod proof with %d rounds", m)
