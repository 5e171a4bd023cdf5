"""
Fiat-Shamir Random Oracles
===========================

This module implements the random oracle used in the Fiat-Shamir
transformation to make the Sigma-protocols non-interactive.

Transcript:
-----------
Every challenge is derived from the length-prefixed concatenation

    domain || label || context || statement || commitment || params

where ``statement``, ``commitment`` and ``params`` are the canonical
encodings from ``serialization.canonical_bytes``. The order is part of the
interface: changing it changes every challenge. ``params`` covers only the
security parameters the proof depends on (``BOUND_PARAMETERS``); every proof
also carries their digest so a verifier can report a parameter mismatch.

Domain Separation:
------------------
Each proof uses its own label, so a transcript of one proof never yields a
challenge for another:
- b"enc"    encryption in range
- b"log*"   group element vs encryption in range
- b"aff-g"  affine operation with group commitment
- b"mod"    Paillier-Blum modulus
- b"fac"    no small factor
- b"prm"    ring-Pedersen parameters

The context tag (session or key identifier) binds a proof to one run of the
surrounding protocol and prevents replay across sessions.

Reduction:
----------
The 64-byte SHA-512 digest is expanded in counter mode. An integer in
[0, m) is obtained from bits(m) + 128 expanded bits reduced modulo m, so the
bias is below 2^-128 and no retry loop is needed.
"""

import hashlib
import logging
from typing import List

from .config import SecurityParams
from .errors import InvalidStatement, MalformedProof
from .serialization import canonical_bytes

logger = logging.getLogger(__name__)

LABEL_ENC = b"enc"
LABEL_LOG_STAR = b"log*"
LABEL_AFF_G = b"aff-g"
LABEL_MOD = b"mod"
LABEL_FAC = b"fac"
LABEL_PRM = b"prm"

REDUCTION_SLACK_BITS = 128

# Security parameters each proof depends on; only these enter its transcript
BOUND_PARAMETERS = {
    LABEL_ENC: ('l', 'epsilon', 'curve_name'),
    LABEL_LOG_STAR: ('l', 'epsilon', 'curve_name'),
    LABEL_AFF_G: ('l', 'l_prime', 'epsilon', 'curve_name'),
    LABEL_MOD: ('mod_rounds',),
    LABEL_FAC: ('l', 'epsilon', 'curve_name'),
    LABEL_PRM: ('prm_rounds',),
}


def _frame(part: bytes) -> bytes:
    return len(part).to_bytes(8, 'big') + part


def derive_challenge(statement_encoding: bytes, commitment_encoding: bytes, context_tag: bytes,
                     label: bytes, domain: bytes, params_encoding: bytes = b"") -> bytes:
    """
    Hash a transcript into a 64-byte challenge seed.

    Parameters
    ----------
    statement_encoding : bytes
        Canonical encoding of the statement
    commitment_encoding : bytes
        Canonical encoding of the prover's first message
    context_tag : bytes
        Session or key identifier
    label : bytes
        Per-proof domain-separation label
    domain : bytes
        Library-wide domain-separation label
    params_encoding : bytes, optional
        Canonical encoding of the security parameters

    Returns
    -------
    bytes
        SHA-512 digest of the framed transcript
    """
    if not isinstance(context_tag, (bytes, bytearray)):
        raise InvalidStatement("context tag must be bytes")
    h = hashlib.sha512()
    for part in (domain, label, bytes(context_tag), statement_encoding,
                 commitment_encoding, params_encoding):
        h.update(_frame(part))
    return h.digest()


def expand(seed: bytes, length: int) -> bytes:
    """Expand a seed to ``length`` bytes with SHA-512 in counter mode."""
    out = b""
    counter = 0
    while len(out) < length:
        out += hashlib.sha512(seed + counter.to_bytes(4, 'big')).digest()
        counter += 1
    return out[:length]


def bound_parameters(label: bytes, params: SecurityParams) -> dict:
    """
    Select the security parameters the proof labelled ``label`` depends on.

    Local knobs such as ``max_sampling_attempts`` and the round counts of
    other proofs are left out, so they may differ between prover and
    verifier.
    """
    try:
        names = BOUND_PARAMETERS[label]
    except KeyError:
        raise InvalidStatement(f"unknown proof label {label!r}") from None
    return {name: getattr(params, name) for name in names}


def parameters_digest(label: bytes, params: SecurityParams) -> bytes:
    """
    Fingerprint of the parameters a proof was made under.

    Formula:
    --------
    digest = SHA-256(domain || label || canonical(bound parameters))

    with every part length-prefixed as in the transcript.
    """
    h = hashlib.sha256()
    for part in (params.domain.encode('utf-8'), label,
                 canonical_bytes(bound_parameters(label, params))):
        h.update(_frame(part))
    return h.digest()


def check_parameters(label: bytes, proof, params: SecurityParams) -> None:
    """
    Compare the digest carried by ``proof`` with the verifier's parameters.

    Raises
    ------
    MalformedProof
        If the proof carries no digest.
    InvalidStatement
        If the proof was made under different security parameters.
    """
    digest = getattr(proof, 'params_digest', None)
    if not isinstance(digest, bytes):
        raise MalformedProof("proof carries no parameter digest")
    if digest != parameters_digest(label, params):
        logger.debug("security parameter mismatch for %s", label.decode())
        raise InvalidStatement("proof was made under different security parameters")


def _seed(label: bytes, statement, commitment, context: bytes, params: SecurityParams) -> bytes:
    return derive_challenge(
        canonical_bytes(statement),
        canonical_bytes(commitment),
        context,
        label=label,
        domain=params.domain.encode('utf-8'),
        params_encoding=canonical_bytes(bound_parameters(label, params)),
    )


def _reduce_chunks(stream: bytes, chunk_len: int, modulus: int, count: int) -> List[int]:
    return [
        int(int.from_bytes(stream[i * chunk_len:(i + 1) * chunk_len], 'big') % modulus)
        for i in range(count)
    ]


def challenge_scalar(label: bytes, statement, commitment, context: bytes,
                     params: SecurityParams, modulus: int) -> int:
    """
    Derive a single challenge e ∈ [0, modulus).

    Used by enc, log*, aff-g and fac with modulus = q, the curve order.
    """
    return challenge_vector(label, statement, commitment, context, params, modulus, 1)[0]


def challenge_vector(label: bytes, statement, commitment, context: bytes,
                     params: SecurityParams, modulus: int, count: int) -> List[int]:
    """
    Derive ``count`` independent challenges in [0, modulus).

    Used by the modulus proof to obtain the values y_1, ..., y_m.
    """
    if modulus <= 1 or count <= 0:
        raise InvalidStatement("challenge range and count must be positive")
    chunk_len = (modulus.bit_length() + REDUCTION_SLACK_BITS + 7) // 8
    seed = _seed(label, statement, commitment, context, params)
    values = _reduce_chunks(expand(seed, chunk_len * count), chunk_len, modulus, count)
    logger.debug("derived %d challenge(s) for %s", count, label.decode())
    return values


def challenge_bits(label: bytes, statement, commitment, context: bytes,
                   params: SecurityParams, count: int) -> List[int]:
    """
    Derive ``count`` challenge bits e_1, ..., e_m.

    Used by the ring-Pedersen parameter proof, whose single-round soundness
    error is 1/2 and is amplified by repetition.
    """
    if count <= 0:
        raise InvalidStatement("challenge count must be positive")
    seed = _seed(label, statement, commitment, context, params)
    stream = expand(seed, (count + 7) // 8)
    return [(stream[i // 8] >> (i % 8)) & 1 for i in range(count)]
