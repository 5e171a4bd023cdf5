"""
Zero-Knowledge Proofs for Paillier-based Threshold ECDSA
========================================================

Non-interactive (Fiat-Shamir) Sigma-protocols from the CGGMP21 paper
"UC Non-Interactive, Proactive, Threshold ECDSA with Identifiable Aborts",
built on python-paillier (phe), ecdsa and gmpy2.

Modules:
--------
- paillier_encryption_in_range: Πenc, plaintext of a ciphertext is small
- group_element_vs_paillier_encryption_in_range: Πlog*, plaintext is the
  discrete log of a curve point
- paillier_affine_operation_in_range: Πaff-g, well-formed affine operation
  on a ciphertext
- paillier_blum_modulus: Πmod, N is a Paillier-Blum modulus
- no_small_factor: Πfac, N has no small factors
- ring_pedersen_parameters: Πprm, ring-Pedersen parameters are well formed
- fs_oracles: Fiat-Shamir transcript and challenge derivation
- serialization: canonical encoding of statements and proofs
- config: security parameters
- errors: error taxonomy
- crs, paillier, groups, utils: ring-Pedersen parameters and adapters

Usage:
------
    import random
    from paillier_zk import paillier_encryption_in_range as enc
    from paillier_zk.paillier import encrypt

    rng = random.SystemRandom()
    K, rho = encrypt(pk, k, rng)
    statement = enc.Statement(key=pk, ciphertext=K, aux=aux)
    proof = enc.prove(statement, enc.Witness(plaintext=k, nonce=rho), rng,
                      context=session_id)
    enc.verify(statement, proof, context=session_id)  # raises on failure
"""

__version__ = "0.1.0"

from .config import SecurityParams, config
from .crs import RingPedersenParams
from .errors import (
    InvalidStatement,
    MalformedProof,
    ProofError,
    SamplingFailed,
    VerificationFailed,
)

__all__ = [
    'SecurityParams',
    'config',
    'RingPedersenParams',
    'ProofError',
    'InvalidStatement',
    'SamplingFailed',
    'VerificationFailed',
    'MalformedProof',
]
