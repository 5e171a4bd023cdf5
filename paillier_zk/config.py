"""
Proof Configuration
===================

Security parameters shared by all proofs. Defaults can be overridden with
environment variables, the same way every deployment knob of this package is
set; the values below follow the CGGMP21 recommendations for a 256-bit curve.

- l:        declared plaintext bound 2^l (the curve order size)
- l_prime:  bound 2^l' for the additive term of the affine-operation proof
- epsilon:  statistical slack; masks are sampled from a range 2^epsilon larger
- mod_rounds / prm_rounds: parallel repetitions of the one-bit style proofs
- max_sampling_attempts: upper bound for every rejection-sampling loop
"""

import os
from dataclasses import dataclass, asdict

from .errors import InvalidStatement

# Default configuration
DEFAULT_L = int(os.getenv('PAILLIER_ZK_L', 256))
DEFAULT_L_PRIME = int(os.getenv('PAILLIER_ZK_L_PRIME', 1280))
DEFAULT_EPSILON = int(os.getenv('PAILLIER_ZK_EPSILON', 512))

DEFAULT_MOD_ROUNDS = int(os.getenv('PAILLIER_ZK_MOD_ROUNDS', 80))
DEFAULT_PRM_ROUNDS = int(os.getenv('PAILLIER_ZK_PRM_ROUNDS', 80))
DEFAULT_MAX_SAMPLING_ATTEMPTS = int(os.getenv('PAILLIER_ZK_MAX_SAMPLING_ATTEMPTS', 256))

DEFAULT_CURVE = os.getenv('PAILLIER_ZK_CURVE', 'SECP256k1')
DEFAULT_DOMAIN = os.getenv('PAILLIER_ZK_DOMAIN', 'paillier-zk/v1')

MAX_ROUNDS = 1024


@dataclass(frozen=True)
class SecurityParams:
    """
    Immutable snapshot of the security parameters used by one prove/verify call.

    The snapshot is encoded into every Fiat-Shamir transcript, so a prover and
    a verifier running with different parameters derive different challenges
    and the proof is rejected.
    """

    l: int = DEFAULT_L
    l_prime: int = DEFAULT_L_PRIME
    epsilon: int = DEFAULT_EPSILON
    mod_rounds: int = DEFAULT_MOD_ROUNDS
    prm_rounds: int = DEFAULT_PRM_ROUNDS
    max_sampling_attempts: int = DEFAULT_MAX_SAMPLING_ATTEMPTS
    curve_name: str = DEFAULT_CURVE
    domain: str = DEFAULT_DOMAIN

    def validate(self, challenge_bits: int = None) -> "SecurityParams":
        """
        Check the parameters for internal consistency.

        Parameters
        ----------
        challenge_bits : int, optional
            Size of the challenge space in bits. Completeness of the range
            proofs needs ``epsilon`` to exceed it.

        Raises
        ------
        InvalidStatement
            If any parameter is out of its admissible range.
        """
        for name in ('l', 'l_prime', 'epsilon', 'mod_rounds', 'prm_rounds',
                     'max_sampling_attempts'):
            if getattr(self, name) <= 0:
                raise InvalidStatement(f"security parameter {name} must be positive")
        if self.mod_rounds > MAX_ROUNDS or self.prm_rounds > MAX_ROUNDS:
            raise InvalidStatement(f"repetition count above {MAX_ROUNDS}")
        if challenge_bits is not None and self.epsilon <= challenge_bits:
            raise InvalidStatement(
                f"epsilon={self.epsilon} must exceed the challenge size ({challenge_bits} bits)"
            )
        return self

    def to_dict(self) -> dict:
        return asdict(self)


class Config:
    """Configuration holder"""

    def __init__(self):
        self.l = DEFAULT_L
        self.l_prime = DEFAULT_L_PRIME
        self.epsilon = DEFAULT_EPSILON
        self.mod_rounds = DEFAULT_MOD_ROUNDS
        self.prm_rounds = DEFAULT_PRM_ROUNDS
        self.max_sampling_attempts = DEFAULT_MAX_SAMPLING_ATTEMPTS
        self.curve_name = DEFAULT_CURVE
        self.domain = DEFAULT_DOMAIN

    def security_params(self) -> SecurityParams:
        return SecurityParams(
            l=self.l,
            l_prime=self.l_prime,
            epsilon=self.epsilon,
            mod_rounds=self.mod_rounds,
            prm_rounds=self.prm_rounds,
            max_sampling_attempts=self.max_sampling_attempts,
            curve_name=self.curve_name,
            domain=self.domain,
        )


# Global configuration instance
config = Config()


def resolve(params: SecurityParams = None) -> SecurityParams:
    """Return ``params`` or, when omitted, a snapshot of the global config."""
    if params is None:
        return config.security_params()
    if not isinstance(params, SecurityParams):
        raise InvalidStatement(f"expected SecurityParams, got {type(params).__name__}")
    return params
