"""
Ring-Pedersen Parameters
========================

The ring-Pedersen parameters (N̂, s, t) play the role of a common reference
string for the range proofs: integers are committed as

    commit(x, ρ) = s^x · t^ρ  (mod N̂)

which hides x statistically as long as s ∈ <t> and the factorization of N̂
is unknown to the prover. Their validity is proved with the
ring_pedersen_parameters proof; generating them is left to the caller.

Mathematical Notation:
----------------------
- N̂ is an RSA modulus (product of two safe primes in practice)
- t is a random quadratic residue mod N̂
- s = t^λ for a secret λ ∈ Z_φ(N̂)
"""

from dataclasses import dataclass

from .errors import InvalidStatement
from .utils import combine, is_unit


@dataclass(frozen=True)
class RingPedersenParams:
    """Auxiliary ring-Pedersen parameters shared by prover and verifier."""

    n_hat: int
    s: int
    t: int

    def validate(self) -> "RingPedersenParams":
        """
        Validate that the parameters are well-formed.

        Checks:
        - N̂ is an odd integer greater than 3
        - s and t are units of Z_N̂^*, distinct and different from 1

        Raises
        ------
        InvalidStatement
            If any check fails.
        """
        n_hat, s, t = self.n_hat, self.s, self.t
        if not isinstance(n_hat, int) or n_hat <= 3 or n_hat % 2 == 0:
            raise InvalidStatement("ring-Pedersen modulus must be odd and > 3")
        if not is_unit(s, n_hat) or not is_unit(t, n_hat):
            raise InvalidStatement("ring-Pedersen s and t must be units modulo N̂")
        if s == 1 or t == 1 or s == t:
            raise InvalidStatement("ring-Pedersen s and t must be distinct and != 1")
        return self

    def commit(self, value: int, randomness: int) -> int:
        """
        Ring-Pedersen commitment s^value · t^randomness mod N̂.

        Negative values are allowed (s and t are units).
        """
        return combine(self.s, value, self.t, randomness, self.n_hat)
