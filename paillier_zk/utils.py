"""
Utility Functions
=================

This module wraps the arbitrary-precision integer operations every proof
needs, on top of gmpy2.

Key Operations:
- Two-base exponentiation: compute a^x · b^y mod m (ring-Pedersen and
  Paillier equations all have this shape)
- Unit checks and interval checks used by the verifiers
- Bounded rejection sampling driven by a caller-supplied randomness source
- Square and fourth roots modulo Blum primes

All functions take and return plain Python ints; gmpy2 is used internally.
"""

import logging

import gmpy2

from .errors import InvalidStatement, SamplingFailed, VerificationFailed

logger = logging.getLogger(__name__)


def mod_pow(base: int, exponent: int, modulus: int) -> int:
    """
    Compute base^exponent mod modulus, allowing negative exponents.

    Raises
    ------
    InvalidStatement
        If the exponent is negative and base is not invertible.
    """
    if exponent < 0:
        base = mod_inverse(base, modulus)
        exponent = -exponent
    return int(gmpy2.powmod(base, exponent, modulus))


def mod_inverse(value: int, modulus: int) -> int:
    try:
        return int(gmpy2.invert(value, modulus))
    except ZeroDivisionError:
        raise InvalidStatement(f"value is not invertible modulo a {bit_length(modulus)}-bit modulus")


def combine(a: int, x: int, b: int, y: int, modulus: int) -> int:
    """
    Compute a^x · b^y mod modulus.

    Formula:
    --------
    result = a^x · b^y (mod m)

    This is the shape of every ring-Pedersen commitment (s^x · t^y mod N̂)
    and of every Paillier response check.

    Examples
    --------
    >>> combine(2, 3, 3, 2, 1000)
    72
    """
    return (mod_pow(a, x, modulus) * mod_pow(b, y, modulus)) % modulus


def gcd(a: int, b: int) -> int:
    return int(gmpy2.gcd(a, b))


def jacobi(value: int, modulus: int) -> int:
    """Jacobi symbol (value | modulus) for an odd positive modulus."""
    if modulus <= 0 or modulus % 2 == 0:
        raise InvalidStatement("Jacobi symbol needs an odd positive modulus")
    return int(gmpy2.jacobi(value % modulus, modulus))


def is_prime(value: int) -> bool:
    return value > 1 and bool(gmpy2.is_prime(value, 50))


def isqrt(value: int) -> int:
    return int(gmpy2.isqrt(value))


def bit_length(value: int) -> int:
    return int(value).bit_length()


def is_unit(value: int, modulus: int) -> bool:
    """True iff 0 < value < modulus and gcd(value, modulus) == 1."""
    if not isinstance(value, int) or not 0 < value < modulus:
        return False
    return gcd(value, modulus) == 1


def check_units(modulus: int, *values: int) -> bool:
    return all(is_unit(v, modulus) for v in values)


def in_interval(value: int, bound: int) -> bool:
    """True iff 0 <= value <= bound."""
    return isinstance(value, int) and 0 <= value <= bound


def sample_below(rng, bound: int) -> int:
    """
    Sample uniformly from [0, bound) with the caller's randomness source.

    Parameters
    ----------
    rng : random.Random
        Any object with a ``randrange`` method; ``random.SystemRandom()``
        in production, a seeded ``random.Random`` in tests.
    bound : int
        Exclusive upper bound, must be positive.
    """
    if bound <= 0:
        raise InvalidStatement("sampling bound must be positive")
    return rng.randrange(bound)


def sample_unit(rng, modulus: int, attempts: int) -> int:
    """
    Sample uniformly from Z_modulus^* by rejection.

    Raises
    ------
    SamplingFailed
        If no unit was drawn within ``attempts`` tries, which for an honest
        modulus happens with negligible probability.
    """
    if modulus <= 2:
        raise InvalidStatement("modulus too small to sample a unit")
    for _ in range(attempts):
        candidate = 1 + rng.randrange(modulus - 1)
        if gcd(candidate, modulus) == 1:
            return candidate
    logger.warning("unit sampling exhausted %d attempts", attempts)
    raise SamplingFailed("unit", attempts)


def sample_with_jacobi(rng, modulus: int, symbol: int, attempts: int) -> int:
    """
    Sample a unit w of Z_modulus^* with Jacobi symbol (w | modulus) == symbol.

    Raises
    ------
    SamplingFailed
        For a perfect square modulus no unit has symbol -1, so the loop is
        bounded and fails explicitly instead of spinning.
    """
    for _ in range(attempts):
        candidate = 1 + rng.randrange(modulus - 1)
        if gcd(candidate, modulus) == 1 and jacobi(candidate, modulus) == symbol:
            return candidate
    logger.warning("Jacobi(%d) sampling exhausted %d attempts", symbol, attempts)
    raise SamplingFailed(f"unit with Jacobi symbol {symbol}", attempts)


def is_quadratic_residue(value: int, prime: int) -> bool:
    """Euler criterion: value^((p-1)/2) == 1 mod p."""
    return mod_pow(value % prime, (prime - 1) // 2, prime) == 1


def crt(residue_p: int, p: int, residue_q: int, q: int) -> int:
    """Combine residues modulo coprime p and q into one modulo p·q."""
    q_inv = mod_inverse(q, p)
    h = ((residue_p - residue_q) * q_inv) % p
    return residue_q + h * q


def fourth_root(value: int, p: int, q: int) -> int:
    """
    Fourth root of ``value`` modulo p·q for Blum primes p, q.

    ``value`` must be a quadratic residue modulo both primes. Modulo a prime
    p ≡ 3 (mod 4) the square root of a residue y is y^((p+1)/4), and every
    power of a residue is again a residue, so y^(((p+1)/4)^2) is a fourth
    root.
    """
    root_p = mod_pow(value % p, ((p + 1) // 4) ** 2, p)
    root_q = mod_pow(value % q, ((q + 1) // 4) ** 2, q)
    return crt(root_p, p, root_q, q)


def require(condition: bool, check: str, detail: str = "") -> None:
    """
    Raise VerificationFailed naming ``check`` unless ``condition`` holds.

    Verifiers call this for every equation and range check, in order, so the
    first failing check is the one reported.
    """
    if not condition:
        logger.debug("verification check %s failed %s", check, detail)
        raise VerificationFailed(check, detail)
