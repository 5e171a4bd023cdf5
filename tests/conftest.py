"""
Shared fixtures: Blum primes, Paillier keys and ring-Pedersen parameters.

Primes are 512 bits so that the whole suite runs in seconds; everything is
derived from seeded ``random.Random`` instances, so runs are reproducible.
"""

import random

import gmpy2
import pytest

from paillier_zk.crs import RingPedersenParams
from paillier_zk.paillier import public_key


def blum_prime(rng: random.Random, bits: int = 512) -> int:
    """Random prime p ≡ 3 (mod 4) with the top bit set."""
    while True:
        candidate = int(gmpy2.next_prime(rng.getrandbits(bits) | (1 << (bits - 1))))
        if candidate % 4 == 3:
            return candidate


def blum_pair(rng: random.Random, bits: int = 512):
    p = blum_prime(rng, bits)
    q = blum_prime(rng, bits)
    while q == p:
        q = blum_prime(rng, bits)
    return p, q


def ring_pedersen(rng: random.Random, bits: int = 512):
    """Return (RingPedersenParams, λ, φ(N̂)) with t a square and s = t^λ."""
    p, q = blum_pair(rng, bits)
    n_hat = p * q
    phi = (p - 1) * (q - 1)
    while True:
        r = rng.randrange(2, n_hat)
        if gmpy2.gcd(r, n_hat) == 1:
            break
    t = int(gmpy2.powmod(r, 2, n_hat))
    lam = rng.randrange(1, phi)
    s = int(gmpy2.powmod(t, lam, n_hat))
    return RingPedersenParams(n_hat=n_hat, s=s, t=t), lam, phi


@pytest.fixture
def rng():
    """Fresh seeded randomness source for each test."""
    return random.Random(0xC66)


@pytest.fixture(scope="session")
def primes():
    """Blum primes (p, q) of the prover's Paillier key."""
    return blum_pair(random.Random(1))


@pytest.fixture(scope="session")
def pk(primes):
    p, q = primes
    return public_key(p * q)


@pytest.fixture(scope="session")
def other_pk():
    """A second Paillier key, the receiver's key N0 in the affine proof."""
    p, q = blum_pair(random.Random(2))
    return public_key(p * q)


@pytest.fixture(scope="session")
def aux_setup():
    return ring_pedersen(random.Random(3))


@pytest.fixture(scope="session")
def aux(aux_setup):
    """Verifier's ring-Pedersen parameters."""
    return aux_setup[0]


@pytest.fixture(scope="session")
def non_blum_factors():
    """(p, q) with p ≡ 3 and q ≡ 1 (mod 4): a valid RSA modulus but not a Blum one."""
    rng = random.Random(4)
    p = blum_prime(rng, 256)
    while True:
        q = int(gmpy2.next_prime(rng.getrandbits(256) | (1 << 255)))
        if q % 4 == 1:
            return p, q
