"""
Paillier Adapter
================

Thin layer over ``phe`` (python-paillier). The proofs work on raw ciphertext
integers rather than ``phe.EncryptedNumber`` objects, because every check is
an equation over Z_{N^2} and needs explicit control over the nonce.

Encryption with an explicit nonce r:
    Enc(m, r) = (1 + N)^m · r^N  (mod N^2)
"""

from typing import Tuple

from phe import paillier

from .errors import InvalidStatement
from .utils import is_unit, mod_pow, sample_unit

PublicKey = paillier.PaillierPublicKey
PrivateKey = paillier.PaillierPrivateKey


def public_key(n: int) -> PublicKey:
    if not isinstance(n, int) or n <= 2:
        raise InvalidStatement("Paillier modulus must be an integer > 2")
    return paillier.PaillierPublicKey(n)


def private_key(p: int, q: int) -> PrivateKey:
    """Build a private key from known primes (test and pregeneration helper)."""
    return paillier.PaillierPrivateKey(public_key(p * q), p, q)


def check_public_key(pk) -> None:
    if not isinstance(pk, PublicKey):
        raise InvalidStatement(f"expected a Paillier public key, got {type(pk).__name__}")
    if pk.n <= 2 or pk.n % 2 == 0:
        raise InvalidStatement("Paillier modulus must be odd and > 2")


def encrypt_with_nonce(pk: PublicKey, plaintext: int, nonce: int) -> int:
    """
    Encrypt ``plaintext`` with the given nonce.

    The plaintext may exceed N (responses such as z1 = α + e·x do), since
    (1 + N)^m only depends on m mod N.

    Raises
    ------
    InvalidStatement
        If the nonce is not a unit modulo N. ``phe`` would silently replace
        a zero nonce by a random one, so this is checked before delegating.
    """
    if not is_unit(nonce, pk.n):
        raise InvalidStatement("Paillier nonce must be a unit modulo N")
    return pk.raw_encrypt(int(plaintext), r_value=int(nonce))


def encrypt(pk: PublicKey, plaintext: int, rng, attempts: int = 256) -> Tuple[int, int]:
    """Encrypt with a fresh nonce drawn from ``rng``; returns (ciphertext, nonce)."""
    nonce = sample_unit(rng, pk.n, attempts)
    return encrypt_with_nonce(pk, plaintext, nonce), nonce


def decrypt(sk: PrivateKey, ciphertext: int) -> int:
    return sk.raw_decrypt(ciphertext)


def add(pk: PublicKey, c1: int, c2: int) -> int:
    """Homomorphic addition: Enc(m1)·Enc(m2) = Enc(m1 + m2)."""
    return (c1 * c2) % pk.nsquare


def mul(pk: PublicKey, ciphertext: int, scalar: int) -> int:
    """Homomorphic scalar multiplication: Enc(m)^k = Enc(k·m)."""
    return mod_pow(ciphertext, scalar, pk.nsquare)


def affine(pk: PublicKey, ciphertext: int, multiplier: int, addend: int) -> int:
    """
    Homomorphic affine operation D = C^x · Y (mod N^2).

    This is the multiplicative-to-additive step: a party holding x turns an
    encryption of c into an encryption of x·c + y.
    """
    return add(pk, mul(pk, ciphertext, multiplier), addend)


def is_valid_ciphertext(pk: PublicKey, ciphertext: int) -> bool:
    return is_unit(ciphertext, pk.nsquare)
