"""
Test Suite for the No-Small-Factor Proof (Πfac)
===============================================
"""

import dataclasses

import pytest

from paillier_zk import no_small_factor as fac
from paillier_zk.config import SecurityParams
from paillier_zk.errors import InvalidStatement, VerificationFailed
from paillier_zk.serialization import dumps, loads
from paillier_zk.utils import isqrt


@pytest.fixture
def instance(primes, aux, rng):
    p, q = primes
    statement = fac.Statement(n=p * q, aux=aux)
    proof = fac.prove(statement, fac.Witness(p=p, q=q), rng, context=b"refresh")
    return statement, proof


def _tamper(proof, part, **changes):
    return dataclasses.replace(
        proof, **{part: dataclasses.replace(getattr(proof, part), **changes)}
    )


def test_honest_proof_verifies(instance):
    statement, proof = instance
    fac.verify(statement, proof, context=b"refresh")


def test_factor_order_does_not_matter(primes, aux, rng):
    p, q = primes
    statement = fac.Statement(n=p * q, aux=aux)
    fac.verify(statement, fac.prove(statement, fac.Witness(p=q, q=p), rng))


def test_trivial_factorization_is_rejected(primes, aux, rng):
    p, q = primes
    statement = fac.Statement(n=p * q, aux=aux)
    with pytest.raises(InvalidStatement):
        fac.prove(statement, fac.Witness(p=1, q=p * q), rng)


def test_wrong_factorization_is_rejected(primes, aux, rng):
    p, q = primes
    with pytest.raises(InvalidStatement):
        fac.prove(fac.Statement(n=p * q, aux=aux), fac.Witness(p=p, q=q + 2), rng)


def test_even_modulus_is_invalid(instance):
    statement, proof = instance
    with pytest.raises(InvalidStatement):
        fac.verify(dataclasses.replace(statement, n=statement.n * 2), proof)


def test_wrong_context_is_rejected(instance):
    statement, proof = instance
    with pytest.raises(VerificationFailed):
        fac.verify(statement, proof, context=b"refresh-2")


def test_other_modulus_is_rejected(instance, other_pk):
    statement, proof = instance
    with pytest.raises(VerificationFailed):
        fac.verify(dataclasses.replace(statement, n=other_pk.n), proof, context=b"refresh")


@pytest.mark.parametrize("field", ["p", "q", "a", "b", "t"])
def test_tampered_commitment_is_rejected(instance, field):
    statement, proof = instance
    value = getattr(proof.commitment, field)
    tampered = _tamper(proof, "commitment", **{field: (value * 2) % statement.aux.n_hat})
    with pytest.raises(VerificationFailed):
        fac.verify(statement, tampered, context=b"refresh")


def test_tampered_sigma_is_rejected(instance):
    statement, proof = instance
    tampered = _tamper(proof, "commitment", sigma=proof.commitment.sigma + 1)
    with pytest.raises(VerificationFailed):
        fac.verify(statement, tampered, context=b"refresh")


@pytest.mark.parametrize("field", ["z1", "z2", "w1", "w2", "v"])
def test_tampered_response_is_rejected(instance, field):
    statement, proof = instance
    value = getattr(proof.response, field)
    with pytest.raises(VerificationFailed):
        fac.verify(statement, _tamper(proof, "response", **{field: value + 1}),
                   context=b"refresh")


def test_oversized_factor_response_is_rejected(instance):
    statement, proof = instance
    params = SecurityParams()
    bound = (1 << (params.l + params.epsilon)) * isqrt(statement.n)
    with pytest.raises(VerificationFailed) as exc:
        fac.verify(statement, _tamper(proof, "response", z2=bound + 1), context=b"refresh")
    assert exc.value.check == "z2-range"


def test_round_trip(instance):
    statement, proof = instance
    decoded = loads(fac.Proof, dumps(proof))
    assert decoded == proof
    fac.verify(loads(fac.Statement, dumps(statement), error=InvalidStatement), decoded,
               context=b"refresh")


def test_responses_are_plain_ints(instance):
    statement, proof = instance
    for f in dataclasses.fields(proof.response):
        assert type(getattr(proof.response, f.name)) is int
    fac.verify(statement, loads(fac.Proof, dumps(proof)), context=b"refresh")
