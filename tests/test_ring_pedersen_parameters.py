"""
Test Suite for the Ring-Pedersen Parameter Proof (Πprm)
=======================================================
"""

import dataclasses

import pytest

from paillier_zk import ring_pedersen_parameters as prm
from paillier_zk.config import SecurityParams
from paillier_zk.crs import RingPedersenParams
from paillier_zk.errors import InvalidStatement, MalformedProof, VerificationFailed
from paillier_zk.serialization import dumps, loads


@pytest.fixture
def instance(aux_setup, rng):
    aux, lam, phi = aux_setup
    statement = prm.Statement(aux=aux)
    proof = prm.prove(statement, prm.Witness(lambda_=lam, phi=phi), rng, context=b"setup")
    return statement, proof


def test_honest_proof_verifies(instance):
    statement, proof = instance
    prm.verify(statement, proof, context=b"setup")


def test_witness_is_hidden_from_repr(aux_setup):
    _, lam, phi = aux_setup
    assert str(lam) not in repr(prm.Witness(lambda_=lam, phi=phi))


def test_wrong_lambda_is_rejected(aux_setup, rng):
    aux, lam, phi = aux_setup
    with pytest.raises(InvalidStatement):
        prm.prove(prm.Statement(aux=aux), prm.Witness(lambda_=lam + 1, phi=phi), rng)


def test_invalid_parameters_are_rejected(instance):
    statement, proof = instance
    aux = statement.aux
    bad = prm.Statement(aux=RingPedersenParams(n_hat=aux.n_hat, s=aux.t, t=aux.t))
    with pytest.raises(InvalidStatement):
        prm.verify(bad, proof, context=b"setup")


def test_wrong_context_is_rejected(instance):
    statement, proof = instance
    with pytest.raises(VerificationFailed):
        prm.verify(statement, proof, context=b"setup-2")


def test_swapped_generators_are_rejected(instance):
    statement, proof = instance
    aux = statement.aux
    swapped = prm.Statement(aux=RingPedersenParams(n_hat=aux.n_hat, s=aux.t, t=aux.s))
    with pytest.raises(VerificationFailed):
        prm.verify(swapped, proof, context=b"setup")


def test_tampered_response_is_rejected(instance):
    statement, proof = instance
    z = list(proof.response.z)
    z[0] += 1
    tampered = dataclasses.replace(proof, response=prm.Response(z=z))
    with pytest.raises(VerificationFailed):
        prm.verify(statement, tampered, context=b"setup")


def test_negative_response_is_rejected(instance):
    statement, proof = instance
    z = list(proof.response.z)
    z[5] = -z[5]
    tampered = dataclasses.replace(proof, response=prm.Response(z=z))
    with pytest.raises(VerificationFailed) as exc:
        prm.verify(statement, tampered, context=b"setup")
    assert exc.value.check == "z-range"


def test_non_unit_commitment_is_rejected(instance):
    statement, proof = instance
    a = list(proof.commitment.a)
    a[1] = 0
    tampered = dataclasses.replace(proof, commitment=prm.Commitment(a=a))
    with pytest.raises(VerificationFailed) as exc:
        prm.verify(statement, tampered, context=b"setup")
    assert exc.value.check == "commitment-units"


def test_wrong_length_is_malformed(instance):
    statement, proof = instance
    tampered = dataclasses.replace(proof, response=prm.Response(z=proof.response.z + [1]))
    with pytest.raises(MalformedProof):
        prm.verify(statement, tampered, context=b"setup")


def test_round_count_mismatch_is_invalid(instance):
    statement, proof = instance
    with pytest.raises(InvalidStatement):
        prm.verify(statement, proof, context=b"setup", params=SecurityParams(prm_rounds=16))


def test_round_trip(instance):
    statement, proof = instance
    decoded = loads(prm.Proof, dumps(proof))
    assert decoded == proof
    prm.verify(statement, decoded, context=b"setup")
