"""
Test Suite for the Affine-Operation Proof (Πaff-g)
==================================================

The receiver's key N0 encrypts C; the prover, holding N1, answers with
D = C^x · Enc_N0(y) and proves it with Y = Enc_N1(y) and X = x·g.
"""

import dataclasses

import pytest

from paillier_zk import groups
from paillier_zk import paillier_affine_operation_in_range as aff_g
from paillier_zk.config import SecurityParams
from paillier_zk.errors import InvalidStatement, VerificationFailed
from paillier_zk.paillier import affine, encrypt
from paillier_zk.serialization import dumps, loads


def _instance(key0, key1, aux, x, y, rng, base=None):
    g = groups.setup('SECP256k1')['generator'] if base is None else base
    c, _ = encrypt(key0, rng.getrandbits(256), rng)
    enc_y, nonce = encrypt(key0, y, rng)
    d = affine(key0, c, x, enc_y)
    big_y, nonce_y = encrypt(key1, y, rng)
    statement = aff_g.Statement(
        key0=key0, key1=key1, c=c, d=d, y=big_y, x=groups.scalar_mult(g, x), aux=aux,
        base=base,
    )
    return statement, aff_g.Witness(x=x, y=y, nonce=nonce, nonce_y=nonce_y)


@pytest.fixture
def instance(other_pk, pk, aux, rng):
    statement, witness = _instance(other_pk, pk, aux, rng.getrandbits(255),
                                   rng.getrandbits(1000), rng)
    proof = aff_g.prove(statement, witness, rng, context=b"presign-7")
    return statement, witness, proof


def _tamper(proof, part, **changes):
    return dataclasses.replace(
        proof, **{part: dataclasses.replace(getattr(proof, part), **changes)}
    )


# ============================================================================
# Completeness
# ============================================================================

def test_honest_proof_verifies(instance):
    statement, _, proof = instance
    aff_g.verify(statement, proof, context=b"presign-7")


def test_extreme_values_in_range(other_pk, pk, aux, rng):
    params = SecurityParams()
    statement, witness = _instance(other_pk, pk, aux, (1 << params.l) - 1,
                                   (1 << params.l_prime) - 1, rng)
    proof = aff_g.prove(statement, witness, rng)
    aff_g.verify(statement, proof)


def test_custom_base_point(other_pk, pk, aux, rng):
    base = groups.scalar_mult(groups.setup('SECP256k1')['generator'], 424242)
    statement, witness = _instance(other_pk, pk, aux, 777, 888, rng, base=base)
    proof = aff_g.prove(statement, witness, rng, context=b"presign-7")
    aff_g.verify(statement, proof, context=b"presign-7")
    with pytest.raises(VerificationFailed):
        aff_g.verify(dataclasses.replace(statement, base=None), proof, context=b"presign-7")


def test_identity_base_is_invalid(instance):
    statement, _, proof = instance
    with pytest.raises(InvalidStatement):
        aff_g.verify(dataclasses.replace(statement, base=groups.INFINITY), proof,
                     context=b"presign-7")


# ============================================================================
# Soundness checks
# ============================================================================

def test_multiplier_at_bound_is_rejected(other_pk, pk, aux, rng):
    statement, witness = _instance(other_pk, pk, aux, 1 << SecurityParams().l, 5, rng)
    with pytest.raises(InvalidStatement):
        aff_g.prove(statement, witness, rng)


def test_additive_term_at_bound_is_rejected(other_pk, pk, aux, rng):
    statement, witness = _instance(other_pk, pk, aux, 5, 1 << SecurityParams().l_prime, rng)
    with pytest.raises(InvalidStatement):
        aff_g.prove(statement, witness, rng)


def test_inconsistent_witness_is_rejected(instance, rng):
    statement, witness, _ = instance
    with pytest.raises(InvalidStatement):
        aff_g.prove(statement, dataclasses.replace(witness, y=witness.y + 1), rng)


def test_wrong_context_is_rejected(instance):
    statement, _, proof = instance
    with pytest.raises(VerificationFailed):
        aff_g.verify(statement, proof, context=b"presign-8")


def test_swapped_keys_are_rejected(instance):
    statement, _, proof = instance
    swapped = dataclasses.replace(statement, key0=statement.key1, key1=statement.key0)
    with pytest.raises((InvalidStatement, VerificationFailed)):
        aff_g.verify(swapped, proof, context=b"presign-7")


@pytest.mark.parametrize("field", ["e", "s", "f", "t"])
def test_tampered_ring_pedersen_commitment_is_rejected(instance, field):
    statement, _, proof = instance
    value = getattr(proof.commitment, field)
    tampered = _tamper(proof, "commitment", **{field: (value * 2) % statement.aux.n_hat})
    with pytest.raises(VerificationFailed):
        aff_g.verify(statement, tampered, context=b"presign-7")


def test_tampered_ciphertext_commitments_are_rejected(instance):
    statement, _, proof = instance
    comm = proof.commitment
    for changes in ({"a": (comm.a * 2) % statement.key0.nsquare},
                    {"b_y": (comm.b_y * 2) % statement.key1.nsquare}):
        with pytest.raises(VerificationFailed):
            aff_g.verify(statement, _tamper(proof, "commitment", **changes),
                         context=b"presign-7")


def test_tampered_group_commitment_is_rejected(instance):
    statement, _, proof = instance
    g = groups.setup('SECP256k1')['generator']
    moved = groups.point_add(proof.commitment.b_x, g)
    with pytest.raises(VerificationFailed):
        aff_g.verify(statement, _tamper(proof, "commitment", b_x=moved), context=b"presign-7")


@pytest.mark.parametrize("field", ["z1", "z2", "z3", "z4"])
def test_tampered_integer_response_is_rejected(instance, field):
    statement, _, proof = instance
    value = getattr(proof.response, field)
    with pytest.raises(VerificationFailed):
        aff_g.verify(statement, _tamper(proof, "response", **{field: value + 1}),
                     context=b"presign-7")


def test_tampered_nonce_responses_are_rejected(instance):
    statement, _, proof = instance
    resp = proof.response
    for changes in ({"w": (resp.w * 2) % statement.key0.n},
                    {"w_y": (resp.w_y * 2) % statement.key1.n}):
        with pytest.raises(VerificationFailed):
            aff_g.verify(statement, _tamper(proof, "response", **changes),
                         context=b"presign-7")


def test_out_of_range_z2_is_rejected(instance):
    statement, _, proof = instance
    params = SecurityParams()
    tampered = _tamper(proof, "response", z2=(1 << (params.l_prime + params.epsilon)) + 1)
    with pytest.raises(VerificationFailed) as exc:
        aff_g.verify(statement, tampered, context=b"presign-7")
    assert exc.value.check == "z2-range"


# ============================================================================
# Encoding
# ============================================================================

def test_round_trip(instance):
    statement, _, proof = instance
    decoded_statement = loads(aff_g.Statement, dumps(statement), error=InvalidStatement)
    decoded_proof = loads(aff_g.Proof, dumps(proof))
    aff_g.verify(decoded_statement, decoded_proof, context=b"presign-7")


def test_responses_are_plain_ints(instance):
    statement, _, proof = instance
    for f in dataclasses.fields(proof.response):
        assert type(getattr(proof.response, f.name)) is int
    aff_g.verify(statement, loads(aff_g.Proof, dumps(proof)), context=b"presign-7")
