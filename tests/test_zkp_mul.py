import dataclasses
import logging

from cggmp_zk.common.numbers import sample_relatively_prime_integer
from cggmp_zk.zkp.mul import MulStatement, MulWitness, ProofMul, prove_mul, verify_mul


def test_wrong_product_rejected(mul_case):
    st = mul_case.statement
    other = dataclasses.replace(st, C=st.pk.homo_add(st.C, st.pk.encrypt(1)))
    assert not verify_mul(other, mul_case.proof)
    assert not verify_mul(other, prove_mul(other, mul_case.witness))


def test_out_of_range_response_rejected(mul_case, paillier0, caplog):
    # Shifting Z by a multiple of the group order keeps both relations intact.
    proof = mul_case.proof
    shift = int(paillier0.pub.n) * int(paillier0.priv.lambda_n)
    shifted = ProofMul(proof.A, proof.B, proof.Z + shift, proof.U, proof.V)
    caplog.set_level(logging.DEBUG, logger="cggmp_zk.zkp.base")
    assert not verify_mul(mul_case.statement, shifted)
    assert "Z out of range" in caplog.text


def test_non_unit_ciphertext_rejected(mul_case):
    st = dataclasses.replace(mul_case.statement, Y=0)
    assert not verify_mul(st, mul_case.proof)


def test_witness_for_other_key_rejected(mul_case, paillier1):
    st = dataclasses.replace(mul_case.statement, pk=paillier1.pub)
    assert not verify_mul(st, mul_case.proof)


def test_zero_multiplier(ec, paillier0):
    pk = paillier0.pub
    X, rho_x = pk.encrypt_and_return_randomness(0)
    Y = pk.encrypt(99)
    rho = sample_relatively_prime_integer(int(pk.n))
    C = pk.encrypt_with_randomness(0, rho)
    st = MulStatement(ssid=40, pk=pk, X=X, Y=Y, C=C, ec=ec)
    assert verify_mul(st, prove_mul(st, MulWitness(0, rho, rho_x)))
