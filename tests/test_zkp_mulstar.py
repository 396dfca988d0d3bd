import dataclasses

import pytest

from cggmp_zk.common.errors import ProofConstructionFailure
from cggmp_zk.common.security import SecurityParameters
from cggmp_zk.zkp.mulstar import MulstarStatement, MulstarWitness, prove_mulstar, verify_mulstar

WIDE_LEVEL = SecurityParameters(sec_param=512)


def test_oversized_x_rejected(ec, level, paillier0, aux, mulstar_case):
    pk0 = paillier0.pub
    C = mulstar_case.statement.C
    x = -(1 << (level.L_PLUS_EPSILON + 8))
    rho = mulstar_case.witness.rho
    D = pk0.homo_add(pk0.homo_mult_signed(x, C), pk0.encrypt_with_randomness(0, rho))
    st = MulstarStatement(ssid=50, pk0=pk0, C=C, D=D, X=ec.scalar_mult(x), aux=aux, ec=ec)
    proof = prove_mulstar(st, MulstarWitness(x, rho))
    assert not verify_mulstar(st, proof, level)
    assert verify_mulstar(st, proof, WIDE_LEVEL)


def test_non_unit_ciphertext_fails_construction(mulstar_case):
    st = dataclasses.replace(mulstar_case.statement, C=int(mulstar_case.statement.pk0.n))
    with pytest.raises(ProofConstructionFailure):
        prove_mulstar(st, mulstar_case.witness)
    assert not verify_mulstar(st, mulstar_case.proof)


def test_other_aux_rejected(mulstar_case):
    st = mulstar_case.statement
    aux = dataclasses.replace(st.aux, s=st.aux.t, t=st.aux.s)
    assert not verify_mulstar(dataclasses.replace(st, aux=aux), mulstar_case.proof)


def test_degenerate_aux_rejected(mulstar_case):
    st = mulstar_case.statement
    aux = dataclasses.replace(st.aux, t=st.aux.s)
    assert not verify_mulstar(dataclasses.replace(st, aux=aux), mulstar_case.proof)
