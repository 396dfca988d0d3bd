from concurrent.futures import ThreadPoolExecutor
import dataclasses

from ecdsa.ellipticcurve import INFINITY

from cggmp_zk.common.security import SecurityParameters
from cggmp_zk.zkp.logstar import LogstarStatement, LogstarWitness, prove_logstar, verify_logstar

WIDE_LEVEL = SecurityParameters(sec_param=512)


def test_custom_base_point(ec, paillier0, aux, logstar_case):
    g = ec.scalar_mult(ec.random_scalar())
    wit = logstar_case.witness
    st = LogstarStatement(
        ssid=30,
        pk0=paillier0.pub,
        C=logstar_case.statement.C,
        X=ec.scalar_mult(wit.x, g),
        aux=aux,
        g=g,
        ec=ec,
    )
    proof = prove_logstar(st, wit)
    assert verify_logstar(st, proof)
    # The same proof says nothing about the generator.
    assert not verify_logstar(dataclasses.replace(st, g=None), proof)


def test_identity_base_rejected(logstar_case):
    st = dataclasses.replace(logstar_case.statement, g=INFINITY)
    assert not verify_logstar(st, logstar_case.proof)


def test_oversized_x_rejected(ec, level, paillier0, aux):
    pk0 = paillier0.pub
    x = 1 << (level.L_PLUS_EPSILON + 8)
    C, rho = pk0.encrypt_signed(x)
    st = LogstarStatement(ssid=31, pk0=pk0, C=C, X=ec.scalar_mult(x), aux=aux, ec=ec)
    proof = prove_logstar(st, LogstarWitness(x, rho))
    assert not verify_logstar(st, proof, level)
    assert verify_logstar(st, proof, WIDE_LEVEL)


def test_mismatched_point_rejected(logstar_case, ec):
    st = logstar_case.statement
    other = dataclasses.replace(st, X=ec.point_add(st.X, ec.G))
    assert not verify_logstar(other, logstar_case.proof)
    assert not verify_logstar(other, prove_logstar(other, logstar_case.witness))


def test_concurrent_proving(logstar_case):
    st, wit = logstar_case.statement, logstar_case.witness
    with ThreadPoolExecutor(max_workers=4) as pool:
        proofs = list(pool.map(lambda _: prove_logstar(st, wit), range(4)))
    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(lambda p: verify_logstar(st, p), proofs))
    assert all(results)
    assert len({tuple(p.to_bytes_parts()) for p in proofs}) == 4


def test_base_point_is_part_of_statement(logstar_case, ec):
    st = logstar_case.statement
    assert dataclasses.replace(st, g=ec.scalar_mult(2)) != st
    assert dataclasses.replace(st) == st
