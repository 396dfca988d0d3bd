"""
Shared fixtures. Prime generation dominates runtime, so keys and
Ring-Pedersen parameters are generated once per session.
"""

from dataclasses import dataclass
from typing import Any, Callable, Type
import copy
import secrets

import gmpy2
import pytest

from cggmp_zk.common.ec import DEFAULT_EC
from cggmp_zk.common.numbers import sample_relatively_prime_integer, sample_signed
from cggmp_zk.common.paillier import PrivateKey, PublicKey, generate_key_pair
from cggmp_zk.common.ring_pedersen import (
    PrimeMode,
    RingPedersenParams,
    RingPedersenWitness,
    generate_ring_pedersen,
)
from cggmp_zk.common.security import DEFAULT_LEVEL
from cggmp_zk.zkp.affg import AffgStatement, AffgWitness, ProofAffg, prove_affg, verify_affg
from cggmp_zk.zkp.base import Proof
from cggmp_zk.zkp.dec import DecStatement, DecWitness, ProofDec, prove_dec, verify_dec
from cggmp_zk.zkp.logstar import (
    LogstarStatement,
    LogstarWitness,
    ProofLogstar,
    prove_logstar,
    verify_logstar,
)
from cggmp_zk.zkp.mul import MulStatement, MulWitness, ProofMul, prove_mul, verify_mul
from cggmp_zk.zkp.mulstar import (
    MulstarStatement,
    MulstarWitness,
    ProofMulstar,
    prove_mulstar,
    verify_mulstar,
)


@dataclass
class PaillierKey:
    priv: PrivateKey
    pub: PublicKey
    p: int
    q: int


@pytest.fixture(scope="session")
def ec():
    return DEFAULT_EC


@pytest.fixture(scope="session")
def level():
    return DEFAULT_LEVEL


@pytest.fixture(scope="session")
def paillier0() -> PaillierKey:
    """The prover's 2048-bit Paillier key."""
    return PaillierKey(*generate_key_pair(DEFAULT_LEVEL.bits_paillier))


@pytest.fixture(scope="session")
def paillier1() -> PaillierKey:
    """A second party's 2048-bit Paillier key."""
    return PaillierKey(*generate_key_pair(DEFAULT_LEVEL.bits_paillier))


@pytest.fixture(scope="session")
def ring_pedersen():
    """Verifier's Ring-Pedersen parameters, normal primes, default level."""
    return generate_ring_pedersen(PrimeMode.NORMAL_PRIMES, DEFAULT_LEVEL)


@pytest.fixture(scope="session")
def aux(ring_pedersen) -> RingPedersenParams:
    return ring_pedersen[0]


@pytest.fixture(scope="session")
def aux_witness(ring_pedersen) -> RingPedersenWitness:
    return ring_pedersen[1]


@dataclass
class ProofCase:
    statement: Any
    witness: Any
    proof_cls: Type[Proof]
    prove: Callable
    verify: Callable
    proof: Proof = None


def _finish(case: ProofCase) -> ProofCase:
    case.proof = case.prove(case.statement, case.witness)
    return case


@pytest.fixture(scope="session")
def affg_case(ec, level, paillier0, paillier1, aux) -> ProofCase:
    # C lives under the verifier's key N0; Y under the prover's key N1.
    pk0, pk1 = paillier1.pub, paillier0.pub
    x = sample_signed(level.L)
    y = sample_signed(level.L_PRIME)
    C = pk0.encrypt(secrets.randbelow(int(pk0.n)))
    enc_y, rho = pk0.encrypt_signed(y)
    D = pk0.homo_add(pk0.homo_mult_signed(x, C), enc_y)
    Y, rho_y = pk1.encrypt_signed(y)
    st = AffgStatement(
        ssid=1, pk0=pk0, pk1=pk1, C=C, D=D, Y=Y, X=ec.scalar_mult(x), aux=aux, ec=ec
    )
    return _finish(
        ProofCase(st, AffgWitness(x, y, rho, rho_y), ProofAffg, prove_affg, verify_affg)
    )


@pytest.fixture(scope="session")
def dec_case(ec, level, paillier0, aux) -> ProofCase:
    pk0 = paillier0.pub
    y = sample_signed(level.L)
    C, rho = pk0.encrypt_signed(y)
    st = DecStatement(ssid=2, pk0=pk0, C=C, x=y % ec.n, aux=aux, ec=ec)
    return _finish(ProofCase(st, DecWitness(y, rho), ProofDec, prove_dec, verify_dec))


@pytest.fixture(scope="session")
def logstar_case(ec, level, paillier0, aux) -> ProofCase:
    pk0 = paillier0.pub
    x = sample_signed(level.L)
    C, rho = pk0.encrypt_signed(x)
    st = LogstarStatement(ssid=3, pk0=pk0, C=C, X=ec.scalar_mult(x), aux=aux, ec=ec)
    return _finish(
        ProofCase(st, LogstarWitness(x, rho), ProofLogstar, prove_logstar, verify_logstar)
    )


@pytest.fixture(scope="session")
def mul_case(ec, paillier0) -> ProofCase:
    pk = paillier0.pub
    n = int(pk.n)
    x = secrets.randbelow(n)
    X, rho_x = pk.encrypt_and_return_randomness(x)
    Y = pk.encrypt(secrets.randbelow(n))
    rho = sample_relatively_prime_integer(n)
    C = pk.homo_add(pk.homo_mult(x, Y), pk.encrypt_with_randomness(0, rho))
    st = MulStatement(ssid=4, pk=pk, X=X, Y=Y, C=C, ec=ec)
    return _finish(ProofCase(st, MulWitness(x, rho, rho_x), ProofMul, prove_mul, verify_mul))


@pytest.fixture(scope="session")
def mulstar_case(ec, level, paillier0, aux) -> ProofCase:
    pk0 = paillier0.pub
    x = sample_signed(level.L)
    C = pk0.encrypt(secrets.randbelow(int(pk0.n)))
    rho = sample_relatively_prime_integer(int(pk0.n))
    D = pk0.homo_add(pk0.homo_mult_signed(x, C), pk0.encrypt_with_randomness(0, rho))
    st = MulstarStatement(ssid=5, pk0=pk0, C=C, D=D, X=ec.scalar_mult(x), aux=aux, ec=ec)
    return _finish(
        ProofCase(st, MulstarWitness(x, rho), ProofMulstar, prove_mulstar, verify_mulstar)
    )


@pytest.fixture(params=["affg", "dec", "logstar", "mul", "mulstar"])
def proof_case(request) -> ProofCase:
    return request.getfixturevalue(f"{request.param}_case")


@pytest.fixture(scope="session")
def tamper(ec):
    """Returns a copy of a proof with one field nudged to a different value."""

    def _tamper(proof: Proof, name: str) -> Proof:
        bad = copy.copy(proof)
        value = getattr(proof, name)
        if isinstance(value, (int, gmpy2.mpz)):
            setattr(bad, name, value + 1)
        else:
            setattr(bad, name, ec.point_add(value, ec.G))
        return bad

    return _tamper
