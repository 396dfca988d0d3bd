"""
Paillier decryption modulo q (Dec), CGGMP21 Figure 28.

Proves that the ciphertext C = (1+N0)^y * rho^N0 mod N0^2 decrypts to a y
with y = x (mod q), for a public x, without revealing y.
"""

from dataclasses import dataclass, field
from typing import List
import gmpy2

from cggmp_zk.common.ec import DEFAULT_EC, ECOperations
from cggmp_zk.common.numbers import (
    bytes_to_int,
    bytes_to_signed_int,
    check_invertible_and_valid_mod,
    int_to_bytes,
    is_in_interval,
    is_in_signed_range,
    sample_relatively_prime_integer,
    sample_signed,
    sample_signed_scaled,
    signed_int_to_bytes,
)
from cggmp_zk.common.paillier import PublicKey
from cggmp_zk.common.ring_pedersen import RingPedersenParams
from cggmp_zk.common.security import DEFAULT_LEVEL, SecurityParameters
from cggmp_zk.zkp.base import Proof, prod_pow, register, require_unit, rp_commit
from cggmp_zk.zkp.hash import challenge

ProofDecBytesParts = 7


@dataclass(frozen=True)
class DecStatement:
    ssid: int
    pk0: PublicKey
    C: int
    # Claimed decryption of C reduced mod q.
    x: int
    aux: RingPedersenParams
    ec: ECOperations = field(default=DEFAULT_EC, compare=False)


@dataclass(frozen=True, repr=False)
class DecWitness:
    y: int
    rho: int


def _challenge(st: DecStatement, S, T, A, gamma) -> int:
    return challenge(
        st.ec.n,
        ProofDec.TAG,
        st.ssid,
        *st.ec.hash_inputs(),
        st.pk0.n,
        *st.aux.hash_inputs(),
        st.C,
        st.x,
        S,
        T,
        A,
        gamma,
    )


@register(DecStatement)
class ProofDec(Proof):
    """Commitments (S, T, A, Gamma) and responses (Z1, Z2, W)."""

    TAG = b"cggmp-zk/dec"
    witness_type = DecWitness

    def __init__(self, S: int, T: int, A: int, Gamma: int, Z1: int, Z2: int, W: int):
        self.S = S
        self.T = T
        self.A = A
        self.Gamma = Gamma
        self.Z1 = Z1
        self.Z2 = Z2
        self.W = W

    @classmethod
    def _new_proof(cls, st: DecStatement, wit: DecWitness, level: SecurityParameters) -> "ProofDec":
        q = st.ec.n
        N0, NSq0, gamma0 = map(gmpy2.mpz, (st.pk0.n, st.pk0.n_square, st.pk0.gamma))
        aux = st.aux

        alpha = sample_signed(level.L_PLUS_EPSILON)
        mu = sample_signed_scaled(level.L, aux.N)
        nu = sample_signed_scaled(level.L_PLUS_EPSILON, aux.N)
        r = sample_relatively_prime_integer(int(N0))

        S = rp_commit(aux, wit.y, mu, "S")
        T = rp_commit(aux, alpha, nu, "T")
        A = require_unit(prod_pow(NSq0, (gamma0, alpha), (r, N0)), "A")
        gamma = alpha % q

        e = _challenge(st, S, T, A, gamma)

        z1 = alpha + e * wit.y
        z2 = nu + e * mu
        w = require_unit(prod_pow(N0, (wit.rho, e), (r, 1)), "w")

        return ProofDec(S, T, A, gamma, z1, z2, w)

    @staticmethod
    def from_bytes(parts: List[bytes]) -> "ProofDec":
        if not parts or len(parts) != ProofDecBytesParts:
            raise ValueError(f"expected {ProofDecBytesParts} byte parts to construct ProofDec")
        return ProofDec(
            bytes_to_int(parts[0]),
            bytes_to_int(parts[1]),
            bytes_to_int(parts[2]),
            bytes_to_int(parts[3]),
            bytes_to_signed_int(parts[4]),
            bytes_to_signed_int(parts[5]),
            bytes_to_int(parts[6]),
        )

    def to_bytes_parts(self) -> List[bytes]:
        return [
            int_to_bytes(self.S),
            int_to_bytes(self.T),
            int_to_bytes(self.A),
            int_to_bytes(self.Gamma),
            signed_int_to_bytes(self.Z1),
            signed_int_to_bytes(self.Z2),
            int_to_bytes(self.W),
        ]

    def _verify(self, st: DecStatement, level: SecurityParameters) -> bool:
        q = st.ec.n
        N0, NSq0, gamma0 = map(gmpy2.mpz, (st.pk0.n, st.pk0.n_square, st.pk0.gamma))
        aux = st.aux

        if not aux.validate_basic():
            return self.reject("invalid Ring-Pedersen parameters")
        if not check_invertible_and_valid_mod(NSq0, st.C):
            return self.reject("C is not a unit mod N0^2")
        if not is_in_interval(st.x, q):
            return self.reject("x is not reduced mod q")

        if not is_in_signed_range(self.Z1, level.L_PLUS_EPSILON):
            return self.reject("Z1 out of range")
        if not is_in_interval(self.Gamma, q):
            return self.reject("Gamma is not reduced mod q")
        if not check_invertible_and_valid_mod(NSq0, self.A):
            return self.reject("A is not a unit mod N0^2")
        if not check_invertible_and_valid_mod(N0, self.W):
            return self.reject("W is not a unit mod N0")
        if not check_invertible_and_valid_mod(aux.N, self.S, self.T):
            return self.reject("S or T is not a unit mod NCap")

        e = _challenge(st, self.S, self.T, self.A, self.Gamma)

        # (1+N0)^Z1 * W^N0 == A * C^e (mod N0^2)
        left1 = prod_pow(NSq0, (gamma0, self.Z1), (self.W, N0))
        right1 = prod_pow(NSq0, (self.A, 1), (st.C, e))
        if left1 == 0 or left1 != right1:
            return self.reject("Paillier relation does not hold")

        # Z1 == Gamma + e*x (mod q)
        if (self.Z1 - self.Gamma - e * st.x) % q != 0:
            return self.reject("plaintext does not match x mod q")

        # s^Z1 * t^Z2 == T * S^e (mod NCap)
        left3 = aux.commit(self.Z1, self.Z2)
        right3 = prod_pow(aux.N, (self.T, 1), (self.S, e))
        if left3 == 0 or left3 != right3:
            return self.reject("Ring-Pedersen relation does not hold")

        return True


def prove_dec(
    statement: DecStatement, witness: DecWitness, level: SecurityParameters = DEFAULT_LEVEL
) -> ProofDec:
    return ProofDec.new_proof(statement, witness, level)


def verify_dec(
    statement: DecStatement, proof: ProofDec, level: SecurityParameters = DEFAULT_LEVEL
) -> bool:
    return isinstance(proof, ProofDec) and proof.verify(statement, level)
