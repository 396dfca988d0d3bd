"""
Multiplication Paillier vs. group (Mul*), CGGMP21 Figure 31.

Proves that D = C^x * rho^N0 mod N0^2 for the x with X = x*G and x in ±2^L.
"""

from dataclasses import dataclass, field
from typing import List
import gmpy2

from cggmp_zk.common.ec import DEFAULT_EC, ECOperations, Point
from cggmp_zk.common.numbers import (
    bytes_to_int,
    bytes_to_signed_int,
    check_invertible_and_valid_mod,
    int_to_bytes,
    is_in_signed_range,
    sample_relatively_prime_integer,
    sample_signed,
    sample_signed_scaled,
    signed_int_to_bytes,
)
from cggmp_zk.common.paillier import PublicKey
from cggmp_zk.common.ring_pedersen import RingPedersenParams
from cggmp_zk.common.security import DEFAULT_LEVEL, SecurityParameters
from cggmp_zk.zkp.base import Proof, point_coords, prod_pow, register, require_unit, rp_commit
from cggmp_zk.zkp.hash import challenge

ProofMulstarBytesParts = 8


@dataclass(frozen=True)
class MulstarStatement:
    ssid: int
    pk0: PublicKey
    C: int
    D: int
    X: Point
    aux: RingPedersenParams
    ec: ECOperations = field(default=DEFAULT_EC, compare=False)


@dataclass(frozen=True, repr=False)
class MulstarWitness:
    x: int
    rho: int


def _challenge(st: MulstarStatement, A, Bx: Point, E, S) -> int:
    return challenge(
        st.ec.n,
        ProofMulstar.TAG,
        st.ssid,
        *st.ec.hash_inputs(),
        st.pk0.n,
        *st.aux.hash_inputs(),
        st.C,
        st.D,
        *point_coords(st.ec, st.X),
        A,
        *point_coords(st.ec, Bx),
        E,
        S,
    )


@register(MulstarStatement)
class ProofMulstar(Proof):
    """
    Zero-knowledge proof for the Mul* relation.

    Commitments (A, Bx, E, S); responses Z1, Z2 (signed) and W (unit mod N0).
    """

    TAG = b"cggmp-zk/mul*"
    witness_type = MulstarWitness

    def __init__(self, A: int, Bx: Point, E: int, S: int, Z1: int, Z2: int, W: int):
        self.A = A
        self.Bx = Bx
        self.E = E
        self.S = S
        self.Z1 = Z1
        self.Z2 = Z2
        self.W = W

    @classmethod
    def _new_proof(
        cls, st: MulstarStatement, wit: MulstarWitness, level: SecurityParameters
    ) -> "ProofMulstar":
        N0, NSq0 = map(gmpy2.mpz, (st.pk0.n, st.pk0.n_square))
        aux = st.aux

        alpha = sample_signed(level.L_PLUS_EPSILON)
        r = sample_relatively_prime_integer(int(N0))
        gamma = sample_signed_scaled(level.L_PLUS_EPSILON, aux.N)
        m = sample_signed_scaled(level.L, aux.N)

        A = require_unit(prod_pow(NSq0, (st.C, alpha), (r, N0)), "A")
        Bx = st.ec.scalar_mult(alpha)
        E = rp_commit(aux, alpha, gamma, "E")
        S = rp_commit(aux, wit.x, m, "S")

        e = _challenge(st, A, Bx, E, S)

        z1 = alpha + e * wit.x
        z2 = gamma + e * m
        w = require_unit(prod_pow(N0, (wit.rho, e), (r, 1)), "w")

        return ProofMulstar(A, Bx, E, S, z1, z2, w)

    @staticmethod
    def from_bytes(parts: List[bytes], ec: ECOperations = DEFAULT_EC) -> "ProofMulstar":
        if not parts or len(parts) != ProofMulstarBytesParts:
            raise ValueError(
                f"expected {ProofMulstarBytesParts} byte parts to construct ProofMulstar"
            )
        Bx = ec.point_from_coords(bytes_to_int(parts[1]), bytes_to_int(parts[2]))
        return ProofMulstar(
            bytes_to_int(parts[0]),
            Bx,
            bytes_to_int(parts[3]),
            bytes_to_int(parts[4]),
            bytes_to_signed_int(parts[5]),
            bytes_to_signed_int(parts[6]),
            bytes_to_int(parts[7]),
        )

    def to_bytes_parts(self) -> List[bytes]:
        bx, by = DEFAULT_EC.coords(self.Bx)
        return [
            int_to_bytes(self.A),
            int_to_bytes(bx),
            int_to_bytes(by),
            int_to_bytes(self.E),
            int_to_bytes(self.S),
            signed_int_to_bytes(self.Z1),
            signed_int_to_bytes(self.Z2),
            int_to_bytes(self.W),
        ]

    def _verify(self, st: MulstarStatement, level: SecurityParameters) -> bool:
        ec, aux = st.ec, st.aux
        N0, NSq0 = map(gmpy2.mpz, (st.pk0.n, st.pk0.n_square))

        if not aux.validate_basic():
            return self.reject("invalid Ring-Pedersen parameters")
        if not check_invertible_and_valid_mod(NSq0, st.C, st.D):
            return self.reject("C or D is not a unit mod N0^2")

        if not is_in_signed_range(self.Z1, level.L_PLUS_EPSILON):
            return self.reject("Z1 out of range")
        if not check_invertible_and_valid_mod(NSq0, self.A):
            return self.reject("A is not a unit mod N0^2")
        if not check_invertible_and_valid_mod(N0, self.W):
            return self.reject("W is not a unit mod N0")
        if not check_invertible_and_valid_mod(aux.N, self.E, self.S):
            return self.reject("E or S is not a unit mod NCap")

        e = _challenge(st, self.A, self.Bx, self.E, self.S)

        # C^z1 * w^N0 == A * D^e (mod N0^2)
        left1 = prod_pow(NSq0, (st.C, self.Z1), (self.W, N0))
        right1 = prod_pow(NSq0, (self.A, 1), (st.D, e))
        if left1 == 0 or left1 != right1:
            return self.reject("Paillier relation does not hold")

        # z1*G == Bx + e*X
        left2 = ec.scalar_mult(self.Z1)
        right2 = ec.point_add(self.Bx, ec.scalar_mult(e, st.X))
        if not ec.equal(left2, right2):
            return self.reject("group relation does not hold")

        # s^z1 * t^z2 == E * S^e (mod NCap)
        left3 = aux.commit(self.Z1, self.Z2)
        right3 = prod_pow(aux.N, (self.E, 1), (self.S, e))
        if left3 == 0 or left3 != right3:
            return self.reject("Ring-Pedersen relation does not hold")

        return True


def prove_mulstar(
    statement: MulstarStatement, witness: MulstarWitness, level: SecurityParameters = DEFAULT_LEVEL
) -> ProofMulstar:
    return ProofMulstar.new_proof(statement, witness, level)


def verify_mulstar(
    statement: MulstarStatement, proof: ProofMulstar, level: SecurityParameters = DEFAULT_LEVEL
) -> bool:
    return isinstance(proof, ProofMulstar) and proof.verify(statement, level)
