"""
Paillier affine operation with group commitment in range (Aff-g), CGGMP21
Figure 15.

Proves that D = C^x * (1+N0)^y * rho^N0 mod N0^2 and Y = (1+N1)^y * rho_y^N1
mod N1^2 were built from the x with X = x*G, with x in ±2^L and y in ±2^L'.
This is the proof behind every MtA share conversion.
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

ProofAffgBytesParts = 14


@dataclass(frozen=True)
class AffgStatement:
    ssid: int
    pk0: PublicKey
    pk1: PublicKey
    C: int
    D: int
    Y: int
    X: Point
    aux: RingPedersenParams
    ec: ECOperations = field(default=DEFAULT_EC, compare=False)


@dataclass(frozen=True, repr=False)
class AffgWitness:
    x: int
    y: int
    rho: int
    rho_y: int


def _challenge(st: AffgStatement, S, T, A, Bx: Point, By, E, F) -> int:
    return challenge(
        st.ec.n,
        ProofAffg.TAG,
        st.ssid,
        *st.ec.hash_inputs(),
        st.pk0.n,
        st.pk1.n,
        *st.aux.hash_inputs(),
        st.C,
        st.D,
        st.Y,
        *point_coords(st.ec, st.X),
        S,
        T,
        A,
        *point_coords(st.ec, Bx),
        By,
        E,
        F,
    )


@register(AffgStatement)
class ProofAffg(Proof):
    """
    Implements a zero-knowledge proof for the Aff-g relation from CGGMP21.

    The commitments are (S, T, A, Bx, By, E, F) and the responses
    (Z1, Z2, Z3, Z4, W, Wy). Z1..Z4 are signed integers.
    """

    TAG = b"cggmp-zk/aff-g"
    witness_type = AffgWitness

    def __init__(
        self,
        S: int,
        T: int,
        A: int,
        Bx: Point,
        By: int,
        E: int,
        F: int,
        Z1: int,
        Z2: int,
        Z3: int,
        Z4: int,
        W: int,
        Wy: int,
    ) -> None:
        """Initializes the proof object with all its components."""
        self.S = S
        self.T = T
        self.A = A
        self.Bx = Bx
        self.By = By
        self.E = E
        self.F = F
        self.Z1 = Z1
        self.Z2 = Z2
        self.Z3 = Z3
        self.Z4 = Z4
        self.W = W
        self.Wy = Wy

    @classmethod
    def _new_proof(
        cls, st: AffgStatement, wit: AffgWitness, level: SecurityParameters
    ) -> "ProofAffg":
        """Generates a new zero-knowledge proof for the Aff-g relation."""
        ec, aux = st.ec, st.aux
        N0, NSq0, gamma0 = map(gmpy2.mpz, (st.pk0.n, st.pk0.n_square, st.pk0.gamma))
        N1, NSq1, gamma1 = map(gmpy2.mpz, (st.pk1.n, st.pk1.n_square, st.pk1.gamma))
        NCap = aux.N

        # Sample random values for the commitment phase.
        alpha = sample_signed(level.L_PLUS_EPSILON)
        beta = sample_signed(level.L_PRIME_PLUS_EPSILON)
        r = sample_relatively_prime_integer(int(N0))
        ry = sample_relatively_prime_integer(int(N1))
        gamma = sample_signed_scaled(level.L_PLUS_EPSILON, NCap)
        m = sample_signed_scaled(level.L, NCap)
        delta = sample_signed_scaled(level.L_PLUS_EPSILON, NCap)
        mu = sample_signed_scaled(level.L, NCap)

        # A = C^alpha * (1+N0)^beta * r^N0 mod N0^2
        A = require_unit(prod_pow(NSq0, (st.C, alpha), (gamma0, beta), (r, N0)), "A")
        Bx = ec.scalar_mult(alpha)  # Bx = alpha*G
        By = require_unit(prod_pow(NSq1, (gamma1, beta), (ry, N1)), "By")

        E = rp_commit(aux, alpha, gamma, "E")
        S = rp_commit(aux, wit.x, m, "S")
        F = rp_commit(aux, beta, delta, "F")
        T = rp_commit(aux, wit.y, mu, "T")

        e = _challenge(st, S, T, A, Bx, By, E, F)

        # Compute responses based on the challenge `e`.
        z1 = alpha + e * wit.x
        z2 = beta + e * wit.y
        z3 = gamma + e * m
        z4 = delta + e * mu
        w = require_unit(prod_pow(N0, (wit.rho, e), (r, 1)), "w")
        wy = require_unit(prod_pow(N1, (wit.rho_y, e), (ry, 1)), "wy")

        return ProofAffg(S, T, A, Bx, By, E, F, z1, z2, z3, z4, w, wy)

    @staticmethod
    def from_bytes(parts: List[bytes], ec: ECOperations = DEFAULT_EC) -> "ProofAffg":
        """Deserializes the proof from a list of byte parts."""
        if not parts or len(parts) != ProofAffgBytesParts:
            raise ValueError(
                f"expected {ProofAffgBytesParts} parts to construct ProofAffg"
            )

        ib = bytes_to_int
        Bx = ec.point_from_coords(ib(parts[3]), ib(parts[4]))
        return ProofAffg(
            ib(parts[0]),
            ib(parts[1]),
            ib(parts[2]),
            Bx,
            ib(parts[5]),
            ib(parts[6]),
            ib(parts[7]),
            bytes_to_signed_int(parts[8]),
            bytes_to_signed_int(parts[9]),
            bytes_to_signed_int(parts[10]),
            bytes_to_signed_int(parts[11]),
            ib(parts[12]),
            ib(parts[13]),
        )

    def to_bytes_parts(self) -> List[bytes]:
        """Serializes the proof into a list of byte parts."""
        bx, by = DEFAULT_EC.coords(self.Bx)
        return [
            int_to_bytes(self.S),
            int_to_bytes(self.T),
            int_to_bytes(self.A),
            int_to_bytes(bx),
            int_to_bytes(by),
            int_to_bytes(self.By),
            int_to_bytes(self.E),
            int_to_bytes(self.F),
            signed_int_to_bytes(self.Z1),
            signed_int_to_bytes(self.Z2),
            signed_int_to_bytes(self.Z3),
            signed_int_to_bytes(self.Z4),
            int_to_bytes(self.W),
            int_to_bytes(self.Wy),
        ]

    def _verify(self, st: AffgStatement, level: SecurityParameters) -> bool:
        """Verifies the zero-knowledge proof for the Aff-g relation."""
        ec, aux = st.ec, st.aux
        N0, NSq0, gamma0 = map(gmpy2.mpz, (st.pk0.n, st.pk0.n_square, st.pk0.gamma))
        N1, NSq1, gamma1 = map(gmpy2.mpz, (st.pk1.n, st.pk1.n_square, st.pk1.gamma))
        NCap = aux.N

        if not aux.validate_basic():
            return self.reject("invalid Ring-Pedersen parameters")
        if not check_invertible_and_valid_mod(NSq0, st.C, st.D):
            return self.reject("C or D is not a unit mod N0^2")
        if not check_invertible_and_valid_mod(NSq1, st.Y):
            return self.reject("Y is not a unit mod N1^2")

        # Perform range and validity checks on proof components.
        if not is_in_signed_range(self.Z1, level.L_PLUS_EPSILON):
            return self.reject("Z1 out of range")
        if not is_in_signed_range(self.Z2, level.L_PRIME_PLUS_EPSILON):
            return self.reject("Z2 out of range")
        if not check_invertible_and_valid_mod(NSq0, self.A):
            return self.reject("A is not a unit mod N0^2")
        if not check_invertible_and_valid_mod(NSq1, self.By):
            return self.reject("By is not a unit mod N1^2")
        if not check_invertible_and_valid_mod(N0, self.W):
            return self.reject("W is not a unit mod N0")
        if not check_invertible_and_valid_mod(N1, self.Wy):
            return self.reject("Wy is not a unit mod N1")
        if not check_invertible_and_valid_mod(NCap, self.E, self.F, self.S, self.T):
            return self.reject("E, F, S or T is not a unit mod NCap")

        e = _challenge(st, self.S, self.T, self.A, self.Bx, self.By, self.E, self.F)

        # C^Z1 * (1+N0)^Z2 * W^N0 must equal A * D^e (mod N0^2)
        left1 = prod_pow(NSq0, (st.C, self.Z1), (gamma0, self.Z2), (self.W, N0))
        right1 = prod_pow(NSq0, (self.A, 1), (st.D, e))
        if left1 == 0 or left1 != right1:
            return self.reject("Paillier relation for D does not hold")

        # Z1*G must equal Bx + e*X
        left2 = ec.scalar_mult(self.Z1)
        right2 = ec.point_add(self.Bx, ec.scalar_mult(e, st.X))
        if not ec.equal(left2, right2):
            return self.reject("group relation for X does not hold")

        # (1+N1)^Z2 * Wy^N1 must equal By * Y^e (mod N1^2)
        left3 = prod_pow(NSq1, (gamma1, self.Z2), (self.Wy, N1))
        right3 = prod_pow(NSq1, (self.By, 1), (st.Y, e))
        if left3 == 0 or left3 != right3:
            return self.reject("Paillier relation for Y does not hold")

        # s^Z1 * t^Z3 must equal E * S^e (mod NCap)
        left4 = aux.commit(self.Z1, self.Z3)
        right4 = prod_pow(NCap, (self.E, 1), (self.S, e))
        if left4 == 0 or left4 != right4:
            return self.reject("Ring-Pedersen relation for x does not hold")

        # s^Z2 * t^Z4 must equal F * T^e (mod NCap)
        left5 = aux.commit(self.Z2, self.Z4)
        right5 = prod_pow(NCap, (self.F, 1), (self.T, e))
        if left5 == 0 or left5 != right5:
            return self.reject("Ring-Pedersen relation for y does not hold")

        return True


def prove_affg(
    statement: AffgStatement, witness: AffgWitness, level: SecurityParameters = DEFAULT_LEVEL
) -> ProofAffg:
    return ProofAffg.new_proof(statement, witness, level)


def verify_affg(
    statement: AffgStatement, proof: ProofAffg, level: SecurityParameters = DEFAULT_LEVEL
) -> bool:
    return isinstance(proof, ProofAffg) and proof.verify(statement, level)
