"""
Implements the Log* zero-knowledge proof system (CGGMP21 Figure 25).

This proof demonstrates that a prover knows a secret value 'x' and randomness 'rho'
that satisfy two conditions simultaneously:
1. A Paillier ciphertext 'C' is the encryption of 'x' using randomness 'rho'.
2. An elliptic curve point 'X' is the result of scalar multiplication 'x * g'.
The secret 'x' is additionally shown to lie in ±2^(L+EPSILON) through a
Ring-Pedersen commitment.
"""

from dataclasses import dataclass, field
from typing import List, Optional
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

ProofLogstarBytesParts = 8


@dataclass(frozen=True)
class LogstarStatement:
    """
    Public input of Log*.

    Attributes:
        ssid: Session identifier bound into the Fiat-Shamir transform.
        pk0: The prover's Paillier public key.
        C: The Paillier ciphertext, Enc(pk0, x, rho).
        X: The elliptic curve point, x * g.
        aux: Ring-Pedersen parameters of the verifier.
        g: Base point of the discrete log relation; the curve generator if None.
    """

    ssid: int
    pk0: PublicKey
    C: int
    X: Point
    aux: RingPedersenParams
    g: Optional[Point] = None
    ec: ECOperations = field(default=DEFAULT_EC, compare=False)

    @property
    def base(self) -> Point:
        return self.ec.G if self.g is None else self.g


@dataclass(frozen=True, repr=False)
class LogstarWitness:
    x: int
    rho: int


def _challenge(st: LogstarStatement, S, A, Y: Point, D) -> int:
    return challenge(
        st.ec.n,
        ProofLogstar.TAG,
        st.ssid,
        *st.ec.hash_inputs(),
        st.pk0.n,
        *st.aux.hash_inputs(),
        st.C,
        *point_coords(st.ec, st.X, st.base),
        S,
        A,
        *point_coords(st.ec, Y),
        D,
    )


@register(LogstarStatement)
class ProofLogstar(Proof):
    """Represents a zero-knowledge Log* proof and its associated data."""

    TAG = b"cggmp-zk/log*"
    witness_type = LogstarWitness

    def __init__(self, S: int, A: int, Y: Point, D: int, Z1: int, Z2: int, Z3: int):
        self.S = S
        self.A = A
        self.Y = Y
        self.D = D
        self.Z1 = Z1
        self.Z2 = Z2
        self.Z3 = Z3

    @classmethod
    def _new_proof(
        cls, st: LogstarStatement, wit: LogstarWitness, level: SecurityParameters
    ) -> "ProofLogstar":
        """
        Generates a new Log* proof.

        The witness holds the secret x (plaintext of C and scalar for X) and
        the randomness rho used to create C.
        """
        N, NSq, gamma_pk = map(gmpy2.mpz, (st.pk0.n, st.pk0.n_square, st.pk0.gamma))
        aux = st.aux

        # Step 1: Sample random values for commitments.
        alpha = sample_signed(level.L_PLUS_EPSILON)
        mu = sample_signed_scaled(level.L, aux.N)
        gamma = sample_signed_scaled(level.L_PLUS_EPSILON, aux.N)
        r = sample_relatively_prime_integer(int(N))

        # Step 2: Compute commitments S, A, Y, and D.
        S = rp_commit(aux, wit.x, mu, "S")
        A = require_unit(prod_pow(NSq, (gamma_pk, alpha), (r, N)), "A")
        Y = st.ec.scalar_mult(alpha, st.base)
        D = rp_commit(aux, alpha, gamma, "D")

        # Step 3: Generate Fiat-Shamir challenge 'e'.
        e = _challenge(st, S, A, Y, D)

        # Step 4: Compute final responses.
        z1 = alpha + e * wit.x
        z2 = require_unit(prod_pow(N, (wit.rho, e), (r, 1)), "z2")
        z3 = gamma + e * mu

        return ProofLogstar(S, A, Y, D, z1, z2, z3)

    @staticmethod
    def from_bytes(parts: List[bytes], ec: ECOperations = DEFAULT_EC) -> "ProofLogstar":
        """Deserializes a proof from a list of byte strings."""
        if not parts or len(parts) != ProofLogstarBytesParts:
            raise ValueError(f"expected {ProofLogstarBytesParts} byte parts")

        Y = ec.point_from_coords(bytes_to_int(parts[2]), bytes_to_int(parts[3]))
        return ProofLogstar(
            bytes_to_int(parts[0]),
            bytes_to_int(parts[1]),
            Y,
            bytes_to_int(parts[4]),
            bytes_to_signed_int(parts[5]),
            bytes_to_int(parts[6]),
            bytes_to_signed_int(parts[7]),
        )

    def to_bytes_parts(self) -> List[bytes]:
        """Serializes the proof into a list of byte strings."""
        yx, yy = DEFAULT_EC.coords(self.Y)
        return [
            int_to_bytes(self.S),
            int_to_bytes(self.A),
            int_to_bytes(yx),
            int_to_bytes(yy),
            int_to_bytes(self.D),
            signed_int_to_bytes(self.Z1),
            int_to_bytes(self.Z2),
            signed_int_to_bytes(self.Z3),
        ]

    def _verify(self, st: LogstarStatement, level: SecurityParameters) -> bool:
        ec, aux = st.ec, st.aux
        N, NSq, gamma_pk = map(gmpy2.mpz, (st.pk0.n, st.pk0.n_square, st.pk0.gamma))

        if not aux.validate_basic():
            return self.reject("invalid Ring-Pedersen parameters")
        if not check_invertible_and_valid_mod(NSq, st.C):
            return self.reject("C is not a unit mod N^2")
        if ec.is_infinity(st.base):
            return self.reject("base point is the identity")

        if not is_in_signed_range(self.Z1, level.L_PLUS_EPSILON):
            return self.reject("Z1 out of range")
        if not check_invertible_and_valid_mod(aux.N, self.S, self.D):
            return self.reject("S or D is not a unit mod NCap")
        if not check_invertible_and_valid_mod(NSq, self.A):
            return self.reject("A is not a unit mod N^2")
        if not check_invertible_and_valid_mod(N, self.Z2):
            return self.reject("Z2 is not a unit mod N")

        # Recompute the Fiat-Shamir challenge 'e' to ensure binding.
        e = _challenge(st, self.S, self.A, self.Y, self.D)

        # Paillier encryption relation: gamma^z1 * z2^N == A * C^e (mod N^2).
        left1 = prod_pow(NSq, (gamma_pk, self.Z1), (self.Z2, N))
        right1 = prod_pow(NSq, (self.A, 1), (st.C, e))
        if left1 == 0 or left1 != right1:
            return self.reject("Paillier relation does not hold")

        # Discrete log relation: z1*g == Y + e*X.
        left2 = ec.scalar_mult(self.Z1, st.base)
        right2 = ec.point_add(self.Y, ec.scalar_mult(e, st.X))
        if not ec.equal(left2, right2):
            return self.reject("group relation does not hold")

        # Range relation: s^z1 * t^z3 == D * S^e (mod N_cap).
        left3 = aux.commit(self.Z1, self.Z3)
        right3 = prod_pow(aux.N, (self.D, 1), (self.S, e))
        if left3 == 0 or left3 != right3:
            return self.reject("Ring-Pedersen relation does not hold")

        return True


def prove_logstar(
    statement: LogstarStatement, witness: LogstarWitness, level: SecurityParameters = DEFAULT_LEVEL
) -> ProofLogstar:
    return ProofLogstar.new_proof(statement, witness, level)


def verify_logstar(
    statement: LogstarStatement, proof: ProofLogstar, level: SecurityParameters = DEFAULT_LEVEL
) -> bool:
    return isinstance(proof, ProofLogstar) and proof.verify(statement, level)
