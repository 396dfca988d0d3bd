"""
Paillier multiplication (Mul), CGGMP21 Figure 29.

Proves that C = Y^x * rho^N mod N^2 where X = (1+N)^x * rho_x^N mod N^2,
i.e. C encrypts the product of the plaintexts of X and Y. Both ciphertexts
live under the prover's own key, so no Ring-Pedersen parameters are needed.
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
    sample_relatively_prime_integer,
    signed_int_to_bytes,
)
from cggmp_zk.common.paillier import PublicKey
from cggmp_zk.common.security import DEFAULT_LEVEL, SecurityParameters
from cggmp_zk.zkp.base import Proof, prod_pow, register, require_unit
from cggmp_zk.zkp.hash import challenge

ProofMulBytesParts = 5


@dataclass(frozen=True)
class MulStatement:
    ssid: int
    pk: PublicKey
    X: int
    Y: int
    C: int
    # Only the curve order is used, as the challenge range.
    ec: ECOperations = field(default=DEFAULT_EC, compare=False)


@dataclass(frozen=True, repr=False)
class MulWitness:
    x: int
    rho: int
    rho_x: int


def _challenge(st: MulStatement, A, B) -> int:
    return challenge(
        st.ec.n,
        ProofMul.TAG,
        st.ssid,
        *st.ec.hash_inputs(),
        st.pk.n,
        st.X,
        st.Y,
        st.C,
        A,
        B,
    )


@register(MulStatement)
class ProofMul(Proof):
    TAG = b"cggmp-zk/mul"
    witness_type = MulWitness

    def __init__(self, A: int, B: int, Z: int, U: int, V: int):
        self.A = A
        self.B = B
        self.Z = Z
        self.U = U
        self.V = V

    @classmethod
    def _new_proof(cls, st: MulStatement, wit: MulWitness, level: SecurityParameters) -> "ProofMul":
        N, NSq, gamma_pk = map(gmpy2.mpz, (st.pk.n, st.pk.n_square, st.pk.gamma))

        alpha = sample_relatively_prime_integer(int(N))
        r = sample_relatively_prime_integer(int(N))
        s = sample_relatively_prime_integer(int(N))

        A = require_unit(prod_pow(NSq, (st.Y, alpha), (r, N)), "A")
        B = require_unit(prod_pow(NSq, (gamma_pk, alpha), (s, N)), "B")

        e = _challenge(st, A, B)

        z = alpha + e * wit.x
        u = require_unit(prod_pow(N, (wit.rho, e), (r, 1)), "u")
        v = require_unit(prod_pow(N, (wit.rho_x, e), (s, 1)), "v")

        return ProofMul(A, B, z, u, v)

    @staticmethod
    def from_bytes(parts: List[bytes]) -> "ProofMul":
        if not parts or len(parts) != ProofMulBytesParts:
            raise ValueError(f"expected {ProofMulBytesParts} byte parts to construct ProofMul")
        return ProofMul(
            bytes_to_int(parts[0]),
            bytes_to_int(parts[1]),
            bytes_to_signed_int(parts[2]),
            bytes_to_int(parts[3]),
            bytes_to_int(parts[4]),
        )

    def to_bytes_parts(self) -> List[bytes]:
        return [
            int_to_bytes(self.A),
            int_to_bytes(self.B),
            signed_int_to_bytes(self.Z),
            int_to_bytes(self.U),
            int_to_bytes(self.V),
        ]

    def _verify(self, st: MulStatement, level: SecurityParameters) -> bool:
        q = st.ec.n
        N, NSq, gamma_pk = map(gmpy2.mpz, (st.pk.n, st.pk.n_square, st.pk.gamma))

        if not check_invertible_and_valid_mod(NSq, st.X, st.Y, st.C):
            return self.reject("X, Y or C is not a unit mod N^2")

        # alpha and x are below N and |e| <= q.
        if abs(self.Z) > N * (q + 1):
            return self.reject("Z out of range")
        if not check_invertible_and_valid_mod(NSq, self.A, self.B):
            return self.reject("A or B is not a unit mod N^2")
        if not check_invertible_and_valid_mod(N, self.U, self.V):
            return self.reject("U or V is not a unit mod N")

        e = _challenge(st, self.A, self.B)

        # Y^z * u^N == A * C^e (mod N^2)
        left1 = prod_pow(NSq, (st.Y, self.Z), (self.U, N))
        right1 = prod_pow(NSq, (self.A, 1), (st.C, e))
        if left1 == 0 or left1 != right1:
            return self.reject("product relation does not hold")

        # (1+N)^z * v^N == B * X^e (mod N^2)
        left2 = prod_pow(NSq, (gamma_pk, self.Z), (self.V, N))
        right2 = prod_pow(NSq, (self.B, 1), (st.X, e))
        if left2 == 0 or left2 != right2:
            return self.reject("encryption relation for X does not hold")

        return True


def prove_mul(
    statement: MulStatement, witness: MulWitness, level: SecurityParameters = DEFAULT_LEVEL
) -> ProofMul:
    return ProofMul.new_proof(statement, witness, level)


def verify_mul(
    statement: MulStatement, proof: ProofMul, level: SecurityParameters = DEFAULT_LEVEL
) -> bool:
    return isinstance(proof, ProofMul) and proof.verify(statement, level)
