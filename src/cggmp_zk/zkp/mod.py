"""
Implements the Paillier-Blum modulus proof (Mod) from the CGGMP21 paper,
Figure 16. This module is optimized for performance using the gmpy2 library
for all multi-precision integer arithmetic.

The number of iterations is `SecurityParameters.zk_mod_iterations`; see the
note on that field for why it is below the statistical security parameter.
"""

from dataclasses import dataclass
from typing import List
import gmpy2

from cggmp_zk.common.numbers import (
    bytes_to_int,
    int_to_bytes,
    is_quadratic_residue,
    jacobi_symbol,
    rejection_sample,
    sample_invertible_with_neg_jacobi,
)
from cggmp_zk.common.security import DEFAULT_LEVEL, SecurityParameters
from cggmp_zk.zkp.base import Proof, register, require_unit
from cggmp_zk.zkp.hash import sha512_256i_tagged


@dataclass(frozen=True)
class ModStatement:
    ssid: int
    N: int


@dataclass(frozen=True, repr=False)
class ModWitness:
    p: int
    q: int


def _derive_y(st: ModStatement, W: int, iterations: int) -> List[int]:
    # Y_i are derived via Fiat-Shamir from the public context and the previous Y values.
    Y: List[int] = []
    for _ in range(iterations):
        ei = sha512_256i_tagged(ProofMod.TAG, st.ssid, W, st.N, *Y)
        Y.append(rejection_sample(st.N, ei))
    return Y


@register(ModStatement)
class ProofMod(Proof):
    """
    Represents a Zero-Knowledge Proof of a Paillier-Blum modulus.

    This proof demonstrates that N is a product of two primes congruent to 3
    mod 4 without revealing the primes themselves.
    """

    TAG = b"cggmp-zk/mod"
    witness_type = ModWitness

    def __init__(self, W: int, X: List[int], A: int, B: int, Z: List[int]):
        self.W = W
        self.X = X
        self.A = A
        self.B = B
        self.Z = Z

    @classmethod
    def _new_proof(cls, st: ModStatement, wit: ModWitness, level: SecurityParameters) -> "ProofMod":
        """Generates a new proof that N = P * Q for Blum primes P and Q."""
        iterations = level.zk_mod_iterations
        N, P, Q = map(gmpy2.mpz, (st.N, wit.p, wit.q))
        if P * Q != N or P % 4 != 3 or Q % 4 != 3:
            raise ValueError("witness does not factor N into Blum primes")
        Phi = (P - 1) * (Q - 1)

        # Step 1: Pick a quadratic non-residue W modulo N.
        W = gmpy2.mpz(sample_invertible_with_neg_jacobi(int(N)))

        # Step 2: Derive Y_i values via Fiat-Shamir from the public context.
        Y = [gmpy2.mpz(y) for y in _derive_y(st, int(W), iterations)]

        # Step 3: Compute N's inverse modulo Phi, needed for N-th roots.
        try:
            invN = gmpy2.invert(N, Phi)
        except ZeroDivisionError:
            raise ValueError("N is not invertible modulo Phi")

        X = [0] * iterations
        Z = [0] * iterations

        # A and B act as bit-vectors behind a 0xFF header byte.
        A = gmpy2.mpz(0xFF)
        B = gmpy2.mpz(0xFF)

        # Exponent for fourth roots modulo a Blum integer: ((Phi+4)/8)^2 mod Phi.
        expo = gmpy2.powmod((Phi + 4) >> 3, 2, Phi)

        for i in range(iterations):
            # Find the sign/factor combination for which a fourth root exists.
            for j in range(4):
                a = j & 1
                b = (j & 2) >> 1
                Yi = Y[i]
                if a > 0:
                    Yi = -Yi % N
                if b > 0:
                    Yi = (W * Yi) % N

                if is_quadratic_residue(Yi, P) and is_quadratic_residue(Yi, Q):
                    X[i] = int(gmpy2.powmod(Yi, expo, N))
                    Z[i] = int(gmpy2.powmod(Y[i], invN, N))
                    A = (A << 8) | a
                    B = (B << 8) | b
                    break
            require_unit(X[i], f"fourth root for iteration {i}")

        return ProofMod(int(W), X, int(A), int(B), Z)

    @staticmethod
    def from_bytes(parts: List[bytes]) -> "ProofMod":
        """Deserializes a ProofMod from [W, X..., A, B, Z...]."""
        if not parts or len(parts) < 3 or (len(parts) - 3) % 2 != 0:
            raise ValueError("malformed byte parts for ProofMod")

        ints = [bytes_to_int(b) for b in parts]
        iterations = (len(ints) - 3) // 2
        W = ints[0]
        X = ints[1 : iterations + 1]
        A = ints[iterations + 1]
        B = ints[iterations + 2]
        Z = ints[iterations + 3 :]
        return ProofMod(W, X, A, B, Z)

    def to_bytes_parts(self) -> List[bytes]:
        """Serializes the ProofMod into a list of byte parts."""
        out: List[bytes] = [int_to_bytes(self.W)]
        out += [int_to_bytes(x) for x in self.X]
        out.append(int_to_bytes(self.A))
        out.append(int_to_bytes(self.B))
        out += [int_to_bytes(z) for z in self.Z]
        return out

    def validate_basic(self) -> bool:
        """Performs basic non-null checks on proof components."""
        return all(
            [
                self.W is not None,
                self.X is not None and not any(x is None for x in self.X),
                self.A is not None,
                self.B is not None,
                self.Z is not None and not any(z is None for z in self.Z),
            ]
        )

    def _verify(self, st: ModStatement, level: SecurityParameters) -> bool:
        iterations = level.zk_mod_iterations
        N = gmpy2.mpz(st.N)
        W, A, B = map(gmpy2.mpz, (self.W, self.A, self.B))
        X = [gmpy2.mpz(x) for x in self.X]
        Z = [gmpy2.mpz(z) for z in self.Z]

        if len(X) != iterations or len(Z) != iterations:
            return self.reject(f"expected {iterations} iterations")
        if N <= 3 or not gmpy2.is_odd(N) or gmpy2.is_prime(N):
            return self.reject("N is even, tiny or prime")
        if not (0 < W < N and all(0 < z < N for z in Z) and all(0 < x < N for x in X)):
            return self.reject("component out of range")
        if jacobi_symbol(W, N) != -1:
            return self.reject("W does not have Jacobi symbol -1")

        # A and B are packed integers: a 0xFF header byte plus one byte per iteration.
        expected_len_in_bits = 8 * (iterations + 1)
        if not (expected_len_in_bits - 8 < A.bit_length() <= expected_len_in_bits):
            return self.reject("A has the wrong length")
        if not (expected_len_in_bits - 8 < B.bit_length() <= expected_len_in_bits):
            return self.reject("B has the wrong length")

        Y = [gmpy2.mpz(y) for y in _derive_y(st, int(W), iterations)]

        for i in range(iterations):
            # Check 1: Z_i^N mod N == Y_i
            if gmpy2.powmod(Z[i], N, N) != Y[i]:
                return self.reject(f"N-th root check failed at iteration {i}")

            shift = 8 * (iterations - 1 - i)
            a = (A >> shift) & 0xFF
            b = (B >> shift) & 0xFF
            if a not in (0, 1) or b not in (0, 1):
                return self.reject(f"invalid choice bits at iteration {i}")

            # Check 2: X_i^4 mod N == (-1)^a * W^b * Y_i mod N
            left = gmpy2.powmod(X[i], 4, N)
            right = Y[i]
            if a > 0:
                right = -right % N
            if b > 0:
                right = (W * right) % N

            if left != right:
                return self.reject(f"fourth root check failed at iteration {i}")

        return True


def prove_mod(
    statement: ModStatement, witness: ModWitness, level: SecurityParameters = DEFAULT_LEVEL
) -> ProofMod:
    return ProofMod.new_proof(statement, witness, level)


def verify_mod(
    statement: ModStatement, proof: ProofMod, level: SecurityParameters = DEFAULT_LEVEL
) -> bool:
    return isinstance(proof, ProofMod) and proof.verify(statement, level)
