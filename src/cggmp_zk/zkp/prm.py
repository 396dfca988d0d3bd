"""
Implements the Ring-Pedersen parameter proof (Prm) from the CGGMP21 protocol.

This proof demonstrates knowledge of a discrete logarithm `lambda` such that
`t = s^lambda mod N` for published Ring-Pedersen parameters (N, s, t). It is
the one consumer of `RingPedersenWitness`.
"""

from dataclasses import dataclass
from typing import List
import secrets
import gmpy2

from cggmp_zk.common.numbers import bytes_to_int, int_to_bytes, rejection_sample
from cggmp_zk.common.ring_pedersen import RingPedersenParams, RingPedersenWitness
from cggmp_zk.common.security import DEFAULT_LEVEL, SecurityParameters
from cggmp_zk.zkp.base import Proof, register
from cggmp_zk.zkp.hash import sha512_256i_tagged


@dataclass(frozen=True)
class PrmStatement:
    ssid: int
    params: RingPedersenParams


def _challenge_bits(st: PrmStatement, A: List[int], iterations: int) -> int:
    e_hash = sha512_256i_tagged(ProofPrm.TAG, st.ssid, *st.params.hash_inputs(), *A)
    return rejection_sample(1 << iterations, e_hash)


@register(PrmStatement)
class ProofPrm(Proof):
    """Represents a zero-knowledge proof of knowledge for Ring-Pedersen parameters."""

    TAG = b"cggmp-zk/prm"
    witness_type = RingPedersenWitness

    def __init__(self, A: List[int], Z: List[int]):
        self.A = A
        self.Z = Z

    @classmethod
    def _new_proof(
        cls, st: PrmStatement, wit: RingPedersenWitness, level: SecurityParameters
    ) -> "ProofPrm":
        """Generates a new Prm proof."""
        iterations = level.stat_param
        N, s = gmpy2.mpz(st.params.N), gmpy2.mpz(st.params.s)
        phi, lam = gmpy2.mpz(wit.phi), gmpy2.mpz(wit.lambda_)
        if phi <= 1:
            raise ValueError("Prm witness is not valid")

        # 1. Sample random exponents and compute commitments.
        a = [gmpy2.mpz(secrets.randbelow(int(phi))) for _ in range(iterations)]
        A = [int(gmpy2.powmod(s, ai, N)) for ai in a]

        # 2. Compute Fiat-Shamir challenge bits.
        e = _challenge_bits(st, A, iterations)

        # 3. Compute responses.
        Z = [int((a[i] + (((e >> i) & 1) * lam)) % phi) for i in range(iterations)]

        return ProofPrm(A, Z)

    @staticmethod
    def from_bytes(parts: List[bytes]) -> "ProofPrm":
        """Deserializes a proof from a list of byte strings."""
        if not parts or len(parts) % 2 != 0:
            raise ValueError("expected an even, non-zero number of byte parts to construct ProofPrm")
        bis = [bytes_to_int(b) for b in parts]
        half = len(bis) // 2
        return ProofPrm(bis[:half], bis[half:])

    def to_bytes_parts(self) -> List[bytes]:
        """Serializes the proof into a list of byte strings for transport."""
        return [int_to_bytes(a) for a in self.A] + [int_to_bytes(z) for z in self.Z]

    def validate_basic(self) -> bool:
        """Performs basic structural validation of the proof components."""
        if self.A is None or any(a is None for a in self.A):
            return False
        if self.Z is None or any(z is None for z in self.Z):
            return False
        return len(self.A) == len(self.Z)

    def _verify(self, st: PrmStatement, level: SecurityParameters) -> bool:
        iterations = level.stat_param
        if len(self.A) != iterations:
            return self.reject(f"expected {iterations} iterations, got {len(self.A)}")
        if not st.params.validate_basic():
            return self.reject("invalid Ring-Pedersen parameters")

        N, s, t = map(gmpy2.mpz, st.params.hash_inputs())
        for a in self.A:
            if not (1 < a < N):
                return self.reject("commitment out of range")
        # The `Z` values are exponents reduced mod phi < N.
        for z in self.Z:
            if not (0 <= z < N):
                return self.reject("response out of range")

        e = _challenge_bits(st, self.A, iterations)

        # Check: s^Z_i == A_i * t^e_i (mod N)
        for i in range(iterations):
            left = gmpy2.powmod(s, self.Z[i], N)
            right = self.A[i] * t % N if (e >> i) & 1 else self.A[i] % N
            if left != right:
                return self.reject(f"iteration {i} does not hold")

        return True


def prove_prm(
    statement: PrmStatement, witness: RingPedersenWitness, level: SecurityParameters = DEFAULT_LEVEL
) -> ProofPrm:
    return ProofPrm.new_proof(statement, witness, level)


def verify_prm(
    statement: PrmStatement, proof: ProofPrm, level: SecurityParameters = DEFAULT_LEVEL
) -> bool:
    return isinstance(proof, ProofPrm) and proof.verify(statement, level)
