"""
Ring-Pedersen parameter generation (CGGMP21, section 6.4.1 and Figure 6).

The public parameters (N, s, t) are broadcast and embedded in every range
proof. The witness (lambda, lambda^-1, phi) stays with the generating party
and is only used to prove the parameters are well formed (see `zkp.prm`).
The two are separate objects: nothing reachable from the params leads to the
witness.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple
import logging
import secrets
import time
import gmpy2

from cggmp_zk.common.errors import SetupFailure
from cggmp_zk.common.numbers import (
    MAX_SAMPLING_ATTEMPTS,
    bytes_to_int,
    int_to_bytes,
    mod_pow_with_negative,
    sample_relatively_prime_integer,
)
from cggmp_zk.common.paillier import PaillierError, generate_key_pair
from cggmp_zk.common.security import DEFAULT_LEVEL, SecurityParameters

logger = logging.getLogger(__name__)

RingPedersenParamsBytesParts = 3


class PrimeMode(Enum):
    SAFE_PRIMES = "safe_primes"
    NORMAL_PRIMES = "normal_primes"


@dataclass(frozen=True)
class RingPedersenParams:
    """Public Ring-Pedersen parameters: modulus N = p*q and bases s, t = s^lambda."""

    N: int
    s: int
    t: int

    def validate_basic(self) -> bool:
        """Checks that s and t are distinct units of Z_N, excluding 0 and 1."""
        if any(v is None for v in (self.N, self.s, self.t)):
            return False
        if self.N <= 3 or self.N % 2 == 0:
            return False
        for v in (self.s, self.t):
            if not (1 < v < self.N) or gmpy2.gcd(v, self.N) != 1:
                return False
        return self.s != self.t

    def commit(self, x: int, r: int) -> int:
        """
        Returns s^x * t^r mod N for signed exponents.

        Returns 0 if either base fails to invert for a negative exponent.
        """
        sx = mod_pow_with_negative(self.s, x, self.N)
        tr = mod_pow_with_negative(self.t, r, self.N)
        return int((gmpy2.mpz(sx) * tr) % self.N)

    def hash_inputs(self) -> Tuple[int, int, int]:
        return self.N, self.s, self.t

    def to_bytes_parts(self) -> List[bytes]:
        return [int_to_bytes(self.N), int_to_bytes(self.s), int_to_bytes(self.t)]

    @staticmethod
    def from_bytes(parts: List[bytes]) -> "RingPedersenParams":
        if not parts or len(parts) != RingPedersenParamsBytesParts:
            raise ValueError(
                f"expected {RingPedersenParamsBytesParts} byte parts to construct RingPedersenParams"
            )
        return RingPedersenParams(*(bytes_to_int(b) for b in parts))


@dataclass(frozen=True, repr=False)
class RingPedersenWitness:
    """Secret relation behind a RingPedersenParams. Never serialized."""

    lambda_: int
    lambda_inv: int
    phi: int

    def __repr__(self) -> str:
        return "RingPedersenWitness(<redacted>)"


def check_witness(params: RingPedersenParams, witness: RingPedersenWitness) -> bool:
    """Checks s^lambda == t (mod N) and lambda * lambda^-1 == 1 (mod phi)."""
    N, s, t = map(gmpy2.mpz, (params.N, params.s, params.t))
    lam, lam_inv, phi = map(gmpy2.mpz, (witness.lambda_, witness.lambda_inv, witness.phi))
    if gmpy2.powmod(s, lam, N) != t:
        return False
    return (lam * lam_inv) % phi == 1


def generate_ring_pedersen(
    mode: PrimeMode = PrimeMode.NORMAL_PRIMES, level: SecurityParameters = DEFAULT_LEVEL
) -> Tuple[RingPedersenParams, RingPedersenWitness]:
    """
    Generates Ring-Pedersen parameters and their witness.

    Args:
        mode: Whether N is a product of safe primes or of ordinary (Blum) primes.
        level: Security level; N has `level.bits_paillier` bits.

    Raises:
        ValueError: if `mode` is not a PrimeMode (or its value) or `level`
            fails validation.
        SetupFailure: if the modulus could not be generated or no invertible
            lambda was found. The caller must abort rather than retry with
            weaker parameters.
    """
    mode = PrimeMode(mode)
    level.validate()
    started = time.perf_counter()
    try:
        dk, ek, _, _ = generate_key_pair(
            level.bits_paillier, safe_primes=mode is PrimeMode.SAFE_PRIMES
        )
    except PaillierError as e:
        raise SetupFailure(f"Ring-Pedersen modulus generation failed: {e}") from e

    params, witness = _get_related_values(int(ek.n), int(dk.p), int(dk.q))
    logger.info(
        "Generated Ring-Pedersen parameters (%d-bit modulus, %s) in %.2fs",
        gmpy2.mpz(params.N).bit_length(),
        mode.value,
        time.perf_counter() - started,
    )
    return params, witness


def generate_safe_ring_pedersen(
    level: SecurityParameters = DEFAULT_LEVEL,
) -> Tuple[RingPedersenParams, RingPedersenWitness]:
    return generate_ring_pedersen(PrimeMode.SAFE_PRIMES, level)


def generate_normal_ring_pedersen(
    level: SecurityParameters = DEFAULT_LEVEL,
) -> Tuple[RingPedersenParams, RingPedersenWitness]:
    return generate_ring_pedersen(PrimeMode.NORMAL_PRIMES, level)


def _get_related_values(N: int, p: int, q: int) -> Tuple[RingPedersenParams, RingPedersenWitness]:
    N_mpz = gmpy2.mpz(N)
    phi = (gmpy2.mpz(p) - 1) * (gmpy2.mpz(q) - 1)

    # Squaring puts s in the quadratic-residue subgroup.
    tau = gmpy2.mpz(sample_relatively_prime_integer(N))
    s = gmpy2.powmod(tau, 2, N_mpz)

    for _ in range(MAX_SAMPLING_ATTEMPTS):
        lam = gmpy2.mpz(secrets.randbelow(int(phi)))
        try:
            lam_inv = gmpy2.invert(lam, phi)
        except ZeroDivisionError:
            continue
        # lambda = 1 would make t == s.
        if lam > 1:
            break
    else:
        raise SetupFailure(f"no invertible lambda found in {MAX_SAMPLING_ATTEMPTS} attempts")

    t = gmpy2.powmod(s, lam, N_mpz)
    return (
        RingPedersenParams(N=int(N_mpz), s=int(s), t=int(t)),
        RingPedersenWitness(lambda_=int(lam), lambda_inv=int(lam_inv), phi=int(phi)),
    )
