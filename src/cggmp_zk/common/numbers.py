"""
Number-theoretic helpers shared by the Ring-Pedersen setup and every proof.

All sampling uses the `secrets` CSPRNG; all big-integer arithmetic goes
through gmpy2.
"""

import hashlib
import secrets
import gmpy2

from cggmp_zk.common.errors import SetupFailure

# Cap on rejection-sampling loops whose failure probability is negligible for
# well-formed moduli.
MAX_SAMPLING_ATTEMPTS = 512


def sample_relatively_prime_integer(n: int) -> int:
    """
    Samples a uniformly random integer in [0, n) that is coprime to n.

    Raises:
        ValueError: if n < 2.
        SetupFailure: if no coprime sample was drawn within
            MAX_SAMPLING_ATTEMPTS tries.
    """
    if n < 2:
        raise ValueError("modulus must be at least 2")
    n = gmpy2.mpz(n)
    for _ in range(MAX_SAMPLING_ATTEMPTS):
        sample = gmpy2.mpz(secrets.randbelow(int(n)))
        if gmpy2.gcd(sample, n) == 1:
            return int(sample)
    raise SetupFailure(
        f"no integer coprime to the modulus found in {MAX_SAMPLING_ATTEMPTS} attempts"
    )


def mod_pow_with_negative(v: int, pow: int, modulus: int) -> int:
    """
    Computes v^pow mod modulus for a possibly negative exponent.

    A negative exponent means the modular inverse of v^|pow|. If that inverse
    does not exist the additive identity 0 is returned; callers must treat 0
    as a degenerate result.
    """
    v, pow, modulus = map(gmpy2.mpz, (v, pow, modulus))
    if pow >= 0:
        return int(gmpy2.powmod(v, pow, modulus))
    temp = gmpy2.powmod(v, -pow, modulus)
    try:
        return int(gmpy2.invert(temp, modulus))
    except ZeroDivisionError:
        return 0


def sample_signed(bits: int) -> int:
    """Samples uniformly from the integer interval [-2^bits, 2^bits]."""
    bound = 1 << bits
    return secrets.randbelow(2 * bound + 1) - bound


def sample_signed_scaled(bits: int, factor: int) -> int:
    """Samples uniformly from [-2^bits * factor, 2^bits * factor]."""
    bound = (1 << bits) * int(factor)
    return secrets.randbelow(2 * bound + 1) - bound


def is_in_signed_range(x: int, bits: int) -> bool:
    """Checks that |x| <= 2^bits."""
    return abs(int(x)) <= (1 << bits)


def jacobi_symbol(a: int, n: int) -> int:
    """Computes the Jacobi symbol (a/n)."""
    return gmpy2.jacobi(a, n)


def sample_invertible_with_neg_jacobi(n: int) -> int:
    """
    Samples a random integer 'w' in [1, n-1] such that its Jacobi
    symbol (w/n) is -1.
    """
    for _ in range(MAX_SAMPLING_ATTEMPTS):
        w = secrets.randbelow(n - 1) + 1
        if jacobi_symbol(w, n) == -1:
            return w
    raise SetupFailure("no element with Jacobi symbol -1 found")


def is_quadratic_residue(x: int, n: int) -> bool:
    """
    Checks if x is a quadratic residue modulo n using the Jacobi symbol.
    """
    return jacobi_symbol(x, n) == 1


def is_in_interval(x: int, bound: int) -> bool:
    """Checks if x is in the interval [0, bound)."""
    return 0 <= x < bound


def check_invertible_and_valid_mod(modulus: int, *vals: int) -> bool:
    """
    Checks if all provided values are in the range (0, modulus) and are
    relatively prime to the modulus.
    """
    for v in vals:
        if v is None or not (0 < v < modulus):
            return False
        if gmpy2.gcd(v, modulus) != 1:
            return False
    return True


def rejection_sample(modulus: int, h: int) -> int:
    """
    Generates a uniformly random integer in [0, modulus-1] from a seed 'h'.
    """
    r = 0
    i = 0
    while r < modulus:
        inb = str(h + i).encode()
        r = (r << 256) | int.from_bytes(hashlib.sha256(inb).digest(), "big")
        i += 1
    return r % modulus


def int_to_bytes(i: int) -> bytes:
    """Minimal big-endian encoding of a non-negative integer; b"" for zero."""
    i = int(i)
    return i.to_bytes((i.bit_length() + 7) // 8, "big") if i != 0 else b""


def signed_int_to_bytes(i: int) -> bytes:
    """Sign-prefixed encoding for responses that may be negative."""
    i = int(i)
    sign = b"\x01" if i < 0 else b"\x00"
    return sign + int_to_bytes(abs(i))


def bytes_to_int(b: bytes) -> int:
    return int.from_bytes(b, "big") if b else 0


def bytes_to_signed_int(b: bytes) -> int:
    if not b:
        raise ValueError("signed integer encoding is empty")
    if b[0] not in (0, 1):
        raise ValueError("invalid sign byte")
    value = bytes_to_int(b[1:])
    return -value if b[0] == 1 else value
