"""
This module provides a Python implementation of the Paillier homomorphic
cryptosystem, optimized for performance using the gmpy2 library for all
large-integer arithmetic.

The proofs treat it as an opaque capability: key generation by modulus
size, encryption with explicit randomness, and the homomorphic operations.
"""

from typing import Optional, Tuple, Union
import logging
import time
from Crypto.Util.number import getPrime, isPrime
import gmpy2

from cggmp_zk.common.numbers import sample_relatively_prime_integer, mod_pow_with_negative

logger = logging.getLogger(__name__)


# --- Custom Exceptions ---


class PaillierError(Exception):
    """Base exception for Paillier-related errors."""

    pass


class MessageTooLongError(PaillierError):
    """Raised when a message or ciphertext is out of its valid range."""

    pass


class MessageMalFormedError(PaillierError):
    """Raised when a message is malformed (e.g., not in [0, N-1])."""

    pass


class WrongRandomnessError(PaillierError):
    """Raised when provided randomness is cryptographically invalid."""

    pass


class KeyGenerationError(PaillierError):
    """Raised when primes of the requested form could not be found."""

    pass


# --- Helper Functions ---


def get_random_positive_relatively_prime_int(n: gmpy2.mpz) -> gmpy2.mpz:
    """Returns a random integer x where 0 < x < n and gcd(x, n) == 1."""
    return gmpy2.mpz(sample_relatively_prime_integer(int(n)))


def generate_blum_prime(bits: int, max_attempts: int = 1000) -> int:
    """Generates a prime p of exactly `bits` bits with p = 3 mod 4."""
    for _ in range(max_attempts):
        p = getPrime(bits)
        if p.bit_length() == bits and p % 4 == 3:
            return p
    raise KeyGenerationError(f"no {bits}-bit Blum prime found in {max_attempts} attempts")


def generate_safe_prime(bits: int, max_attempts: Optional[int] = None) -> int:
    """
    Generates a safe prime p = 2q + 1 of exactly `bits` bits, q prime.

    Safe primes above 5 are also Blum primes.
    """
    if bits < 3:
        raise ValueError("safe primes need at least 3 bits")
    if max_attempts is None:
        max_attempts = 64 * bits
    for _ in range(max_attempts):
        q = getPrime(bits - 1)
        p = 2 * q + 1
        if p.bit_length() == bits and isPrime(p):
            return p
    raise KeyGenerationError(f"no {bits}-bit safe prime found in {max_attempts} attempts")


# --- Core Classes ---


class PublicKey:
    """
    Represents the public part of a Paillier key pair, using gmpy2 for all
    large number arithmetic.
    """

    def __init__(self, n: Union[int, gmpy2.mpz]):
        # Store n as a gmpy2.mpz for optimized calculations.
        self.n: gmpy2.mpz = gmpy2.mpz(n)
        # Cache frequently used values.
        self._ns: Optional[gmpy2.mpz] = None
        self._ga: Optional[gmpy2.mpz] = None

    @property
    def n_square(self) -> gmpy2.mpz:
        """Returns N*N, cached for efficiency."""
        if self._ns is None:
            self._ns = self.n * self.n
        return self._ns

    @property
    def gamma(self) -> gmpy2.mpz:
        """Returns N+1, cached for efficiency."""
        if self._ga is None:
            self._ga = self.n + 1
        return self._ga

    def __eq__(self, other) -> bool:
        return isinstance(other, PublicKey) and self.n == other.n

    def __hash__(self) -> int:
        return hash(int(self.n))

    def encrypt_and_return_randomness(self, m: int) -> Tuple[int, int]:
        """Encrypts a message and returns the ciphertext and randomness used."""
        if not (0 <= m < self.n):
            raise MessageMalFormedError("Message must be in the range [0, N-1]")

        x = get_random_positive_relatively_prime_int(self.n)
        return self.encrypt_with_randomness(m, x), int(x)

    def encrypt(self, m: int) -> int:
        """Encrypts a message, discarding the randomness."""
        c, _ = self.encrypt_and_return_randomness(m)
        return c

    def encrypt_with_randomness(self, m: int, x: int) -> int:
        """Encrypts a message using a specified random value `x`."""
        if not (0 <= m < self.n):
            raise MessageMalFormedError("Message must be in the range [0, N-1]")
        x_mpz = gmpy2.mpz(x)
        if not (0 < x_mpz < self.n and gmpy2.gcd(x_mpz, self.n) == 1):
            raise WrongRandomnessError(
                "Randomness must be a positive integer relatively prime to N"
            )

        gm = gmpy2.powmod(self.gamma, m, self.n_square)
        xn = gmpy2.powmod(x_mpz, self.n, self.n_square)

        c = (gm * xn) % self.n_square
        return int(c)

    def encrypt_signed(self, m: int, x: Optional[int] = None) -> Tuple[int, int]:
        """
        Encrypts a possibly negative integer as (1+N)^m * x^N mod N^2.

        Negative plaintexts decrypt to N - |m|. Returns (ciphertext, x).
        """
        if abs(m) >= self.n:
            raise MessageTooLongError("Message magnitude must be below N")
        if x is None:
            x = get_random_positive_relatively_prime_int(self.n)
        return self.encrypt_with_randomness(int(gmpy2.mpz(m) % self.n), x), int(x)

    def homo_mult(self, m: int, c1: int) -> int:
        """Homomorphically multiplies a ciphertext by a plaintext scalar."""
        if not (0 <= m < self.n):
            raise MessageMalFormedError("Scalar must be in the range [0, N-1]")
        if not (0 <= c1 < self.n_square):
            raise MessageTooLongError("Ciphertext must be in the range [0, N^2-1]")
        c = gmpy2.powmod(c1, m, self.n_square)
        return int(c)

    def homo_mult_signed(self, m: int, c1: int) -> int:
        """Raises a ciphertext to a possibly negative plaintext scalar."""
        if not (0 <= c1 < self.n_square):
            raise MessageTooLongError("Ciphertext must be in the range [0, N^2-1]")
        c = mod_pow_with_negative(c1, m, self.n_square)
        if c == 0:
            raise MessageMalFormedError("Ciphertext is not invertible modulo N^2")
        return c

    def homo_add(self, c1: int, c2: int) -> int:
        """Homomorphically adds two ciphertexts."""
        if not (0 <= c1 < self.n_square) or not (0 <= c2 < self.n_square):
            raise MessageMalFormedError("Ciphertexts must be in the range [0, N^2-1]")

        c = (gmpy2.mpz(c1) * gmpy2.mpz(c2)) % self.n_square
        return int(c)


class PrivateKey(PublicKey):
    """
    Represents a Paillier private key, which includes all public key
    components through inheritance.
    """

    def __init__(self, p: Union[int, gmpy2.mpz], q: Union[int, gmpy2.mpz]):
        p, q = gmpy2.mpz(p), gmpy2.mpz(q)
        super().__init__(p * q)
        self.p: gmpy2.mpz = p
        self.q: gmpy2.mpz = q
        self.phi_n: gmpy2.mpz = (p - 1) * (q - 1)
        # lambda is the Carmichael function, lcm(p-1, q-1) for n=pq.
        self.lambda_n: gmpy2.mpz = gmpy2.lcm(p - 1, q - 1)
        self._lg_inv: Optional[gmpy2.mpz] = None

    def __repr__(self) -> str:
        return f"PrivateKey(<{self.n.bit_length()}-bit modulus>)"

    def public_key(self) -> PublicKey:
        return PublicKey(self.n)

    def _L(self, u: gmpy2.mpz) -> gmpy2.mpz:
        """Implements the Paillier L function: L(u) = (u - 1) // N."""
        return (u - 1) // self.n

    def decrypt(self, c: int) -> int:
        """Decrypts a ciphertext, returning a standard Python int."""
        m_mpz = self._decrypt_mpz(gmpy2.mpz(c))
        return int(m_mpz)

    def decrypt_signed(self, c: int) -> int:
        """Decrypts into the symmetric range (-N/2, N/2]."""
        m = self.decrypt(c)
        return m - int(self.n) if m > self.n // 2 else m

    def _decrypt_mpz(self, c: gmpy2.mpz) -> gmpy2.mpz:
        """Internal decryption method that returns a gmpy2.mpz object."""
        if not (0 <= c < self.n_square and gmpy2.gcd(c, self.n_square) == 1):
            raise MessageMalFormedError(
                "Ciphertext is mal-formed or not relatively prime to N^2"
            )

        c_pow_lambda = gmpy2.powmod(c, self.lambda_n, self.n_square)
        lc = self._L(c_pow_lambda)

        if self._lg_inv is None:
            self.cache_lg_inv()

        m = (lc * self._lg_inv) % self.n
        return m

    def cache_lg_inv(self) -> bool:
        """Pre-computes and caches the modular inverse used in decryption."""
        if self._lg_inv is not None:
            return False

        g_pow_lambda = gmpy2.powmod(self.gamma, self.lambda_n, self.n_square)
        lg = self._L(g_pow_lambda)

        try:
            self._lg_inv = gmpy2.invert(lg, self.n)
        except ZeroDivisionError:
            raise PaillierError("Could not compute modular inverse of L(g^lambda)")
        return True

    def get_randomness(self, c: int) -> int:
        """Recovers the randomness `r` used to encrypt a ciphertext `c`."""
        c_mpz = gmpy2.mpz(c)
        m = self._decrypt_mpz(c_mpz)

        # c * g^(-m) = r^n mod n^2, and g^(-m) = (1+n)^(-m) = 1 - m*n (mod n^2).
        term = gmpy2.sub(1, gmpy2.mul(m, self.n))
        c0 = (c_mpz * term) % self.n_square

        # r = c0^(n^-1 mod phi(n)) mod n
        try:
            niv = gmpy2.invert(self.n, self.phi_n)
        except ZeroDivisionError:
            raise PaillierError("Could not compute modular inverse of N mod Phi(N)")

        r = gmpy2.powmod(c0, niv, self.n)
        return int(r)


# --- Key Generation ---


def generate_key_pair(
    modulus_bit_len: int, safe_primes: bool = False, max_attempts: int = 100
) -> Tuple[PrivateKey, PublicKey, int, int]:
    """
    Generates a Paillier key pair whose modulus has exactly `modulus_bit_len` bits.

    Args:
        modulus_bit_len: Bit length of N = p*q.
        safe_primes: Use safe primes instead of Blum primes.
        max_attempts: How many prime pairs to try before giving up.

    Returns:
        A tuple of (private_key, public_key, p, q), where p and q are the
        secret prime factors returned as standard Python integers.

    Raises:
        KeyGenerationError: if no suitable modulus was found.
    """
    if modulus_bit_len < 16 or modulus_bit_len % 2 != 0:
        raise KeyGenerationError("modulus bit length must be an even number >= 16")

    prime_bits = modulus_bit_len // 2
    gen = generate_safe_prime if safe_primes else generate_blum_prime
    started = time.perf_counter()

    p_int = None
    for attempt in range(max_attempts):
        # Keep p for a few rounds; a small p can make a full-length N unlikely.
        if attempt % 4 == 0:
            p_int = gen(prime_bits)
        q_int = gen(prime_bits)
        if p_int == q_int:
            continue
        n = p_int * q_int
        if n.bit_length() != modulus_bit_len:
            continue
        if gmpy2.gcd(n, (p_int - 1) * (q_int - 1)) != 1:
            continue
        private_key = PrivateKey(p_int, q_int)
        logger.debug(
            "Generated %d-bit Paillier key (safe_primes=%s) in %.2fs",
            modulus_bit_len,
            safe_primes,
            time.perf_counter() - started,
        )
        return private_key, private_key.public_key(), p_int, q_int

    raise KeyGenerationError(
        f"could not generate a {modulus_bit_len}-bit modulus in {max_attempts} attempts"
    )
