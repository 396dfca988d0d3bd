import gmpy2
import pytest
from Crypto.Util.number import isPrime

from cggmp_zk.common.paillier import (
    KeyGenerationError,
    MessageMalFormedError,
    MessageTooLongError,
    WrongRandomnessError,
    generate_key_pair,
    generate_safe_prime,
)


@pytest.fixture(scope="module")
def small_key():
    return generate_key_pair(512)


class TestPaillier:
    """Tests for the Paillier capability used by the proofs."""

    def test_key_shape(self, small_key):
        priv, pub, p, q = small_key
        assert pub.n == p * q
        assert gmpy2.mpz(pub.n).bit_length() == 512
        assert p % 4 == 3 and q % 4 == 3
        assert priv.public_key() == pub
        assert "p=" not in repr(priv) and str(p) not in repr(priv)

    def test_encrypt_decrypt(self, small_key):
        priv, pub, _, _ = small_key
        for m in (0, 1, 12345, int(pub.n) - 1):
            assert priv.decrypt(pub.encrypt(m)) == m

    def test_encrypt_with_randomness_is_deterministic(self, small_key):
        priv, pub, _, _ = small_key
        c, rho = pub.encrypt_and_return_randomness(99)
        assert pub.encrypt_with_randomness(99, rho) == c
        assert priv.get_randomness(c) == rho

    def test_signed_encryption(self, small_key):
        priv, pub, _, _ = small_key
        c, rho = pub.encrypt_signed(-42)
        assert priv.decrypt_signed(c) == -42
        assert priv.decrypt(c) == pub.n - 42
        c2, _ = pub.encrypt_signed(-42, rho)
        assert c2 == c

    def test_homomorphic_operations(self, small_key):
        priv, pub, _, _ = small_key
        c1, c2 = pub.encrypt(20), pub.encrypt(22)
        assert priv.decrypt(pub.homo_add(c1, c2)) == 42
        assert priv.decrypt(pub.homo_mult(3, c1)) == 60
        assert priv.decrypt_signed(pub.homo_mult_signed(-3, c1)) == -60

    def test_invalid_inputs(self, small_key):
        _, pub, _, _ = small_key
        with pytest.raises(MessageMalFormedError):
            pub.encrypt(-1)
        with pytest.raises(MessageMalFormedError):
            pub.encrypt(pub.n)
        with pytest.raises(MessageTooLongError):
            pub.encrypt_signed(-int(pub.n))
        with pytest.raises(WrongRandomnessError):
            pub.encrypt_with_randomness(1, 0)
        with pytest.raises(MessageTooLongError):
            pub.homo_mult(2, pub.n_square)

    def test_bad_modulus_size(self):
        with pytest.raises(KeyGenerationError):
            generate_key_pair(15)
        with pytest.raises(KeyGenerationError):
            generate_key_pair(8)


def test_safe_prime():
    p = generate_safe_prime(128)
    assert p.bit_length() == 128
    assert isPrime(p) and isPrime((p - 1) // 2)
    assert p % 4 == 3


def test_safe_prime_key_pair():
    _, pub, p, q = generate_key_pair(256, safe_primes=True)
    assert pub.n == p * q
    assert isPrime((p - 1) // 2) and isPrime((q - 1) // 2)
