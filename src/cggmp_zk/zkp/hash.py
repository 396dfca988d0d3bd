"""
Fiat-Shamir hashing: SHA-512/256 over delimited integer encodings, and the
mapping from a transcript hash to a signed challenge in [-q, q].
"""

from typing import List
import hashlib

from cggmp_zk.common.numbers import int_to_bytes, rejection_sample

HASH_INPUT_DELIMITER = b"$"


def sha512_256_util(h, in_data: List[bytes]) -> bytes:
    """Helper function to hash a list of byte strings."""
    if not in_data:
        return None
    data = bytearray()
    for b in in_data:
        data.extend(b)
        data.extend(HASH_INPUT_DELIMITER)
    h.update(data)
    return h.digest()


def sha512_256(*in_data: bytes) -> bytes:
    """Computes the SHA-512/256 hash of one or more byte strings.

    Inputs are unambiguously joined with a delimiter before hashing to prevent
    collisions between different combinations of inputs (e.g., H(a,b) != H(ab)).
    """
    h = hashlib.new("sha512_256")
    return sha512_256_util(h, list(in_data))


def _encode_ints(in_data) -> List[bytes]:
    # A sign byte keeps -x and x apart.
    return [(b"-" if int(i) < 0 else b"+") + int_to_bytes(abs(int(i))) for i in in_data]


def sha512_256i_tagged(tag: bytes, *in_data: int) -> int:
    """Computes a domain-separated SHA-512/256 hash of one or more integers.

    This "tagged" hash provides domain separation, ensuring that hashes intended
    for one purpose cannot be reused for another. The construction is a common
    pattern: H(H(tag) || H(tag) || data).
    """
    tag_bz = sha512_256(tag)
    h = hashlib.new("sha512_256")
    h.update(tag_bz)
    h.update(tag_bz)
    hashed_bytes = sha512_256_util(h, _encode_ints(in_data))
    return int.from_bytes(hashed_bytes, "big")


def challenge(q: int, tag: bytes, *in_data: int) -> int:
    """Derives a Fiat-Shamir challenge uniformly from [-q, q]."""
    e_hash = sha512_256i_tagged(tag, *in_data)
    return rejection_sample(2 * q + 1, e_hash) - q
