from cggmp_zk.zkp import hash as zkhash
from cggmp_zk.zkp.hash import challenge, sha512_256i_tagged


def test_tags_separate_domains():
    assert sha512_256i_tagged(b"a", 1, 2) != sha512_256i_tagged(b"b", 1, 2)
    assert sha512_256i_tagged(b"a", 1, 2) == sha512_256i_tagged(b"a", 1, 2)
    assert sha512_256i_tagged(b"a", -1) != sha512_256i_tagged(b"a", 1)


def test_challenge_is_signed_and_bounded():
    q = 1 << 64
    values = [challenge(q, b"t", i) for i in range(64)]
    assert all(-q <= e <= q for e in values)
    assert any(e < 0 for e in values)


def test_only_tagged_hashing_is_exposed():
    assert not hasattr(zkhash, "sha512_256i")
