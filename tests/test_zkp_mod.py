import dataclasses

import pytest

from cggmp_zk.common.errors import ProofConstructionFailure
from cggmp_zk.common.paillier import generate_key_pair
from cggmp_zk.common.security import SecurityParameters
from cggmp_zk.zkp.mod import ModStatement, ModWitness, ProofMod, prove_mod, verify_mod


@pytest.fixture(scope="module")
def mod_case(paillier0):
    st = ModStatement(ssid=70, N=int(paillier0.pub.n))
    return st, prove_mod(st, ModWitness(paillier0.p, paillier0.q))


class TestProofMod:
    """Tests for the Paillier-Blum modulus proof."""

    def test_proof_verifies(self, mod_case, level):
        st, proof = mod_case
        assert len(proof.X) == len(proof.Z) == level.zk_mod_iterations
        assert verify_mod(st, proof)

    def test_other_modulus_rejected(self, mod_case, paillier1):
        st, proof = mod_case
        assert not verify_mod(dataclasses.replace(st, N=int(paillier1.pub.n)), proof)
        assert not verify_mod(dataclasses.replace(st, ssid=st.ssid + 1), proof)

    def test_tampered_root_rejected(self, mod_case):
        st, proof = mod_case
        X = list(proof.X)
        X[0] = (X[0] * 2) % st.N
        assert not verify_mod(st, ProofMod(proof.W, X, proof.A, proof.B, proof.Z))
        Z = list(proof.Z)
        Z[-1] = (Z[-1] + 1) % st.N
        assert not verify_mod(st, ProofMod(proof.W, proof.X, proof.A, proof.B, Z))

    def test_flipped_choice_bit_rejected(self, mod_case):
        st, proof = mod_case
        assert not verify_mod(st, ProofMod(proof.W, proof.X, proof.A ^ 1, proof.B, proof.Z))

    def test_iteration_count_is_enforced(self, mod_case):
        st, proof = mod_case
        assert not verify_mod(st, proof, SecurityParameters(zk_mod_iterations=13))

    def test_non_blum_witness_fails_construction(self):
        with pytest.raises(ProofConstructionFailure):
            prove_mod(ModStatement(ssid=71, N=5 * 13), ModWitness(5, 13))
        with pytest.raises(ProofConstructionFailure):
            prove_mod(ModStatement(ssid=72, N=7 * 11 + 2), ModWitness(7, 11))

    def test_prime_modulus_rejected(self, mod_case):
        st, proof = mod_case
        assert not verify_mod(dataclasses.replace(st, N=(1 << 127) - 1), proof)

    def test_small_modulus(self):
        _, pub, p, q = generate_key_pair(512)
        st = ModStatement(ssid=73, N=int(pub.n))
        assert verify_mod(st, prove_mod(st, ModWitness(p, q)))

    def test_bytes_round_trip(self, mod_case):
        st, proof = mod_case
        restored = ProofMod.from_bytes(proof.to_bytes_parts())
        assert restored == proof
        assert verify_mod(st, restored)
        with pytest.raises(ValueError):
            ProofMod.from_bytes(proof.to_bytes_parts()[:-1])

    def test_malformed_components_rejected(self, mod_case):
        st, proof = mod_case
        assert not verify_mod(st, ProofMod(proof.W, 5, proof.A, proof.B, proof.Z))
        assert not verify_mod(st, ProofMod(proof.W, proof.X, proof.A, proof.B, 9))
        assert not verify_mod(ModStatement(ssid=74, N=77), ProofMod(3, 5, 1, 1, [1]))
