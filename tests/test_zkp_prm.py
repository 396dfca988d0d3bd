import dataclasses

import pytest

from cggmp_zk.common.errors import ProofConstructionFailure
from cggmp_zk.common.ring_pedersen import (
    RingPedersenParams,
    RingPedersenWitness,
    generate_normal_ring_pedersen,
)
from cggmp_zk.common.security import SecurityParameters
from cggmp_zk.zkp.base import prove, verify
from cggmp_zk.zkp.prm import PrmStatement, ProofPrm, prove_prm, verify_prm


@pytest.fixture(scope="module")
def prm_case(aux, aux_witness):
    st = PrmStatement(ssid=60, params=aux)
    return st, prove_prm(st, aux_witness)


class TestProofPrm:
    """Tests for the Ring-Pedersen parameter proof."""

    def test_proof_verifies(self, prm_case, level):
        st, proof = prm_case
        assert len(proof.A) == len(proof.Z) == level.stat_param
        assert verify_prm(st, proof)
        assert verify(st, proof)

    def test_dispatch(self, aux, aux_witness):
        st = PrmStatement(ssid=61, params=aux)
        proof = prove(st, aux_witness)
        assert isinstance(proof, ProofPrm)
        assert verify_prm(st, proof)

    def test_wrong_lambda_rejected(self, aux, aux_witness):
        st = PrmStatement(ssid=62, params=aux)
        bad = RingPedersenWitness(aux_witness.lambda_ + 1, aux_witness.lambda_inv, aux_witness.phi)
        assert not verify_prm(st, prove_prm(st, bad))

    def test_tampered_response_rejected(self, prm_case):
        st, proof = prm_case
        Z = list(proof.Z)
        Z[3] = (Z[3] + 1) % st.params.N
        assert not verify_prm(st, ProofPrm(list(proof.A), Z))

    def test_other_params_rejected(self, prm_case):
        st, proof = prm_case
        small, _ = generate_normal_ring_pedersen(SecurityParameters(sec_param=64))
        other = dataclasses.replace(st, params=small)
        assert not verify_prm(other, proof)
        assert not verify_prm(dataclasses.replace(st, ssid=st.ssid + 1), proof)

    def test_iteration_count_is_enforced(self, prm_case):
        st, proof = prm_case
        short = ProofPrm(proof.A[:-1], proof.Z[:-1])
        assert not verify_prm(st, short)
        assert not verify_prm(st, ProofPrm(proof.A, proof.Z[:-1]))

    def test_bytes_round_trip(self, prm_case):
        st, proof = prm_case
        restored = ProofPrm.from_bytes(proof.to_bytes_parts())
        assert restored == proof
        assert verify_prm(st, restored)
        with pytest.raises(ValueError):
            ProofPrm.from_bytes(proof.to_bytes_parts()[:-1])

    def test_bad_witness_fails_construction(self, aux):
        st = PrmStatement(ssid=63, params=aux)
        with pytest.raises(ProofConstructionFailure):
            prove_prm(st, RingPedersenWitness(2, 1, 1))

    def test_malformed_components_rejected(self, prm_case):
        st, proof = prm_case
        assert not verify_prm(st, ProofPrm(5, list(proof.Z)))
        assert not verify_prm(st, ProofPrm(list(proof.A), 7))
        assert not verify_prm(PrmStatement(1, RingPedersenParams(35, 4, 9)), ProofPrm(5, [1]))
