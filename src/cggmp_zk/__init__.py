"""
Zero-knowledge proofs and Ring-Pedersen setup for CGGMP21 threshold ECDSA.
"""

from cggmp_zk.common.errors import (
    DegenerateArithmeticResult,
    ProofConstructionFailure,
    SetupFailure,
    VerificationRejected,
    ZKError,
)
from cggmp_zk.common.numbers import mod_pow_with_negative, sample_relatively_prime_integer
from cggmp_zk.common.ring_pedersen import (
    PrimeMode,
    RingPedersenParams,
    RingPedersenWitness,
    generate_ring_pedersen,
)
from cggmp_zk.common.security import DEFAULT_LEVEL, SecurityParameters
from cggmp_zk.zkp.affg import AffgStatement, AffgWitness, ProofAffg, prove_affg, verify_affg
from cggmp_zk.zkp.base import Proof, prove, require_valid, verify
from cggmp_zk.zkp.dec import DecStatement, DecWitness, ProofDec, prove_dec, verify_dec
from cggmp_zk.zkp.logstar import (
    LogstarStatement,
    LogstarWitness,
    ProofLogstar,
    prove_logstar,
    verify_logstar,
)
from cggmp_zk.zkp.mod import ModStatement, ModWitness, ProofMod, prove_mod, verify_mod
from cggmp_zk.zkp.mul import MulStatement, MulWitness, ProofMul, prove_mul, verify_mul
from cggmp_zk.zkp.mulstar import (
    MulstarStatement,
    MulstarWitness,
    ProofMulstar,
    prove_mulstar,
    verify_mulstar,
)
from cggmp_zk.zkp.prm import PrmStatement, ProofPrm, prove_prm, verify_prm

__version__ = "0.1.0"
