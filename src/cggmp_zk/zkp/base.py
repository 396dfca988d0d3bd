"""
Shared shape of the CGGMP21 NIZK proofs.

Every proof kind is a `Proof` subclass bound to one statement type and one
witness type. The base class owns the parts that must behave the same for
all kinds: turning capability errors during proving into
`ProofConstructionFailure`, and turning malformed input during verification
into a rejection instead of an exception. `prove` / `verify` dispatch on the
statement type so protocol code can handle the five kinds uniformly.
"""

from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Tuple, Type
import logging
import gmpy2

from cggmp_zk.common.ec import ECOperations, Point
from cggmp_zk.common.errors import (
    DegenerateArithmeticResult,
    ProofConstructionFailure,
    SetupFailure,
    VerificationRejected,
)
from cggmp_zk.common.numbers import mod_pow_with_negative
from cggmp_zk.common.paillier import PaillierError
from cggmp_zk.common.ring_pedersen import RingPedersenParams
from cggmp_zk.common.security import DEFAULT_LEVEL, SecurityParameters

logger = logging.getLogger(__name__)

_KINDS: Dict[type, Type["Proof"]] = {}


def register(statement_type: type) -> Callable[[Type["Proof"]], Type["Proof"]]:
    """Class decorator binding a proof class to its statement type."""

    def wrap(cls: Type["Proof"]) -> Type["Proof"]:
        if statement_type in _KINDS:
            raise ValueError(f"{statement_type.__name__} already has a proof kind")
        cls.statement_type = statement_type
        _KINDS[statement_type] = cls
        return cls

    return wrap


def proof_kind(statement) -> Type["Proof"]:
    try:
        return _KINDS[type(statement)]
    except KeyError:
        raise TypeError(f"no proof kind registered for {type(statement).__name__}")


class Proof(ABC):
    """A non-interactive proof: commitments plus responses."""

    # Domain separation tag for the Fiat-Shamir hash.
    TAG: bytes = b""
    statement_type: type = object
    witness_type: type = object

    @classmethod
    def new_proof(cls, statement, witness, level: SecurityParameters = DEFAULT_LEVEL) -> "Proof":
        """
        Builds a proof for `statement` from `witness`.

        Raises:
            ProofConstructionFailure: if the inputs are of the wrong kind, a
                Paillier or group operation fails, or an intermediate value
                is degenerate.
        """
        if not isinstance(statement, cls.statement_type):
            raise ProofConstructionFailure(
                f"{cls.__name__} expects {cls.statement_type.__name__}, got {type(statement).__name__}"
            )
        if not isinstance(witness, cls.witness_type):
            raise ProofConstructionFailure(
                f"{cls.__name__} expects {cls.witness_type.__name__}, got {type(witness).__name__}"
            )
        try:
            return cls._new_proof(statement, witness, level)
        except ProofConstructionFailure:
            raise
        except (
            PaillierError,
            SetupFailure,
            DegenerateArithmeticResult,
            ValueError,
            ArithmeticError,
        ) as e:
            raise ProofConstructionFailure(f"{cls.__name__}: {e}") from e

    @classmethod
    @abstractmethod
    def _new_proof(cls, statement, witness, level: SecurityParameters) -> "Proof":
        ...

    def verify(self, statement, level: SecurityParameters = DEFAULT_LEVEL) -> bool:
        """Returns True iff the proof is valid for `statement`. Never raises."""
        if not isinstance(statement, self.statement_type):
            return self.reject(f"statement is a {type(statement).__name__}")
        try:
            if not self.validate_basic():
                return self.reject("proof has missing components")
            return self._verify(statement, level)
        except (ValueError, TypeError, AttributeError, ArithmeticError) as e:
            return self.reject(f"malformed input ({e})")

    @abstractmethod
    def _verify(self, statement, level: SecurityParameters) -> bool:
        ...

    @abstractmethod
    def to_bytes_parts(self) -> List[bytes]:
        ...

    def validate_basic(self) -> bool:
        """Performs a basic check for the presence of all proof components."""
        return all(v is not None for v in vars(self).values())

    def reject(self, reason: str) -> bool:
        logger.debug("%s rejected: %s", type(self).__name__, reason)
        return False

    def __eq__(self, other) -> bool:
        return type(self) is type(other) and self.to_bytes_parts() == other.to_bytes_parts()

    def __hash__(self) -> int:
        return hash(tuple(self.to_bytes_parts()))


def require_unit(value: int, what: str) -> int:
    """Raises DegenerateArithmeticResult if a signed modpow returned its zero sentinel."""
    if value == 0:
        raise DegenerateArithmeticResult(f"{what} is not invertible")
    return value


def prod_pow(modulus: int, *pairs: Tuple[int, int]) -> int:
    """
    Computes the product of base^exp mod modulus over (base, exp) pairs with
    signed exponents. Returns 0 if any factor is degenerate.
    """
    modulus = gmpy2.mpz(modulus)
    acc = gmpy2.mpz(1)
    for base, exp in pairs:
        v = mod_pow_with_negative(base, exp, modulus)
        if v == 0:
            return 0
        acc = (acc * v) % modulus
    return int(acc)


def rp_commit(params: RingPedersenParams, x: int, r: int, what: str) -> int:
    return require_unit(params.commit(x, r), what)


def point_coords(ec: ECOperations, *points: Point) -> List[int]:
    out: List[int] = []
    for p in points:
        out.extend(ec.coords(p))
    return out


def prove(statement, witness, level: SecurityParameters = DEFAULT_LEVEL) -> Proof:
    """Builds a proof of whichever kind matches the statement type."""
    return proof_kind(statement).new_proof(statement, witness, level)


def verify(statement, proof: Proof, level: SecurityParameters = DEFAULT_LEVEL) -> bool:
    """Verifies `proof` against `statement`; False on any mismatch or failure."""
    kind = _KINDS.get(type(statement))
    if kind is None or not isinstance(proof, kind):
        logger.debug(
            "rejected: %s does not prove %s", type(proof).__name__, type(statement).__name__
        )
        return False
    return proof.verify(statement, level)


def require_valid(statement, proof: Proof, level: SecurityParameters = DEFAULT_LEVEL) -> None:
    """Raises VerificationRejected unless `proof` verifies for `statement`."""
    if not verify(statement, proof, level):
        raise VerificationRejected(
            f"{type(proof).__name__} failed verification for session {getattr(statement, 'ssid', None)}"
        )
