"""
Error taxonomy shared by the Ring-Pedersen setup and the proof family.

Verification failure is not an exception: `verify` methods return False.
`VerificationRejected` exists for protocol code that prefers to abort a
session by raising.
"""


class ZKError(Exception):
    """Base exception for this package."""

    pass


class SetupFailure(ZKError):
    """Raised when trusted parameters cannot be generated at the requested strength."""

    pass


class ProofConstructionFailure(ZKError):
    """Raised when a proof cannot be built from the given statement and witness."""

    pass


class VerificationRejected(ZKError):
    """Raised by `require_valid` when a proof does not verify."""

    pass


class DegenerateArithmeticResult(ZKError):
    """Raised when a helper returned its sentinel (zero) where a unit was required."""

    pass
