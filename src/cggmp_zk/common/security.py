"""
Security parameters for the proof family and the Ring-Pedersen setup.

Only the base fields of `SecurityParameters` are stored; every range and
modulus size is derived from them so the table can never drift out of step.
Changing any value here changes proof soundness: smaller numbers weaken the
scheme, larger ones only cost time.
"""

from dataclasses import dataclass
import logging
import os

logger = logging.getLogger(__name__)

ENV_SEC_PARAM = "CGGMP_ZK_SEC_PARAM"
ENV_STAT_PARAM = "CGGMP_ZK_STAT_PARAM"


@dataclass(frozen=True)
class SecurityParameters:
    """Base security bits plus the bit lengths derived from them."""

    sec_param: int = 256
    stat_param: int = 80
    ot_param: int = 128
    # ZK_MOD_ITERATIONS is the number of iterations that are performed to prove the
    # validity of a Paillier-Blum modulus N.
    # Theoretically, the number of iterations corresponds to the statistical
    # security parameter, and would be 80.
    # The way it is used in the refresh protocol ensures that the prover cannot
    # guess in advance the secret rho used to instantiate the hash function.
    # Since sampling primes is expensive, we argue that the security can be
    # reduced.
    zk_mod_iterations: int = 12

    @property
    def sec_bytes(self) -> int:
        return self.sec_param // 8

    @property
    def ot_bytes(self) -> int:
        return self.ot_param // 8

    @property
    def L(self) -> int:
        return 1 * self.sec_param

    @property
    def L_PRIME(self) -> int:
        return 5 * self.sec_param

    @property
    def EPSILON(self) -> int:
        return 2 * self.sec_param

    @property
    def L_PLUS_EPSILON(self) -> int:
        return self.L + self.EPSILON

    @property
    def L_PRIME_PLUS_EPSILON(self) -> int:
        return self.L_PRIME + self.EPSILON

    @property
    def bits_int_modn(self) -> int:
        return 8 * self.sec_param

    @property
    def bytes_int_modn(self) -> int:
        return self.bits_int_modn // 8

    @property
    def bits_blum_prime(self) -> int:
        return 4 * self.sec_param

    @property
    def bits_paillier(self) -> int:
        return 2 * self.bits_blum_prime

    @property
    def bytes_paillier(self) -> int:
        return self.bits_paillier // 8

    @property
    def bytes_ciphertext(self) -> int:
        return 2 * self.bytes_paillier

    def validate(self) -> "SecurityParameters":
        """Rejects levels that cannot produce byte-aligned moduli."""
        for name in ("sec_param", "stat_param", "ot_param", "zk_mod_iterations"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        if self.sec_param % 8 != 0 or self.ot_param % 8 != 0:
            raise ValueError("sec_param and ot_param must be multiples of 8")
        return self

    @classmethod
    def from_env(cls) -> "SecurityParameters":
        """
        Builds a level from CGGMP_ZK_SEC_PARAM / CGGMP_ZK_STAT_PARAM, falling
        back to the defaults for anything unset.
        """
        kwargs = {}
        for env_name, field_name in (
            (ENV_SEC_PARAM, "sec_param"),
            (ENV_STAT_PARAM, "stat_param"),
        ):
            raw = os.environ.get(env_name)
            if raw is None:
                continue
            try:
                kwargs[field_name] = int(raw)
            except ValueError:
                raise ValueError(f"{env_name} must be an integer, got {raw!r}")
        level = cls(**kwargs).validate()
        if level != DEFAULT_LEVEL:
            logger.warning(
                "Using non-default security level: sec_param=%d stat_param=%d",
                level.sec_param,
                level.stat_param,
            )
        return level


DEFAULT_LEVEL = SecurityParameters()

# Plain constants mirroring DEFAULT_LEVEL.
SEC_PARAM = DEFAULT_LEVEL.sec_param  # = 256
SEC_BYTES = DEFAULT_LEVEL.sec_bytes  # = 32
OT_PARAM = DEFAULT_LEVEL.ot_param  # = 128
OT_BYTES = DEFAULT_LEVEL.ot_bytes  # = 16
STAT_PARAM = DEFAULT_LEVEL.stat_param  # = 80
ZK_MOD_ITERATIONS = DEFAULT_LEVEL.zk_mod_iterations  # = 12

L = DEFAULT_LEVEL.L  # = 256
L_PRIME = DEFAULT_LEVEL.L_PRIME  # = 1280
EPSILON = DEFAULT_LEVEL.EPSILON  # = 512
L_PLUS_EPSILON = DEFAULT_LEVEL.L_PLUS_EPSILON  # = 768
L_PRIME_PLUS_EPSILON = DEFAULT_LEVEL.L_PRIME_PLUS_EPSILON  # = 1792

BITS_INT_MODN = DEFAULT_LEVEL.bits_int_modn  # = 2048
BYTES_INT_MODN = DEFAULT_LEVEL.bytes_int_modn  # = 256

BITS_BLUM_PRIME = DEFAULT_LEVEL.bits_blum_prime  # = 1024
BITS_PAILLIER = DEFAULT_LEVEL.bits_paillier  # = 2048

BYTES_PAILLIER = DEFAULT_LEVEL.bytes_paillier  # = 256
BYTES_CIPHERTEXT = DEFAULT_LEVEL.bytes_ciphertext  # = 512
