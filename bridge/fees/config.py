"""Fee settings for the bridge proxy."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from bridge.constants import DEFAULT_FIXED_CRYPTO_FEE, DEFAULT_PLATFORM_TOKEN_FEE
from bridge.models.types import normalize_address


@dataclass(frozen=True)
class FeeSettings:
    """Initial fee parameters the config store is constructed with.

    Attributes:
        fixed_crypto_fee: Native-value fee charged per request absent an
            integrator override (default: 1e15 wei)
        platform_token_fee: Proportional fee rate in ppm applied when no
            integrator is set (default: 3,000 = 0.3%)
        operators: Identities allowed to change fee configuration and collect
            platform fees
    """

    fixed_crypto_fee: int = DEFAULT_FIXED_CRYPTO_FEE
    platform_token_fee: int = DEFAULT_PLATFORM_TOKEN_FEE
    operators: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_env(cls) -> FeeSettings:
        """Build settings from environment variables.

        - BRIDGE_FIXED_CRYPTO_FEE: default fixed crypto fee in wei
        - BRIDGE_PLATFORM_TOKEN_FEE: default token fee rate in ppm
        - BRIDGE_OPERATORS: comma-separated operator addresses
        """
        operators_raw = os.environ.get("BRIDGE_OPERATORS", "")
        return cls(
            fixed_crypto_fee=int(
                os.environ.get("BRIDGE_FIXED_CRYPTO_FEE", str(DEFAULT_FIXED_CRYPTO_FEE))
            ),
            platform_token_fee=int(
                os.environ.get("BRIDGE_PLATFORM_TOKEN_FEE", str(DEFAULT_PLATFORM_TOKEN_FEE))
            ),
            operators=frozenset(
                normalize_address(op.strip(), validate=True)
                for op in operators_raw.split(",")
                if op.strip()
            ),
        )


# Default configuration instance
DEFAULT_FEE_SETTINGS = FeeSettings()
