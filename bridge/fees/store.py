"""Fee configuration store.

Holds the global fee parameters, the per-integrator profiles and the
per-asset amount limits. Mutations are operator-only and take effect for the
very next read; there is no caching layer in between.
"""

from __future__ import annotations

import threading

import structlog

from bridge.errors import UnauthorizedConfigChange
from bridge.fees.config import DEFAULT_FEE_SETTINGS, FeeSettings
from bridge.models.profile import (
    INACTIVE_PROFILE,
    AmountLimits,
    GlobalFeeConfig,
    IntegratorProfile,
)
from bridge.models.types import normalize_address, short

logger = structlog.get_logger()

NO_LIMITS = AmountLimits()


class FeeConfigStore:
    """Global and per-integrator fee parameters.

    Args:
        settings: Initial parameters. Uses DEFAULT_FEE_SETTINGS if not provided.
    """

    def __init__(self, settings: FeeSettings | None = None) -> None:
        settings = settings or DEFAULT_FEE_SETTINGS
        self._lock = threading.RLock()
        self._global = GlobalFeeConfig(
            default_fixed_crypto_fee=settings.fixed_crypto_fee,
            default_platform_token_fee_rate=settings.platform_token_fee,
        )
        self._operators = {normalize_address(op) for op in settings.operators}
        self._profiles: dict[str, IntegratorProfile] = {}
        self._limits: dict[str, AmountLimits] = {}

    # --- Reads ---

    @property
    def global_config(self) -> GlobalFeeConfig:
        with self._lock:
            return self._global

    @property
    def fixed_crypto_fee(self) -> int:
        return self.global_config.default_fixed_crypto_fee

    @property
    def platform_token_fee(self) -> int:
        return self.global_config.default_platform_token_fee_rate

    def integrator_info(self, identity: str) -> IntegratorProfile:
        """Profile stored for identity, or the inactive profile if absent."""
        with self._lock:
            return self._profiles.get(normalize_address(identity), INACTIVE_PROFILE)

    def active_profile(self, identity: str | None) -> IntegratorProfile | None:
        """Profile for identity if it is a recognized integrator, else None."""
        if identity is None:
            return None
        profile = self.integrator_info(identity)
        return profile if profile.is_integrator else None

    def amount_limits(self, asset: str) -> AmountLimits:
        with self._lock:
            return self._limits.get(normalize_address(asset), NO_LIMITS)

    def is_operator(self, caller: str) -> bool:
        with self._lock:
            return normalize_address(caller) in self._operators

    # --- Operator mutations ---

    def set_integrator_info(
        self, caller: str, identity: str, profile: IntegratorProfile
    ) -> None:
        """Replace the fee profile of an integrator.

        Raises:
            UnauthorizedConfigChange: If caller is not an operator
        """
        with self._lock:
            self._require_operator(caller, "set_integrator_info")
            self._profiles[normalize_address(identity)] = profile
        logger.info(
            "integrator_info_set",
            integrator=short(identity),
            is_integrator=profile.is_integrator,
            token_fee_rate=profile.token_fee_rate,
            platform_token_share=profile.platform_token_share,
            platform_fixed_crypto_share=profile.platform_fixed_crypto_share,
            fixed_fee_amount=profile.fixed_fee_amount,
        )

    def set_fixed_crypto_fee(self, caller: str, amount: int) -> None:
        """Change the default fixed crypto fee.

        Raises:
            UnauthorizedConfigChange: If caller is not an operator
            ValueError: If amount is not a valid uint256
        """
        with self._lock:
            self._require_operator(caller, "set_fixed_crypto_fee")
            self._global = GlobalFeeConfig(
                default_fixed_crypto_fee=amount,
                default_platform_token_fee_rate=self._global.default_platform_token_fee_rate,
            )
        logger.info("fixed_crypto_fee_set", amount=amount)

    def set_platform_token_fee(self, caller: str, rate: int) -> None:
        """Change the default token fee rate (ppm).

        Raises:
            UnauthorizedConfigChange: If caller is not an operator
            ValueError: If rate is outside [0, 1_000_000]
        """
        with self._lock:
            self._require_operator(caller, "set_platform_token_fee")
            self._global = GlobalFeeConfig(
                default_fixed_crypto_fee=self._global.default_fixed_crypto_fee,
                default_platform_token_fee_rate=rate,
            )
        logger.info("platform_token_fee_set", rate=rate)

    def set_amount_limits(self, caller: str, asset: str, limits: AmountLimits) -> None:
        """Set the allowed source amount range for an asset.

        Raises:
            UnauthorizedConfigChange: If caller is not an operator
            ValueError: If max_amount is non-zero and below min_amount
        """
        if limits.max_amount and limits.max_amount < limits.min_amount:
            raise ValueError(
                f"max_amount {limits.max_amount} below min_amount {limits.min_amount}"
            )
        with self._lock:
            self._require_operator(caller, "set_amount_limits")
            self._limits[normalize_address(asset)] = limits
        logger.info(
            "amount_limits_set",
            asset=short(asset),
            min_amount=limits.min_amount,
            max_amount=limits.max_amount,
        )

    def _require_operator(self, caller: str, operation: str) -> None:
        if normalize_address(caller) not in self._operators:
            logger.warning(
                "unauthorized_config_change",
                caller=short(caller),
                operation=operation,
            )
            raise UnauthorizedConfigChange(f"{caller} may not call {operation}")
