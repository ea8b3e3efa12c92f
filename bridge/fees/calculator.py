"""Fee calculators for the bridge proxy.

Uses SafeInt for arithmetic so that a misconfigured rate or share surfaces
as an error instead of crediting more than was deducted. All divisions
truncate toward zero, and every split is computed as `total - platform_share`
so that rounding never creates or destroys value.
"""

from __future__ import annotations

import structlog

from bridge.fees.result import CryptoFeeResult, TokenFeeResult
from bridge.fees.store import FeeConfigStore
from bridge.models.types import short
from bridge.safe_int import S

logger = structlog.get_logger()


class CryptoFeeCalculator:
    """Computes the fixed crypto fee and its platform/integrator split.

    Without an active integrator the global default is charged and goes
    entirely to the platform. With one, the integrator's fixed_fee_amount
    overrides the default when non-zero, and the platform keeps
    platform_fixed_crypto_share of it.
    """

    def __init__(self, store: FeeConfigStore) -> None:
        self.store = store

    def compute(self, integrator: str | None = None) -> CryptoFeeResult:
        default_fee = self.store.fixed_crypto_fee
        profile = self.store.active_profile(integrator)

        if profile is None:
            return CryptoFeeResult.platform_only(S(default_fee).to_uint256())

        total = S(profile.fixed_fee_amount or default_fee)
        platform_share = total.ppm(profile.platform_fixed_crypto_share)
        integrator_share = total - platform_share

        logger.debug(
            "crypto_fee_calculated",
            integrator=short(integrator),
            total_fee=total.value,
            platform_share=platform_share.value,
            integrator_share=integrator_share.value,
        )
        return CryptoFeeResult(
            total_fee=total.to_uint256(),
            platform_share=platform_share.to_uint256(),
            integrator_share=integrator_share.to_uint256(),
        )


class TokenFeeCalculator:
    """Computes the proportional token fee and its platform/integrator split.

    Fee formula:
        fee_amount = amount_with_fee * rate // 1_000_000

    Where rate is the integrator's token_fee_rate if the integrator is
    active, otherwise the global default platform rate.
    """

    def __init__(self, store: FeeConfigStore) -> None:
        self.store = store

    def compute(self, amount_with_fee: int, integrator: str | None = None) -> TokenFeeResult:
        """Calculate the token fee for an amount.

        A zero amount yields a zero fee; minimum amounts are enforced by the
        dispatcher, not here.

        Args:
            amount_with_fee: Gross amount the fee is taken from
            integrator: Optional integrator identity

        Returns:
            TokenFeeResult with fee, net amount and shares

        Raises:
            Uint256Overflow: If amount_with_fee is negative or exceeds uint256
        """
        gross = S(S(amount_with_fee).to_uint256())
        profile = self.store.active_profile(integrator)
        rate = profile.token_fee_rate if profile is not None else self.store.platform_token_fee

        fee = gross.ppm(rate)
        net = gross - fee

        if profile is None:
            platform_share = fee
        else:
            platform_share = fee.ppm(profile.platform_token_share)
        integrator_share = fee - platform_share

        logger.debug(
            "token_fee_calculated",
            integrator=short(integrator),
            amount_with_fee=gross.value,
            rate=rate,
            fee_amount=fee.value,
            platform_share=platform_share.value,
            integrator_share=integrator_share.value,
        )
        return TokenFeeResult(
            fee_amount=fee.value,
            amount_without_fee=net.value,
            platform_share=platform_share.value,
            integrator_share=integrator_share.value,
            rate=rate,
        )
