"""Pydantic models for fee configuration."""

from pydantic import BaseModel, Field

from bridge.models.types import Ppm, Uint256


class IntegratorProfile(BaseModel):
    """Fee-sharing profile of a recognized integrator.

    All share fields are the platform's cut; the remainder of each fee is
    credited to the integrator's own pool.
    """

    is_integrator: bool = Field(default=False, alias="isIntegrator")
    token_fee_rate: Ppm = Field(
        default=0,
        alias="tokenFeeRate",
        description="Rate applied to the bridged amount, in ppm.",
    )
    platform_fixed_crypto_share: Ppm = Field(
        default=0,
        alias="platformFixedCryptoShare",
        description="Platform share of the fixed crypto fee, in ppm.",
    )
    platform_token_share: Ppm = Field(
        default=0,
        alias="platformTokenShare",
        description="Platform share of the collected token fee, in ppm.",
    )
    fixed_fee_amount: Uint256 = Field(
        default=0,
        alias="fixedFeeAmount",
        description="Override of the fixed crypto fee; 0 uses the global default.",
    )

    model_config = {"populate_by_name": True, "frozen": True}


# Identities absent from the store behave as this profile
INACTIVE_PROFILE = IntegratorProfile()


class GlobalFeeConfig(BaseModel):
    """Fee parameters applied when no integrator profile is active."""

    default_fixed_crypto_fee: Uint256 = Field(alias="defaultFixedCryptoFee")
    default_platform_token_fee_rate: Ppm = Field(alias="defaultPlatformTokenFeeRate")

    model_config = {"populate_by_name": True, "frozen": True}


class AmountLimits(BaseModel):
    """Allowed source amount range for one asset (max_amount == 0 means uncapped)."""

    min_amount: Uint256 = Field(default=0, alias="minAmount")
    max_amount: Uint256 = Field(default=0, alias="maxAmount")

    model_config = {"populate_by_name": True, "frozen": True}

    def allows(self, amount: int) -> bool:
        if amount < self.min_amount:
            return False
        return self.max_amount == 0 or amount <= self.max_amount
