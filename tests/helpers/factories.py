"""Factory functions for creating test objects.

Usage:
    from tests.helpers import make_request, make_profile

    request = make_request(source_asset=SWAP_TOKEN, destination_asset=TRANSIT_TOKEN)
"""

from bridge.models.profile import IntegratorProfile
from bridge.models.request import BridgeRequest
from tests.helpers.constants import (
    ANY_ROUTER,
    DEFAULT_AMOUNT_IN,
    DEFAULT_DST_CHAIN,
    RECIPIENT,
    TRANSIT_TOKEN,
)


def make_request(
    source_asset: str = TRANSIT_TOKEN,
    source_amount: int = DEFAULT_AMOUNT_IN,
    destination_asset: str = TRANSIT_TOKEN,
    min_destination_amount: int = 0,
    integrator: str | None = None,
    recipient: str = RECIPIENT,
    destination_chain_id: int = DEFAULT_DST_CHAIN,
    router: str = ANY_ROUTER,
) -> BridgeRequest:
    """Create a bridge request with sensible defaults.

    Defaults bridge DEFAULT_AMOUNT_IN of the transit token to chain 56
    without an integrator.
    """
    return BridgeRequest(
        source_asset=source_asset,
        source_amount=source_amount,
        destination_chain_id=destination_chain_id,
        destination_asset=destination_asset,
        min_destination_amount=min_destination_amount,
        recipient=recipient,
        integrator=integrator,
        router=router,
    )


def make_profile(
    token_fee_rate: int = 60_000,
    platform_token_share: int = 400_000,
    platform_fixed_crypto_share: int = 0,
    fixed_fee_amount: int = 0,
    is_integrator: bool = True,
) -> IntegratorProfile:
    """Create an integrator profile.

    Defaults match the reference integrator: 6% token fee, 40% of it kept
    by the platform, all of the crypto fee going to the integrator.
    """
    return IntegratorProfile(
        is_integrator=is_integrator,
        token_fee_rate=token_fee_rate,
        platform_token_share=platform_token_share,
        platform_fixed_crypto_share=platform_fixed_crypto_share,
        fixed_fee_amount=fixed_fee_amount,
    )
