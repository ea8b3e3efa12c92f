"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Token addresses, accounts and common amounts
- factories: Request and profile factory functions
"""

from tests.helpers.constants import (
    ANY_ROUTER,
    DEFAULT_AMOUNT_IN,
    DEFAULT_DST_CHAIN,
    FIXED_CRYPTO_FEE,
    INTEGRATOR,
    NATIVE,
    OPERATOR,
    PLATFORM_TOKEN_FEE,
    RECIPIENT,
    SENDER,
    SWAP_TOKEN,
    TRANSIT_TOKEN,
    TREASURY,
    USDC,
    WETH,
)
from tests.helpers.factories import make_profile, make_request

__all__ = [
    # Constants
    "ANY_ROUTER",
    "DEFAULT_AMOUNT_IN",
    "DEFAULT_DST_CHAIN",
    "FIXED_CRYPTO_FEE",
    "INTEGRATOR",
    "NATIVE",
    "OPERATOR",
    "PLATFORM_TOKEN_FEE",
    "RECIPIENT",
    "SENDER",
    "SWAP_TOKEN",
    "TRANSIT_TOKEN",
    "TREASURY",
    "USDC",
    "WETH",
    # Factories
    "make_request",
    "make_profile",
]
