"""Fee accounting for the bridge proxy.

This module provides:
- The fee configuration store (global defaults, integrator profiles, limits)
- The fixed crypto fee calculator
- The proportional token fee calculator

Usage:
    from bridge.fees import FeeConfigStore, CryptoFeeCalculator, TokenFeeCalculator

    store = FeeConfigStore(FeeSettings.from_env())
    crypto = CryptoFeeCalculator(store).compute(integrator)
    token = TokenFeeCalculator(store).compute(amount, integrator)

    assert token.fee_amount + token.amount_without_fee == amount
"""

from bridge.fees.calculator import CryptoFeeCalculator, TokenFeeCalculator
from bridge.fees.config import DEFAULT_FEE_SETTINGS, FeeSettings
from bridge.fees.result import CryptoFeeResult, TokenFeeResult
from bridge.fees.store import FeeConfigStore

__all__ = [
    # Calculators
    "CryptoFeeCalculator",
    "TokenFeeCalculator",
    # Config
    "FeeSettings",
    "DEFAULT_FEE_SETTINGS",
    "FeeConfigStore",
    # Result
    "CryptoFeeResult",
    "TokenFeeResult",
]
