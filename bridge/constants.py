"""Protocol constants for the multichain bridge proxy.

Centralizes well-known identifiers and fee parameters.
"""

from bridge.models.types import is_valid_address

# Fee rates are expressed in parts-per-million (1_000_000 == 100%)
PPM_DENOMINATOR = 1_000_000


def _validate_address(name: str, address: str) -> str:
    """Validate and return an address constant.

    Raises:
        ValueError: If the address is invalid
    """
    if not is_valid_address(address):
        raise ValueError(f"Invalid {name} address: {address} (must be 0x + 40 hex chars)")
    return address


# The native coin is keyed by the zero address in the ledger and in requests
NATIVE_TOKEN = _validate_address("NATIVE_TOKEN", "0x" + "00" * 20)

# Defaults used when no environment overrides are present
# 0.001 native coin per request
DEFAULT_FIXED_CRYPTO_FEE = 10**15
# 0.3%
DEFAULT_PLATFORM_TOKEN_FEE = 3_000
