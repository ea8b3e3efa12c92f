"""Pydantic models for bridge data structures."""

from bridge.models.events import RequestSent
from bridge.models.profile import INACTIVE_PROFILE, AmountLimits, GlobalFeeConfig, IntegratorProfile
from bridge.models.request import BridgeRequest, RequestShape, SwapInstruction
from bridge.models.types import Address, Bytes, Ppm, Uint256

__all__ = [
    # Types
    "Address",
    "Bytes",
    "Ppm",
    "Uint256",
    # Fee configuration
    "IntegratorProfile",
    "INACTIVE_PROFILE",
    "GlobalFeeConfig",
    "AmountLimits",
    # Requests
    "BridgeRequest",
    "RequestShape",
    "SwapInstruction",
    # Events
    "RequestSent",
]
