"""Pydantic models for bridge requests."""

from enum import Enum

from pydantic import BaseModel, Field

from bridge.models.types import Address, Bytes, Uint256


class RequestShape(str, Enum):
    """The four ways a request can be dispatched."""

    TOKEN_NO_SWAP = "token"
    NATIVE_NO_SWAP = "native"
    TOKEN_WITH_SWAP = "token-swap"
    NATIVE_WITH_SWAP = "native-swap"

    @property
    def is_native(self) -> bool:
        """True if the principal arrives as attached native value."""
        return self in (RequestShape.NATIVE_NO_SWAP, RequestShape.NATIVE_WITH_SWAP)

    @property
    def with_swap(self) -> bool:
        """True if the principal goes through the swap adapter before bridging."""
        return self in (RequestShape.TOKEN_WITH_SWAP, RequestShape.NATIVE_WITH_SWAP)


class BridgeRequest(BaseModel):
    """Parameters of a single bridge call.

    Constructed per call and consumed synchronously by the dispatcher;
    never persisted.
    """

    source_asset: Address = Field(alias="srcInputToken")
    source_amount: Uint256 = Field(alias="srcInputAmount")
    destination_chain_id: int = Field(alias="dstChainID", ge=0)
    destination_asset: Address = Field(alias="dstOutputToken")
    min_destination_amount: Uint256 = Field(default=0, alias="dstMinOutputAmount")
    recipient: Address
    integrator: Address | None = Field(
        default=None,
        description="Integrator identity; omitted or None means no integrator.",
    )
    router: Address = Field(description="Destination router identifier.")

    model_config = {"populate_by_name": True, "frozen": True}


class SwapInstruction(BaseModel):
    """Opaque swap adapter input for the pre-swap paths."""

    payload: Bytes = Field(
        default="0x",
        description="Adapter-specific swap calldata, including any venue selection.",
    )

    model_config = {"populate_by_name": True, "frozen": True}
