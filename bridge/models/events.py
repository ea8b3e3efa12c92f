"""Events observable by off-chain consumers."""

from pydantic import BaseModel, Field

from bridge.models.request import BridgeRequest, RequestShape
from bridge.models.types import Address, Uint256


class RequestSent(BaseModel):
    """Emitted exactly once per successful bridge request."""

    source_asset: Address = Field(alias="srcInputToken")
    source_amount: Uint256 = Field(alias="srcInputAmount")
    destination_chain_id: int = Field(alias="dstChainID")
    destination_asset: Address = Field(alias="dstOutputToken")
    recipient: Address
    integrator: Address | None = None
    router: Address
    shape: RequestShape
    forwarded_asset: Address = Field(alias="forwardedToken")
    forwarded_amount: Uint256 = Field(alias="forwardedAmount")

    model_config = {"populate_by_name": True, "frozen": True}

    @classmethod
    def from_request(
        cls,
        request: BridgeRequest,
        shape: RequestShape,
        forwarded_asset: str,
        forwarded_amount: int,
    ) -> "RequestSent":
        return cls(
            source_asset=request.source_asset,
            source_amount=request.source_amount,
            destination_chain_id=request.destination_chain_id,
            destination_asset=request.destination_asset,
            recipient=request.recipient,
            integrator=request.integrator,
            router=request.router,
            shape=shape,
            forwarded_asset=forwarded_asset,
            forwarded_amount=forwarded_amount,
        )
