"""API endpoints for the bridge proxy."""

import structlog
from fastapi import APIRouter, Depends, Header, Path, Query, Response
from pydantic import BaseModel, Field

from bridge.dispatcher import BridgeDispatcher
from bridge.ledger import FeeKind
from bridge.models.events import RequestSent
from bridge.models.profile import AmountLimits, GlobalFeeConfig, IntegratorProfile
from bridge.models.request import BridgeRequest, RequestShape, SwapInstruction
from bridge.models.types import ADDRESS_PATTERN, Address, Uint256, normalize_address
from bridge.service import get_default_dispatcher

logger = structlog.get_logger()

router = APIRouter()


class BridgeCall(BaseModel):
    """Body of a bridge call: the request plus the caller and attached value."""

    request: BridgeRequest
    sender: Address
    value: Uint256 = Field(description="Native value attached to the call.")
    swap: SwapInstruction | None = None


class FeeQuoteResponse(BaseModel):
    """Fees for a prospective request."""

    total_crypto_fee: Uint256 = Field(alias="totalCryptoFee")
    platform_crypto_share: Uint256 = Field(alias="platformCryptoShare")
    integrator_crypto_share: Uint256 = Field(alias="integratorCryptoShare")
    fee_amount: Uint256 = Field(alias="feeAmount")
    amount_without_fee: Uint256 = Field(alias="amountWithoutFee")
    platform_token_share: Uint256 = Field(alias="platformTokenShare")
    integrator_token_share: Uint256 = Field(alias="integratorTokenShare")
    required_value: Uint256 = Field(alias="requiredValue")

    model_config = {"populate_by_name": True}


class BalanceResponse(BaseModel):
    asset: Address
    kind: FeeKind
    integrator: Address | None = None
    balance: Uint256


class CollectResponse(BaseModel):
    collected: Uint256


def get_dispatcher() -> BridgeDispatcher:
    """Dependency provider for the dispatcher instance.

    Override this in tests to inject a dispatcher with mock collaborators:
        app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    """
    return get_default_dispatcher()


def caller_header(x_caller: str = Header(pattern=ADDRESS_PATTERN)) -> str:
    """Identity performing a privileged call, from the X-Caller header."""
    return normalize_address(x_caller)


@router.post("/bridge/{shape}")
def bridge(
    shape: RequestShape,
    call: BridgeCall,
    dispatcher: BridgeDispatcher = Depends(get_dispatcher),
) -> RequestSent:
    """Dispatch a bridge request.

    Error Handling:
        - Invalid request schema: 422 (Pydantic)
        - Bridge errors: mapped to 400/403/502 by the app exception handler
    """
    logger.info(
        "received_bridge_call",
        shape=shape.value,
        source_amount=call.request.source_amount,
        destination_chain_id=call.request.destination_chain_id,
    )
    return dispatcher.dispatch(
        shape,
        call.request,
        sender=call.sender,
        value=call.value,
        swap=call.swap,
    )


@router.get("/fees/quote")
def quote(
    shape: RequestShape,
    amount: int = Query(ge=0),
    integrator: str | None = Query(default=None, pattern=ADDRESS_PATTERN),
    dispatcher: BridgeDispatcher = Depends(get_dispatcher),
) -> FeeQuoteResponse:
    """Fees and required attached value for a prospective request."""
    fee_quote = dispatcher.quote(shape, amount, integrator)
    return FeeQuoteResponse(
        total_crypto_fee=fee_quote.crypto.total_fee,
        platform_crypto_share=fee_quote.crypto.platform_share,
        integrator_crypto_share=fee_quote.crypto.integrator_share,
        fee_amount=fee_quote.token.fee_amount,
        amount_without_fee=fee_quote.token.amount_without_fee,
        platform_token_share=fee_quote.token.platform_share,
        integrator_token_share=fee_quote.token.integrator_share,
        required_value=fee_quote.required_value,
    )


@router.get("/config")
def fee_config(dispatcher: BridgeDispatcher = Depends(get_dispatcher)) -> GlobalFeeConfig:
    return dispatcher.store.global_config


@router.put("/config/fixed-crypto-fee/{amount}", status_code=204)
def set_fixed_crypto_fee(
    amount: int = Path(ge=0),
    caller: str = Depends(caller_header),
    dispatcher: BridgeDispatcher = Depends(get_dispatcher),
) -> Response:
    dispatcher.set_fixed_crypto_fee(caller, amount)
    return Response(status_code=204)


@router.put("/config/platform-token-fee/{rate}", status_code=204)
def set_platform_token_fee(
    rate: int = Path(ge=0, le=1_000_000),
    caller: str = Depends(caller_header),
    dispatcher: BridgeDispatcher = Depends(get_dispatcher),
) -> Response:
    dispatcher.set_platform_token_fee(caller, rate)
    return Response(status_code=204)


@router.put("/config/limits/{asset}", status_code=204)
def set_amount_limits(
    limits: AmountLimits,
    asset: str = Path(pattern=ADDRESS_PATTERN),
    caller: str = Depends(caller_header),
    dispatcher: BridgeDispatcher = Depends(get_dispatcher),
) -> Response:
    dispatcher.set_amount_limits(caller, asset, limits)
    return Response(status_code=204)


@router.get("/integrators/{identity}")
def integrator_info(
    identity: str = Path(pattern=ADDRESS_PATTERN),
    dispatcher: BridgeDispatcher = Depends(get_dispatcher),
) -> IntegratorProfile:
    return dispatcher.store.integrator_info(identity)


@router.put("/integrators/{identity}", status_code=204)
def set_integrator_info(
    profile: IntegratorProfile,
    identity: str = Path(pattern=ADDRESS_PATTERN),
    caller: str = Depends(caller_header),
    dispatcher: BridgeDispatcher = Depends(get_dispatcher),
) -> Response:
    dispatcher.set_integrator_info(caller, identity, profile)
    return Response(status_code=204)


@router.get("/ledger/platform/{asset}")
def platform_balance(
    asset: str = Path(pattern=ADDRESS_PATTERN),
    kind: FeeKind = FeeKind.TOKEN,
    dispatcher: BridgeDispatcher = Depends(get_dispatcher),
) -> BalanceResponse:
    balance = dispatcher.ledger.balance_of_platform(asset, kind)
    return BalanceResponse(asset=asset, kind=kind, balance=balance)


@router.get("/ledger/integrator/{asset}/{integrator}")
def integrator_balance(
    asset: str = Path(pattern=ADDRESS_PATTERN),
    integrator: str = Path(pattern=ADDRESS_PATTERN),
    kind: FeeKind = FeeKind.TOKEN,
    dispatcher: BridgeDispatcher = Depends(get_dispatcher),
) -> BalanceResponse:
    balance = dispatcher.ledger.balance_of_integrator(asset, integrator, kind)
    return BalanceResponse(asset=asset, kind=kind, integrator=integrator, balance=balance)


@router.post("/ledger/platform/{asset}/collect")
def collect_platform_fee(
    asset: str = Path(pattern=ADDRESS_PATTERN),
    to: str = Query(pattern=ADDRESS_PATTERN),
    kind: FeeKind = FeeKind.TOKEN,
    caller: str = Depends(caller_header),
    dispatcher: BridgeDispatcher = Depends(get_dispatcher),
) -> CollectResponse:
    if kind is FeeKind.CRYPTO:
        collected = dispatcher.collect_platform_crypto_fee(caller, to)
    else:
        collected = dispatcher.collect_platform_fee(caller, asset, to)
    return CollectResponse(collected=collected)


@router.post("/ledger/integrator/{asset}/{integrator}/collect")
def collect_integrator_fee(
    asset: str = Path(pattern=ADDRESS_PATTERN),
    integrator: str = Path(pattern=ADDRESS_PATTERN),
    kind: FeeKind = FeeKind.TOKEN,
    caller: str = Depends(caller_header),
    dispatcher: BridgeDispatcher = Depends(get_dispatcher),
) -> CollectResponse:
    if kind is FeeKind.CRYPTO:
        collected = dispatcher.collect_integrator_crypto_fee(caller, integrator)
    else:
        collected = dispatcher.collect_integrator_fee(caller, asset, integrator)
    return CollectResponse(collected=collected)
