"""Bridge dispatcher: the four bridge entry points and fee collection.

Every bridge call is one atomic transition. Fees are computed, pulled funds
are accounted for, the optional swap and the router forward run, and only
then are the ledger credits committed and RequestSent emitted. Any error
along the way leaves balances, custody and the event stream untouched.

Calls are serialized through a single re-entrant lock, which gives the same
one-at-a-time application an on-chain host provides.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass

import structlog

from bridge.collaborators import AssetTransfer, EventSink, Router, SwapAdapter
from bridge.constants import NATIVE_TOKEN
from bridge.errors import (
    ExternalCollaboratorFailure,
    InvalidAmount,
    SlippageExceeded,
    UnauthorizedConfigChange,
    ValueMismatch,
)
from bridge.fees.calculator import CryptoFeeCalculator, TokenFeeCalculator
from bridge.fees.result import CryptoFeeResult, TokenFeeResult
from bridge.fees.store import FeeConfigStore
from bridge.ledger import Credit, FeeKind, FeeLedger
from bridge.models.events import RequestSent
from bridge.models.profile import AmountLimits, IntegratorProfile
from bridge.models.request import BridgeRequest, RequestShape, SwapInstruction
from bridge.models.types import normalize_address, short
from bridge.transaction import UnitOfWork, external_call

logger = structlog.get_logger()


@dataclass(frozen=True)
class FeeQuote:
    """Everything a caller needs to know before submitting a request."""

    crypto: CryptoFeeResult
    token: TokenFeeResult
    required_value: int


class BridgeDispatcher:
    """Orchestrates fee computation, ledger crediting, swap and forward.

    Args:
        store: Fee configuration (global defaults and integrator profiles)
        ledger: Fee pools credited by successful requests
        transfers: Custody collaborator used to pull funds and pay out fees
        swap_adapter: Pre-swap collaborator; only needed for swap paths
        router: Cross-chain router the net principal is forwarded to
        events: Sink receiving RequestSent; None disables emission
    """

    def __init__(
        self,
        store: FeeConfigStore,
        ledger: FeeLedger,
        transfers: AssetTransfer,
        router: Router,
        swap_adapter: SwapAdapter | None = None,
        events: EventSink | None = None,
    ) -> None:
        self.store = store
        self.ledger = ledger
        self.transfers = transfers
        self.router = router
        self.swap_adapter = swap_adapter
        self.events = events
        self.crypto_fees = CryptoFeeCalculator(store)
        self.token_fees = TokenFeeCalculator(store)
        self._lock = threading.RLock()

    # =========================================================================
    # Bridge entry points
    # =========================================================================

    def bridge_token(self, request: BridgeRequest, *, sender: str, value: int) -> RequestSent:
        """Bridge an ERC20-style token without a pre-swap.

        value must equal the crypto fee exactly.
        """
        return self.dispatch(RequestShape.TOKEN_NO_SWAP, request, sender=sender, value=value)

    def bridge_native(self, request: BridgeRequest, *, sender: str, value: int) -> RequestSent:
        """Bridge native value without a pre-swap.

        value must equal source_amount plus the crypto fee exactly.
        """
        return self.dispatch(RequestShape.NATIVE_NO_SWAP, request, sender=sender, value=value)

    def bridge_token_with_swap(
        self,
        request: BridgeRequest,
        swap: SwapInstruction,
        *,
        sender: str,
        value: int,
    ) -> RequestSent:
        """Swap a token into destination_asset, then bridge the output."""
        return self.dispatch(
            RequestShape.TOKEN_WITH_SWAP, request, sender=sender, value=value, swap=swap
        )

    def bridge_native_with_swap(
        self,
        request: BridgeRequest,
        swap: SwapInstruction,
        *,
        sender: str,
        value: int,
    ) -> RequestSent:
        """Swap native value into destination_asset, then bridge the output."""
        return self.dispatch(
            RequestShape.NATIVE_WITH_SWAP, request, sender=sender, value=value, swap=swap
        )

    def dispatch(
        self,
        shape: RequestShape,
        request: BridgeRequest,
        *,
        sender: str,
        value: int,
        swap: SwapInstruction | None = None,
    ) -> RequestSent:
        """Dispatch a request of any shape.

        Raises:
            InvalidAmount: source_amount is zero or outside the asset's limits
            ValueMismatch: value differs from the required attached value
            SlippageExceeded: swap or forwarded output below min_destination_amount
            ExternalCollaboratorFailure: transfer, swap adapter or router failed
        """
        with self._lock:
            try:
                return self._resolve_and_dispatch(shape, request, sender, value, swap)
            except Exception as err:
                logger.warning(
                    "bridge_rejected",
                    shape=shape.value,
                    sender=short(sender),
                    source_asset=short(request.source_asset),
                    source_amount=request.source_amount,
                    integrator=short(request.integrator),
                    error=type(err).__name__,
                    detail=str(err),
                )
                raise

    def _resolve_and_dispatch(
        self,
        shape: RequestShape,
        request: BridgeRequest,
        sender: str,
        value: int,
        swap: SwapInstruction | None,
    ) -> RequestSent:
        fee_asset = self._fee_asset(shape, request)

        if request.source_amount == 0:
            raise InvalidAmount("source_amount must be greater than zero")
        limits = self.store.amount_limits(fee_asset)
        if not limits.allows(request.source_amount):
            raise InvalidAmount(
                f"source_amount {request.source_amount} outside limits "
                f"[{limits.min_amount}, {limits.max_amount or 'uncapped'}] "
                f"for {fee_asset}"
            )

        crypto = self.crypto_fees.compute(request.integrator)
        required = crypto.total_fee + (request.source_amount if shape.is_native else 0)
        if value != required:
            raise ValueMismatch(expected=required, attached=value)

        token = self.token_fees.compute(request.source_amount, request.integrator)

        with UnitOfWork(self.ledger, self.transfers) as uow:
            # Attached value covers the crypto fee and, for native shapes, the principal
            uow.pull(NATIVE_TOKEN, sender, value)
            if not shape.is_native:
                uow.pull(request.source_asset, sender, request.source_amount)

            uow.stage(*self._credits(fee_asset, request.integrator, crypto, token))

            if shape.with_swap:
                forward_asset = request.destination_asset
                forward_amount = self._swap(
                    uow, fee_asset, token.amount_without_fee, request, swap or SwapInstruction()
                )
            else:
                forward_asset = fee_asset
                forward_amount = token.amount_without_fee

            if forward_amount < request.min_destination_amount:
                raise SlippageExceeded(forward_amount, request.min_destination_amount)

            with external_call("router"):
                self.router.forward(
                    forward_asset,
                    forward_amount,
                    request.destination_chain_id,
                    request.destination_asset,
                    request.recipient,
                    request.router,
                )

            uow.commit()

        event = RequestSent.from_request(request, shape, forward_asset, forward_amount)
        self._emit(event)

        logger.info(
            "request_sent",
            shape=shape.value,
            source_asset=short(request.source_asset),
            source_amount=request.source_amount,
            destination_chain_id=request.destination_chain_id,
            destination_asset=short(request.destination_asset),
            integrator=short(request.integrator),
            crypto_fee=crypto.total_fee,
            token_fee=token.fee_amount,
            forwarded_amount=forward_amount,
        )
        return event

    def _emit(self, event: RequestSent) -> None:
        """Hand a committed request's event to the sink.

        The request is final once committed, so a failing sink is logged and
        the caller still receives the event.
        """
        if self.events is None:
            return
        try:
            self.events.emit(event)
        except Exception:
            logger.exception(
                "event_emit_failed",
                shape=event.shape.value,
                source_asset=short(event.source_asset),
                forwarded_amount=event.forwarded_amount,
            )

    def _fee_asset(self, shape: RequestShape, request: BridgeRequest) -> str:
        """Ledger key for the token fee: the native asset for native shapes."""
        if shape.is_native:
            return NATIVE_TOKEN
        return request.source_asset

    def _credits(
        self,
        fee_asset: str,
        integrator: str | None,
        crypto: CryptoFeeResult,
        token: TokenFeeResult,
    ) -> list[Credit]:
        credits = [
            Credit(FeeKind.CRYPTO, NATIVE_TOKEN, crypto.platform_share),
            Credit(FeeKind.TOKEN, fee_asset, token.platform_share),
        ]
        if integrator is not None:
            credits += [
                Credit(FeeKind.CRYPTO, NATIVE_TOKEN, crypto.integrator_share, integrator),
                Credit(FeeKind.TOKEN, fee_asset, token.integrator_share, integrator),
            ]
        return credits

    def _swap(
        self,
        uow: UnitOfWork,
        input_asset: str,
        input_amount: int,
        request: BridgeRequest,
        swap: SwapInstruction,
    ) -> int:
        adapter = self.swap_adapter
        if adapter is None:
            raise ExternalCollaboratorFailure("swap_adapter", "no swap adapter configured")

        with external_call("swap_adapter"):
            amount_out = adapter.swap(
                input_asset,
                input_amount,
                request.destination_asset,
                request.min_destination_amount,
                swap.payload,
            )
        uow.on_rollback(
            "unwind_swap",
            lambda: adapter.unwind(
                input_asset, input_amount, request.destination_asset, amount_out
            ),
            input_asset=short(input_asset),
            input_amount=input_amount,
            amount_out=amount_out,
        )

        logger.debug(
            "pre_swap_executed",
            input_asset=short(input_asset),
            input_amount=input_amount,
            output_asset=short(request.destination_asset),
            amount_out=amount_out,
        )
        return amount_out

    # =========================================================================
    # Quotes
    # =========================================================================

    def quote(
        self, shape: RequestShape, source_amount: int, integrator: str | None = None
    ) -> FeeQuote:
        """Fees for a prospective request and the value that must be attached."""
        with self._lock:
            crypto = self.crypto_fees.compute(integrator)
            token = self.token_fees.compute(source_amount, integrator)
        required = crypto.total_fee + (source_amount if shape.is_native else 0)
        return FeeQuote(crypto=crypto, token=token, required_value=required)

    # =========================================================================
    # Configuration
    # =========================================================================

    def set_integrator_info(
        self, caller: str, identity: str, profile: IntegratorProfile
    ) -> None:
        with self._lock:
            self.store.set_integrator_info(caller, identity, profile)

    def set_fixed_crypto_fee(self, caller: str, amount: int) -> None:
        with self._lock:
            self.store.set_fixed_crypto_fee(caller, amount)

    def set_platform_token_fee(self, caller: str, rate: int) -> None:
        with self._lock:
            self.store.set_platform_token_fee(caller, rate)

    def set_amount_limits(self, caller: str, asset: str, limits: AmountLimits) -> None:
        with self._lock:
            self.store.set_amount_limits(caller, asset, limits)

    # =========================================================================
    # Fee collection
    # =========================================================================

    def collect_platform_fee(self, caller: str, asset: str, to: str) -> int:
        """Withdraw the platform token-fee pool of asset to an account."""
        self._require_operator(caller, "collect_platform_fee")
        return self._collect(FeeKind.TOKEN, asset, None, to)

    def collect_platform_crypto_fee(self, caller: str, to: str) -> int:
        """Withdraw the platform crypto-fee pool to an account."""
        self._require_operator(caller, "collect_platform_crypto_fee")
        return self._collect(FeeKind.CRYPTO, NATIVE_TOKEN, None, to)

    def collect_integrator_fee(
        self, caller: str, asset: str, integrator: str | None = None
    ) -> int:
        """Pay an integrator's token-fee pool of asset out to the integrator.

        Integrators collect for themselves; operators may collect on their
        behalf.
        """
        integrator = self._authorize_integrator(caller, integrator, "collect_integrator_fee")
        return self._collect(FeeKind.TOKEN, asset, integrator, integrator)

    def collect_integrator_crypto_fee(self, caller: str, integrator: str | None = None) -> int:
        """Pay an integrator's crypto-fee pool out to the integrator."""
        integrator = self._authorize_integrator(
            caller, integrator, "collect_integrator_crypto_fee"
        )
        return self._collect(FeeKind.CRYPTO, NATIVE_TOKEN, integrator, integrator)

    def _collect(self, kind: FeeKind, asset: str, integrator: str | None, to: str) -> int:
        with self._lock:
            if integrator is None:
                amount = self.ledger.withdraw_platform(asset, kind)
            else:
                amount = self.ledger.withdraw_integrator(asset, integrator, kind)
            if amount == 0:
                return 0

            try:
                with external_call("asset_transfer"):
                    self.transfers.push(asset, to, amount)
            except ExternalCollaboratorFailure:
                restore = Credit(kind, asset, amount, integrator)
                self.ledger.apply([restore])
                raise
        return amount

    def _require_operator(self, caller: str, operation: str) -> None:
        if not self.store.is_operator(caller):
            logger.warning("unauthorized_collect", caller=short(caller), operation=operation)
            raise UnauthorizedConfigChange(f"{caller} may not call {operation}")

    def _authorize_integrator(self, caller: str, integrator: str | None, operation: str) -> str:
        caller = normalize_address(caller)
        integrator = normalize_address(integrator) if integrator is not None else caller
        if caller != integrator:
            self._require_operator(caller, operation)
        return integrator

    # =========================================================================
    # Read accessors
    # =========================================================================

    def platform_fee_balance(self, asset: str) -> int:
        return self.ledger.balance_of_platform(asset, FeeKind.TOKEN)

    def integrator_fee_balance(self, asset: str, integrator: str) -> int:
        return self.ledger.balance_of_integrator(asset, integrator, FeeKind.TOKEN)

    def platform_crypto_fee_balance(self) -> int:
        return self.ledger.balance_of_platform(NATIVE_TOKEN, FeeKind.CRYPTO)

    def integrator_crypto_fee_balance(self, integrator: str) -> int:
        return self.ledger.balance_of_integrator(NATIVE_TOKEN, integrator, FeeKind.CRYPTO)
