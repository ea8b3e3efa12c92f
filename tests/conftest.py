"""Pytest configuration and fixtures."""

import pytest

from bridge.dispatcher import BridgeDispatcher
from bridge.fees.config import FeeSettings
from bridge.fees.store import FeeConfigStore
from bridge.ledger import FeeLedger
from bridge.simulation import EventLog, InMemoryCustody, QuoteSwapAdapter, RecordingRouter
from tests.helpers.constants import (
    FIXED_CRYPTO_FEE,
    NATIVE,
    OPERATOR,
    PLATFORM_TOKEN_FEE,
    SENDER,
    SWAP_TOKEN,
    TRANSIT_TOKEN,
)

# Funds minted to SENDER before every dispatcher test
SENDER_NATIVE = 10**18
SENDER_TOKENS = 10**9


@pytest.fixture
def settings() -> FeeSettings:
    return FeeSettings(
        fixed_crypto_fee=FIXED_CRYPTO_FEE,
        platform_token_fee=PLATFORM_TOKEN_FEE,
        operators=frozenset({OPERATOR}),
    )


@pytest.fixture
def store(settings: FeeSettings) -> FeeConfigStore:
    return FeeConfigStore(settings)


@pytest.fixture
def ledger() -> FeeLedger:
    return FeeLedger()


@pytest.fixture
def custody() -> InMemoryCustody:
    """Custody with SENDER funded in native value and both test tokens."""
    custody = InMemoryCustody()
    custody.mint(NATIVE, SENDER, SENDER_NATIVE)
    custody.mint(TRANSIT_TOKEN, SENDER, SENDER_TOKENS)
    custody.mint(SWAP_TOKEN, SENDER, SENDER_TOKENS)
    return custody


@pytest.fixture
def swap_adapter(custody: InMemoryCustody) -> QuoteSwapAdapter:
    """Adapter quoting SWAP_TOKEN->TRANSIT 2:1, NATIVE->TRANSIT 3:1, SWAP_TOKEN->NATIVE 1:2."""
    adapter = QuoteSwapAdapter(custody)
    adapter.set_rate(SWAP_TOKEN, TRANSIT_TOKEN, 2)
    adapter.set_rate(NATIVE, TRANSIT_TOKEN, 3)
    adapter.set_rate(SWAP_TOKEN, NATIVE, 1, 2)
    return adapter


@pytest.fixture
def router(custody: InMemoryCustody) -> RecordingRouter:
    return RecordingRouter(custody)


@pytest.fixture
def events() -> EventLog:
    return EventLog()


@pytest.fixture
def dispatcher(
    store: FeeConfigStore,
    ledger: FeeLedger,
    custody: InMemoryCustody,
    router: RecordingRouter,
    swap_adapter: QuoteSwapAdapter,
    events: EventLog,
) -> BridgeDispatcher:
    return BridgeDispatcher(
        store=store,
        ledger=ledger,
        transfers=custody,
        router=router,
        swap_adapter=swap_adapter,
        events=events,
    )


# =============================================================================
# Mock collaborators for failure injection
# =============================================================================


class FailingRouter:
    """Router whose forward always raises."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error or ConnectionError("relay unreachable")
        self.calls = 0

    def forward(self, *_args) -> None:
        self.calls += 1
        raise self.error


class FixedOutputSwapAdapter:
    """Swap adapter that returns a fixed output and never enforces the minimum.

    Lets tests check that the dispatcher enforces min_destination_amount
    itself rather than trusting the adapter.
    """

    def __init__(self, amount_out: int) -> None:
        self.amount_out = amount_out
        self.calls: list[tuple[str, int, str, int, str]] = []
        self.unwound: list[tuple] = []

    def swap(
        self,
        input_asset: str,
        input_amount: int,
        output_asset: str,
        min_output_amount: int,
        payload: str,
    ) -> int:
        self.calls.append((input_asset, input_amount, output_asset, min_output_amount, payload))
        return self.amount_out

    def unwind(self, *args) -> None:
        self.unwound.append(args)


class FailingTransfer:
    """AssetTransfer that rejects pushes, wrapping a working custody for pulls."""

    def __init__(self, custody: InMemoryCustody) -> None:
        self.custody = custody

    def pull(self, asset: str, sender: str, amount: int) -> None:
        self.custody.pull(asset, sender, amount)

    def push(self, asset: str, to: str, amount: int) -> None:
        raise RuntimeError("transfer reverted")


@pytest.fixture
def make_dispatcher(store, ledger, custody, router, swap_adapter, events):
    """Build a dispatcher sharing the standard fixtures, with overrides."""

    def _make(**overrides) -> BridgeDispatcher:
        kwargs = {
            "store": store,
            "ledger": ledger,
            "transfers": custody,
            "router": router,
            "swap_adapter": swap_adapter,
            "events": events,
        }
        kwargs.update(overrides)
        return BridgeDispatcher(**kwargs)

    return _make


class RaisingSubscriber:
    """EventLog subscriber that fails on every event."""

    def __init__(self) -> None:
        self.calls = 0

    def __call__(self, _event) -> None:
        self.calls += 1
        raise RuntimeError("subscriber crashed")
