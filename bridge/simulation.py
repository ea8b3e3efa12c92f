"""In-memory collaborators for running the proxy off-chain.

These back the HTTP service and the tests. Custody is a plain balance table;
the proxy's own holdings sit under a dedicated holder account, so after a
request the holder retains exactly the collected fees.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass

import structlog

from bridge.errors import SlippageExceeded
from bridge.models.events import RequestSent
from bridge.models.types import normalize_address, short

logger = structlog.get_logger()

# Custody account holding the proxy's own funds
PROXY_HOLDER = "0x" + "b7" * 20


class InsufficientBalance(Exception):
    """Account does not hold enough of an asset for a transfer."""

    pass


class InMemoryCustody:
    """Balance table implementing the AssetTransfer collaborator."""

    def __init__(self, holder: str = PROXY_HOLDER) -> None:
        self.holder = normalize_address(holder)
        self._balances: dict[tuple[str, str], int] = {}
        self._lock = threading.RLock()

    def balance_of(self, asset: str, account: str) -> int:
        with self._lock:
            return self._balances.get((normalize_address(asset), normalize_address(account)), 0)

    def mint(self, asset: str, account: str, amount: int) -> None:
        with self._lock:
            key = (normalize_address(asset), normalize_address(account))
            self._balances[key] = self._balances.get(key, 0) + amount

    def burn(self, asset: str, account: str, amount: int) -> None:
        """Remove amount from account.

        Raises:
            InsufficientBalance: If account holds less than amount
        """
        with self._lock:
            key = (normalize_address(asset), normalize_address(account))
            balance = self._balances.get(key, 0)
            if balance < amount:
                raise InsufficientBalance(
                    f"{short(account)} holds {balance} of {short(asset)}, needs {amount}"
                )
            self._balances[key] = balance - amount

    def transfer(self, asset: str, sender: str, to: str, amount: int) -> None:
        with self._lock:
            self.burn(asset, sender, amount)
            self.mint(asset, to, amount)

    def pull(self, asset: str, sender: str, amount: int) -> None:
        self.transfer(asset, sender, self.holder, amount)

    def push(self, asset: str, to: str, amount: int) -> None:
        self.transfer(asset, self.holder, to, amount)


@dataclass(frozen=True)
class SwapCall:
    """A swap executed by QuoteSwapAdapter."""

    input_asset: str
    input_amount: int
    output_asset: str
    amount_out: int
    payload: str


class QuoteSwapAdapter:
    """Swap adapter that converts at fixed quoted rates.

    Rates are registered per (input, output) pair as a numerator/denominator
    pair: amount_out = amount_in * numerator // denominator. When given a
    custody, the swap burns the input from and mints the output to the
    custody holder, and unwind reverses exactly that.
    """

    def __init__(self, custody: InMemoryCustody | None = None) -> None:
        self.custody = custody
        self._rates: dict[tuple[str, str], tuple[int, int]] = {}
        self.calls: list[SwapCall] = []
        self.unwound: list[SwapCall] = []

    def set_rate(self, input_asset: str, output_asset: str, numerator: int, denominator: int = 1):
        if denominator == 0:
            raise ValueError("denominator must be non-zero")
        key = (normalize_address(input_asset), normalize_address(output_asset))
        self._rates[key] = (numerator, denominator)

    def swap(
        self,
        input_asset: str,
        input_amount: int,
        output_asset: str,
        min_output_amount: int,
        payload: str,
    ) -> int:
        key = (normalize_address(input_asset), normalize_address(output_asset))
        if key not in self._rates:
            raise LookupError(f"No quote for {short(input_asset)} -> {short(output_asset)}")

        numerator, denominator = self._rates[key]
        amount_out = input_amount * numerator // denominator
        if amount_out < min_output_amount:
            raise SlippageExceeded(amount_out, min_output_amount)

        if self.custody is not None:
            self.custody.burn(input_asset, self.custody.holder, input_amount)
            self.custody.mint(output_asset, self.custody.holder, amount_out)

        self.calls.append(SwapCall(input_asset, input_amount, output_asset, amount_out, payload))
        return amount_out

    def unwind(
        self,
        input_asset: str,
        input_amount: int,
        output_asset: str,
        amount_out: int,
    ) -> None:
        if self.custody is not None:
            self.custody.burn(output_asset, self.custody.holder, amount_out)
            self.custody.mint(input_asset, self.custody.holder, input_amount)
        self.unwound.append(SwapCall(input_asset, input_amount, output_asset, amount_out, "0x"))
        logger.debug(
            "swap_unwound",
            input_asset=short(input_asset),
            input_amount=input_amount,
            output_asset=short(output_asset),
            amount_out=amount_out,
        )


@dataclass(frozen=True)
class Forward:
    """A transfer handed to RecordingRouter."""

    asset: str
    amount: int
    destination_chain_id: int
    destination_asset: str
    recipient: str
    router: str


class RecordingRouter:
    """Router that records forwards and moves funds to the router account."""

    def __init__(self, custody: InMemoryCustody | None = None) -> None:
        self.custody = custody
        self.forwards: list[Forward] = []

    def forward(
        self,
        asset: str,
        amount: int,
        destination_chain_id: int,
        destination_asset: str,
        recipient: str,
        router: str,
    ) -> None:
        if self.custody is not None:
            self.custody.transfer(asset, self.custody.holder, router, amount)
        self.forwards.append(
            Forward(asset, amount, destination_chain_id, destination_asset, recipient, router)
        )


class EventLog:
    """EventSink that keeps every RequestSent and notifies subscribers."""

    def __init__(self) -> None:
        self.events: list[RequestSent] = []
        self._subscribers: list[Callable[[RequestSent], None]] = []

    def subscribe(self, callback: Callable[[RequestSent], None]) -> None:
        self._subscribers.append(callback)

    def emit(self, event: RequestSent) -> None:
        self.events.append(event)
        for callback in self._subscribers:
            callback(event)

    def __len__(self) -> int:
        return len(self.events)
