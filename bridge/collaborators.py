"""Interfaces of the external collaborators the dispatcher drives.

The dispatcher never moves assets, swaps or relays messages itself; it
composes these collaborators inside a single unit of work. Any object with
matching methods can be injected, which is how tests substitute mocks.
"""

from typing import Protocol, runtime_checkable

from bridge.models.events import RequestSent


@runtime_checkable
class AssetTransfer(Protocol):
    """Moves assets between accounts and the proxy's custody.

    Both operations must be atomic: on failure they raise and leave no
    partial transfer behind.
    """

    def pull(self, asset: str, sender: str, amount: int) -> None:
        """Draw amount of asset from sender into custody."""
        ...

    def push(self, asset: str, to: str, amount: int) -> None:
        """Pay amount of asset out of custody to an account."""
        ...


@runtime_checkable
class SwapAdapter(Protocol):
    """Converts one asset to another before bridging."""

    def swap(
        self,
        input_asset: str,
        input_amount: int,
        output_asset: str,
        min_output_amount: int,
        payload: str,
    ) -> int:
        """Swap exact input and return the output amount.

        Must raise if the output would be below min_output_amount.
        """
        ...

    def unwind(
        self,
        input_asset: str,
        input_amount: int,
        output_asset: str,
        amount_out: int,
    ) -> None:
        """Reverse a swap this adapter executed for a request that then failed."""
        ...


@runtime_checkable
class Router(Protocol):
    """Cross-chain router that delivers the principal to the destination."""

    def forward(
        self,
        asset: str,
        amount: int,
        destination_chain_id: int,
        destination_asset: str,
        recipient: str,
        router: str,
    ) -> None:
        """Hand amount of asset to the router. Fire-and-forget once it returns."""
        ...


class EventSink(Protocol):
    """Receives RequestSent notifications for off-chain observers."""

    def emit(self, event: RequestSent) -> None: ...
