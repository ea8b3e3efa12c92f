"""All-or-nothing composition of ledger credits and external calls.

A UnitOfWork stages ledger credits instead of applying them. Every effect
that already happened registers a compensation: pulls register a refund,
swaps register an unwind. commit() applies the staged credits in one atomic
batch. Leaving the block without a commit, normally because an exception is
propagating, discards the credits and runs the compensations newest first.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from types import TracebackType

import structlog

from bridge.collaborators import AssetTransfer
from bridge.errors import BridgeError, ExternalCollaboratorFailure
from bridge.ledger import Credit, FeeLedger
from bridge.models.types import short

logger = structlog.get_logger()


@contextmanager
def external_call(collaborator: str) -> Iterator[None]:
    """Translate collaborator exceptions into ExternalCollaboratorFailure.

    BridgeErrors raised by a collaborator (e.g. an adapter reporting
    SlippageExceeded) pass through unchanged.
    """
    try:
        yield
    except BridgeError:
        raise
    except Exception as err:
        logger.exception("collaborator_failed", collaborator=collaborator)
        raise ExternalCollaboratorFailure(collaborator, str(err) or type(err).__name__) from err


class UnitOfWork:
    """Transactional boundary around a single bridge request.

    Usage:
        with UnitOfWork(ledger, transfers) as uow:
            uow.pull(asset, sender, amount)
            uow.stage(Credit(...))
            ...  # swap (registering its unwind with on_rollback), forward
            uow.commit()
    """

    def __init__(self, ledger: FeeLedger, transfers: AssetTransfer) -> None:
        self.ledger = ledger
        self.transfers = transfers
        self._credits: list[Credit] = []
        self._compensations: list[tuple[str, Callable[[], None], dict[str, object]]] = []
        self._committed = False

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if not self._committed:
            self.rollback()

    @property
    def staged(self) -> list[Credit]:
        return list(self._credits)

    def pull(self, asset: str, sender: str, amount: int) -> None:
        """Pull funds from sender, remembering how to give them back."""
        if amount == 0:
            return
        with external_call("asset_transfer"):
            self.transfers.pull(asset, sender, amount)
        self.on_rollback(
            "refund",
            lambda: self.transfers.push(asset, sender, amount),
            asset=short(asset),
            sender=short(sender),
            amount=amount,
        )

    def on_rollback(self, step: str, action: Callable[[], None], **context: object) -> None:
        """Register an action undoing an effect that already happened.

        Actions run in reverse registration order, so an effect is undone
        before anything it consumed is given back.
        """
        if self._committed:
            raise RuntimeError("UnitOfWork already committed")
        self._compensations.append((step, action, context))

    def stage(self, *credits: Credit) -> None:
        if self._committed:
            raise RuntimeError("UnitOfWork already committed")
        self._credits.extend(c for c in credits if c.amount > 0)

    def commit(self) -> None:
        self.ledger.apply(self._credits)
        self._committed = True
        self._compensations.clear()

    def rollback(self) -> None:
        self._credits.clear()
        while self._compensations:
            step, action, context = self._compensations.pop()
            try:
                action()
            except Exception:
                # The request error is already propagating; a failed step is only logged.
                logger.exception("rollback_step_failed", step=step, **context)
