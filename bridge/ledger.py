"""Fee ledger: withdrawable balances per asset and per (asset, integrator).

Token fees and crypto fees are kept in separate pools. A native-sourced
bridge credits its token fee to (TOKEN, NATIVE_TOKEN) and its crypto fee to
(CRYPTO, NATIVE_TOKEN); the two never mix.

Bridge requests only ever add to balances. The sole decrementing operations
are the withdraw_* methods used by fee collection.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

import structlog

from bridge.models.types import normalize_address, short

logger = structlog.get_logger()


class FeeKind(str, Enum):
    """Which fee pool a balance belongs to."""

    TOKEN = "token"
    CRYPTO = "crypto"


@dataclass(frozen=True)
class Credit:
    """A pending ledger credit.

    integrator is None for platform credits.
    """

    kind: FeeKind
    asset: str
    amount: int
    integrator: str | None = None


class FeeLedger:
    """Platform and integrator fee pools.

    All mutations go through a lock so concurrent credits to the same key
    never lose an update.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._platform: dict[tuple[FeeKind, str], int] = {}
        self._integrator: dict[tuple[FeeKind, str, str], int] = {}

    # --- Credits ---

    def credit_platform(self, asset: str, amount: int, kind: FeeKind = FeeKind.TOKEN) -> None:
        self.apply([Credit(kind=kind, asset=asset, amount=amount)])

    def credit_integrator(
        self,
        asset: str,
        integrator: str,
        amount: int,
        kind: FeeKind = FeeKind.TOKEN,
    ) -> None:
        self.apply([Credit(kind=kind, asset=asset, amount=amount, integrator=integrator)])

    def apply(self, credits: Iterable[Credit]) -> None:
        """Apply a batch of credits atomically.

        The whole batch is validated before any balance changes.

        Raises:
            ValueError: If any credit amount is negative
        """
        batch = list(credits)
        for credit in batch:
            if credit.amount < 0:
                raise ValueError(f"Ledger credits must be non-negative, got {credit.amount}")

        with self._lock:
            for credit in batch:
                if credit.amount == 0:
                    continue
                asset = normalize_address(credit.asset)
                if credit.integrator is None:
                    key = (credit.kind, asset)
                    self._platform[key] = self._platform.get(key, 0) + credit.amount
                else:
                    ikey = (credit.kind, asset, normalize_address(credit.integrator))
                    self._integrator[ikey] = self._integrator.get(ikey, 0) + credit.amount

    # --- Reads ---

    def balance_of_platform(self, asset: str, kind: FeeKind = FeeKind.TOKEN) -> int:
        with self._lock:
            return self._platform.get((kind, normalize_address(asset)), 0)

    def balance_of_integrator(
        self, asset: str, integrator: str, kind: FeeKind = FeeKind.TOKEN
    ) -> int:
        with self._lock:
            key = (kind, normalize_address(asset), normalize_address(integrator))
            return self._integrator.get(key, 0)

    # --- Withdrawals ---

    def withdraw_platform(self, asset: str, kind: FeeKind = FeeKind.TOKEN) -> int:
        """Zero a platform balance and return what it held."""
        with self._lock:
            amount = self._platform.pop((kind, normalize_address(asset)), 0)
        logger.info("platform_fee_withdrawn", asset=short(asset), kind=kind.value, amount=amount)
        return amount

    def withdraw_integrator(
        self, asset: str, integrator: str, kind: FeeKind = FeeKind.TOKEN
    ) -> int:
        """Zero an integrator balance and return what it held."""
        with self._lock:
            key = (kind, normalize_address(asset), normalize_address(integrator))
            amount = self._integrator.pop(key, 0)
        logger.info(
            "integrator_fee_withdrawn",
            asset=short(asset),
            integrator=short(integrator),
            kind=kind.value,
            amount=amount,
        )
        return amount
