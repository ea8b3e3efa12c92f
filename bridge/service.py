"""Default wiring of the bridge proxy for the HTTP service."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

import structlog

from bridge.dispatcher import BridgeDispatcher
from bridge.fees.config import FeeSettings
from bridge.fees.store import FeeConfigStore
from bridge.ledger import FeeLedger
from bridge.models.types import normalize_address, validate_uint256
from bridge.simulation import EventLog, InMemoryCustody, QuoteSwapAdapter, RecordingRouter

logger = structlog.get_logger()


@dataclass(frozen=True)
class SimulationSettings:
    """Initial state of the in-memory collaborators.

    Attributes:
        balances: (asset, account, amount) entries minted into custody
        rates: (input_asset, output_asset, numerator, denominator) swap quotes
    """

    balances: tuple[tuple[str, str, int], ...] = ()
    rates: tuple[tuple[str, str, int, int], ...] = ()

    @classmethod
    def from_env(cls) -> SimulationSettings:
        """Build settings from environment variables.

        - BRIDGE_SEED_BALANCES: comma-separated `asset:account:amount`
        - BRIDGE_SWAP_RATES: comma-separated `input:output:numerator[/denominator]`

        Raises:
            ValueError: If an entry is malformed
        """
        return cls(
            balances=tuple(
                _parse_balance(entry) for entry in _entries("BRIDGE_SEED_BALANCES")
            ),
            rates=tuple(_parse_rate(entry) for entry in _entries("BRIDGE_SWAP_RATES")),
        )


def _entries(name: str) -> list[str]:
    raw = os.environ.get(name, "")
    return [entry.strip() for entry in raw.split(",") if entry.strip()]


def _parse_balance(entry: str) -> tuple[str, str, int]:
    parts = entry.split(":")
    if len(parts) != 3:
        raise ValueError(f"Expected asset:account:amount, got '{entry}'")
    asset, account, amount = parts
    return (
        normalize_address(asset, validate=True),
        normalize_address(account, validate=True),
        validate_uint256(amount),
    )


def _parse_rate(entry: str) -> tuple[str, str, int, int]:
    parts = entry.split(":")
    if len(parts) != 3:
        raise ValueError(f"Expected input:output:numerator[/denominator], got '{entry}'")
    input_asset, output_asset, ratio = parts
    numerator, _, denominator = ratio.partition("/")
    return (
        normalize_address(input_asset, validate=True),
        normalize_address(output_asset, validate=True),
        validate_uint256(numerator),
        validate_uint256(denominator or "1"),
    )


def create_dispatcher(
    settings: FeeSettings | None = None,
    simulation: SimulationSettings | None = None,
) -> BridgeDispatcher:
    """Build a dispatcher backed by in-memory collaborators.

    Args:
        settings: Fee settings. Read from the environment if not provided.
        simulation: Seed balances and swap quotes. Read from the environment
            if not provided.
    """
    settings = settings or FeeSettings.from_env()
    simulation = simulation or SimulationSettings.from_env()

    custody = InMemoryCustody()
    for asset, account, amount in simulation.balances:
        custody.mint(asset, account, amount)

    swap_adapter = QuoteSwapAdapter(custody)
    for input_asset, output_asset, numerator, denominator in simulation.rates:
        swap_adapter.set_rate(input_asset, output_asset, numerator, denominator)

    dispatcher = BridgeDispatcher(
        store=FeeConfigStore(settings),
        ledger=FeeLedger(),
        transfers=custody,
        router=RecordingRouter(custody),
        swap_adapter=swap_adapter,
        events=EventLog(),
    )
    logger.info(
        "dispatcher_created",
        fixed_crypto_fee=settings.fixed_crypto_fee,
        platform_token_fee=settings.platform_token_fee,
        operator_count=len(settings.operators),
        seeded_balances=len(simulation.balances),
        swap_rates=len(simulation.rates),
    )
    return dispatcher


@lru_cache(maxsize=1)
def get_default_dispatcher() -> BridgeDispatcher:
    """Process-wide dispatcher, constructed on first use."""
    return create_dispatcher()
