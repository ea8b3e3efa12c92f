"""Fee calculation result types."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CryptoFeeResult:
    """Fixed native-value fee charged for one request.

    Attributes:
        total_fee: Native value that must accompany the request
        platform_share: Part credited to the platform crypto-fee pool
        integrator_share: Part credited to the integrator crypto-fee pool

    Invariant: platform_share + integrator_share == total_fee
    """

    total_fee: int
    platform_share: int
    integrator_share: int = 0

    @classmethod
    def platform_only(cls, total_fee: int) -> "CryptoFeeResult":
        """Create a result where the whole fee goes to the platform."""
        return cls(total_fee=total_fee, platform_share=total_fee)


@dataclass(frozen=True)
class TokenFeeResult:
    """Proportional fee taken out of the bridged amount.

    Attributes:
        fee_amount: Total fee deducted from amount_with_fee
        amount_without_fee: Net principal that continues to the swap/router
        platform_share: Part credited to the platform token-fee pool
        integrator_share: Part credited to the integrator token-fee pool
        rate: Effective ppm rate the fee was computed with

    Invariants:
        fee_amount + amount_without_fee == amount_with_fee
        platform_share + integrator_share == fee_amount
    """

    fee_amount: int
    amount_without_fee: int
    platform_share: int
    integrator_share: int
    rate: int

    @property
    def amount_with_fee(self) -> int:
        return self.fee_amount + self.amount_without_fee

    @property
    def requires_fee(self) -> bool:
        """True if a non-zero fee is deducted."""
        return self.fee_amount > 0
