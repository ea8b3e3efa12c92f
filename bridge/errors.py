"""Bridge error classes.

Every error aborts the whole request: nothing is credited, pulled funds are
refunded and no RequestSent event is emitted. None are retried internally.
"""


class BridgeError(Exception):
    """Base error for bridge operations."""

    pass


class InvalidAmount(BridgeError):
    """Source amount is zero or outside the configured limits for its asset."""

    pass


class ValueMismatch(BridgeError):
    """Attached native value differs from the required total."""

    def __init__(self, expected: int, attached: int) -> None:
        super().__init__(f"Attached value {attached} != required {expected}")
        self.expected = expected
        self.attached = attached


class SlippageExceeded(BridgeError):
    """Swap or forwarded output below min_destination_amount."""

    def __init__(self, amount_out: int, min_amount_out: int) -> None:
        super().__init__(f"Output {amount_out} below minimum {min_amount_out}")
        self.amount_out = amount_out
        self.min_amount_out = min_amount_out


class UnauthorizedConfigChange(BridgeError):
    """Caller is not allowed to perform a privileged operation."""

    pass


class ExternalCollaboratorFailure(BridgeError):
    """Asset transfer, swap adapter or router call failed."""

    def __init__(self, collaborator: str, detail: str) -> None:
        super().__init__(f"{collaborator} failed: {detail}")
        self.collaborator = collaborator
        self.detail = detail
