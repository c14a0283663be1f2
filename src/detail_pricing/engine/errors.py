"""Exceptions raised by the pricing engine."""


class PricingError(ValueError):
    """Base class for pricing validation errors."""


class InvalidMarginError(PricingError):
    """A desired margin of 100% or more has no finite price."""

    def __init__(self, margin_percent: float):
        self.margin_percent = margin_percent
        super().__init__(
            f"Desired margin must be below 100% (got {margin_percent}%)"
        )
