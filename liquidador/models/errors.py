"""Exceptions raised by the liquidation engine."""


class LiquidationError(Exception):
    """Base exception for liquidation errors."""


class SharingSplitError(LiquidationError):
    """Raised when a sharing year cannot be split with the configured strategy."""


class UnknownVariantError(LiquidationError):
    """Raised when a liquidation variant name is not registered."""


class InvalidParametersError(LiquidationError):
    """Raised when liquidation inputs are inconsistent."""
