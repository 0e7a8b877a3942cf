"""Currency and percentage formatting for liquidation reports."""

from typing import Optional

from pydantic import BaseModel, Field

from .parsing import LOCALE_SEPARATORS
from .parameters import NumberLocale


class CurrencyFormatter(BaseModel):
    """Formats currency and percentage values for display."""

    currency_symbol: str = Field(default="$", description="Currency symbol")
    decimal_places: int = Field(
        default=0, ge=0, le=10, description="Number of decimal places"
    )
    locale: NumberLocale = Field(default="es_CO", description="Separator convention")
    show_currency_symbol: bool = Field(
        default=True, description="Whether to show currency symbol"
    )

    def format_currency(self, amount: float, show_symbol: Optional[bool] = None) -> str:
        """
        Format a currency amount for display.

        Args:
            amount: The amount to format
            show_symbol: Override the default symbol display setting

        Returns:
            Formatted currency string, e.g. "$ 1.078.300" for es_CO
        """
        show_symbol = (
            show_symbol if show_symbol is not None else self.show_currency_symbol
        )
        thousands, decimal = LOCALE_SEPARATORS[self.locale]

        rounded = round(abs(amount), self.decimal_places)
        formatted = f"{rounded:,.{self.decimal_places}f}"
        # Swap separators through a placeholder
        formatted = formatted.replace(",", "\0").replace(".", decimal).replace("\0", thousands)

        sign = "-" if amount < 0 and rounded != 0 else ""
        if show_symbol:
            return f"{sign}{self.currency_symbol} {formatted}"
        return f"{sign}{formatted}"

    def format_percentage(self, pct: float, decimal_places: int = 2) -> str:
        """
        Format a percentage for display.

        Args:
            pct: The percentage (7.83 = 7.83%)
            decimal_places: Number of decimal places to show
        """
        _, decimal = LOCALE_SEPARATORS[self.locale]
        return f"{pct:.{decimal_places}f}".replace(".", decimal) + "%"


_default_formatter = CurrencyFormatter()


def format_currency(amount: float) -> str:
    """Format an amount as Colombian pesos without decimals."""
    return _default_formatter.format_currency(amount)
