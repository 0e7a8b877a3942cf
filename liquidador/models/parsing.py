"""
Parsing helpers for raw payment documents.

Payment periods arrive as Spanish labels ("1 ene 2020 a 31 ene 2020") and
legacy money values as locale formatted strings. Both parsers return None for
input they cannot read instead of guessing.
"""

import re
from datetime import date
from typing import Optional, Union

from pydantic import BaseModel, Field

from .parameters import NumberLocale

MONTHS = {
    "ene": 1, "feb": 2, "mar": 3, "abr": 4, "may": 5, "jun": 6,
    "jul": 7, "ago": 8, "sep": 9, "oct": 10, "nov": 11, "dic": 12,
    "enero": 1, "febrero": 2, "marzo": 3, "abril": 4, "mayo": 5, "junio": 6,
    "julio": 7, "agosto": 8, "septiembre": 9, "setiembre": 9, "octubre": 10,
    "noviembre": 11, "diciembre": 12,
}

# (thousands separator, decimal separator)
LOCALE_SEPARATORS = {
    "es_CO": (".", ","),
    "en_US": (",", "."),
}

_DIGITS = re.compile(r"^\d+$")


class PaymentPeriod(BaseModel):
    """Date range covered by a payment."""

    start_date: date = Field(..., description="First day of the period")
    end_date: date = Field(..., description="Last day of the period")

    @property
    def year(self) -> int:
        return self.start_date.year

    @property
    def month(self) -> int:
        return self.start_date.month

    @property
    def is_half_month(self) -> bool:
        """Covers a quincena rather than a whole month."""
        return (self.end_date - self.start_date).days < 20


def _parse_spanish_date(text: str) -> Optional[date]:
    parts = text.strip().split()
    if len(parts) != 3:
        return None

    day, month_name, year = parts
    month = MONTHS.get(month_name)
    if month is None or not day.isdigit() or not year.isdigit():
        return None

    try:
        return date(int(year), month, int(day))
    except ValueError:
        return None


def parse_payment_period(label: Optional[str]) -> Optional[PaymentPeriod]:
    """
    Parse a payment period label such as "1 ene 2020 a 31 ene 2020".

    Args:
        label: Period label with Spanish short or long month names

    Returns:
        The parsed period, or None if the label cannot be read
    """
    if not label or not isinstance(label, str):
        return None

    cleaned = label.lower().replace(".", "")
    parts = cleaned.split(" a ")
    if len(parts) != 2:
        return None

    start_date = _parse_spanish_date(parts[0])
    end_date = _parse_spanish_date(parts[1])
    if start_date is None or end_date is None:
        return None

    return PaymentPeriod(start_date=start_date, end_date=end_date)


def _valid_grouping(integer_part: str, thousands: str) -> bool:
    groups = integer_part.split(thousands)
    if not all(_DIGITS.match(group) for group in groups):
        return False
    if len(groups) == 1:
        return True
    return len(groups[0]) <= 3 and all(len(group) == 3 for group in groups[1:])


def parse_locale_decimal(
    value: Union[str, int, float, None], locale: NumberLocale = "es_CO"
) -> Optional[float]:
    """
    Parse a locale formatted decimal string.

    Locale contract:
        es_CO: "." groups thousands and "," marks decimals ("1.234.567,89")
        en_US: "," groups thousands and "." marks decimals ("1,234,567.89")

    A currency symbol and surrounding spaces are ignored. Plain digits without
    separators are accepted in both locales. Numbers are returned unchanged.

    Args:
        value: The raw value
        locale: Locale of the string

    Returns:
        The parsed number, or None if the value cannot be read
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str):
        return None

    thousands, decimal = LOCALE_SEPARATORS[locale]

    text = value.replace("$", "").replace("COP", "").replace(" ", "").strip()
    negative = text.startswith("-")
    if negative:
        text = text[1:]
    if not text:
        return None

    if text.count(decimal) > 1:
        return None
    integer_part, _, fraction_part = text.partition(decimal)

    if not integer_part or not _valid_grouping(integer_part, thousands):
        return None
    if fraction_part and not _DIGITS.match(fraction_part):
        return None

    number = float(integer_part.replace(thousands, "") + "." + (fraction_part or "0"))
    return -number if negative else number
