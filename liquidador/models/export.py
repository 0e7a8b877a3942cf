"""Tabular export of liquidation rows."""

from typing import Sequence

import pandas as pd

from .formatting import format_currency
from .rows import LiquidationRow


def rows_to_dataframe(rows: Sequence[LiquidationRow], formatted: bool = False) -> pd.DataFrame:
    """
    Convert liquidation rows to a DataFrame, one column per row field.

    Args:
        rows: Rows of a single type
        formatted: Render money columns as COP strings ("$ 1.078.300")

    Returns:
        DataFrame in row order (empty when there are no rows)
    """
    if not rows:
        return pd.DataFrame()

    df = pd.DataFrame([row.model_dump() for row in rows])

    if formatted:
        money_columns = [c for c in df.columns if c in type(rows[0]).MONEY_FIELDS]
        for column in money_columns:
            df[column] = df[column].map(
                lambda value: format_currency(value) if pd.notna(value) else ""
            )

    return df


def rows_to_csv(rows: Sequence[LiquidationRow], formatted: bool = False) -> str:
    """Render rows as CSV text."""
    return rows_to_dataframe(rows, formatted).to_csv(index=False)
