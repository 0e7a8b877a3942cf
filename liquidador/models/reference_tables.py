"""
Yearly economic reference data for pension liquidations.

This module loads the minimum wage (SMLMV) and consumer price index (IPC)
series used by every liquidation. The data is read once, validated and kept
in an immutable table that is passed explicitly into the projection engine.

Conventions:
- ``smlmv_growth_pct`` for year Y is the minimum wage increase decreed for Y.
- ``ipc_growth_pct`` for year Y is the IPC adjustment applied during Y, that
  is, the CPI variation of year Y-1 as published by DANE.
"""

import csv
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

from liquidador.storage.base import StorageError, StorageNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_REFERENCE_TABLE_PATH = (
    Path(__file__).resolve().parent.parent / "data" / "indices_economicos.csv"
)

FIRST_REFERENCE_YEAR = 1982


class YearlyEconomicIndex(BaseModel):
    """Economic indices for one calendar year."""

    model_config = ConfigDict(frozen=True)

    year: int = Field(..., ge=FIRST_REFERENCE_YEAR, le=2100, description="Calendar year")
    smlmv: float = Field(..., ge=0, description="Monthly legal minimum wage (COP)")
    smlmv_growth_pct: float = Field(..., description="SMLMV increase for the year (%)")
    ipc_growth_pct: float = Field(..., description="IPC adjustment applied in the year (%)")


class ReferenceTable(BaseModel):
    """Immutable table of yearly indices keyed by year."""

    model_config = ConfigDict(frozen=True)

    indices: Tuple[YearlyEconomicIndex, ...] = Field(
        ..., description="Yearly indices sorted by year"
    )
    source: str = Field(default="embedded", description="Where the data came from")

    _by_year: Mapping[int, YearlyEconomicIndex] = PrivateAttr()

    @field_validator("indices")
    @classmethod
    def validate_indices(
        cls, v: Tuple[YearlyEconomicIndex, ...]
    ) -> Tuple[YearlyEconomicIndex, ...]:
        """Validate that indices are sorted, unique and without gaps."""
        if not v:
            raise ValueError("Reference table cannot be empty")

        ordered = tuple(sorted(v, key=lambda index: index.year))
        for i in range(1, len(ordered)):
            prev_year = ordered[i - 1].year
            curr_year = ordered[i].year
            if curr_year == prev_year:
                raise ValueError(f"Duplicate reference year {curr_year}")
            if curr_year != prev_year + 1:
                logger.warning(f"Gap in reference table between {prev_year} and {curr_year}")

        return ordered

    def model_post_init(self, __context) -> None:
        self._by_year = MappingProxyType({index.year: index for index in self.indices})

    @property
    def first_year(self) -> int:
        return self.indices[0].year

    @property
    def last_year(self) -> int:
        return self.indices[-1].year

    def years(self) -> List[int]:
        """Get all covered years in increasing order."""
        return [index.year for index in self.indices]

    def covers(self, year: int) -> bool:
        """Check whether a year has reference data."""
        return year in self._by_year

    def get(self, year: int) -> Optional[YearlyEconomicIndex]:
        """Get the indices for a year, or None when the year is not covered."""
        return self._by_year.get(year)

    def smlmv(self, year: int) -> float:
        """Minimum wage for a year (0 when the year is not covered)."""
        index = self._by_year.get(year)
        return index.smlmv if index else 0.0

    def smlmv_growth_pct(self, year: int) -> float:
        index = self._by_year.get(year)
        return index.smlmv_growth_pct if index else 0.0

    def ipc_growth_pct(self, year: int) -> float:
        index = self._by_year.get(year)
        return index.ipc_growth_pct if index else 0.0

    def to_dict(self) -> Dict[int, Dict[str, float]]:
        """Serialize the table keyed by year."""
        return {
            index.year: index.model_dump(exclude={"year"}) for index in self.indices
        }


def load_reference_table(path: Optional[str] = None) -> ReferenceTable:
    """
    Load the reference table from a CSV file.

    Args:
        path: CSV file with columns year, smlmv, smlmv_growth_pct,
            ipc_growth_pct. Defaults to the packaged dataset.

    Returns:
        Validated, immutable reference table

    Raises:
        StorageNotFoundError: If the file does not exist
        StorageError: If the file cannot be parsed
    """
    csv_path = Path(path) if path else DEFAULT_REFERENCE_TABLE_PATH
    if not csv_path.exists():
        raise StorageNotFoundError(f"Reference table not found: {csv_path}")

    try:
        indices = []
        with open(csv_path, "r", encoding="utf-8") as f:
            reader = csv.DictReader(f)
            for row in reader:
                indices.append(
                    YearlyEconomicIndex(
                        year=int(row["year"]),
                        smlmv=float(row["smlmv"]),
                        smlmv_growth_pct=float(row["smlmv_growth_pct"]),
                        ipc_growth_pct=float(row["ipc_growth_pct"]),
                    )
                )

        table = ReferenceTable(indices=tuple(indices), source=str(csv_path))
        logger.info(
            f"Loaded reference table {table.first_year}-{table.last_year} from {csv_path}"
        )
        return table

    except (KeyError, ValueError) as e:
        logger.error(f"Error reading reference table {csv_path}: {e}")
        raise StorageError(f"Failed to read reference table: {e}")


# Default table - loaded on first use
_default_table: Optional[ReferenceTable] = None


def get_default_reference_table() -> ReferenceTable:
    """Get or load the packaged reference table."""
    global _default_table
    if _default_table is None:
        _default_table = load_reference_table()
    return _default_table
