"""
Dataset Module - Time Series Input Model
FinDash Financial Analysis Core

Defines the input contract shared by every time-series engine: a mapping from
canonical field name to an equal-length ordered numeric sequence, one value
per reporting period (oldest first).

Components:
    - InvalidInputError: the single caller-visible failure class
    - TimeSeriesDataset: immutable, validated wrapper over a pandas DataFrame
    - SeriesCalculatorBase: guarded arithmetic shared by the engines

Degenerate denominators are not errors. By policy a ratio whose denominator
is guarded out resolves to 0.

Version: 1.0.0
"""

from __future__ import annotations

import numpy as np
import pandas as pd
from typing import Dict, List, Mapping, Optional, Sequence, Any, Iterable


__version__ = "1.0.0"


# =============================================================================
# ERRORS
# =============================================================================

class InvalidInputError(ValueError):
    """
    Raised when inputs violate the analysis contract.

    Covers missing required fields, mismatched series lengths, non-numeric
    values and invalid valuation assumptions. Never raised for degenerate
    ratios, which resolve to 0.
    """


# =============================================================================
# TIME SERIES DATASET
# =============================================================================

class TimeSeriesDataset:
    """
    Validated per-period line items keyed by canonical field name.

    Backed by a DataFrame with one column per field and one row per period.
    Accessors hand out read-only numpy arrays so that no engine can mutate
    the caller's data.

    Usage:
        dataset = TimeSeriesDataset({"Revenue": [100, 110], "COGS": [60, 64]})
        revenue = dataset.series("Revenue")
    """

    def __init__(
        self,
        data: Mapping[str, Sequence[float]],
        periods: Optional[Sequence[str]] = None,
    ):
        """
        Build a dataset from a field -> values mapping.

        Args:
            data: Canonical field name to ordered values (oldest period first)
            periods: Optional period labels; defaults to P1..PN

        Raises:
            InvalidInputError: If the mapping is empty, a series is not numeric
                or finite, or the series lengths differ
        """
        if not data:
            raise InvalidInputError("Dataset requires at least one field")

        columns: Dict[str, np.ndarray] = {}
        lengths: Dict[str, int] = {}
        for name, values in data.items():
            columns[name] = self._coerce(name, values)
            lengths[name] = len(columns[name])

        unique_lengths = set(lengths.values())
        if len(unique_lengths) > 1:
            detail = ", ".join(f"{k}={v}" for k, v in lengths.items())
            raise InvalidInputError(f"Series lengths differ: {detail}")

        n_periods = unique_lengths.pop()
        if n_periods == 0:
            raise InvalidInputError("Dataset requires at least one period")

        if periods is None:
            labels = [f"P{i + 1}" for i in range(n_periods)]
        else:
            labels = [str(p) for p in periods]
            if len(labels) != n_periods:
                raise InvalidInputError(
                    f"Expected {n_periods} period labels, got {len(labels)}"
                )

        self._frame = pd.DataFrame(columns, index=pd.Index(labels, name="period"))

    @classmethod
    def from_dataframe(cls, frame: pd.DataFrame, fields_as_rows: bool = False) -> "TimeSeriesDataset":
        """
        Build a dataset from a DataFrame.

        Args:
            frame: Fields as columns and periods as rows (or the transpose)
            fields_as_rows: Set when fields are the index and periods the columns

        Returns:
            TimeSeriesDataset with the frame's period labels
        """
        if fields_as_rows:
            frame = frame.T
        data = {str(col): frame[col].tolist() for col in frame.columns}
        return cls(data, periods=[str(p) for p in frame.index])

    @staticmethod
    def _coerce(name: str, values: Any) -> np.ndarray:
        """Convert one series to a 1-D float array, rejecting bad values."""
        if isinstance(values, (str, bytes)):
            raise InvalidInputError(f"Field '{name}' must be a sequence of numbers")
        try:
            array = np.asarray(list(values), dtype=float)
        except (TypeError, ValueError) as exc:
            raise InvalidInputError(f"Field '{name}' contains non-numeric values") from exc
        if array.ndim != 1:
            raise InvalidInputError(f"Field '{name}' must be one-dimensional")
        if not np.all(np.isfinite(array)):
            raise InvalidInputError(f"Field '{name}' contains non-finite values")
        return array

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def n_periods(self) -> int:
        return len(self._frame.index)

    @property
    def periods(self) -> List[str]:
        return list(self._frame.index)

    @property
    def fields(self) -> List[str]:
        return list(self._frame.columns)

    def __contains__(self, name: object) -> bool:
        return name in self._frame.columns

    def __len__(self) -> int:
        return self.n_periods

    def __repr__(self) -> str:
        return f"TimeSeriesDataset(fields={self.fields}, periods={self.periods})"

    def has_field(self, name: str) -> bool:
        return name in self._frame.columns

    def require(self, *names: str) -> None:
        """
        Ensure every named field is present.

        Raises:
            InvalidInputError: Listing all missing fields
        """
        missing = [n for n in names if n not in self._frame.columns]
        if missing:
            raise InvalidInputError(f"Missing required fields: {', '.join(missing)}")

    def series(self, name: str) -> np.ndarray:
        """
        Return a read-only copy of a field's values.

        Raises:
            InvalidInputError: If the field is absent
        """
        self.require(name)
        array = self._frame[name].to_numpy(dtype=float, copy=True)
        array.flags.writeable = False
        return array

    def optional_series(self, name: str, default: float = 0.0) -> np.ndarray:
        """Return a field's values, or a constant series when absent."""
        if name in self._frame.columns:
            return self.series(name)
        array = np.full(self.n_periods, float(default))
        array.flags.writeable = False
        return array

    def first_available(self, *names: str) -> Optional[str]:
        """Return the first of the given field names present in the dataset."""
        for name in names:
            if name in self._frame.columns:
                return name
        return None

    def latest(self, name: str) -> float:
        """Latest-period value of a field."""
        return float(self.series(name)[-1])

    def to_frame(self) -> pd.DataFrame:
        return self._frame.copy()

    def to_dict(self) -> Dict[str, List[float]]:
        return {name: self._frame[name].astype(float).tolist() for name in self._frame.columns}


# =============================================================================
# GUARDED ARITHMETIC
# =============================================================================

class SeriesCalculatorBase:
    """
    Base class for series calculations.

    Provides guarded division for scalars and aligned arrays. A guarded-out
    denominator yields 0 rather than an error.
    """

    @staticmethod
    def safe_divide(numerator: float, denominator: float, positive_only: bool = False) -> float:
        """
        Divide with a zero (or non-positive) denominator guard.

        Args:
            numerator: Dividend value
            denominator: Divisor value
            positive_only: Guard every denominator <= 0 instead of only 0

        Returns:
            Quotient, or 0.0 when the denominator is guarded out
        """
        if positive_only:
            if not denominator > 0:
                return 0.0
        elif denominator == 0:
            return 0.0
        return numerator / denominator

    @staticmethod
    def guarded_ratio(
        numerator: Iterable[float],
        denominator: Iterable[float],
        scale: float = 1.0,
        positive_only: bool = False,
    ) -> np.ndarray:
        """
        Element-wise (numerator / denominator) * scale with a denominator guard.

        Args:
            numerator: Aligned numerator values
            denominator: Aligned denominator values
            scale: Multiplier applied after division (100 for percentages)
            positive_only: Guard every denominator <= 0 instead of only 0

        Returns:
            Float array with 0.0 wherever the denominator is guarded out
        """
        num = np.asarray(numerator, dtype=float)
        den = np.asarray(denominator, dtype=float)
        mask = den > 0 if positive_only else den != 0
        out = np.zeros(num.shape, dtype=float)
        np.divide(num, den, out=out, where=mask)
        if scale != 1.0:
            out = np.where(mask, out * scale, 0.0)
        return out

    @staticmethod
    def mean(values: Iterable[float]) -> float:
        """Arithmetic mean, 0.0 for an empty series."""
        array = np.asarray(list(values), dtype=float)
        return float(np.mean(array)) if array.size else 0.0

    @staticmethod
    def median(values: Iterable[float]) -> float:
        """Median, 0.0 for an empty series."""
        array = np.asarray(list(values), dtype=float)
        return float(np.median(array)) if array.size else 0.0

    @staticmethod
    def coefficient_of_variation(values: Iterable[float]) -> float:
        """
        Population standard deviation over |mean|, as a percentage.

        Returns 0.0 for fewer than two values or a zero mean.
        """
        array = np.asarray(list(values), dtype=float)
        if array.size < 2:
            return 0.0
        mean = float(np.mean(array))
        if mean == 0:
            return 0.0
        return float(np.std(array)) / abs(mean) * 100


__all__ = [
    "__version__",
    "InvalidInputError",
    "TimeSeriesDataset",
    "SeriesCalculatorBase",
]
