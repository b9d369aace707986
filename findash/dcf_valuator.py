"""
DCF Valuation Module - Intrinsic Valuation
FinDash Financial Analysis Core

Implements Discounted Cash Flow (DCF) valuation from a single assumption
bundle using per-year growth rates and Gordon Growth terminal value.

Methodology:
    CF[i]            = CF[i-1] x (1 + g_i), seeded from the initial cash flow
    PV[i]            = CF[i] / (1 + r)^(i+1)
    Terminal Value   = CF[last] x (1 + g_t) / (r - g_t)
    Enterprise Value = Sum of PV + PV(Terminal Value)
    Equity Value     = Enterprise Value - Net Debt
    Value per Share  = Equity Value / Shares Outstanding

Sensitivity Analysis:
    5x5 grid of terminal growth (+/- 1%) against discount rate (+/- 1%).
    Each cell recomputes terminal value but approximates the explicit-period
    PV with a level annuity of the initial cash flow:
        PV = CF0 / r x (1 - 1 / (1 + r)^years)
    Grid values therefore differ from the base case by construction.

All rates are expressed in percent (10 means 10%).

Version: 1.0.0
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Any

from .config import LOGGER
from .dataset import InvalidInputError, SeriesCalculatorBase


__version__ = "1.0.0"


# =============================================================================
# CONFIGURATION CONSTANTS
# =============================================================================

class DCFConfig:
    """Configuration parameters for DCF valuation."""

    # Sensitivity analysis deltas (percentage points)
    GROWTH_SENSITIVITY_RANGE: List[float] = [-1.0, -0.5, 0.0, 0.5, 1.0]
    DISCOUNT_SENSITIVITY_RANGE: List[float] = [-1.0, -0.5, 0.0, 0.5, 1.0]


# =============================================================================
# DATA CONTAINERS
# =============================================================================

@dataclass
class DCFInputs:
    """DCF assumption bundle. Rates are percentages."""

    initial_cash_flow: float
    projection_years: int
    revenue_growth_rates: List[float]
    terminal_growth_rate: float
    discount_rate: float
    net_debt: float
    shares_outstanding: float

    def validate(self) -> None:
        """
        Raises:
            InvalidInputError: On an unusable assumption bundle
        """
        if self.projection_years < 1:
            raise InvalidInputError("Projection years must be at least 1")
        if not self.revenue_growth_rates:
            raise InvalidInputError("At least one growth rate is required")
        if self.shares_outstanding <= 0:
            raise InvalidInputError("Shares outstanding must be positive")
        if self.discount_rate <= self.terminal_growth_rate:
            raise InvalidInputError(
                f"Discount rate ({self.discount_rate}%) must exceed terminal growth rate "
                f"({self.terminal_growth_rate}%)"
            )

    def growth_rate_for_year(self, index: int) -> float:
        """Growth rate for a zero-based projection year; the last rate repeats."""
        rates = self.revenue_growth_rates
        return rates[index] if index < len(rates) else rates[-1]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "initial_cash_flow": self.initial_cash_flow,
            "projection_years": self.projection_years,
            "revenue_growth_rates": list(self.revenue_growth_rates),
            "terminal_growth_rate": self.terminal_growth_rate,
            "discount_rate": self.discount_rate,
            "net_debt": self.net_debt,
            "shares_outstanding": self.shares_outstanding,
        }


@dataclass
class YearlyProjection:
    """Single year cash flow projection."""

    year: int
    cash_flow: float
    growth_rate: float
    discount_factor: float
    present_value: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "year": self.year,
            "cash_flow": self.cash_flow,
            "growth_rate": self.growth_rate,
            "discount_factor": self.discount_factor,
            "present_value": self.present_value,
        }


@dataclass
class SensitivityMatrix:
    """Sensitivity analysis matrix for terminal growth and discount rate."""

    # Axis values
    growth_rates: List[float] = field(default_factory=list)
    discount_rates: List[float] = field(default_factory=list)

    # values[i][j] = value per share at growth_rates[i] and discount_rates[j]
    values: List[List[float]] = field(default_factory=list)

    # Base case indices
    base_growth_idx: int = 0
    base_discount_idx: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "growth_rates": self.growth_rates,
            "discount_rates": self.discount_rates,
            "values": self.values,
            "base_growth_idx": self.base_growth_idx,
            "base_discount_idx": self.base_discount_idx,
        }


@dataclass
class DCFSummary:
    total_pv: float = 0.0
    terminal_value_percent: float = 0.0
    implied_multiple: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_pv": self.total_pv,
            "terminal_value_percent": self.terminal_value_percent,
            "implied_multiple": self.implied_multiple,
        }


@dataclass
class DCFResult:
    """Complete DCF valuation result."""

    inputs: DCFInputs
    projected_cash_flows: List[float] = field(default_factory=list)
    present_values: List[float] = field(default_factory=list)
    yearly_projections: List[YearlyProjection] = field(default_factory=list)

    terminal_value: float = 0.0
    terminal_value_pv: float = 0.0
    enterprise_value: float = 0.0
    equity_value: float = 0.0
    value_per_share: float = 0.0

    sensitivity: SensitivityMatrix = field(default_factory=SensitivityMatrix)
    summary: DCFSummary = field(default_factory=DCFSummary)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "inputs": self.inputs.to_dict(),
            "projected_cash_flows": self.projected_cash_flows,
            "present_values": self.present_values,
            "yearly_projections": [p.to_dict() for p in self.yearly_projections],
            "terminal_value": self.terminal_value,
            "terminal_value_pv": self.terminal_value_pv,
            "enterprise_value": self.enterprise_value,
            "equity_value": self.equity_value,
            "value_per_share": self.value_per_share,
            "sensitivity": self.sensitivity.to_dict(),
            "summary": self.summary.to_dict(),
        }


# =============================================================================
# DCF VALUATOR
# =============================================================================

class DCFValuator(SeriesCalculatorBase):
    """
    Projects cash flows and calculates intrinsic value.

    Methodology:
        1. Project cash flows using per-year growth rates
        2. Calculate Terminal Value using Gordon Growth Model
        3. Discount all cash flows to present value
        4. Sum to get Enterprise Value, bridge to equity and per share
        5. Build the growth x discount sensitivity grid
    """

    def __init__(self):
        self.logger = LOGGER

    def value(self, inputs: DCFInputs) -> DCFResult:
        """
        Run the DCF valuation.

        Args:
            inputs: DCF assumption bundle

        Returns:
            DCFResult

        Raises:
            InvalidInputError: If the assumptions are unusable, including a
                discount rate at or below terminal growth
        """
        inputs.validate()
        self.logger.info(
            f"Starting DCF valuation: {inputs.projection_years} years, "
            f"r={inputs.discount_rate}%, g={inputs.terminal_growth_rate}%"
        )

        result = DCFResult(inputs=inputs)
        rate = inputs.discount_rate / 100

        # Project cash flows
        current = inputs.initial_cash_flow
        for i in range(inputs.projection_years):
            growth = inputs.growth_rate_for_year(i)
            current = current * (1 + growth / 100)
            discount_factor = (1 + rate) ** (i + 1)
            present_value = current / discount_factor

            result.projected_cash_flows.append(current)
            result.present_values.append(present_value)
            result.yearly_projections.append(YearlyProjection(
                year=i + 1,
                cash_flow=current,
                growth_rate=growth,
                discount_factor=1 / discount_factor,
                present_value=present_value,
            ))

        # Terminal value
        final_cash_flow = result.projected_cash_flows[-1]
        result.terminal_value = self.terminal_value(
            final_cash_flow, inputs.terminal_growth_rate, inputs.discount_rate
        )
        result.terminal_value_pv = result.terminal_value / (1 + rate) ** inputs.projection_years

        # Enterprise and equity value
        total_pv = sum(result.present_values)
        result.enterprise_value = total_pv + result.terminal_value_pv
        result.equity_value = result.enterprise_value - inputs.net_debt
        result.value_per_share = result.equity_value / inputs.shares_outstanding

        result.sensitivity = self.build_sensitivity_matrix(inputs, final_cash_flow)
        result.summary = DCFSummary(
            total_pv=total_pv,
            terminal_value_percent=self.safe_divide(result.terminal_value_pv, result.enterprise_value) * 100,
            implied_multiple=self.safe_divide(result.enterprise_value, inputs.initial_cash_flow),
        )

        self.logger.info(
            f"DCF valuation complete: EV={result.enterprise_value:,.2f}, "
            f"value/share={result.value_per_share:,.2f}"
        )
        return result

    @staticmethod
    def terminal_value(final_cash_flow: float, terminal_growth: float, discount_rate: float) -> float:
        """Gordon Growth terminal value: CF x (1+g) / (r - g), rates in percent."""
        terminal_cash_flow = final_cash_flow * (1 + terminal_growth / 100)
        return terminal_cash_flow / (discount_rate / 100 - terminal_growth / 100)

    def build_sensitivity_matrix(self, inputs: DCFInputs, final_cash_flow: float) -> SensitivityMatrix:
        """Build sensitivity matrix varying terminal growth and discount rate."""
        matrix = SensitivityMatrix()

        growth_deltas = DCFConfig.GROWTH_SENSITIVITY_RANGE
        discount_deltas = DCFConfig.DISCOUNT_SENSITIVITY_RANGE

        matrix.growth_rates = [inputs.terminal_growth_rate + d for d in growth_deltas]
        matrix.discount_rates = [inputs.discount_rate + d for d in discount_deltas]

        matrix.base_growth_idx = growth_deltas.index(0)
        matrix.base_discount_idx = discount_deltas.index(0)

        matrix.values = []
        for growth in matrix.growth_rates:
            row = []
            for discount in matrix.discount_rates:
                row.append(self._sensitivity_value(inputs, final_cash_flow, growth, discount))
            matrix.values.append(row)

        return matrix

    def _sensitivity_value(
        self,
        inputs: DCFInputs,
        final_cash_flow: float,
        growth: float,
        discount: float,
    ) -> float:
        """Value per share for one grid cell using the annuity approximation."""
        # Ensure discount rate > terminal growth
        if discount <= growth or discount <= 0:
            return 0.0

        rate = discount / 100
        years = inputs.projection_years
        terminal_pv = self.terminal_value(final_cash_flow, growth, discount) / (1 + rate) ** years
        total_pv = inputs.initial_cash_flow / rate * (1 - 1 / (1 + rate) ** years)
        equity_value = total_pv + terminal_pv - inputs.net_debt
        return equity_value / inputs.shares_outstanding


# =============================================================================
# CONVENIENCE FUNCTION
# =============================================================================

def value_company_dcf(
    initial_cash_flow: float,
    projection_years: int,
    revenue_growth_rates: List[float],
    terminal_growth_rate: float,
    discount_rate: float,
    net_debt: float = 0.0,
    shares_outstanding: float = 1.0,
) -> DCFResult:
    """
    Convenience function for DCF valuation.

    Returns:
        DCFResult
    """
    inputs = DCFInputs(
        initial_cash_flow=initial_cash_flow,
        projection_years=projection_years,
        revenue_growth_rates=list(revenue_growth_rates),
        terminal_growth_rate=terminal_growth_rate,
        discount_rate=discount_rate,
        net_debt=net_debt,
        shares_outstanding=shares_outstanding,
    )
    return DCFValuator().value(inputs)


# =============================================================================
# MODULE EXPORTS
# =============================================================================

__all__ = [
    # Version
    "__version__",

    # Configuration
    "DCFConfig",

    # Data Containers
    "DCFInputs",
    "YearlyProjection",
    "SensitivityMatrix",
    "DCFSummary",
    "DCFResult",

    # Valuator
    "DCFValuator",

    # Functions
    "value_company_dcf",
]
