"""
Stress Testing Module - Scenario Shocks and Survival Analysis
FinDash Financial Analysis Core

Applies named shock scenarios to latest-period baseline figures and measures
how long the company could fund a resulting cash burn.

Methodology:
    Stressed Revenue = Base Revenue x (1 + shock)
    Stressed OCF     = Base OCF x (1 + shock) x (1 - margin pressure)
    Stressed FCF     = Stressed OCF - Stressed CapEx - Working Capital Impact
    Months of Cash   = Cash / (|Stressed FCF| / 12) while FCF is negative

Key Components:
    - StressScenario: revenue shock, margin pressure (bps), working capital
      impact and capex change
    - Standard catalogue: mild/severe recession, industry disruption,
      supply chain crisis
    - Survival analysis: runway, break-even revenue gap, recovery time
    - Rule-based recommendations

Inputs: StressBaseline (or the latest period of a TimeSeriesDataset)
Outputs: StressTestResult

Version: 1.0.0
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any

from .config import (
    LOGGER,
    REVENUE,
    OPERATING_CASH_FLOW,
    CASH,
    CAPITAL_EXPENDITURES,
    STRESS_REQUIRED_FIELDS,
)
from .dataset import SeriesCalculatorBase, TimeSeriesDataset


__version__ = "1.0.0"


# =============================================================================
# CONFIGURATION CONSTANTS
# =============================================================================

class StressTestConfig:
    """Configuration parameters for stress testing."""

    # Baseline estimates when figures are not supplied
    CASH_TO_OCF_ESTIMATE: float = 2.0       # Cash = 2x OCF
    CAPEX_TO_OCF_ESTIMATE: float = 0.3      # CapEx = 30% of |OCF|

    # Survival analysis
    UNLIMITED_RUNWAY_MONTHS: float = 999.0
    BREAK_EVEN_REVENUE_RATIO: float = 0.7   # Break-even at 70% of base revenue
    MIN_RECOVERY_MONTHS: float = 6.0

    # Recommendation triggers
    URGENT_RUNWAY_MONTHS: float = 6.0
    PRECAUTIONARY_RUNWAY_MONTHS: float = 12.0
    SEVERE_SHOCK_PCT: float = 20.0        # |shock| in percent, either direction


# =============================================================================
# DATA CONTAINERS
# =============================================================================

@dataclass(frozen=True)
class StressScenario:
    """Named shock applied to baseline figures (all values in percent, margin in bps)."""

    name: str
    description: str
    revenue_shock: float
    margin_pressure_bps: float
    working_capital_impact: float
    capex_change: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "revenue_shock": self.revenue_shock,
            "margin_pressure_bps": self.margin_pressure_bps,
            "working_capital_impact": self.working_capital_impact,
            "capex_change": self.capex_change,
        }


STANDARD_SCENARIOS: List[StressScenario] = [
    StressScenario(
        name="Mild Recession",
        description="15% revenue decline with margin pressure",
        revenue_shock=-15,
        margin_pressure_bps=200,
        working_capital_impact=2,
        capex_change=-20,
    ),
    StressScenario(
        name="Severe Recession",
        description="30% revenue decline with significant cost pressures",
        revenue_shock=-30,
        margin_pressure_bps=400,
        working_capital_impact=5,
        capex_change=-50,
    ),
    StressScenario(
        name="Industry Disruption",
        description="25% revenue loss with increased competition",
        revenue_shock=-25,
        margin_pressure_bps=300,
        working_capital_impact=3,
        capex_change=-10,
    ),
    StressScenario(
        name="Supply Chain Crisis",
        description="10% revenue loss with major cost increases",
        revenue_shock=-10,
        margin_pressure_bps=500,
        working_capital_impact=8,
        capex_change=-30,
    ),
]


@dataclass(frozen=True)
class StressBaseline:
    """
    Latest-period figures a scenario is applied to.

    Cash defaults to twice operating cash flow and capex to 30% of
    |operating cash flow| when not supplied.
    """

    revenue: float
    operating_cash_flow: float
    cash: Optional[float] = None
    capex: Optional[float] = None

    @classmethod
    def from_dataset(cls, dataset: TimeSeriesDataset) -> "StressBaseline":
        """Take the latest period of Revenue, OCF and, when present, Cash and CapEx."""
        dataset.require(*STRESS_REQUIRED_FIELDS)
        return cls(
            revenue=dataset.latest(REVENUE),
            operating_cash_flow=dataset.latest(OPERATING_CASH_FLOW),
            cash=dataset.latest(CASH) if CASH in dataset else None,
            capex=dataset.latest(CAPITAL_EXPENDITURES) if CAPITAL_EXPENDITURES in dataset else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "revenue": self.revenue,
            "operating_cash_flow": self.operating_cash_flow,
            "cash": self.cash,
            "capex": self.capex,
        }


@dataclass
class ImpactedMetrics:
    """Figures after the scenario is applied."""

    revenue: float
    operating_cash_flow: float
    capex: float
    free_cash_flow: float
    working_capital_impact: float
    liquidity_ratio: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "revenue": self.revenue,
            "operating_cash_flow": self.operating_cash_flow,
            "capex": self.capex,
            "free_cash_flow": self.free_cash_flow,
            "working_capital_impact": self.working_capital_impact,
            "liquidity_ratio": self.liquidity_ratio,
        }


@dataclass
class SurvivalAnalysis:
    """Cash runway, break-even gap and recovery time under stress."""

    months_of_cash_remaining: float
    break_even_gap_pct: float
    recovery_months: float

    @property
    def unlimited_runway(self) -> bool:
        return self.months_of_cash_remaining >= StressTestConfig.UNLIMITED_RUNWAY_MONTHS

    def to_dict(self) -> Dict[str, Any]:
        return {
            "months_of_cash_remaining": self.months_of_cash_remaining,
            "break_even_gap_pct": self.break_even_gap_pct,
            "recovery_months": self.recovery_months,
        }


@dataclass
class StressTestResult:
    """Scenario, baseline, impacted metrics, survival analysis and recommendations."""

    scenario: StressScenario
    baseline: StressBaseline
    impacted: ImpactedMetrics
    survival: SurvivalAnalysis
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scenario": self.scenario.to_dict(),
            "baseline": self.baseline.to_dict(),
            "impacted_metrics": self.impacted.to_dict(),
            "survival_analysis": self.survival.to_dict(),
            "recommendations": self.recommendations,
        }


# =============================================================================
# STRESS TESTER
# =============================================================================

class StressTester(SeriesCalculatorBase):
    """
    Applies stress scenarios to a baseline.

    Usage:
        tester = StressTester()
        result = tester.run(StressBaseline(1000, 150), STANDARD_SCENARIOS[0])
    """

    def __init__(self):
        self.logger = LOGGER

    def run(self, baseline: StressBaseline, scenario: StressScenario) -> StressTestResult:
        """
        Apply one scenario to the baseline.

        Args:
            baseline: Latest-period figures
            scenario: Shock to apply

        Returns:
            StressTestResult
        """
        cfg = StressTestConfig
        self.logger.info(f"Running stress scenario: {scenario.name}")

        base_revenue = baseline.revenue
        base_ocf = baseline.operating_cash_flow

        if baseline.cash is None:
            base_cash = base_ocf * cfg.CASH_TO_OCF_ESTIMATE
            self.logger.debug(f"Cash not supplied; estimating {base_cash:,.2f} from OCF")
        else:
            base_cash = baseline.cash

        if baseline.capex is None:
            base_capex = abs(base_ocf * cfg.CAPEX_TO_OCF_ESTIMATE)
            self.logger.debug(f"CapEx not supplied; estimating {base_capex:,.2f} from OCF")
        else:
            base_capex = abs(baseline.capex)

        shock = 1 + scenario.revenue_shock / 100
        stressed_revenue = base_revenue * shock
        margin_impact = scenario.margin_pressure_bps / 10000
        stressed_ocf = base_ocf * shock * (1 - margin_impact)
        wc_impact = stressed_revenue * (scenario.working_capital_impact / 100)
        stressed_capex = base_capex * (1 + scenario.capex_change / 100)
        stressed_fcf = stressed_ocf - stressed_capex - wc_impact

        monthly_burn = abs(stressed_fcf) / 12 if stressed_fcf < 0 else 0.0
        if monthly_burn > 0:
            months_of_cash = base_cash / monthly_burn
        else:
            months_of_cash = cfg.UNLIMITED_RUNWAY_MONTHS

        break_even_revenue = base_revenue * cfg.BREAK_EVEN_REVENUE_RATIO
        gap = self.safe_divide(break_even_revenue - stressed_revenue, stressed_revenue) * 100
        recovery_months = max(cfg.MIN_RECOVERY_MONTHS, abs(scenario.revenue_shock) / 2)

        liquidity_ratio = base_cash / ((abs(stressed_fcf) / 12) or 1)

        survival = SurvivalAnalysis(
            months_of_cash_remaining=months_of_cash,
            break_even_gap_pct=gap,
            recovery_months=recovery_months,
        )

        result = StressTestResult(
            scenario=scenario,
            baseline=baseline,
            impacted=ImpactedMetrics(
                revenue=stressed_revenue,
                operating_cash_flow=stressed_ocf,
                capex=stressed_capex,
                free_cash_flow=stressed_fcf,
                working_capital_impact=wc_impact,
                liquidity_ratio=liquidity_ratio,
            ),
            survival=survival,
            recommendations=self.generate_recommendations(scenario, months_of_cash, stressed_fcf),
        )

        self.logger.info(
            f"Stress scenario {scenario.name} complete: FCF={stressed_fcf:,.2f}, "
            f"runway={months_of_cash:.1f} months"
        )
        return result

    def run_standard_scenarios(
        self,
        baseline: StressBaseline,
        scenarios: Optional[List[StressScenario]] = None,
    ) -> List[StressTestResult]:
        """Run every scenario of the standard catalogue, or exactly the given list."""
        if scenarios is None:
            scenarios = STANDARD_SCENARIOS
        return [self.run(baseline, s) for s in scenarios]

    @staticmethod
    def generate_recommendations(
        scenario: StressScenario,
        months_of_cash: float,
        stressed_fcf: float,
    ) -> List[str]:
        """Rule-based actions from runway, FCF, shock size and scenario name."""
        cfg = StressTestConfig
        recommendations: List[str] = []

        if months_of_cash < cfg.URGENT_RUNWAY_MONTHS:
            recommendations.append("URGENT: Secure additional financing or credit facilities immediately")
            recommendations.append("Implement aggressive cost reduction measures")
            recommendations.append("Consider asset sales or divestments to raise cash")
        elif months_of_cash < cfg.PRECAUTIONARY_RUNWAY_MONTHS:
            recommendations.append("Establish backup credit facilities as precautionary measure")
            recommendations.append("Review and optimize working capital management")

        if stressed_fcf < 0:
            recommendations.append("Reduce capital expenditures to preserve cash")
            recommendations.append("Negotiate extended payment terms with suppliers")
            recommendations.append("Accelerate collection of receivables")

        if abs(scenario.revenue_shock) > cfg.SEVERE_SHOCK_PCT:
            recommendations.append("Develop contingency plans for further revenue declines")
            recommendations.append("Diversify revenue streams to reduce concentration risk")
            recommendations.append("Consider strategic partnerships or mergers")

        if "Recession" in scenario.name:
            recommendations.append("Focus on maintaining market share during downturn")
            recommendations.append("Prepare for recovery phase with strategic investments")

        if "Disruption" in scenario.name:
            recommendations.append("Accelerate digital transformation initiatives")
            recommendations.append("Invest in innovation to stay competitive")

        return recommendations


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def get_standard_scenarios() -> List[StressScenario]:
    """The fixed scenario catalogue."""
    return list(STANDARD_SCENARIOS)


def run_stress_test(
    dataset: TimeSeriesDataset,
    scenario: StressScenario,
) -> StressTestResult:
    """
    Convenience function: stress the latest period of a dataset.

    Args:
        dataset: Series with at least Revenue and Cash Flow from Operations
        scenario: Shock to apply

    Returns:
        StressTestResult
    """
    return StressTester().run(StressBaseline.from_dataset(dataset), scenario)


# =============================================================================
# MODULE EXPORTS
# =============================================================================

__all__ = [
    # Version
    "__version__",

    # Configuration
    "StressTestConfig",

    # Data Containers
    "StressScenario",
    "STANDARD_SCENARIOS",
    "StressBaseline",
    "ImpactedMetrics",
    "SurvivalAnalysis",
    "StressTestResult",

    # Tester
    "StressTester",

    # Functions
    "get_standard_scenarios",
    "run_stress_test",
]
