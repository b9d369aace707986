"""
Cash Flow Analysis Module - Cash Quality and Working Capital Efficiency
FinDash Financial Analysis Core

Implements per-period cash flow statement analysis over a TimeSeriesDataset.

Methodology:
    Free Cash Flow = Operating Cash Flow - Capital Expenditures
    Cash Conversion Cycle = DSO + DIO - DPO

Key Components:
    - Quality Ratios: OCF / Net Income, OCF / Revenue, FCF yield
    - Coverage Ratios: OCF / Total Debt, OCF / Dividends
    - Growth and Stability: FCF growth, OCF coefficient of variation
    - Health and Sustainability: per-period classification and 0-100 score
    - Working Capital: receivable, inventory and payable days, cycle and trend
    - Insights: short narrative observations on the latest period

When receivables, inventory or payables are not supplied they are estimated
from revenue and COGS. The estimated components are recorded on the result.

Inputs: TimeSeriesDataset with Cash Flow from Operations, Net Income, Revenue
Outputs: CashFlowMetrics, WorkingCapitalAnalysis, CashFlowAnalysisResult

Version: 1.0.0
"""

from __future__ import annotations

import numpy as np
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any
from enum import Enum

from .alerts import Alert
from .config import (
    LOGGER,
    REVENUE,
    COGS,
    NET_INCOME,
    TOTAL_DEBT,
    TOTAL_LIABILITIES,
    ACCOUNTS_RECEIVABLE,
    INVENTORY,
    ACCOUNTS_PAYABLE,
    OPERATING_CASH_FLOW,
    CAPITAL_EXPENDITURES,
    DIVIDENDS_PAID,
    CASHFLOW_REQUIRED_FIELDS,
    WORKING_CAPITAL_REQUIRED_FIELDS,
    CASHFLOW_CONFIG,
    WORKING_CAPITAL_CONFIG,
    CashFlowConfig,
    WorkingCapitalConfig,
    AlertSeverity,
)
from .dataset import SeriesCalculatorBase, TimeSeriesDataset


__version__ = "1.0.0"


# =============================================================================
# ENUMERATIONS
# =============================================================================

class CashFlowHealth(Enum):
    """Per-period cash flow health."""
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"


class WorkingCapitalTrend(Enum):
    """Period-over-period working capital direction."""
    BASELINE = "Baseline"
    INCREASING = "Increasing"
    DECREASING = "Decreasing"
    STABLE = "Stable"
    UNKNOWN = "Unknown"


# =============================================================================
# DATA CONTAINERS
# =============================================================================

@dataclass
class CashFlowMetrics:
    """Per-period cash flow metrics, alerts and the OCF stability scalar."""

    # Quality ratios
    free_cash_flow: List[float] = field(default_factory=list)
    ocf_to_net_income: List[float] = field(default_factory=list)
    ocf_to_revenue: List[float] = field(default_factory=list)
    fcf_yield: List[float] = field(default_factory=list)

    # Coverage ratios
    cash_coverage: List[float] = field(default_factory=list)
    debt_service_coverage: List[float] = field(default_factory=list)
    dividend_coverage: List[float] = field(default_factory=list)

    # Efficiency, growth and sustainability
    capex_to_revenue: List[float] = field(default_factory=list)
    fcf_growth_rate: List[float] = field(default_factory=list)
    stability: float = 0.0
    reinvestment_rate: List[float] = field(default_factory=list)

    health: List[CashFlowHealth] = field(default_factory=list)
    sustainability_score: List[int] = field(default_factory=list)
    alerts: List[Alert] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "free_cash_flow": self.free_cash_flow,
            "ocf_to_net_income": self.ocf_to_net_income,
            "ocf_to_revenue": self.ocf_to_revenue,
            "fcf_yield": self.fcf_yield,
            "cash_coverage": self.cash_coverage,
            "debt_service_coverage": self.debt_service_coverage,
            "dividend_coverage": self.dividend_coverage,
            "capex_to_revenue": self.capex_to_revenue,
            "fcf_growth_rate": self.fcf_growth_rate,
            "stability": self.stability,
            "reinvestment_rate": self.reinvestment_rate,
            "health": [h.value for h in self.health],
            "sustainability_score": self.sustainability_score,
            "alerts": [a.to_dict() for a in self.alerts],
        }


@dataclass
class WorkingCapitalAnalysis:
    """Per-period working capital components, days and efficiency."""

    accounts_receivable: List[float] = field(default_factory=list)
    inventory: List[float] = field(default_factory=list)
    accounts_payable: List[float] = field(default_factory=list)
    working_capital: List[float] = field(default_factory=list)

    receivables_turnover: List[float] = field(default_factory=list)
    inventory_turnover: List[float] = field(default_factory=list)
    payables_turnover: List[float] = field(default_factory=list)

    days_sales_outstanding: List[float] = field(default_factory=list)
    days_inventory_outstanding: List[float] = field(default_factory=list)
    days_payables_outstanding: List[float] = field(default_factory=list)
    cash_conversion_cycle: List[float] = field(default_factory=list)

    intensity: List[float] = field(default_factory=list)
    trend: List[WorkingCapitalTrend] = field(default_factory=list)
    efficiency_score: List[int] = field(default_factory=list)

    # Components derived from revenue or COGS rather than supplied
    estimated_components: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "accounts_receivable": self.accounts_receivable,
            "inventory": self.inventory,
            "accounts_payable": self.accounts_payable,
            "working_capital": self.working_capital,
            "receivables_turnover": self.receivables_turnover,
            "inventory_turnover": self.inventory_turnover,
            "payables_turnover": self.payables_turnover,
            "dso": self.days_sales_outstanding,
            "dio": self.days_inventory_outstanding,
            "dpo": self.days_payables_outstanding,
            "cash_conversion_cycle": self.cash_conversion_cycle,
            "intensity": self.intensity,
            "trend": [t.value for t in self.trend],
            "efficiency_score": self.efficiency_score,
            "estimated_components": self.estimated_components,
        }


@dataclass
class CashFlowAnalysisResult:
    """Cash flow metrics plus working capital (when COGS is supplied) and insights."""

    periods: List[str]
    metrics: CashFlowMetrics
    working_capital: Optional[WorkingCapitalAnalysis] = None
    insights: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "periods": self.periods,
            "metrics": self.metrics.to_dict(),
            "working_capital": self.working_capital.to_dict() if self.working_capital else None,
            "insights": self.insights,
        }


# =============================================================================
# CASH FLOW ANALYZER
# =============================================================================

class CashFlowAnalyzer(SeriesCalculatorBase):
    """
    Cash flow quality, coverage, sustainability and working capital analysis.

    Divisions here guard only exact zero denominators; a negative
    denominator divides normally.
    """

    def __init__(
        self,
        config: Optional[CashFlowConfig] = None,
        working_capital_config: Optional[WorkingCapitalConfig] = None,
    ):
        self.config = config or CASHFLOW_CONFIG
        self.wc_config = working_capital_config or WORKING_CAPITAL_CONFIG
        self.logger = LOGGER

    def analyze(self, dataset: TimeSeriesDataset) -> CashFlowAnalysisResult:
        """
        Run cash flow analysis, working capital analysis and insights.

        Working capital analysis is skipped when COGS is not supplied.

        Raises:
            InvalidInputError: If a required cash flow field is missing
        """
        self.logger.info(f"Starting cash flow analysis over {dataset.n_periods} periods")

        metrics = self.analyze_cash_flow(dataset)

        working_capital = None
        if all(name in dataset for name in WORKING_CAPITAL_REQUIRED_FIELDS):
            working_capital = self.analyze_working_capital(dataset)
        else:
            self.logger.debug("COGS not supplied; skipping working capital analysis")

        result = CashFlowAnalysisResult(
            periods=dataset.periods,
            metrics=metrics,
            working_capital=working_capital,
            insights=generate_cash_flow_insights(metrics, self.config),
        )

        self.logger.info(
            f"Cash flow analysis complete: {len(metrics.alerts)} alerts, "
            f"latest health={metrics.health[-1].value}"
        )
        return result

    # -------------------------------------------------------------------------
    # Cash flow metrics
    # -------------------------------------------------------------------------

    def analyze_cash_flow(self, dataset: TimeSeriesDataset) -> CashFlowMetrics:
        """Compute quality, coverage, growth and sustainability metrics."""
        dataset.require(*CASHFLOW_REQUIRED_FIELDS)

        ocf = dataset.series(OPERATING_CASH_FLOW)
        net_income = dataset.series(NET_INCOME)
        revenue = dataset.series(REVENUE)

        if CAPITAL_EXPENDITURES not in dataset:
            self.logger.debug("Capital Expenditures not supplied; assuming zero")
        capex = dataset.optional_series(CAPITAL_EXPENDITURES)
        dividends = dataset.optional_series(DIVIDENDS_PAID)

        debt_field = dataset.first_available(TOTAL_DEBT, TOTAL_LIABILITIES)
        if debt_field is None:
            self.logger.debug("No debt series supplied; cash coverage resolves to 0")
        total_debt = dataset.series(debt_field) if debt_field else np.zeros(len(ocf))

        fcf = ocf - capex

        metrics = CashFlowMetrics(
            free_cash_flow=fcf.tolist(),
            ocf_to_net_income=self.guarded_ratio(ocf, net_income, 100).tolist(),
            ocf_to_revenue=self.guarded_ratio(ocf, revenue, 100).tolist(),
            fcf_yield=self.guarded_ratio(fcf, revenue, 100).tolist(),
            cash_coverage=self.guarded_ratio(ocf, total_debt).tolist(),
            dividend_coverage=self.guarded_ratio(ocf, dividends).tolist(),
            capex_to_revenue=self.guarded_ratio(capex, revenue, 100).tolist(),
            fcf_growth_rate=self._fcf_growth(fcf),
            stability=self.coefficient_of_variation(ocf),
            reinvestment_rate=self.guarded_ratio(capex, ocf, 100).tolist(),
        )
        metrics.debt_service_coverage = list(metrics.cash_coverage)

        metrics.health = [
            self._classify_health(o, f, r)
            for o, f, r in zip(ocf, fcf, metrics.ocf_to_net_income)
        ]
        metrics.sustainability_score = [
            self._sustainability_score(o, f, r, y, c)
            for o, f, r, y, c in zip(
                ocf, fcf, metrics.ocf_to_net_income, metrics.fcf_yield, metrics.capex_to_revenue
            )
        ]
        metrics.alerts = self.generate_alerts(ocf.tolist(), metrics)
        return metrics

    @staticmethod
    def _fcf_growth(fcf: np.ndarray) -> List[float]:
        growth = [0.0]
        for i in range(1, len(fcf)):
            prev = fcf[i - 1]
            if prev == 0:
                growth.append(0.0)
            else:
                growth.append(float((fcf[i] - prev) / abs(prev) * 100))
        return growth

    def _classify_health(self, ocf: float, fcf: float, ocf_to_ni: float) -> CashFlowHealth:
        cfg = self.config
        if ocf > 0 and fcf > 0 and ocf_to_ni > cfg.health_excellent_ocf_ni:
            return CashFlowHealth.EXCELLENT
        if ocf > 0 and fcf > 0 and ocf_to_ni > cfg.health_good_ocf_ni:
            return CashFlowHealth.GOOD
        if ocf > 0 and fcf >= 0:
            return CashFlowHealth.FAIR
        return CashFlowHealth.POOR

    def _sustainability_score(
        self,
        ocf: float,
        fcf: float,
        ocf_to_ni: float,
        fcf_yield: float,
        capex_to_revenue: float,
    ) -> int:
        cfg = self.config
        score = 0
        if ocf > 0:
            score += cfg.points_positive_ocf
        if fcf > 0:
            score += cfg.points_positive_fcf
        if ocf_to_ni > cfg.ocf_exceeds_ni_threshold:
            score += cfg.points_ocf_exceeds_ni

        if fcf_yield > cfg.fcf_yield_high:
            score += cfg.fcf_yield_high_points
        elif fcf_yield > cfg.fcf_yield_mid:
            score += cfg.fcf_yield_mid_points

        if capex_to_revenue < cfg.capex_low:
            score += cfg.capex_low_points
        elif capex_to_revenue < cfg.capex_mid:
            score += cfg.capex_mid_points

        return min(score, cfg.max_score)

    def generate_alerts(self, ocf: List[float], metrics: CashFlowMetrics) -> List[Alert]:
        """Latest-period alerts on cash conversion, FCF, capex and OCF sign."""
        alerts: List[Alert] = []
        if not ocf:
            return alerts

        cfg = self.config
        ocf_to_ni = metrics.ocf_to_net_income[-1]
        fcf = metrics.free_cash_flow[-1]
        capex_ratio = metrics.capex_to_revenue[-1]

        if ocf_to_ni < cfg.ocf_ni_alert:
            alerts.append(Alert(
                severity=AlertSeverity.DANGER,
                message="Operating cash flow significantly below net income - possible earnings quality issues",
                metric="OCF/Net Income Ratio",
                value=ocf_to_ni,
            ))

        if fcf < 0:
            alerts.append(Alert(
                severity=AlertSeverity.WARNING,
                message="Negative free cash flow - company burning cash after investments",
                metric="Free Cash Flow",
                value=fcf,
            ))

        if capex_ratio > cfg.capex_intensity_alert:
            alerts.append(Alert(
                severity=AlertSeverity.INFO,
                message="High capital expenditure relative to revenue - capital intensive business",
                metric="CapEx/Revenue %",
                value=capex_ratio,
            ))

        if ocf[-1] < 0:
            alerts.append(Alert(
                severity=AlertSeverity.DANGER,
                message="Negative operating cash flow - core operations not generating cash",
                metric="Operating Cash Flow",
                value=ocf[-1],
            ))

        return alerts

    # -------------------------------------------------------------------------
    # Working capital
    # -------------------------------------------------------------------------

    def analyze_working_capital(self, dataset: TimeSeriesDataset) -> WorkingCapitalAnalysis:
        """
        Compute working capital days, cash conversion cycle and efficiency.

        Missing receivables, inventory or payables are estimated as fixed
        fractions of revenue or COGS.
        """
        dataset.require(*WORKING_CAPITAL_REQUIRED_FIELDS)
        cfg = self.wc_config

        revenue = dataset.series(REVENUE)
        cogs = dataset.series(COGS)

        estimated: List[str] = []
        receivables = self._component(
            dataset, ACCOUNTS_RECEIVABLE, revenue, cfg.receivables_to_revenue, estimated
        )
        inventory = self._component(dataset, INVENTORY, cogs, cfg.inventory_to_cogs, estimated)
        payables = self._component(dataset, ACCOUNTS_PAYABLE, cogs, cfg.payables_to_cogs, estimated)

        working_capital = receivables + inventory - payables

        receivables_turnover = self.guarded_ratio(revenue, receivables)
        inventory_turnover = self.guarded_ratio(cogs, inventory)
        payables_turnover = self.guarded_ratio(cogs, payables)

        days = cfg.days_in_year
        dso = self.guarded_ratio(np.full(len(revenue), days), receivables_turnover)
        dio = self.guarded_ratio(np.full(len(revenue), days), inventory_turnover)
        dpo = self.guarded_ratio(np.full(len(revenue), days), payables_turnover)
        ccc = dso + dio - dpo

        return WorkingCapitalAnalysis(
            accounts_receivable=receivables.tolist(),
            inventory=inventory.tolist(),
            accounts_payable=payables.tolist(),
            working_capital=working_capital.tolist(),
            receivables_turnover=receivables_turnover.tolist(),
            inventory_turnover=inventory_turnover.tolist(),
            payables_turnover=payables_turnover.tolist(),
            days_sales_outstanding=dso.tolist(),
            days_inventory_outstanding=dio.tolist(),
            days_payables_outstanding=dpo.tolist(),
            cash_conversion_cycle=ccc.tolist(),
            intensity=self.guarded_ratio(working_capital, revenue, 100).tolist(),
            trend=self._working_capital_trend(working_capital),
            efficiency_score=[self._efficiency_score(c) for c in ccc],
            estimated_components=estimated,
        )

    def _component(
        self,
        dataset: TimeSeriesDataset,
        name: str,
        base: np.ndarray,
        fraction: float,
        estimated: List[str],
    ) -> np.ndarray:
        if name in dataset:
            return dataset.series(name)
        self.logger.debug(f"{name} not supplied; estimating as {fraction:.0%} of base")
        estimated.append(name)
        return base * fraction

    def _working_capital_trend(self, working_capital: np.ndarray) -> List[WorkingCapitalTrend]:
        threshold = self.wc_config.trend_threshold
        trend: List[WorkingCapitalTrend] = []
        for i, wc in enumerate(working_capital):
            if i == 0:
                trend.append(WorkingCapitalTrend.BASELINE)
                continue
            prev = working_capital[i - 1]
            if prev == 0:
                trend.append(WorkingCapitalTrend.UNKNOWN)
                continue
            change = (wc - prev) / abs(prev) * 100
            if change > threshold:
                trend.append(WorkingCapitalTrend.INCREASING)
            elif change < -threshold:
                trend.append(WorkingCapitalTrend.DECREASING)
            else:
                trend.append(WorkingCapitalTrend.STABLE)
        return trend

    def _efficiency_score(self, ccc: float) -> int:
        for upper, score in self.wc_config.ccc_score_bands:
            if ccc < upper:
                return score
        return self.wc_config.ccc_floor_score


# =============================================================================
# INSIGHTS
# =============================================================================

def generate_cash_flow_insights(
    metrics: CashFlowMetrics,
    config: Optional[CashFlowConfig] = None,
) -> List[str]:
    """Narrative observations on the latest period's cash flow metrics."""
    cfg = config or CASHFLOW_CONFIG
    insights: List[str] = []
    if not metrics.ocf_to_net_income:
        return insights

    conversion = metrics.ocf_to_net_income[-1]
    if conversion > cfg.insight_strong_conversion:
        insights.append("Strong cash conversion - operating cash flow exceeds reported earnings")
    elif conversion < cfg.insight_weak_conversion:
        insights.append("Potential earnings quality concerns - low cash conversion ratio")

    if metrics.free_cash_flow[-1] > 0 and metrics.fcf_growth_rate[-1] > cfg.insight_fcf_growth:
        insights.append("Healthy free cash flow generation with strong growth trajectory")

    capex_ratio = metrics.capex_to_revenue[-1]
    if capex_ratio < cfg.insight_asset_light:
        insights.append("Asset-light business model with low capital requirements")
    elif capex_ratio > cfg.insight_capital_intensive:
        insights.append("Capital-intensive operations requiring significant ongoing investment")

    return insights


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def analyze_cash_flow(
    dataset: TimeSeriesDataset,
    config: Optional[CashFlowConfig] = None,
    working_capital_config: Optional[WorkingCapitalConfig] = None,
) -> CashFlowAnalysisResult:
    """
    Convenience function for cash flow analysis.

    Args:
        dataset: Line items for all periods
        config: Optional cash flow threshold overrides
        working_capital_config: Optional working capital overrides

    Returns:
        CashFlowAnalysisResult
    """
    return CashFlowAnalyzer(config, working_capital_config).analyze(dataset)


def analyze_working_capital(
    dataset: TimeSeriesDataset,
    config: Optional[WorkingCapitalConfig] = None,
) -> WorkingCapitalAnalysis:
    """Convenience function for the working capital sub-analysis."""
    return CashFlowAnalyzer(working_capital_config=config).analyze_working_capital(dataset)


# =============================================================================
# MODULE EXPORTS
# =============================================================================

__all__ = [
    # Version
    "__version__",

    # Enumerations
    "CashFlowHealth",
    "WorkingCapitalTrend",

    # Data Containers
    "CashFlowMetrics",
    "WorkingCapitalAnalysis",
    "CashFlowAnalysisResult",

    # Analyzer
    "CashFlowAnalyzer",

    # Functions
    "generate_cash_flow_insights",
    "analyze_cash_flow",
    "analyze_working_capital",
]
