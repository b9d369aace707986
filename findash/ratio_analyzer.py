"""
Ratio Analysis Module - Profitability, Leverage and Efficiency Ratios
FinDash Financial Analysis Core

Implements per-period financial ratio analysis over a TimeSeriesDataset:
- Profitability: gross margin, net margin, ROA, ROE (percentages)
- Leverage: debt-to-equity, debt-to-assets, equity multiplier
- Efficiency: asset turnover, inventory turnover (when Inventory is supplied)
- Liquidity: current and quick ratio (when current balances are supplied)
- Three-factor DuPont decomposition reconciling with direct ROE
- Latest-period alerts, health summary and per-period quality classifiers
- Quick twelve-month forecast from the latest margins

Every ratio is guarded: a denominator <= 0 resolves the ratio to 0.

Inputs: TimeSeriesDataset with Revenue, COGS, Net Income, Total Assets,
        Total Liabilities and Shareholders Equity
Outputs: RatioAnalysisResult

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
    TOTAL_ASSETS,
    TOTAL_LIABILITIES,
    SHAREHOLDERS_EQUITY,
    CURRENT_ASSETS,
    CURRENT_LIABILITIES,
    INVENTORY,
    RATIO_REQUIRED_FIELDS,
    RATIO_ANALYSIS_CONFIG,
    RatioAnalysisConfig,
    AlertSeverity,
)
from .dataset import InvalidInputError, SeriesCalculatorBase, TimeSeriesDataset


__version__ = "1.0.0"


# =============================================================================
# ENUMERATIONS
# =============================================================================

class DebtLevel(Enum):
    """Average leverage band."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class OverallHealth(Enum):
    """Overall financial health from the summary score."""
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"


class EarningsQuality(Enum):
    """Per-period earnings quality."""
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"


class GrowthTrend(Enum):
    """Per-period revenue growth classification."""
    BASELINE = "Baseline"
    STRONG_GROWTH = "Strong Growth"
    MODERATE_GROWTH = "Moderate Growth"
    STABLE = "Stable"
    DECLINING = "Declining"


class FinancialStrength(Enum):
    """Per-period strength from ROE and gross margin."""
    STRONG = "Strong"
    GOOD = "Good"
    FAIR = "Fair"
    WEAK = "Weak"


class MarginAssumption(Enum):
    """Net margin path for the quick forecast."""
    MAINTAIN = "maintain"
    IMPROVE = "improve"
    DECLINE = "decline"


# =============================================================================
# DATA CONTAINERS
# =============================================================================

@dataclass
class RatioSet:
    """
    Per-period ratios, oldest period first.

    Margins and returns are percentages; leverage and turnover ratios are
    plain multiples. Liquidity and inventory lists are empty when the
    underlying balances were not supplied.
    """

    gross_profit: List[float] = field(default_factory=list)
    gross_margin: List[float] = field(default_factory=list)
    net_margin: List[float] = field(default_factory=list)
    roa: List[float] = field(default_factory=list)
    roe: List[float] = field(default_factory=list)

    debt_to_equity: List[float] = field(default_factory=list)
    debt_to_assets: List[float] = field(default_factory=list)
    equity_multiplier: List[float] = field(default_factory=list)

    asset_turnover: List[float] = field(default_factory=list)
    inventory_turnover: List[float] = field(default_factory=list)

    current_ratio: List[float] = field(default_factory=list)
    quick_ratio: List[float] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "gross_profit": self.gross_profit,
            "profitability": {
                "gross_margin": self.gross_margin,
                "net_margin": self.net_margin,
                "roa": self.roa,
                "roe": self.roe,
            },
            "liquidity": {
                "current_ratio": self.current_ratio,
                "quick_ratio": self.quick_ratio,
            },
            "leverage": {
                "debt_to_equity": self.debt_to_equity,
                "debt_to_assets": self.debt_to_assets,
                "equity_multiplier": self.equity_multiplier,
            },
            "efficiency": {
                "asset_turnover": self.asset_turnover,
                "inventory_turnover": self.inventory_turnover,
            },
        }


@dataclass
class DuPontDecomposition:
    """
    Three-factor DuPont decomposition per period.

    ROE = Net Margin x Asset Turnover x Equity Multiplier
    """

    roe: List[float] = field(default_factory=list)
    net_margin: List[float] = field(default_factory=list)
    asset_turnover: List[float] = field(default_factory=list)
    equity_multiplier: List[float] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "roe": self.roe,
            "net_margin": self.net_margin,
            "asset_turnover": self.asset_turnover,
            "equity_multiplier": self.equity_multiplier,
        }


@dataclass
class QualityIndicators:
    """Per-period qualitative classifiers."""

    earnings_quality: List[EarningsQuality] = field(default_factory=list)
    growth_trend: List[GrowthTrend] = field(default_factory=list)
    financial_strength: List[FinancialStrength] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "earnings_quality": [q.value for q in self.earnings_quality],
            "growth_trend": [g.value for g in self.growth_trend],
            "financial_strength": [s.value for s in self.financial_strength],
        }


@dataclass
class HealthSummary:
    """Summary statistics across all periods."""

    revenue_cagr: float = 0.0
    avg_roe: float = 0.0
    avg_roa: float = 0.0
    debt_level: DebtLevel = DebtLevel.LOW
    overall_health: OverallHealth = OverallHealth.POOR
    health_score: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "revenue_cagr": self.revenue_cagr,
            "avg_roe": self.avg_roe,
            "avg_roa": self.avg_roa,
            "debt_level": self.debt_level.value,
            "overall_health": self.overall_health.value,
            "health_score": self.health_score,
        }


@dataclass
class RatioAnalysisResult:
    """
    Complete output of ratio analysis.

    Carries the input line items used, all computed ratios, the DuPont
    decomposition, quality classifiers, alerts and the health summary.
    """

    periods: List[str]
    revenue: List[float]
    cogs: List[float]
    net_income: List[float]
    total_assets: List[float]
    total_liabilities: List[float]
    shareholders_equity: List[float]

    ratios: RatioSet
    dupont: DuPontDecomposition
    quality: QualityIndicators
    alerts: List[Alert]
    summary: HealthSummary

    @property
    def n_periods(self) -> int:
        return len(self.periods)

    def latest_benchmark_metrics(self) -> Dict[str, float]:
        """
        Latest-period ratios keyed by benchmark metric name.

        Current ratio is included only when it was computed.
        """
        r = self.ratios
        metrics = {
            "gross_margin": r.gross_margin[-1],
            "net_margin": r.net_margin[-1],
            "roe": r.roe[-1],
            "roa": r.roa[-1],
            "debt_to_equity": r.debt_to_equity[-1],
            "asset_turnover": r.asset_turnover[-1],
        }
        if r.current_ratio:
            metrics["current_ratio"] = r.current_ratio[-1]
        return metrics

    def to_dict(self) -> Dict[str, Any]:
        return {
            "periods": self.periods,
            "revenue": self.revenue,
            "cogs": self.cogs,
            "net_income": self.net_income,
            "total_assets": self.total_assets,
            "total_liabilities": self.total_liabilities,
            "shareholders_equity": self.shareholders_equity,
            "ratios": self.ratios.to_dict(),
            "dupont": self.dupont.to_dict(),
            "quality": self.quality.to_dict(),
            "alerts": [a.to_dict() for a in self.alerts],
            "summary": self.summary.to_dict(),
        }


@dataclass
class QuickForecast:
    """Twelve-month forecast from the latest revenue and net margin."""

    summary: HealthSummary
    revenue: List[float] = field(default_factory=list)
    net_income: List[float] = field(default_factory=list)
    net_margin: float = 0.0
    revenue_growth: float = 0.0
    margin_assumption: MarginAssumption = MarginAssumption.MAINTAIN
    capex_growth: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            **self.summary.to_dict(),
            "forecast": {
                "revenue": self.revenue,
                "net_income": self.net_income,
                "net_margin": self.net_margin,
                "assumptions": {
                    "revenue_growth": self.revenue_growth,
                    "margin_assumption": self.margin_assumption.value,
                    "capex_growth": self.capex_growth,
                },
            },
        }


# =============================================================================
# RATIO ANALYZER
# =============================================================================

class RatioAnalyzer(SeriesCalculatorBase):
    """
    Computes ratios, DuPont decomposition, alerts and the health summary.

    Holds configuration only; the dataset is passed to every call.

    Usage:
        analyzer = RatioAnalyzer()
        result = analyzer.analyze(dataset)
    """

    def __init__(self, config: Optional[RatioAnalysisConfig] = None):
        self.config = config or RATIO_ANALYSIS_CONFIG
        self.logger = LOGGER

    def analyze(self, dataset: TimeSeriesDataset) -> RatioAnalysisResult:
        """
        Perform complete ratio analysis.

        Args:
            dataset: Line items for all periods

        Returns:
            RatioAnalysisResult

        Raises:
            InvalidInputError: If a required field is missing
        """
        dataset.require(*RATIO_REQUIRED_FIELDS)
        self.logger.info(f"Starting ratio analysis over {dataset.n_periods} periods")

        ratios = self.compute_ratios(dataset)
        dupont = self.decompose_dupont(ratios)
        revenue = dataset.series(REVENUE)
        net_income = dataset.series(NET_INCOME)

        result = RatioAnalysisResult(
            periods=dataset.periods,
            revenue=revenue.tolist(),
            cogs=dataset.series(COGS).tolist(),
            net_income=net_income.tolist(),
            total_assets=dataset.series(TOTAL_ASSETS).tolist(),
            total_liabilities=dataset.series(TOTAL_LIABILITIES).tolist(),
            shareholders_equity=dataset.series(SHAREHOLDERS_EQUITY).tolist(),
            ratios=ratios,
            dupont=dupont,
            quality=self.assess_quality(revenue, net_income, ratios),
            alerts=self.generate_alerts(ratios),
            summary=self.summarize(revenue, ratios),
        )

        self.logger.info(
            f"Ratio analysis complete: {len(result.alerts)} alerts, "
            f"health={result.summary.overall_health.value}"
        )
        return result

    # -------------------------------------------------------------------------
    # Ratios
    # -------------------------------------------------------------------------

    def compute_ratios(self, dataset: TimeSeriesDataset) -> RatioSet:
        """Compute every per-period ratio, guarding denominators <= 0."""
        dataset.require(*RATIO_REQUIRED_FIELDS)

        revenue = dataset.series(REVENUE)
        cogs = dataset.series(COGS)
        net_income = dataset.series(NET_INCOME)
        assets = dataset.series(TOTAL_ASSETS)
        liabilities = dataset.series(TOTAL_LIABILITIES)
        equity = dataset.series(SHAREHOLDERS_EQUITY)

        gross_profit = revenue - cogs

        ratios = RatioSet(
            gross_profit=gross_profit.tolist(),
            gross_margin=self.guarded_ratio(gross_profit, revenue, 100, positive_only=True).tolist(),
            net_margin=self.guarded_ratio(net_income, revenue, 100, positive_only=True).tolist(),
            roa=self.guarded_ratio(net_income, assets, 100, positive_only=True).tolist(),
            roe=self.guarded_ratio(net_income, equity, 100, positive_only=True).tolist(),
            debt_to_equity=self.guarded_ratio(liabilities, equity, positive_only=True).tolist(),
            debt_to_assets=self.guarded_ratio(liabilities, assets, positive_only=True).tolist(),
            equity_multiplier=self.guarded_ratio(assets, equity, positive_only=True).tolist(),
            asset_turnover=self.guarded_ratio(revenue, assets, positive_only=True).tolist(),
        )

        if INVENTORY in dataset:
            inventory = dataset.series(INVENTORY)
            ratios.inventory_turnover = self.guarded_ratio(cogs, inventory, positive_only=True).tolist()

        if CURRENT_ASSETS in dataset and CURRENT_LIABILITIES in dataset:
            current_assets = dataset.series(CURRENT_ASSETS)
            current_liabilities = dataset.series(CURRENT_LIABILITIES)
            ratios.current_ratio = self.guarded_ratio(
                current_assets, current_liabilities, positive_only=True
            ).tolist()
            if INVENTORY in dataset:
                ratios.quick_ratio = self.guarded_ratio(
                    current_assets - dataset.series(INVENTORY), current_liabilities, positive_only=True
                ).tolist()

        return ratios

    @staticmethod
    def decompose_dupont(ratios: RatioSet) -> DuPontDecomposition:
        """
        Rebuild ROE from its three drivers.

        Uses the stored net margin, asset turnover and equity multiplier so
        the product reconciles with the direct ROE.
        """
        roe = [
            (nm / 100) * at * em * 100
            for nm, at, em in zip(ratios.net_margin, ratios.asset_turnover, ratios.equity_multiplier)
        ]
        return DuPontDecomposition(
            roe=roe,
            net_margin=list(ratios.net_margin),
            asset_turnover=list(ratios.asset_turnover),
            equity_multiplier=list(ratios.equity_multiplier),
        )

    # -------------------------------------------------------------------------
    # Alerts
    # -------------------------------------------------------------------------

    def generate_alerts(self, ratios: RatioSet) -> List[Alert]:
        """Latest-period alerts on margins, ROE decline and leverage."""
        alerts: List[Alert] = []
        current = len(ratios.gross_margin) - 1
        if current < 0:
            return alerts

        cfg = self.config

        if ratios.gross_margin[current] < cfg.gross_margin_alert:
            alerts.append(Alert(
                severity=AlertSeverity.DANGER,
                message="Low gross margin indicates potential pricing or cost issues",
                metric="Gross Margin",
                value=ratios.gross_margin[current],
            ))

        if current > 0 and ratios.roe[current] < ratios.roe[current - 1] * cfg.roe_decline_factor:
            alerts.append(Alert(
                severity=AlertSeverity.WARNING,
                message="Significant decline in Return on Equity",
                metric="ROE",
                value=ratios.roe[current],
            ))

        if ratios.debt_to_assets[current] > cfg.debt_to_assets_alert:
            alerts.append(Alert(
                severity=AlertSeverity.WARNING,
                message="High debt-to-assets ratio may indicate financial risk",
                metric="Debt to Assets",
                value=ratios.debt_to_assets[current],
            ))

        if ratios.net_margin[current] < cfg.net_margin_alert:
            alerts.append(Alert(
                severity=AlertSeverity.DANGER,
                message="Negative net margin indicates the company is losing money",
                metric="Net Margin",
                value=ratios.net_margin[current],
            ))

        return alerts

    # -------------------------------------------------------------------------
    # Quality classifiers
    # -------------------------------------------------------------------------

    def assess_quality(
        self,
        revenue: np.ndarray,
        net_income: np.ndarray,
        ratios: RatioSet,
    ) -> QualityIndicators:
        """Classify earnings quality, growth trend and financial strength per period."""
        cfg = self.config
        quality = QualityIndicators()

        for i, (rev, ni) in enumerate(zip(revenue, net_income)):
            if rev > 0 and ni > 0:
                quality.earnings_quality.append(
                    EarningsQuality.GOOD if ni / rev > cfg.earnings_quality_margin else EarningsQuality.FAIR
                )
            else:
                quality.earnings_quality.append(EarningsQuality.POOR)

            if i == 0:
                quality.growth_trend.append(GrowthTrend.BASELINE)
            else:
                growth = self.safe_divide(rev - revenue[i - 1], revenue[i - 1])
                quality.growth_trend.append(self._classify_growth(growth))

        for roe, margin in zip(ratios.roe, ratios.gross_margin):
            quality.financial_strength.append(self._classify_strength(roe, margin))

        return quality

    def _classify_growth(self, growth: float) -> GrowthTrend:
        cfg = self.config
        if growth > cfg.growth_strong:
            return GrowthTrend.STRONG_GROWTH
        if growth > cfg.growth_moderate:
            return GrowthTrend.MODERATE_GROWTH
        if growth > cfg.growth_stable:
            return GrowthTrend.STABLE
        return GrowthTrend.DECLINING

    def _classify_strength(self, roe: float, gross_margin: float) -> FinancialStrength:
        cfg = self.config
        tiers = (
            (cfg.strength_strong, FinancialStrength.STRONG),
            (cfg.strength_good, FinancialStrength.GOOD),
            (cfg.strength_fair, FinancialStrength.FAIR),
        )
        for (roe_min, margin_min), strength in tiers:
            if roe > roe_min and gross_margin > margin_min:
                return strength
        return FinancialStrength.WEAK

    # -------------------------------------------------------------------------
    # Summary
    # -------------------------------------------------------------------------

    def summarize(self, revenue: np.ndarray, ratios: RatioSet) -> HealthSummary:
        """Revenue CAGR, average returns, debt level and overall health."""
        cfg = self.config

        revenue_cagr = self.compute_cagr(revenue)
        avg_roe = self.mean(ratios.roe)
        avg_roa = self.mean(ratios.roa)
        avg_debt_ratio = self.mean(ratios.debt_to_assets)

        if avg_debt_ratio <= cfg.debt_low_max:
            debt_level = DebtLevel.LOW
        elif avg_debt_ratio <= cfg.debt_medium_max:
            debt_level = DebtLevel.MEDIUM
        else:
            debt_level = DebtLevel.HIGH

        score = 0
        if revenue_cagr > cfg.health_cagr_threshold:
            score += cfg.health_points
        if avg_roe > cfg.health_roe_threshold:
            score += cfg.health_points
        if avg_roa > cfg.health_roa_threshold:
            score += cfg.health_points
        if debt_level == DebtLevel.LOW:
            score += cfg.health_points

        if score >= cfg.health_excellent_min:
            health = OverallHealth.EXCELLENT
        elif score >= cfg.health_good_min:
            health = OverallHealth.GOOD
        elif score >= cfg.health_fair_min:
            health = OverallHealth.FAIR
        else:
            health = OverallHealth.POOR

        return HealthSummary(
            revenue_cagr=revenue_cagr,
            avg_roe=avg_roe,
            avg_roa=avg_roa,
            debt_level=debt_level,
            overall_health=health,
            health_score=score,
        )

    @staticmethod
    def compute_cagr(values: np.ndarray) -> float:
        """
        Compound annual growth rate in percent between first and last period.

        Returns 0 for fewer than two periods, a non-positive starting value
        or a negative ending value.
        """
        n = len(values)
        if n < 2:
            return 0.0
        start, end = float(values[0]), float(values[-1])
        if start <= 0 or end < 0:
            return 0.0
        return ((end / start) ** (1 / (n - 1)) - 1) * 100


# =============================================================================
# QUICK FORECAST
# =============================================================================

def generate_quick_forecast(
    result: RatioAnalysisResult,
    revenue_growth: float,
    margin_assumption: MarginAssumption = MarginAssumption.MAINTAIN,
    capex_growth: float = 0.0,
    months: int = 12,
) -> QuickForecast:
    """
    Project monthly revenue and net income from the latest period.

    Args:
        result: Completed ratio analysis
        revenue_growth: Annual revenue growth in percent
        margin_assumption: Whether the latest net margin is kept, lifted 10%
            or cut 10%
        capex_growth: Recorded with the assumptions
        months: Number of monthly points

    Returns:
        QuickForecast with the health summary attached
    """
    if isinstance(margin_assumption, str):
        try:
            margin_assumption = MarginAssumption(margin_assumption)
        except ValueError as exc:
            raise InvalidInputError(f"Unknown margin assumption: {margin_assumption}") from exc

    last_revenue = result.revenue[-1]
    margin = result.ratios.net_margin[-1]
    if margin_assumption == MarginAssumption.IMPROVE:
        margin *= 1.1
    elif margin_assumption == MarginAssumption.DECLINE:
        margin *= 0.9

    revenue = [
        last_revenue * (1 + revenue_growth / 100) ** ((i + 1) / 12)
        for i in range(months)
    ]
    net_income = [rev * (margin / 100) for rev in revenue]

    return QuickForecast(
        summary=result.summary,
        revenue=revenue,
        net_income=net_income,
        net_margin=margin,
        revenue_growth=revenue_growth,
        margin_assumption=margin_assumption,
        capex_growth=capex_growth,
    )


# =============================================================================
# CONVENIENCE FUNCTION
# =============================================================================

def analyze_ratios(
    dataset: TimeSeriesDataset,
    config: Optional[RatioAnalysisConfig] = None,
) -> RatioAnalysisResult:
    """
    Convenience function for ratio analysis.

    Args:
        dataset: Line items for all periods
        config: Optional threshold overrides

    Returns:
        RatioAnalysisResult
    """
    return RatioAnalyzer(config).analyze(dataset)


# =============================================================================
# MODULE EXPORTS
# =============================================================================

__all__ = [
    # Version
    "__version__",

    # Enumerations
    "DebtLevel",
    "OverallHealth",
    "EarningsQuality",
    "GrowthTrend",
    "FinancialStrength",
    "MarginAssumption",

    # Data Containers
    "RatioSet",
    "DuPontDecomposition",
    "QualityIndicators",
    "HealthSummary",
    "RatioAnalysisResult",
    "QuickForecast",

    # Analyzer
    "RatioAnalyzer",

    # Functions
    "generate_quick_forecast",
    "analyze_ratios",
]
