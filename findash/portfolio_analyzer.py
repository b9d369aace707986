"""
Portfolio Analysis Module - Multi-Company Risk, Performance and Benchmarking
FinDash Financial Analysis Core

Analyses a set of companies, each described by its own TimeSeriesDataset,
as one portfolio.

Methodology:
    Company metrics use the latest period:
        ROE = Net Income / Shareholders Equity x 100
        ROA = Net Income / Total Assets x 100
        Net Margin = Net Income / Revenue x 100
        Asset Turnover = Revenue / Total Assets
        Revenue Growth = CAGR of Revenue (first to last period)
    Every denominator <= 0 resolves the metric to 0.

    Risk:
        Correlation     = Pearson correlation of the revenue series
        Volatility      = population std of period-over-period revenue returns
        Portfolio Vol   = sqrt(w' (sigma sigma' * rho) w)
        Diversification = weighted average volatility / portfolio volatility
        Concentration   = Herfindahl index of the weights

Key Components:
    - Weighted ROE, ROA and revenue growth; risk-adjusted return
    - Top performers and underperformers from fixed thresholds
    - Industry breakdown of count, weight and average metrics
    - Per-company percentile benchmark against same-industry peers
    - Per-field trend classification, volatility and linear forecast
    - Rule-based portfolio insights

Inputs: List of PortfolioCompany
Outputs: PortfolioMetrics, CompanyBenchmark, MetricTrend, PortfolioReport

Version: 1.0.0
"""

from __future__ import annotations

import math
import numpy as np
import pandas as pd
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any, Sequence
from enum import Enum

from .config import (
    LOGGER,
    REVENUE,
    NET_INCOME,
    TOTAL_ASSETS,
    TOTAL_LIABILITIES,
    SHAREHOLDERS_EQUITY,
    PORTFOLIO_REQUIRED_FIELDS,
)
from .dataset import InvalidInputError, SeriesCalculatorBase, TimeSeriesDataset
from .ratio_analyzer import RatioAnalyzer


__version__ = "1.0.0"


# =============================================================================
# CONFIGURATION CONSTANTS
# =============================================================================

class PortfolioConfig:
    """Configuration parameters for portfolio analysis."""

    # Comparative analysis
    TOP_ROE_PCT: float = 20.0
    TOP_GROWTH_PCT: float = 15.0
    MAX_TOP_PERFORMERS: int = 5
    LOW_ROE_PCT: float = 5.0
    LOW_ROA_PCT: float = 3.0

    # Benchmarking
    STRENGTH_PERCENTILE: float = 75.0
    IMPROVEMENT_PERCENTILE: float = 25.0

    # Trends (change as a fraction of the first value)
    TREND_THRESHOLD: float = 0.05
    FORECAST_PERIODS: int = 2
    DEFAULT_CONFIDENCE: float = 0.5
    MIN_CONFIDENCE: float = 0.3
    MAX_CONFIDENCE: float = 0.9
    MIN_CONFIDENCE_PERIODS: int = 3

    # Insight triggers
    HIGH_CONCENTRATION: float = 0.5
    LOW_DIVERSIFICATION: float = 0.7
    STRONG_ROE_PCT: float = 15.0
    STRONG_RISK_ADJUSTED_RETURN: float = 1.5
    MIN_INDUSTRIES: int = 3


# Latest-period metrics compared across companies, in report order
PORTFOLIO_METRICS = (
    "roe",
    "roa",
    "revenue_growth",
    "net_margin",
    "asset_turnover",
)


# =============================================================================
# ENUMERATIONS
# =============================================================================

class PortfolioWeighting(Enum):
    """How company weights are assigned."""
    EQUAL = "equal"
    MARKET_CAP = "market_cap"


class IssueSeverity(Enum):
    """Severity of an underperformance issue."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class TrendDirection(Enum):
    """Direction of a series from first to last value."""
    UPWARD = "upward"
    DOWNWARD = "downward"
    SIDEWAYS = "sideways"


# =============================================================================
# DATA CONTAINERS
# =============================================================================

@dataclass
class PortfolioCompany:
    """One portfolio holding and its line items."""

    name: str
    industry: str
    dataset: TimeSeriesDataset
    market_cap: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "industry": self.industry,
            "market_cap": self.market_cap,
            "financial_data": self.dataset.to_dict(),
        }


@dataclass
class CompanyMetrics:
    """Latest-period metrics of one company and its portfolio weight."""

    name: str
    industry: str
    weight: float
    roe: float
    roa: float
    revenue_growth: float
    net_margin: float
    asset_turnover: float

    def metrics(self) -> Dict[str, float]:
        return {key: getattr(self, key) for key in PORTFOLIO_METRICS}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "industry": self.industry,
            "weight": self.weight,
            **self.metrics(),
        }


@dataclass
class TopPerformer:
    company: str
    metric: str
    value: float
    rank: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "company": self.company,
            "metric": self.metric,
            "value": self.value,
            "rank": self.rank,
        }


@dataclass
class Underperformer:
    company: str
    issue: str
    severity: IssueSeverity
    recommendation: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "company": self.company,
            "issue": self.issue,
            "severity": self.severity.value,
            "recommendation": self.recommendation,
        }


@dataclass
class IndustryExposure:
    """Portfolio exposure to one industry."""

    industry: str
    count: int = 0
    weight: float = 0.0
    average_metrics: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "weighted_value": self.weight,
            "avg_metrics": self.average_metrics,
        }


@dataclass
class PortfolioMetrics:
    """
    Portfolio-level risk, performance and comparative analysis.

    Volatilities are fractions; ROE, ROA and growth are percentages.
    """

    # Risk
    portfolio_volatility: float
    correlation_matrix: Dict[str, Dict[str, float]]
    volatilities: Dict[str, float]
    diversification_ratio: float
    concentration_risk: float

    # Performance
    weighted_average_roe: float
    weighted_average_roa: float
    portfolio_growth_rate: float
    risk_adjusted_return: float
    total_revenue: float
    total_net_income: float

    # Comparative
    companies: List[CompanyMetrics] = field(default_factory=list)
    top_performers: List[TopPerformer] = field(default_factory=list)
    underperformers: List[Underperformer] = field(default_factory=list)
    industry_breakdown: Dict[str, IndustryExposure] = field(default_factory=dict)

    def correlation_frame(self) -> pd.DataFrame:
        """Correlation matrix as a DataFrame indexed and labelled by company."""
        return pd.DataFrame.from_dict(self.correlation_matrix, orient="index")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "portfolio_volatility": self.portfolio_volatility,
            "correlation_matrix": self.correlation_matrix,
            "volatilities": self.volatilities,
            "diversification_ratio": self.diversification_ratio,
            "concentration_risk": self.concentration_risk,
            "weighted_average_roe": self.weighted_average_roe,
            "weighted_average_roa": self.weighted_average_roa,
            "portfolio_growth_rate": self.portfolio_growth_rate,
            "risk_adjusted_return": self.risk_adjusted_return,
            "total_revenue": self.total_revenue,
            "total_net_income": self.total_net_income,
            "companies": [c.to_dict() for c in self.companies],
            "top_performers": [p.to_dict() for p in self.top_performers],
            "underperformers": [u.to_dict() for u in self.underperformers],
            "industry_breakdown": {k: v.to_dict() for k, v in self.industry_breakdown.items()},
        }


@dataclass
class MetricBenchmark:
    """One metric of one company against its same-industry peers."""

    metric: str
    value: float
    percentile: float
    industry_average: float
    best_in_class: float
    gap: float
    trend: TrendDirection

    def to_dict(self) -> Dict[str, Any]:
        return {
            "value": self.value,
            "percentile": self.percentile,
            "industry_average": self.industry_average,
            "best_in_class": self.best_in_class,
            "gap": self.gap,
            "trend": self.trend.value,
        }


@dataclass
class CompanyBenchmark:
    """
    Peer benchmark of one company.

    Metrics are present only when the company has at least one
    same-industry peer in the portfolio.
    """

    company: str
    metrics: Dict[str, MetricBenchmark]
    overall_rank: int
    total_companies: int
    strength_areas: List[str] = field(default_factory=list)
    improvement_areas: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "company": self.company,
            "metrics": {k: v.to_dict() for k, v in self.metrics.items()},
            "overall_rank": self.overall_rank,
            "total_companies": self.total_companies,
            "strength_areas": self.strength_areas,
            "improvement_areas": self.improvement_areas,
        }


@dataclass
class CompanyTrend:
    values: List[float]
    trend: TrendDirection
    volatility: float
    forecast: List[float]
    confidence: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "values": self.values,
            "trend": self.trend.value,
            "volatility": self.volatility,
            "forecast": self.forecast,
            "confidence": self.confidence,
        }


@dataclass
class IndustryTrend:
    """Cross-company statistics per period index."""

    average: List[float] = field(default_factory=list)
    median: List[float] = field(default_factory=list)
    top_quartile: List[float] = field(default_factory=list)
    bottom_quartile: List[float] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "average": self.average,
            "median": self.median,
            "top_quartile": self.top_quartile,
            "bottom_quartile": self.bottom_quartile,
        }


@dataclass
class MetricTrend:
    """Trend analysis of one dataset field across the portfolio."""

    metric: str
    companies: Dict[str, CompanyTrend]
    industry_trend: IndustryTrend

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metric": self.metric,
            "companies": {k: v.to_dict() for k, v in self.companies.items()},
            "industry_trend": self.industry_trend.to_dict(),
        }


@dataclass
class PortfolioReport:
    """Metrics, benchmarks, trends and insights for one portfolio."""

    metrics: PortfolioMetrics
    benchmarks: List[CompanyBenchmark]
    trends: List[MetricTrend]
    insights: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metrics": self.metrics.to_dict(),
            "benchmarks": [b.to_dict() for b in self.benchmarks],
            "trends": [t.to_dict() for t in self.trends],
            "insights": self.insights,
        }


# =============================================================================
# PORTFOLIO ANALYZER
# =============================================================================

class PortfolioAnalyzer(SeriesCalculatorBase):
    """
    Multi-company portfolio analysis.

    The portfolio is validated once at construction; every analysis reads
    from the same company list.

    Usage:
        analyzer = PortfolioAnalyzer(companies)
        metrics = analyzer.analyze()
        benchmarks = analyzer.benchmark_companies()
    """

    def __init__(
        self,
        companies: Sequence[PortfolioCompany],
        weighting: PortfolioWeighting = PortfolioWeighting.EQUAL,
    ):
        """
        Args:
            companies: Holdings with unique names
            weighting: Equal or market-cap weights

        Raises:
            InvalidInputError: If the portfolio is empty, names repeat,
                a dataset lacks a required field or the weighting is unknown
        """
        self.logger = LOGGER

        if not companies:
            raise InvalidInputError("Portfolio requires at least one company")

        names = [c.name for c in companies]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise InvalidInputError(f"Duplicate company names: {', '.join(duplicates)}")

        for company in companies:
            company.dataset.require(*PORTFOLIO_REQUIRED_FIELDS)

        if isinstance(weighting, str):
            try:
                weighting = PortfolioWeighting(weighting)
            except ValueError as exc:
                raise InvalidInputError(f"Unknown portfolio weighting: {weighting}") from exc

        self.companies: List[PortfolioCompany] = list(companies)
        self.weighting = weighting
        self.weights: Dict[str, float] = self._resolve_weights()
        self._series: Dict[str, Dict[str, np.ndarray]] = {
            c.name: self.metric_series(c.dataset) for c in self.companies
        }

    # -------------------------------------------------------------------------
    # Weights and per-company metrics
    # -------------------------------------------------------------------------

    def _resolve_weights(self) -> Dict[str, float]:
        n = len(self.companies)
        if self.weighting == PortfolioWeighting.MARKET_CAP:
            caps = [c.market_cap for c in self.companies]
            if all(cap is not None and cap > 0 for cap in caps):
                total = sum(caps)
                return {c.name: c.market_cap / total for c in self.companies}
            self.logger.warning(
                "Market cap missing or non-positive for some companies; using equal weights"
            )
        return {c.name: 1 / n for c in self.companies}

    def metric_series(self, dataset: TimeSeriesDataset) -> Dict[str, np.ndarray]:
        """
        Per-period metric series for one company.

        Revenue growth has no per-period ratio, so its series is Revenue.
        """
        revenue = dataset.series(REVENUE)
        net_income = dataset.series(NET_INCOME)
        assets = dataset.series(TOTAL_ASSETS)
        equity = dataset.series(SHAREHOLDERS_EQUITY)
        return {
            "roe": self.guarded_ratio(net_income, equity, 100.0, positive_only=True),
            "roa": self.guarded_ratio(net_income, assets, 100.0, positive_only=True),
            "revenue_growth": revenue,
            "net_margin": self.guarded_ratio(net_income, revenue, 100.0, positive_only=True),
            "asset_turnover": self.guarded_ratio(revenue, assets, positive_only=True),
        }

    def company_metrics(self, company: PortfolioCompany) -> CompanyMetrics:
        series = self._series[company.name]
        return CompanyMetrics(
            name=company.name,
            industry=company.industry,
            weight=self.weights[company.name],
            roe=float(series["roe"][-1]),
            roa=float(series["roa"][-1]),
            revenue_growth=RatioAnalyzer.compute_cagr(series["revenue_growth"]),
            net_margin=float(series["net_margin"][-1]),
            asset_turnover=float(series["asset_turnover"][-1]),
        )

    # -------------------------------------------------------------------------
    # Portfolio metrics
    # -------------------------------------------------------------------------

    def analyze(self) -> PortfolioMetrics:
        """
        Compute risk, performance and comparative metrics.

        Returns:
            PortfolioMetrics
        """
        self.logger.info(
            f"Starting portfolio analysis: {len(self.companies)} companies, "
            f"{self.weighting.value} weighting"
        )

        company_metrics = [self.company_metrics(c) for c in self.companies]

        correlations = self.correlation_matrix()
        volatilities = {
            c.name: self.volatility(self.revenue_returns(c.dataset.series(REVENUE)))
            for c in self.companies
        }
        portfolio_volatility = self.portfolio_volatility(volatilities, correlations)
        diversification = self.diversification_ratio(volatilities, portfolio_volatility)
        concentration = self.concentration_risk()

        weighted_roe = sum(m.roe * m.weight for m in company_metrics)
        weighted_roa = sum(m.roa * m.weight for m in company_metrics)
        weighted_growth = sum(m.revenue_growth * m.weight for m in company_metrics)
        portfolio_risk = concentration + max(0.0, 1 - diversification)

        metrics = PortfolioMetrics(
            portfolio_volatility=portfolio_volatility,
            correlation_matrix=correlations,
            volatilities=volatilities,
            diversification_ratio=diversification,
            concentration_risk=concentration,
            weighted_average_roe=weighted_roe,
            weighted_average_roa=weighted_roa,
            portfolio_growth_rate=weighted_growth,
            risk_adjusted_return=self.safe_divide(weighted_roe, portfolio_risk, positive_only=True),
            total_revenue=sum(c.dataset.latest(REVENUE) for c in self.companies),
            total_net_income=sum(c.dataset.latest(NET_INCOME) for c in self.companies),
            companies=company_metrics,
            top_performers=self.identify_top_performers(company_metrics),
            underperformers=self.identify_underperformers(company_metrics),
            industry_breakdown=self.industry_breakdown(company_metrics),
        )

        self.logger.info(
            f"Portfolio analysis complete: ROE={weighted_roe:.2f}%, "
            f"volatility={portfolio_volatility:.4f}, concentration={concentration:.3f}"
        )
        return metrics

    def correlation_matrix(self) -> Dict[str, Dict[str, float]]:
        """Pairwise revenue correlation keyed by company name; 1.0 on the diagonal."""
        revenue = {c.name: c.dataset.series(REVENUE) for c in self.companies}
        matrix: Dict[str, Dict[str, float]] = {}
        for first in self.companies:
            matrix[first.name] = {}
            for second in self.companies:
                if first.name == second.name:
                    matrix[first.name][second.name] = 1.0
                else:
                    matrix[first.name][second.name] = self.correlation(
                        revenue[first.name], revenue[second.name]
                    )
        return matrix

    @staticmethod
    def correlation(first: np.ndarray, second: np.ndarray) -> float:
        """
        Pearson correlation of two aligned series.

        Returns 0 when the lengths differ, fewer than two values are given
        or either series is constant.
        """
        if len(first) != len(second) or len(first) < 2:
            return 0.0
        a = np.asarray(first, dtype=float)
        b = np.asarray(second, dtype=float)
        da = a - a.mean()
        db = b - b.mean()
        denominator = math.sqrt(float(np.sum(da * da) * np.sum(db * db)))
        if denominator > 0:
            return float(np.sum(da * db)) / denominator
        return 0.0

    @staticmethod
    def revenue_returns(revenue: np.ndarray) -> np.ndarray:
        """Period-over-period returns, skipping periods after a non-positive value."""
        values = np.asarray(revenue, dtype=float)
        previous = values[:-1]
        current = values[1:]
        mask = previous > 0
        return (current[mask] - previous[mask]) / previous[mask]

    @staticmethod
    def volatility(values: Sequence[float]) -> float:
        """Population standard deviation, 0 for fewer than two values."""
        array = np.asarray(values, dtype=float)
        if array.size < 2:
            return 0.0
        return float(np.std(array))

    def portfolio_volatility(
        self,
        volatilities: Dict[str, float],
        correlations: Dict[str, Dict[str, float]],
    ) -> float:
        names = [c.name for c in self.companies]
        w = np.array([self.weights[n] for n in names])
        sigma = np.array([volatilities[n] for n in names])
        rho = np.array([[correlations[a][b] for b in names] for a in names])
        variance = float(w @ (np.outer(sigma, sigma) * rho) @ w)
        # Pairwise correlations need not form a valid matrix
        return math.sqrt(max(variance, 0.0))

    def diversification_ratio(self, volatilities: Dict[str, float], portfolio_volatility: float) -> float:
        weighted_volatility = sum(self.weights[n] * v for n, v in volatilities.items())
        return self.safe_divide(weighted_volatility, portfolio_volatility, positive_only=True)

    def concentration_risk(self) -> float:
        """Herfindahl index of the portfolio weights."""
        return float(sum(w * w for w in self.weights.values()))

    def identify_top_performers(self, company_metrics: List[CompanyMetrics]) -> List[TopPerformer]:
        cfg = PortfolioConfig
        candidates = []
        for m in company_metrics:
            if m.roe > cfg.TOP_ROE_PCT:
                candidates.append((m.name, "roe", m.roe))
            if m.revenue_growth > cfg.TOP_GROWTH_PCT:
                candidates.append((m.name, "revenue_growth", m.revenue_growth))

        candidates.sort(key=lambda item: item[2], reverse=True)
        return [
            TopPerformer(company=name, metric=metric, value=value, rank=i + 1)
            for i, (name, metric, value) in enumerate(candidates[:cfg.MAX_TOP_PERFORMERS])
        ]

    def identify_underperformers(self, company_metrics: List[CompanyMetrics]) -> List[Underperformer]:
        cfg = PortfolioConfig
        issues: List[Underperformer] = []
        for m in company_metrics:
            if m.roe < cfg.LOW_ROE_PCT:
                issues.append(Underperformer(
                    company=m.name,
                    issue="Low Return on Equity",
                    severity=IssueSeverity.HIGH,
                    recommendation="Review capital allocation and operational efficiency",
                ))
            if m.roa < cfg.LOW_ROA_PCT:
                issues.append(Underperformer(
                    company=m.name,
                    issue="Poor Asset Utilization",
                    severity=IssueSeverity.MEDIUM,
                    recommendation="Optimize asset turnover and margin improvement",
                ))
        return issues

    def industry_breakdown(self, company_metrics: List[CompanyMetrics]) -> Dict[str, IndustryExposure]:
        """Exposure per industry in order of first appearance."""
        members: Dict[str, List[CompanyMetrics]] = {}
        for m in company_metrics:
            members.setdefault(m.industry, []).append(m)

        breakdown: Dict[str, IndustryExposure] = {}
        for industry, group in members.items():
            breakdown[industry] = IndustryExposure(
                industry=industry,
                count=len(group),
                weight=sum(m.weight for m in group),
                average_metrics={
                    key: self.mean(m.metrics()[key] for m in group) for key in PORTFOLIO_METRICS
                },
            )
        return breakdown

    # -------------------------------------------------------------------------
    # Benchmarking
    # -------------------------------------------------------------------------

    def benchmark_companies(self) -> List[CompanyBenchmark]:
        """Benchmark every company against its same-industry peers."""
        company_metrics = {c.name: self.company_metrics(c) for c in self.companies}
        return [self._benchmark_company(c, company_metrics) for c in self.companies]

    def _benchmark_company(
        self,
        company: PortfolioCompany,
        company_metrics: Dict[str, CompanyMetrics],
    ) -> CompanyBenchmark:
        cfg = PortfolioConfig
        own = company_metrics[company.name].metrics()
        peers = [
            company_metrics[c.name].metrics()
            for c in self.companies
            if c.industry == company.industry and c.name != company.name
        ]

        benchmarked: Dict[str, MetricBenchmark] = {}
        if peers:
            for key in PORTFOLIO_METRICS:
                value = own[key]
                peer_values = [p[key] for p in peers]
                best = max(peer_values)
                benchmarked[key] = MetricBenchmark(
                    metric=key,
                    value=value,
                    percentile=self.percentile_rank(value, peer_values),
                    industry_average=self.mean(peer_values),
                    best_in_class=best,
                    gap=best - value,
                    trend=self.classify_trend(self._series[company.name][key]),
                )

        scores = sorted((sum(m.metrics().values()) for m in company_metrics.values()), reverse=True)
        own_score = sum(own.values())
        overall_rank = next(i for i, s in enumerate(scores) if s <= own_score) + 1

        return CompanyBenchmark(
            company=company.name,
            metrics=benchmarked,
            overall_rank=overall_rank,
            total_companies=len(self.companies),
            strength_areas=[k for k, b in benchmarked.items() if b.percentile >= cfg.STRENGTH_PERCENTILE],
            improvement_areas=[k for k, b in benchmarked.items() if b.percentile <= cfg.IMPROVEMENT_PERCENTILE],
        )

    @staticmethod
    def percentile_rank(value: float, peer_values: Sequence[float]) -> float:
        """
        Share of peers at or below the value, in percent.

        Peers are ranked best first; the position of the first peer not
        above the value sets the percentile. 0 when every peer is above.
        """
        ordered = sorted(peer_values, reverse=True)
        for rank, peer in enumerate(ordered):
            if peer <= value:
                return (len(ordered) - rank) / len(ordered) * 100
        return 0.0

    def classify_trend(self, values: Sequence[float]) -> TrendDirection:
        """Change from first to last value relative to |first|, against a 5% band."""
        if len(values) < 2:
            return TrendDirection.SIDEWAYS
        first, last = float(values[0]), float(values[-1])
        change = self.safe_divide(last - first, abs(first))
        if change > PortfolioConfig.TREND_THRESHOLD:
            return TrendDirection.UPWARD
        if change < -PortfolioConfig.TREND_THRESHOLD:
            return TrendDirection.DOWNWARD
        return TrendDirection.SIDEWAYS

    # -------------------------------------------------------------------------
    # Trends
    # -------------------------------------------------------------------------

    def analyze_trends(self, fields: Sequence[str]) -> List[MetricTrend]:
        """Trend analysis for each named dataset field."""
        return [self._analyze_field(name) for name in fields]

    def _analyze_field(self, name: str) -> MetricTrend:
        companies: Dict[str, CompanyTrend] = {}
        all_values: List[List[float]] = []

        for company in self.companies:
            if name not in company.dataset:
                continue
            values = company.dataset.series(name).tolist()
            all_values.append(values)
            if len(values) >= 2:
                companies[company.name] = CompanyTrend(
                    values=values,
                    trend=self.classify_trend(values),
                    volatility=self.volatility(values),
                    forecast=self.linear_forecast(values),
                    confidence=self.forecast_confidence(values),
                )

        return MetricTrend(
            metric=name,
            companies=companies,
            industry_trend=self.industry_trend(all_values),
        )

    @staticmethod
    def linear_forecast(values: Sequence[float]) -> List[float]:
        """Least-squares line through the values, extended past the last period."""
        n = len(values)
        if n < 2:
            return []
        slope, intercept = np.polyfit(np.arange(n), np.asarray(values, dtype=float), 1)
        return [
            float(slope * (n + k) + intercept)
            for k in range(PortfolioConfig.FORECAST_PERIODS)
        ]

    @staticmethod
    def forecast_confidence(values: Sequence[float]) -> float:
        """1 - coefficient of variation, clamped to [0.3, 0.9]."""
        cfg = PortfolioConfig
        if len(values) < cfg.MIN_CONFIDENCE_PERIODS:
            return cfg.DEFAULT_CONFIDENCE
        array = np.asarray(values, dtype=float)
        mean = float(np.mean(array))
        cv = float(np.std(array)) / mean if mean > 0 else 1.0
        return max(cfg.MIN_CONFIDENCE, min(cfg.MAX_CONFIDENCE, 1 - cv))

    @staticmethod
    def industry_trend(all_values: List[List[float]]) -> IndustryTrend:
        """Average, median and quartiles at each period index across companies."""
        trend = IndustryTrend()
        if not all_values:
            return trend

        for i in range(max(len(v) for v in all_values)):
            period = sorted(v[i] for v in all_values if len(v) > i)
            trend.average.append(float(np.mean(period)))
            trend.median.append(float(np.median(period)))
            trend.top_quartile.append(period[min(int(len(period) * 0.75), len(period) - 1)])
            trend.bottom_quartile.append(period[min(int(len(period) * 0.25), len(period) - 1)])
        return trend

    # -------------------------------------------------------------------------
    # Insights
    # -------------------------------------------------------------------------

    def generate_insights(self, metrics: Optional[PortfolioMetrics] = None) -> List[str]:
        """Rule-based observations on risk, performance and industry spread."""
        cfg = PortfolioConfig
        if metrics is None:
            metrics = self.analyze()

        insights: List[str] = []
        if metrics.concentration_risk > cfg.HIGH_CONCENTRATION:
            insights.append(
                "Portfolio shows high concentration risk - consider diversifying "
                "across more companies/industries"
            )
        if metrics.diversification_ratio < cfg.LOW_DIVERSIFICATION:
            insights.append("Limited diversification benefits - companies may be highly correlated")
        if metrics.weighted_average_roe > cfg.STRONG_ROE_PCT:
            insights.append("Strong portfolio ROE performance indicates effective capital allocation")
        if metrics.risk_adjusted_return > cfg.STRONG_RISK_ADJUSTED_RETURN:
            insights.append(
                "Excellent risk-adjusted returns - portfolio generating value above risk taken"
            )
        if len(metrics.industry_breakdown) < cfg.MIN_INDUSTRIES:
            insights.append("Consider expanding into additional industries for better risk distribution")
        return insights


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def create_sample_portfolio() -> List[PortfolioCompany]:
    """Two-company demonstration portfolio across two industries."""
    return [
        PortfolioCompany(
            name="Tech Innovations Inc.",
            industry="Technology",
            market_cap=50_000_000_000,
            dataset=TimeSeriesDataset({
                REVENUE: [10_000_000, 12_000_000, 15_000_000, 18_000_000, 22_000_000],
                NET_INCOME: [1_000_000, 1_500_000, 2_000_000, 2_500_000, 3_200_000],
                TOTAL_ASSETS: [25_000_000, 28_000_000, 32_000_000, 38_000_000, 45_000_000],
                TOTAL_LIABILITIES: [8_000_000, 9_000_000, 10_000_000, 12_000_000, 14_000_000],
                SHAREHOLDERS_EQUITY: [17_000_000, 19_000_000, 22_000_000, 26_000_000, 31_000_000],
            }),
        ),
        PortfolioCompany(
            name="Manufacturing Corp.",
            industry="Manufacturing",
            market_cap=25_000_000_000,
            dataset=TimeSeriesDataset({
                REVENUE: [20_000_000, 21_000_000, 22_500_000, 24_000_000, 25_500_000],
                NET_INCOME: [1_500_000, 1_600_000, 1_800_000, 2_000_000, 2_200_000],
                TOTAL_ASSETS: [40_000_000, 42_000_000, 45_000_000, 48_000_000, 52_000_000],
                TOTAL_LIABILITIES: [15_000_000, 16_000_000, 17_000_000, 18_000_000, 19_000_000],
                SHAREHOLDERS_EQUITY: [25_000_000, 26_000_000, 28_000_000, 30_000_000, 33_000_000],
            }),
        ),
    ]


def analyze_portfolio(
    companies: Sequence[PortfolioCompany],
    weighting: PortfolioWeighting = PortfolioWeighting.EQUAL,
    trend_fields: Sequence[str] = (REVENUE, NET_INCOME),
) -> PortfolioReport:
    """
    Convenience function for complete portfolio analysis.

    Args:
        companies: Holdings with unique names
        weighting: Equal or market-cap weights
        trend_fields: Dataset fields to run trend analysis on

    Returns:
        PortfolioReport
    """
    analyzer = PortfolioAnalyzer(companies, weighting)
    metrics = analyzer.analyze()
    return PortfolioReport(
        metrics=metrics,
        benchmarks=analyzer.benchmark_companies(),
        trends=analyzer.analyze_trends(trend_fields),
        insights=analyzer.generate_insights(metrics),
    )


# =============================================================================
# MODULE EXPORTS
# =============================================================================

__all__ = [
    # Version
    "__version__",

    # Configuration
    "PortfolioConfig",
    "PORTFOLIO_METRICS",

    # Enumerations
    "PortfolioWeighting",
    "IssueSeverity",
    "TrendDirection",

    # Data Containers
    "PortfolioCompany",
    "CompanyMetrics",
    "TopPerformer",
    "Underperformer",
    "IndustryExposure",
    "PortfolioMetrics",
    "MetricBenchmark",
    "CompanyBenchmark",
    "CompanyTrend",
    "IndustryTrend",
    "MetricTrend",
    "PortfolioReport",

    # Analyzer
    "PortfolioAnalyzer",

    # Functions
    "create_sample_portfolio",
    "analyze_portfolio",
]
