"""
Configuration Module - Analysis Engines
FinDash Financial Analysis Core

Centralizes configuration constants, canonical field names, alert and
classification thresholds, working-capital estimation ratios and benchmark
scoring bands for the quantitative analysis engines.

Every threshold used by the ratio, cash-flow, working-capital and benchmark
engines is defined here so that alternative configurations can be injected
without touching the analysis logic.

Version: 1.0.0
"""

from __future__ import annotations

import os
import logging
from dataclasses import dataclass
from typing import Dict, Tuple, FrozenSet
from enum import Enum


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

def setup_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """Configure and return a logger instance with professional formatting."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


def _resolve_log_level(default: int = logging.INFO) -> int:
    """Read the log level name from FINDASH_LOG_LEVEL."""
    name = os.getenv("FINDASH_LOG_LEVEL", "").strip().upper()
    if not name:
        return default
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else default


LOGGER = setup_logger("FinDash", _resolve_log_level())


# =============================================================================
# CANONICAL FIELD NAMES
# =============================================================================

# Income statement
REVENUE = "Revenue"
COGS = "COGS"
GROSS_PROFIT = "Gross Profit"
SGA = "SG&A"
EBITDA = "EBITDA"
NET_INCOME = "Net Income"

# Balance sheet
TOTAL_ASSETS = "Total Assets"
TOTAL_LIABILITIES = "Total Liabilities"
SHAREHOLDERS_EQUITY = "Shareholders Equity"
TOTAL_DEBT = "Total Debt"
CASH = "Cash"
CURRENT_ASSETS = "Current Assets"
CURRENT_LIABILITIES = "Current Liabilities"
ACCOUNTS_RECEIVABLE = "Accounts Receivable"
INVENTORY = "Inventory"
ACCOUNTS_PAYABLE = "Accounts Payable"

# Cash flow statement
OPERATING_CASH_FLOW = "Cash Flow from Operations"
CAPITAL_EXPENDITURES = "Capital Expenditures"
DIVIDENDS_PAID = "Dividends Paid"

CANONICAL_FIELDS: FrozenSet[str] = frozenset({
    REVENUE, COGS, GROSS_PROFIT, SGA, EBITDA, NET_INCOME,
    TOTAL_ASSETS, TOTAL_LIABILITIES, SHAREHOLDERS_EQUITY, TOTAL_DEBT, CASH,
    CURRENT_ASSETS, CURRENT_LIABILITIES,
    ACCOUNTS_RECEIVABLE, INVENTORY, ACCOUNTS_PAYABLE,
    OPERATING_CASH_FLOW, CAPITAL_EXPENDITURES, DIVIDENDS_PAID,
})

RATIO_REQUIRED_FIELDS: Tuple[str, ...] = (
    REVENUE,
    COGS,
    NET_INCOME,
    TOTAL_ASSETS,
    TOTAL_LIABILITIES,
    SHAREHOLDERS_EQUITY,
)

CASHFLOW_REQUIRED_FIELDS: Tuple[str, ...] = (
    OPERATING_CASH_FLOW,
    NET_INCOME,
    REVENUE,
)

WORKING_CAPITAL_REQUIRED_FIELDS: Tuple[str, ...] = (
    REVENUE,
    COGS,
)

STRESS_REQUIRED_FIELDS: Tuple[str, ...] = (
    REVENUE,
    OPERATING_CASH_FLOW,
)

PORTFOLIO_REQUIRED_FIELDS: Tuple[str, ...] = (
    REVENUE,
    NET_INCOME,
    TOTAL_ASSETS,
    SHAREHOLDERS_EQUITY,
)


# =============================================================================
# ENUMERATIONS
# =============================================================================

class AlertSeverity(Enum):
    """Severity of an advisory alert."""
    INFO = "info"
    WARNING = "warning"
    DANGER = "danger"


class PerformanceClass(Enum):
    """Benchmark performance band."""
    EXCELLENT = "excellent"
    GOOD = "good"
    AVERAGE = "average"
    POOR = "poor"


# =============================================================================
# RATIO ANALYSIS CONFIGURATION
# =============================================================================

@dataclass(frozen=True)
class RatioAnalysisConfig:
    """Alert, summary and classification thresholds for ratio analysis."""

    # Alerts (latest period)
    gross_margin_alert: float = 20.0         # % below which margin is a danger
    roe_decline_factor: float = 0.8          # ROE below 80% of prior period
    debt_to_assets_alert: float = 0.6
    net_margin_alert: float = 0.0

    # Debt level bands on average debt-to-assets
    debt_low_max: float = 0.4
    debt_medium_max: float = 0.6

    # Overall health scoring
    health_cagr_threshold: float = 5.0       # % revenue CAGR
    health_roe_threshold: float = 10.0       # % average ROE
    health_roa_threshold: float = 5.0        # % average ROA
    health_points: int = 25
    health_excellent_min: int = 75
    health_good_min: int = 50
    health_fair_min: int = 25

    # Per-period classifiers
    earnings_quality_margin: float = 0.05    # net income / revenue
    growth_strong: float = 0.10
    growth_moderate: float = 0.0
    growth_stable: float = -0.05

    # Financial strength tiers: (ROE %, gross margin %)
    strength_strong: Tuple[float, float] = (15.0, 30.0)
    strength_good: Tuple[float, float] = (10.0, 20.0)
    strength_fair: Tuple[float, float] = (5.0, 10.0)


# =============================================================================
# CASH FLOW CONFIGURATION
# =============================================================================

@dataclass(frozen=True)
class CashFlowConfig:
    """Health, sustainability and alert thresholds for cash-flow analysis."""

    # Health classification (OCF / net income %)
    health_excellent_ocf_ni: float = 80.0
    health_good_ocf_ni: float = 60.0

    # Sustainability score components
    points_positive_ocf: int = 25
    points_positive_fcf: int = 25
    points_ocf_exceeds_ni: int = 20
    ocf_exceeds_ni_threshold: float = 100.0
    fcf_yield_high: float = 10.0
    fcf_yield_high_points: int = 15
    fcf_yield_mid: float = 5.0
    fcf_yield_mid_points: int = 10
    capex_low: float = 10.0
    capex_low_points: int = 15
    capex_mid: float = 15.0
    capex_mid_points: int = 10
    max_score: int = 100

    # Alerts (latest period)
    ocf_ni_alert: float = 50.0
    capex_intensity_alert: float = 20.0

    # Insight thresholds
    insight_strong_conversion: float = 120.0
    insight_weak_conversion: float = 80.0
    insight_fcf_growth: float = 10.0
    insight_asset_light: float = 5.0
    insight_capital_intensive: float = 15.0


@dataclass(frozen=True)
class WorkingCapitalConfig:
    """Estimation ratios and scoring bands for working-capital analysis."""

    # Documented approximations used when balances are not supplied
    receivables_to_revenue: float = 0.12
    inventory_to_cogs: float = 0.15
    payables_to_cogs: float = 0.10

    days_in_year: float = 365.0

    # Period-over-period trend band (% change in working capital)
    trend_threshold: float = 10.0

    # Efficiency score bands on the cash conversion cycle (days, score)
    ccc_score_bands: Tuple[Tuple[float, int], ...] = (
        (30.0, 100),
        (60.0, 80),
        (90.0, 60),
        (120.0, 40),
    )
    ccc_floor_score: int = 20


# =============================================================================
# BENCHMARK CONFIGURATION
# =============================================================================

@dataclass(frozen=True)
class BenchmarkConfig:
    """Percentile, scoring and rating bands for peer benchmarking."""

    # Metrics where a lower value is better
    inverse_metrics: FrozenSet[str] = frozenset({"debt_to_equity"})

    percentile_excellent: int = 90
    percentile_good: int = 75
    percentile_average: int = 50
    percentile_poor: int = 25

    score_excellent: int = 100
    score_good: int = 80
    score_average: int = 60
    score_poor: int = 40
    score_floor: int = 20

    rating_excellent_min: float = 85.0
    rating_good_min: float = 70.0
    rating_average_min: float = 50.0

    max_strengths: int = 5
    max_weaknesses: int = 5
    max_recommendations: int = 6


# =============================================================================
# GLOBAL CONFIGURATION INSTANCES
# =============================================================================

RATIO_ANALYSIS_CONFIG = RatioAnalysisConfig()
CASHFLOW_CONFIG = CashFlowConfig()
WORKING_CAPITAL_CONFIG = WorkingCapitalConfig()
BENCHMARK_CONFIG = BenchmarkConfig()


# =============================================================================
# METRIC DISPLAY NAMES
# =============================================================================

BENCHMARK_METRIC_NAMES: Dict[str, str] = {
    "gross_margin": "Gross Margin",
    "net_margin": "Net Margin",
    "roe": "Return on Equity",
    "roa": "Return on Assets",
    "debt_to_equity": "Debt-to-Equity Ratio",
    "current_ratio": "Current Ratio",
    "asset_turnover": "Asset Turnover",
}

PERCENTAGE_METRICS: FrozenSet[str] = frozenset({
    "gross_margin", "net_margin", "roe", "roa",
})


__all__ = [
    # Logging
    "setup_logger",
    "LOGGER",

    # Field names
    "REVENUE",
    "COGS",
    "GROSS_PROFIT",
    "SGA",
    "EBITDA",
    "NET_INCOME",
    "TOTAL_ASSETS",
    "TOTAL_LIABILITIES",
    "SHAREHOLDERS_EQUITY",
    "TOTAL_DEBT",
    "CASH",
    "CURRENT_ASSETS",
    "CURRENT_LIABILITIES",
    "ACCOUNTS_RECEIVABLE",
    "INVENTORY",
    "ACCOUNTS_PAYABLE",
    "OPERATING_CASH_FLOW",
    "CAPITAL_EXPENDITURES",
    "DIVIDENDS_PAID",
    "CANONICAL_FIELDS",
    "RATIO_REQUIRED_FIELDS",
    "CASHFLOW_REQUIRED_FIELDS",
    "WORKING_CAPITAL_REQUIRED_FIELDS",
    "STRESS_REQUIRED_FIELDS",
    "PORTFOLIO_REQUIRED_FIELDS",

    # Enums
    "AlertSeverity",
    "PerformanceClass",

    # Configuration
    "RatioAnalysisConfig",
    "CashFlowConfig",
    "WorkingCapitalConfig",
    "BenchmarkConfig",
    "RATIO_ANALYSIS_CONFIG",
    "CASHFLOW_CONFIG",
    "WORKING_CAPITAL_CONFIG",
    "BENCHMARK_CONFIG",
    "BENCHMARK_METRIC_NAMES",
    "PERCENTAGE_METRICS",
]
