"""
FinDash - Financial Analysis Core
=================================

Deterministic analysis engines over per-period financial line items.

Input Model
- TimeSeriesDataset: canonical field name -> equal-length period values
- InvalidInputError: the single caller-visible failure class

Ratio Analysis
- Profitability, leverage, efficiency and optional liquidity ratios
- Three-factor DuPont decomposition reconciling with direct ROE
- Latest-period alerts, health summary, per-period quality classifiers
- Quick twelve-month forecast

Cash Flow Analysis
- Cash quality, coverage, growth, stability and sustainability scoring
- Working capital days, cash conversion cycle and efficiency scoring
- Narrative insights

Stress Testing
- Standard shock scenarios with survival and break-even analysis

Valuation
- DCF with per-year growth and a growth x discount sensitivity grid
- Comparable-company valuation against a static peer catalogue
- Combined valuation summary with confidence level

Benchmarking
- Percentile and score against static industry benchmark bands

Portfolio Analysis
- Multi-company risk, weighted returns, peer percentiles and trends

Version: 1.0.0
"""

from .config import (
    LOGGER,
    setup_logger,
    REVENUE,
    COGS,
    GROSS_PROFIT,
    SGA,
    EBITDA,
    NET_INCOME,
    TOTAL_ASSETS,
    TOTAL_LIABILITIES,
    SHAREHOLDERS_EQUITY,
    TOTAL_DEBT,
    CASH,
    CURRENT_ASSETS,
    CURRENT_LIABILITIES,
    ACCOUNTS_RECEIVABLE,
    INVENTORY,
    ACCOUNTS_PAYABLE,
    OPERATING_CASH_FLOW,
    CAPITAL_EXPENDITURES,
    DIVIDENDS_PAID,
    AlertSeverity,
    PerformanceClass,
    RatioAnalysisConfig,
    CashFlowConfig,
    WorkingCapitalConfig,
    BenchmarkConfig,
)

from .dataset import (
    InvalidInputError,
    TimeSeriesDataset,
)

from .alerts import Alert

from .ratio_analyzer import (
    DebtLevel,
    OverallHealth,
    EarningsQuality,
    GrowthTrend,
    FinancialStrength,
    MarginAssumption,
    RatioSet,
    DuPontDecomposition,
    QualityIndicators,
    HealthSummary,
    RatioAnalysisResult,
    QuickForecast,
    RatioAnalyzer,
    generate_quick_forecast,
    analyze_ratios,
)

from .cashflow_analyzer import (
    CashFlowHealth,
    WorkingCapitalTrend,
    CashFlowMetrics,
    WorkingCapitalAnalysis,
    CashFlowAnalysisResult,
    CashFlowAnalyzer,
    generate_cash_flow_insights,
    analyze_cash_flow,
    analyze_working_capital,
)

from .stress_tester import (
    StressTestConfig,
    StressScenario,
    STANDARD_SCENARIOS,
    StressBaseline,
    ImpactedMetrics,
    SurvivalAnalysis,
    StressTestResult,
    StressTester,
    get_standard_scenarios,
    run_stress_test,
)

from .dcf_valuator import (
    DCFConfig,
    DCFInputs,
    YearlyProjection,
    SensitivityMatrix,
    DCFSummary,
    DCFResult,
    DCFValuator,
    value_company_dcf,
)

from .reference_data import (
    ComparableCompany,
    BenchmarkBand,
    IndustryBenchmark,
    PeerRepository,
    BenchmarkRepository,
    StaticPeerRepository,
    StaticBenchmarkRepository,
)

from .comparables_valuator import (
    ComparablesConfig,
    TargetMetrics,
    PeerMultiples,
    ImpliedValuations,
    ComparablesValuationResult,
    ComparablesValuator,
    value_company_comparables,
)

from .valuation_aggregator import (
    ValuationConfig,
    ConfidenceLevel,
    ValuationSummary,
    ValuationAggregator,
    perform_complete_valuation,
)

from .benchmark_analyzer import (
    BenchmarkComparison,
    PeerComparisonResult,
    BenchmarkAnalyzer,
    create_peer_comparison,
)

from .portfolio_analyzer import (
    PortfolioConfig,
    PortfolioWeighting,
    IssueSeverity,
    TrendDirection,
    PortfolioCompany,
    CompanyMetrics,
    TopPerformer,
    Underperformer,
    IndustryExposure,
    PortfolioMetrics,
    MetricBenchmark,
    CompanyBenchmark,
    CompanyTrend,
    IndustryTrend,
    MetricTrend,
    PortfolioReport,
    PortfolioAnalyzer,
    create_sample_portfolio,
    analyze_portfolio,
)


__version__ = "1.0.0"

__all__ = [
    # Configuration
    "LOGGER",
    "setup_logger",
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
    "AlertSeverity",
    "PerformanceClass",
    "RatioAnalysisConfig",
    "CashFlowConfig",
    "WorkingCapitalConfig",
    "BenchmarkConfig",

    # Input Model
    "InvalidInputError",
    "TimeSeriesDataset",
    "Alert",

    # Ratio Analysis
    "DebtLevel",
    "OverallHealth",
    "EarningsQuality",
    "GrowthTrend",
    "FinancialStrength",
    "MarginAssumption",
    "RatioSet",
    "DuPontDecomposition",
    "QualityIndicators",
    "HealthSummary",
    "RatioAnalysisResult",
    "QuickForecast",
    "RatioAnalyzer",
    "generate_quick_forecast",
    "analyze_ratios",

    # Cash Flow Analysis
    "CashFlowHealth",
    "WorkingCapitalTrend",
    "CashFlowMetrics",
    "WorkingCapitalAnalysis",
    "CashFlowAnalysisResult",
    "CashFlowAnalyzer",
    "generate_cash_flow_insights",
    "analyze_cash_flow",
    "analyze_working_capital",

    # Stress Testing
    "StressTestConfig",
    "StressScenario",
    "STANDARD_SCENARIOS",
    "StressBaseline",
    "ImpactedMetrics",
    "SurvivalAnalysis",
    "StressTestResult",
    "StressTester",
    "get_standard_scenarios",
    "run_stress_test",

    # Valuation
    "DCFConfig",
    "DCFInputs",
    "YearlyProjection",
    "SensitivityMatrix",
    "DCFSummary",
    "DCFResult",
    "DCFValuator",
    "value_company_dcf",
    "ComparablesConfig",
    "TargetMetrics",
    "PeerMultiples",
    "ImpliedValuations",
    "ComparablesValuationResult",
    "ComparablesValuator",
    "value_company_comparables",
    "ValuationConfig",
    "ConfidenceLevel",
    "ValuationSummary",
    "ValuationAggregator",
    "perform_complete_valuation",

    # Reference Data
    "ComparableCompany",
    "BenchmarkBand",
    "IndustryBenchmark",
    "PeerRepository",
    "BenchmarkRepository",
    "StaticPeerRepository",
    "StaticBenchmarkRepository",

    # Benchmarking
    "BenchmarkComparison",
    "PeerComparisonResult",
    "BenchmarkAnalyzer",
    "create_peer_comparison",

    # Portfolio Analysis
    "PortfolioConfig",
    "PortfolioWeighting",
    "IssueSeverity",
    "TrendDirection",
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
    "PortfolioAnalyzer",
    "create_sample_portfolio",
    "analyze_portfolio",

    # Version
    "__version__",
]
