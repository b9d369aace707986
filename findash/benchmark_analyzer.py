"""
Benchmark Analysis Module - Industry Peer Comparison
FinDash Financial Analysis Core

Scores a company's latest-period ratios against static industry benchmark
bands (poor / average / good / excellent).

Methodology:
    - Classify each supplied metric against its industry band; lower is
      better for debt-to-equity, higher is better otherwise
    - Percentile step function: excellent 90, good 75, average 50, poor 25
    - Score step function: 100 / 80 / 60 / 40, floored at 20 below "poor"
    - Overall score = mean of per-metric scores, rated
      excellent (>= 85), good (>= 70), average (>= 50) or poor
    - Strengths, weaknesses and recommendations as advisory text

Unknown industries fall back to the repository's default benchmark with a
logged warning; the benchmark actually used is recorded on the result.

Inputs: industry label and metric name -> value mapping
Outputs: PeerComparisonResult

Version: 1.0.0
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any, Mapping

from .config import (
    LOGGER,
    BENCHMARK_CONFIG,
    BENCHMARK_METRIC_NAMES,
    PERCENTAGE_METRICS,
    BenchmarkConfig,
    PerformanceClass,
)
from .ratio_analyzer import RatioAnalysisResult
from .reference_data import (
    BenchmarkBand,
    BenchmarkRepository,
    IndustryBenchmark,
    StaticBenchmarkRepository,
)


__version__ = "1.0.0"


# =============================================================================
# DATA CONTAINERS
# =============================================================================

@dataclass
class BenchmarkComparison:
    """One metric compared against its industry band."""

    metric: str
    company_value: float
    band: BenchmarkBand
    performance: PerformanceClass
    percentile: int
    score: int
    insight: str

    @property
    def display_name(self) -> str:
        return BENCHMARK_METRIC_NAMES.get(self.metric, self.metric)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metric": self.metric,
            "company_value": self.company_value,
            "industry_benchmark": self.band.to_dict(),
            "performance": self.performance.value,
            "percentile": self.percentile,
            "score": self.score,
            "insight": self.insight,
        }


@dataclass
class PeerComparisonResult:
    """Complete peer benchmark comparison."""

    selected_industry: str
    benchmark_industry: str
    company_metrics: Dict[str, float]
    comparisons: List[BenchmarkComparison] = field(default_factory=list)
    overall_score: float = 0.0
    overall_rating: PerformanceClass = PerformanceClass.POOR
    strengths: List[str] = field(default_factory=list)
    weaknesses: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    @property
    def used_fallback(self) -> bool:
        return self.selected_industry != self.benchmark_industry

    def to_dict(self) -> Dict[str, Any]:
        return {
            "selected_industry": self.selected_industry,
            "benchmark_industry": self.benchmark_industry,
            "company_metrics": self.company_metrics,
            "comparisons": [c.to_dict() for c in self.comparisons],
            "overall_score": self.overall_score,
            "overall_rating": self.overall_rating.value,
            "strengths": self.strengths,
            "weaknesses": self.weaknesses,
            "recommendations": self.recommendations,
        }


# =============================================================================
# BENCHMARK ANALYZER
# =============================================================================

class BenchmarkAnalyzer:
    """
    Compares company metrics with industry benchmark bands.

    Usage:
        analyzer = BenchmarkAnalyzer()
        result = analyzer.compare("Technology - Software", {"roe": 21.0})
    """

    def __init__(
        self,
        repository: Optional[BenchmarkRepository] = None,
        config: Optional[BenchmarkConfig] = None,
    ):
        self.repository = repository or StaticBenchmarkRepository()
        self.config = config or BENCHMARK_CONFIG
        self.logger = LOGGER

    def get_available_industries(self) -> List[Dict[str, str]]:
        """Industry labels and sectors in catalogue order."""
        return [
            {"value": b.industry, "label": b.industry, "sector": b.sector}
            for b in self.repository.all_benchmarks()
        ]

    def compare(self, industry: str, company_metrics: Mapping[str, Optional[float]]) -> PeerComparisonResult:
        """
        Perform peer comparison.

        Metrics with a None value or without a band for the industry are
        skipped.

        Args:
            industry: Benchmark industry label
            company_metrics: Metric name (e.g. "gross_margin") to value

        Returns:
            PeerComparisonResult
        """
        self.logger.info(f"Starting benchmark comparison for industry: {industry}")
        benchmark = self.resolve_benchmark(industry)

        supplied = {k: float(v) for k, v in company_metrics.items() if v is not None}
        result = PeerComparisonResult(
            selected_industry=industry,
            benchmark_industry=benchmark.industry,
            company_metrics=supplied,
        )

        for metric, value in supplied.items():
            band = benchmark.band(metric)
            if band is None:
                self.logger.debug(f"No benchmark band for metric '{metric}'; skipping")
                continue
            result.comparisons.append(self.compare_metric(metric, value, band))

        if result.comparisons:
            result.overall_score = sum(c.score for c in result.comparisons) / len(result.comparisons)
        result.overall_rating = self.overall_rating(result.overall_score)

        result.recommendations = self.generate_recommendations(result.comparisons, benchmark)
        result.strengths = self.identify_strengths(result.comparisons)
        result.weaknesses = self.identify_weaknesses(result.comparisons)

        self.logger.info(
            f"Benchmark comparison complete: score={result.overall_score:.1f}, "
            f"rating={result.overall_rating.value}"
        )
        return result

    def compare_ratio_analysis(self, industry: str, ratio_result: RatioAnalysisResult) -> PeerComparisonResult:
        """Compare the latest-period ratios of a completed ratio analysis."""
        return self.compare(industry, ratio_result.latest_benchmark_metrics())

    def resolve_benchmark(self, industry: str) -> IndustryBenchmark:
        """Benchmark for the industry, falling back to the default industry."""
        benchmark = self.repository.get_benchmark(industry)
        if benchmark is not None:
            return benchmark

        default = self.repository.default_industry
        self.logger.warning(f"Unknown benchmark industry '{industry}'; falling back to '{default}'")
        return self.repository.get_benchmark(default)

    # -------------------------------------------------------------------------
    # Classification and scoring
    # -------------------------------------------------------------------------

    def classify(self, metric: str, value: float, band: BenchmarkBand) -> PerformanceClass:
        """Performance band for a value, honouring lower-is-better metrics."""
        if metric in self.config.inverse_metrics:
            if value <= band.excellent:
                return PerformanceClass.EXCELLENT
            if value <= band.good:
                return PerformanceClass.GOOD
            if value <= band.average:
                return PerformanceClass.AVERAGE
            return PerformanceClass.POOR

        if value >= band.excellent:
            return PerformanceClass.EXCELLENT
        if value >= band.good:
            return PerformanceClass.GOOD
        if value >= band.average:
            return PerformanceClass.AVERAGE
        return PerformanceClass.POOR

    def percentile(self, performance: PerformanceClass) -> int:
        cfg = self.config
        return {
            PerformanceClass.EXCELLENT: cfg.percentile_excellent,
            PerformanceClass.GOOD: cfg.percentile_good,
            PerformanceClass.AVERAGE: cfg.percentile_average,
            PerformanceClass.POOR: cfg.percentile_poor,
        }[performance]

    def score(self, metric: str, value: float, band: BenchmarkBand) -> int:
        """0-100 score; values beyond the poor threshold floor at 20."""
        cfg = self.config
        performance = self.classify(metric, value, band)
        if performance != PerformanceClass.POOR:
            return {
                PerformanceClass.EXCELLENT: cfg.score_excellent,
                PerformanceClass.GOOD: cfg.score_good,
                PerformanceClass.AVERAGE: cfg.score_average,
            }[performance]

        if metric in self.config.inverse_metrics:
            within_poor = value <= band.poor
        else:
            within_poor = value >= band.poor
        return cfg.score_poor if within_poor else cfg.score_floor

    def compare_metric(self, metric: str, value: float, band: BenchmarkBand) -> BenchmarkComparison:
        performance = self.classify(metric, value, band)
        return BenchmarkComparison(
            metric=metric,
            company_value=value,
            band=band,
            performance=performance,
            percentile=self.percentile(performance),
            score=self.score(metric, value, band),
            insight=self.metric_insight(metric, performance, value, band),
        )

    def overall_rating(self, score: float) -> PerformanceClass:
        cfg = self.config
        if score >= cfg.rating_excellent_min:
            return PerformanceClass.EXCELLENT
        if score >= cfg.rating_good_min:
            return PerformanceClass.GOOD
        if score >= cfg.rating_average_min:
            return PerformanceClass.AVERAGE
        return PerformanceClass.POOR

    # -------------------------------------------------------------------------
    # Advisory text
    # -------------------------------------------------------------------------

    @staticmethod
    def metric_insight(
        metric: str,
        performance: PerformanceClass,
        value: float,
        band: BenchmarkBand,
    ) -> str:
        name = BENCHMARK_METRIC_NAMES.get(metric, metric)
        if metric in PERCENTAGE_METRICS:
            value_str = f"{value:.2f}%"
            target_str = f"{band.excellent:.2f}%"
        else:
            value_str = f"{value:.2f}"
            target_str = f"{band.excellent:.2f}"

        if performance == PerformanceClass.EXCELLENT:
            return (
                f"{name} of {value_str} significantly outperforms industry average. "
                f"This represents top-tier performance."
            )
        if performance == PerformanceClass.GOOD:
            return f"{name} of {value_str} is above industry average, indicating strong performance."
        if performance == PerformanceClass.AVERAGE:
            return f"{name} of {value_str} is in line with industry standards."
        return (
            f"{name} of {value_str} is below industry average. "
            f"Consider strategies to improve to {target_str} (excellent level)."
        )

    def generate_recommendations(
        self,
        comparisons: List[BenchmarkComparison],
        benchmark: IndustryBenchmark,
    ) -> List[str]:
        recommendations = [
            f"Focus on {', '.join(benchmark.key_metrics)} as key performance indicators "
            f"for {benchmark.industry}."
        ]

        poor = [c.display_name for c in comparisons if c.performance == PerformanceClass.POOR]
        average = [c.display_name for c in comparisons if c.performance == PerformanceClass.AVERAGE]

        if poor:
            recommendations.append(f"Priority improvement needed in: {', '.join(poor)}.")
        if average:
            recommendations.append(
                f"Consider enhancing: {', '.join(average)} to achieve competitive advantage."
            )

        industry = benchmark.industry
        if "Technology" in industry:
            recommendations.append("Invest in R&D and customer acquisition to drive scalable growth.")
            recommendations.append("Focus on recurring revenue models and customer lifetime value optimization.")
        elif "Manufacturing" in industry:
            recommendations.append("Optimize operational efficiency and supply chain management.")
            recommendations.append("Invest in automation and process improvements to improve margins.")
        elif "Retail" in industry:
            recommendations.append("Focus on inventory turnover and supply chain optimization.")
            recommendations.append("Invest in digital transformation and customer experience.")

        return recommendations[:self.config.max_recommendations]

    def identify_strengths(self, comparisons: List[BenchmarkComparison]) -> List[str]:
        strengths = [
            f"Exceptional {c.display_name} performance ({c.percentile}th percentile)"
            for c in comparisons if c.performance == PerformanceClass.EXCELLENT
        ]
        strengths += [
            f"Strong {c.display_name} compared to peers"
            for c in comparisons if c.performance == PerformanceClass.GOOD
        ]
        return strengths[:self.config.max_strengths]

    def identify_weaknesses(self, comparisons: List[BenchmarkComparison]) -> List[str]:
        weaknesses = [
            f"{c.display_name} significantly below industry standards"
            for c in comparisons if c.performance == PerformanceClass.POOR
        ]
        weaknesses += [
            f"{c.display_name} has room for improvement vs. top performers"
            for c in comparisons if c.performance == PerformanceClass.AVERAGE
        ]
        return weaknesses[:self.config.max_weaknesses]


# =============================================================================
# CONVENIENCE FUNCTION
# =============================================================================

def create_peer_comparison(
    industry: str,
    company_metrics: Mapping[str, Optional[float]],
    repository: Optional[BenchmarkRepository] = None,
) -> PeerComparisonResult:
    """
    Convenience function for peer benchmark comparison.

    Returns:
        PeerComparisonResult
    """
    return BenchmarkAnalyzer(repository).compare(industry, company_metrics)


# =============================================================================
# MODULE EXPORTS
# =============================================================================

__all__ = [
    # Version
    "__version__",

    # Data Containers
    "BenchmarkComparison",
    "PeerComparisonResult",

    # Analyzer
    "BenchmarkAnalyzer",

    # Functions
    "create_peer_comparison",
]
