"""
tests/test_benchmark_analyzer.py
================================
Unit tests for industry benchmark classification, scoring and advisory text.
"""

import pytest

from findash import (
    BenchmarkAnalyzer,
    PerformanceClass,
    StaticBenchmarkRepository,
    analyze_ratios,
    create_peer_comparison,
)


TECH = "Technology - Software"


@pytest.fixture
def tech_band():
    return StaticBenchmarkRepository().get_benchmark(TECH)


class TestScoring:

    @pytest.mark.parametrize(
        "value, performance, percentile, score",
        [
            (0.3, PerformanceClass.EXCELLENT, 90, 100),
            (0.5, PerformanceClass.GOOD, 75, 80),
            (0.8, PerformanceClass.AVERAGE, 50, 60),
            (1.2, PerformanceClass.POOR, 25, 40),
            (2.0, PerformanceClass.POOR, 25, 20),
        ],
    )
    def test_debt_to_equity_lower_is_better(self, tech_band, value, performance, percentile, score):
        comparison = BenchmarkAnalyzer().compare_metric("debt_to_equity", value, tech_band.band("debt_to_equity"))
        assert comparison.performance == performance
        assert comparison.percentile == percentile
        assert comparison.score == score

    @pytest.mark.parametrize(
        "value, performance, score",
        [
            (85.0, PerformanceClass.EXCELLENT, 100),
            (80.0, PerformanceClass.GOOD, 80),
            (65.0, PerformanceClass.AVERAGE, 60),
            (50.0, PerformanceClass.POOR, 40),
            (40.0, PerformanceClass.POOR, 20),
        ],
    )
    def test_gross_margin_higher_is_better(self, tech_band, value, performance, score):
        analyzer = BenchmarkAnalyzer()
        band = tech_band.band("gross_margin")
        assert analyzer.classify("gross_margin", value, band) == performance
        assert analyzer.score("gross_margin", value, band) == score

    @pytest.mark.parametrize(
        "score, rating",
        [
            (85.0, PerformanceClass.EXCELLENT),
            (84.9, PerformanceClass.GOOD),
            (70.0, PerformanceClass.GOOD),
            (50.0, PerformanceClass.AVERAGE),
            (49.9, PerformanceClass.POOR),
        ],
    )
    def test_overall_rating_bands(self, score, rating):
        assert BenchmarkAnalyzer().overall_rating(score) == rating


class TestComparison:

    def test_mixed_metrics(self):
        result = create_peer_comparison(TECH, {"gross_margin": 90.0, "debt_to_equity": 2.0})
        assert result.overall_score == pytest.approx(60.0)
        assert result.overall_rating == PerformanceClass.AVERAGE
        assert result.strengths == ["Exceptional Gross Margin performance (90th percentile)"]
        assert result.weaknesses == ["Debt-to-Equity Ratio significantly below industry standards"]
        assert result.recommendations == [
            "Focus on Recurring Revenue, Customer Acquisition Cost, Churn Rate as key "
            "performance indicators for Technology - Software.",
            "Priority improvement needed in: Debt-to-Equity Ratio.",
            "Invest in R&D and customer acquisition to drive scalable growth.",
            "Focus on recurring revenue models and customer lifetime value optimization.",
        ]

    def test_insight_text(self):
        result = create_peer_comparison(TECH, {"gross_margin": 90.0, "debt_to_equity": 2.0})
        insights = {c.metric: c.insight for c in result.comparisons}
        assert insights["gross_margin"] == (
            "Gross Margin of 90.00% significantly outperforms industry average. "
            "This represents top-tier performance."
        )
        assert insights["debt_to_equity"] == (
            "Debt-to-Equity Ratio of 2.00 is below industry average. "
            "Consider strategies to improve to 0.30 (excellent level)."
        )

    def test_average_metrics_listed_for_enhancement(self):
        result = create_peer_comparison("Manufacturing - Industrial", {"roe": 8.0})
        assert result.weaknesses == ["Return on Equity has room for improvement vs. top performers"]
        assert "Consider enhancing: Return on Equity to achieve competitive advantage." in result.recommendations
        assert "Optimize operational efficiency and supply chain management." in result.recommendations

    def test_good_metrics_are_strengths(self):
        result = create_peer_comparison("Retail - E-commerce", {"net_margin": 10.0})
        assert result.strengths == ["Strong Net Margin compared to peers"]
        assert result.overall_rating == PerformanceClass.GOOD

    def test_no_sector_advice_for_other_industries(self):
        result = create_peer_comparison("Energy - Oil & Gas", {"roa": 9.0})
        assert len(result.recommendations) == 1

    def test_none_and_unknown_metrics_are_skipped(self):
        result = create_peer_comparison(TECH, {"roe": None, "inventory_days": 40.0, "roa": 15.0})
        assert [c.metric for c in result.comparisons] == ["roa"]
        assert "roe" not in result.company_metrics
        assert result.overall_score == 100.0

    def test_empty_metrics_score_zero(self):
        result = create_peer_comparison(TECH, {})
        assert result.comparisons == []
        assert result.overall_score == 0.0
        assert result.overall_rating == PerformanceClass.POOR

    def test_unknown_industry_falls_back(self):
        result = create_peer_comparison("Space Mining", {"roe": 30.0})
        assert result.selected_industry == "Space Mining"
        assert result.benchmark_industry == TECH
        assert result.used_fallback
        assert result.comparisons[0].performance == PerformanceClass.EXCELLENT

    def test_compare_ratio_analysis(self, ratio_dataset):
        ratios = analyze_ratios(ratio_dataset)
        result = BenchmarkAnalyzer().compare_ratio_analysis(TECH, ratios)
        assert len(result.comparisons) == 6
        assert not result.used_fallback

    def test_available_industries(self):
        industries = BenchmarkAnalyzer().get_available_industries()
        assert len(industries) == 8
        assert industries[0] == {"value": TECH, "label": TECH, "sector": "Technology"}

    def test_result_serialises(self):
        data = create_peer_comparison(TECH, {"gross_margin": 90.0}).to_dict()
        assert data["overall_rating"] == "excellent"
        assert data["comparisons"][0]["industry_benchmark"]["excellent"] == 85
