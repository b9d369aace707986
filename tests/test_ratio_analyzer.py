"""
tests/test_ratio_analyzer.py
============================
Unit tests for ratio analysis: ratios, DuPont reconciliation, alerts,
health summary, quality classifiers and the quick forecast.
"""

import pytest

from findash import (
    AlertSeverity,
    DebtLevel,
    EarningsQuality,
    FinancialStrength,
    GrowthTrend,
    InvalidInputError,
    MarginAssumption,
    OverallHealth,
    RatioAnalyzer,
    TimeSeriesDataset,
    analyze_ratios,
    generate_quick_forecast,
)


def _dataset(**overrides):
    data = {
        "Revenue": [1000.0, 1100.0],
        "COGS": [600.0, 650.0],
        "Net Income": [100.0, 110.0],
        "Total Assets": [2000.0, 2100.0],
        "Total Liabilities": [600.0, 700.0],
        "Shareholders Equity": [1400.0, 1400.0],
    }
    data.update(overrides)
    return TimeSeriesDataset(data)


# ─── Ratios ───────────────────────────────────────────────────────────────────

def test_gross_margin_formula(ratio_dataset):
    result = analyze_ratios(ratio_dataset)
    revenue = ratio_dataset.series("Revenue")
    cogs = ratio_dataset.series("COGS")
    for i, margin in enumerate(result.ratios.gross_margin):
        assert margin == ((revenue[i] - cogs[i]) / revenue[i]) * 100
    assert result.ratios.gross_profit == [400.0, 450.0, 510.0]


def test_leverage_and_efficiency_ratios(ratio_dataset):
    r = analyze_ratios(ratio_dataset).ratios
    assert r.debt_to_equity[0] == pytest.approx(800 / 1200)
    assert r.debt_to_assets[0] == pytest.approx(0.4)
    assert r.equity_multiplier[0] == pytest.approx(2000 / 1200)
    assert r.asset_turnover[0] == pytest.approx(0.5)
    assert r.roa[0] == pytest.approx(5.0)
    assert r.roe[2] == pytest.approx(12.5)


def test_dupont_reconciles_with_direct_roe(ratio_dataset, distressed_dataset):
    for dataset in (ratio_dataset, distressed_dataset):
        result = analyze_ratios(dataset)
        for direct, dupont in zip(result.ratios.roe, result.dupont.roe):
            assert dupont == pytest.approx(direct, abs=1e-6)


def test_zero_equity_resolves_ratios_to_zero():
    result = analyze_ratios(_dataset(**{"Shareholders Equity": [0.0, 1400.0]}))
    assert result.ratios.roe[0] == 0.0
    assert result.ratios.debt_to_equity[0] == 0.0
    assert result.ratios.equity_multiplier[0] == 0.0
    assert result.dupont.roe[0] == 0.0
    assert result.ratios.roe[1] > 0


def test_negative_denominator_resolves_to_zero():
    result = analyze_ratios(_dataset(**{"Shareholders Equity": [-100.0, 1400.0]}))
    assert result.ratios.roe[0] == 0.0


def test_zero_revenue_resolves_margins_to_zero():
    result = analyze_ratios(_dataset(Revenue=[0.0, 1100.0]))
    assert result.ratios.gross_margin[0] == 0.0
    assert result.ratios.net_margin[0] == 0.0


def test_optional_liquidity_ratios_absent(ratio_dataset):
    r = analyze_ratios(ratio_dataset).ratios
    assert r.current_ratio == []
    assert r.quick_ratio == []
    assert r.inventory_turnover == []


def test_optional_liquidity_ratios_present():
    result = analyze_ratios(_dataset(**{
        "Current Assets": [500.0, 600.0],
        "Current Liabilities": [250.0, 0.0],
        "Inventory": [100.0, 130.0],
    }))
    r = result.ratios
    assert r.current_ratio == [pytest.approx(2.0), 0.0]
    assert r.quick_ratio[0] == pytest.approx(1.6)
    assert r.inventory_turnover == [pytest.approx(6.0), pytest.approx(5.0)]


def test_missing_required_field_raises():
    ds = TimeSeriesDataset({"Revenue": [1.0], "COGS": [0.5]})
    with pytest.raises(InvalidInputError, match="Net Income"):
        RatioAnalyzer().analyze(ds)


# ─── Alerts ───────────────────────────────────────────────────────────────────

def test_healthy_company_has_no_alerts(ratio_dataset):
    assert analyze_ratios(ratio_dataset).alerts == []


def test_distressed_company_alerts(distressed_dataset):
    alerts = analyze_ratios(distressed_dataset).alerts
    assert [a.metric for a in alerts] == ["Gross Margin", "ROE", "Debt to Assets", "Net Margin"]
    assert [a.severity for a in alerts] == [
        AlertSeverity.DANGER,
        AlertSeverity.WARNING,
        AlertSeverity.WARNING,
        AlertSeverity.DANGER,
    ]
    assert alerts[0].value == pytest.approx(10.0)
    assert alerts[3].value == pytest.approx(-5.0)


def test_roe_decline_needs_two_periods():
    ds = TimeSeriesDataset({
        "Revenue": [1000.0],
        "COGS": [600.0],
        "Net Income": [-10.0],
        "Total Assets": [1000.0],
        "Total Liabilities": [100.0],
        "Shareholders Equity": [900.0],
    })
    metrics = [a.metric for a in analyze_ratios(ds).alerts]
    assert "ROE" not in metrics
    assert "Net Margin" in metrics


# ─── Summary ──────────────────────────────────────────────────────────────────

def test_cagr_flat_revenue():
    assert RatioAnalyzer.compute_cagr([100.0, 100.0, 100.0]) == 0.0


def test_cagr_two_periods():
    assert RatioAnalyzer.compute_cagr([100.0, 121.0]) == pytest.approx(21.0)


def test_cagr_degenerate_cases():
    assert RatioAnalyzer.compute_cagr([100.0]) == 0.0
    assert RatioAnalyzer.compute_cagr([0.0, 100.0]) == 0.0
    assert RatioAnalyzer.compute_cagr([100.0, -5.0]) == 0.0


def test_health_summary(ratio_dataset):
    summary = analyze_ratios(ratio_dataset).summary
    assert summary.revenue_cagr == pytest.approx(10.0)
    assert summary.avg_roe == pytest.approx((100 / 12 + 121 / 12 + 12.5) / 3)
    assert summary.debt_level == DebtLevel.MEDIUM
    assert summary.health_score == 75
    assert summary.overall_health == OverallHealth.EXCELLENT


def test_distressed_health_summary(distressed_dataset):
    summary = analyze_ratios(distressed_dataset).summary
    assert summary.debt_level == DebtLevel.HIGH
    assert summary.revenue_cagr == 0.0
    assert summary.overall_health == OverallHealth.POOR


def test_single_period_summary_uses_available_values():
    ds = TimeSeriesDataset({
        "Revenue": [1000.0],
        "COGS": [500.0],
        "Net Income": [200.0],
        "Total Assets": [1000.0],
        "Total Liabilities": [300.0],
        "Shareholders Equity": [700.0],
    })
    summary = analyze_ratios(ds).summary
    assert summary.revenue_cagr == 0.0
    assert summary.avg_roa == pytest.approx(20.0)
    assert summary.debt_level == DebtLevel.LOW
    assert summary.health_score == 75


# ─── Quality classifiers ──────────────────────────────────────────────────────

def test_quality_indicators():
    ds = TimeSeriesDataset({
        "Revenue": [1000.0, 1200.0, 1250.0, 1220.0, 1000.0],
        "COGS": [500.0, 600.0, 900.0, 1000.0, 950.0],
        "Net Income": [200.0, 50.0, 60.0, 0.0, -10.0],
        "Total Assets": [1000.0] * 5,
        "Total Liabilities": [300.0] * 5,
        "Shareholders Equity": [700.0] * 5,
    })
    quality = analyze_ratios(ds).quality
    assert quality.earnings_quality == [
        EarningsQuality.GOOD,
        EarningsQuality.FAIR,
        EarningsQuality.FAIR,
        EarningsQuality.POOR,
        EarningsQuality.POOR,
    ]
    assert quality.growth_trend == [
        GrowthTrend.BASELINE,
        GrowthTrend.STRONG_GROWTH,
        GrowthTrend.MODERATE_GROWTH,
        GrowthTrend.STABLE,
        GrowthTrend.DECLINING,
    ]
    # ROE 28.6 / GM 50, ROE 7.1 / GM 50, ROE 8.6 / GM 28, ROE 0, ROE 0
    assert quality.financial_strength == [
        FinancialStrength.STRONG,
        FinancialStrength.FAIR,
        FinancialStrength.FAIR,
        FinancialStrength.WEAK,
        FinancialStrength.WEAK,
    ]


def test_zero_prior_revenue_growth_is_stable():
    result = analyze_ratios(_dataset(Revenue=[0.0, 1100.0]))
    assert result.quality.growth_trend[1] == GrowthTrend.STABLE


# ─── Forecast, serialisation, determinism ─────────────────────────────────────

def test_quick_forecast(ratio_dataset):
    result = analyze_ratios(ratio_dataset)
    forecast = generate_quick_forecast(result, 10.0, MarginAssumption.IMPROVE, capex_growth=5.0)
    base_margin = 150.0 / 1210.0 * 100
    assert len(forecast.revenue) == 12
    assert forecast.revenue[-1] == pytest.approx(1210.0 * 1.1)
    assert forecast.net_margin == pytest.approx(base_margin * 1.1)
    assert forecast.net_income[0] == pytest.approx(forecast.revenue[0] * forecast.net_margin / 100)
    assert forecast.to_dict()["forecast"]["assumptions"]["margin_assumption"] == "improve"


def test_quick_forecast_accepts_string_assumption(ratio_dataset):
    result = analyze_ratios(ratio_dataset)
    forecast = generate_quick_forecast(result, 0.0, "decline")
    assert forecast.margin_assumption == MarginAssumption.DECLINE
    with pytest.raises(InvalidInputError):
        generate_quick_forecast(result, 0.0, "sideways")


def test_latest_benchmark_metrics(ratio_dataset):
    metrics = analyze_ratios(ratio_dataset).latest_benchmark_metrics()
    assert set(metrics) == {"gross_margin", "net_margin", "roe", "roa", "debt_to_equity", "asset_turnover"}
    assert metrics["roe"] == pytest.approx(12.5)


def test_to_dict_renders_enums(distressed_dataset):
    data = analyze_ratios(distressed_dataset).to_dict()
    assert data["summary"]["debt_level"] == "High"
    assert data["alerts"][0]["severity"] == "danger"
    assert data["quality"]["growth_trend"][0] == "Baseline"


def test_analysis_is_idempotent(ratio_dataset):
    analyzer = RatioAnalyzer()
    assert analyzer.analyze(ratio_dataset).to_dict() == analyzer.analyze(ratio_dataset).to_dict()
