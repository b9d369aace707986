"""
tests/test_portfolio_analyzer.py
================================
Unit tests for multi-company risk, weighted returns, peer percentiles,
trends and portfolio insights.
"""

import math

import numpy as np
import pytest

from findash import (
    NET_INCOME,
    REVENUE,
    SHAREHOLDERS_EQUITY,
    TOTAL_ASSETS,
    InvalidInputError,
    IssueSeverity,
    PortfolioAnalyzer,
    PortfolioCompany,
    PortfolioWeighting,
    TimeSeriesDataset,
    TrendDirection,
    analyze_portfolio,
    create_sample_portfolio,
)


def _company(name, revenue, net_income, assets, equity, industry="Software", market_cap=None):
    dataset = TimeSeriesDataset({
        REVENUE: revenue,
        NET_INCOME: net_income,
        TOTAL_ASSETS: assets,
        SHAREHOLDERS_EQUITY: equity,
    })
    return PortfolioCompany(name=name, industry=industry, dataset=dataset, market_cap=market_cap)


@pytest.fixture
def software_trio():
    return [
        _company("Alpha", [100.0, 110.0], [10.0, 22.0], [200.0, 200.0], [100.0, 100.0]),
        _company("Beta", [100.0, 105.0], [10.0, 10.5], [200.0, 210.0], [100.0, 105.0]),
        _company("Gamma", [100.0, 90.0], [10.0, 2.7], [200.0, 180.0], [100.0, 90.0]),
    ]


class TestPortfolioMetrics:

    def test_sample_company_metrics(self):
        metrics = PortfolioAnalyzer(create_sample_portfolio()).analyze()
        tech, manufacturing = metrics.companies
        assert tech.roe == pytest.approx(3.2 / 31 * 100)
        assert tech.roa == pytest.approx(3.2 / 45 * 100)
        assert tech.revenue_growth == pytest.approx((2.2 ** 0.25 - 1) * 100)
        assert tech.net_margin == pytest.approx(3.2 / 22 * 100)
        assert manufacturing.asset_turnover == pytest.approx(25.5 / 52)
        assert tech.weight == manufacturing.weight == 0.5

    def test_sample_weighted_returns(self):
        metrics = PortfolioAnalyzer(create_sample_portfolio()).analyze()
        assert metrics.weighted_average_roe == pytest.approx((3.2 / 31 + 2.2 / 33) * 100 / 2)
        assert metrics.weighted_average_roa == pytest.approx((3.2 / 45 + 2.2 / 52) * 100 / 2)
        assert metrics.total_revenue == 47_500_000
        assert metrics.total_net_income == 5_400_000

    def test_sample_risk_metrics(self):
        metrics = PortfolioAnalyzer(create_sample_portfolio()).analyze()
        tech, manufacturing = "Tech Innovations Inc.", "Manufacturing Corp."
        rho = metrics.correlation_matrix[tech][manufacturing]
        assert rho > 0.99
        assert metrics.correlation_matrix[manufacturing][tech] == pytest.approx(rho)
        assert metrics.correlation_matrix[tech][tech] == 1.0

        tech_vol = np.std([0.2, 0.25, 0.2, 22 / 18 - 1])
        manufacturing_vol = np.std([21 / 20 - 1, 22.5 / 21 - 1, 24 / 22.5 - 1, 25.5 / 24 - 1])
        assert metrics.volatilities[tech] == pytest.approx(tech_vol)
        assert metrics.volatilities[manufacturing] == pytest.approx(manufacturing_vol)

        expected_vol = math.sqrt(0.25 * (
            tech_vol ** 2 + manufacturing_vol ** 2 + 2 * tech_vol * manufacturing_vol * rho
        ))
        assert metrics.portfolio_volatility == pytest.approx(expected_vol)
        assert metrics.diversification_ratio == pytest.approx(
            (tech_vol + manufacturing_vol) / 2 / expected_vol
        )
        assert metrics.concentration_risk == 0.5

    def test_sample_top_performers(self):
        metrics = PortfolioAnalyzer(create_sample_portfolio()).analyze()
        assert len(metrics.top_performers) == 1
        top = metrics.top_performers[0]
        assert (top.company, top.metric, top.rank) == ("Tech Innovations Inc.", "revenue_growth", 1)
        assert metrics.underperformers == []

    def test_top_and_underperformers(self, software_trio):
        metrics = PortfolioAnalyzer(software_trio).analyze()
        assert [(p.company, p.metric) for p in metrics.top_performers] == [("Alpha", "roe")]
        assert metrics.top_performers[0].value == pytest.approx(22.0)
        assert [(u.company, u.issue, u.severity) for u in metrics.underperformers] == [
            ("Gamma", "Low Return on Equity", IssueSeverity.HIGH),
            ("Gamma", "Poor Asset Utilization", IssueSeverity.MEDIUM),
        ]

    def test_top_performers_ranked_and_capped(self):
        companies = [
            _company(f"Co{i}", [100.0, 130.0 + i], [10.0, 30.0], [200.0, 200.0], [100.0, 100.0])
            for i in range(4)
        ]
        top = PortfolioAnalyzer(companies).analyze().top_performers
        # Four companies each qualify on ROE (30%) and growth (30% to 33%)
        assert len(top) == 5
        assert [p.rank for p in top] == [1, 2, 3, 4, 5]
        assert [p.value for p in top] == sorted((p.value for p in top), reverse=True)
        assert top[0].company == "Co3" and top[0].metric == "revenue_growth"

    def test_single_return_series_have_no_volatility(self, software_trio):
        metrics = PortfolioAnalyzer(software_trio).analyze()
        assert all(v == 0.0 for v in metrics.volatilities.values())
        assert metrics.portfolio_volatility == 0.0
        assert metrics.diversification_ratio == 0.0
        assert metrics.concentration_risk == pytest.approx(1 / 3)
        # Risk is concentration plus the full diversification shortfall
        assert metrics.risk_adjusted_return == pytest.approx((35 / 3) / (1 / 3 + 1))

    def test_two_point_correlations(self, software_trio):
        matrix = PortfolioAnalyzer(software_trio).analyze().correlation_matrix
        assert matrix["Alpha"]["Beta"] == pytest.approx(1.0)
        assert matrix["Alpha"]["Gamma"] == pytest.approx(-1.0)

    def test_industry_breakdown(self, software_trio):
        breakdown = PortfolioAnalyzer(software_trio).analyze().industry_breakdown
        assert list(breakdown) == ["Software"]
        software = breakdown["Software"]
        assert software.count == 3
        assert software.weight == pytest.approx(1.0)
        assert software.average_metrics["roe"] == pytest.approx(35 / 3)

    def test_correlation_frame(self, software_trio):
        frame = PortfolioAnalyzer(software_trio).analyze().correlation_frame()
        assert list(frame.index) == ["Alpha", "Beta", "Gamma"]
        assert frame.loc["Beta", "Gamma"] == pytest.approx(-1.0)


class TestWeighting:

    def test_market_cap_weights(self):
        companies = create_sample_portfolio()
        metrics = PortfolioAnalyzer(companies, PortfolioWeighting.MARKET_CAP).analyze()
        tech, manufacturing = metrics.companies
        assert tech.weight == pytest.approx(2 / 3)
        assert manufacturing.weight == pytest.approx(1 / 3)
        assert metrics.concentration_risk == pytest.approx(5 / 9)
        assert metrics.weighted_average_roe == pytest.approx(2 / 3 * tech.roe + 1 / 3 * manufacturing.roe)

    def test_weighting_accepts_string(self):
        analyzer = PortfolioAnalyzer(create_sample_portfolio(), "market_cap")
        assert analyzer.weighting == PortfolioWeighting.MARKET_CAP

    def test_missing_market_cap_falls_back_to_equal(self, software_trio):
        software_trio[0].market_cap = 1e9
        analyzer = PortfolioAnalyzer(software_trio, PortfolioWeighting.MARKET_CAP)
        assert list(analyzer.weights.values()) == [pytest.approx(1 / 3)] * 3

    def test_unknown_weighting_rejected(self, software_trio):
        with pytest.raises(InvalidInputError):
            PortfolioAnalyzer(software_trio, "price")


class TestBenchmarking:

    def test_leader_is_strong_everywhere(self, software_trio):
        alpha = PortfolioAnalyzer(software_trio).benchmark_companies()[0]
        assert alpha.company == "Alpha"
        assert alpha.overall_rank == 1
        assert alpha.total_companies == 3
        assert alpha.strength_areas == ["roe", "roa", "revenue_growth", "net_margin", "asset_turnover"]
        assert alpha.improvement_areas == []

        roe = alpha.metrics["roe"]
        assert roe.percentile == 100.0
        assert roe.industry_average == pytest.approx(6.5)
        assert roe.best_in_class == pytest.approx(10.0)
        assert roe.gap == pytest.approx(-12.0)
        assert roe.trend == TrendDirection.UPWARD
        assert alpha.metrics["revenue_growth"].trend == TrendDirection.UPWARD

    def test_middle_company(self, software_trio):
        beta = PortfolioAnalyzer(software_trio).benchmark_companies()[1]
        assert beta.overall_rank == 2
        assert all(m.percentile == 50.0 for m in beta.metrics.values())
        assert beta.strength_areas == [] and beta.improvement_areas == []
        assert beta.metrics["roe"].trend == TrendDirection.SIDEWAYS
        # Revenue up exactly 5% stays inside the band
        assert beta.metrics["revenue_growth"].trend == TrendDirection.SIDEWAYS

    def test_laggard_improvement_areas(self, software_trio):
        gamma = PortfolioAnalyzer(software_trio).benchmark_companies()[2]
        assert gamma.overall_rank == 3
        assert gamma.improvement_areas == ["roe", "roa", "revenue_growth", "net_margin"]
        assert gamma.metrics["asset_turnover"].percentile == 50.0
        assert gamma.metrics["roe"].trend == TrendDirection.DOWNWARD

    def test_no_peers_means_no_metrics(self):
        benchmarks = PortfolioAnalyzer(create_sample_portfolio()).benchmark_companies()
        assert [b.metrics for b in benchmarks] == [{}, {}]
        assert [b.overall_rank for b in benchmarks] == [1, 2]

    @pytest.mark.parametrize(
        "value, peers, percentile",
        [(12.0, [10.0, 5.0], 100.0), (7.0, [10.0, 5.0], 50.0), (5.0, [5.0, 10.0], 50.0), (3.0, [10.0, 5.0], 0.0)],
    )
    def test_percentile_rank(self, value, peers, percentile):
        assert PortfolioAnalyzer.percentile_rank(value, peers) == percentile

    @pytest.mark.parametrize(
        "values, direction",
        [
            ([100.0, 106.0], TrendDirection.UPWARD),
            ([100.0, 94.0], TrendDirection.DOWNWARD),
            ([100.0, 104.0], TrendDirection.SIDEWAYS),
            ([-10.0, -5.0], TrendDirection.UPWARD),
            ([0.0, 5.0], TrendDirection.SIDEWAYS),
            ([5.0], TrendDirection.SIDEWAYS),
        ],
    )
    def test_classify_trend(self, software_trio, values, direction):
        assert PortfolioAnalyzer(software_trio).classify_trend(values) == direction


class TestTrends:

    def test_company_trend_and_forecast(self):
        trend = PortfolioAnalyzer(create_sample_portfolio()).analyze_trends([REVENUE])[0]
        tech = trend.companies["Tech Innovations Inc."]
        values = [10e6, 12e6, 15e6, 18e6, 22e6]
        assert tech.values == values
        assert tech.trend == TrendDirection.UPWARD
        assert tech.volatility == pytest.approx(np.std(values))
        # Least-squares slope 3M and intercept 9.4M
        assert tech.forecast == pytest.approx([24.4e6, 27.4e6])
        assert tech.confidence == pytest.approx(1 - np.std(values) / np.mean(values))

    def test_short_series_default_confidence(self, software_trio):
        trend = PortfolioAnalyzer(software_trio).analyze_trends([REVENUE])[0]
        alpha = trend.companies["Alpha"]
        assert alpha.confidence == 0.5
        assert alpha.forecast == pytest.approx([120.0, 130.0])

    def test_confidence_is_clamped(self):
        assert PortfolioAnalyzer.forecast_confidence([1.0, 1.0, 1.0]) == 0.9
        assert PortfolioAnalyzer.forecast_confidence([1.0, 100.0, 1.0]) == 0.3
        assert PortfolioAnalyzer.forecast_confidence([-1.0, -2.0, -3.0]) == 0.3

    def test_industry_trend(self, software_trio):
        industry = PortfolioAnalyzer(software_trio).analyze_trends([REVENUE])[0].industry_trend
        assert industry.average == pytest.approx([100.0, 305 / 3])
        assert industry.median == [100.0, 105.0]
        assert industry.top_quartile == [100.0, 110.0]
        assert industry.bottom_quartile == [100.0, 90.0]

    def test_ragged_history(self, software_trio):
        software_trio.append(_company("Delta", [50.0], [5.0], [100.0], [50.0]))
        trend = PortfolioAnalyzer(software_trio).analyze_trends([REVENUE])[0]
        assert "Delta" not in trend.companies
        assert trend.industry_trend.average[0] == pytest.approx(87.5)
        assert trend.industry_trend.average[1] == pytest.approx(305 / 3)

    def test_absent_field(self, software_trio):
        trend = PortfolioAnalyzer(software_trio).analyze_trends(["Inventory"])[0]
        assert trend.companies == {}
        assert trend.industry_trend.average == []


class TestInsights:

    def test_sample_insights(self):
        insights = PortfolioAnalyzer(create_sample_portfolio()).generate_insights()
        assert insights == [
            "Excellent risk-adjusted returns - portfolio generating value above risk taken",
            "Consider expanding into additional industries for better risk distribution",
        ]

    def test_concentrated_uncorrelated_insights(self, software_trio):
        insights = PortfolioAnalyzer(software_trio).generate_insights()
        assert insights == [
            "Limited diversification benefits - companies may be highly correlated",
            "Excellent risk-adjusted returns - portfolio generating value above risk taken",
            "Consider expanding into additional industries for better risk distribution",
        ]

    def test_market_cap_concentration_insight(self):
        analyzer = PortfolioAnalyzer(create_sample_portfolio(), PortfolioWeighting.MARKET_CAP)
        assert analyzer.generate_insights()[0].startswith("Portfolio shows high concentration risk")


class TestValidation:

    def test_empty_portfolio(self):
        with pytest.raises(InvalidInputError):
            PortfolioAnalyzer([])

    def test_duplicate_names(self, software_trio):
        software_trio.append(software_trio[0])
        with pytest.raises(InvalidInputError, match="Alpha"):
            PortfolioAnalyzer(software_trio)

    def test_missing_required_field(self):
        dataset = TimeSeriesDataset({REVENUE: [1.0], NET_INCOME: [1.0], TOTAL_ASSETS: [1.0]})
        company = PortfolioCompany(name="Thin Co", industry="Software", dataset=dataset)
        with pytest.raises(InvalidInputError, match="Shareholders Equity"):
            PortfolioAnalyzer([company])

    def test_correlation_guards(self):
        assert PortfolioAnalyzer.correlation(np.array([1.0, 2.0]), np.array([1.0, 2.0, 3.0])) == 0.0
        assert PortfolioAnalyzer.correlation(np.array([5.0, 5.0]), np.array([1.0, 2.0])) == 0.0


def test_analyze_portfolio_report():
    report = analyze_portfolio(create_sample_portfolio())
    assert [t.metric for t in report.trends] == [REVENUE, NET_INCOME]
    assert len(report.benchmarks) == 2
    assert len(report.insights) == 2

    data = report.to_dict()
    assert data["metrics"]["top_performers"][0]["metric"] == "revenue_growth"
    assert data["metrics"]["industry_breakdown"]["Technology"]["count"] == 1
    assert data["benchmarks"][0]["company"] == "Tech Innovations Inc."
    assert data["trends"][0]["companies"]["Manufacturing Corp."]["trend"] == "upward"
