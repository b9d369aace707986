"""
tests/conftest.py
=================
Shared pytest fixtures for the FinDash test suite.
"""

import pytest

from findash import (
    TimeSeriesDataset,
    DCFInputs,
    TargetMetrics,
    StressBaseline,
)


@pytest.fixture
def ratio_dataset():
    """Three healthy periods with steady growth and moderate leverage."""
    return TimeSeriesDataset(
        {
            "Revenue": [1000.0, 1100.0, 1210.0],
            "COGS": [600.0, 650.0, 700.0],
            "Net Income": [100.0, 121.0, 150.0],
            "Total Assets": [2000.0, 2100.0, 2200.0],
            "Total Liabilities": [800.0, 900.0, 1000.0],
            "Shareholders Equity": [1200.0, 1200.0, 1200.0],
        },
        periods=["FY2021", "FY2022", "FY2023"],
    )


@pytest.fixture
def distressed_dataset():
    """Two periods ending with thin margins, a loss and heavy leverage."""
    return TimeSeriesDataset({
        "Revenue": [1000.0, 1000.0],
        "COGS": [700.0, 900.0],
        "Net Income": [100.0, -50.0],
        "Total Assets": [1000.0, 1000.0],
        "Total Liabilities": [700.0, 700.0],
        "Shareholders Equity": [500.0, 500.0],
    })


@pytest.fixture
def cashflow_dataset():
    """Three periods of cash flow data with capex, dividends and debt."""
    return TimeSeriesDataset({
        "Cash Flow from Operations": [150.0, 180.0, 200.0],
        "Net Income": [100.0, 120.0, 160.0],
        "Revenue": [1000.0, 1100.0, 1200.0],
        "COGS": [600.0, 650.0, 700.0],
        "Capital Expenditures": [50.0, 60.0, 100.0],
        "Dividends Paid": [20.0, 30.0, 40.0],
        "Total Debt": [500.0, 450.0, 400.0],
    })


@pytest.fixture
def stress_baseline():
    return StressBaseline(revenue=1000.0, operating_cash_flow=150.0)


@pytest.fixture
def flat_dcf_inputs():
    """Zero growth, zero terminal growth, 10% discount over five years."""
    return DCFInputs(
        initial_cash_flow=100.0,
        projection_years=5,
        revenue_growth_rates=[0.0] * 5,
        terminal_growth_rate=0.0,
        discount_rate=10.0,
        net_debt=0.0,
        shares_outstanding=1.0,
    )


@pytest.fixture
def low_terminal_dcf_inputs():
    """Ten-year horizon where terminal value is well under 60% of EV."""
    return DCFInputs(
        initial_cash_flow=100.0,
        projection_years=10,
        revenue_growth_rates=[0.0],
        terminal_growth_rate=2.0,
        discount_rate=12.0,
        net_debt=0.0,
        shares_outstanding=1.0,
    )


@pytest.fixture
def target_metrics():
    return TargetMetrics(revenue=1000.0, ebitda=50.0, net_income=30.0, book_value=200.0)
