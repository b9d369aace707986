"""
tests/test_dcf_valuator.py
==========================
Unit tests for DCF projection, terminal value, equity bridge and the
sensitivity grid.
"""

import pytest

from findash import (
    DCFConfig,
    DCFInputs,
    DCFValuator,
    InvalidInputError,
    value_company_dcf,
)


class TestProjection:

    def test_flat_cash_flows(self, flat_dcf_inputs):
        result = DCFValuator().value(flat_dcf_inputs)
        assert result.projected_cash_flows == [100.0] * 5
        for i, pv in enumerate(result.present_values):
            assert pv == pytest.approx(100 / 1.1 ** (i + 1))

    def test_last_growth_rate_repeats(self):
        result = value_company_dcf(100.0, 3, [10.0], 2.0, 10.0)
        assert result.projected_cash_flows == [
            pytest.approx(110.0),
            pytest.approx(121.0),
            pytest.approx(133.1),
        ]
        assert [p.growth_rate for p in result.yearly_projections] == [10.0, 10.0, 10.0]

    def test_zero_growth_rate_is_honoured(self):
        result = value_company_dcf(100.0, 3, [5.0, 0.0], 2.0, 10.0)
        assert result.projected_cash_flows == [
            pytest.approx(105.0),
            pytest.approx(105.0),
            pytest.approx(105.0),
        ]

    def test_negative_growth(self):
        result = value_company_dcf(100.0, 2, [-50.0], 0.0, 10.0)
        assert result.projected_cash_flows == [pytest.approx(50.0), pytest.approx(25.0)]

    def test_yearly_projection_rows(self, flat_dcf_inputs):
        rows = DCFValuator().value(flat_dcf_inputs).yearly_projections
        assert [r.year for r in rows] == [1, 2, 3, 4, 5]
        assert rows[0].discount_factor == pytest.approx(1 / 1.1)
        assert rows[0].present_value == pytest.approx(rows[0].cash_flow * rows[0].discount_factor)


class TestValuation:

    def test_flat_enterprise_value(self, flat_dcf_inputs):
        result = DCFValuator().value(flat_dcf_inputs)
        assert result.terminal_value == pytest.approx(1000.0)
        assert result.enterprise_value == pytest.approx(1000.0)
        assert result.equity_value == pytest.approx(1000.0)
        assert result.value_per_share == pytest.approx(1000.0)
        assert result.summary.implied_multiple == pytest.approx(10.0)

    def test_gordon_growth_terminal_value(self):
        assert DCFValuator.terminal_value(100.0, 2.0, 12.0) == pytest.approx(1020.0)

    def test_equity_bridge(self):
        result = value_company_dcf(100.0, 5, [0.0], 0.0, 10.0, net_debt=200.0, shares_outstanding=4.0)
        assert result.equity_value == pytest.approx(800.0)
        assert result.value_per_share == pytest.approx(200.0)

    def test_summary(self, low_terminal_dcf_inputs):
        result = DCFValuator().value(low_terminal_dcf_inputs)
        summary = result.summary
        assert summary.total_pv == pytest.approx(sum(result.present_values))
        assert summary.terminal_value_percent == pytest.approx(
            result.terminal_value_pv / result.enterprise_value * 100
        )
        assert summary.terminal_value_percent < 60

    def test_zero_initial_cash_flow_guards_summary(self):
        result = value_company_dcf(0.0, 3, [5.0], 2.0, 10.0)
        assert result.enterprise_value == 0.0
        assert result.summary.terminal_value_percent == 0.0
        assert result.summary.implied_multiple == 0.0


class TestValidation:

    @pytest.mark.parametrize("terminal, discount", [(3.0, 2.0), (5.0, 5.0)])
    def test_discount_must_exceed_terminal_growth(self, terminal, discount):
        with pytest.raises(InvalidInputError, match="must exceed"):
            value_company_dcf(100.0, 5, [5.0], terminal, discount)

    def test_shares_must_be_positive(self):
        with pytest.raises(InvalidInputError):
            value_company_dcf(100.0, 5, [5.0], 2.0, 10.0, shares_outstanding=0.0)

    def test_projection_years_must_be_positive(self):
        with pytest.raises(InvalidInputError):
            value_company_dcf(100.0, 0, [5.0], 2.0, 10.0)

    def test_growth_rates_required(self):
        inputs = DCFInputs(100.0, 5, [], 2.0, 10.0, 0.0, 1.0)
        with pytest.raises(InvalidInputError):
            DCFValuator().value(inputs)


class TestSensitivity:

    def test_grid_axes(self, low_terminal_dcf_inputs):
        grid = DCFValuator().value(low_terminal_dcf_inputs).sensitivity
        assert grid.growth_rates == [1.0, 1.5, 2.0, 2.5, 3.0]
        assert grid.discount_rates == [11.0, 11.5, 12.0, 12.5, 13.0]
        assert (grid.base_growth_idx, grid.base_discount_idx) == (2, 2)
        assert len(grid.values) == len(DCFConfig.GROWTH_SENSITIVITY_RANGE)
        assert all(len(row) == 5 for row in grid.values)

    def test_flat_base_cell_matches_base_case(self, flat_dcf_inputs):
        result = DCFValuator().value(flat_dcf_inputs)
        grid = result.sensitivity
        base = grid.values[grid.base_growth_idx][grid.base_discount_idx]
        assert base == pytest.approx(result.value_per_share)

    def test_growing_base_cell_uses_level_annuity(self):
        result = value_company_dcf(100.0, 5, [10.0], 2.0, 10.0)
        grid = result.sensitivity
        base = grid.values[grid.base_growth_idx][grid.base_discount_idx]
        annuity = 100.0 / 0.1 * (1 - 1 / 1.1 ** 5)
        assert base == pytest.approx(annuity + result.terminal_value_pv, rel=1e-12)
        # Projected flows grow 10% a year at a 10% discount rate, so each PV is 100
        assert sum(result.present_values) == pytest.approx(500.0)
        assert result.value_per_share - base == pytest.approx(500.0 - annuity)
        assert base != pytest.approx(result.value_per_share)

    def test_values_fall_as_discount_rises(self, low_terminal_dcf_inputs):
        row = DCFValuator().value(low_terminal_dcf_inputs).sensitivity.values[2]
        assert row == sorted(row, reverse=True)

    def test_cells_with_discount_at_or_below_growth_are_zero(self):
        grid = value_company_dcf(100.0, 5, [5.0], 9.0, 10.0).sensitivity
        # growth 10.0 vs discount 9.0, and growth 9.5 vs discount 9.5
        assert grid.values[4][0] == 0.0
        assert grid.values[3][1] == 0.0
        assert grid.values[2][2] > 0

    def test_result_serialises(self, flat_dcf_inputs):
        data = DCFValuator().value(flat_dcf_inputs).to_dict()
        assert data["inputs"]["discount_rate"] == 10.0
        assert len(data["yearly_projections"]) == 5
        assert len(data["sensitivity"]["values"]) == 5
