import numpy as np
import pytest

from iwg_models import (
    Gas,
    ModelChoice,
    add_marginal_emissions,
    build_model,
    set_pulse_year,
)
from iwg_models.constants import PAGE_YEARS


def test_base_run_produces_annual_series():
    model = build_model(ModelChoice.DICE, "USG2")
    results = model.run()

    assert results.years[0] == 2005
    assert results.years[-1] == 2405
    assert results.temperature_c.shape == results.years.shape
    assert np.all(results.damages_usd >= 0.0)
    assert results.domestic_damages_usd is None
    assert np.all(np.isfinite(results.consumption_growth[1:]))


def test_unknown_parameter_rejected():
    model = build_model("FUND")
    with pytest.raises(ValueError):
        model.set_param("not_a_parameter", 1.0)


def test_marginal_emissions_cannot_be_added_twice():
    model = add_marginal_emissions(build_model(ModelChoice.DICE), Gas.CO2)
    assert model.marginal.pulse_year is None
    with pytest.raises(RuntimeError):
        add_marginal_emissions(model, Gas.CH4)


def test_pulse_year_requires_marginal_component():
    with pytest.raises(RuntimeError):
        set_pulse_year(build_model(ModelChoice.PAGE), 2020)


def test_pulse_year_must_be_native():
    model = add_marginal_emissions(build_model(ModelChoice.PAGE), Gas.CO2)
    with pytest.raises(ValueError):
        set_pulse_year(model, 2015)
    set_pulse_year(model, 2020)
    assert model.marginal.pulse_year == 2020


@pytest.mark.parametrize("gas", list(Gas))
def test_pulse_raises_damages_only_after_pulse_year(gas):
    base = build_model(ModelChoice.DICE, "USG1")
    marginal = add_marginal_emissions(build_model(ModelChoice.DICE, "USG1"), gas)
    set_pulse_year(marginal, 2025)

    base_results = base.run()
    marginal_results = marginal.run()
    delta = marginal_results.damages_usd - base_results.damages_usd
    years = base_results.years

    np.testing.assert_array_equal(delta[years < 2025], 0.0)
    assert delta[years > 2030].sum() > 0.0


def test_fund_reports_domestic_damages():
    model = build_model(ModelChoice.FUND, "USG3")
    results = model.run()
    assert results.domestic_damages_usd is not None
    assert results.domestic_damages_usd.shape == results.damages_usd.shape


def test_page_discontinuity_triggers_with_certain_draw():
    model = build_model(ModelChoice.PAGE)
    model.set_param("discontinuity_threshold_c", 0.5)
    model.set_param("discontinuity_draw", 0.0)
    results = model.run()

    assert results.discontinuity_index is not None
    assert 0 <= results.discontinuity_index < len(PAGE_YEARS)


def test_page_discontinuity_absent_when_threshold_out_of_reach():
    model = build_model(ModelChoice.PAGE)
    model.set_param("discontinuity_threshold_c", 50.0)
    assert model.run().discontinuity_index is None


def test_set_scenario_changes_socioeconomics():
    model = build_model(ModelChoice.DICE, "USG1")
    first = model.run().gdp_trillion_usd.copy()
    model.set_scenario("usg5")
    assert model.scenario == "USG5"
    assert not np.allclose(first, model.run().gdp_trillion_usd)
