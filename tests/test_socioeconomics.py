import numpy as np
import pytest

from iwg_models.constants import SCENARIOS
from iwg_models.socioeconomics import SocioeconomicScenario


@pytest.mark.parametrize("scenario", SCENARIOS)
def test_projection_grows_gdp(scenario):
    frame = SocioeconomicScenario.from_table(scenario).project(np.arange(2005, 2101))

    assert {"year", "population_million", "gdp_trillion_usd", "co2_gt", "us_gdp_share"}.issubset(
        frame.columns
    )
    assert frame["year"].iloc[0] == 2005
    assert frame["year"].iloc[-1] == 2100
    assert np.all(frame["population_million"].to_numpy() > 0)
    assert frame.iloc[-1]["gdp_trillion_usd"] > frame.iloc[0]["gdp_trillion_usd"]
    np.testing.assert_allclose(
        frame["gdp_per_capita_usd"].to_numpy(),
        frame["gdp_trillion_usd"].to_numpy() * 1e12 / (frame["population_million"].to_numpy() * 1e6),
    )


def test_base_year_matches_table_levels():
    scenario = SocioeconomicScenario.from_table("USG3")
    frame = scenario.project(np.array([2005]))
    assert frame["population_million"].iloc[0] == pytest.approx(scenario.population_million)
    assert frame["gdp_trillion_usd"].iloc[0] == pytest.approx(scenario.gdp_trillion_usd)


def test_backcast_covers_years_before_base_year():
    frame = SocioeconomicScenario.from_table("USG1").project(np.arange(1950, 2011))
    assert frame["year"].iloc[0] == 1950
    population = frame["population_million"].to_numpy()
    assert np.all(np.diff(population) > 0)


def test_unknown_scenario_rejected():
    with pytest.raises(ValueError):
        SocioeconomicScenario.from_table("SSP9")


def test_label_uses_scenario_name():
    assert SocioeconomicScenario.from_table("usg4").label == "MiniCAM Base"
