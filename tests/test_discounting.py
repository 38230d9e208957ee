import logging

import numpy as np
import pytest

from montecarlo.discounting import (
    DiscountConfig,
    format_rate,
    normalize_discounting,
    present_value,
    ramsey_discount_factors,
)
from montecarlo.exceptions import InvalidArgument


def test_deprecated_rates_map_to_prtp_with_zero_eta(caplog):
    with caplog.at_level(logging.WARNING, logger="montecarlo.discounting"):
        config = normalize_discounting(discount_rates=[0.025, 0.03])
    assert config == DiscountConfig(prtp=(0.025, 0.03), eta=(0.0,))
    assert "deprecated" in caplog.text


def test_deprecated_and_current_forms_agree():
    legacy = normalize_discounting(discount_rates=[0.03])
    current = normalize_discounting(prtp=[0.03], eta=[0.0])
    assert legacy == current


def test_missing_discounting_uses_defaults(caplog):
    with caplog.at_level(logging.WARNING, logger="montecarlo.discounting"):
        config = normalize_discounting()
    assert config.prtp == (0.025, 0.03, 0.05)
    assert config.eta == (0.0,)
    assert config.eta_is_zero
    assert caplog.records


def test_missing_eta_defaults_with_warning(caplog):
    with caplog.at_level(logging.WARNING, logger="montecarlo.discounting"):
        config = normalize_discounting(prtp=[0.01, 0.02])
    assert config.shape == (2, 1)
    assert "eta" in caplog.text


def test_mixed_forms_are_rejected():
    with pytest.raises(InvalidArgument):
        normalize_discounting(discount_rates=[0.03], prtp=[0.03])


@pytest.mark.parametrize(
    "kwargs",
    [
        {"prtp": [], "eta": [0.0]},
        {"prtp": [0.03], "eta": [-1.0]},
        {"prtp": [-1.5], "eta": [0.0]},
        {"prtp": ["low"], "eta": [0.0]},
    ],
)
def test_invalid_values_raise(kwargs):
    with pytest.raises(InvalidArgument):
        normalize_discounting(**kwargs)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"prtp": [0.03, 0.03000001], "eta": [0.0]},
        {"prtp": [0.03], "eta": [1.5, 1.5]},
        {"discount_rates": [0.025, 0.025]},
    ],
)
def test_rates_sharing_a_file_label_rejected(kwargs):
    with pytest.raises(InvalidArgument):
        normalize_discounting(**kwargs)


def test_format_rate_labels():
    assert format_rate(0.025) == "0.025"
    assert format_rate(0.0) == "0"
    assert format_rate(1.5) == "1.5"


def test_invalid_argument_is_a_value_error():
    with pytest.raises(ValueError):
        normalize_discounting(prtp=[0.03], eta=[-0.5])


def test_cells_cover_full_grid():
    config = DiscountConfig(prtp=(0.01, 0.03), eta=(0.0, 1.5))
    cells = list(config.cells())
    assert cells == [(0, 0, 0.01, 0.0), (0, 1, 0.01, 1.5), (1, 0, 0.03, 0.0), (1, 1, 0.03, 1.5)]


def test_zero_eta_reduces_to_constant_discounting():
    years = np.arange(2020, 2031)
    growth = np.linspace(0.01, 0.03, len(years))
    factors = ramsey_discount_factors(years, 2022, growth, prtp=0.03, eta=0.0)
    expected = np.where(years >= 2022, 1.03 ** -(years - 2022.0), 0.0)
    np.testing.assert_allclose(factors, expected)


def test_ramsey_factors_use_consumption_growth():
    years = np.array([2020, 2021, 2022])
    growth = np.array([np.nan, 0.02, 0.02])
    factors = ramsey_discount_factors(years, 2020, growth, prtp=0.01, eta=1.5)
    rate = 0.01 + 1.5 * 0.02
    np.testing.assert_allclose(factors, [1.0, 1 / (1 + rate), 1 / (1 + rate) ** 2])


def test_present_value_truncates_at_horizon():
    years = np.arange(2020, 2026)
    damages = np.ones(len(years))
    growth = np.zeros(len(years))
    value = present_value(years, damages, growth, pulse_year=2021, horizon=2023, prtp=0.0, eta=0.0)
    assert value == pytest.approx(3.0)


def test_present_value_after_horizon_is_zero():
    years = np.arange(2020, 2026)
    value = present_value(
        years, np.ones(len(years)), np.zeros(len(years)), pulse_year=2025, horizon=2023, prtp=0.03, eta=0.0
    )
    assert value == 0.0
