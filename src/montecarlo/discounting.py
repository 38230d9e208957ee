"""Discount configuration and Ramsey discounting of marginal damages."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

import numpy as np

from iwg_models.constants import DEFAULT_DISCOUNT_RATES, DEFAULT_ETA

from .exceptions import InvalidArgument

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DiscountConfig:
    """Cross product of pure rates of time preference and consumption elasticities."""

    prtp: tuple[float, ...]
    eta: tuple[float, ...]

    @property
    def shape(self) -> tuple[int, int]:
        return len(self.prtp), len(self.eta)

    @property
    def eta_is_zero(self) -> bool:
        return self.eta == (0.0,)

    def cells(self) -> Iterable[tuple[int, int, float, float]]:
        for k, prtp in enumerate(self.prtp):
            for m, eta in enumerate(self.eta):
                yield k, m, prtp, eta


def format_rate(value: float) -> str:
    """Label of a rate in file names and table columns."""

    return f"{float(value):g}"


def _as_floats(values: Iterable[float], label: str) -> tuple[float, ...]:
    if isinstance(values, (int, float)):
        values = [values]
    try:
        result = tuple(float(v) for v in values)
    except (TypeError, ValueError) as exc:
        raise InvalidArgument(f"{label} must be a list of numbers, got {values!r}.") from exc
    if not result:
        raise InvalidArgument(f"{label} must contain at least one value.")
    return result


def normalize_discounting(
    *,
    discount_rates: Iterable[float] | None = None,
    prtp: Iterable[float] | None = None,
    eta: Iterable[float] | None = None,
) -> DiscountConfig:
    """Map the accepted discounting arguments onto one :class:`DiscountConfig`.

    Flat ``discount_rates`` are deprecated and become ``prtp`` with ``eta=[0]``;
    Ramsey discounting with a zero elasticity reduces to the flat rate, so both
    forms yield identical SCC values.
    """

    if discount_rates is not None:
        if prtp is not None or eta is not None:
            raise InvalidArgument("Pass either discount_rates or prtp/eta, not both.")
        LOGGER.warning(
            "discount_rates is deprecated; use prtp and eta. Mapping rates onto prtp with eta=[0]."
        )
        return _validated(_as_floats(discount_rates, "discount_rates"), DEFAULT_ETA)

    if prtp is None and eta is None:
        LOGGER.warning(
            "No discounting specified; using prtp=%s and eta=%s.",
            list(DEFAULT_DISCOUNT_RATES),
            list(DEFAULT_ETA),
        )
        return _validated(DEFAULT_DISCOUNT_RATES, DEFAULT_ETA)
    if prtp is None:
        LOGGER.warning("No prtp specified; using %s.", list(DEFAULT_DISCOUNT_RATES))
        prtp = DEFAULT_DISCOUNT_RATES
    if eta is None:
        LOGGER.warning("No eta specified; using %s.", list(DEFAULT_ETA))
        eta = DEFAULT_ETA
    return _validated(_as_floats(prtp, "prtp"), _as_floats(eta, "eta"))


def _validated(prtp: tuple[float, ...], eta: tuple[float, ...]) -> DiscountConfig:
    if any(rate <= -1.0 for rate in prtp):
        raise InvalidArgument("prtp values must be greater than -100%.")
    if any(value < 0 for value in eta):
        raise InvalidArgument("eta values must be non-negative.")
    for label, values in (("prtp", prtp), ("eta", eta)):
        names = [format_rate(value) for value in values]
        if len(set(names)) != len(names):
            raise InvalidArgument(
                f"{label} values {list(values)} are not distinct at file-name precision ({names})."
            )
    return DiscountConfig(prtp=tuple(prtp), eta=tuple(eta))


def ramsey_discount_factors(
    years: np.ndarray,
    base_year: int,
    growth: np.ndarray,
    *,
    prtp: float,
    eta: float,
) -> np.ndarray:
    """Discount factors relative to ``base_year`` with rate ``prtp + eta * g``.

    ``growth`` is aligned with ``years``; years before ``base_year`` get zero.
    """

    years = np.asarray(years, dtype=int)
    growth = np.nan_to_num(np.asarray(growth, dtype=float), nan=0.0)
    idx_candidates = np.where(years == int(base_year))[0]
    if len(idx_candidates) == 0:
        raise ValueError(f"base_year {base_year} not present in years array")
    base_idx = int(idx_candidates[0])

    factors = np.zeros(len(years), dtype=float)
    rates = prtp + eta * growth[base_idx + 1 :]
    factors[base_idx] = 1.0
    factors[base_idx + 1 :] = 1.0 / np.cumprod(1.0 + rates)
    return factors


def present_value(
    years: np.ndarray,
    marginal_damages: np.ndarray,
    growth: np.ndarray,
    *,
    pulse_year: int,
    horizon: int,
    prtp: float,
    eta: float,
) -> float:
    """Discounted sum of marginal damages from ``pulse_year`` through ``horizon``.

    Pulses after the horizon have no counted damages and return zero.
    """

    if int(pulse_year) > int(horizon):
        return 0.0
    years = np.asarray(years, dtype=int)
    window = years <= int(horizon)
    factors = ramsey_discount_factors(years[window], pulse_year, growth[window], prtp=prtp, eta=eta)
    return float(np.dot(np.asarray(marginal_damages, dtype=float)[window], factors))
