"""Monte Carlo social cost of greenhouse gas runs on the IWG models."""

from .adapters import SCCPayload, get_adapter
from .discounting import DiscountConfig, normalize_discounting
from .driver import SCCValues, resolve_gas, resolve_perturbation_years, run_scc_mcs, simulate_scc
from .exceptions import InvalidArgument, OutOfRange, SCCError

__all__ = [
    "DiscountConfig",
    "InvalidArgument",
    "OutOfRange",
    "SCCError",
    "SCCPayload",
    "SCCValues",
    "get_adapter",
    "normalize_discounting",
    "resolve_gas",
    "resolve_perturbation_years",
    "run_scc_mcs",
    "simulate_scc",
]
