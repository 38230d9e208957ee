"""Errors raised while validating a Monte Carlo SCC run."""

from __future__ import annotations


class SCCError(Exception):
    """Base class for SCC driver errors."""


class InvalidArgument(SCCError, ValueError):
    """An argument has a value the driver cannot use, e.g. an unknown gas."""


class OutOfRange(SCCError, ValueError):
    """Requested perturbation years fall outside the model's time index."""
