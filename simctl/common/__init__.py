"""Shared helpers used by the generate and apply commands."""

from .args import parse_map_args, split_csv
from .errors import (
    AggregateError,
    FixtureError,
    KubectlError,
    NotFoundError,
    QuantityError,
    ReconcileError,
    SimctlError,
    WriteError,
)

__all__ = [
    "AggregateError",
    "FixtureError",
    "KubectlError",
    "NotFoundError",
    "QuantityError",
    "ReconcileError",
    "SimctlError",
    "WriteError",
    "parse_map_args",
    "split_csv",
]
