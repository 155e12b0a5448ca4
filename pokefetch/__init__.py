"""Parallel fetch-with-retry for PokeAPI resources."""

from .config import FetchConfig
from .outcome import AggregateReport, Failed, FailureReason, FetchOutcome, Success
from .runner import run_batch, write_report

__all__ = [
    "FetchConfig",
    "AggregateReport",
    "Failed",
    "FailureReason",
    "FetchOutcome",
    "Success",
    "run_batch",
    "write_report",
]
