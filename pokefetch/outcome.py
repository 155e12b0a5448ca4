"""
Outcome types produced by fetch workers and the aggregate report built
from them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union


class FailureReason(str, Enum):
    """Why an item ended without a saved payload."""

    INVALID_IDENTIFIER = "invalid_identifier"
    NOT_FOUND = "not_found"
    NETWORK_UNAVAILABLE = "network_unavailable"
    RETRIES_EXHAUSTED = "retries_exhausted"
    DEADLINE_EXCEEDED = "deadline_exceeded"
    WORKER_ERROR = "worker_error"


@dataclass(frozen=True)
class Success:
    item: str
    path: Path
    attempts: int
    size: int = 0


@dataclass(frozen=True)
class Failed:
    item: str
    reason: FailureReason
    attempts: int
    detail: Optional[str] = None


FetchOutcome = Union[Success, Failed]


def outcome_to_dict(outcome: FetchOutcome) -> Dict[str, Any]:
    """Flatten an outcome for the JSON report."""
    if isinstance(outcome, Success):
        return {
            "item": outcome.item,
            "status": "success",
            "attempts": outcome.attempts,
            "path": str(outcome.path),
            "size": outcome.size,
        }
    return {
        "item": outcome.item,
        "status": "failed",
        "attempts": outcome.attempts,
        "reason": outcome.reason.value,
        "detail": outcome.detail,
    }


def success_rate(succeeded: int, total: int) -> float:
    """Percentage of successful items, rounded to one decimal."""
    if total == 0:
        return 0.0
    return round(succeeded / total * 100, 1)


@dataclass(frozen=True)
class AggregateReport:
    """Summary of a whole run, built once every worker has finished."""

    outcomes: List[FetchOutcome] = field(default_factory=list)
    elapsed: float = 0.0

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if isinstance(o, Success))

    @property
    def failed(self) -> int:
        return self.total - self.succeeded

    @property
    def success_rate(self) -> float:
        return success_rate(self.succeeded, self.total)

    @property
    def exit_code(self) -> int:
        return 0 if self.failed == 0 else 1

    def failures(self) -> List[Failed]:
        return [o for o in self.outcomes if isinstance(o, Failed)]

    def summary(self) -> str:
        lines = [
            f"Fetched {self.succeeded}/{self.total} items "
            f"({self.success_rate:.1f}% success) in {self.elapsed:.2f}s",
        ]
        for failure in self.failures():
            lines.append(f"  FAILED {failure.item}: {failure.reason.value}")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "success_rate": self.success_rate,
            "elapsed": round(self.elapsed, 3),
            "exit_code": self.exit_code,
            "outcomes": [outcome_to_dict(o) for o in self.outcomes],
        }
