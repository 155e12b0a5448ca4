"""
Result collector: joins every worker and builds the aggregate report.
"""

from __future__ import annotations

import logging
import shutil
import time
from concurrent import futures
from typing import Callable, Dict, Optional, Sequence

from pokefetch.config import FetchConfig
from pokefetch.dispatcher import WorkHandle
from pokefetch.outcome import AggregateReport, Failed, FailureReason, FetchOutcome, Success
from utils.logger import logger as project_logger

logger = logging.getLogger(__name__)


def format_outcome(outcome: FetchOutcome) -> str:
    """One ``key=value`` line per outcome, as written to the log file."""
    if isinstance(outcome, Success):
        return (
            f"item={outcome.item} status=success attempts={outcome.attempts} "
            f"bytes={outcome.size} path={outcome.path}"
        )
    line = (
        f"item={outcome.item} status=failed reason={outcome.reason.value} "
        f"attempts={outcome.attempts}"
    )
    if outcome.detail:
        line += f' detail="{outcome.detail}"'
    return line


class ResultCollector:
    """
    Waits for every submitted item and aggregates the outcomes.

    Outcomes are logged as they arrive, in completion order; the report
    lists them in submission order.  The scratch directory is removed
    whether collection finishes, fails or is interrupted.
    """

    def __init__(self, config: FetchConfig, clock: Callable[[], float] = time.monotonic) -> None:
        self.config = config
        self._clock = clock

    def collect(self, handles: Sequence[WorkHandle], started: Optional[float] = None) -> AggregateReport:
        started = self._clock() if started is None else started
        by_future = {handle.future: handle for handle in handles}
        outcomes: Dict[int, FetchOutcome] = {}

        try:
            for future in futures.as_completed(by_future):
                handle = by_future[future]
                outcome = self._resolve(handle)
                outcomes[handle.index] = outcome
                self.record(outcome)
        finally:
            self.cleanup()

        report = AggregateReport(
            outcomes=[outcomes[idx] for idx in sorted(outcomes)],
            elapsed=self._clock() - started,
        )
        level = logging.INFO if report.exit_code == 0 else logging.WARNING
        project_logger.log(
            level,
            f"run finished total={report.total} succeeded={report.succeeded} "
            f"failed={report.failed} success_rate={report.success_rate:.1f}% "
            f"elapsed={report.elapsed:.2f}s",
        )
        return report

    @staticmethod
    def _resolve(handle: WorkHandle) -> FetchOutcome:
        try:
            return handle.future.result()
        except Exception as exc:  # pylint: disable=broad-except
            # workers trap their own errors; this only covers a crash in the pool itself
            logger.error(f"Worker for {handle.item} raised: {exc!r}")
            return Failed(
                item=handle.item,
                reason=FailureReason.WORKER_ERROR,
                attempts=0,
                detail=f"{type(exc).__name__}: {exc}",
            )

    @staticmethod
    def record(outcome: FetchOutcome) -> None:
        if isinstance(outcome, Success):
            project_logger.info(format_outcome(outcome))
        else:
            project_logger.error(format_outcome(outcome))

    def cleanup(self) -> None:
        """Drop the scratch directory with any leftover per-worker files."""
        scratch = self.config.scratch_dir
        if scratch.exists():
            shutil.rmtree(scratch, ignore_errors=True)
            logger.debug(f"Removed scratch directory {scratch}")
