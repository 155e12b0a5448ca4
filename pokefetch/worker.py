"""
Fetch worker: takes one identifier from validation to a saved payload.

Per attempt the worker probes the API host, issues the GET and decides
from the typed result whether the item is done, should be retried after
the normal backoff, or (for HTTP 429) after the longer rate-limit
backoff.  Whatever happens, ``run`` returns exactly one outcome and the
output file exists only when that outcome is a :class:`Success`.
"""

from __future__ import annotations

import json
import logging
import os
import time
from dataclasses import dataclass
from typing import Callable, Optional

from pokefetch.client import HttpClient, HttpResponse, TransportError
from pokefetch.config import FetchConfig
from pokefetch.outcome import Failed, FailureReason, FetchOutcome, Success
from pokefetch.validation import is_valid_identifier

logger = logging.getLogger(__name__)


@dataclass
class RetryState:
    """Attempt bookkeeping for a single item; dropped when the worker returns."""

    max_attempts: int
    attempts: int = 0
    last_error: Optional[str] = None

    @property
    def exhausted(self) -> bool:
        return self.attempts >= self.max_attempts


def parse_payload(body: bytes):
    """Decode a response body, accepting only a JSON object or array."""
    try:
        data = json.loads(body.decode("utf-8"))
    except RecursionError as exc:
        raise ValueError("JSON nested too deeply") from exc
    if not isinstance(data, (dict, list)):
        raise ValueError(f"expected a JSON object or array, got {type(data).__name__}")
    return data


class FetchWorker:
    """
    Runs the fetch-with-retry loop for one item at a time.

    A single instance is shared by every thread in the pool; it holds no
    per-item state, only the config, the HTTP client and the sleep/clock
    callables (swapped out in tests).
    """

    def __init__(
        self,
        config: FetchConfig,
        client: HttpClient,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config
        self.client = client
        self._sleep = sleep
        self._clock = clock

    # ------------------------------------------------------------------
    # Backoff
    # ------------------------------------------------------------------

    def backoff(self, attempt: int) -> float:
        return self.config.retry_delay * self.config.backoff_factor ** (attempt - 1)

    def rate_limit_backoff(self, attempt: int, retry_after: Optional[float] = None) -> float:
        delay = self.config.rate_limit_multiplier * self.backoff(attempt)
        if retry_after is not None:
            delay = max(delay, retry_after)
        return delay

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def run(self, item: str, worker_id: int) -> FetchOutcome:
        if not is_valid_identifier(item):
            return Failed(
                item=item,
                reason=FailureReason.INVALID_IDENTIFIER,
                attempts=0,
                detail="identifier must be lowercase letters or hyphens, 3+ characters",
            )

        state = RetryState(max_attempts=self.config.max_retries)
        try:
            return self._fetch(item, worker_id, state)
        except Exception as exc:  # pylint: disable=broad-except
            logger.exception(f"[worker {worker_id}] {item}: unexpected error")
            self._discard(item, worker_id)
            return Failed(
                item=item,
                reason=FailureReason.WORKER_ERROR,
                attempts=state.attempts,
                detail=f"{type(exc).__name__}: {exc}",
            )

    # ------------------------------------------------------------------
    # Attempt loop
    # ------------------------------------------------------------------

    def _fetch(self, item: str, worker_id: int, state: RetryState) -> FetchOutcome:
        url = self.config.url_for(item)
        started = self._clock()

        while not state.exhausted:
            remaining = self._remaining(started)
            if remaining is not None and remaining <= 0:
                self._discard(item, worker_id)
                return Failed(item, FailureReason.DEADLINE_EXCEEDED, state.attempts, state.last_error)

            state.attempts += 1
            delay = self.backoff(state.attempts)

            if self.config.preflight and not self.client.probe(self.config.preflight_timeout):
                state.last_error = f"preflight to {self.client.probe_url} failed"
                if state.exhausted:
                    self._discard(item, worker_id)
                    return Failed(
                        item, FailureReason.NETWORK_UNAVAILABLE, state.attempts, state.last_error
                    )
                self._wait(item, worker_id, state, delay, started)
                continue

            result = self.client.get(url, self.config.request_timeout)

            if isinstance(result, TransportError):
                state.last_error = f"{result.kind.value}: {result.message}"
            elif isinstance(result, HttpResponse):
                if result.status_code == 200:
                    try:
                        size = self._persist(item, worker_id, result.body)
                    except (ValueError, OSError) as exc:
                        state.last_error = f"unusable payload: {exc}"
                    else:
                        return Success(
                            item=item,
                            path=self.config.output_path(item),
                            attempts=state.attempts,
                            size=size,
                        )
                elif result.status_code == 404:
                    self._discard(item, worker_id)
                    return Failed(item, FailureReason.NOT_FOUND, state.attempts, "HTTP 404")
                elif result.status_code == 429:
                    state.last_error = "HTTP 429 rate limited"
                    delay = self.rate_limit_backoff(state.attempts, result.retry_after)
                else:
                    state.last_error = f"HTTP {result.status_code}"

            if not state.exhausted:
                self._wait(item, worker_id, state, delay, started)

        self._discard(item, worker_id)
        return Failed(item, FailureReason.RETRIES_EXHAUSTED, state.attempts, state.last_error)

    def _remaining(self, started: float) -> Optional[float]:
        if self.config.worker_deadline is None:
            return None
        return self.config.worker_deadline - (self._clock() - started)

    def _wait(self, item: str, worker_id: int, state: RetryState, delay: float, started: float) -> None:
        remaining = self._remaining(started)
        if remaining is not None:
            delay = max(0.0, min(delay, remaining))
        logger.warning(
            f"[worker {worker_id}] {item}: attempt {state.attempts}/{state.max_attempts} "
            f"failed ({state.last_error}), retrying in {delay:.1f}s"
        )
        self._sleep(delay)

    # ------------------------------------------------------------------
    # Filesystem
    # ------------------------------------------------------------------

    def _persist(self, item: str, worker_id: int, body: bytes) -> int:
        """
        Validate ``body`` and move it into place as ``<item>.<ext>``.

        The bytes go to a ``.part`` file in the scratch directory first and
        are renamed over the final path, so the output file is never seen
        half-written.
        """
        partial = self.config.partial_path(item, worker_id)
        try:
            parse_payload(body)
            if not partial.parent.is_dir():
                # the dispatcher creates it; gone means the run was torn down
                raise FileNotFoundError(f"scratch directory {partial.parent} is missing")
            with open(partial, "wb") as fh:
                fh.write(body)
            os.replace(partial, self.config.output_path(item))
        except (ValueError, OSError):
            partial.unlink(missing_ok=True)
            raise
        logger.debug(f"[worker {worker_id}] saved {item} ({len(body)} bytes)")
        return len(body)

    def _discard(self, item: str, worker_id: int) -> None:
        """Remove the partial file and any stale payload left by an earlier run."""
        for path in (self.config.partial_path(item, worker_id), self.config.output_path(item)):
            try:
                path.unlink(missing_ok=True)
            except OSError as exc:
                logger.error(f"[worker {worker_id}] could not remove {path}: {exc}")
