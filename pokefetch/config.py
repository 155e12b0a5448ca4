"""
Configuration for a batch fetch run.

A single :class:`FetchConfig` is built once (usually by ``cli.py``) and
handed to the dispatcher, which threads it through to every worker.
Workers only ever read it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from configs.constants import Constants


@dataclass(frozen=True)
class FetchConfig:
    """
    Read-only settings shared by the dispatcher, workers and collector.

    Parameters
    ----------
    base_url : str
        Endpoint prefix; each item is fetched from ``{base_url}/{item}``.
    output_dir : Path
        Where ``<item>.json`` payloads are written.
    max_retries : int
        Maximum number of attempts per item (including the first one).
    retry_delay : float
        Base delay in seconds between attempts.
    backoff_factor : float
        Multiplier applied to ``retry_delay`` for every further attempt.
        ``1.0`` keeps the delay fixed.
    rate_limit_multiplier : float
        How much longer to wait after an HTTP 429.  Must be at least 2.
    max_workers : int
        Size of the worker pool.
    request_timeout : float
        Per-request timeout in seconds.
    preflight_timeout : float
        Timeout for the connectivity probe.  Kept shorter than
        ``request_timeout``.
    preflight : bool
        Probe the API host before every attempt.
    worker_deadline : float, optional
        Wall-clock budget per item in seconds.  ``None`` disables it.
    log_file : Path
        Persistent log of every outcome.
    """

    base_url: str = Constants.POKEMON_ENDPOINT
    output_dir: Path = field(default_factory=lambda: Path(Constants.OUTPUT_DIR))
    max_retries: int = Constants.MAX_RETRIES
    retry_delay: float = Constants.RETRY_DELAY
    backoff_factor: float = Constants.BACKOFF_FACTOR
    rate_limit_multiplier: float = Constants.RATE_LIMIT_MULTIPLIER
    max_workers: int = Constants.MAX_WORKERS
    request_timeout: float = Constants.REQUEST_TIMEOUT
    preflight_timeout: float = Constants.PREFLIGHT_TIMEOUT
    preflight: bool = True
    worker_deadline: Optional[float] = None
    log_file: Path = field(default_factory=lambda: Path(Constants.LOG_FILE))
    extension: str = Constants.PAYLOAD_EXTENSION

    def __post_init__(self) -> None:
        # Accept plain strings so callers can write FetchConfig(output_dir="…")
        object.__setattr__(self, "output_dir", Path(self.output_dir))
        object.__setattr__(self, "log_file", Path(self.log_file))
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

        if not self.base_url.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be an http(s) URL, got {self.base_url!r}")
        if self.max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if self.retry_delay < 0:
            raise ValueError("retry_delay must not be negative")
        if self.backoff_factor < 1:
            raise ValueError("backoff_factor must be at least 1")
        if self.rate_limit_multiplier < 2:
            raise ValueError("rate_limit_multiplier must be at least 2")
        if self.request_timeout <= 0 or self.preflight_timeout <= 0:
            raise ValueError("timeouts must be positive")
        if self.worker_deadline is not None and self.worker_deadline <= 0:
            raise ValueError("worker_deadline must be positive")

    @property
    def scratch_dir(self) -> Path:
        """Directory holding transient ``.part`` files while workers run."""
        return self.output_dir / ".partial"

    def url_for(self, item: str) -> str:
        return f"{self.base_url}/{item}"

    def output_path(self, item: str) -> Path:
        return self.output_dir / f"{item}.{self.extension}"

    def partial_path(self, item: str, worker_id: int) -> Path:
        return self.scratch_dir / f"{item}.{worker_id}.part"
