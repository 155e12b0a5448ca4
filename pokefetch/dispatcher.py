"""
Job dispatcher: hands every work item to a bounded thread pool.
"""

from __future__ import annotations

import logging
from concurrent import futures
from dataclasses import dataclass
from typing import Iterable, List, Optional

from pokefetch.client import HttpClient
from pokefetch.config import FetchConfig
from pokefetch.validation import dedupe
from pokefetch.worker import FetchWorker
from utils.custom_threading import ThreadExecutor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkHandle:
    """A submitted item and the future that will carry its outcome."""

    index: int
    item: str
    future: futures.Future


class Dispatcher:
    """
    Starts one worker task per item, at most ``config.max_workers`` at a time.

    Items beyond the cap wait in the executor's queue.  Workers share only
    the read-only config and the HTTP client's connection pool.

    Example
    -------
    ::

        with Dispatcher(config) as dispatcher:
            handles = dispatcher.submit(["bulbasaur", "ivysaur"])
            report = ResultCollector(config).collect(handles)
    """

    def __init__(
        self,
        config: FetchConfig,
        worker: Optional[FetchWorker] = None,
        client: Optional[HttpClient] = None,
    ) -> None:
        self.config = config
        self._owns_client = worker is None and client is None
        if worker is None:
            client = client or HttpClient(config)
            worker = FetchWorker(config, client)
        self.worker = worker
        self._executor: Optional[ThreadExecutor] = None

    def __enter__(self) -> "Dispatcher":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close(wait=exc_type is None)
        return False

    def prepare_directories(self) -> None:
        """Create the output and scratch directories (no-op if they exist)."""
        self.config.output_dir.mkdir(parents=True, exist_ok=True)
        self.config.scratch_dir.mkdir(parents=True, exist_ok=True)

    def start(self) -> None:
        if self._executor is not None:
            return
        self.prepare_directories()
        self._executor = ThreadExecutor(
            max_workers=self.config.max_workers, thread_name_prefix="fetch"
        )

    def submit(self, items: Iterable[str]) -> List[WorkHandle]:
        """Queue one worker per distinct item; repeats would share an output file."""
        self.start()
        items = dedupe(items)
        handles = [
            WorkHandle(index=idx, item=item, future=self._executor.submit(self.worker.run, item, idx))
            for idx, item in enumerate(items)
        ]
        logger.info(
            f"Dispatched {len(handles)} items to {self.config.base_url} "
            f"with {self.config.max_workers} workers"
        )
        return handles

    def close(self, wait: bool = True) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None
        if self._owns_client:
            self.worker.client.close()
