"""
Wires dispatcher, workers and collector into a single batch run.
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Iterable, Optional

from pokefetch.client import HttpClient
from pokefetch.collector import ResultCollector
from pokefetch.config import FetchConfig
from pokefetch.dispatcher import Dispatcher
from pokefetch.outcome import AggregateReport
from pokefetch.validation import dedupe
from pokefetch.worker import FetchWorker
from utils.logger import add_file_handler, remove_handler

logger = logging.getLogger(__name__)


def run_batch(
    items: Iterable[str],
    config: FetchConfig,
    client: Optional[HttpClient] = None,
    worker: Optional[FetchWorker] = None,
) -> AggregateReport:
    """
    Fetch every item and return the aggregate report.

    Repeated identifiers are fetched once.  The log file handler is
    attached for the duration of the run only.

    Parameters
    ----------
    items : iterable of str
        Identifiers to fetch, in the order they should be reported.
    config : FetchConfig
        Run settings.
    client, worker : optional
        Injected collaborators; built from ``config`` when omitted.
    """
    items = dedupe(items)
    handler = add_file_handler(config.log_file)
    collector = ResultCollector(config)
    started = time.monotonic()
    try:
        with Dispatcher(config, worker=worker, client=client) as dispatcher:
            handles = dispatcher.submit(items)
            return collector.collect(handles, started=started)
    finally:
        collector.cleanup()
        remove_handler(handler)


def write_report(report: AggregateReport, path: Path) -> None:
    """Write the report as indented JSON to *path* (creates parent dirs)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(report.to_dict(), fh, indent=2, ensure_ascii=False)
    logger.debug(f"Saved report → {path}")
