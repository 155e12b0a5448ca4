import json
import threading
from typing import Dict, List, Optional

import pytest

from pokefetch.client import HttpResponse, HttpResult
from pokefetch.config import FetchConfig


def ok(payload=None) -> HttpResponse:
    payload = payload if payload is not None else {"name": "bulbasaur", "id": 1}
    return HttpResponse(status_code=200, body=json.dumps(payload).encode("utf-8"))


def status(code: int, retry_after: Optional[float] = None) -> HttpResponse:
    return HttpResponse(status_code=code, body=b"", retry_after=retry_after)


class FakeClient:
    """Scripted stand-in for HttpClient.

    ``script`` maps an item name to the results returned for successive
    GETs; the last result repeats once the list runs out.  Items missing
    from the script get ``default``.
    """

    probe_url = "https://pokeapi.test/"

    def __init__(
        self,
        script: Optional[Dict[str, List[HttpResult]]] = None,
        probes: Optional[List[bool]] = None,
        default: Optional[HttpResult] = None,
    ) -> None:
        self.script = {k: list(v) for k, v in (script or {}).items()}
        self.probes = list(probes or [])
        self.default = default or ok()
        self.calls: List[str] = []
        self.probe_calls = 0
        self.closed = False
        self._lock = threading.Lock()

    def get(self, url: str, timeout: Optional[float] = None) -> HttpResult:
        item = url.rstrip("/").rsplit("/", 1)[-1]
        with self._lock:
            self.calls.append(item)
            queue = self.script.get(item)
            if not queue:
                return self.default
            return queue.pop(0) if len(queue) > 1 else queue[0]

    def probe(self, timeout: Optional[float] = None) -> bool:
        with self._lock:
            self.probe_calls += 1
            if not self.probes:
                return True
            return self.probes.pop(0) if len(self.probes) > 1 else self.probes[0]

    def close(self) -> None:
        self.closed = True

    def calls_for(self, item: str) -> int:
        return self.calls.count(item)


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def config(tmp_path) -> FetchConfig:
    return FetchConfig(
        base_url="https://pokeapi.test/api/v2/pokemon",
        output_dir=tmp_path / "out",
        log_file=tmp_path / "logs" / "fetch.log",
        max_retries=3,
        retry_delay=1.0,
        max_workers=2,
    )


@pytest.fixture
def sleeper() -> RecordingSleep:
    return RecordingSleep()
