"""
HTTP client used by the fetch workers.

Network failures never leave this module as exceptions.  ``get`` returns
an :class:`HttpResponse` for anything the server answered (whatever the
status code) and a :class:`TransportError` when no answer arrived, so the
worker can dispatch on the result type and status code instead of parsing
exception messages.
"""

from __future__ import annotations

import logging
import socket
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union
from urllib.parse import urlsplit

import requests
from requests.adapters import HTTPAdapter
from urllib3.exceptions import NameResolutionError
from urllib3.util.retry import Retry

from configs.constants import Constants
from pokefetch.config import FetchConfig

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    TIMEOUT = "timeout"
    DNS = "dns"
    CONNECTION = "connection"
    OTHER = "other"


@dataclass(frozen=True)
class HttpResponse:
    status_code: int
    body: bytes = b""
    retry_after: Optional[float] = None


@dataclass(frozen=True)
class TransportError:
    kind: ErrorKind
    message: str = ""


HttpResult = Union[HttpResponse, TransportError]


def parse_retry_after(value: Optional[str]) -> Optional[float]:
    """Return the ``Retry-After`` header in seconds, if it is numeric."""
    if not value:
        return None
    try:
        seconds = float(value.strip())
    except ValueError:
        return None
    return seconds if seconds >= 0 else None


def _is_dns_failure(exc: BaseException) -> bool:
    """Walk the wrapped-exception chain looking for a name resolution error."""
    seen = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, (NameResolutionError, socket.gaierror)):
            return True
        reason = getattr(current, "reason", None)
        if isinstance(reason, BaseException):
            current = reason
            continue
        nested = next((a for a in current.args if isinstance(a, BaseException)), None)
        current = nested or current.__cause__ or current.__context__
    return False


def classify_exception(exc: requests.RequestException) -> TransportError:
    # ConnectTimeout is both a Timeout and a ConnectionError; timeouts win
    if isinstance(exc, requests.Timeout):
        kind = ErrorKind.TIMEOUT
    elif isinstance(exc, requests.ConnectionError):
        kind = ErrorKind.DNS if _is_dns_failure(exc) else ErrorKind.CONNECTION
    else:
        kind = ErrorKind.OTHER
    return TransportError(kind=kind, message=str(exc))


class HttpClient:
    """
    Thin wrapper around a pooled :class:`requests.Session`.

    The session's own retries are disabled: attempts, backoff and the
    429 handling all belong to the worker.
    """

    def __init__(self, config: FetchConfig, session: Optional[requests.Session] = None) -> None:
        self.config = config
        self._session = session or self._build_session()
        parts = urlsplit(config.base_url)
        self.probe_url = f"{parts.scheme}://{parts.netloc}/"

    def _build_session(self) -> requests.Session:
        """Build a requests.Session sized for the worker pool."""
        session = requests.Session()
        retry = Retry(total=0, raise_on_redirect=False, raise_on_status=False)
        adapter = HTTPAdapter(
            pool_connections=1,
            pool_maxsize=self.config.max_workers,
            max_retries=retry,
        )
        session.mount("https://", adapter)
        session.mount("http://", adapter)
        session.headers["User-Agent"] = Constants.USER_AGENT
        session.headers["Accept"] = "application/json"
        return session

    def get(self, url: str, timeout: Optional[float] = None) -> HttpResult:
        timeout = timeout or self.config.request_timeout
        try:
            resp = self._session.get(url, timeout=timeout)
        except requests.RequestException as exc:
            error = classify_exception(exc)
            logger.debug(f"GET {url} failed ({error.kind.value}): {error.message}")
            return error

        return HttpResponse(
            status_code=resp.status_code,
            body=resp.content,
            retry_after=parse_retry_after(resp.headers.get("Retry-After")),
        )

    def probe(self, timeout: Optional[float] = None) -> bool:
        """
        Cheap reachability check against the API host.

        Any HTTP answer counts as reachable; only transport errors fail.
        """
        timeout = timeout or self.config.preflight_timeout
        try:
            self._session.head(self.probe_url, timeout=timeout, allow_redirects=False)
        except requests.RequestException as exc:
            logger.debug(f"Preflight to {self.probe_url} failed: {exc}")
            return False
        return True

    def close(self) -> None:
        self._session.close()
