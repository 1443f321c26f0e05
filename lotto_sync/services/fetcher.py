"""Fetch single lotto draws from the official results endpoint."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from lotto_sync.config import DEFAULT_SOURCE_URL, DEFAULT_USER_AGENT
from lotto_sync.errors import TransportError


logger = logging.getLogger(__name__)


class FetchStatus(str, Enum):
    OK = "ok"
    NOT_AVAILABLE = "not_available"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class FetchResult:
    draw_no: int
    status: FetchStatus
    payload: dict[str, Any] | None = None
    detail: str | None = None


def build_http_session(user_agent: str = DEFAULT_USER_AGENT, retries: int = 0, backoff_factor: float = 0.0) -> requests.Session:
    """Create a requests session for the draw source.

    retries defaults to 0: a failed request stops the sync run and the next
    scheduled run picks up from the same draw.
    """

    retry = Retry(
        total=retries,
        connect=retries,
        read=retries,
        status=retries,
        backoff_factor=backoff_factor,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=("GET",),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)

    session = requests.Session()
    session.headers.update({"User-Agent": user_agent, "Accept": "application/json"})
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


class LottoFetcher:
    """Retrieve one candidate draw payload per call.

    `returnValue` is the upstream status indicator: "success" for a published
    draw, anything else (in practice "fail") for a draw that is not out yet.
    """

    def __init__(
        self,
        http: requests.Session,
        url_template: str = DEFAULT_SOURCE_URL,
        timeout_seconds: float = 10.0,
    ) -> None:
        self._http = http
        self._url_template = url_template
        self._timeout = timeout_seconds

    def close(self) -> None:
        self._http.close()

    def url_for(self, draw_no: int) -> str:
        return self._url_template.format(draw_no=int(draw_no))

    def fetch(self, draw_no: int) -> FetchResult:
        """Fetch one draw.

        Raises:
            TransportError: connection failure, timeout or non-2xx status.
        """

        url = self.url_for(draw_no)
        try:
            resp = self._http.get(url, timeout=self._timeout)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise TransportError(draw_no, str(exc)) from exc

        try:
            payload = resp.json()
        except ValueError:
            # The upstream answers some requests with an HTML page.
            snippet = resp.text[:80].strip()
            return FetchResult(draw_no, FetchStatus.MALFORMED, detail=f"Response is not JSON: {snippet!r}")

        if not isinstance(payload, dict):
            return FetchResult(draw_no, FetchStatus.MALFORMED, detail="Response is not a JSON object")

        if "returnValue" not in payload:
            return FetchResult(draw_no, FetchStatus.MALFORMED, detail="Response has no returnValue")

        if payload.get("returnValue") != "success":
            logger.debug("Draw %s not available (returnValue=%r)", draw_no, payload.get("returnValue"))
            return FetchResult(draw_no, FetchStatus.NOT_AVAILABLE, payload=payload)

        return FetchResult(draw_no, FetchStatus.OK, payload=payload)
