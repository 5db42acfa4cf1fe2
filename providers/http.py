import logging
import threading
import time
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from engine.errors import UpstreamError

logger = logging.getLogger(__name__)


def build_session() -> requests.Session:
    session = requests.Session()
    retry = Retry(
        total=3,
        backoff_factor=0.4,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=frozenset({"GET"}),
        respect_retry_after_header=True,
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


class ProviderHttpClient:
    """Rate-limited JSON transport shared by the provider clients.

    Every failure (transport, non-200 status, undecodable body) is raised as
    UpstreamError so callers can degrade at their own boundary.
    """

    provider = ""
    log_tag = ""

    def __init__(self, *, timeout_seconds: float = 60.0, min_interval_seconds: float = 0.0, session=None) -> None:
        self.timeout_seconds = timeout_seconds
        self.min_interval_seconds = max(0.0, float(min_interval_seconds or 0.0))
        self._session = session or build_session()
        self._rate_lock = threading.Lock()
        self._last_request_ts = 0.0

    def close(self) -> None:
        self._session.close()

    def _sleep_for_rate_limit(self) -> None:
        with self._rate_lock:
            now = time.monotonic()
            elapsed = now - self._last_request_ts
            wait_for = self.min_interval_seconds - elapsed
            if wait_for > 0:
                time.sleep(wait_for)
            self._last_request_ts = time.monotonic()

    def _request_json(self, method: str, url: str, *, endpoint: str, **kwargs: Any) -> Any:
        self._sleep_for_rate_limit()
        try:
            resp = self._session.request(method, url, timeout=self.timeout_seconds, **kwargs)
        except requests.RequestException as exc:
            logger.info(f"[{self.log_tag}] request={endpoint} status=error")
            raise UpstreamError(
                f"{self.provider} request to {endpoint} failed: {exc}",
                provider=self.provider,
                endpoint=endpoint,
            ) from exc

        status = int(resp.status_code)
        logger.info(f"[{self.log_tag}] request={endpoint} status={status}")
        if status != 200:
            raise UpstreamError(
                f"Error {status} on {endpoint}: {resp.text[:300]}",
                provider=self.provider,
                endpoint=endpoint,
                status_code=status,
            )
        try:
            return resp.json()
        except ValueError as exc:
            raise UpstreamError(
                f"{self.provider} returned invalid JSON for {endpoint}",
                provider=self.provider,
                endpoint=endpoint,
                status_code=status,
            ) from exc
