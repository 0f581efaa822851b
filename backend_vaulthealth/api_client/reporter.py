"""
Report delivery over HTTP.

Responsibilities:
- POST the weak-password report as JSON to the fixed report endpoint.
- Attach the bearer token for the authenticated request.
- Map transport and non-2xx failures to ReportDeliveryError. One attempt per
  call; retry policy, if any, belongs to the caller.
"""

from __future__ import annotations

from typing import Callable, Protocol

import httpx

from backend_vaulthealth.analysis_engine.report import WeakPasswordReport
from backend_vaulthealth.config.env import DEFAULT_REPORT_PATH, DEFAULT_REQUEST_TIMEOUT_SEC
from backend_vaulthealth.config.settings import Settings
from backend_vaulthealth.core.exceptions import ReportDeliveryError
from backend_vaulthealth.vaulthealth_logging import get_logger

logger = get_logger(__name__)


class ReportSender(Protocol):
    def send(self, report: WeakPasswordReport) -> None:
        ...


class HttpReportSender:
    """
    Sends reports with a shared httpx.Client. The response body is ignored.

    Pass client= to reuse an existing client (it is then not closed by close()).
    """

    def __init__(
        self,
        base_url: str,
        *,
        endpoint_path: str = DEFAULT_REPORT_PATH,
        token_provider: Callable[[], str | None] | None = None,
        timeout_sec: float = DEFAULT_REQUEST_TIMEOUT_SEC,
        client: httpx.Client | None = None,
    ) -> None:
        if not base_url.strip():
            raise ValueError("base_url must be non-empty")
        if timeout_sec <= 0:
            raise ValueError("timeout_sec must be positive")
        self._base_url = base_url.rstrip("/")
        self._endpoint_path = endpoint_path if endpoint_path.startswith("/") else "/" + endpoint_path
        self._token_provider = token_provider
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=httpx.Timeout(timeout_sec))

    @classmethod
    def from_settings(cls, settings: Settings, *, client: httpx.Client | None = None) -> "HttpReportSender":
        token = settings.api_token
        return cls(
            settings.api_base_url,
            endpoint_path=settings.report_path,
            token_provider=(lambda: token) if token else None,
            timeout_sec=settings.request_timeout_sec,
            client=client,
        )

    @property
    def url(self) -> str:
        return self._base_url + self._endpoint_path

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self._token_provider is not None:
            token = self._token_provider()
            if token:
                headers["Authorization"] = f"Bearer {token}"
        return headers

    def send(self, report: WeakPasswordReport) -> None:
        """POST the report once. Raises ReportDeliveryError on any failure."""
        try:
            resp = self._client.post(self.url, json=report.to_dict(), headers=self._headers())
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise ReportDeliveryError(f"report endpoint returned HTTP {status}", status_code=status) from e
        except httpx.HTTPError as e:
            raise ReportDeliveryError(f"report request failed: {e}") from e
        logger.debug("report_delivered", user_id=report.user_id, status_code=resp.status_code)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HttpReportSender":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
