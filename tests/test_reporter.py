"""
Tests for HttpReportSender. HTTP is served by httpx.MockTransport; no network.
"""

from __future__ import annotations

import json

import httpx
import pytest

from backend_vaulthealth.analysis_engine.report import WeakPasswordReport
from backend_vaulthealth.api_client.reporter import HttpReportSender
from backend_vaulthealth.config.env import DEFAULT_REPORT_PATH, DEFAULT_REQUEST_TIMEOUT_SEC
from backend_vaulthealth.config.settings import Settings
from backend_vaulthealth.core.exceptions import ReportDeliveryError

REPORT = WeakPasswordReport(
    user_id="u1",
    organization_ids=("o1",),
    weak_password_count=2,
    total_password_count=7,
    timestamp="2024-01-02T03:04:05.678Z",
)


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_send_posts_json_with_bearer_token():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["method"] = request.method
        captured["url"] = str(request.url)
        captured["auth"] = request.headers.get("Authorization")
        captured["body"] = json.loads(request.content)
        return httpx.Response(200)

    sender = HttpReportSender(
        "https://api.example.com/",
        token_provider=lambda: "tok-123",
        client=_client(handler),
    )
    sender.send(REPORT)
    assert captured["method"] == "POST"
    assert captured["url"] == "https://api.example.com/custom/report"
    assert captured["auth"] == "Bearer tok-123"
    assert captured["body"] == REPORT.to_dict()


def test_response_body_is_ignored():
    sender = HttpReportSender(
        "https://api.example.com",
        client=_client(lambda request: httpx.Response(204)),
    )
    sender.send(REPORT)
    sender2 = HttpReportSender(
        "https://api.example.com",
        client=_client(lambda request: httpx.Response(200, content=b"not json")),
    )
    sender2.send(REPORT)


def test_no_token_no_authorization_header():
    captured = {}

    def handler(request):
        captured["auth"] = request.headers.get("Authorization")
        return httpx.Response(200)

    HttpReportSender("https://api.example.com", client=_client(handler)).send(REPORT)
    HttpReportSender("https://api.example.com", token_provider=lambda: None, client=_client(handler)).send(REPORT)
    assert captured["auth"] is None


def test_http_error_status_raises_delivery_error():
    sender = HttpReportSender(
        "https://api.example.com",
        client=_client(lambda request: httpx.Response(500)),
    )
    with pytest.raises(ReportDeliveryError) as exc_info:
        sender.send(REPORT)
    assert exc_info.value.status_code == 500


def test_transport_error_raises_delivery_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    sender = HttpReportSender("https://api.example.com", client=_client(handler))
    with pytest.raises(ReportDeliveryError) as exc_info:
        sender.send(REPORT)
    assert exc_info.value.status_code is None
    assert "connection refused" in str(exc_info.value)


def test_from_settings():
    captured = {}

    def handler(request):
        captured["url"] = str(request.url)
        captured["auth"] = request.headers.get("Authorization")
        return httpx.Response(200)

    settings = Settings(api_base_url="https://vault.example.org", report_path="/reports/weak", api_token="abc")
    sender = HttpReportSender.from_settings(settings, client=_client(handler))
    assert sender.url == "https://vault.example.org/reports/weak"
    sender.send(REPORT)
    assert captured == {"url": "https://vault.example.org/reports/weak", "auth": "Bearer abc"}


def test_endpoint_path_normalized():
    sender = HttpReportSender("https://api.example.com", endpoint_path="custom/report")
    assert sender.url == "https://api.example.com/custom/report"
    sender.close()


def test_invalid_arguments():
    with pytest.raises(ValueError, match="base_url"):
        HttpReportSender("  ")
    with pytest.raises(ValueError, match="timeout"):
        HttpReportSender("https://api.example.com", timeout_sec=0)


def test_close_leaves_injected_client_open():
    client = _client(lambda request: httpx.Response(200))
    with HttpReportSender("https://api.example.com", client=client) as sender:
        sender.send(REPORT)
    assert client.is_closed is False
    client.close()


def test_owned_client_closed():
    sender = HttpReportSender("https://api.example.com")
    sender.close()
    assert sender._client.is_closed is True


def test_defaults_follow_env_config():
    sender = HttpReportSender("https://api.example.com")
    assert sender.url == "https://api.example.com" + DEFAULT_REPORT_PATH
    assert sender._client.timeout.read == DEFAULT_REQUEST_TIMEOUT_SEC
    sender.close()
