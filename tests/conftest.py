"""Shared test fixtures — reference months, settings and an in-memory request log."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from fleet_metrics.api.request_log import RequestLogger, RequestRecord
from fleet_metrics.api.server import create_app
from fleet_metrics.config import ApiSettings

# Reference values (seed = CRC-32 & 0x7FFFFFFF, computed independently):
#   2024-12 → 1012755257, seasonal factor 0.9
#   2024-06 →  573283937, seasonal factor 1.1
#   2024-01 → 1011813314, seasonal factor 1.0


class CollectingRequestLogger(RequestLogger):
    """Keeps records in memory instead of writing them out."""

    def __init__(self):
        super().__init__()
        self.records: list[RequestRecord] = []

    def emit(self, record: RequestRecord) -> None:
        self.records.append(record)


@pytest.fixture
def settings() -> ApiSettings:
    return ApiSettings(
        allowed_origins=["http://localhost:3000"],
        api_key=None,
        request_log_file=None,
    )


@pytest.fixture
def request_log() -> CollectingRequestLogger:
    return CollectingRequestLogger()


@pytest.fixture
def client(settings: ApiSettings, request_log: CollectingRequestLogger) -> TestClient:
    return TestClient(create_app(settings, request_log))


@pytest.fixture
def keyed_client(request_log: CollectingRequestLogger) -> TestClient:
    keyed = ApiSettings(allowed_origins=["http://localhost:3000"], api_key="transport-dashboard-2024")
    return TestClient(create_app(keyed, request_log))
