"""
Shared test configuration for the dashboard view.
"""
import os

# Environment must be set before config_service is imported.
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("REPORT_API_KEY", "test-report-key")

import pytest

from clients.report_client import ReportClient
from config_service.config import DashboardSettings
from tests.utils import TEST_API_URL, ReportApi


@pytest.fixture
def report_settings() -> DashboardSettings:
    return DashboardSettings(REPORT_API_KEY="test-report-key", REPORT_API_URL=TEST_API_URL)


@pytest.fixture
def report_api() -> ReportApi:
    return ReportApi()


@pytest.fixture
def report_client(report_settings, report_api):
    return ReportClient(report_settings, transport=report_api.transport)
