from typing import Any

import httpx

TEST_API_URL = "https://reports.test/api/dashboard"


def assert_status(response: Any, expected: int = 200) -> None:
    """Assert that a HTTP response has the expected status code."""
    assert response.status_code == expected, (
        f"expected {expected}, got {response.status_code}: {getattr(response, 'text', '')}"
    )


def make_dashboard(net_profit: float = 125000, salaries: float = 42000) -> dict:
    """Dashboard payload in the shape the reporting API sends."""
    return {
        "kpi": {
            "ytdNetProfit": net_profit,
            "monthlySalaries": salaries,
            "monthlyLoans": 8000,
            "monthlySuppliers": None,
        },
        "charts": {
            "monthlyComparison": [
                {"name": "ינואר", "הכנסות": 90000, "הוצאות": 70000},
                {"name": "פברואר", "הכנסות": 85000, "הוצאות": 64000},
            ],
            "monthlyExpenseComposition": [
                {"name": "ספקים", "value": 30000, "color": "#111111"},
                {"name": "הלוואות", "value": 8000},
            ],
            "expenseTrend": [
                {"name": "ינואר", "ספקים": 31000, "הלוואות": 8000},
            ],
        },
    }


def envelope(periods, dashboard=None) -> dict:
    return {"dashboardData": dashboard if dashboard is not None else make_dashboard(), "availableYears": periods}


class ReportApi:
    """Scripted reporting API that records every request it receives.

    Responses are keyed by the value of the ``year`` query parameter
    (``None`` for the initial, period-less request).
    """

    def __init__(self) -> None:
        self.requests = []
        self.responses = {}

    def respond(self, period=None, status_code=200, **kwargs) -> None:
        self.responses[period] = (status_code, kwargs)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status_code, kwargs = self.responses[request.url.params.get("year")]
        return httpx.Response(status_code, **kwargs)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)
