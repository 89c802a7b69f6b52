import httpx
import pytest

from clients.report_client import ReportClient
from config_service.config import DashboardSettings
from dashboard_view.core.exceptions import ConfigurationError, MalformedResponse, RequestError
from dashboard_view.schemas.dashboard import MultiPeriodResponse, SinglePeriodResponse
from tests.utils import TEST_API_URL, envelope, make_dashboard


@pytest.mark.asyncio
async def test_fetch_sends_credential_to_entity_endpoint(report_client, report_api):
    report_api.respond(json=envelope(["2024", "2023"]))

    raw = await report_client.fetch("123")
    await report_client.close()

    assert isinstance(raw, MultiPeriodResponse)
    assert raw.available_periods == ["2024", "2023"]
    request = report_api.requests[0]
    assert request.method == "GET"
    assert request.url.host == "reports.test"
    assert request.url.path == "/api/dashboard/123"
    assert not request.url.query
    assert request.headers["x-api-key"] == "test-report-key"


@pytest.mark.asyncio
async def test_fetch_with_period_adds_year_parameter(report_client, report_api):
    report_api.respond("2023", json=envelope(["2024", "2023"]))

    await report_client.fetch("123", "2023")
    await report_client.close()

    request = report_api.requests[0]
    assert request.url.path == "/api/dashboard/123"
    assert request.url.params["year"] == "2023"


@pytest.mark.asyncio
async def test_flat_payload_is_single_period(report_client, report_api):
    report_api.respond(json=make_dashboard())
    raw = await report_client.fetch("123")
    await report_client.close()
    assert isinstance(raw, SinglePeriodResponse)


@pytest.mark.asyncio
@pytest.mark.parametrize("api_key", [None, "", "   "])
async def test_missing_credential_fails_without_network(report_api, api_key):
    config = DashboardSettings(REPORT_API_KEY=api_key, REPORT_API_URL=TEST_API_URL)
    client = ReportClient(config, transport=report_api.transport)

    with pytest.raises(ConfigurationError) as exc_info:
        await client.fetch("123")
    await client.close()

    assert exc_info.value.message == "API key is not configured."
    assert report_api.requests == []


@pytest.mark.asyncio
async def test_error_body_message_is_surfaced(report_client, report_api):
    report_api.respond(status_code=404, json={"error": "Not found"})

    with pytest.raises(RequestError) as exc_info:
        await report_client.fetch("123")
    await report_client.close()

    assert exc_info.value.message == "Not found"
    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "kwargs",
    [
        {"text": "<html>Bad gateway</html>"},
        {"json": {"detail": "no error field"}},
        {"json": {"error": ""}},
    ],
)
async def test_unusable_error_body_falls_back_to_status(report_client, report_api, kwargs):
    report_api.respond(status_code=502, **kwargs)

    with pytest.raises(RequestError) as exc_info:
        await report_client.fetch("123")
    await report_client.close()

    assert exc_info.value.message == "Error: 502"


@pytest.mark.asyncio
async def test_transport_failure_is_a_request_error(report_settings):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = ReportClient(report_settings, transport=httpx.MockTransport(handler))
    with pytest.raises(RequestError) as exc_info:
        await client.fetch("123")
    await client.close()

    assert exc_info.value.message == "connection refused"
    assert exc_info.value.status_code is None


@pytest.mark.asyncio
async def test_invalid_json_success_is_malformed(report_client, report_api):
    report_api.respond(text="not json")
    with pytest.raises(MalformedResponse):
        await report_client.fetch("123")
    await report_client.close()


@pytest.mark.asyncio
async def test_client_is_an_async_context_manager(report_settings, report_api):
    report_api.respond(json=make_dashboard())
    async with ReportClient(report_settings, transport=report_api.transport) as client:
        await client.fetch("123")
    assert client.client.is_closed


@pytest.mark.asyncio
async def test_silent_transport_failure_uses_generic_message(report_settings):
    def handler(request):
        raise httpx.ConnectError("", request=request)

    client = ReportClient(report_settings, transport=httpx.MockTransport(handler))
    with pytest.raises(RequestError) as exc_info:
        await client.fetch("123")
    await client.close()

    assert exc_info.value.message == "request failed"
