import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from config_service.config import DashboardSettings, settings as default_settings
from dashboard_view.core.exceptions import ConfigurationError, MalformedResponse, RequestError
from dashboard_view.core.normalizer import parse_raw_response
from dashboard_view.schemas.dashboard import RawResponse

logger = logging.getLogger(__name__)


class ReportClient:
    """HTTP client for the reporting API.

    One call to :meth:`fetch` is exactly one GET request: no cache, no retry.
    The credential is read from the injected settings on every request, and
    a missing credential fails before anything touches the network.
    """

    def __init__(
        self,
        config: Optional[DashboardSettings] = None,
        transport: Optional[Any] = None,
    ) -> None:
        self.settings = config or default_settings
        self.base_url = self.settings.REPORT_API_URL
        self.client = httpx.AsyncClient(
            timeout=self.settings.REPORT_API_TIMEOUT,
            transport=transport,
            follow_redirects=True,
        )

    def build_url(self, entity_id: str) -> str:
        return f"{self.base_url}/{quote(entity_id, safe='')}"

    def build_params(self, period: Optional[str] = None) -> Dict[str, str]:
        if not period:
            return {}
        return {self.settings.REPORT_PERIOD_PARAM: period}

    def _headers(self) -> Dict[str, str]:
        api_key = self.settings.REPORT_API_KEY
        if not api_key:
            raise ConfigurationError(config_key="REPORT_API_KEY")
        return {self.settings.REPORT_API_KEY_HEADER: api_key}

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            message = body.get("error")
            if isinstance(message, str) and message.strip():
                return message
        return f"Error: {response.status_code}"

    async def fetch(self, entity_id: str, period: Optional[str] = None) -> RawResponse:
        """Retrieve the dashboard of ``entity_id``, optionally for one period."""
        headers = self._headers()
        url = self.build_url(entity_id)
        params = self.build_params(period)
        logger.info("Fetching dashboard from %s params=%s", url, params)

        try:
            response = await self.client.get(url, params=params, headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("Reporting API unreachable: %s", exc)
            raise RequestError(str(exc) or None) from exc

        if not response.is_success:
            message = self._error_message(response)
            logger.warning("Reporting API answered %s: %s", response.status_code, message)
            raise RequestError(message, status_code=response.status_code)

        try:
            body = response.json()
        except ValueError as exc:
            raise MalformedResponse("dashboard response is not valid JSON") from exc
        return parse_raw_response(body)

    async def close(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "ReportClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
