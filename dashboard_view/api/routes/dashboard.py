from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from clients.report_client import ReportClient
from config_service.config import DashboardSettings, settings
from dashboard_view.core.controller import DashboardController
from dashboard_view.core.exceptions import AbsentIdentity, NoDataError, UnknownPeriodError
from dashboard_view.schemas.dashboard import FetchStatus


router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"])


def get_settings() -> DashboardSettings:
  return settings


def get_report_client(
  request: Request,
  config: DashboardSettings = Depends(get_settings),
) -> ReportClient:
  client = getattr(request.app.state, "report_client", None)
  if client is None:
    client = ReportClient(config)
    request.app.state.report_client = client
  return client


def _status_code(controller: DashboardController) -> int:
  state = controller.state
  if state.status is FetchStatus.READY:
    return 200
  if isinstance(controller.last_error, (AbsentIdentity, NoDataError)):
    return 404
  return 502


@router.get("/view")
async def read_dashboard_view(
  request: Request,
  year: Optional[str] = None,
  client: ReportClient = Depends(get_report_client),
  config: DashboardSettings = Depends(get_settings),
):
  """Run a controller for the navigation query and return its snapshot."""
  controller = DashboardController(client, config=config)
  await controller.initialize(dict(request.query_params))
  if year:
    try:
      await controller.select_period(year)
    except UnknownPeriodError as exc:
      raise HTTPException(status_code=400, detail=exc.message) from exc

  payload = controller.snapshot().model_dump(mode="json", by_alias=True)
  return JSONResponse(payload, status_code=_status_code(controller))
