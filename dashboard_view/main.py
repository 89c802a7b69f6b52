"""
Entry point for the dashboard view service.
Exposes the dashboard view state to renderers over HTTP, one controller per request.
"""
from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

load_dotenv()

from config_service.config import settings  # noqa: E402
from dashboard_view import __version__  # noqa: E402
from dashboard_view.api.routes.dashboard import router as dashboard_router  # noqa: E402


def configure_logging(level: str = settings.LOG_LEVEL) -> None:
  logging.basicConfig(
    level=getattr(logging, level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stdout,
    force=True,
  )


configure_logging()
logger = logging.getLogger("dashboard_view")


class DashboardViewLoader:
  def __init__(self) -> None:
    self.service_healthy = False
    self.initialization_error = None
    self.start_time = datetime.now(timezone.utc)
    self.service_config = {
      "version": __version__,
      "features": [
        "dashboard_view_state",
        "period_selection",
        "payload_normalization",
      ],
    }

  def initialize(self) -> bool:
    logger.info("Starting dashboard view service")
    if not settings.api_key_configured:
      self.initialization_error = "REPORT_API_KEY is not configured"
      self.service_healthy = False
      logger.error("Dashboard view initialization failed: %s", self.initialization_error)
      return False
    self.initialization_error = None
    self.service_healthy = True
    return True


service_loader = DashboardViewLoader()


@asynccontextmanager
async def lifespan(app: FastAPI):
  service_loader.initialize()
  yield
  client = getattr(app.state, "report_client", None)
  if client is not None:
    await client.close()
    app.state.report_client = None
  logger.info("Dashboard view service stopped")


app = FastAPI(
  title="Cashflow Dashboard View",
  description="View state of the cashflow dashboard: entity, periods and normalized data.",
  version=__version__,
  lifespan=lifespan,
)


if settings.ENVIRONMENT in {"development", "dev", "local", "test"}:
  logger.info("CORS open (development environment)")
  app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
  )
else:
  logger.info("CORS restricted to origins: %s", settings.get_allowed_origins())
  app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
  )


app.include_router(dashboard_router)


@app.get("/health")
def health_check():
  uptime = (datetime.now(timezone.utc) - service_loader.start_time).total_seconds()
  status = "healthy" if service_loader.service_healthy else "unhealthy"
  payload = {
    "status": status,
    "service": "dashboard_view",
    "version": service_loader.service_config["version"],
    "uptime_seconds": uptime,
    "features": service_loader.service_config["features"],
    "report_api": settings.get_report_api_config(),
    "timestamp": datetime.now(timezone.utc).isoformat(),
  }
  if service_loader.initialization_error:
    payload["initialization_error"] = service_loader.initialization_error
  return JSONResponse(payload, status_code=200 if service_loader.service_healthy else 503)


@app.get("/")
def root():
  return {
    "service": "dashboard_view",
    "version": service_loader.service_config["version"],
    "status": "running",
    "documentation": "/docs",
  }


def run() -> None:
  import uvicorn

  uvicorn.run(
    "dashboard_view.main:app",
    host=settings.DASHBOARD_VIEW_HOST,
    port=settings.DASHBOARD_VIEW_PORT,
    reload=settings.ENVIRONMENT in {"dev", "development", "local"},
  )


if __name__ == "__main__":
  run()
