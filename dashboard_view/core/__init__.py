from dashboard_view.core.controller import DashboardController
from dashboard_view.core.exceptions import (
  AbsentIdentity,
  ConfigurationError,
  DashboardError,
  FetchError,
  MalformedResponse,
  NoDataError,
  RequestError,
  UnknownPeriodError,
)
from dashboard_view.core.identity import IdentityResolver, resolve_identity
from dashboard_view.core.normalizer import normalize, parse_raw_response
from dashboard_view.core.periods import PeriodRegistry

__all__ = [
  "AbsentIdentity",
  "ConfigurationError",
  "DashboardController",
  "DashboardError",
  "FetchError",
  "IdentityResolver",
  "MalformedResponse",
  "NoDataError",
  "PeriodRegistry",
  "RequestError",
  "UnknownPeriodError",
  "normalize",
  "parse_raw_response",
  "resolve_identity",
]
