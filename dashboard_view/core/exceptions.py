"""
Error taxonomy of the dashboard view.

Every failure the controller can meet while resolving, fetching or
normalising dashboard data is a ``DashboardError``. The controller collapses
them into a single ``Error(message)`` state, so ``message`` must always be
human readable.
"""

from typing import Any, Dict, Optional


class DashboardError(Exception):
  """Base exception for the dashboard view."""

  default_message = "unexpected error while loading the dashboard"

  def __init__(
    self,
    message: Optional[str] = None,
    error_code: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
  ):
    self.message = message or self.default_message
    self.error_code = error_code or "DASHBOARD_ERROR"
    self.details = details or {}
    super().__init__(self.message)

  def __str__(self) -> str:
    if self.details:
      return f"{self.message} (Code: {self.error_code}, Details: {self.details})"
    return f"{self.message} (Code: {self.error_code})"


class AbsentIdentity(DashboardError):
  """No usable entity identifier in the navigation context."""

  default_message = "identifier not found"

  def __init__(self, param: Optional[str] = None, value: Optional[str] = None):
    super().__init__(
      error_code="ABSENT_IDENTITY",
      details={"param": param, "value": value},
    )


class FetchError(DashboardError):
  """Base class for failures of a single reporting API call."""


class ConfigurationError(FetchError):
  """The reporting API credential is not configured."""

  default_message = "API key is not configured."

  def __init__(self, message: Optional[str] = None, config_key: Optional[str] = None):
    super().__init__(
      message=message,
      error_code="CONFIGURATION_ERROR",
      details={"config_key": config_key} if config_key else None,
    )


class RequestError(FetchError):
  """The reporting API answered with a non-success status or was unreachable."""

  default_message = "request failed"

  def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
    self.status_code = status_code
    super().__init__(
      message=message,
      error_code="REQUEST_ERROR",
      details={"status_code": status_code} if status_code is not None else None,
    )


class MalformedResponse(FetchError):
  """The response body lacks the structure a dashboard payload requires."""

  default_message = "malformed dashboard response"

  def __init__(self, message: Optional[str] = None, field: Optional[str] = None):
    super().__init__(
      message=message,
      error_code="MALFORMED_RESPONSE",
      details={"field": field} if field else None,
    )


class NoDataError(DashboardError):
  """The request succeeded but the entity has no reporting period."""

  default_message = "no annual data found for this user"

  def __init__(self, entity_id: Optional[str] = None):
    super().__init__(
      error_code="NO_DATA",
      details={"entity_id": entity_id} if entity_id else None,
    )


class UnknownPeriodError(DashboardError, ValueError):
  """A period change was requested for a period the entity does not have."""

  def __init__(self, period: str):
    self.period = period
    super().__init__(
      message=f"period {period!r} is not available",
      error_code="UNKNOWN_PERIOD",
      details={"period": period},
    )
