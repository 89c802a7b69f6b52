"""Resolution of the displayed entity from the navigation context."""
from __future__ import annotations

from typing import Any, Mapping, Optional, Union
from urllib.parse import parse_qs, urlsplit

from dashboard_view.core.exceptions import AbsentIdentity

DEFAULT_IDENTITY_PARAM = "userId"

# Values a navigation layer writes when it had no id to give.
ABSENT_SENTINELS = frozenset({"null", "undefined"})

NavigationContext = Union[str, Mapping[str, Any]]


def _query_value(context: NavigationContext, param: str) -> Optional[str]:
  if isinstance(context, str):
    query = urlsplit(context).query if "?" in context or "://" in context else context.lstrip("?")
    values = parse_qs(query, keep_blank_values=True).get(param)
    return values[0] if values else None

  value = context.get(param)
  if isinstance(value, (list, tuple)):
    value = value[0] if value else None
  return None if value is None else str(value)


class IdentityResolver:
  """Extracts the entity id from a URL, a query string or a query mapping."""

  def __init__(self, param: str = DEFAULT_IDENTITY_PARAM):
    self.param = param

  def resolve(self, context: NavigationContext) -> str:
    value = _query_value(context, self.param)
    if not value or value in ABSENT_SENTINELS:
      raise AbsentIdentity(param=self.param, value=value)
    return value


def resolve_identity(context: NavigationContext, param: str = DEFAULT_IDENTITY_PARAM) -> str:
  return IdentityResolver(param).resolve(context)
