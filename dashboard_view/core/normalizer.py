"""
Translation of reporting API bodies into the view model consumed by renderers.

Two steps live here. ``parse_raw_response`` decides, once, which payload shape
the API answered with (flat or enveloped). ``normalize`` then maps the
dashboard payload onto ``DashboardData``: missing numbers become 0, missing
lists become empty, and the recent activity keeps the server's order and
length.
"""
from __future__ import annotations

import itertools
import logging
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional

from dashboard_view.core.exceptions import MalformedResponse
from dashboard_view.schemas.dashboard import (
  ActivityEntry,
  Breakdown,
  BreakdownSlice,
  DashboardData,
  DataSeries,
  Direction,
  KpiMetric,
  MultiPeriodResponse,
  RawResponse,
  SeriesPoint,
  SinglePeriodResponse,
)

logger = logging.getLogger(__name__)

ENVELOPE_FIELD = "dashboardData"
PERIODS_FIELD = "availableYears"

METRICS_FIELDS = ("kpi", "metrics")
ACTIVITY_FIELDS = ("recentTransactions", "recentActivity")

# Chart blocks of the reporting API payload, by target collection.
CHART_SERIES = ("monthlyComparison", "expenseTrend")
CHART_BREAKDOWNS = ("monthlyExpenseComposition",)

CATEGORY_COLORS: Dict[str, str] = {
  "ספקים": "#3b82f6",
  "הוצאות קבועות": "#8b5cf6",
  "הוצאות משתנות": "#ef4444",
  "משכורות ומיסים": "#f97316",
  "הלוואות": "#14b8a6",
  "בלת'מ": "#64748b",
}
FALLBACK_COLORS = ("#06b6d4", "#22c55e", "#eab308", "#ec4899", "#a855f7", "#0ea5e9")

INFLOW_TAGS = {"inflow", "income", "credit"}
OUTFLOW_TAGS = {"outflow", "expense", "debit"}


# ---------------------------------------------------------------------------
# Response parsing
# ---------------------------------------------------------------------------

def parse_raw_response(body: Any) -> RawResponse:
  """Resolve a decoded JSON body into the flat or enveloped variant."""
  if not isinstance(body, dict):
    raise MalformedResponse("dashboard response is not a JSON object")

  dashboard = body[ENVELOPE_FIELD] if ENVELOPE_FIELD in body else body
  if dashboard is None:
    dashboard = {}
  if not isinstance(dashboard, dict):
    raise MalformedResponse(f"'{ENVELOPE_FIELD}' is not an object", field=ENVELOPE_FIELD)

  periods = body.get(PERIODS_FIELD)
  if periods is None:
    return SinglePeriodResponse(dashboard=dashboard)
  if not isinstance(periods, list):
    raise MalformedResponse(f"'{PERIODS_FIELD}' is not a list", field=PERIODS_FIELD)
  return MultiPeriodResponse(
    dashboard=dashboard,
    available_periods=[str(period) for period in periods if period is not None],
  )


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------

def _to_float(value: Any) -> float:
  if value is None or isinstance(value, bool):
    return 0.0
  if isinstance(value, (int, float)):
    return round(float(value), 2)
  if isinstance(value, str):
    try:
      return round(float(value.replace(",", "")), 2)
    except ValueError:
      return 0.0
  return 0.0


def _is_number(value: Any) -> bool:
  if value is None:
    return True
  if isinstance(value, bool):
    return False
  if isinstance(value, (int, float)):
    return True
  if isinstance(value, str):
    try:
      float(value.replace(",", ""))
    except ValueError:
      return False
    return True
  return False


def _magnitude(value: Any) -> float:
  return abs(_to_float(value))


def _label(item: Mapping[str, Any], *keys: str) -> str:
  for key in keys:
    value = item.get(key)
    if value is not None:
      return str(value)
  return ""


def _named_blocks(source: Any) -> Iterator[tuple[str, Any]]:
  """Yield ``(name, items)`` from either a mapping or a list of named blocks."""
  if isinstance(source, dict):
    yield from source.items()
  elif isinstance(source, list):
    for index, block in enumerate(source):
      if isinstance(block, dict):
        name = _label(block, "name", "key") or str(index)
        yield name, block.get("points") or block.get("items") or block.get("data")


def _items(value: Any) -> List[Mapping[str, Any]]:
  if not isinstance(value, list):
    return []
  return [item for item in value if isinstance(item, dict)]


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

def _metrics_block(payload: Mapping[str, Any]) -> Optional[Mapping[str, Any]]:
  for key in METRICS_FIELDS:
    block = payload.get(key)
    if isinstance(block, dict):
      return block
  return None


def _normalize_kpis(block: Mapping[str, Any]) -> List[KpiMetric]:
  kpis: List[KpiMetric] = []
  for key, raw in block.items():
    if isinstance(raw, dict):
      change = raw.get("changePercent", raw.get("change"))
      kpis.append(KpiMetric(
        key=str(key),
        value=_to_float(raw.get("value")),
        change_percent=None if change is None else _to_float(change),
      ))
    else:
      kpis.append(KpiMetric(key=str(key), value=_to_float(raw)))
  return kpis


def _normalize_points(items: Any) -> List[SeriesPoint]:
  points: List[SeriesPoint] = []
  for item in _items(items):
    label = _label(item, "name", "label", "month")
    values = {
      str(key): _magnitude(value)
      for key, value in item.items()
      if key not in ("name", "label", "month") and _is_number(value)
    }
    points.append(SeriesPoint(label=label, values=values))
  return points


def _normalize_series(payload: Mapping[str, Any], charts: Mapping[str, Any]) -> List[DataSeries]:
  series: List[DataSeries] = []
  for name in CHART_SERIES:
    if name in charts:
      series.append(DataSeries(name=name, points=_normalize_points(charts.get(name))))
  for name, items in _named_blocks(payload.get("series")):
    series.append(DataSeries(name=str(name), points=_normalize_points(items)))
  return series


def _normalize_slices(items: Any, palette: Iterator[str]) -> List[BreakdownSlice]:
  slices: List[BreakdownSlice] = []
  for item in _items(items):
    label = _label(item, "name", "label", "category")
    color = item.get("color") or CATEGORY_COLORS.get(label) or next(palette)
    slices.append(BreakdownSlice(label=label, value=_magnitude(item.get("value")), color=str(color)))
  return slices


def _normalize_breakdowns(payload: Mapping[str, Any], charts: Mapping[str, Any]) -> List[Breakdown]:
  palette = itertools.cycle(FALLBACK_COLORS)
  breakdowns: List[Breakdown] = []
  for name in CHART_BREAKDOWNS:
    if name in charts:
      breakdowns.append(Breakdown(name=name, slices=_normalize_slices(charts.get(name), palette)))
  for name, items in _named_blocks(payload.get("breakdowns")):
    breakdowns.append(Breakdown(name=str(name), slices=_normalize_slices(items, palette)))
  return breakdowns


def _direction(item: Mapping[str, Any], amount: float) -> Direction:
  tag = str(item.get("direction") or item.get("type") or "").strip().lower()
  if tag in INFLOW_TAGS:
    return Direction.INFLOW
  if tag in OUTFLOW_TAGS:
    return Direction.OUTFLOW
  return Direction.OUTFLOW if amount < 0 else Direction.INFLOW


def _normalize_activity(items: Iterable[Mapping[str, Any]]) -> List[ActivityEntry]:
  entries: List[ActivityEntry] = []
  for index, item in enumerate(items):
    raw_amount = _to_float(item.get("amount"))
    direction = _direction(item, raw_amount)
    amount = abs(raw_amount) if direction is Direction.INFLOW else -abs(raw_amount)
    date = item.get("date")
    entries.append(ActivityEntry(
      id=_label(item, "id") or str(index),
      description=_label(item, "description", "name"),
      amount=amount,
      direction=direction,
      date=None if date is None else str(date),
    ))
  return entries


def _activity_items(payload: Mapping[str, Any]) -> List[Mapping[str, Any]]:
  for key in ACTIVITY_FIELDS:
    if key in payload:
      return _items(payload.get(key))
  return []


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def normalize(raw: Any) -> DashboardData:
  """Map a raw dashboard payload onto ``DashboardData``.

  Accepts a parsed ``RawResponse`` or the bare payload mapping. An empty
  payload normalizes to an empty ``DashboardData``; a non-empty one without
  its metrics block raises ``MalformedResponse``.
  """
  payload = raw.dashboard if isinstance(raw, (SinglePeriodResponse, MultiPeriodResponse)) else raw
  if payload is None:
    payload = {}
  if not isinstance(payload, dict):
    raise MalformedResponse("dashboard payload is not an object")
  if not payload:
    return DashboardData()

  metrics = _metrics_block(payload)
  if metrics is None:
    raise MalformedResponse("dashboard payload has no metrics block", field="kpi")

  charts = payload.get("charts")
  if not isinstance(charts, dict):
    charts = {}

  data = DashboardData(
    kpis=_normalize_kpis(metrics),
    series=_normalize_series(payload, charts),
    breakdowns=_normalize_breakdowns(payload, charts),
    recent_activity=_normalize_activity(_activity_items(payload)),
  )
  logger.debug(
    "Normalized dashboard: %d kpis, %d series, %d breakdowns, %d activity entries",
    len(data.kpis), len(data.series), len(data.breakdowns), len(data.recent_activity),
  )
  return data
