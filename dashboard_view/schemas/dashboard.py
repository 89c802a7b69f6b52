from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class Direction(str, Enum):
  INFLOW = "inflow"
  OUTFLOW = "outflow"


class KpiMetric(BaseModel):
  key: str
  # Signed, unlike series and breakdown values: a net profit can be negative.
  value: float = 0.0
  change_percent: Optional[float] = Field(default=None, description="Period-over-period change, in percent")


class SeriesPoint(BaseModel):
  label: str = Field(description="Bucket label, e.g. a month name")
  values: Dict[str, float] = Field(default_factory=dict)


class DataSeries(BaseModel):
  name: str
  points: List[SeriesPoint] = Field(default_factory=list)

  @property
  def keys(self) -> List[str]:
    seen: List[str] = []
    for point in self.points:
      for key in point.values:
        if key not in seen:
          seen.append(key)
    return seen


class BreakdownSlice(BaseModel):
  label: str
  value: float
  color: str


class Breakdown(BaseModel):
  name: str
  slices: List[BreakdownSlice] = Field(default_factory=list)

  @property
  def total(self) -> float:
    return round(sum(item.value for item in self.slices), 2)


class ActivityEntry(BaseModel):
  id: str
  description: str = ""
  amount: float = Field(description="Signed amount: positive for inflows, negative for outflows")
  direction: Direction
  date: Optional[str] = None


class DashboardData(BaseModel):
  kpis: List[KpiMetric] = Field(default_factory=list)
  series: List[DataSeries] = Field(default_factory=list)
  breakdowns: List[Breakdown] = Field(default_factory=list)
  recent_activity: List[ActivityEntry] = Field(default_factory=list)

  def kpi(self, key: str) -> Optional[KpiMetric]:
    for metric in self.kpis:
      if metric.key == key:
        return metric
    return None

  def series_named(self, name: str) -> Optional[DataSeries]:
    for item in self.series:
      if item.name == name:
        return item
    return None

  def breakdown_named(self, name: str) -> Optional[Breakdown]:
    for item in self.breakdowns:
      if item.name == name:
        return item
    return None

  @property
  def is_empty(self) -> bool:
    return not (self.kpis or self.series or self.breakdowns or self.recent_activity)


# ---------------------------------------------------------------------------
# Raw reporting API responses
# ---------------------------------------------------------------------------

class SinglePeriodResponse(BaseModel):
  """Flat payload: the body is the whole dataset, periods do not apply."""

  kind: Literal["single"] = "single"
  dashboard: Dict[str, Any] = Field(default_factory=dict)


class MultiPeriodResponse(BaseModel):
  """Enveloped payload carrying the periods available for the entity."""

  kind: Literal["multi"] = "multi"
  dashboard: Dict[str, Any] = Field(default_factory=dict)
  available_periods: List[str] = Field(default_factory=list)


RawResponse = Union[SinglePeriodResponse, MultiPeriodResponse]


# ---------------------------------------------------------------------------
# View state
# ---------------------------------------------------------------------------

class FetchStatus(str, Enum):
  IDLE = "idle"
  LOADING = "loading"
  ERROR = "error"
  READY = "ready"


@dataclass(frozen=True)
class Idle:
  status: ClassVar[FetchStatus] = FetchStatus.IDLE


@dataclass(frozen=True)
class Loading:
  """A fetch is in flight; ``previous`` is the data still on screen, if any."""

  previous: Optional[DashboardData] = None
  status: ClassVar[FetchStatus] = FetchStatus.LOADING


@dataclass(frozen=True)
class Error:
  message: str
  status: ClassVar[FetchStatus] = FetchStatus.ERROR


@dataclass(frozen=True)
class Ready:
  data: DashboardData
  status: ClassVar[FetchStatus] = FetchStatus.READY


FetchState = Union[Idle, Loading, Error, Ready]


class DashboardSnapshot(BaseModel):
  """Everything a renderer needs to draw the current view."""

  status: FetchStatus
  message: Optional[str] = None
  data: Optional[DashboardData] = None
  periods: List[str] = Field(default_factory=list)
  selected_period: Optional[str] = Field(default=None, serialization_alias="selectedPeriod")
  can_select_period: bool = Field(default=False, serialization_alias="canSelectPeriod")
  escape_hatch_url: Optional[str] = Field(default=None, serialization_alias="escapeHatchUrl")
