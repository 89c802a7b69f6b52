from __future__ import annotations

from typing import Iterable, List, Optional

from dashboard_view.core.exceptions import UnknownPeriodError


class PeriodRegistry:
  """Periods available for the entity, most recent first, and the selected one.

  The order is the server's; the registry never sorts. Once populated, the
  selection is always one of the registered periods.
  """

  def __init__(self) -> None:
    self._periods: List[str] = []
    self._selected: Optional[str] = None

  @property
  def periods(self) -> List[str]:
    return list(self._periods)

  @property
  def selected(self) -> Optional[str]:
    return self._selected

  def __len__(self) -> int:
    return len(self._periods)

  def __contains__(self, period: object) -> bool:
    return period in self._periods

  def populate(self, periods: Iterable[str]) -> None:
    """Replace the period set and select its first element (or nothing)."""
    self._periods = list(periods)
    self._selected = self._periods[0] if self._periods else None

  def require(self, period: str) -> str:
    if period not in self._periods:
      raise UnknownPeriodError(period)
    return period

  def select(self, period: str) -> None:
    self._selected = self.require(period)
