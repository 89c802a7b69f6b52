"""
View state controller of the dashboard.

The controller owns the fetch state, the period set and the selected period
for the lifetime of one view. It resolves the entity once, loads its
dashboard, and reloads on period changes. Every fetch carries a sequence
number; a response whose number is no longer the latest issued is dropped,
so the state always reflects the most recent request.
"""
from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple

from config_service.config import DashboardSettings, settings as default_settings
from dashboard_view.core.exceptions import AbsentIdentity, DashboardError, NoDataError
from dashboard_view.core.identity import IdentityResolver, NavigationContext
from dashboard_view.core.normalizer import normalize
from dashboard_view.core.periods import PeriodRegistry
from dashboard_view.schemas.dashboard import (
  DashboardData,
  DashboardSnapshot,
  Error,
  FetchState,
  Idle,
  Loading,
  MultiPeriodResponse,
  RawResponse,
  Ready,
)

logger = logging.getLogger(__name__)

StateListener = Callable[[FetchState], None]


class DashboardController:

  def __init__(
    self,
    client,
    config: Optional[DashboardSettings] = None,
    resolver: Optional[IdentityResolver] = None,
  ) -> None:
    self.client = client
    self.settings = config or getattr(client, "settings", None) or default_settings
    self.resolver = resolver or IdentityResolver(self.settings.IDENTITY_QUERY_PARAM)
    self.registry = PeriodRegistry()

    self._state: FetchState = Idle()
    self._data: Optional[DashboardData] = None
    self._entity_id: Optional[str] = None
    self._initialized = False
    self._sequence = 0
    self._pending_period: Optional[str] = None
    self._listeners: List[StateListener] = []
    self.last_error: Optional[DashboardError] = None

  # ------------------------------------------------------------------
  # Read-only view
  # ------------------------------------------------------------------

  @property
  def state(self) -> FetchState:
    return self._state

  @property
  def entity_id(self) -> Optional[str]:
    return self._entity_id

  @property
  def periods(self) -> List[str]:
    return self.registry.periods

  @property
  def selected_period(self) -> Optional[str]:
    return self.registry.selected

  @property
  def sequence(self) -> int:
    """Number of the latest fetch issued by this controller."""
    return self._sequence

  @property
  def can_select_period(self) -> bool:
    return isinstance(self._state, Ready) and len(self.registry) > 1

  def subscribe(self, listener: StateListener) -> Callable[[], None]:
    """Register ``listener`` for every state emitted from now on."""
    self._listeners.append(listener)

    def unsubscribe() -> None:
      if listener in self._listeners:
        self._listeners.remove(listener)

    return unsubscribe

  def snapshot(self) -> DashboardSnapshot:
    state = self._state
    if isinstance(state, Ready):
      data = state.data
    elif isinstance(state, Loading):
      data = state.previous
    else:
      data = None
    return DashboardSnapshot(
      status=state.status,
      message=state.message if isinstance(state, Error) else None,
      data=data,
      periods=self.registry.periods,
      selected_period=self.registry.selected,
      can_select_period=self.can_select_period,
      escape_hatch_url=self.settings.ESCAPE_HATCH_URL,
    )

  # ------------------------------------------------------------------
  # State transitions
  # ------------------------------------------------------------------

  def _emit(self, state: FetchState) -> None:
    logger.debug("Dashboard state %s -> %s", self._state.status.value, state.status.value)
    self._state = state
    for listener in list(self._listeners):
      listener(state)

  def _fail(self, exc: DashboardError) -> None:
    self.last_error = exc
    self._emit(Error(exc.message))

  def _begin(self) -> int:
    self._sequence += 1
    self._emit(Loading(previous=self._data))
    return self._sequence

  def _is_stale(self, sequence: int) -> bool:
    if sequence != self._sequence:
      logger.info("Discarding stale dashboard response #%d (latest is #%d)", sequence, self._sequence)
      return True
    return False

  async def _load(self, sequence: int, period: Optional[str]) -> Optional[Tuple[RawResponse, DashboardData]]:
    """Fetch and normalize; ``None`` when the outcome was discarded or failed."""
    try:
      raw = await self.client.fetch(self._entity_id, period)
      if period is None and isinstance(raw, MultiPeriodResponse) and not raw.available_periods:
        raise NoDataError(self._entity_id)
      data = normalize(raw)
    except DashboardError as exc:
      if self._is_stale(sequence):
        return None
      logger.warning("Dashboard fetch failed for entity %s: %s", self._entity_id, exc.message)
      self._pending_period = None
      self._fail(exc)
      return None

    if self._is_stale(sequence):
      return None
    return raw, data

  async def initialize(self, context: NavigationContext) -> FetchState:
    """Resolve the entity from ``context`` and perform the initial load."""
    if self._initialized:
      raise RuntimeError("DashboardController is already initialized")
    self._initialized = True

    try:
      self._entity_id = self.resolver.resolve(context)
    except AbsentIdentity as exc:
      logger.warning("No entity id in navigation context (%s)", exc.details)
      self._fail(exc)
      return self._state

    sequence = self._begin()
    outcome = await self._load(sequence, None)
    if outcome is None:
      return self._state

    raw, data = outcome
    if isinstance(raw, MultiPeriodResponse):
      self.registry.populate(raw.available_periods)
    self._data = data
    self._emit(Ready(data))
    return self._state

  async def select_period(self, period: str) -> FetchState:
    """Switch the view to ``period``; a request for the current target is a no-op."""
    if self._entity_id is None or not self.registry:
      logger.info("Ignoring period change to %s: no period loaded", period)
      return self._state
    if isinstance(self._state, Error):
      logger.info("Ignoring period change to %s: view is in error", period)
      return self._state

    target = self._pending_period if self._pending_period is not None else self.registry.selected
    if period == target:
      return self._state
    self.registry.require(period)

    self._pending_period = period
    sequence = self._begin()
    outcome = await self._load(sequence, period)
    if outcome is None:
      return self._state

    _, data = outcome
    self._pending_period = None
    self.registry.select(period)
    self._data = data
    self._emit(Ready(data))
    return self._state
