"""Reusable item panels for the virtual list."""

import time
from dataclasses import dataclass
from typing import Callable

from qvirtuallist.utils.flow_log import FlowLogMixin
from qvirtuallist.widgets.virtual_list_surface import destroy_surface, surface_id


@dataclass
class PoolStats:
    available_count: int
    active_count: int
    target_size: int
    max_size: int
    total_created: int
    total_reused: int
    total_requests: int
    hit_rate: float
    efficiency_score: float
    utilization: float

    def is_healthy(self) -> bool:
        return self.hit_rate > 0.7 and self.utilization < 0.9 and self.efficiency_score > 0.6

    def performance_rating(self) -> str:
        if self.efficiency_score > 0.8:
            return 'Excellent'
        if self.efficiency_score > 0.6:
            return 'Good'
        return 'Poor'


class ItemPool(FlowLogMixin):
    """
    Tracks ownership of item panels so they can be recycled instead of rebuilt.

    A panel is either idle (in the pool) or active (handed out). The pool does
    not touch visibility; showing and hiding is up to the caller.
    """

    OPTIMIZATION_INTERVAL_S = 5.0
    EFFICIENCY_TARGET = 0.8
    MIN_TARGET_SIZE = 4

    def __init__(self, target_size: int = 10):
        self._idle = []
        self._active = {}  # surface id -> panel
        self.target_size = max(1, target_size)
        self.max_size = self.target_size * 2

        self.total_created = 0
        self.total_reused = 0
        self.total_requests = 0
        self._hit_rate_history = []
        self._last_optimization = time.monotonic()

    @property
    def available_count(self) -> int:
        return len(self._idle)

    @property
    def active_count(self) -> int:
        return len(self._active)

    def owns(self, panel) -> bool:
        return surface_id(panel) in self._active or any(p is panel for p in self._idle)

    def is_active(self, panel) -> bool:
        return surface_id(panel) in self._active

    def get_or_create(self, parent, factory: Callable[[], object]):
        """Hand out an idle panel, or build a new one with `factory()`."""
        del parent  # factory already captures the parent
        self.total_requests += 1
        if self._idle:
            panel = self._idle.pop()
            self.total_reused += 1
        else:
            panel = factory()
            self.total_created += 1
            self._maybe_optimize()
        self._active[surface_id(panel)] = panel
        return panel

    def return_item(self, panel):
        """Mark an active panel idle again. Its content is left as is."""
        panel_id = surface_id(panel)
        if self._active.pop(panel_id, None) is None:
            self._log_flow("POOL", f"Ignoring return of panel {panel_id} not handed out by this pool",
                           level="WARNING")
            return
        self._idle.append(panel)

    def clear_all(self):
        """Destroy every panel this pool knows about, idle or active."""
        destroyed = len(self._idle) + len(self._active)
        for panel in self._idle:
            destroy_surface(panel)
        for panel in self._active.values():
            destroy_surface(panel)
        self._idle.clear()
        self._active.clear()
        self._hit_rate_history.clear()
        self._last_optimization = time.monotonic()
        if destroyed:
            self._log_flow("POOL", f"Destroyed {destroyed} pooled panels")

    def hit_rate(self) -> float:
        if self.total_requests == 0:
            return 0.0
        return self.total_reused / self.total_requests

    def efficiency_score(self) -> float:
        size_efficiency = 1.0
        if self.max_size > 0:
            size_efficiency = max(0.0, 1.0 - len(self._idle) / self.max_size)
        return self.hit_rate() * 0.7 + size_efficiency * 0.3

    def stats(self) -> PoolStats:
        return PoolStats(
            available_count=len(self._idle),
            active_count=len(self._active),
            target_size=self.target_size,
            max_size=self.max_size,
            total_created=self.total_created,
            total_reused=self.total_reused,
            total_requests=self.total_requests,
            hit_rate=self.hit_rate(),
            efficiency_score=self.efficiency_score(),
            utilization=len(self._idle) / self.target_size if self.target_size > 0 else 0.0,
        )

    def set_target_size(self, target_size: int):
        self.target_size = max(1, target_size)
        self.max_size = max(self.max_size, self.target_size * 2)

    def _maybe_optimize(self):
        """Nudge the target size toward the desired hit rate. Diagnostics only."""
        now = time.monotonic()
        if now - self._last_optimization < self.OPTIMIZATION_INTERVAL_S:
            return
        self._last_optimization = now

        self._hit_rate_history.append(self.hit_rate())
        if len(self._hit_rate_history) > 10:
            self._hit_rate_history.pop(0)
        avg_hit_rate = sum(self._hit_rate_history) / len(self._hit_rate_history)

        if avg_hit_rate < self.EFFICIENCY_TARGET - 0.1:
            self.target_size = min(self.target_size + 2, self.max_size)
        elif avg_hit_rate > self.EFFICIENCY_TARGET + 0.1 and self.target_size > self.MIN_TARGET_SIZE:
            self.target_size = max(self.target_size - 1, self.MIN_TARGET_SIZE)
        self._log_flow("POOL", f"Hit rate {avg_hit_rate:.2f}, target size {self.target_size}",
                       throttle_key="pool_optimize", every_s=5.0)
