from dataclasses import dataclass
from typing import Callable

# Once the window reaches this close to the end, the last items become
# candidates too: the terminal item's real size decides where the list ends.
TAIL_GUARD_ITEMS = 3


@dataclass(frozen=True)
class VisibleItem:
    index: int
    start: int
    extent: int

    @property
    def end(self) -> int:
        return self.start + self.extent


class VisibleRangeService:
    """Computes which items intersect the viewport along the scroll axis."""

    def __init__(self, state):
        self._state = state

    def extent_of(self, index: int, *, touch: bool = False) -> int:
        """Cached extent of `index`, or the per-item estimate when unmeasured."""
        cache = self._state.size_cache
        entry = cache.get(index) if touch else cache.peek(index)
        if entry is not None:
            return entry.extent
        return self._state.params.estimated_item_size

    def find_candidates(self, total_items: int, scroll: int, viewport: int) -> set[int]:
        """First pass: cache-or-estimate only, never measures.

        The window is widened on the far side by the early-termination slack so
        items that move into view once their neighbours are measured are
        already candidates. When the widened window reaches the last
        `TAIL_GUARD_ITEMS` indices, all of them are candidates.
        """
        candidates = set()
        if total_items <= 0 or viewport <= 0:
            return candidates
        limit = scroll + viewport + self._state.params.early_termination_threshold
        offset = 0
        for index in range(total_items):
            extent = self.extent_of(index)
            start = offset
            if start + extent > scroll and start < limit:
                candidates.add(index)
            offset += extent
            if start > limit:
                break
        tail_start = max(0, total_items - TAIL_GUARD_ITEMS)
        if candidates and max(candidates) >= tail_start - 1:
            candidates.update(range(tail_start, total_items))
        return candidates

    def calculate(self, total_items: int, scroll: int, viewport: int,
                  measure: Callable[[int], int] | None = None) -> list[VisibleItem]:
        """Ordered items whose span intersects `[scroll, scroll + viewport)`.

        Second pass uses the same accumulation as the first, except uncached
        candidates may be measured; a fresh measurement feeds the running
        offset from that item on.
        """
        candidates = self.find_candidates(total_items, scroll, viewport)
        if not candidates:
            return []

        estimate = self._state.params.estimated_item_size
        limit = scroll + viewport + self._state.params.early_termination_threshold
        last_candidate = max(candidates)
        visible = []
        offset = 0
        for index in range(total_items):
            if index in candidates:
                entry = self._state.size_cache.get(index)
                if entry is not None:
                    extent = entry.extent
                elif measure is not None:
                    extent = measure(index)
                else:
                    extent = estimate
            else:
                extent = self.extent_of(index)
            start = offset
            if start + extent > scroll and start < scroll + viewport:
                visible.append(VisibleItem(index, start, extent))
            offset += extent
            if start > limit and index >= last_candidate:
                break
        return visible

    def fill_viewport(self, visible: list[VisibleItem], total_items: int, scroll: int, viewport: int,
                      measure: Callable[[int], int]) -> list[VisibleItem]:
        """Re-stack the visible items on measured extents, adding items until the viewport is covered.

        Pass 2 sizes non-candidates at the estimate; when they measure smaller
        the far end of the viewport would otherwise stay empty.
        """
        if not visible:
            return visible
        end = scroll + viewport
        filled = []
        cursor = visible[0].start
        index = visible[0].index
        while cursor < end and index < total_items:
            extent = measure(index)
            filled.append(VisibleItem(index, cursor, extent))
            cursor += extent
            index += 1
        return filled
