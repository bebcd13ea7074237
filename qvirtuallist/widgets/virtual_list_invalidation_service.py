from qvirtuallist.widgets.virtual_list_layout import ItemSizingMode

# Widths at which wrapped text commonly changes its line count.
COMMON_WRAP_BREAKPOINTS = (320, 375, 414, 480, 600, 768, 800, 1024, 1280, 1440, 1920)

FIXED_SIZE_SWEEP_THRESHOLD = 100
STALE_GENERATION_SPAN = 8
FULL_CLEAR_RATIO = 0.30
PARTIAL_RATIO = 0.10
MEASURED_AT_DRIFT_RATIO = 0.15
PROXIMITY_VIEWPORTS = 2


def crosses_breakpoint(old: int, new: int) -> bool:
    low, high = min(old, new), max(old, new)
    return any(low < breakpoint <= high for breakpoint in COMMON_WRAP_BREAKPOINTS)


class CacheInvalidationService:
    """Decides which cached sizes survive a viewport cross-axis change.

    Interactive resizes deliver many small changes; each one only drops the
    entries it can actually have made stale.
    """

    def __init__(self, state):
        self._state = state

    def on_cross_extent_change(self, old: int, new: int) -> int:
        """Invalidate stale entries and return how many were dropped."""
        state = self._state
        if old <= 0 or abs(new - old) < state.params.width_change_threshold:
            return 0

        cache = state.size_cache
        delta = abs(new - old)
        if state.sizing_mode is ItemSizingMode.FIXED_SIZE:
            invalidated = self._sweep_stale_entries() if delta > FIXED_SIZE_SWEEP_THRESHOLD else 0
            cache.advance_generation()
            reason = "fixed-size sweep"
        else:
            ratio = delta / old
            if ratio > FULL_CLEAR_RATIO:
                invalidated = len(cache)
                cache.clear()
                reason = f"full clear ({ratio:.0%})"
            elif ratio >= PARTIAL_RATIO:
                invalidated = self._drop_drifted_entries(new)
                cache.advance_generation()
                reason = f"drift > {MEASURED_AT_DRIFT_RATIO:.0%} ({ratio:.0%})"
            else:
                invalidated = self._drop_breakpoint_entries(new)
                cache.advance_generation()
                reason = f"wrap breakpoints ({ratio:.1%})"

        state._log_flow("CACHE", f"Cross extent {old} -> {new}: {reason}, invalidated {invalidated}",
                        level="INFO" if invalidated else "DEBUG")
        return invalidated

    def _sweep_stale_entries(self) -> int:
        cache = self._state.size_cache
        oldest_kept = cache.generation - STALE_GENERATION_SPAN
        stale = [index for index, entry in cache.entries() if entry.generation < oldest_kept]
        for index in stale:
            cache.remove(index)
        return len(stale)

    def _drop_drifted_entries(self, new: int) -> int:
        cache = self._state.size_cache
        drifted = [
            index for index, entry in cache.entries()
            if entry.measured_at <= 0
            or abs(entry.measured_at - new) / entry.measured_at > MEASURED_AT_DRIFT_RATIO
        ]
        for index in drifted:
            cache.remove(index)
        return len(drifted)

    def proximity_window(self) -> range:
        """Indices near the current position: visible items plus a margin each side."""
        state = self._state
        visible = state.visible_range
        per_viewport = state.viewport_main_extent() // max(1, state.params.estimated_item_size) + 1
        margin = PROXIMITY_VIEWPORTS * per_viewport
        if len(visible) == 0:
            center = state.scroll_offset() // max(1, state.params.estimated_item_size)
            return range(max(0, center - margin), center + per_viewport + margin)
        return range(max(0, visible.start - margin), visible.stop + margin)

    def _drop_breakpoint_entries(self, new: int) -> int:
        cache = self._state.size_cache
        window = self.proximity_window()
        crossing = [
            index for index, entry in cache.entries()
            if index in window and crosses_breakpoint(entry.measured_at, new)
        ]
        for index in crossing:
            cache.remove(index)
        return len(crossing)
