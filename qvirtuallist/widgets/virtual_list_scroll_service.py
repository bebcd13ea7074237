from dataclasses import dataclass

from qvirtuallist.widgets.virtual_list_layout import ItemSizingMode

SCROLLBAR_RANGE = 1000
MIN_THUMB_RATIO = 0.05
MAX_THUMB_RATIO = 0.95


@dataclass(frozen=True)
class ScrollbarState:
    value: int
    maximum: int
    page_step: int


class ScrollReconciler:
    """Keeps total content extent and scrollbar parameters in line with item sizes.

    Totals mix measured and estimated extents. Near the end of the list the
    terminal item is measured for real and a padded total replaces the
    estimate, so the last item cannot end up clipped.
    """

    def __init__(self, state):
        self._state = state
        self.padded_total = None

    def reset(self):
        self.padded_total = None

    @property
    def at_end(self) -> bool:
        return self.padded_total is not None

    def _extent(self, index: int) -> int:
        entry = self._state.size_cache.peek(index)
        if entry is not None:
            return entry.extent
        return self._state.params.estimated_item_size

    def offset_for_item(self, index: int) -> int:
        """Start offset of `index` along the scroll axis."""
        return sum(self._extent(i) for i in range(index))

    def total_extent(self, total_items: int) -> int:
        """Unpadded total extent.

        Fixed-size lists use count x estimate so the figure does not move as
        items get measured.
        """
        if self._state.sizing_mode is ItemSizingMode.FIXED_SIZE:
            return total_items * self._state.params.estimated_item_size
        return self.offset_for_item(total_items)

    def effective_total(self, total_items: int) -> int:
        if self.padded_total is not None:
            return self.padded_total
        return self.total_extent(total_items)

    def base_max_scroll(self, total_items: int) -> int:
        return max(0, self.total_extent(total_items) - self._state.viewport_main_extent())

    def max_scroll(self, total_items: int) -> int:
        if self.padded_total is not None:
            return max(0, self.padded_total - self._state.viewport_main_extent())
        return self.base_max_scroll(total_items)

    def resolve_terminal_total(self, total_items: int) -> int:
        """Total extent with the terminal item measured for real, plus padding."""
        last = total_items - 1
        terminal = self._state.measure_item(last, force=True)
        padded = self.offset_for_item(last) + terminal + self._state.params.end_padding
        self._state._log_flow("SCROLL", f"End of list: item {last} measures {terminal}, padded total {padded}",
                              throttle_key="scroll_end", every_s=0.5)
        return padded

    def settle_end(self, total_items: int) -> int:
        """Recompute the padded total from the cache after neighbours got measured."""
        last = total_items - 1
        self.padded_total = self.offset_for_item(last) + self._extent(last) + self._state.params.end_padding
        return max(0, self.padded_total - self._state.viewport_main_extent())

    def clamp_offset(self, requested: int, total_items: int) -> int:
        """Clamp a requested scroll offset, resolving the end of the list when reached."""
        if total_items <= 0:
            self.padded_total = None
            return 0
        requested = max(0, requested)
        base_max = self.base_max_scroll(total_items)
        if self.padded_total is not None and base_max <= requested <= self.max_scroll(total_items):
            # Inside the already resolved end region.
            return requested
        if requested >= base_max and (base_max > 0 or requested > 0):
            self.padded_total = self.resolve_terminal_total(total_items)
            return max(0, self.padded_total - self._state.viewport_main_extent())
        self.padded_total = None
        return requested

    def _thumb_size(self, total_items: int) -> int:
        total = self.effective_total(total_items)
        viewport = self._state.viewport_main_extent()
        if total <= 0:
            ratio = MAX_THUMB_RATIO
        else:
            ratio = min(MAX_THUMB_RATIO, max(MIN_THUMB_RATIO, viewport / total))
        return max(1, int(round(SCROLLBAR_RANGE * ratio)))

    def scrollbar_state(self, total_items: int) -> ScrollbarState:
        thumb = self._thumb_size(total_items)
        maximum = SCROLLBAR_RANGE - thumb
        max_scroll = self.max_scroll(total_items)
        offset = self._state.scroll_offset()
        if max_scroll > 0:
            value = int(round(offset * maximum / max_scroll))
        else:
            value = 0
        return ScrollbarState(value=max(0, min(maximum, value)), maximum=maximum, page_step=thumb)

    def offset_from_scrollbar(self, value: int, total_items: int) -> int:
        """Scroll offset for a scrollbar thumb position."""
        maximum = SCROLLBAR_RANGE - self._thumb_size(total_items)
        if maximum <= 0 or value >= maximum:
            requested = max(self.base_max_scroll(total_items), self.max_scroll(total_items))
        else:
            requested = int(round(max(0, value) * self.max_scroll(total_items) / maximum))
        return self.clamp_offset(requested, total_items)
