"""Toolkit-independent engine behind the VirtualList widget."""

from typing import Any, Protocol, runtime_checkable

from PySide6.QtCore import QPoint, QSize

from qvirtuallist.utils.flow_log import FlowLogMixin
from qvirtuallist.widgets.virtual_list_batch_service import BatchReport, LayoutBatchService
from qvirtuallist.widgets.virtual_list_context import ItemContext, PanelContextRegistry
from qvirtuallist.widgets.virtual_list_errors import VirtualListError, VirtualListResult
from qvirtuallist.widgets.virtual_list_invalidation_service import CacheInvalidationService
from qvirtuallist.widgets.virtual_list_layout import (ItemSizingMode, VirtualListLayoutMode,
                                                     cross_extent, main_coordinate, main_extent,
                                                     make_point, make_size)
from qvirtuallist.widgets.virtual_list_params import VirtualListParams
from qvirtuallist.widgets.virtual_list_pool import ItemPool, PoolStats
from qvirtuallist.widgets.virtual_list_range_service import VisibleRangeService
from qvirtuallist.widgets.virtual_list_scroll_service import ScrollbarState, ScrollReconciler
from qvirtuallist.widgets.virtual_list_size_cache import SizeCache
from qvirtuallist.widgets.virtual_list_surface import best_size, relayout, surface_id

# Viewport changes above this many pixels re-derive the tuning parameters.
AUTO_CONFIGURE_THRESHOLD = 50
# Range recomputations allowed to settle the offset at the end of the list.
END_SETTLE_PASSES = 4


@runtime_checkable
class VirtualListDataSource(Protocol):
    def get_item_count(self) -> int:
        ...

    def get_item_data(self, index: int) -> Any:
        ...


@runtime_checkable
class VirtualListItemRenderer(Protocol):
    def create_item(self, parent):
        """Build a new, empty item panel as a child of `parent`."""
        ...

    def update_item(self, panel, index: int, data: Any) -> None:
        """Show item `index` with `data` in an existing panel."""
        ...


class SequenceDataSource:
    """Data source over any Python sequence."""

    def __init__(self, items):
        self._items = items

    def get_item_count(self) -> int:
        return len(self._items)

    def get_item_data(self, index: int):
        return self._items[index]


class VirtualListState(FlowLogMixin):
    """Owns the pool, size cache, panel registry and services of one list."""

    def __init__(self, parent, layout_mode: VirtualListLayoutMode = VirtualListLayoutMode.VERTICAL,
                 params: VirtualListParams | None = None):
        self.parent = parent
        self.layout_mode = layout_mode
        self.params = params if params is not None else VirtualListParams.from_settings()

        self.data_source = None
        self.item_renderer = None
        self.sizing_mode = ItemSizingMode.DYNAMIC_SIZE

        self.pool = ItemPool(self.params.pool_target_size)
        self.size_cache = SizeCache(self.params.max_cache_entries, self.params.measurement_tolerance)
        self.registry = PanelContextRegistry()
        self.item_to_panel = {}

        self.viewport_size = QSize(0, 0)
        self.scroll_position = QPoint(0, 0)
        self.total_content_size = QSize(0, 0)
        self.visible_range = range(0)
        # Cross extent the cache was last reconciled against.
        self.reference_cross_extent = 0
        self.update_cycle = 0
        self._refresh_pending = False

        self.range_service = VisibleRangeService(self)
        self.batch_service = LayoutBatchService(self)
        self.invalidation_service = CacheInvalidationService(self)
        self.scroll_service = ScrollReconciler(self)

    def __repr__(self):
        return (f'VirtualListState(mode={self.layout_mode.value}, sizing={self.sizing_mode.value}, '
                f'active={len(self.item_to_panel)}, cached={len(self.size_cache)}, '
                f'generation={self.size_cache.generation}, viewport={self.viewport_size.width()}x'
                f'{self.viewport_size.height()}, scroll={self.scroll_offset()}, '
                f'visible={self.visible_range})')

    # Geometry helpers

    def viewport_main_extent(self) -> int:
        return main_extent(self.viewport_size, self.layout_mode)

    def viewport_cross_extent(self) -> int:
        return cross_extent(self.viewport_size, self.layout_mode)

    def scroll_offset(self) -> int:
        return main_coordinate(self.scroll_position, self.layout_mode)

    def _set_scroll_offset(self, offset: int):
        self.scroll_position = make_point(offset, 0, self.layout_mode)

    def item_count(self) -> int:
        if self.data_source is None:
            return 0
        return max(0, int(self.data_source.get_item_count()))

    # Configuration

    def set_data_source(self, data_source: VirtualListDataSource):
        self.hide_all_items()
        self.data_source = data_source
        self.clear_size_cache()

    def set_item_renderer(self, item_renderer: VirtualListItemRenderer):
        # Panels built by the previous renderer cannot be reused by this one.
        self.hide_all_items()
        self.pool.clear_all()
        self.item_renderer = item_renderer
        self.clear_size_cache()

    def set_item_sizing_mode(self, sizing_mode: ItemSizingMode):
        self.sizing_mode = sizing_mode
        self.scroll_service.reset()

    def set_viewport_size(self, size: QSize):
        old = self.viewport_size
        self.viewport_size = QSize(size)
        if (
            abs(old.width() - size.width()) > AUTO_CONFIGURE_THRESHOLD
            or abs(old.height() - size.height()) > AUTO_CONFIGURE_THRESHOLD
        ):
            self.params.auto_configure(self.viewport_main_extent(), self.viewport_cross_extent())
            self.pool.set_target_size(self.params.pool_target_size)
            self.size_cache.set_capacity(self.params.max_cache_entries)
        self.scroll_service.reset()

    def create_panel(self):
        return self.item_renderer.create_item(self.parent)

    # Cache and panel bookkeeping

    def clear_size_cache(self):
        self.size_cache.clear()
        self.scroll_service.reset()

    def hide_all_items(self):
        for panel in self.item_to_panel.values():
            panel.hide()
            self.registry.remove(surface_id(panel))
            self.pool.return_item(panel)
        self.item_to_panel.clear()
        self.visible_range = range(0)

    def invalidate_layout(self):
        """Forget every measurement and re-create visible content on the next update."""
        self.hide_all_items()
        self.clear_size_cache()
        self._refresh_pending = True

    def clear_all_items(self):
        self.hide_all_items()
        self.pool.clear_all()

    def teardown(self):
        self.clear_all_items()
        self.registry.clear()
        self.size_cache.clear()

    def measure_item(self, index: int, *, force: bool = False) -> int:
        """Extent of `index` along the scroll axis, measuring it if not cached."""
        if not force:
            entry = self.size_cache.get(index)
            if entry is not None:
                return entry.extent
        cross = self.viewport_cross_extent()
        panel = self.pool.get_or_create(self.parent, self.create_panel)
        try:
            panel.hide()
            panel.resize(make_size(self.params.temporary_panel_size, cross, self.layout_mode))
            self.item_renderer.update_item(panel, index, self.data_source.get_item_data(index))
            relayout(panel)
            size = best_size(panel, cross, self.layout_mode)
        finally:
            self.pool.return_item(panel)
        entry = self.size_cache.record_measurement(index, size, main_extent(size, self.layout_mode), cross)
        return entry.extent

    # Update sequence

    def update_visible_items(self) -> BatchReport | None:
        """Invalidate, compute the visible range, apply the batch, reconcile totals."""
        self.update_cycle += 1
        self.size_cache.begin_cycle()
        if self.data_source is None or self.item_renderer is None:
            return None

        total_items = self.item_count()
        if total_items == 0:
            self.hide_all_items()
            self.scroll_service.reset()
            self._set_scroll_offset(0)
            self.total_content_size = make_size(0, self.viewport_cross_extent(), self.layout_mode)
            return BatchReport()

        force_refresh = self._refresh_pending
        cross = self.viewport_cross_extent()
        if self.reference_cross_extent == 0:
            self.reference_cross_extent = cross
        elif abs(cross - self.reference_cross_extent) >= self.params.width_change_threshold:
            self.invalidation_service.on_cross_extent_change(self.reference_cross_extent, cross)
            self.reference_cross_extent = cross
            self.scroll_service.reset()
            force_refresh = True

        offset = self.scroll_offset()
        if offset > self.scroll_service.max_scroll(total_items):
            offset = self.scroll_service.clamp_offset(offset, total_items)
        viewport = self.viewport_main_extent()

        visible = []
        for _ in range(END_SETTLE_PASSES):
            visible = self.range_service.calculate(total_items, offset, viewport, measure=self.measure_item)
            if not self.scroll_service.at_end or offset < self.scroll_service.max_scroll(total_items):
                break
            settled = self.scroll_service.settle_end(total_items)
            if settled == offset:
                break
            offset = settled
        else:
            visible = self.range_service.calculate(total_items, offset, viewport, measure=self.measure_item)
        visible = self.range_service.fill_viewport(visible, total_items, offset, viewport, self.measure_item)
        self._set_scroll_offset(offset)

        report = self.batch_service.apply(visible, offset, force_refresh=force_refresh)
        self._refresh_pending = False

        if visible:
            self.visible_range = range(visible[0].index, visible[-1].index + 1)
        else:
            self.visible_range = range(0)
        self.total_content_size = make_size(self.scroll_service.effective_total(total_items), cross,
                                            self.layout_mode)
        self._log_flow(
            "VLIST",
            f"Cycle {self.update_cycle}: offset={offset} visible={self.visible_range.start}-"
            f"{self.visible_range.stop} activated={report.activated} refreshed={report.refreshed} "
            f"reclaimed={report.reclaimed} cached={len(self.size_cache)}",
            throttle_key="update_cycle", every_s=0.25,
        )
        return report

    def relayout_active_panels(self):
        for panel in self.item_to_panel.values():
            relayout(panel)

    # Scrolling

    def scroll_to_offset(self, offset: int) -> bool:
        """Move to `offset` (clamped). Returns whether the position changed."""
        previous = self.scroll_offset()
        new_offset = self.scroll_service.clamp_offset(offset, self.item_count())
        if new_offset == previous:
            return False
        self._set_scroll_offset(new_offset)
        self.update_visible_items()
        return self.scroll_offset() != previous

    def scroll_by(self, delta: int) -> bool:
        if delta == 0:
            return False
        return self.scroll_to_offset(self.scroll_offset() + delta)

    def scroll_to_item(self, index: int) -> VirtualListResult:
        if self.data_source is None:
            return VirtualListResult.failure(VirtualListError.no_data_source())
        total_items = self.item_count()
        if index < 0 or index >= total_items:
            return VirtualListResult.failure(VirtualListError.invalid_index(index, total_items))
        if self.item_renderer is None:
            return VirtualListResult.failure(VirtualListError.no_renderer())
        target = self.scroll_service.offset_for_item(index)
        self._set_scroll_offset(self.scroll_service.clamp_offset(target, total_items))
        self.update_visible_items()
        return VirtualListResult.success(self.scroll_offset())

    def scrollbar_state(self) -> ScrollbarState:
        return self.scroll_service.scrollbar_state(self.item_count())

    def scroll_to_scrollbar_value(self, value: int) -> bool:
        offset = self.scroll_service.offset_from_scrollbar(value, self.item_count())
        return self.scroll_to_offset(offset)

    # Queries

    def get_visible_range(self) -> range:
        return self.visible_range

    def get_pool_stats(self) -> PoolStats:
        return self.pool.stats()

    def hit_test(self, point: QPoint) -> VirtualListResult:
        if point.x() < 0 or point.y() < 0:
            return VirtualListResult.failure(VirtualListError.invalid_config(
                f'Invalid hit test coordinates: ({point.x()}, {point.y()})'))
        for index, panel in self.item_to_panel.items():
            pos = panel.pos()
            size = panel.size()
            if (pos.x() <= point.x() < pos.x() + size.width()
                    and pos.y() <= point.y() < pos.y() + size.height()):
                return VirtualListResult.success(index)
        return VirtualListResult.success(None)

    def get_item_context_for_panel(self, panel) -> VirtualListResult:
        context = self.registry.get(surface_id(panel))
        if context is None:
            return VirtualListResult.failure(VirtualListError.context_not_found('get_item_context_for_panel'))
        return VirtualListResult.success(context)

    def get_index_for_panel(self, panel) -> VirtualListResult:
        context = self.registry.get(surface_id(panel))
        if context is None:
            return VirtualListResult.failure(VirtualListError.context_not_found('get_index_for_panel'))
        return VirtualListResult.success(context.index)

    def get_data_for_panel(self, panel, expected_type: type | None = None) -> VirtualListResult:
        context: ItemContext | None = self.registry.get(surface_id(panel))
        if context is None or (expected_type is not None and not isinstance(context.data, expected_type)):
            return VirtualListResult.failure(VirtualListError.context_not_found('get_data_for_panel'))
        return VirtualListResult.success(context.data)
