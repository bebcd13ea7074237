from dataclasses import dataclass

from qvirtuallist.widgets.virtual_list_layout import (ItemSizingMode, main_extent, make_point,
                                                     make_size)
from qvirtuallist.widgets.virtual_list_surface import (best_size, is_cross_extent, relayout,
                                                      surface_id)


@dataclass
class BatchReport:
    activated: int = 0
    refreshed: int = 0
    positioned: int = 0
    reclaimed: int = 0

    @property
    def touched(self) -> int:
        return self.activated + self.refreshed


class LayoutBatchService:
    """Applies one visible-range recomputation to the panels in ordered phases:

    1. set content of new/stale panels (hidden, provisional size)
    2. lay out every touched panel once
    3. measure touched panels (must follow 2, earlier reads are stale)
    4. commit measurements to the size cache
    5. size, move and show visible panels
    6. hide departed panels and return them to the pool
    """

    def __init__(self, state):
        self._state = state

    def apply(self, visible_items, scroll: int, *, force_refresh: bool = False) -> BatchReport:
        state = self._state
        mode = state.layout_mode
        cross = state.viewport_cross_extent()
        report = BatchReport()

        touched = self._prepare_content(visible_items, cross, force_refresh, report)

        for _, panel in touched:
            relayout(panel)

        measured = {index: best_size(panel, cross, mode) for index, panel in touched}

        committed = {}
        for index, size in measured.items():
            entry = state.size_cache.record_measurement(index, size, main_extent(size, mode), cross)
            committed[index] = entry.extent

        self._position_and_show(visible_items, committed, scroll, cross, report)
        self._reclaim_hidden({item.index for item in visible_items}, report)
        if report.touched or report.reclaimed:
            state._log_flow("BATCH", f"Loaded {report.touched} panels ({report.activated} newly active), "
                                     f"reclaimed {report.reclaimed}, idle {state.pool.available_count}",
                            throttle_key="batch_apply", every_s=0.25)
        return report

    def _needs_refresh(self, index: int, panel, cross: int) -> bool:
        state = self._state
        if state.size_cache.peek(index) is None:
            return True
        if state.sizing_mode is ItemSizingMode.DYNAMIC_SIZE:
            return not is_cross_extent(panel, cross, state.layout_mode)
        return False

    def _load_content(self, panel, index: int, cross: int):
        state = self._state
        panel.hide()
        panel.resize(make_size(state.params.temporary_panel_size, cross, state.layout_mode))
        data = state.data_source.get_item_data(index)
        state.item_renderer.update_item(panel, index, data)
        state.registry.store(surface_id(panel), index, data)

    def _prepare_content(self, visible_items, cross: int, force_refresh: bool, report: BatchReport):
        state = self._state
        touched = []
        for item in visible_items:
            panel = state.item_to_panel.get(item.index)
            if panel is None:
                panel = state.pool.get_or_create(state.parent, state.create_panel)
                state.item_to_panel[item.index] = panel
                report.activated += 1
            elif force_refresh or self._needs_refresh(item.index, panel, cross):
                report.refreshed += 1
            else:
                continue
            self._load_content(panel, item.index, cross)
            touched.append((item.index, panel))
        return touched

    def _position_and_show(self, visible_items, committed: dict, scroll: int, cross: int,
                           report: BatchReport):
        state = self._state
        mode = state.layout_mode
        if not visible_items:
            return
        cursor = visible_items[0].start
        for item in visible_items:
            panel = state.item_to_panel[item.index]
            extent = committed.get(item.index, item.extent)
            panel.resize(make_size(extent, cross, mode))
            panel.move(make_point(cursor - scroll, 0, mode))
            panel.show()
            cursor += extent
            report.positioned += 1

    def _reclaim_hidden(self, visible_indices: set, report: BatchReport):
        state = self._state
        for index in [i for i in state.item_to_panel if i not in visible_indices]:
            panel = state.item_to_panel.pop(index)
            panel.hide()
            state.registry.remove(surface_id(panel))
            state.pool.return_item(panel)
            report.reclaimed += 1
