from PySide6.QtCore import QPoint, QSize, Qt, Signal
from PySide6.QtGui import QKeyEvent, QMouseEvent, QResizeEvent, QWheelEvent
from PySide6.QtWidgets import QScrollBar, QSizePolicy, QWidget

from qvirtuallist.utils.flow_log import FlowLogMixin
from qvirtuallist.widgets.virtual_list_errors import VirtualListResult
from qvirtuallist.widgets.virtual_list_layout import (ItemSizingMode, VirtualListLayoutMode,
                                                     main_extent)
from qvirtuallist.widgets.virtual_list_params import VirtualListParams
from qvirtuallist.widgets.virtual_list_pool import PoolStats
from qvirtuallist.widgets.virtual_list_state import (VirtualListDataSource,
                                                    VirtualListItemRenderer, VirtualListState)

# Pixels scrolled per standard wheel notch (angle delta 120).
WHEEL_STEP_PIXELS = 40


class VirtualList(QWidget, FlowLogMixin):
    """
    Scrollable list that only keeps widgets for the items in view.

    Item panels come from an `VirtualListItemRenderer` and are recycled
    through a pool; their sizes are measured with Qt's layout system and
    cached, so items may have any height (or width, when horizontal).
    """

    itemClicked = Signal(int)

    def __init__(self, parent=None,
                 layout_mode: VirtualListLayoutMode = VirtualListLayoutMode.VERTICAL,
                 params: VirtualListParams | None = None):
        super().__init__(parent)
        self.layout_mode = layout_mode
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)

        # Item panels are children of the content widget so they are clipped
        # to the viewport and never cover the scrollbar.
        self.content = QWidget(self)
        self._state = VirtualListState(self.content, layout_mode, params)

        orientation = (Qt.Orientation.Vertical if layout_mode is VirtualListLayoutMode.VERTICAL
                       else Qt.Orientation.Horizontal)
        self.scrollbar = QScrollBar(orientation, self)
        self.scrollbar.setRange(0, 0)
        self.scrollbar.valueChanged.connect(self._on_scrollbar_value_changed)
        self.scrollbar.sliderReleased.connect(self._on_slider_released)
        self._updating_scrollbar = False

    # Public API

    @property
    def state(self) -> VirtualListState:
        return self._state

    def set_data_source(self, data_source: VirtualListDataSource):
        self._state.set_data_source(data_source)
        self.update_virtual_list()

    def set_item_renderer(self, item_renderer: VirtualListItemRenderer):
        self._state.set_item_renderer(item_renderer)
        self.update_virtual_list()

    def set_item_sizing_mode(self, sizing_mode: ItemSizingMode):
        self._state.set_item_sizing_mode(sizing_mode)
        self.update_virtual_list()

    def refresh_virtual_list(self):
        """Re-measure every item, e.g. after the underlying data changed."""
        self._state.invalidate_layout()
        self.update_virtual_list()

    def update_virtual_list(self):
        self._state.update_visible_items()
        self._sync_scrollbar()

    def clear(self):
        self._state.clear_all_items()
        self._sync_scrollbar()

    def scroll_by(self, delta: int) -> bool:
        changed = self._state.scroll_by(delta)
        if changed:
            self._sync_scrollbar()
        return changed

    def scroll_to_item(self, index: int) -> VirtualListResult:
        result = self._state.scroll_to_item(index)
        if result.ok:
            self._sync_scrollbar()
        else:
            self._log_flow("VLIST", f"scroll_to_item({index}) failed: {result.error}", level="WARNING")
        return result

    def get_visible_range(self) -> range:
        return self._state.get_visible_range()

    def get_pool_stats(self) -> PoolStats:
        return self._state.get_pool_stats()

    def get_total_content_size(self) -> QSize:
        return QSize(self._state.total_content_size)

    def hit_test(self, point: QPoint) -> VirtualListResult:
        """Index of the item under `point`, in content widget coordinates."""
        return self._state.hit_test(point)

    def get_item_context_for_panel(self, panel) -> VirtualListResult:
        return self._state.get_item_context_for_panel(panel)

    def get_index_for_panel(self, panel) -> VirtualListResult:
        return self._state.get_index_for_panel(panel)

    def get_data_for_panel(self, panel, expected_type: type | None = None) -> VirtualListResult:
        return self._state.get_data_for_panel(panel, expected_type)

    def teardown(self):
        self._state.teardown()

    # Geometry

    def _layout_children(self):
        bar = self._state.params.scrollbar_size
        width, height = self.width(), self.height()
        if self.layout_mode is VirtualListLayoutMode.VERTICAL:
            content_width = max(0, width - bar)
            self.content.setGeometry(0, 0, content_width, height)
            self.scrollbar.setGeometry(content_width, 0, bar, height)
        else:
            content_height = max(0, height - bar)
            self.content.setGeometry(0, 0, width, content_height)
            self.scrollbar.setGeometry(0, content_height, width, bar)

    def _sync_scrollbar(self):
        scrollbar_state = self._state.scrollbar_state()
        self._updating_scrollbar = True
        try:
            self.scrollbar.setRange(0, scrollbar_state.maximum)
            self.scrollbar.setPageStep(scrollbar_state.page_step)
            self.scrollbar.setSingleStep(max(1, scrollbar_state.page_step // 10))
            self.scrollbar.setValue(scrollbar_state.value)
        finally:
            self._updating_scrollbar = False

    def _on_scrollbar_value_changed(self, value: int):
        if self._updating_scrollbar:
            return
        self._state.scroll_to_scrollbar_value(value)
        if not self.scrollbar.isSliderDown():
            self._sync_scrollbar()

    def _on_slider_released(self):
        if self._state.sizing_mode is ItemSizingMode.DYNAMIC_SIZE:
            # Panels moved during the drag may still carry a stale layout.
            self._state.relayout_active_panels()
        self._sync_scrollbar()

    # Events

    def resizeEvent(self, event: QResizeEvent):
        super().resizeEvent(event)
        self._layout_children()
        self._state.set_viewport_size(self.content.size())
        self.update_virtual_list()

    def wheelEvent(self, event: QWheelEvent):
        delta = event.angleDelta()
        if self.layout_mode is VirtualListLayoutMode.HORIZONTAL and delta.x() != 0:
            notches = delta.x()
        else:
            notches = delta.y()
        if notches == 0:
            super().wheelEvent(event)
            return
        pixels = int(-notches / 120 * WHEEL_STEP_PIXELS * self._state.params.mouse_wheel_multiplier)
        self.scroll_by(pixels)
        event.accept()

    def keyPressEvent(self, event: QKeyEvent):
        key = event.key()
        step = self._state.params.keyboard_scroll_amount
        page = self._state.viewport_main_extent()
        if key in (Qt.Key.Key_Up, Qt.Key.Key_Left):
            self.scroll_by(-step)
        elif key in (Qt.Key.Key_Down, Qt.Key.Key_Right):
            self.scroll_by(step)
        elif key == Qt.Key.Key_PageUp:
            self.scroll_by(-page)
        elif key == Qt.Key.Key_PageDown:
            self.scroll_by(page)
        elif key == Qt.Key.Key_Home:
            self.scroll_to_item(0)
        elif key == Qt.Key.Key_End:
            total_items = self._state.item_count()
            if total_items > 0:
                self.scroll_to_item(total_items - 1)
        else:
            super().keyPressEvent(event)
            return
        event.accept()

    def mousePressEvent(self, event: QMouseEvent):
        self.setFocus(Qt.FocusReason.MouseFocusReason)
        point = self.content.mapFrom(self, event.position().toPoint())
        if self.content.rect().contains(point):
            result = self.hit_test(point)
            if result.ok and result.value is not None:
                self._log_flow("VLIST", f"Clicked item {result.value}")
                self.itemClicked.emit(result.value)
        super().mousePressEvent(event)

    def closeEvent(self, event):
        self.teardown()
        super().closeEvent(event)

    def sizeHint(self) -> QSize:
        estimate = self._state.params.estimated_item_size
        if self.layout_mode is VirtualListLayoutMode.VERTICAL:
            return QSize(320, estimate * 6)
        return QSize(estimate * 6, 200)

    def __repr__(self):
        return f'VirtualList({self._state!r}, content={main_extent(self.get_total_content_size(), self.layout_mode)})'
