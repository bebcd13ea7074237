import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtCore import QEvent, QPoint, QPointF, QSize, Qt  # noqa: E402
from PySide6.QtGui import QKeyEvent, QMouseEvent  # noqa: E402
from PySide6.QtWidgets import QApplication  # noqa: E402

from qvirtuallist.models.demo_list_model import DemoListModel  # noqa: E402
from qvirtuallist.widgets.demo_item_renderers import (HorizontalItemRenderer,  # noqa: E402
                                                      VerticalItemRenderer)
from qvirtuallist.widgets.virtual_list import VirtualList  # noqa: E402
from qvirtuallist.widgets.virtual_list_layout import (ItemSizingMode,  # noqa: E402
                                                     VirtualListLayoutMode)
from qvirtuallist.widgets.virtual_list_params import VirtualListParams  # noqa: E402


@pytest.fixture(scope="module")
def app():
    instance = QApplication.instance()
    if instance is None:
        try:
            instance = QApplication([])
        except Exception as e:
            pytest.skip(f"Cannot create QApplication: {e}")
    return instance


def _params():
    params = VirtualListParams()
    params.auto_configure(400, 300)
    return params


def _vertical_list(count=200):
    virtual_list = VirtualList(layout_mode=VirtualListLayoutMode.VERTICAL, params=_params())
    renderer = VerticalItemRenderer()
    renderer.virtual_list = virtual_list
    virtual_list.set_data_source(DemoListModel(count))
    virtual_list.set_item_renderer(renderer)
    virtual_list.set_item_sizing_mode(ItemSizingMode.DYNAMIC_SIZE)
    virtual_list.resize(QSize(316, 400))
    virtual_list.show()
    QApplication.processEvents()
    return virtual_list


def test_shows_first_items(app):
    virtual_list = _vertical_list()

    visible = virtual_list.get_visible_range()

    assert visible.start == 0
    assert len(visible) > 0
    assert virtual_list.state.viewport_size == QSize(300, 400)
    for panel in virtual_list.state.item_to_panel.values():
        assert panel.isVisible()
        assert panel.width() == 300
    virtual_list.close()


def test_end_key_reaches_last_item(app):
    virtual_list = _vertical_list()

    QApplication.sendEvent(virtual_list, QKeyEvent(QEvent.Type.KeyPress, Qt.Key.Key_End,
                                                   Qt.KeyboardModifier.NoModifier))

    assert 199 in virtual_list.get_visible_range()
    panel = virtual_list.state.item_to_panel[199]
    assert panel.y() + panel.height() <= 400
    assert virtual_list.scrollbar.value() == virtual_list.scrollbar.maximum()

    QApplication.sendEvent(virtual_list, QKeyEvent(QEvent.Type.KeyPress, Qt.Key.Key_Home,
                                                   Qt.KeyboardModifier.NoModifier))
    assert virtual_list.get_visible_range().start == 0
    virtual_list.close()


def test_page_down_scrolls_one_viewport(app):
    virtual_list = _vertical_list()

    QApplication.sendEvent(virtual_list, QKeyEvent(QEvent.Type.KeyPress, Qt.Key.Key_PageDown,
                                                   Qt.KeyboardModifier.NoModifier))

    assert virtual_list.state.scroll_offset() == 400
    virtual_list.close()


def test_scrollbar_drag_scrolls_list(app):
    virtual_list = _vertical_list()

    virtual_list.scrollbar.setValue(virtual_list.scrollbar.maximum() // 2)

    assert virtual_list.state.scroll_offset() > 0
    assert virtual_list.get_visible_range().start > 0
    virtual_list.close()


def test_click_emits_item_index(app):
    virtual_list = _vertical_list()
    clicked = []
    virtual_list.itemClicked.connect(clicked.append)

    event = QMouseEvent(QEvent.Type.MouseButtonPress, QPointF(2, 2), QPointF(2, 2),
                        Qt.MouseButton.LeftButton, Qt.MouseButton.LeftButton,
                        Qt.KeyboardModifier.NoModifier)
    virtual_list.mousePressEvent(event)

    assert clicked == [0]
    assert virtual_list.hit_test(QPoint(-5, 0)).ok is False
    virtual_list.close()


def test_demo_button_resolves_item_at_click_time(app, capsys):
    virtual_list = _vertical_list()
    renderer = virtual_list.state.item_renderer
    panel = virtual_list.state.item_to_panel[0]

    virtual_list.scroll_to_item(100)
    panel.button.click()

    output = capsys.readouterr().out
    context = virtual_list.get_item_context_for_panel(panel)
    if context.ok:
        assert f"Index: {context.value.index}" in output
    else:
        assert "unassigned panel" in output
    assert renderer.virtual_list is virtual_list
    virtual_list.close()


def test_horizontal_list_uses_fixed_width_panels(app):
    virtual_list = VirtualList(layout_mode=VirtualListLayoutMode.HORIZONTAL, params=_params())
    renderer = HorizontalItemRenderer()
    renderer.virtual_list = virtual_list
    virtual_list.set_data_source(DemoListModel(50))
    virtual_list.set_item_renderer(renderer)
    virtual_list.set_item_sizing_mode(ItemSizingMode.FIXED_SIZE)
    virtual_list.resize(QSize(700, 316))
    virtual_list.show()
    QApplication.processEvents()

    panels = sorted(virtual_list.state.item_to_panel.items())

    assert panels[0][0] == 0
    assert all(panel.width() == 200 for _, panel in panels)
    assert [panel.x() for _, panel in panels[:3]] == [0, 200, 400]
    assert virtual_list.get_total_content_size().width() == 50 * virtual_list.state.params.estimated_item_size
    virtual_list.close()


def test_clear_releases_panels(app):
    virtual_list = _vertical_list()
    panels = list(virtual_list.state.item_to_panel.values())

    virtual_list.clear()

    assert virtual_list.get_pool_stats().active_count == 0
    assert virtual_list.get_pool_stats().available_count == 0
    assert all(not panel.isVisible() for panel in panels)
    virtual_list.close()
