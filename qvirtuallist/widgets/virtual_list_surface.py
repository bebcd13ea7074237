"""Host-toolkit primitives used by the virtual list engine.

Panels are QWidgets. The engine never calls Qt directly on a panel except
through these helpers and the plain geometry/visibility methods (`resize`,
`move`, `show`, `hide`, `size`, `pos`), so any object exposing the same
methods can stand in for a widget.
"""

from PySide6.QtCore import QSize

from qvirtuallist.widgets.virtual_list_layout import VirtualListLayoutMode, make_size, cross_extent


def surface_id(panel) -> int:
    """Stable identity of a panel for the lifetime of the object."""
    return id(panel)


def relayout(panel):
    """Let the panel's layout process pending content and size changes."""
    layout = panel.layout()
    if layout is not None:
        layout.activate()


def best_size(panel, cross: int, mode: VirtualListLayoutMode) -> QSize:
    """Toolkit-computed size of `panel` with its cross-axis extent fixed to `cross`."""
    hint = panel.sizeHint()
    if mode is VirtualListLayoutMode.VERTICAL:
        height = hint.height()
        if panel.hasHeightForWidth():
            height_for_width = panel.heightForWidth(cross)
            if height_for_width > 0:
                height = height_for_width
        return make_size(max(1, height), cross, mode)
    # Horizontal panels keep their own width; only the height is stretched.
    return make_size(max(1, hint.width()), cross, mode)


def is_cross_extent(panel, cross: int, mode: VirtualListLayoutMode) -> bool:
    return cross_extent(panel.size(), mode) == cross


def destroy_surface(panel):
    panel.hide()
    panel.deleteLater()
