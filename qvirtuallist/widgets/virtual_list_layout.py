from enum import Enum

from PySide6.QtCore import QPoint, QSize


class VirtualListLayoutMode(Enum):
    """Scroll axis of a virtual list."""

    # Items stacked top to bottom, each stretched to the viewport width.
    VERTICAL = 'vertical'
    # Items laid out left to right, each stretched to the viewport height.
    HORIZONTAL = 'horizontal'


class ItemSizingMode(Enum):
    """How item extents react to viewport cross-axis changes."""

    # Size does not depend on the viewport (images, fixed text).
    FIXED_SIZE = 'fixed'
    # Content reflows with the viewport (wrapped text, responsive panels).
    DYNAMIC_SIZE = 'dynamic'


def main_extent(size: QSize, mode: VirtualListLayoutMode) -> int:
    """Extent of `size` along the scroll axis."""
    if mode is VirtualListLayoutMode.VERTICAL:
        return size.height()
    return size.width()


def cross_extent(size: QSize, mode: VirtualListLayoutMode) -> int:
    """Extent of `size` across the scroll axis."""
    if mode is VirtualListLayoutMode.VERTICAL:
        return size.width()
    return size.height()


def make_size(main: int, cross: int, mode: VirtualListLayoutMode) -> QSize:
    if mode is VirtualListLayoutMode.VERTICAL:
        return QSize(cross, main)
    return QSize(main, cross)


def make_point(main: int, cross: int, mode: VirtualListLayoutMode) -> QPoint:
    if mode is VirtualListLayoutMode.VERTICAL:
        return QPoint(cross, main)
    return QPoint(main, cross)


def main_coordinate(point: QPoint, mode: VirtualListLayoutMode) -> int:
    if mode is VirtualListLayoutMode.VERTICAL:
        return point.y()
    return point.x()
