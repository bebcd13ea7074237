"""Qt-like stand-ins for item panels, renderers and data sources."""

from PySide6.QtCore import QPoint, QSize

from qvirtuallist.widgets.virtual_list_params import VirtualListParams


def make_params(**overrides) -> VirtualListParams:
    params = VirtualListParams(min_cache_entries=100)
    params.auto_configure(600, 800)
    for name, value in overrides.items():
        setattr(params, name, value)
    return params


class FakeLayout:
    def __init__(self, panel):
        self._panel = panel
        self.activate_calls = 0

    def activate(self):
        self.activate_calls += 1
        self._panel.events.append(("activate", self._panel.serial))


class FakePanel:
    """Panel whose preferred height comes from its data.

    Data may be an int (fixed height) or a callable taking the cross extent.
    """

    def __init__(self, parent, events, serial):
        self.parent = parent
        self.events = events
        self.serial = serial
        self._size = QSize(0, 0)
        self._pos = QPoint(0, 0)
        self._visible = False
        self._layout = FakeLayout(self)
        self.index = None
        self.data = None
        self.deleted = False
        self.horizontal_width = 150

    def resize(self, size):
        self._size = QSize(size)

    def move(self, point):
        self._pos = QPoint(point)

    def show(self):
        self._visible = True
        self.events.append(("show", self.serial))

    def hide(self):
        self._visible = False

    def isVisible(self):
        return self._visible

    def size(self):
        return QSize(self._size)

    def pos(self):
        return QPoint(self._pos)

    def layout(self):
        return self._layout

    def _preferred_height(self, width):
        if callable(self.data):
            return int(self.data(width))
        if self.data is None:
            return 20
        return int(self.data)

    def hasHeightForWidth(self):
        return True

    def heightForWidth(self, width):
        self.events.append(("measure", self.serial))
        return self._preferred_height(width)

    def sizeHint(self):
        if callable(self.data) or self.data is None:
            return QSize(self.horizontal_width, self._preferred_height(self._size.width()))
        return QSize(int(self.data), self._preferred_height(self._size.width()))

    def deleteLater(self):
        self.deleted = True


class FakeRenderer:
    def __init__(self):
        self.events = []
        self.created = []
        self.updates = []

    def create_item(self, parent):
        panel = FakePanel(parent, self.events, len(self.created))
        self.created.append(panel)
        return panel

    def update_item(self, panel, index, data):
        panel.index = index
        panel.data = data
        self.updates.append((panel.serial, index))
        self.events.append(("update", panel.serial))


class FakeDataSource:
    def __init__(self, items):
        self.items = list(items)
        self.data_requests = 0

    def get_item_count(self):
        return len(self.items)

    def get_item_data(self, index):
        self.data_requests += 1
        return self.items[index]


def visible_panels(state):
    return [panel for panel in state.item_to_panel.values() if panel.isVisible()]
