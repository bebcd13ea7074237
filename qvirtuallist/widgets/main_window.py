from PySide6.QtCore import QTimer
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (QApplication, QHBoxLayout, QLabel, QMainWindow, QVBoxLayout,
                               QWidget)

from qvirtuallist.models.demo_list_model import DemoListModel
from qvirtuallist.utils.settings import settings
from qvirtuallist.widgets.demo_item_renderers import (HORIZONTAL_ITEM_WIDTH, HorizontalItemRenderer,
                                                      VerticalItemRenderer)
from qvirtuallist.widgets.virtual_list import VirtualList
from qvirtuallist.widgets.virtual_list_layout import ItemSizingMode, VirtualListLayoutMode
from qvirtuallist.widgets.virtual_list_params import VirtualListParams

POOL_STATS_INTERVAL_MS = 1000


class MainWindow(QMainWindow):
    def __init__(self, app: QApplication):
        super().__init__()
        self.app = app
        self.setWindowTitle('Virtual List Demo - Vertical & Horizontal Lists')
        self.resize(1200, 600)
        geometry = settings.value('geometry')
        if geometry is not None:
            self.restoreGeometry(geometry)

        self.vertical_model = DemoListModel()
        self.horizontal_model = DemoListModel()

        self.vertical_list = VirtualList(layout_mode=VirtualListLayoutMode.VERTICAL)
        self.vertical_renderer = VerticalItemRenderer()
        self.vertical_renderer.virtual_list = self.vertical_list
        self.vertical_list.set_data_source(self.vertical_model)
        self.vertical_list.set_item_renderer(self.vertical_renderer)
        self.vertical_list.set_item_sizing_mode(ItemSizingMode.DYNAMIC_SIZE)

        horizontal_params = VirtualListParams.from_settings()
        horizontal_params.estimated_item_size = HORIZONTAL_ITEM_WIDTH
        self.horizontal_list = VirtualList(layout_mode=VirtualListLayoutMode.HORIZONTAL,
                                           params=horizontal_params)
        self.horizontal_renderer = HorizontalItemRenderer()
        self.horizontal_renderer.virtual_list = self.horizontal_list
        self.horizontal_list.set_data_source(self.horizontal_model)
        self.horizontal_list.set_item_renderer(self.horizontal_renderer)
        self.horizontal_list.set_item_sizing_mode(ItemSizingMode.FIXED_SIZE)

        self.vertical_list.itemClicked.connect(
            lambda index: self.statusBar().showMessage(f'Vertical list: item {index}', 2000))
        self.horizontal_list.itemClicked.connect(
            lambda index: self.statusBar().showMessage(f'Horizontal list: item {index}', 2000))

        self.create_central_widget()

        self.pool_stats_label = QLabel()
        self.statusBar().addPermanentWidget(self.pool_stats_label)
        self._pool_stats_timer = QTimer(self)
        self._pool_stats_timer.timeout.connect(self.update_pool_stats)
        self._pool_stats_timer.start(POOL_STATS_INTERVAL_MS)
        self.update_pool_stats()

    def create_central_widget(self):
        central_widget = QWidget()
        layout = QHBoxLayout(central_widget)
        for title, virtual_list in (('Vertical Virtual List:', self.vertical_list),
                                    ('Horizontal Virtual List:', self.horizontal_list)):
            column = QVBoxLayout()
            column.addWidget(QLabel(title))
            column.addWidget(virtual_list, stretch=1)
            layout.addLayout(column, stretch=1)
        self.setCentralWidget(central_widget)

    def update_pool_stats(self):
        parts = []
        for name, virtual_list in (('V', self.vertical_list), ('H', self.horizontal_list)):
            stats = virtual_list.get_pool_stats()
            parts.append(f'{name}: {stats.active_count} active, {stats.available_count} idle, '
                         f'hit rate {stats.hit_rate:.0%} ({stats.performance_rating()})')
        self.pool_stats_label.setText(' | '.join(parts))

    def closeEvent(self, event: QCloseEvent):
        """Save the window geometry and release pooled panels before closing."""
        settings.setValue('geometry', self.saveGeometry())
        self._pool_stats_timer.stop()
        self.vertical_list.teardown()
        self.horizontal_list.teardown()
        super().closeEvent(event)
