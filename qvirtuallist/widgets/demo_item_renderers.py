from PySide6.QtCore import QSize, Qt
from PySide6.QtWidgets import QFrame, QLabel, QLayout, QPushButton, QVBoxLayout, QWidget

from qvirtuallist.models.demo_list_model import DemoListItem

HORIZONTAL_ITEM_WIDTH = 200


class DemoItemPanel(QFrame):
    """Title, word-wrapped description and a button."""

    def __init__(self, parent: QWidget, button_text: str):
        super().__init__(parent)
        self.setFrameShape(QFrame.Shape.StyledPanel)
        self.fixed_width = None
        self.button_text = button_text
        self.title_label = QLabel(self)
        font = self.title_label.font()
        font.setBold(True)
        self.title_label.setFont(font)
        self.description_label = QLabel(self)
        self.description_label.setWordWrap(True)
        self.description_label.setAlignment(Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignTop)
        self.button = QPushButton(button_text, self)

        layout = QVBoxLayout(self)
        # The list decides panel sizes; the layout must not impose a minimum.
        layout.setSizeConstraint(QLayout.SizeConstraint.SetNoConstraint)
        layout.setContentsMargins(8, 6, 8, 6)
        layout.setSpacing(4)
        layout.addWidget(self.title_label)
        layout.addWidget(self.description_label)
        layout.addWidget(self.button, alignment=Qt.AlignmentFlag.AlignLeft)

    def sizeHint(self) -> QSize:
        hint = super().sizeHint()
        if self.fixed_width is not None:
            return QSize(self.fixed_width, hint.height())
        return hint

    def set_item(self, index: int, item: DemoListItem):
        self.title_label.setText(item.title)
        self.description_label.setText(item.description)
        self.button.setText(f'{self.button_text} ({index})')


class DemoItemRenderer:
    """Renderer for the demo lists.

    Buttons look up their item through the list when clicked, since a pooled
    panel shows a different item every time it is reused.
    """

    button_text = 'Click me!'
    label = 'Vertical'

    def __init__(self):
        self.virtual_list = None

    def create_item(self, parent: QWidget) -> DemoItemPanel:
        panel = DemoItemPanel(parent, self.button_text)
        panel.button.clicked.connect(lambda: self.on_button_clicked(panel))
        return panel

    def update_item(self, panel: DemoItemPanel, index: int, data: DemoListItem):
        panel.set_item(index, data)

    def on_button_clicked(self, panel: DemoItemPanel):
        if self.virtual_list is None:
            return
        result = self.virtual_list.get_item_context_for_panel(panel)
        if not result.ok:
            print(f"{self.label} button clicked on an unassigned panel: {result.error}")
            return
        context = result.value
        print(f"{self.label} button clicked!")
        print(f"   Index: {context.index}")
        print(f"   Title: {context.data.title}")
        print(f"   Description: {context.data.description}")


class VerticalItemRenderer(DemoItemRenderer):
    pass


class HorizontalItemRenderer(DemoItemRenderer):
    button_text = 'Click!'
    label = 'Horizontal'

    def create_item(self, parent: QWidget) -> DemoItemPanel:
        panel = super().create_item(parent)
        panel.fixed_width = HORIZONTAL_ITEM_WIDTH
        panel.setFixedWidth(HORIZONTAL_ITEM_WIDTH)
        return panel
