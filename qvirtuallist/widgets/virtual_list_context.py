from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ItemContext:
    """Which item a recycled panel currently shows."""

    index: int
    data: Any


class PanelContextRegistry:
    """Per-list map from panel identity to the item it currently represents.

    Event handlers on recycled panels must look their item up here when they
    fire, not when they are connected: the panel may show another item by then.
    """

    def __init__(self):
        self._contexts: dict[int, ItemContext] = {}

    def __len__(self):
        return len(self._contexts)

    def store(self, panel_id: int, index: int, data):
        self._contexts[panel_id] = ItemContext(index=index, data=data)

    def remove(self, panel_id: int):
        self._contexts.pop(panel_id, None)

    def get(self, panel_id: int) -> ItemContext | None:
        return self._contexts.get(panel_id)

    def clear(self):
        self._contexts.clear()
