"""Sample data for the demo gallery."""

from dataclasses import dataclass
from pathlib import Path

import yaml

from qvirtuallist.utils.settings import get_setting

DEMO_ITEMS_PATH = Path(__file__).parent.parent / 'resources' / 'demo_items.yaml'
FALLBACK_TITLE_FORMAT = 'Item {index}'
FALLBACK_TEMPLATES = [
    'Short description.',
    'A medium-length description with a few more details about this item.',
]


@dataclass(frozen=True)
class DemoListItem:
    title: str
    description: str


def load_demo_templates(path: Path) -> tuple[str, list[str]]:
    """Read the title format and description templates from a YAML file.

    Returns the built-in templates if the file is missing or malformed.
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        print(f"YAML parse error in {path.name}: {e}")
        return FALLBACK_TITLE_FORMAT, list(FALLBACK_TEMPLATES)
    except FileNotFoundError:
        print(f"Demo items file not found: {path}")
        return FALLBACK_TITLE_FORMAT, list(FALLBACK_TEMPLATES)

    if not isinstance(data, dict):
        print(f"Invalid demo items file {path.name}: expected a mapping")
        return FALLBACK_TITLE_FORMAT, list(FALLBACK_TEMPLATES)
    templates = [str(t) for t in data.get('templates') or [] if str(t).strip()]
    if not templates:
        print(f"Invalid demo items file {path.name}: no templates")
        templates = list(FALLBACK_TEMPLATES)
    title_format = str(data.get('title_format') or FALLBACK_TITLE_FORMAT)
    return title_format, templates


class DemoListModel:
    """Data source with `count` generated items, cycling through the templates."""

    def __init__(self, count: int | None = None, items_path: Path | None = None):
        if count is None:
            count = int(get_setting('demo_item_count'))
        if items_path is None:
            configured = str(get_setting('demo_items_file', str) or '')
            items_path = Path(configured) if configured else DEMO_ITEMS_PATH
        self.title_format, self.templates = load_demo_templates(items_path)
        self.items = [self._make_item(i) for i in range(max(0, count))]

    def _make_item(self, index: int) -> DemoListItem:
        template = self.templates[index % len(self.templates)]
        return DemoListItem(title=self.title_format.format(index=index),
                            description=f'{template} (Item {index})')

    def get_item_count(self) -> int:
        return len(self.items)

    def get_item_data(self, index: int) -> DemoListItem:
        if 0 <= index < len(self.items):
            return self.items[index]
        return DemoListItem(title='Unknown', description='Unknown item')
