from PySide6.QtCore import QSettings, Signal

# Defaults for settings that are accessed from multiple places.
DEFAULT_SETTINGS = {
    # Lower bound for the measurement cache; auto-configuration may raise it
    # for tall viewports.
    'virtual_list_min_cache_entries': 100,
    'virtual_list_estimated_item_size': 80,
    'virtual_list_temporary_panel_size': 100,
    'virtual_list_scrollbar_size': 16,
    'virtual_list_keyboard_scroll_amount': 0,  # 0 = adaptive (1/3 of viewport)
    'virtual_list_mouse_wheel_multiplier': 1.0,
    'virtual_list_end_padding': 10,
    'virtual_list_measurement_tolerance': 2,
    # Only INFO and above are printed when enabled.
    'minimal_trace_logs': True,
    'demo_item_count': 1000,
    'demo_items_file': '',  # Empty = bundled resources/demo_items.yaml
}


class Settings(QSettings):
    # Signal that shows that the setting with the given string was changes
    change = Signal(str, object, name='settingsChanged')

    def __init__(self):
        super().__init__('qvirtuallist', 'qvirtuallist')

    def setValue(self, key, value):
        super().setValue(key, value)
        self.change.emit(key, value)

# Common shared instance to ensure the Signal is also shared
settings = Settings()


def get_setting(key: str, type_=int):
    """Read a setting, falling back to its default on missing or bad values."""
    default = DEFAULT_SETTINGS[key]
    try:
        value = settings.value(key, defaultValue=default, type=type_)
    except Exception:
        return default
    if value is None:
        return default
    return value
