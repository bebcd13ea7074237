from dataclasses import dataclass

from qvirtuallist.utils.settings import get_setting


@dataclass
class VirtualListParams:
    """Tuning parameters derived from the viewport instead of set by hand."""

    # Layout & sizing
    estimated_item_size: int = 80
    temporary_panel_size: int = 100
    scrollbar_size: int = 16
    end_padding: int = 10
    measurement_tolerance: int = 2

    # Performance tuning
    buffer_size: int = 2
    width_change_threshold: int = 5
    early_termination_threshold: int = 200
    pool_target_size: int = 10
    max_cache_entries: int = 100
    min_cache_entries: int = 100

    # Interaction
    keyboard_scroll_amount: int = 300
    # Set when the user configured an amount; otherwise it follows the viewport.
    fixed_keyboard_scroll_amount: int | None = None
    mouse_wheel_multiplier: float = 1.0

    @classmethod
    def from_settings(cls, viewport_main: int = 600, viewport_cross: int = 800) -> 'VirtualListParams':
        keyboard_amount = int(get_setting('virtual_list_keyboard_scroll_amount'))
        params = cls(
            estimated_item_size=max(1, int(get_setting('virtual_list_estimated_item_size'))),
            temporary_panel_size=max(1, int(get_setting('virtual_list_temporary_panel_size'))),
            end_padding=max(0, int(get_setting('virtual_list_end_padding'))),
            measurement_tolerance=max(0, int(get_setting('virtual_list_measurement_tolerance'))),
            min_cache_entries=max(1, int(get_setting('virtual_list_min_cache_entries'))),
            fixed_keyboard_scroll_amount=keyboard_amount if keyboard_amount > 0 else None,
        )
        params.auto_configure(
            viewport_main,
            viewport_cross,
            scrollbar_size=int(get_setting('virtual_list_scrollbar_size')),
            mouse_wheel_multiplier=float(get_setting('virtual_list_mouse_wheel_multiplier', float)),
        )
        return params

    def auto_configure(self, viewport_main: int, viewport_cross: int, *,
                       scrollbar_size: int | None = None,
                       mouse_wheel_multiplier: float | None = None):
        """Recompute every derived parameter for a viewport of the given extents."""
        if scrollbar_size is not None:
            self.scrollbar_size = scrollbar_size
        if mouse_wheel_multiplier is not None:
            self.mouse_wheel_multiplier = mouse_wheel_multiplier

        visible_items_estimate = max(1, viewport_main // max(1, self.estimated_item_size))

        # More items on screen = larger buffer helps.
        if visible_items_estimate <= 5:
            self.buffer_size = 1
        elif visible_items_estimate <= 15:
            self.buffer_size = 2
        elif visible_items_estimate <= 30:
            self.buffer_size = 3
        else:
            self.buffer_size = 4

        self.pool_target_size = min(visible_items_estimate + self.buffer_size * 2 + 5, 50)
        self.max_cache_entries = max(self.min_cache_entries, min(visible_items_estimate * 10, 2000))

        # Narrow viewports are more sensitive to cross-axis changes.
        if viewport_cross <= 400:
            self.width_change_threshold = 3
        elif viewport_cross <= 800:
            self.width_change_threshold = 5
        elif viewport_cross <= 1200:
            self.width_change_threshold = 8
        else:
            self.width_change_threshold = 10

        self.early_termination_threshold = max(0, viewport_main // 2)

        if self.fixed_keyboard_scroll_amount is not None:
            self.keyboard_scroll_amount = self.fixed_keyboard_scroll_amount
        else:
            self.keyboard_scroll_amount = max(50, min(viewport_main // 3, 500))
