from tgmenu.utils.callback_address import (
    CallbackAddress,
    format_callback_address,
    generate_render_id,
    parse_callback_address,
)
from tgmenu.utils.storage_keys import inline_navigation_key, regular_navigation_key, rendered_menu_key


__all__ = [
    'CallbackAddress',
    'format_callback_address',
    'generate_render_id',
    'inline_navigation_key',
    'parse_callback_address',
    'regular_navigation_key',
    'rendered_menu_key',
]
