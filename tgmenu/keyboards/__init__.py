from tgmenu.keyboards.menu import RENDERED_MENU_TAG, RenderedMenu, is_rendered_menu
from tgmenu.keyboards.operations import HandlerButton, MenuButtonHandler, NativeButton, Operation, RowBreak
from tgmenu.keyboards.payloads import MEDIA_KINDS, MessageKind, MessagePayload
from tgmenu.keyboards.renderer import MenuButtonCell, build_keyboards, find_cell
from tgmenu.keyboards.template import MenuTemplate


__all__ = [
    'MEDIA_KINDS',
    'RENDERED_MENU_TAG',
    'HandlerButton',
    'MenuButtonCell',
    'MenuButtonHandler',
    'MenuTemplate',
    'MessageKind',
    'MessagePayload',
    'NativeButton',
    'Operation',
    'RenderedMenu',
    'RowBreak',
    'build_keyboards',
    'find_cell',
    'is_rendered_menu',
]
