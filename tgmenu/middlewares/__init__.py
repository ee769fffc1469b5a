from tgmenu.middlewares.menu_callback import MenuCallback, MenuCallbackMiddleware
from tgmenu.middlewares.menu_sender import MenuSenderMiddleware
from tgmenu.middlewares.navigation import MenuNavigationMiddleware


__all__ = [
    'MenuCallback',
    'MenuCallbackMiddleware',
    'MenuNavigationMiddleware',
    'MenuSenderMiddleware',
]
