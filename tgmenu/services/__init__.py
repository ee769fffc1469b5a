from tgmenu.services.menu_registry import MenuRegistry, ResolvedButton
from tgmenu.services.menu_sender import MenuSender
from tgmenu.services.navigation_service import NavigationService


__all__ = [
    'MenuRegistry',
    'MenuSender',
    'NavigationService',
    'ResolvedButton',
]
