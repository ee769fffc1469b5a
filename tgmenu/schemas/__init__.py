from tgmenu.schemas.navigation import NavigationHistoryData, NavigationRecord, RenderedMenuData


__all__ = [
    'NavigationHistoryData',
    'NavigationRecord',
    'RenderedMenuData',
]
