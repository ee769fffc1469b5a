"""
tgmenu - переиспользуемые inline-меню для aiogram.

Шаблон описывается один раз, регистрируется в MenuRegistry и рендерится
сколько угодно раз; нажатия кнопок маршрутизируются к обработчикам даже после
рестарта процесса благодаря метаданным в MenuStorage.

    registry = MenuRegistry(RedisMenuStorage())
    registry.register('main', MenuTemplate('Меню').cb('Привет', say_hello))

    dp.callback_query.outer_middleware(registry.middleware())
    bot.session.middleware(registry.request_middleware())

    await bot.send_message(chat_id, 'Меню', reply_markup=registry.render('main'))
"""

from tgmenu.errors import (
    CallbackDataTooLongError,
    DuplicateTemplateError,
    MenuError,
    MenuStorageError,
    TemplateNotFoundError,
)
from tgmenu.keyboards import MenuButtonCell, MenuTemplate, MessageKind, MessagePayload, RenderedMenu, is_rendered_menu
from tgmenu.middlewares import MenuCallback, MenuCallbackMiddleware, MenuNavigationMiddleware, MenuSenderMiddleware
from tgmenu.schemas import NavigationHistoryData, NavigationRecord, RenderedMenuData
from tgmenu.services import MenuRegistry, MenuSender, NavigationService
from tgmenu.storage import MemoryMenuStorage, MenuStorage, RedisMenuStorage
from tgmenu.utils import CallbackAddress, parse_callback_address


__all__ = [
    'CallbackAddress',
    'CallbackDataTooLongError',
    'DuplicateTemplateError',
    'MemoryMenuStorage',
    'MenuButtonCell',
    'MenuCallback',
    'MenuCallbackMiddleware',
    'MenuError',
    'MenuNavigationMiddleware',
    'MenuRegistry',
    'MenuSender',
    'MenuSenderMiddleware',
    'MenuStorage',
    'MenuStorageError',
    'MenuTemplate',
    'MessageKind',
    'MessagePayload',
    'NavigationHistoryData',
    'NavigationRecord',
    'NavigationService',
    'RedisMenuStorage',
    'RenderedMenu',
    'RenderedMenuData',
    'TemplateNotFoundError',
    'is_rendered_menu',
    'parse_callback_address',
]
