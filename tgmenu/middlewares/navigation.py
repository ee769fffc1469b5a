from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from aiogram.client.default import Default
from aiogram.client.session.middlewares.base import BaseRequestMiddleware, NextRequestMiddlewareType
from aiogram.methods import TelegramMethod
from aiogram.methods.base import TelegramType
from aiogram.types import Message

from tgmenu.keyboards.menu import RenderedMenu, is_rendered_menu
from tgmenu.services.navigation_service import NavigationService, now_ms


if TYPE_CHECKING:
    from aiogram import Bot


logger = structlog.get_logger(__name__)


class MenuNavigationMiddleware(BaseRequestMiddleware):
    """
    Session middleware for outgoing Bot API calls that carry a RenderedMenu.

    Install with ``bot.session.middleware(registry.request_middleware())``.
    The menu is replaced with a plain InlineKeyboardMarkup before the request;
    menu metadata and navigation history are written only after the request
    succeeded. A failed request raises and leaves no trace in the storage.
    """

    def __init__(self, navigation: NavigationService):
        self.navigation = navigation

    async def __call__(
        self,
        make_request: NextRequestMiddlewareType[TelegramType],
        bot: Bot,
        method: TelegramMethod[TelegramType],
    ) -> Any:
        markup = getattr(method, 'reply_markup', None)
        if not is_rendered_menu(markup):
            return await make_request(bot, method)

        menu: RenderedMenu = markup
        method = self._strip_menu(method, menu)

        result = await make_request(bot, method)

        timestamp = now_ms()
        await self.navigation.save_rendered_menu(menu, timestamp)

        key = self._navigation_key(method, result)
        if key is None:
            logger.debug('Нет ключа навигации для ответа', method=type(method).__name__, render_id=menu.render_id)
            return result

        await self.navigation.append(key, menu, timestamp)
        return result

    @staticmethod
    def _strip_menu(method: TelegramMethod[Any], menu: RenderedMenu) -> TelegramMethod[Any]:
        update: dict[str, Any] = {'reply_markup': menu.to_markup()}
        declared_fields = type(method).model_fields
        for name, value in menu.message.api_fields().items():
            if name not in declared_fields:
                continue
            current = getattr(method, name, None)
            # явно переданные в вызов значения важнее текста шаблона
            if current is None or current == '' or isinstance(current, Default):
                update[name] = value
        return method.model_copy(update=update)

    def _navigation_key(self, method: TelegramMethod[Any], result: Any) -> str | None:
        if isinstance(result, Message):
            return self.navigation.navigation_key(chat_id=result.chat.id, message_id=result.message_id)
        return self.navigation.navigation_key(inline_message_id=getattr(method, 'inline_message_id', None))
