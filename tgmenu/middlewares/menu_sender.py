from collections.abc import Awaitable, Callable
from typing import Any

from aiogram import BaseMiddleware, Bot
from aiogram.types import TelegramObject

from tgmenu.services.menu_registry import MenuRegistry
from tgmenu.services.menu_sender import MenuSender


class MenuSenderMiddleware(BaseMiddleware):
    """Injects ``menu_registry`` and ``menu_sender`` into handler data."""

    def __init__(self, registry: MenuRegistry, sender_factory: Callable[[Bot], MenuSender] = MenuSender):
        self.registry = registry
        self.sender_factory = sender_factory

    async def __call__(
        self,
        handler: Callable[[TelegramObject, dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: dict[str, Any],
    ) -> Any:
        data.setdefault('menu_registry', self.registry)
        bot: Bot | None = data.get('bot')
        if bot is not None and 'menu_sender' not in data:
            data['menu_sender'] = self.sender_factory(bot)
        return await handler(event, data)
