from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import structlog
from aiogram import BaseMiddleware
from aiogram.types import CallbackQuery, TelegramObject
from structlog.contextvars import bound_contextvars


if TYPE_CHECKING:
    from tgmenu.services.menu_registry import MenuRegistry


logger = structlog.get_logger(__name__)


@dataclass(slots=True)
class MenuCallback:
    """What a menu button handler receives along with the CallbackQuery."""

    render_id: str
    template_id: str
    row: int
    col: int
    payload: str | None
    data: dict[str, Any]
    _next: Callable[[], Awaitable[Any]] = field(repr=False)

    async def next(self) -> Any:
        """Pass the update further down the aiogram chain."""
        return await self._next()


class MenuCallbackMiddleware(BaseMiddleware):
    """Routes callback queries produced by rendered menus to their button handlers."""

    def __init__(self, registry: MenuRegistry):
        self.registry = registry

    async def __call__(
        self,
        handler: Callable[[TelegramObject, dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: dict[str, Any],
    ) -> Any:
        if not isinstance(event, CallbackQuery) or not event.data:
            return await handler(event, data)

        resolved = await self.registry.resolve(event.data)
        if resolved is None:
            return await handler(event, data)

        address = resolved.address
        callback = MenuCallback(
            render_id=address.render_id,
            template_id=resolved.template_id,
            row=address.row,
            col=address.col,
            payload=resolved.cell.payload,
            data=data,
            _next=lambda: handler(event, data),
        )

        with bound_contextvars(menu_render_id=address.render_id, menu_template_id=resolved.template_id):
            logger.debug('Нажата кнопка меню', row=address.row, col=address.col)
            result = resolved.cell.handler(event, callback)
            if inspect.isawaitable(result):
                result = await result
            return result
