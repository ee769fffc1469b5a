from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from aiogram.types import InlineKeyboardButton


# handler(query: CallbackQuery, callback: MenuCallback) -> Awaitable[Any] | Any
MenuButtonHandler = Callable[..., Any]


@dataclass(frozen=True, slots=True)
class NativeButton:
    """Кнопка Telegram как есть (url, web_app, raw callback_data, ...)."""

    button: InlineKeyboardButton


@dataclass(frozen=True, slots=True)
class HandlerButton:
    """Кнопка с обработчиком; callback_data выдаётся при рендере по позиции."""

    label: str
    handler: MenuButtonHandler
    payload: str | None = None


@dataclass(frozen=True, slots=True)
class RowBreak:
    pass


Operation = NativeButton | HandlerButton | RowBreak
