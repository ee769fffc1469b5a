from __future__ import annotations

from typing import Any, Literal

from aiogram.types import InlineKeyboardMarkup
from pydantic import ConfigDict, Field

from tgmenu.keyboards.payloads import MessagePayload
from tgmenu.keyboards.renderer import HandlerKeyboard, MenuButtonCell, find_cell


RENDERED_MENU_TAG = 'rendered_menu'


class RenderedMenu(InlineKeyboardMarkup):
    """
    Одна отрисовка шаблона с уникальным render_id.

    Является InlineKeyboardMarkup, поэтому передаётся в reply_markup любого
    метода aiogram. Метаданные (обработчики, текст, id) не сериализуются:
    MenuNavigationMiddleware подменяет меню на обычную клавиатуру перед
    отправкой и сохраняет метаданные после успешного ответа.
    """

    model_config = ConfigDict(frozen=True)

    menu_tag: Literal['rendered_menu'] = Field(default=RENDERED_MENU_TAG, exclude=True)
    template_id: str = Field(exclude=True)
    render_id: str = Field(exclude=True)
    handler_keyboard: Any = Field(default_factory=list, exclude=True, repr=False)
    message: Any = Field(default_factory=MessagePayload, exclude=True)

    @property
    def wire_keyboard(self) -> list[list[Any]]:
        return self.inline_keyboard

    @property
    def text(self) -> str | None:
        return self.message.text

    def handler_at(self, row: int, col: int) -> MenuButtonCell | None:
        keyboard: HandlerKeyboard = self.handler_keyboard
        return find_cell(keyboard, row, col)

    def to_markup(self) -> InlineKeyboardMarkup:
        return InlineKeyboardMarkup(inline_keyboard=[list(row) for row in self.inline_keyboard])


def is_rendered_menu(value: object) -> bool:
    return isinstance(value, RenderedMenu) and value.menu_tag == RENDERED_MENU_TAG
