"""
Компиляция списка операций шаблона в клавиатуру.

Адрес кнопки вычисляется по её месту в итоговой клавиатуре (номер выведенной
строки и номер кнопки в ней), а не по индексу операции. Поэтому смешанные
строки из нативных кнопок и кнопок с обработчиками дают адреса, совпадающие с
тем, что Telegram вернёт в callback_query. Вставка или удаление кнопки в
шаблоне сдвигает адреса последующих кнопок.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from aiogram.types import InlineKeyboardButton

from tgmenu.errors import CallbackDataTooLongError
from tgmenu.keyboards.operations import HandlerButton, MenuButtonHandler, NativeButton, Operation, RowBreak
from tgmenu.utils.callback_address import format_callback_address


DEFAULT_MAX_CALLBACK_BYTES = 64


@dataclass(frozen=True, slots=True)
class MenuButtonCell:
    """Ячейка клавиатуры с метаданными обработчика (у нативных кнопок handler=None)."""

    button: InlineKeyboardButton
    handler: MenuButtonHandler | None = None
    payload: str | None = None

    @property
    def has_handler(self) -> bool:
        return self.handler is not None


WireKeyboard = list[list[InlineKeyboardButton]]
HandlerKeyboard = list[list[MenuButtonCell]]


def build_keyboards(
    operations: Iterable[Operation],
    render_id: str,
    max_callback_bytes: int | None = DEFAULT_MAX_CALLBACK_BYTES,
) -> tuple[WireKeyboard, HandlerKeyboard]:
    """max_callback_bytes=None отключает проверку длины (уже отправленные адреса)."""
    wire_keyboard: WireKeyboard = []
    handler_keyboard: HandlerKeyboard = []
    wire_row: list[InlineKeyboardButton] = []
    handler_row: list[MenuButtonCell] = []

    for operation in operations:
        if isinstance(operation, NativeButton):
            wire_row.append(operation.button)
            handler_row.append(MenuButtonCell(button=operation.button))
        elif isinstance(operation, HandlerButton):
            callback_data = format_callback_address(render_id, len(wire_keyboard), len(wire_row))
            if max_callback_bytes is not None and len(callback_data.encode('utf-8')) > max_callback_bytes:
                raise CallbackDataTooLongError(callback_data, max_callback_bytes)

            button = InlineKeyboardButton(text=operation.label, callback_data=callback_data)
            wire_row.append(button)
            handler_row.append(MenuButtonCell(button=button, handler=operation.handler, payload=operation.payload))
        elif isinstance(operation, RowBreak):
            # пустая строка не выводится и не сдвигает номер строки
            if wire_row:
                wire_keyboard.append(wire_row)
                handler_keyboard.append(handler_row)
                wire_row = []
                handler_row = []
        else:
            raise TypeError(f'Unknown menu operation: {operation!r}')

    if wire_row:
        wire_keyboard.append(wire_row)
        handler_keyboard.append(handler_row)

    return wire_keyboard, handler_keyboard


def find_cell(handler_keyboard: HandlerKeyboard, row: int, col: int) -> MenuButtonCell | None:
    if row < 0 or col < 0 or row >= len(handler_keyboard):
        return None
    cells = handler_keyboard[row]
    if col >= len(cells):
        return None
    return cells[col]
