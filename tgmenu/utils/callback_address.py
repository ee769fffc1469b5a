"""
Адресация кнопок меню.

Формат callback_data: '{render_id}:{row}:{col}', где row/col - позиция кнопки
в итоговой клавиатуре. render_id генерируется из алфавита token_urlsafe
(A-Z, a-z, 0-9, '-', '_'), поэтому разделитель ':' в нём не встречается.
"""

from __future__ import annotations

import re
import secrets
from dataclasses import dataclass


ADDRESS_SEPARATOR = ':'

RENDER_ID_PATTERN = re.compile(r'[A-Za-z0-9_-]+')
INDEX_PATTERN = re.compile(r'[0-9]+')


@dataclass(frozen=True, slots=True)
class CallbackAddress:
    render_id: str
    row: int
    col: int

    def __str__(self) -> str:
        return format_callback_address(self.render_id, self.row, self.col)


def format_callback_address(render_id: str, row: int, col: int) -> str:
    return f'{render_id}{ADDRESS_SEPARATOR}{row}{ADDRESS_SEPARATOR}{col}'


def parse_callback_address(callback_data: str | None) -> CallbackAddress | None:
    """Разбирает callback_data; для чужих и битых данных возвращает None."""
    if not callback_data:
        return None

    parts = callback_data.split(ADDRESS_SEPARATOR)
    if len(parts) != 3:
        return None

    render_id, row, col = parts
    if not RENDER_ID_PATTERN.fullmatch(render_id):
        return None
    if not INDEX_PATTERN.fullmatch(row) or not INDEX_PATTERN.fullmatch(col):
        return None

    return CallbackAddress(render_id=render_id, row=int(row), col=int(col))


def generate_render_id(length: int = 12) -> str:
    """Случайный render id без символа ':'."""
    token = secrets.token_urlsafe(length)
    return token[:length]
