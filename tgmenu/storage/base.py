from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class MenuStorage(Protocol):
    """
    Асинхронное key-value хранилище для метаданных меню.

    Значения - JSON-совместимые словари. Ошибки бэкенда поднимаются как
    MenuStorageError; требуется только last-write-wins в пределах одного ключа.
    Встроенные хранилища дополнительно умеют delete, ядро его не вызывает.
    """

    async def read(self, key: str) -> dict[str, Any] | None: ...

    async def write(self, key: str, value: dict[str, Any]) -> None: ...
