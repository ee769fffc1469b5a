"""
Сервис истории навигации меню.

Записи создаются только после успешной отправки (см. MenuNavigationMiddleware)
и никогда не меняются на месте: история лишь дополняется.

Ограничение: параллельные дописывания в один и тот же ключ (одно сообщение
редактируется почти одновременно) не упорядочиваются - выигрывает последняя
запись. Разные ключи друг другу не мешают.
"""

from __future__ import annotations

import time
from typing import Any

import structlog
from pydantic import BaseModel, ValidationError

from tgmenu.errors import MenuStorageError
from tgmenu.keyboards.menu import RenderedMenu
from tgmenu.schemas import NavigationHistoryData, NavigationRecord, RenderedMenuData
from tgmenu.storage.base import MenuStorage
from tgmenu.utils.storage_keys import inline_navigation_key, regular_navigation_key, rendered_menu_key


logger = structlog.get_logger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


class NavigationService:
    def __init__(self, storage: MenuStorage, prefix: str):
        self.storage = storage
        self.prefix = prefix

    def rendered_menu_key(self, render_id: str) -> str:
        return rendered_menu_key(self.prefix, render_id)

    def navigation_key(
        self,
        *,
        chat_id: int | None = None,
        message_id: int | None = None,
        inline_message_id: str | None = None,
    ) -> str | None:
        """Ключ истории сообщения; None, если сообщение не идентифицируется."""
        if chat_id is not None and message_id is not None:
            return regular_navigation_key(self.prefix, chat_id, message_id)
        if inline_message_id:
            return inline_navigation_key(self.prefix, inline_message_id)
        return None

    async def save_rendered_menu(self, menu: RenderedMenu, timestamp: int | None = None) -> RenderedMenuData:
        data = RenderedMenuData(template_id=menu.template_id, timestamp=now_ms() if timestamp is None else timestamp)
        key = self.rendered_menu_key(menu.render_id)
        await self._write(key, data.model_dump(mode='json'))
        logger.debug('Сохранены метаданные меню', key=key, template_id=menu.template_id)
        return data

    async def get_rendered_menu(self, render_id: str) -> RenderedMenuData | None:
        key = self.rendered_menu_key(render_id)
        raw = await self._read(key)
        if raw is None:
            return None
        return self._parse(RenderedMenuData, raw, key)

    async def get_history(self, key: str) -> NavigationHistoryData:
        raw = await self._read(key)
        if raw is None:
            return NavigationHistoryData()
        return self._parse(NavigationHistoryData, raw, key)

    async def append(self, key: str, menu: RenderedMenu, timestamp: int | None = None) -> bool:
        """
        Дописывает меню в историю сообщения.

        Если последняя запись уже относится к этому render_id (повторная
        отправка/редактирование тем же меню), ничего не пишет и возвращает False.
        """
        history = await self.get_history(key)
        last = history.last
        if last is not None and last.render_id == menu.render_id:
            logger.debug('Меню уже последнее в истории', key=key, render_id=menu.render_id)
            return False

        record = NavigationRecord(
            render_id=menu.render_id,
            template_id=menu.template_id,
            timestamp=now_ms() if timestamp is None else timestamp,
        )
        updated = NavigationHistoryData(navigation_history=[*history.navigation_history, record])
        await self._write(key, updated.model_dump(mode='json'))
        logger.debug(
            'Запись добавлена в историю навигации',
            key=key,
            render_id=menu.render_id,
            history_length=len(updated.navigation_history),
        )
        return True

    async def previous(self, key: str) -> NavigationRecord | None:
        """
        Запись перед текущей - куда ведёт «Назад».

        История - журнал показанных меню, а не стек: возврат дописывает новую
        запись, поэтому два «Назад» подряд переключают между двумя последними
        меню.
        """
        history = await self.get_history(key)
        if len(history.navigation_history) < 2:
            return None
        return history.navigation_history[-2]

    async def _read(self, key: str) -> dict[str, Any] | None:
        try:
            return await self.storage.read(key)
        except MenuStorageError:
            raise
        except Exception as e:
            logger.error('Ошибка чтения из хранилища меню', key=key, error=e)
            raise MenuStorageError(f'Storage read failed: {e}', key=key) from e

    async def _write(self, key: str, value: dict[str, Any]) -> None:
        try:
            await self.storage.write(key, value)
        except MenuStorageError:
            raise
        except Exception as e:
            logger.error('Ошибка записи в хранилище меню', key=key, error=e)
            raise MenuStorageError(f'Storage write failed: {e}', key=key) from e

    @staticmethod
    def _parse(model: type[BaseModel], raw: Any, key: str) -> Any:
        try:
            return model.model_validate(raw)
        except ValidationError as e:
            logger.error('Повреждённая запись меню в хранилище', key=key, error=str(e))
            raise MenuStorageError(f'Malformed record: {e}', key=key) from e
