"""
Реестр шаблонов меню.

Реестр - обычный объект, который передаётся туда, где нужен (middleware,
хендлеры). Глобального экземпляра нет: несколько ботов или тестов в одном
процессе держат свои реестры.

Поиск обработчика по callback_data:
1. render_id ещё в памяти (LRU последних рендеров) - ячейка берётся напрямую;
2. после рестарта - по {prefix}:menus:{render_id} восстанавливается
   template_id, шаблон рендерится заново с тем же render_id, и ячейка
   находится по (row, col).

Второй путь опирается на неизменность шаблона: если между рестартами порядок
кнопок поменялся, старые сообщения молча попадут не в ту кнопку. Шаблоны
нужно регистрировать до начала обработки апдейтов.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from tgmenu.config import settings
from tgmenu.errors import DuplicateTemplateError, MenuStorageError, TemplateNotFoundError
from tgmenu.keyboards.menu import RenderedMenu
from tgmenu.keyboards.renderer import MenuButtonCell
from tgmenu.keyboards.template import MenuTemplate
from tgmenu.services.navigation_service import NavigationService
from tgmenu.storage.base import MenuStorage
from tgmenu.utils.callback_address import CallbackAddress, generate_render_id, parse_callback_address


if TYPE_CHECKING:
    from tgmenu.middlewares.menu_callback import MenuCallbackMiddleware
    from tgmenu.middlewares.navigation import MenuNavigationMiddleware


logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ResolvedButton:
    address: CallbackAddress
    template_id: str
    cell: MenuButtonCell


class MenuRegistry:
    def __init__(
        self,
        storage: MenuStorage | None = None,
        *,
        prefix: str | None = None,
        render_cache_size: int | None = None,
        max_callback_bytes: int | None = None,
        render_id_length: int | None = None,
    ):
        self._templates: dict[str, MenuTemplate] = {}
        self._renders: OrderedDict[str, RenderedMenu] = OrderedDict()

        self.prefix = prefix if prefix is not None else settings.MENU_STORAGE_PREFIX
        self.render_cache_size = (
            render_cache_size if render_cache_size is not None else settings.MENU_RENDER_CACHE_SIZE
        )
        self.max_callback_bytes = (
            max_callback_bytes if max_callback_bytes is not None else settings.CALLBACK_DATA_MAX_BYTES
        )
        self.render_id_length = render_id_length if render_id_length is not None else settings.MENU_RENDER_ID_LENGTH

        self.navigation: NavigationService | None = (
            NavigationService(storage, self.prefix) if storage is not None else None
        )

    # Шаблоны

    def register(self, template_id: str, template: MenuTemplate) -> None:
        """Регистрирует шаблон; повторная регистрация того же id запрещена."""
        if not template_id:
            raise ValueError('Template id must be a non-empty string')
        if template_id in self._templates:
            raise DuplicateTemplateError(template_id)

        self._templates[template_id] = template
        logger.debug('Шаблон меню зарегистрирован', template_id=template_id, template=repr(template))

    def unregister(self, template_id: str) -> bool:
        removed = self._templates.pop(template_id, None) is not None
        if removed:
            for render_id in [rid for rid, menu in self._renders.items() if menu.template_id == template_id]:
                del self._renders[render_id]
        return removed

    def get(self, template_id: str) -> MenuTemplate | None:
        return self._templates.get(template_id)

    def get_or_raise(self, template_id: str) -> MenuTemplate:
        template = self._templates.get(template_id)
        if template is None:
            raise TemplateNotFoundError(template_id)
        return template

    def has(self, template_id: str) -> bool:
        return template_id in self._templates

    def __contains__(self, template_id: str) -> bool:
        return self.has(template_id)

    # Рендер

    def render(self, template_id: str) -> RenderedMenu:
        """Отрисовывает шаблон с новым уникальным render_id."""
        template = self.get_or_raise(template_id)
        menu = self._render_template(template_id, template, generate_render_id(self.render_id_length))
        logger.debug('Меню отрисовано', template_id=template_id, render_id=menu.render_id)
        return menu

    def _render_template(
        self,
        template_id: str,
        template: MenuTemplate,
        render_id: str,
        *,
        check_limit: bool = True,
    ) -> RenderedMenu:
        max_callback_bytes = self.max_callback_bytes if check_limit else None
        menu = template.render(template_id, render_id, max_callback_bytes=max_callback_bytes)
        self._remember(menu)
        return menu

    def _remember(self, menu: RenderedMenu) -> None:
        if self.render_cache_size <= 0:
            return
        self._renders[menu.render_id] = menu
        self._renders.move_to_end(menu.render_id)
        while len(self._renders) > self.render_cache_size:
            self._renders.popitem(last=False)

    def cached_render(self, render_id: str) -> RenderedMenu | None:
        menu = self._renders.get(render_id)
        if menu is not None:
            self._renders.move_to_end(render_id)
        return menu

    # Диспетчеризация

    async def resolve(self, callback_data: str | None) -> ResolvedButton | None:
        """
        Находит кнопку с обработчиком по callback_data.

        Никогда не бросает для чужих, битых или устаревших данных - возвращает
        None, и апдейт уходит дальше по цепочке.
        """
        address = parse_callback_address(callback_data)
        if address is None:
            return None

        menu = self.cached_render(address.render_id)
        if menu is None:
            menu = await self._restore(address.render_id)
        if menu is None:
            return None

        cell = menu.handler_at(address.row, address.col)
        if cell is None or not cell.has_handler:
            logger.debug(
                'В ячейке меню нет обработчика',
                render_id=address.render_id,
                row=address.row,
                col=address.col,
            )
            return None

        return ResolvedButton(address=address, template_id=menu.template_id, cell=cell)

    async def _restore(self, render_id: str) -> RenderedMenu | None:
        if self.navigation is None:
            return None

        try:
            data = await self.navigation.get_rendered_menu(render_id)
        except MenuStorageError as e:
            logger.warning('Не удалось прочитать метаданные меню', render_id=render_id, error=e)
            return None

        if data is None:
            logger.debug('Неизвестный render_id', render_id=render_id)
            return None

        template = self.get(data.template_id)
        if template is None:
            logger.warning(
                'Шаблон сохранённого меню не зарегистрирован',
                render_id=render_id,
                template_id=data.template_id,
            )
            return None

        # адреса уже ушли в Telegram, лимит мог измениться после их отправки
        menu = self._render_template(data.template_id, template, render_id, check_limit=False)
        logger.info('Меню восстановлено из хранилища', render_id=render_id, template_id=data.template_id)
        return menu

    # Навигация

    async def render_previous(
        self,
        *,
        chat_id: int | None = None,
        message_id: int | None = None,
        inline_message_id: str | None = None,
    ) -> RenderedMenu | None:
        """
        Новый рендер меню, показанного в сообщении перед текущим («Назад»).

        Возвращает None, если хранилища нет, сообщение не идентифицируется
        или возвращаться некуда. Рендер получает новый render_id и после
        отправки попадает в историю как новая запись: повторный вызов вернёт
        к меню, с которого ушли, а не на шаг глубже.
        """
        if self.navigation is None:
            return None

        key = self.navigation.navigation_key(
            chat_id=chat_id,
            message_id=message_id,
            inline_message_id=inline_message_id,
        )
        if key is None:
            return None

        record = await self.navigation.previous(key)
        if record is None:
            return None
        return self.render(record.template_id)

    # Middleware

    def middleware(self) -> MenuCallbackMiddleware:
        from tgmenu.middlewares.menu_callback import MenuCallbackMiddleware

        return MenuCallbackMiddleware(self)

    def request_middleware(self) -> MenuNavigationMiddleware:
        from tgmenu.middlewares.navigation import MenuNavigationMiddleware

        if self.navigation is None:
            raise ValueError('Navigation middleware requires a storage')
        return MenuNavigationMiddleware(self.navigation)
