"""Отправка и редактирование меню с выбором метода Bot API по виду сообщения."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from aiogram import Bot
from aiogram.types import (
    InputMediaAnimation,
    InputMediaAudio,
    InputMediaDocument,
    InputMediaPhoto,
    InputMediaVideo,
    Message,
)

from tgmenu.keyboards.menu import RenderedMenu
from tgmenu.keyboards.payloads import MessageKind, MessagePayload


if TYPE_CHECKING:
    from tgmenu.services.menu_registry import MenuRegistry


logger = structlog.get_logger(__name__)


INPUT_MEDIA_TYPES = {
    MessageKind.PHOTO: InputMediaPhoto,
    MessageKind.VIDEO: InputMediaVideo,
    MessageKind.ANIMATION: InputMediaAnimation,
    MessageKind.AUDIO: InputMediaAudio,
    MessageKind.DOCUMENT: InputMediaDocument,
}


def _format_kwargs(payload: MessagePayload, entities_field: str) -> dict[str, Any]:
    # без parse_mode aiogram подставит значение из DefaultBotProperties
    kwargs: dict[str, Any] = {}
    if payload.parse_mode is not None:
        kwargs['parse_mode'] = payload.parse_mode
    if payload.entities is not None:
        kwargs[entities_field] = list(payload.entities)
    return kwargs


def _caption_kwargs(payload: MessagePayload) -> dict[str, Any]:
    kwargs = _format_kwargs(payload, 'caption_entities')
    if payload.text is not None:
        kwargs['caption'] = payload.text
    return kwargs


class MenuSender:
    """
    Отправляет RenderedMenu методом, соответствующим виду сообщения.

    Меню уходит как reply_markup; метаданные сохраняет MenuNavigationMiddleware,
    если он установлен в сессию бота.
    """

    def __init__(self, bot: Bot):
        self.bot = bot

    async def send(self, chat_id: int | str, menu: RenderedMenu, text: str | None = None, **kwargs: Any) -> Message:
        payload: MessagePayload = menu.message if text is None else menu.message.with_text(text)
        kind = payload.kind
        logger.debug('Отправка меню', chat_id=chat_id, kind=kind.value, render_id=menu.render_id)

        if kind is MessageKind.TEXT:
            return await self.bot.send_message(
                chat_id=chat_id,
                text=payload.text or '',
                reply_markup=menu,
                **_format_kwargs(payload, 'entities'),
                **kwargs,
            )
        if kind is MessageKind.PHOTO:
            return await self.bot.send_photo(
                chat_id=chat_id, photo=payload.media, reply_markup=menu, **_caption_kwargs(payload), **kwargs
            )
        if kind is MessageKind.VIDEO:
            return await self.bot.send_video(
                chat_id=chat_id, video=payload.media, reply_markup=menu, **_caption_kwargs(payload), **kwargs
            )
        if kind is MessageKind.ANIMATION:
            return await self.bot.send_animation(
                chat_id=chat_id,
                animation=payload.media,
                reply_markup=menu,
                **_caption_kwargs(payload),
                **kwargs,
            )
        if kind is MessageKind.AUDIO:
            return await self.bot.send_audio(
                chat_id=chat_id, audio=payload.media, reply_markup=menu, **_caption_kwargs(payload), **kwargs
            )
        if kind is MessageKind.DOCUMENT:
            return await self.bot.send_document(
                chat_id=chat_id,
                document=payload.media,
                reply_markup=menu,
                **_caption_kwargs(payload),
                **kwargs,
            )
        if kind is MessageKind.VOICE:
            return await self.bot.send_voice(
                chat_id=chat_id, voice=payload.media, reply_markup=menu, **_caption_kwargs(payload), **kwargs
            )
        raise ValueError(f'Unsupported menu kind: {kind}')

    async def edit(
        self,
        menu: RenderedMenu,
        *,
        chat_id: int | str | None = None,
        message_id: int | None = None,
        inline_message_id: str | None = None,
        text: str | None = None,
    ) -> Message | bool:
        """Заменяет содержимое и клавиатуру существующего сообщения."""
        if inline_message_id is None and (chat_id is None or message_id is None):
            raise ValueError('Either inline_message_id or chat_id with message_id is required')

        payload: MessagePayload = menu.message if text is None else menu.message.with_text(text)
        target: dict[str, Any] = {
            'chat_id': chat_id,
            'message_id': message_id,
            'inline_message_id': inline_message_id,
        }
        kind = payload.kind

        if kind is MessageKind.TEXT:
            return await self.bot.edit_message_text(
                text=payload.text or '',
                reply_markup=menu,
                **_format_kwargs(payload, 'entities'),
                **target,
            )
        if kind is MessageKind.VOICE:
            # голосовое нельзя заменить через editMessageMedia
            return await self.bot.edit_message_caption(
                reply_markup=menu,
                **_caption_kwargs(payload),
                **target,
            )
        if kind in INPUT_MEDIA_TYPES:
            media = INPUT_MEDIA_TYPES[kind](media=payload.media, **_caption_kwargs(payload))
            return await self.bot.edit_message_media(media=media, reply_markup=menu, **target)
        raise ValueError(f'Unsupported menu kind: {kind}')

    async def back(
        self,
        registry: MenuRegistry,
        *,
        chat_id: int | str | None = None,
        message_id: int | None = None,
        inline_message_id: str | None = None,
    ) -> Message | bool | None:
        """Редактирует сообщение, показывая предыдущее меню из истории навигации."""
        menu = await registry.render_previous(
            chat_id=chat_id,
            message_id=message_id,
            inline_message_id=inline_message_id,
        )
        if menu is None:
            return None
        return await self.edit(menu, chat_id=chat_id, message_id=message_id, inline_message_id=inline_message_id)
