"""
Содержимое сообщения, которое сопровождает клавиатуру меню.

Один тип с дискриминатором kind вместо иерархии классов под каждый вид медиа.
Как отправить/отредактировать каждый kind решает только MenuSender.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from aiogram.types import InputFile, MessageEntity


class MessageKind(str, Enum):
    TEXT = 'text'
    PHOTO = 'photo'
    VIDEO = 'video'
    ANIMATION = 'animation'
    AUDIO = 'audio'
    DOCUMENT = 'document'
    VOICE = 'voice'


MEDIA_KINDS = frozenset(kind for kind in MessageKind if kind is not MessageKind.TEXT)


@dataclass(frozen=True, slots=True)
class MessagePayload:
    kind: MessageKind = MessageKind.TEXT
    text: str | None = None
    media: str | InputFile | None = None
    parse_mode: str | None = None
    entities: tuple[MessageEntity, ...] | None = None

    def __post_init__(self) -> None:
        if self.kind in MEDIA_KINDS and self.media is None:
            raise ValueError(f'{self.kind.value} payload requires media')
        if self.kind is MessageKind.TEXT and self.media is not None:
            raise ValueError('text payload cannot carry media')

    @property
    def is_media(self) -> bool:
        return self.kind in MEDIA_KINDS

    def with_text(self, text: str | None) -> MessagePayload:
        return replace(self, text=text)

    def with_parse_mode(self, parse_mode: str | None) -> MessagePayload:
        return replace(self, parse_mode=parse_mode)

    def with_entities(self, entities: Sequence[MessageEntity] | None) -> MessagePayload:
        return replace(self, entities=tuple(entities) if entities is not None else None)

    def with_media(self, kind: MessageKind, media: str | InputFile) -> MessagePayload:
        return replace(self, kind=kind, media=media)

    def api_fields(self) -> dict[str, Any]:
        """Поля метода Bot API, которые меню подставляет в исходящий запрос."""
        fields: dict[str, Any] = {}
        if self.text is not None:
            fields['caption' if self.is_media else 'text'] = self.text
        if self.parse_mode is not None:
            fields['parse_mode'] = self.parse_mode
        if self.entities is not None:
            fields['caption_entities' if self.is_media else 'entities'] = list(self.entities)
        return fields
