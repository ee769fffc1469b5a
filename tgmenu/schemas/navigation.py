"""Pydantic схемы записей, которые меню сохраняет в хранилище."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class RenderedMenuData(BaseModel):
    """Какой шаблон породил отрисованное меню. Ключ: {prefix}:menus:{render_id}."""

    model_config = ConfigDict(frozen=True)

    template_id: str = Field(min_length=1)
    timestamp: int = Field(ge=0, description='Время отправки, мс с начала эпохи')


class NavigationRecord(BaseModel):
    """Одна запись истории навигации сообщения."""

    model_config = ConfigDict(frozen=True)

    render_id: str = Field(min_length=1)
    template_id: str = Field(min_length=1)
    timestamp: int = Field(ge=0)


class NavigationHistoryData(BaseModel):
    """
    История меню, показанных в одном сообщении.

    Ключ: {prefix}:regular:{chat_id}:{message_id} или {prefix}:inline:{inline_message_id}.
    Две подряд идущие записи никогда не имеют одинаковый render_id.
    """

    navigation_history: list[NavigationRecord] = Field(default_factory=list)

    @property
    def last(self) -> NavigationRecord | None:
        return self.navigation_history[-1] if self.navigation_history else None
