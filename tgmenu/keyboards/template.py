from __future__ import annotations

from collections.abc import Sequence

from aiogram.types import (
    CallbackGame,
    CopyTextButton,
    InlineKeyboardButton,
    InputFile,
    LoginUrl,
    MessageEntity,
    SwitchInlineQueryChosenChat,
    WebAppInfo,
)

from tgmenu.keyboards.menu import RenderedMenu
from tgmenu.keyboards.operations import HandlerButton, MenuButtonHandler, NativeButton, Operation, RowBreak
from tgmenu.keyboards.payloads import MessageKind, MessagePayload
from tgmenu.keyboards.renderer import DEFAULT_MAX_CALLBACK_BYTES, build_keyboards


class MenuTemplate:
    """
    Описание меню: упорядоченный список операций и текст сообщения.

    Методы-конструкторы добавляют по одной операции и возвращают сам шаблон::

        template = (
            MenuTemplate('Главное меню')
            .cb('Профиль', show_profile)
            .cb('Баланс', show_balance)
            .row()
            .url('Поддержка', 'https://t.me/support')
        )

    Шаблон не знает своего id - id задаётся при регистрации в MenuRegistry.
    После первого рендера шаблон менять нельзя: адреса кнопок в уже
    отправленных сообщениях восстанавливаются повторным рендером.
    """

    def __init__(self, text: str | None = None, *, parse_mode: str | None = None):
        self._operations: list[Operation] = []
        self._message = MessagePayload(text=text, parse_mode=parse_mode)

    @classmethod
    def _copy_of(cls, source: MenuTemplate, message: MessagePayload) -> MenuTemplate:
        template = cls()
        template._operations = list(source._operations)
        template._message = message
        return template

    @property
    def operations(self) -> tuple[Operation, ...]:
        return tuple(self._operations)

    @property
    def message(self) -> MessagePayload:
        return self._message

    @property
    def kind(self) -> MessageKind:
        return self._message.kind

    # Текст

    def text(self, text: str | None) -> MenuTemplate:
        """Текст сообщения (для медиа - подпись)."""
        self._message = self._message.with_text(text)
        return self

    add_text = text

    def parse_mode(self, parse_mode: str | None) -> MenuTemplate:
        self._message = self._message.with_parse_mode(parse_mode)
        return self

    def entities(self, entities: Sequence[MessageEntity] | None) -> MenuTemplate:
        """Разметка текста сущностями вместо parse_mode."""
        self._message = self._message.with_entities(entities)
        return self

    # Кнопки

    def cb(self, label: str, handler: MenuButtonHandler, payload: str | None = None) -> MenuTemplate:
        """
        Кнопка с обработчиком.

        callback_data генерируется при рендере по позиции кнопки; при нажатии
        MenuCallbackMiddleware вызовет handler(query, callback), payload будет
        доступен как callback.payload.
        """
        if not callable(handler):
            raise TypeError('Menu button handler must be callable')
        self._operations.append(HandlerButton(label=label, handler=handler, payload=payload))
        return self

    def button(self, button: InlineKeyboardButton) -> MenuTemplate:
        self._operations.append(NativeButton(button=button))
        return self

    def raw_cb(self, label: str, callback_data: str) -> MenuTemplate:
        """Callback-кнопка с фиксированными данными, которые обрабатывает не меню."""
        return self.button(InlineKeyboardButton(text=label, callback_data=callback_data))

    def url(self, label: str, url: str) -> MenuTemplate:
        return self.button(InlineKeyboardButton(text=label, url=url))

    def web_app(self, label: str, web_app: str | WebAppInfo) -> MenuTemplate:
        if isinstance(web_app, str):
            web_app = WebAppInfo(url=web_app)
        return self.button(InlineKeyboardButton(text=label, web_app=web_app))

    def login(self, label: str, login_url: str | LoginUrl) -> MenuTemplate:
        if isinstance(login_url, str):
            login_url = LoginUrl(url=login_url)
        return self.button(InlineKeyboardButton(text=label, login_url=login_url))

    def switch_inline(self, label: str, query: str = '') -> MenuTemplate:
        return self.button(InlineKeyboardButton(text=label, switch_inline_query=query))

    def switch_inline_current(self, label: str, query: str = '') -> MenuTemplate:
        return self.button(InlineKeyboardButton(text=label, switch_inline_query_current_chat=query))

    def switch_inline_chosen(
        self,
        label: str,
        query: SwitchInlineQueryChosenChat | None = None,
    ) -> MenuTemplate:
        chosen_chat = query or SwitchInlineQueryChosenChat()
        return self.button(InlineKeyboardButton(text=label, switch_inline_query_chosen_chat=chosen_chat))

    def copy_text(self, label: str, copy_text: str | CopyTextButton) -> MenuTemplate:
        if isinstance(copy_text, str):
            copy_text = CopyTextButton(text=copy_text)
        return self.button(InlineKeyboardButton(text=label, copy_text=copy_text))

    def game(self, label: str) -> MenuTemplate:
        return self.button(InlineKeyboardButton(text=label, callback_game=CallbackGame()))

    def pay(self, label: str) -> MenuTemplate:
        return self.button(InlineKeyboardButton(text=label, pay=True))

    def row(self) -> MenuTemplate:
        """Перенос строки; повторный row() без кнопок между ними пустую строку не создаёт."""
        self._operations.append(RowBreak())
        return self

    # Медиа: новый шаблон с копией операций и текста, исходный не меняется

    def photo(self, photo: str | InputFile) -> MenuTemplate:
        return self._with_media(MessageKind.PHOTO, photo)

    def video(self, video: str | InputFile) -> MenuTemplate:
        return self._with_media(MessageKind.VIDEO, video)

    def animation(self, animation: str | InputFile) -> MenuTemplate:
        return self._with_media(MessageKind.ANIMATION, animation)

    def audio(self, audio: str | InputFile) -> MenuTemplate:
        return self._with_media(MessageKind.AUDIO, audio)

    def document(self, document: str | InputFile) -> MenuTemplate:
        return self._with_media(MessageKind.DOCUMENT, document)

    def voice(self, voice: str | InputFile) -> MenuTemplate:
        return self._with_media(MessageKind.VOICE, voice)

    def _with_media(self, kind: MessageKind, media: str | InputFile) -> MenuTemplate:
        return MenuTemplate._copy_of(self, self._message.with_media(kind, media))

    # Рендер

    def render(
        self,
        template_id: str,
        render_id: str,
        *,
        max_callback_bytes: int | None = DEFAULT_MAX_CALLBACK_BYTES,
    ) -> RenderedMenu:
        wire_keyboard, handler_keyboard = build_keyboards(self._operations, render_id, max_callback_bytes)
        return RenderedMenu(
            inline_keyboard=wire_keyboard,
            template_id=template_id,
            render_id=render_id,
            handler_keyboard=handler_keyboard,
            message=self._message,
        )

    def __repr__(self) -> str:
        return f'<MenuTemplate(kind={self.kind.value!r}, operations={len(self._operations)})>'
