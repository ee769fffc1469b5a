import sys
from pathlib import Path


ROOT_DIR = Path(__file__).resolve().parents[2]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from aiogram.methods import EditMessageText, SendMessage, SendPhoto
from aiogram.types import Chat, InlineKeyboardMarkup, Message, MessageEntity

from tgmenu.errors import MenuStorageError
from tgmenu.keyboards.template import MenuTemplate
from tgmenu.middlewares.navigation import MenuNavigationMiddleware
from tgmenu.services.menu_registry import MenuRegistry
from tgmenu.storage.memory_storage import MemoryMenuStorage


def _message(chat_id: int = 100, message_id: int = 10) -> Message:
    return Message(
        message_id=message_id,
        date=datetime.now(timezone.utc),
        chat=Chat(id=chat_id, type='private'),
        text='hi',
    )


async def _noop(query, callback):
    return None


@pytest.fixture
def storage():
    return MemoryMenuStorage()


@pytest.fixture
def registry(storage):
    registry = MenuRegistry(storage, prefix='test')
    registry.register('main', MenuTemplate('Главное меню').cb('Профиль', _noop).cb('Баланс', _noop))
    registry.register('profile', MenuTemplate('Профиль').cb('Назад', _noop))
    return registry


@pytest.fixture
def middleware(registry):
    return registry.request_middleware()


async def test_menu_is_replaced_with_plain_markup(registry, middleware):
    menu = registry.render('main')
    make_request = AsyncMock(return_value=_message())

    await middleware(make_request, MagicMock(), SendMessage(chat_id=100, text='hi', reply_markup=menu))

    sent = make_request.await_args.args[1]
    assert type(sent.reply_markup) is InlineKeyboardMarkup
    assert sent.reply_markup.inline_keyboard == menu.inline_keyboard
    assert sent.text == 'hi'


async def test_successful_send_persists_menu_and_history(registry, middleware, storage):
    menu = registry.render('main')
    make_request = AsyncMock(return_value=_message(chat_id=100, message_id=10))

    result = await middleware(make_request, MagicMock(), SendMessage(chat_id=100, text='hi', reply_markup=menu))

    assert result.message_id == 10
    saved = await storage.read(f'test:menus:{menu.render_id}')
    assert saved['template_id'] == 'main'
    history = await storage.read('test:regular:100:10')
    assert [item['render_id'] for item in history['navigation_history']] == [menu.render_id]


async def test_same_menu_is_recorded_once(registry, middleware, storage):
    menu = registry.render('main')
    make_request = AsyncMock(return_value=_message())

    await middleware(make_request, MagicMock(), SendMessage(chat_id=100, text='hi', reply_markup=menu))
    await middleware(make_request, MagicMock(), SendMessage(chat_id=100, text='hi', reply_markup=menu))

    history = await storage.read('test:regular:100:10')
    assert len(history['navigation_history']) == 1


async def test_next_menu_is_appended(registry, middleware, storage):
    first = registry.render('main')
    second = registry.render('profile')
    make_request = AsyncMock(return_value=_message())

    await middleware(make_request, MagicMock(), SendMessage(chat_id=100, text='hi', reply_markup=first))
    await middleware(make_request, MagicMock(), SendMessage(chat_id=100, text='hi', reply_markup=second))

    history = await storage.read('test:regular:100:10')
    assert [item['template_id'] for item in history['navigation_history']] == ['main', 'profile']


async def test_failed_request_persists_nothing(registry, middleware, storage):
    menu = registry.render('main')
    make_request = AsyncMock(side_effect=RuntimeError('network down'))

    with pytest.raises(RuntimeError):
        await middleware(make_request, MagicMock(), SendMessage(chat_id=100, text='hi', reply_markup=menu))

    assert len(storage) == 0


async def test_storage_failure_after_send_reaches_caller(registry, middleware, storage, monkeypatch):
    menu = registry.render('main')
    make_request = AsyncMock(return_value=_message())
    monkeypatch.setattr(storage, 'write', AsyncMock(side_effect=ConnectionError('redis down')))

    with pytest.raises(MenuStorageError):
        await middleware(make_request, MagicMock(), SendMessage(chat_id=100, text='hi', reply_markup=menu))

    make_request.assert_awaited_once()
    assert 'test:regular:100:10' not in storage


async def test_inline_message_edit_uses_inline_key(registry, middleware, storage):
    menu = registry.render('main')
    make_request = AsyncMock(return_value=True)
    method = EditMessageText(inline_message_id='AbC123', text='hi', reply_markup=menu)

    result = await middleware(make_request, MagicMock(), method)

    assert result is True
    history = await storage.read('test:inline:AbC123')
    assert history['navigation_history'][0]['render_id'] == menu.render_id


async def test_menu_without_navigation_key_still_saves_metadata(registry, middleware, storage):
    menu = registry.render('main')
    make_request = AsyncMock(return_value=True)
    method = EditMessageText(chat_id=100, message_id=10, text='hi', reply_markup=menu)

    await middleware(make_request, MagicMock(), method)

    assert f'test:menus:{menu.render_id}' in storage
    assert 'test:regular:100:10' not in storage


async def test_plain_request_passes_through(middleware, storage):
    method = SendMessage(chat_id=100, text='hi')
    make_request = AsyncMock(return_value=_message())

    await middleware(make_request, MagicMock(), method)

    assert make_request.await_args.args[1] is method
    assert len(storage) == 0


async def test_template_text_fills_empty_text(registry, middleware):
    menu = registry.render('main')
    make_request = AsyncMock(return_value=_message())

    await middleware(make_request, MagicMock(), SendMessage(chat_id=100, text='', reply_markup=menu))

    assert make_request.await_args.args[1].text == 'Главное меню'


async def test_template_text_fills_media_caption(storage):
    registry = MenuRegistry(storage, prefix='test')
    registry.register('gallery', MenuTemplate('Подпись', parse_mode='HTML').cb('Дальше', _noop).photo('file-id'))
    menu = registry.render('gallery')
    make_request = AsyncMock(return_value=_message())

    await MenuNavigationMiddleware(registry.navigation)(
        make_request, MagicMock(), SendPhoto(chat_id=100, photo='file-id', reply_markup=menu)
    )

    sent = make_request.await_args.args[1]
    assert sent.caption == 'Подпись'
    assert sent.parse_mode == 'HTML'


def test_request_middleware_requires_storage():
    with pytest.raises(ValueError):
        MenuRegistry().request_middleware()


async def test_template_entities_fill_request(storage):
    bold = MessageEntity(type='bold', offset=0, length=5)
    registry = MenuRegistry(storage, prefix='test')
    registry.register('styled', MenuTemplate('Жирно').entities([bold]).cb('Дальше', _noop))
    menu = registry.render('styled')
    make_request = AsyncMock(return_value=_message())

    await registry.request_middleware()(make_request, MagicMock(), SendMessage(chat_id=100, text='', reply_markup=menu))

    sent = make_request.await_args.args[1]
    assert sent.text == 'Жирно'
    assert sent.entities == [bold]
