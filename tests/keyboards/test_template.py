"""Тесты построителя шаблонов меню."""

import sys
from pathlib import Path


ROOT_DIR = Path(__file__).resolve().parents[2]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

import pytest
from aiogram.types import InlineKeyboardMarkup, MessageEntity

from tgmenu.keyboards.menu import RENDERED_MENU_TAG, RenderedMenu, is_rendered_menu
from tgmenu.keyboards.operations import HandlerButton, NativeButton, RowBreak
from tgmenu.keyboards.payloads import MessageKind, MessagePayload
from tgmenu.keyboards.template import MenuTemplate


async def noop(query, callback):
    return None


class TestBuilder:
    def test_methods_are_chainable_and_record_operations_in_order(self):
        template = MenuTemplate('Меню')

        result = template.cb('A', noop, payload='a').url('Site', 'https://example.com').row().raw_cb('Raw', 'raw:1')

        assert result is template
        operations = template.operations
        assert isinstance(operations[0], HandlerButton)
        assert operations[0].payload == 'a'
        assert isinstance(operations[1], NativeButton)
        assert operations[1].button.url == 'https://example.com'
        assert isinstance(operations[2], RowBreak)
        assert operations[3].button.callback_data == 'raw:1'

    def test_native_button_variants(self):
        template = (
            MenuTemplate()
            .web_app('App', 'https://app.example.com')
            .login('Login', 'https://login.example.com')
            .switch_inline('Share', 'q')
            .switch_inline_current('Here')
            .switch_inline_chosen('Chosen')
            .copy_text('Copy', 'secret')
            .game('Play')
            .pay('Pay')
        )

        buttons = [operation.button for operation in template.operations]
        assert buttons[0].web_app.url == 'https://app.example.com'
        assert buttons[1].login_url.url == 'https://login.example.com'
        assert buttons[2].switch_inline_query == 'q'
        assert buttons[3].switch_inline_query_current_chat == ''
        assert buttons[4].switch_inline_query_chosen_chat is not None
        assert buttons[5].copy_text.text == 'secret'
        assert buttons[6].callback_game is not None
        assert buttons[7].pay is True

    def test_text_and_parse_mode(self):
        template = MenuTemplate().add_text('Привет').parse_mode('HTML')

        assert template.message == MessagePayload(kind=MessageKind.TEXT, text='Привет', parse_mode='HTML')

    def test_entities_become_api_fields(self):
        bold = MessageEntity(type='bold', offset=0, length=6)
        template = MenuTemplate('Привет').entities([bold])

        assert template.message.entities == (bold,)
        assert template.message.api_fields() == {'text': 'Привет', 'entities': [bold]}
        assert template.photo('file-id').message.api_fields() == {'caption': 'Привет', 'caption_entities': [bold]}

    def test_cb_requires_callable(self):
        with pytest.raises(TypeError):
            MenuTemplate().cb('A', 'not a handler')

    def test_operations_view_is_read_only_copy(self):
        template = MenuTemplate().cb('A', noop)

        operations = template.operations
        template.cb('B', noop)

        assert len(operations) == 1
        assert len(template.operations) == 2


class TestMediaConversion:
    def test_photo_copies_operations_and_text(self):
        template = MenuTemplate('Подпись').cb('A', noop).row()

        photo = template.photo('file-id')

        assert photo is not template
        assert photo.kind is MessageKind.PHOTO
        assert photo.message.media == 'file-id'
        assert photo.message.text == 'Подпись'
        assert photo.operations == template.operations

    def test_conversion_does_not_share_operation_list(self):
        template = MenuTemplate('Текст').cb('A', noop)
        video = template.video('video-id')

        template.cb('B', noop)
        video.row().cb('C', noop)

        assert [op.label for op in template.operations if isinstance(op, HandlerButton)] == ['A', 'B']
        assert [op.label for op in video.operations if isinstance(op, HandlerButton)] == ['A', 'C']
        assert template.kind is MessageKind.TEXT

    @pytest.mark.parametrize(
        ('method', 'kind'),
        [
            ('photo', MessageKind.PHOTO),
            ('video', MessageKind.VIDEO),
            ('animation', MessageKind.ANIMATION),
            ('audio', MessageKind.AUDIO),
            ('document', MessageKind.DOCUMENT),
            ('voice', MessageKind.VOICE),
        ],
    )
    def test_every_media_kind(self, method, kind):
        converted = getattr(MenuTemplate('caption'), method)('media-id')

        assert converted.kind is kind
        assert converted.message.is_media
        assert converted.message.api_fields() == {'caption': 'caption'}

    def test_media_payload_requires_media(self):
        with pytest.raises(ValueError):
            MessagePayload(kind=MessageKind.PHOTO)


class TestRender:
    def test_render_produces_tagged_menu(self):
        template = MenuTemplate('Меню').parse_mode('HTML').cb('A', noop).row().cb('B', noop)

        menu = template.render('main', 'R1')

        assert isinstance(menu, RenderedMenu)
        assert isinstance(menu, InlineKeyboardMarkup)
        assert is_rendered_menu(menu)
        assert menu.menu_tag == RENDERED_MENU_TAG
        assert menu.template_id == 'main'
        assert menu.render_id == 'R1'
        assert menu.text == 'Меню'
        assert menu.message.parse_mode == 'HTML'
        assert [[b.callback_data for b in row] for row in menu.inline_keyboard] == [['R1:0:0'], ['R1:1:0']]
        assert menu.handler_at(1, 0).handler is noop

    def test_empty_template(self):
        menu = MenuTemplate().render('empty', 'R1')

        assert menu.inline_keyboard == []
        assert menu.handler_keyboard == []

    def test_plain_markup_is_not_a_menu(self):
        menu = MenuTemplate().cb('A', noop).render('main', 'R1')

        markup = menu.to_markup()

        assert type(markup) is InlineKeyboardMarkup
        assert not is_rendered_menu(markup)
        assert markup.inline_keyboard[0][0].callback_data == 'R1:0:0'
        assert 'template_id' not in markup.model_dump()

    def test_menu_metadata_is_not_serialized(self):
        menu = MenuTemplate('Меню').cb('A', noop).render('main', 'R1')

        dumped = menu.model_dump(exclude_none=True)

        assert set(dumped) == {'inline_keyboard'}
