def rendered_menu_key(prefix: str, render_id: str) -> str:
    return f'{prefix}:menus:{render_id}'


def regular_navigation_key(prefix: str, chat_id: int, message_id: int) -> str:
    return f'{prefix}:regular:{chat_id}:{message_id}'


def inline_navigation_key(prefix: str, inline_message_id: str) -> str:
    return f'{prefix}:inline:{inline_message_id}'
