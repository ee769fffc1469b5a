from __future__ import annotations


class MenuError(Exception):
    """Base exception for menu registry errors."""


class TemplateNotFoundError(MenuError, LookupError):
    """Raised when a template id is not registered."""

    def __init__(self, template_id: str):
        self.template_id = template_id
        super().__init__(f"Template '{template_id}' is not registered")


class DuplicateTemplateError(MenuError, ValueError):
    """Raised when a template id is registered twice."""

    def __init__(self, template_id: str):
        self.template_id = template_id
        super().__init__(f"Template '{template_id}' is already registered")


class CallbackDataTooLongError(MenuError, ValueError):
    """Raised at render time when a generated callback address exceeds the platform limit."""

    def __init__(self, callback_data: str, limit: int):
        self.callback_data = callback_data
        self.limit = limit
        self.size = len(callback_data.encode('utf-8'))
        super().__init__(f'Callback data {callback_data!r} is {self.size} bytes, limit is {limit}')


class MenuStorageError(MenuError):
    """Storage backend failure or malformed stored record."""

    def __init__(self, message: str, key: str | None = None):
        self.message = message
        self.key = key
        super().__init__(self.message)
