"""Настройки меню, читаются из окружения и .env."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8', extra='ignore')

    # Префикс всех ключей в хранилище: {prefix}:menus:..., {prefix}:regular:..., {prefix}:inline:...
    MENU_STORAGE_PREFIX: str = 'menu'

    # Длина render id; алфавит token_urlsafe не содержит ':'
    MENU_RENDER_ID_LENGTH: int = Field(default=12, ge=4, le=43)

    # Сколько последних рендеров держать в памяти (0 - только через хранилище)
    MENU_RENDER_CACHE_SIZE: int = Field(default=1000, ge=0)

    # Лимит Telegram на callback_data
    CALLBACK_DATA_MAX_BYTES: int = Field(default=64, ge=1)

    REDIS_URL: str = 'redis://localhost:6379/0'
    MENU_STORAGE_TTL_SECONDS: int | None = None


settings = Settings()
