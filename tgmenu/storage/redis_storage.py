import json
from typing import Any

import redis.asyncio as redis
import structlog

from tgmenu.config import settings
from tgmenu.errors import MenuStorageError


logger = structlog.get_logger(__name__)


class RedisMenuStorage:
    """
    Хранилище метаданных меню в Redis.

    Значения сериализуются в JSON. Клиент создаётся лениво при первом обращении.
    В отличие от кэшей, ошибки Redis не глотаются: меню без сохранённых
    метаданных не сможет пережить рестарт, вызывающий должен об этом узнать.
    """

    def __init__(
        self,
        redis_url: str | None = None,
        *,
        ttl: int | None = None,
        client: redis.Redis | None = None,
    ):
        self._redis_url = redis_url or settings.REDIS_URL
        self._ttl = ttl if ttl is not None else settings.MENU_STORAGE_TTL_SECONDS
        self._redis_client: redis.Redis | None = client

    def _get_redis_client(self) -> redis.Redis:
        """Ленивая инициализация Redis клиента."""
        if self._redis_client is not None:
            return self._redis_client

        try:
            self._redis_client = redis.from_url(self._redis_url)
        except Exception as e:
            logger.error('Не удалось создать Redis клиент для меню', error=e)
            raise MenuStorageError(f'Redis client init failed: {e}') from e

        logger.debug('Redis клиент для меню инициализирован')
        return self._redis_client

    async def read(self, key: str) -> dict[str, Any] | None:
        client = self._get_redis_client()
        try:
            raw = await client.get(key)
        except Exception as e:
            logger.error('Ошибка чтения меню из Redis', key=key, error=e)
            raise MenuStorageError(f'Redis read failed: {e}', key=key) from e

        if raw is None:
            return None

        try:
            value = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise MenuStorageError(f'Stored value is not valid JSON: {e}', key=key) from e

        if not isinstance(value, dict):
            raise MenuStorageError('Stored value is not an object', key=key)
        return value

    async def write(self, key: str, value: dict[str, Any]) -> None:
        client = self._get_redis_client()
        json_data = json.dumps(value, ensure_ascii=False)
        try:
            if self._ttl:
                await client.setex(key, self._ttl, json_data)
            else:
                await client.set(key, json_data)
        except Exception as e:
            logger.error('Ошибка записи меню в Redis', key=key, error=e)
            raise MenuStorageError(f'Redis write failed: {e}', key=key) from e

        logger.debug('Меню записано в Redis', key=key, ttl=self._ttl)

    async def delete(self, key: str) -> None:
        client = self._get_redis_client()
        try:
            await client.delete(key)
        except Exception as e:
            logger.error('Ошибка удаления меню из Redis', key=key, error=e)
            raise MenuStorageError(f'Redis delete failed: {e}', key=key) from e

    async def close(self) -> None:
        if self._redis_client is not None:
            await self._redis_client.aclose()
            self._redis_client = None
