from tgmenu.storage.base import MenuStorage
from tgmenu.storage.memory_storage import MemoryMenuStorage
from tgmenu.storage.redis_storage import RedisMenuStorage


__all__ = [
    'MemoryMenuStorage',
    'MenuStorage',
    'RedisMenuStorage',
]
