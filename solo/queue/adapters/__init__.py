from .redis_list_broker import RedisListBroker

__all__ = ["RedisListBroker"]
