from .factory import build_broker
from .in_memory import InMemoryBroker
from .interface import BrokerInterface
from .adapters.redis_list_broker import RedisListBroker

__all__ = ["BrokerInterface", "InMemoryBroker", "RedisListBroker", "build_broker"]
