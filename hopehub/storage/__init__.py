"""
Persistence gateways for the remote document store.
"""

from .gateway import PersistenceGateway, SERVER_TIMESTAMP
from .memory_gateway import InMemoryGateway
from .mongo_gateway import MongoGateway

__all__ = ['PersistenceGateway', 'SERVER_TIMESTAMP', 'InMemoryGateway', 'MongoGateway']
