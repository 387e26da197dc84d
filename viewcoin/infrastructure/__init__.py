"""
viewcoin/infrastructure/__init__.py
Expõe as principais classes e funções da infraestrutura
"""

from .database import (
    Database,
    create_test_database
)
from .kv_store import KeyValueStore, InMemoryKeyValueStore, SqlKeyValueStore
from .price_client import PriceSource, CoinGeckoPriceClient
from .logger import setup_logging, get_logger

__all__ = [
    'Database',
    'create_test_database',
    'KeyValueStore',
    'InMemoryKeyValueStore',
    'SqlKeyValueStore',
    'PriceSource',
    'CoinGeckoPriceClient',
    'setup_logging',
    'get_logger',
]
