# viewcoin/domain/__init__.py
"""Domain Models - Entidades do sistema"""

from .currency import SupportedCurrency
from .parsed_count import Magnitude, ParsedCount, NotANumber, NOT_A_NUMBER, round_half_up
from .exchange_rate import ExchangeRateEntry, ExchangeRateEntrySchema, ExchangeRateModel
from .errors import ViewcoinError, PriceLookupError, StoreError, RateUnavailable

__all__ = [
    'SupportedCurrency',
    'Magnitude',
    'ParsedCount',
    'NotANumber',
    'NOT_A_NUMBER',
    'round_half_up',
    'ExchangeRateEntry',
    'ExchangeRateEntrySchema',
    'ExchangeRateModel',
    'ViewcoinError',
    'PriceLookupError',
    'StoreError',
    'RateUnavailable',
]
