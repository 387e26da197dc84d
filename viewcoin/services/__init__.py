# viewcoin/services/__init__.py
"""Services - Lógica de negócio"""

from .count_parser import parse, parse_views
from .revenue import REVENUE_PER_VIEW, to_usd
from .rate_cache import ExchangeRateCache
from .converter import CurrencyConverter, format_amount, format_display, format_label
from .pipeline import ConversionPipeline, views_to_crypto

__all__ = [
    'parse',
    'parse_views',
    'REVENUE_PER_VIEW',
    'to_usd',
    'ExchangeRateCache',
    'CurrencyConverter',
    'format_amount',
    'format_display',
    'format_label',
    'ConversionPipeline',
    'views_to_crypto',
]
