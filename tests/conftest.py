"""
Fixtures compartilhadas: relógio controlável, fonte de cotação falsa e
armazenamentos em memória/com falha.
"""

import asyncio

import pytest

from viewcoin.domain.currency import SupportedCurrency
from viewcoin.domain.errors import PriceLookupError, StoreError
from viewcoin.infrastructure.kv_store import InMemoryKeyValueStore, KeyValueStore
from viewcoin.infrastructure.price_client import PriceSource
from viewcoin.services.converter import CurrencyConverter
from viewcoin.services.pipeline import ConversionPipeline
from viewcoin.services.rate_cache import ExchangeRateCache


class FakeClock:
    """Relógio manual (segundos POSIX)"""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class FakePriceSource(PriceSource):
    """Fonte de cotação com preços fixos; conta as chamadas por moeda"""

    name = "fake"

    def __init__(self, prices=None):
        self.prices = dict(prices or {})
        self.calls = []

    async def fetch_usd_price(self, currency: SupportedCurrency) -> float:
        self.calls.append(currency)
        await asyncio.sleep(0)
        if currency not in self.prices:
            raise PriceLookupError(f"sem preço para {currency.id}", currency_id=currency.id)
        return self.prices[currency]

    def call_count(self, currency: SupportedCurrency) -> int:
        return sum(1 for c in self.calls if c is currency)


class FailingStore(KeyValueStore):
    """Armazenamento que falha na leitura e/ou gravação"""

    def __init__(self, fail_get: bool = True, fail_set: bool = True):
        self.fail_get = fail_get
        self.fail_set = fail_set
        self._inner = InMemoryKeyValueStore()

    def get(self, key):
        if self.fail_get:
            raise StoreError(f"leitura indisponível: {key}")
        return self._inner.get(key)

    def set(self, key, entry):
        if self.fail_set:
            raise StoreError(f"gravação indisponível: {key}")
        self._inner.set(key, entry)


PRICES = {
    SupportedCurrency.ETHEREUM: 2600.0,
    SupportedCurrency.BITCOIN: 52000.0,
    SupportedCurrency.DOGECOIN: 0.13,
}


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return InMemoryKeyValueStore()


@pytest.fixture
def price_source():
    return FakePriceSource(PRICES)


@pytest.fixture
def rate_cache(store, price_source, clock):
    return ExchangeRateCache(store, price_source, ttl_seconds=3600, clock=clock)


@pytest.fixture
def converter(rate_cache):
    return CurrencyConverter(rate_cache)


@pytest.fixture
def pipeline(converter):
    return ConversionPipeline(converter)
