"""
Testes do ExchangeRateCache

Invariantes verificados:
1. Hit dentro do TTL não consulta a fonte remota
2. Após o TTL (now >= expires_at) consulta de novo e sobrescreve a entrada
3. Entrada ausente/malformada é miss
4. Falhas de fonte/armazenamento viram RateUnavailable (nunca 0/None)
"""

import asyncio
from unittest.mock import MagicMock

import pytest
import requests

from viewcoin.domain.currency import SupportedCurrency
from viewcoin.domain.errors import PriceLookupError, RateUnavailable, StoreError
from viewcoin.infrastructure.price_client import CoinGeckoPriceClient
from viewcoin.services.rate_cache import ExchangeRateCache

from tests.conftest import FailingStore, FakePriceSource, PRICES

ETH = SupportedCurrency.ETHEREUM
BTC = SupportedCurrency.BITCOIN


def get_price(cache, currency):
    return asyncio.run(cache.get_usd_price(currency))


# =============================================================================
# TTL
# =============================================================================


class TestExpiration:

    def test_first_call_fetches_and_stores(self, rate_cache, store, price_source, clock):
        assert get_price(rate_cache, ETH) == 2600.0
        assert price_source.call_count(ETH) == 1
        assert store.get("ethereum") == {
            'usd_price': 2600.0,
            'expires_at': clock.now + 3600,
        }

    def test_hit_within_ttl_does_not_fetch(self, rate_cache, price_source, clock):
        get_price(rate_cache, ETH)
        clock.advance(3599)

        assert get_price(rate_cache, ETH) == 2600.0
        assert price_source.call_count(ETH) == 1

    def test_expired_after_ttl_fetches_again(self, rate_cache, price_source, clock):
        get_price(rate_cache, ETH)
        clock.advance(3600)
        price_source.prices[ETH] = 2700.0

        assert get_price(rate_cache, ETH) == 2700.0
        assert price_source.call_count(ETH) == 2

    def test_refill_overwrites_entry(self, rate_cache, store, price_source, clock):
        get_price(rate_cache, ETH)
        clock.advance(4000)
        price_source.prices[ETH] = 2700.0
        get_price(rate_cache, ETH)

        assert store.get("ethereum") == {
            'usd_price': 2700.0,
            'expires_at': clock.now + 3600,
        }

    def test_currencies_are_cached_independently(self, rate_cache, price_source):
        get_price(rate_cache, ETH)
        get_price(rate_cache, BTC)
        get_price(rate_cache, BTC)

        assert price_source.call_count(ETH) == 1
        assert price_source.call_count(BTC) == 1

    def test_custom_ttl(self, store, price_source, clock):
        cache = ExchangeRateCache(store, price_source, ttl_seconds=10, clock=clock)
        get_price(cache, ETH)
        clock.advance(10)
        get_price(cache, ETH)

        assert price_source.call_count(ETH) == 2


# =============================================================================
# lookup() - etapa pura
# =============================================================================


class TestLookup:

    def test_miss_returns_none(self, rate_cache):
        assert rate_cache.lookup(ETH) is None

    def test_valid_entry(self, rate_cache, store, clock):
        store.set("ethereum", {'usd_price': 1234.5, 'expires_at': clock.now + 1})
        assert rate_cache.lookup(ETH) == 1234.5

    def test_expired_entry(self, rate_cache, store, clock):
        store.set("ethereum", {'usd_price': 1234.5, 'expires_at': clock.now})
        assert rate_cache.lookup(ETH) is None

    @pytest.mark.parametrize("entry", [
        {},
        {'usd_price': 100.0},
        {'expires_at': 2_000_000_000.0},
        {'usd_price': "abc", 'expires_at': 2_000_000_000.0},
        {'usd_price': "2600", 'expires_at': 2_000_000_000.0},
        {'usd_price': True, 'expires_at': 2_000_000_000.0},
        {'usd_price': 2600.0, 'expires_at': "2000000000"},
        {'usd_price': 0, 'expires_at': 2_000_000_000.0},
        {'usd_price': -5.0, 'expires_at': 2_000_000_000.0},
        {'usd': 100.0, 'expireTime': 2_000_000_000_000},
    ])
    def test_malformed_entry_is_miss(self, rate_cache, store, price_source, entry):
        store.set("ethereum", entry)

        assert rate_cache.lookup(ETH) is None
        assert get_price(rate_cache, ETH) == 2600.0
        assert price_source.call_count(ETH) == 1

    def test_lookup_does_not_fetch(self, rate_cache, price_source):
        rate_cache.lookup(ETH)
        assert price_source.calls == []


# =============================================================================
# Falhas
# =============================================================================


class TestFailures:

    def test_remote_failure_raises_rate_unavailable(self, store, clock):
        cache = ExchangeRateCache(store, FakePriceSource(), clock=clock)

        with pytest.raises(RateUnavailable) as exc_info:
            get_price(cache, ETH)

        assert exc_info.value.currency is ETH
        assert isinstance(exc_info.value.original_error, PriceLookupError)
        assert store.get("ethereum") is None

    @pytest.mark.parametrize("bad_price", [None, 0, 0.0, -1.0, float("nan"), float("inf"), "2600"])
    def test_unusable_price_raises_rate_unavailable(self, store, clock, bad_price):
        cache = ExchangeRateCache(store, FakePriceSource({ETH: bad_price}), clock=clock)

        with pytest.raises(RateUnavailable):
            get_price(cache, ETH)

        assert store.get("ethereum") is None

    def test_store_read_failure(self, price_source, clock):
        cache = ExchangeRateCache(FailingStore(fail_get=True), price_source, clock=clock)

        with pytest.raises(RateUnavailable) as exc_info:
            get_price(cache, ETH)

        assert isinstance(exc_info.value.original_error, StoreError)
        assert price_source.calls == []

    def test_store_write_failure(self, price_source, clock):
        cache = ExchangeRateCache(
            FailingStore(fail_get=False, fail_set=True), price_source, clock=clock
        )

        with pytest.raises(RateUnavailable) as exc_info:
            get_price(cache, ETH)

        assert isinstance(exc_info.value.original_error, StoreError)

    def test_failure_is_not_cached(self, store, clock):
        source = FakePriceSource()
        cache = ExchangeRateCache(store, source, clock=clock)

        with pytest.raises(RateUnavailable):
            get_price(cache, ETH)

        source.prices[ETH] = 2600.0
        assert get_price(cache, ETH) == 2600.0


# =============================================================================
# Concorrência e prefetch
# =============================================================================


class TestConcurrency:

    def test_concurrent_misses_each_fetch(self, rate_cache, price_source, store):
        async def run():
            return await asyncio.gather(*(rate_cache.get_usd_price(ETH) for _ in range(3)))

        assert asyncio.run(run()) == [2600.0, 2600.0, 2600.0]
        assert price_source.call_count(ETH) == 3
        assert store.get("ethereum")['usd_price'] == 2600.0

    def test_prefetch_all_currencies(self, rate_cache, price_source):
        prices, failed = asyncio.run(rate_cache.prefetch())

        assert prices == PRICES
        assert failed == []

        get_price(rate_cache, SupportedCurrency.DOGECOIN)
        assert price_source.call_count(SupportedCurrency.DOGECOIN) == 1

    def test_prefetch_reports_failures(self, store, clock):
        cache = ExchangeRateCache(store, FakePriceSource({BTC: 52000.0}), clock=clock)

        prices, failed = asyncio.run(cache.prefetch())

        assert prices == {BTC: 52000.0}
        assert failed == [ETH, SupportedCurrency.DOGECOIN]


class TestOversizedPrice:

    def test_price_overflow_becomes_rate_unavailable(self, store, clock):
        response = MagicMock(status_code=200)
        response.json.return_value = {"ethereum": {"usd": 10 ** 400}}
        session = MagicMock(spec=requests.Session)
        session.get.return_value = response
        cache = ExchangeRateCache(store, CoinGeckoPriceClient(session=session), clock=clock)

        with pytest.raises(RateUnavailable) as exc_info:
            get_price(cache, ETH)

        assert isinstance(exc_info.value.original_error, PriceLookupError)
        assert store.get("ethereum") is None
