"""
Service: ExchangeRateCache
Cotação em USD por moeda, com expiração (TTL).
Em cache miss ou expiração, consulta a fonte remota e regrava a entrada.
"""

import asyncio
import logging
import math
import time
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from viewcoin.domain.currency import SupportedCurrency
from viewcoin.domain.errors import PriceLookupError, RateUnavailable, StoreError
from viewcoin.domain.exchange_rate import ExchangeRateEntry
from viewcoin.infrastructure.kv_store import KeyValueStore
from viewcoin.infrastructure.price_client import PriceSource

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 60 * 60


def _is_usable_price(price) -> bool:
    if isinstance(price, bool) or not isinstance(price, (int, float)):
        return False
    return math.isfinite(price) and price > 0


class ExchangeRateCache:
    """
    Cache de cotações em duas etapas:
    1. lookup(): leitura pura do armazenamento (sem I/O de rede)
    2. refill(): consulta remota + gravação da nova entrada

    Sem deduplicação de requisições: misses simultâneos para a mesma moeda
    disparam consultas independentes e a última gravação vence.
    """

    def __init__(
        self,
        store: KeyValueStore,
        price_source: PriceSource,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time
    ):
        self.store = store
        self.price_source = price_source
        self.ttl_seconds = ttl_seconds
        self.clock = clock

    async def get_usd_price(self, currency: SupportedCurrency) -> float:
        """
        Retorna o preço em USD da moeda (cache ou consulta remota).

        Raises:
            RateUnavailable: consulta remota ou armazenamento falharam
        """
        price = self.lookup(currency)
        if price is not None:
            return price
        return await self.refill(currency)

    def lookup(self, currency: SupportedCurrency) -> Optional[float]:
        """
        Busca a cotação no armazenamento.

        Returns:
            Preço se a entrada existe e não expirou, senão None

        Raises:
            RateUnavailable: erro de leitura do armazenamento
        """
        try:
            data = self.store.get(currency.id)
        except StoreError as e:
            logger.error(f"✗ Erro ao ler cache de {currency.id}: {e}")
            raise RateUnavailable(currency, "falha ao ler o cache", e) from e

        if data is None:
            logger.debug(f"Cache miss: {currency.id}")
            return None

        entry = ExchangeRateEntry.from_dict(currency, data)
        if entry is None:
            logger.warning(f"⚠ Entrada malformada no cache para {currency.id}: {data!r}")
            return None

        if entry.is_expired(self.clock()):
            logger.info(f"Cache de {currency.id} expirado, buscando novo valor")
            return None

        logger.debug(f"Cotação {currency.id} obtida do cache: {entry.usd_price}")
        return entry.usd_price

    async def refill(self, currency: SupportedCurrency) -> float:
        """
        Consulta a fonte remota e sobrescreve a entrada no armazenamento.

        Returns:
            Novo preço em USD

        Raises:
            RateUnavailable: consulta remota ou gravação falharam
        """
        try:
            price = await self.price_source.fetch_usd_price(currency)
        except PriceLookupError as e:
            logger.error(f"✗ Não foi possível obter cotação de {currency.id}: {e}")
            raise RateUnavailable(currency, "falha na consulta remota", e) from e

        if not _is_usable_price(price):
            logger.error(f"✗ Fonte retornou preço inutilizável para {currency.id}: {price!r}")
            raise RateUnavailable(currency, f"preço inválido: {price!r}")

        entry = ExchangeRateEntry(
            currency=currency,
            usd_price=price,
            expires_at=self.clock() + self.ttl_seconds
        )

        try:
            self.store.set(currency.id, entry.to_dict())
        except StoreError as e:
            logger.error(f"✗ Erro ao gravar cache de {currency.id}: {e}")
            raise RateUnavailable(currency, "falha ao gravar o cache", e) from e

        logger.info(f"✓ Cotação {currency.id} atualizada: {price}")
        return price

    async def prefetch(
        self,
        currencies: Iterable[SupportedCurrency] = tuple(SupportedCurrency)
    ) -> Tuple[Dict[SupportedCurrency, float], List[SupportedCurrency]]:
        """
        Aquece o cache para várias moedas em paralelo.

        Returns:
            Tupla: (preços obtidos, moedas que falharam)
        """
        currencies = list(currencies)
        results = await asyncio.gather(
            *(self.get_usd_price(c) for c in currencies),
            return_exceptions=True
        )

        prices = {}
        failed = []
        for currency, result in zip(currencies, results):
            if isinstance(result, RateUnavailable):
                failed.append(currency)
            elif isinstance(result, BaseException):
                raise result
            else:
                prices[currency] = result

        logger.info(f"Prefetch completo: {len(prices)} sucesso, {len(failed)} falharam")
        return prices, failed
