"""
Cliente de cotação: busca o preço em USD de uma criptomoeda
Implementação padrão via API CoinGecko (/simple/price)
"""

from abc import ABC, abstractmethod
import asyncio
import logging
import math
from typing import Optional

import requests
from requests.exceptions import RequestException

from viewcoin.domain.currency import SupportedCurrency
from viewcoin.domain.errors import PriceLookupError

logger = logging.getLogger(__name__)


class PriceSource(ABC):
    """Consulta remota de preço: retorna o preço ou lança PriceLookupError"""

    name = "price-source"

    @abstractmethod
    async def fetch_usd_price(self, currency: SupportedCurrency) -> float:
        """
        Busca o preço atual da moeda em USD.

        Raises:
            PriceLookupError: erro de rede, resposta inválida ou preço ausente
        """


class CoinGeckoPriceClient(PriceSource):
    """
    Cliente da API CoinGecko.
    A chamada HTTP (bloqueante, requests) roda em thread via asyncio.to_thread.
    Sem retry: uma falha vira PriceLookupError imediatamente.
    """

    name = "coingecko"

    def __init__(
        self,
        base_url: str = "https://api.coingecko.com/api/v3",
        timeout_seconds: float = 10.0,
        session: Optional[requests.Session] = None
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()

    async def fetch_usd_price(self, currency: SupportedCurrency) -> float:
        return await asyncio.to_thread(self.fetch_usd_price_sync, currency)

    def fetch_usd_price_sync(self, currency: SupportedCurrency) -> float:
        """Versão síncrona (usada pela thread e pelo health check)"""
        url = f"{self.base_url}/simple/price"
        params = {'ids': currency.id, 'vs_currencies': 'usd'}

        try:
            response = self.session.get(url, params=params, timeout=self.timeout_seconds)
        except RequestException as e:
            logger.warning(f"⚠ Erro de rede ao buscar {currency.id}: {e}")
            raise PriceLookupError(
                f"Erro de rede ao buscar {currency.id}",
                currency_id=currency.id,
                original_error=e
            ) from e

        if response.status_code != 200:
            if response.status_code == 429:
                logger.warning(f"⚠ Rate limit detectado ao buscar {currency.id}")
            raise PriceLookupError(
                f"HTTP {response.status_code} ao buscar {currency.id}",
                currency_id=currency.id,
                status_code=response.status_code
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise PriceLookupError(
                f"Resposta não é JSON para {currency.id}",
                currency_id=currency.id,
                status_code=response.status_code,
                original_error=e
            ) from e

        price = self._extract_price(payload, currency)
        logger.debug(f"✓ Cotação {currency.id} obtida da API: {price}")
        return price

    def _extract_price(self, payload, currency: SupportedCurrency) -> float:
        """Extrai payload[id]['usd'], validando que é um número positivo"""
        data = payload.get(currency.id) if isinstance(payload, dict) else None
        if not isinstance(data, dict) or 'usd' not in data:
            raise PriceLookupError(
                f"Resposta sem preço para {currency.id}",
                currency_id=currency.id
            )

        raw_price = data['usd']
        if isinstance(raw_price, bool) or not isinstance(raw_price, (int, float)):
            raise PriceLookupError(
                f"Preço não numérico para {currency.id}: {raw_price!r}",
                currency_id=currency.id
            )

        try:
            price = float(raw_price)
        except OverflowError as e:
            raise PriceLookupError(
                f"Preço fora do intervalo para {currency.id}",
                currency_id=currency.id,
                original_error=e
            ) from e

        if not math.isfinite(price) or price <= 0:
            raise PriceLookupError(
                f"Preço inválido para {currency.id}: {price}",
                currency_id=currency.id
            )
        return price

    def health_check(self) -> bool:
        """Verifica se a API responde com uma cotação válida"""
        try:
            self.fetch_usd_price_sync(SupportedCurrency.BITCOIN)
            return True
        except PriceLookupError as e:
            logger.error(f"✗ Health check API de cotação falhou: {e}")
            return False

    def close(self):
        self.session.close()
