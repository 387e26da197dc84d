"""
Service: CurrencyConverter
Converte USD em criptomoeda usando o ExchangeRateCache e formata para exibição
"""

import logging

from viewcoin.domain.currency import SupportedCurrency
from viewcoin.services.rate_cache import ExchangeRateCache

logger = logging.getLogger(__name__)

SMALL_AMOUNT_THRESHOLD = 0.1


class CurrencyConverter:
    """Conversão USD -> cripto"""

    def __init__(self, rate_cache: ExchangeRateCache):
        self.rate_cache = rate_cache

    async def to_crypto(self, usd_amount: float, currency: SupportedCurrency) -> float:
        """
        Converte um valor em USD para a moeda.

        Raises:
            RateUnavailable: cotação indisponível (não divide por preço ausente)
        """
        price = await self.rate_cache.get_usd_price(currency)
        logger.debug(f"Cotação {currency.id} em USD: {price}")
        return usd_amount / price


def format_amount(amount: float) -> str:
    """5 casas decimais abaixo de 0.1, senão 2"""
    if amount < SMALL_AMOUNT_THRESHOLD:
        return f"{amount:.5f}"
    return f"{amount:.2f}"


def format_display(crypto_amount: float, usd_amount: float) -> str:
    """Ex: '0.01234 ($26.00)'"""
    return f"{format_amount(crypto_amount)} (${format_amount(usd_amount)})"


def format_label(currency: SupportedCurrency, display: str) -> str:
    """Prefixa o símbolo da moeda: 'Ξ 0.01234 ($26.00)'"""
    return f"{currency.symbol} {display}"
