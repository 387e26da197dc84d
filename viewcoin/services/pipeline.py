"""
Service: pipeline views -> USD -> cripto
string bruta -> parse -> to_usd -> to_crypto -> string formatada
"""

import asyncio
import logging
from typing import Iterable, List, Union

from viewcoin.domain.currency import SupportedCurrency
from viewcoin.domain.errors import RateUnavailable
from viewcoin.domain.parsed_count import NotANumber
from viewcoin.services.count_parser import parse
from viewcoin.services.converter import CurrencyConverter, format_display
from viewcoin.services.revenue import REVENUE_PER_VIEW, to_usd

logger = logging.getLogger(__name__)


async def views_to_crypto(
    raw: str,
    currency: SupportedCurrency,
    converter: CurrencyConverter,
    revenue_per_view: float = REVENUE_PER_VIEW
) -> Union[str, NotANumber]:
    """
    Converte uma contagem de visualizações em "<cripto> ($<usd>)".

    Tudo ou nada: NOT_A_NUMBER se a entrada não é numérica (sem consulta
    remota); RateUnavailable propaga se não há cotação.
    """
    parsed = parse(raw)
    if isinstance(parsed, NotANumber):
        return parsed

    total_views = parsed.total_views
    total_dollars = to_usd(total_views, revenue_per_view)
    crypto_amount = await converter.to_crypto(total_dollars, currency)

    result = format_display(crypto_amount, total_dollars)

    logger.debug(
        f"{raw!r}: views={total_views} usd={total_dollars} "
        f"{currency.id}={crypto_amount} -> {result}"
    )
    return result


class ConversionPipeline:
    """
    Ponto de entrada das conversões.
    Cada conversão é independente: uma falha não afeta as demais.
    """

    def __init__(self, converter: CurrencyConverter, revenue_per_view: float = REVENUE_PER_VIEW):
        self.converter = converter
        self.revenue_per_view = revenue_per_view

    async def convert(self, raw: str, currency: SupportedCurrency) -> Union[str, NotANumber]:
        return await views_to_crypto(raw, currency, self.converter, self.revenue_per_view)

    async def convert_many(
        self,
        raws: Iterable[str],
        currency: SupportedCurrency
    ) -> List[Union[str, NotANumber, RateUnavailable]]:
        """
        Converte várias contagens em paralelo (ex: um contador por post).

        Returns:
            Lista na mesma ordem da entrada; RateUnavailable fica no item que falhou
        """
        raws = list(raws)
        results = await asyncio.gather(
            *(self.convert(raw, currency) for raw in raws),
            return_exceptions=True
        )

        for raw, result in zip(raws, results):
            if isinstance(result, RateUnavailable):
                logger.warning(f"⚠ Conversão de {raw!r} falhou: {result}")
            elif isinstance(result, BaseException):
                raise result

        return results
