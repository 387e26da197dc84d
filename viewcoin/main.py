"""
main.py - Entry point da aplicação
Converte contagens de visualizações em cripto pela linha de comando
"""

import argparse
import asyncio
import json
import sys
from datetime import datetime, timezone
from typing import List, Optional

from viewcoin.config import settings
from viewcoin.domain.currency import SupportedCurrency
from viewcoin.domain.errors import RateUnavailable
from viewcoin.domain.parsed_count import NotANumber
from viewcoin.infrastructure.database import Database
from viewcoin.infrastructure.kv_store import InMemoryKeyValueStore, KeyValueStore, SqlKeyValueStore
from viewcoin.infrastructure.logger import setup_logging, get_logger
from viewcoin.infrastructure.price_client import CoinGeckoPriceClient
from viewcoin.services.converter import CurrencyConverter, format_label
from viewcoin.services.pipeline import ConversionPipeline
from viewcoin.services.rate_cache import ExchangeRateCache

logger = get_logger(__name__)


def build_pipeline(store: KeyValueStore, price_client: CoinGeckoPriceClient):
    """
    Monta cache + conversor + pipeline a partir das configurações.

    Returns:
        Tupla: (ConversionPipeline, ExchangeRateCache)
    """
    rate_cache = ExchangeRateCache(
        store=store,
        price_source=price_client,
        ttl_seconds=settings.RATE_TTL_SECONDS
    )
    converter = CurrencyConverter(rate_cache)
    pipeline = ConversionPipeline(converter, revenue_per_view=settings.REVENUE_PER_VIEW)
    return pipeline, rate_cache


def init_store(in_memory: bool = False):
    """
    Inicializa o armazenamento do cache.

    Returns:
        Tupla: (KeyValueStore, Database ou None)
    """
    if in_memory:
        logger.info("Usando cache em memória")
        return InMemoryKeyValueStore(), None

    db = Database(settings.DATABASE_URL, echo=settings.DB_ECHO)
    if not db.initialize():
        logger.warning("Falha ao inicializar BD, usando cache em memória")
        return InMemoryKeyValueStore(), None

    return SqlKeyValueStore(db), db


async def run_conversions(
    pipeline: ConversionPipeline,
    rate_cache: ExchangeRateCache,
    counts: List[str],
    currency: SupportedCurrency,
    label: bool = False,
    prefetch: bool = False
) -> int:
    """
    Converte cada contagem e imprime uma linha por entrada.

    Returns:
        int: exit code (1 se alguma conversão falhou)
    """
    if prefetch:
        _, failed = await rate_cache.prefetch()
        if failed:
            logger.warning(f"Prefetch sem cotação para: {', '.join(c.id for c in failed)}")

    results = await pipeline.convert_many(counts, currency)

    exit_code = 0
    for raw, result in zip(counts, results):
        if isinstance(result, RateUnavailable):
            print(f"{raw}: erro - {result}")
            exit_code = 1
        elif isinstance(result, NotANumber):
            print(f"{raw}: {result}")
            exit_code = 1
        else:
            print(f"{raw}: {format_label(currency, result) if label else result}")

    return exit_code


def health_check(price_client: CoinGeckoPriceClient) -> dict:
    """
    Health check do sistema.

    Returns:
        dict com status de cada componente
    """
    status = {
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'components': {
            'database': False,
            'price_api': False,
        }
    }

    with Database(settings.DATABASE_URL, echo=settings.DB_ECHO) as db:
        if db.initialize():
            status['components']['database'] = db.health_check()

    status['components']['price_api'] = price_client.health_check()

    status['healthy'] = all(status['components'].values())

    return status


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="viewcoin",
        description="Converte contagens de visualizações em USD e criptomoeda"
    )
    parser.add_argument("counts", nargs="*", help='Contagens, ex: "12.3k" "1,250,000"')
    parser.add_argument(
        "--currency",
        choices=[c.id for c in SupportedCurrency],
        default=None,
        help=f"Moeda (padrão: {settings.DEFAULT_CURRENCY})"
    )
    parser.add_argument("--label", action="store_true", help="Prefixa o símbolo da moeda")
    parser.add_argument("--prefetch", action="store_true", help="Aquece o cache de todas as moedas")
    parser.add_argument("--memory", action="store_true", help="Cache em memória (sem BD)")
    parser.add_argument("--health", action="store_true", help="Executa o health check e sai")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point da aplicação"""
    args = parse_args(argv)
    setup_logging()

    price_client = CoinGeckoPriceClient(
        base_url=settings.PRICE_API_URL,
        timeout_seconds=settings.PRICE_API_TIMEOUT_SECONDS
    )

    try:
        if args.health:
            status = health_check(price_client)
            print(json.dumps(status, indent=2))
            return 0 if status['healthy'] else 1

        if not args.counts:
            logger.error("Nenhuma contagem informada")
            return 2

        currency = (
            SupportedCurrency.from_id(args.currency)
            if args.currency
            else settings.default_currency
        )
        logger.info(f"Configurações: {settings!r}")

        store, db = init_store(in_memory=args.memory)
        pipeline, rate_cache = build_pipeline(store, price_client)

        try:
            return asyncio.run(run_conversions(
                pipeline,
                rate_cache,
                args.counts,
                currency,
                label=args.label,
                prefetch=args.prefetch
            ))
        finally:
            if db is not None:
                db.close()
    finally:
        price_client.close()


if __name__ == '__main__':
    sys.exit(main())
