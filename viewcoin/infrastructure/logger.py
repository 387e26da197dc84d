"""
Logger: Logging estruturado com structlog
"""

import structlog
import logging
import sys
from viewcoin.config import settings


def setup_logging():
    """Configura logging estruturado"""

    # Console (stderr, para não misturar com o resultado no stdout) ou arquivo
    handler_kwargs = (
        {"filename": settings.LOG_FILE}
        if settings.LOG_FILE
        else {"stream": sys.stderr}
    )
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, settings.LOG_LEVEL.upper()),
        **handler_kwargs,
    )

    # Configurar structlog
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
            if settings.LOG_FORMAT == "json"
            else structlog.dev.ConsoleRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str):
    """Retorna logger estruturado"""
    return structlog.get_logger(name)
