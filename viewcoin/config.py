"""
config.py - Configurações com Pydantic

Carrega variáveis de .env e do ambiente do SO
"""

from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import ConfigDict

from viewcoin.domain.currency import SupportedCurrency


class Settings(BaseSettings):
    """
    Configurações da aplicação.

    Carrega variáveis de:
    1. .env (arquivo local)
    2. Variáveis de ambiente do SO
    """

    # ═══════════════════════════════════════════════════════════
    # CONVERSÃO
    # ═══════════════════════════════════════════════════════════

    DEFAULT_CURRENCY: str = "ethereum"
    """Moeda padrão: ethereum, bitcoin ou dogecoin"""

    REVENUE_PER_VIEW: float = 0.000026
    """Receita estimada (USD) por visualização"""

    RATE_TTL_SECONDS: int = 3600
    """Validade da cotação em cache (segundos)"""

    # ═══════════════════════════════════════════════════════════
    # API DE COTAÇÃO
    # ═══════════════════════════════════════════════════════════

    PRICE_API_URL: str = "https://api.coingecko.com/api/v3"
    """URL base da API CoinGecko"""

    PRICE_API_TIMEOUT_SECONDS: float = 10.0
    """Timeout da requisição HTTP"""

    # ═══════════════════════════════════════════════════════════
    # DATABASE (cache de cotações)
    # ═══════════════════════════════════════════════════════════

    DATABASE_URL: str = "sqlite:///viewcoin_cache.db"
    """URL de conexão do cache persistente"""

    DB_ECHO: bool = False
    """Echo de SQL queries (debug)"""

    # ═══════════════════════════════════════════════════════════
    # LOGGING
    # ═══════════════════════════════════════════════════════════

    LOG_LEVEL: str = "INFO"
    """Nível de log: DEBUG, INFO, WARNING, ERROR"""

    LOG_FORMAT: str = "json"
    """Formato: json ou texto"""

    LOG_FILE: Optional[str] = None
    """Arquivo de log (None = stdout)"""

    # ═══════════════════════════════════════════════════════════
    # PYDANTIC CONFIG
    # ═══════════════════════════════════════════════════════════

    model_config = ConfigDict(
        extra='allow',
        env_file='.env',
        case_sensitive=True
    )

    # ═══════════════════════════════════════════════════════════
    # PROPRIEDADES CALCULADAS
    # ═══════════════════════════════════════════════════════════

    @property
    def default_currency(self) -> SupportedCurrency:
        """Retorna a moeda padrão como enum"""
        return SupportedCurrency.from_id(self.DEFAULT_CURRENCY)

    def __repr__(self):
        return (
            f"Settings("
            f"currency={self.DEFAULT_CURRENCY}, "
            f"ttl={self.RATE_TTL_SECONDS}s, "
            f"database={self.DATABASE_URL.split('///')[-1]}"
            f")"
        )


# ═══════════════════════════════════════════════════════════
# INSTÂNCIA GLOBAL
# ═══════════════════════════════════════════════════════════

try:
    settings = Settings()
except Exception as e:
    print(f"❌ Erro ao carregar Settings: {e}")
    raise
