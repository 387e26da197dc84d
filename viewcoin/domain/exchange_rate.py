"""
Modelos de Domínio: Cotação em cache (USD por moeda)
"""

from pydantic import BaseModel, Field, ValidationError
from sqlalchemy import Column, String, Float, DateTime
from sqlalchemy.orm import declarative_base
from datetime import datetime, timezone
from typing import Optional, Dict, Any

from viewcoin.domain.currency import SupportedCurrency

Base = declarative_base()


# ════════════════════════════════════════════════════════════════
# MODELO PYDANTIC (Validação do que vem do armazenamento)
# ════════════════════════════════════════════════════════════════

class ExchangeRateEntrySchema(BaseModel):
    """Formato de uma entrada gravada no armazenamento chave-valor"""

    usd_price: float = Field(gt=0, allow_inf_nan=False, strict=True)
    expires_at: float = Field(allow_inf_nan=False, strict=True)  # timestamp POSIX (segundos)


# ════════════════════════════════════════════════════════════════
# MODELO SQLALCHEMY (Persistência)
# ════════════════════════════════════════════════════════════════

class ExchangeRateModel(Base):
    """Cache de cotações, uma linha por chave (moeda)"""
    __tablename__ = "exchange_rate_cache"

    key = Column(String(32), primary_key=True)
    usd_price = Column(Float, nullable=False)
    expires_at = Column(Float, nullable=False)
    updated_at = Column(DateTime, nullable=False)


# ════════════════════════════════════════════════════════════════
# CLASSE DE DOMÍNIO
# ════════════════════════════════════════════════════════════════

class ExchangeRateEntry:
    """
    Cotação de uma moeda com horário de expiração.
    Pertence exclusivamente ao cache; chamadores só recebem o preço.
    """

    def __init__(self, currency: SupportedCurrency, usd_price: float, expires_at: float):
        self.currency = currency
        self.usd_price = usd_price
        self.expires_at = expires_at

    def is_expired(self, now: float) -> bool:
        """Expirada quando now >= expires_at"""
        return now >= self.expires_at

    def to_dict(self) -> Dict[str, Any]:
        """Converte para o formato do armazenamento"""
        return {
            'usd_price': self.usd_price,
            'expires_at': self.expires_at,
        }

    @classmethod
    def from_dict(cls, currency: SupportedCurrency, data: Any) -> Optional['ExchangeRateEntry']:
        """
        Reconstrói a entrada a partir do armazenamento.

        Returns:
            ExchangeRateEntry ou None se ausente/malformada
        """
        if not isinstance(data, dict):
            return None
        try:
            schema = ExchangeRateEntrySchema.model_validate(data)
        except ValidationError:
            return None
        return cls(currency, schema.usd_price, schema.expires_at)

    def __repr__(self) -> str:
        expires = datetime.fromtimestamp(self.expires_at, tz=timezone.utc).isoformat()
        return (
            f"ExchangeRateEntry(currency={self.currency}, "
            f"usd_price={self.usd_price}, expires_at={expires})"
        )
