"""
Exceções do domínio
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional


class ViewcoinError(Exception):
    """Exceção base do viewcoin"""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """Converte para dicionário (logging)"""
        return {
            'error_type': self.__class__.__name__,
            'message': self.message,
            'original_error': str(self.original_error) if self.original_error else None,
            'timestamp': self.timestamp.isoformat(),
        }

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.message} (causa: {self.original_error})"
        return self.message


class PriceLookupError(ViewcoinError):
    """Falha na consulta remota de cotação"""

    def __init__(
        self,
        message: str,
        currency_id: Optional[str] = None,
        status_code: Optional[int] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message, original_error)
        self.currency_id = currency_id
        self.status_code = status_code

    def is_rate_limited(self) -> bool:
        return self.status_code == 429


class StoreError(ViewcoinError):
    """Falha de leitura/escrita no armazenamento chave-valor"""


class RateUnavailable(ViewcoinError):
    """
    Cotação indisponível para a moeda.
    Propagada ao chamador de to_crypto/convert; nunca vira 0 ou None.
    """

    def __init__(self, currency, reason: str, original_error: Optional[Exception] = None):
        super().__init__(f"Cotação indisponível para {currency}: {reason}", original_error)
        self.currency = currency
        self.reason = reason

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data['currency'] = str(self.currency)
        data['reason'] = self.reason
        return data
