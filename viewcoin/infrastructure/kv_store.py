"""
Armazenamento chave-valor do cache de cotações
Chave = identificador da moeda, valor = {usd_price, expires_at}
Escritas sempre substituem a entrada inteira
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Optional
import logging

from sqlalchemy.exc import SQLAlchemyError

from viewcoin.domain.errors import StoreError
from viewcoin.domain.exchange_rate import ExchangeRateModel
from viewcoin.infrastructure.database import Database

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """Interface get/set usada pelo ExchangeRateCache"""

    @abstractmethod
    def get(self, key: str) -> Optional[Dict[str, Any]]:
        """
        Lê a entrada da chave.

        Returns:
            dict ou None se ausente

        Raises:
            StoreError: falha de acesso ao armazenamento
        """

    @abstractmethod
    def set(self, key: str, entry: Dict[str, Any]) -> None:
        """
        Grava (sobrescreve) a entrada da chave.

        Raises:
            StoreError: falha de acesso ao armazenamento
        """


class InMemoryKeyValueStore(KeyValueStore):
    """Armazenamento em memória (processo atual)"""

    def __init__(self):
        self._data: Dict[str, Dict[str, Any]] = {}

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        entry = self._data.get(key)
        return dict(entry) if entry is not None else None

    def set(self, key: str, entry: Dict[str, Any]) -> None:
        self._data[key] = dict(entry)

    def __len__(self) -> int:
        return len(self._data)


class SqlKeyValueStore(KeyValueStore):
    """
    Armazenamento persistente via SQLAlchemy (tabela exchange_rate_cache).
    Uma linha por chave; set faz upsert com session.merge.
    """

    def __init__(self, db: Database):
        self.db = db

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        try:
            with self.db.get_session() as session:
                row = session.get(ExchangeRateModel, key)
                if row is None:
                    return None
                return {
                    'usd_price': row.usd_price,
                    'expires_at': row.expires_at,
                }
        except SQLAlchemyError as e:
            raise StoreError(f"Erro ao ler chave {key}", original_error=e) from e

    def set(self, key: str, entry: Dict[str, Any]) -> None:
        try:
            with self.db.get_session() as session:
                session.merge(ExchangeRateModel(
                    key=key,
                    usd_price=entry['usd_price'],
                    expires_at=entry['expires_at'],
                    updated_at=datetime.now(timezone.utc).replace(tzinfo=None),
                ))
            logger.debug(f"Entrada gravada: {key} = {entry['usd_price']}")
        except SQLAlchemyError as e:
            raise StoreError(f"Erro ao gravar chave {key}", original_error=e) from e
