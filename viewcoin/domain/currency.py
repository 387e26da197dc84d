"""
Modelo de Domínio: Criptomoedas suportadas
Conjunto fechado: identificador na API de cotação + símbolo de exibição
"""

from enum import Enum


class SupportedCurrency(Enum):
    """Criptomoedas aceitas na conversão"""

    ETHEREUM = ("ethereum", "Ξ")
    BITCOIN = ("bitcoin", "₿")
    DOGECOIN = ("dogecoin", "Ð")

    def __init__(self, currency_id: str, symbol: str):
        self.id = currency_id
        self.symbol = symbol

    @classmethod
    def from_id(cls, currency_id: str) -> 'SupportedCurrency':
        """
        Converte identificador (ex: 'bitcoin') para o enum.

        Raises:
            ValueError: se a moeda não é suportada
        """
        normalized = (currency_id or "").strip().lower()
        for currency in cls:
            if currency.id == normalized:
                return currency
        raise ValueError(
            f"Moeda não suportada: {currency_id!r} "
            f"(opções: {', '.join(c.id for c in cls)})"
        )

    def __str__(self) -> str:
        return self.id
