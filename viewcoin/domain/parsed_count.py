"""
Modelo de Domínio: Contagem de visualizações interpretada
"""

from dataclasses import dataclass
from enum import Enum
import math


class Magnitude(Enum):
    """Sufixo de magnitude (k, m, b) e seu multiplicador"""

    NONE = 1
    K = 1_000
    M = 1_000_000
    B = 1_000_000_000

    @classmethod
    def from_suffix(cls, suffix: str) -> 'Magnitude':
        """Converte a letra do sufixo (qualquer caixa) para o enum"""
        if not suffix:
            return cls.NONE
        return cls[suffix.upper()]


class NotANumber:
    """
    Sinal de entrada não numérica.
    Retornado (nunca lançado) quando não há padrão numérico na string.
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NaN"

    __str__ = __repr__


NOT_A_NUMBER = NotANumber()


def round_half_up(value: float) -> int:
    """Arredonda .5 para cima (não usa o arredondamento bancário de round())"""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class ParsedCount:
    """Valor numérico + magnitude extraídos de uma contagem"""

    value: float
    magnitude: Magnitude = Magnitude.NONE

    def __post_init__(self):
        if self.value < 0:
            raise ValueError(f"Contagem negativa: {self.value}")

    @property
    def multiplier(self) -> int:
        return self.magnitude.value

    @property
    def total_views(self) -> int:
        """Total de visualizações (inteiro)"""
        return round_half_up(self.value * self.multiplier)
