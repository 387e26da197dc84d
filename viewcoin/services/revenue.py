"""
Service: receita estimada por visualizações
"""

from decimal import Decimal

REVENUE_PER_VIEW = 0.000026
"""USD por visualização"""


def to_usd(total_views: int, revenue_per_view: float = REVENUE_PER_VIEW) -> float:
    """
    Converte visualizações em USD (views * receita por view).
    Calculado em Decimal para que 1_000_000 views dê exatamente 26.0.
    """
    if total_views < 0:
        raise ValueError(f"Total de visualizações negativo: {total_views}")
    return float(Decimal(total_views) * Decimal(str(revenue_per_view)))
