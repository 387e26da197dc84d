"""
Service: parser de contagens de visualizações
Converte strings como "12.3k", "1,250,000" ou "1.234,5" em número de views
"""

import math
import re
import logging
from typing import Optional, Union

from viewcoin.domain.parsed_count import Magnitude, NotANumber, NOT_A_NUMBER, ParsedCount

logger = logging.getLogger(__name__)

# Sequência de dígitos/separadores com pelo menos um dígito + sufixo opcional
NUMBER_PATTERN = re.compile(r"([\d,.]*\d[\d,.]*)([kmb]?)", re.IGNORECASE)

SEPARATORS = ",."

LEADING_FLOAT = re.compile(r"\d*\.?\d*")


def parse(raw: Optional[str]) -> Union[ParsedCount, NotANumber]:
    """
    Interpreta uma contagem de visualizações.

    Separadores: se ',' ou '.' aparece nos 3 últimos caracteres do trecho
    numérico, o separador mais à direita é o decimal e os demais são de
    agrupamento. Caso contrário só as vírgulas são de agrupamento e o
    ponto é decimal (ex: "1.234" -> 1.234).

    Args:
        raw: String bruta (ex: "12.3k")

    Returns:
        ParsedCount ou NOT_A_NUMBER se não há padrão numérico
    """
    if not raw:
        return NOT_A_NUMBER

    match = NUMBER_PATTERN.search(raw)
    if not match:
        logger.debug(f"Sem padrão numérico em {raw!r}")
        return NOT_A_NUMBER

    numeric_part, suffix = match.groups()
    value = _normalize_number(numeric_part)
    magnitude = Magnitude.from_suffix(suffix)

    if value is None or not math.isfinite(value * magnitude.value):
        logger.debug(f"Valor numérico inválido em {raw!r}")
        return NOT_A_NUMBER

    return ParsedCount(value=value, magnitude=magnitude)


def parse_views(raw: Optional[str]) -> Union[int, NotANumber]:
    """Atalho: retorna direto o total de visualizações (inteiro)"""
    parsed = parse(raw)
    if isinstance(parsed, NotANumber):
        return parsed
    return parsed.total_views


def _normalize_number(numeric_part: str) -> Optional[float]:
    """
    Resolve separadores decimais/de agrupamento e converte para float.

    Returns:
        float ou None se não sobra número válido
    """
    tail = numeric_part[-3:]

    if any(sep in tail for sep in SEPARATORS):
        decimal_index = max(numeric_part.rfind(sep) for sep in SEPARATORS)
        integer_part = _strip_separators(numeric_part[:decimal_index]) or "0"
        decimal_part = numeric_part[decimal_index + 1:] or "0"
        return float(f"{integer_part}.{decimal_part}")

    # Só vírgulas são agrupamento; lê o maior prefixo numérico ("1.234.567" -> 1.234)
    prefix = LEADING_FLOAT.match(numeric_part.replace(",", "")).group(0)
    if not any(ch.isdigit() for ch in prefix):
        return None
    return float(prefix)


def _strip_separators(text: str) -> str:
    return text.replace(",", "").replace(".", "")
