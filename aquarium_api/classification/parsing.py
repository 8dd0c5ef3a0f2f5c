"""Parseo de valores de lectura ingresados por el usuario.

Modo permisivo (default): acepta el prefijo numérico más largo del texto,
igual que el manejo habitual de inputs numéricos en la página
(``"12abc"`` → 12.0, ``"1e3"`` → 1000.0, ``".5"`` → 0.5).

Modo estricto: todo el texto (sin espacios laterales) debe ser un float.
"""

from __future__ import annotations

import math
import re
from typing import Any, Optional

_NUMERIC_PREFIX = re.compile(
    r"""
    [+-]?
    (?:
        Infinity
      | (?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?
    )
    """,
    re.VERBOSE,
)

_STRICT_NUMBER = re.compile(r"[+-]?(?:inf(?:inity)?|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)", re.IGNORECASE)


def is_blank(raw: Any) -> bool:
    """Valor ausente: None o texto vacío (un texto con espacios NO es vacío)."""
    return raw is None or raw == ""


def parse_reading_value(raw: Any, strict: bool = False) -> Optional[float]:
    """Convierte un valor crudo a float.

    Args:
        raw: Valor externo (texto del formulario, número, etc.)
        strict: Si True, rechaza texto con basura después del número

    Returns:
        float parseado, o None si no es un número válido (NaN incluido)
    """
    # bool es subclase de int pero no es una lectura numérica
    if isinstance(raw, bool):
        return None

    if isinstance(raw, (int, float)):
        try:
            value = float(raw)
        except OverflowError:
            # int demasiado grande para float: se satura a ±inf
            value = math.inf if raw > 0 else -math.inf
        return None if math.isnan(value) else value

    if not isinstance(raw, str):
        return None

    text = raw.strip()
    if strict:
        if not _STRICT_NUMBER.fullmatch(text):
            return None
        return float(text)

    match = _NUMERIC_PREFIX.match(text)
    if not match:
        return None
    token = match.group(0)
    if token.lstrip("+-") == "Infinity":
        return -math.inf if token.startswith("-") else math.inf
    return float(token)
