"""Modelos de datos para clasificación de parámetros del agua.

Dataclasses y enums usados por el motor de clasificación:
- RangeShape: forma del rango de referencia de cada parámetro
- ParameterSpec: rango de referencia + metadata de display
- ParameterStatus / DisplayClass: resultado cualitativo y bucket visual
- ClassifiedReading: resultado enriquecido para la API
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class RangeShape(str, Enum):
    """Forma del rango de referencia (no es uniforme entre parámetros)."""

    ZERO_TOLERANCE = "zero_tolerance"  # ammonia, nitrite
    UPPER_BOUNDED_PREFERRED = "upper_bounded_preferred"  # nitrate
    BOUNDED = "bounded"  # pH
    DUAL_UNIT_BOUNDED = "dual_unit_bounded"  # GH
    LOWER_BOUNDED = "lower_bounded"  # KH


class ParameterStatus(str, Enum):
    """Clasificación cualitativa de una lectura."""

    IDEAL = "ideal"
    PREFERRED = "preferred"
    OPTIMAL = "optimal"
    ACCEPTABLE = "acceptable"
    ELEVATED = "elevated"
    LOW = "low"
    WARNING = "warning"
    HIGH = "high"
    DANGER = "danger"
    UNKNOWN = "unknown"  # parámetro desconocido o valor vacío
    INVALID = "invalid"  # valor no numérico


class DisplayClass(str, Enum):
    """Bucket visual de severidad. El valor es la clase CSS de la página."""

    OK = "param-ok"
    ACCEPTABLE = "param-acceptable"
    ELEVATED = "param-elevated"
    WARNING = "param-warning"
    DANGER = "param-danger"
    UNKNOWN = "param-unknown"


class ReferenceTableError(ValueError):
    """Rango de referencia inconsistente (error de configuración)."""

    def __init__(self, key: str, message: str):
        self.key = key
        super().__init__(f"Parameter '{key}': {message}")


# Campos requeridos para clasificar, por forma
_REQUIRED_FIELDS = {
    RangeShape.ZERO_TOLERANCE: ("ideal_max", "caution_above", "danger_above"),
    RangeShape.UPPER_BOUNDED_PREFERRED: ("max_value", "preferred_below"),
    RangeShape.BOUNDED: ("min_value", "max_value"),
    RangeShape.DUAL_UNIT_BOUNDED: ("min_value", "max_value"),
    RangeShape.LOWER_BOUNDED: ("min_value",),
}


_THRESHOLD_FIELDS = (
    "ideal_max", "caution_above", "danger_above",
    "min_value", "max_value", "preferred_below",
    "alt_min", "alt_max",
)


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value)


def _ordered(low: Optional[float], high: Optional[float]) -> bool:
    if low is None or high is None:
        return True
    return low <= high


@dataclass(frozen=True)
class ParameterSpec:
    """Rango de referencia de un parámetro monitoreado.

    Los umbrales usados dependen de ``shape``. Las unidades alternativas
    (``alt_*``) son solo para display y nunca participan en la clasificación.
    """

    key: str
    label: str
    unit: str
    shape: RangeShape
    description: str = ""

    # Zero tolerance
    ideal_max: Optional[float] = None
    caution_above: Optional[float] = None
    danger_above: Optional[float] = None

    # Rango en unidad primaria
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    preferred_below: Optional[float] = None

    # Unidad alternativa (display)
    alt_unit: Optional[str] = None
    alt_min: Optional[float] = None
    alt_max: Optional[float] = None

    def __post_init__(self) -> None:
        missing = [f for f in _REQUIRED_FIELDS[self.shape] if getattr(self, f) is None]
        if missing:
            raise ReferenceTableError(
                self.key, f"shape {self.shape.value} requires {', '.join(missing)}"
            )
        not_numeric = [
            f for f in _THRESHOLD_FIELDS
            if getattr(self, f) is not None and not _is_number(getattr(self, f))
        ]
        if not_numeric:
            raise ReferenceTableError(
                self.key, f"thresholds must be numbers: {', '.join(not_numeric)}"
            )
        if not _ordered(self.caution_above, self.danger_above):
            raise ReferenceTableError(self.key, "caution_above must be <= danger_above")
        if not _ordered(self.ideal_max, self.caution_above):
            raise ReferenceTableError(self.key, "ideal_max must be <= caution_above")
        if not _ordered(self.min_value, self.max_value):
            raise ReferenceTableError(self.key, "min_value must be <= max_value")
        if not _ordered(self.preferred_below, self.max_value):
            raise ReferenceTableError(self.key, "preferred_below must be <= max_value")
        if not _ordered(self.alt_min, self.alt_max):
            raise ReferenceTableError(self.key, "alt_min must be <= alt_max")

    @property
    def midpoint(self) -> Optional[float]:
        if self.min_value is None or self.max_value is None:
            return None
        return (self.min_value + self.max_value) / 2

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "label": self.label,
            "unit": self.unit,
            "shape": self.shape.value,
            "description": self.description,
            "ideal_max": self.ideal_max,
            "caution_above": self.caution_above,
            "danger_above": self.danger_above,
            "min_value": self.min_value,
            "max_value": self.max_value,
            "preferred_below": self.preferred_below,
            "alt_unit": self.alt_unit,
            "alt_min": self.alt_min,
            "alt_max": self.alt_max,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ParameterSpec:
        """Construye un ParameterSpec desde un dict (JSON de configuración)."""
        return cls(
            key=str(data["key"]),
            label=str(data.get("label", data["key"])),
            unit=str(data.get("unit", "")),
            shape=RangeShape(data["shape"]),
            description=str(data.get("description", "")),
            ideal_max=data.get("ideal_max"),
            caution_above=data.get("caution_above"),
            danger_above=data.get("danger_above"),
            min_value=data.get("min_value"),
            max_value=data.get("max_value"),
            preferred_below=data.get("preferred_below"),
            alt_unit=data.get("alt_unit"),
            alt_min=data.get("alt_min"),
            alt_max=data.get("alt_max"),
        )


@dataclass(frozen=True)
class ClassifiedReading:
    """Resultado de la clasificación de una lectura."""

    parameter: str
    status: ParameterStatus
    display_class: DisplayClass
    value: Optional[float] = None
    reason: str = ""
