"""ParameterClassifier - Clasificador de lecturas de parámetros del agua.

Clasifica una lectura cruda contra la tabla de referencia inyectada.
Es puro y sin estado mutable: seguro para llamadas concurrentes.

Orden de evaluación:
1. Parámetro desconocido o valor vacío → UNKNOWN
2. Valor no numérico → INVALID
3. Reglas según la forma del rango (primera coincidencia gana)
"""

from __future__ import annotations

from typing import Any, Optional

from .display import status_to_display_class
from .models import ClassifiedReading, ParameterSpec, ParameterStatus, RangeShape
from .parsing import is_blank, parse_reading_value
from .reference_table import FreshwaterTableProvider, ReferenceTable

# Distancia absoluta al punto medio del rango para considerar OPTIMAL
OPTIMAL_BAND = 0.2


def _classify_zero_tolerance(spec: ParameterSpec, value: float) -> ParameterStatus:
    if value <= spec.ideal_max:
        return ParameterStatus.IDEAL
    if value > spec.danger_above:
        return ParameterStatus.DANGER
    if value > spec.caution_above:
        return ParameterStatus.WARNING
    return ParameterStatus.ELEVATED


def _classify_upper_bounded(spec: ParameterSpec, value: float) -> ParameterStatus:
    if value <= spec.preferred_below:
        return ParameterStatus.PREFERRED
    if value <= spec.max_value:
        return ParameterStatus.ACCEPTABLE
    return ParameterStatus.HIGH


def _classify_bounded(spec: ParameterSpec, value: float) -> ParameterStatus:
    if value < spec.min_value:
        return ParameterStatus.LOW
    if value > spec.max_value:
        return ParameterStatus.HIGH
    if abs(value - spec.midpoint) <= OPTIMAL_BAND:
        return ParameterStatus.OPTIMAL
    return ParameterStatus.ACCEPTABLE


def _classify_dual_unit(spec: ParameterSpec, value: float) -> ParameterStatus:
    # Solo la unidad primaria; alt_min/alt_max son de display
    if value < spec.min_value:
        return ParameterStatus.LOW
    if value > spec.max_value:
        return ParameterStatus.HIGH
    return ParameterStatus.ACCEPTABLE


def _classify_lower_bounded(spec: ParameterSpec, value: float) -> ParameterStatus:
    if value < spec.min_value:
        return ParameterStatus.LOW
    return ParameterStatus.ACCEPTABLE


_RULES = {
    RangeShape.ZERO_TOLERANCE: _classify_zero_tolerance,
    RangeShape.UPPER_BOUNDED_PREFERRED: _classify_upper_bounded,
    RangeShape.BOUNDED: _classify_bounded,
    RangeShape.DUAL_UNIT_BOUNDED: _classify_dual_unit,
    RangeShape.LOWER_BOUNDED: _classify_lower_bounded,
}


class ParameterClassifier:
    """Clasificador de lecturas contra una ReferenceTable.

    Uso:
        classifier = ParameterClassifier(table)
        status = classifier.classify("ph", "7.0")  # ParameterStatus.OPTIMAL
    """

    def __init__(self, table: ReferenceTable, strict: bool = False):
        self._table = table
        self._strict = strict

    @property
    def table(self) -> ReferenceTable:
        return self._table

    @property
    def strict(self) -> bool:
        return self._strict

    def classify(self, parameter: str, raw_value: Any) -> ParameterStatus:
        """Clasifica una lectura. Nunca lanza excepciones.

        Args:
            parameter: Key del parámetro (ej. "ammonia")
            raw_value: Valor crudo (texto del usuario, número, None...)

        Returns:
            ParameterStatus resultante
        """
        status, _ = self._classify(parameter, raw_value)
        return status

    def evaluate(self, parameter: str, raw_value: Any) -> ClassifiedReading:
        """Clasifica y devuelve el resultado completo con clase de display y razón."""
        status, value = self._classify(parameter, raw_value)
        return ClassifiedReading(
            parameter=parameter,
            status=status,
            display_class=status_to_display_class(status),
            value=value,
            reason=self._reason(parameter, status, value),
        )

    def _classify(self, parameter: str, raw_value: Any) -> tuple[ParameterStatus, Optional[float]]:
        spec = self._table.get(parameter) if isinstance(parameter, str) else None
        if spec is None or is_blank(raw_value):
            return ParameterStatus.UNKNOWN, None

        value = parse_reading_value(raw_value, strict=self._strict)
        if value is None:
            return ParameterStatus.INVALID, None

        return _RULES[spec.shape](spec, value), value

    def _reason(self, parameter: str, status: ParameterStatus, value: Optional[float]) -> str:
        if status == ParameterStatus.UNKNOWN:
            if not isinstance(parameter, str) or parameter not in self._table:
                return f"Unknown parameter '{parameter}'"
            return "No value provided"
        if status == ParameterStatus.INVALID:
            return "Value is not a number"

        spec = self._table[parameter]
        unit = f" {spec.unit}" if spec.unit and spec.unit != spec.label else ""
        return f"{spec.label} {value:g}{unit} is {status.value}"


_default_classifier: Optional[ParameterClassifier] = None


def get_default_classifier() -> ParameterClassifier:
    """Clasificador singleton con la tabla de agua dulce."""
    global _default_classifier
    if _default_classifier is None:
        _default_classifier = ParameterClassifier(FreshwaterTableProvider().load())
    return _default_classifier


def classify(parameter: str, raw_value: Any) -> ParameterStatus:
    """Atajo: clasifica con la tabla default."""
    return get_default_classifier().classify(parameter, raw_value)
