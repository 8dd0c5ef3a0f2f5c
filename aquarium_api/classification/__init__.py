"""Módulo de clasificación de parámetros del agua.

Estructura modular:
- models.py: Dataclasses y enums (ParameterSpec, ParameterStatus, DisplayClass)
- reference_table.py: Tabla de referencia inmutable y sus proveedores
- parsing.py: Parseo permisivo/estricto de valores de lectura
- classifier.py: Clasificador principal
- display.py: Mapeo Status → DisplayClass
"""

from .models import (
    ClassifiedReading,
    DisplayClass,
    ParameterSpec,
    ParameterStatus,
    RangeShape,
    ReferenceTableError,
)
from .reference_table import (
    FileTableProvider,
    FreshwaterTableProvider,
    ReferenceTable,
    ReferenceTableProvider,
    get_table_provider,
)
from .parsing import parse_reading_value
from .classifier import ParameterClassifier, classify, get_default_classifier
from .display import status_to_display_class

__all__ = [
    "ParameterClassifier",
    "classify",
    "get_default_classifier",
    "status_to_display_class",
    "parse_reading_value",
    "ClassifiedReading",
    "DisplayClass",
    "ParameterSpec",
    "ParameterStatus",
    "RangeShape",
    "ReferenceTableError",
    "ReferenceTable",
    "ReferenceTableProvider",
    "FreshwaterTableProvider",
    "FileTableProvider",
    "get_table_provider",
]
