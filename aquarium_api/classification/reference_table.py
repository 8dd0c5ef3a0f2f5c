"""Tabla de referencia - rangos aceptables/ideales por parámetro.

La tabla es configuración inyectada al motor de clasificación: se construye
una vez al arrancar y nunca se muta.

Proveedores:
- FreshwaterTableProvider: valores para acuarios comunitarios de agua dulce
- FileTableProvider: lee la tabla desde un archivo JSON
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Iterator, List, Mapping, Optional

from .models import ParameterSpec, RangeShape, ReferenceTableError

logger = logging.getLogger(__name__)


class ReferenceTable(Mapping[str, ParameterSpec]):
    """Mapping inmutable key → ParameterSpec (orden de inserción preservado)."""

    def __init__(self, specs: Iterable[ParameterSpec]):
        entries = {}
        for spec in specs:
            if spec.key in entries:
                raise ReferenceTableError(spec.key, "duplicated parameter key")
            entries[spec.key] = spec
        self._entries = MappingProxyType(entries)

    def __getitem__(self, key: str) -> ParameterSpec:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def as_list(self) -> List[ParameterSpec]:
        """Lista ordenada de specs (útil para renderizar tablas)."""
        return list(self._entries.values())

    def __repr__(self) -> str:
        return f"ReferenceTable({list(self._entries)})"


class ReferenceTableProvider(ABC):
    """Interface para proveedores de la tabla de referencia."""

    @abstractmethod
    def load(self) -> ReferenceTable:
        """Construye la tabla de referencia.

        Raises:
            ReferenceTableError: si algún rango es inconsistente
        """
        pass


class FreshwaterTableProvider(ReferenceTableProvider):
    """Rangos para acuarios comunitarios de agua dulce.

    Texto de origen: Ammonia 0 ppm, Nitrite 0 ppm, Nitrate 0-40 ppm (menor
    es preferible), pH 6.5-7.5, GH 4-8 dGH / 70-140 ppm, KH 3 dKH / 50 ppm
    o más para estabilizar el pH. Los rangos ideales varían según peces y plantas.
    """

    SPECS = (
        ParameterSpec(
            key="ammonia",
            label="Ammonia (NH3/NH4)",
            unit="ppm",
            shape=RangeShape.ZERO_TOLERANCE,
            description="Should always remain at 0 once the tank is cycled.",
            ideal_max=0.0,
            caution_above=0.25,
            danger_above=1.0,
            min_value=0.0,
            max_value=0.0,
        ),
        ParameterSpec(
            key="nitrite",
            label="Nitrite (NO2)",
            unit="ppm",
            shape=RangeShape.ZERO_TOLERANCE,
            description="Persistent nitrite indicates the second phase still in progress.",
            ideal_max=0.0,
            caution_above=0.25,
            danger_above=1.0,
            min_value=0.0,
            max_value=0.0,
        ),
        ParameterSpec(
            key="nitrate",
            label="Nitrate (NO3)",
            unit="ppm",
            shape=RangeShape.UPPER_BOUNDED_PREFERRED,
            description="Keep as low as practical (<20ppm preferred) via water changes / plants.",
            min_value=0.0,
            max_value=40.0,
            preferred_below=20.0,
        ),
        ParameterSpec(
            key="ph",
            label="pH",
            unit="pH",
            shape=RangeShape.BOUNDED,
            description="General mid-range community pH; species-specific needs may differ.",
            min_value=6.5,
            max_value=7.5,
        ),
        ParameterSpec(
            key="gh",
            label="General Hardness (GH)",
            unit="dGH",
            shape=RangeShape.DUAL_UNIT_BOUNDED,
            description="Moderate hardness suitable for many community fish and plants.",
            min_value=4.0,
            max_value=8.0,
            alt_unit="ppm",
            alt_min=70.0,
            alt_max=140.0,
        ),
        # Solo mínimo: un piso de KH es lo que importa para amortiguar el pH.
        ParameterSpec(
            key="kh",
            label="Carbonate Hardness (KH)",
            unit="dKH",
            shape=RangeShape.LOWER_BOUNDED,
            description="At least 3 dKH (≈50ppm) helps buffer and stabilize pH.",
            min_value=3.0,
            alt_unit="ppm",
            alt_min=50.0,
        ),
    )

    def load(self) -> ReferenceTable:
        return ReferenceTable(self.SPECS)


class FileTableProvider(ReferenceTableProvider):
    """Lee la tabla desde un archivo JSON.

    Formato: lista de objetos con los campos de ParameterSpec
    (``key``, ``label``, ``unit``, ``shape``, umbrales...).
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)

    def load(self) -> ReferenceTable:
        with self._path.open("r", encoding="utf-8") as fh:
            raw = json.load(fh)

        if not isinstance(raw, list):
            raise ReferenceTableError("*", f"{self._path} must contain a JSON list")

        specs = [ParameterSpec.from_dict(item) for item in raw]
        logger.info("[CLASSIFY] Reference table loaded from %s (%d parameters)", self._path, len(specs))
        return ReferenceTable(specs)


def get_table_provider(table_file: Optional[str] = None) -> ReferenceTableProvider:
    """Factory: proveedor de archivo si hay ruta configurada, si no el default."""
    if table_file:
        return FileTableProvider(table_file)
    return FreshwaterTableProvider()
