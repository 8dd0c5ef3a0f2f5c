from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .classification import DisplayClass, ParameterStatus


class ReadingIn(BaseModel):
    # value queda crudo: el motor decide si es vacío, inválido o numérico
    parameter: str
    value: Any = None


class BulkReadingsIn(BaseModel):
    readings: List[ReadingIn] = Field(default_factory=list)


class ClassificationOut(BaseModel):
    parameter: str
    status: ParameterStatus
    display_class: DisplayClass
    value: Optional[float] = None
    reason: str = ""


class BulkClassificationOut(BaseModel):
    results: List[ClassificationOut] = Field(default_factory=list)


class ParameterSpecOut(BaseModel):
    key: str
    label: str
    unit: str
    shape: str
    description: str = ""
    ideal_max: Optional[float] = None
    caution_above: Optional[float] = None
    danger_above: Optional[float] = None
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    preferred_below: Optional[float] = None
    alt_unit: Optional[str] = None
    alt_min: Optional[float] = None
    alt_max: Optional[float] = None


class DeployIn(BaseModel):
    version: Optional[str] = Field(default=None, min_length=1)


class OfflineStatusOut(BaseModel):
    version: Optional[str] = None
    cache_name: Optional[str] = None
    state: str
    buckets: List[str] = Field(default_factory=list)
    stats: Dict[str, int] = Field(default_factory=dict)
