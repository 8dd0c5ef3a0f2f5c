"""Endpoints de tabla de referencia y clasificación de lecturas."""

from __future__ import annotations

import logging
import math
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ..classification import ClassifiedReading, ParameterClassifier
from ..dependencies import get_classifier
from ..schemas import (
    BulkClassificationOut,
    BulkReadingsIn,
    ClassificationOut,
    ParameterSpecOut,
    ReadingIn,
)

router = APIRouter(tags=["parameters"])
logger = logging.getLogger(__name__)


def _to_out(result: ClassifiedReading) -> ClassificationOut:
    # JSON no representa ±inf: el status ya indica el lado del rango
    value = result.value
    if value is not None and not math.isfinite(value):
        value = None
    return ClassificationOut(
        parameter=result.parameter,
        status=result.status,
        display_class=result.display_class,
        value=value,
        reason=result.reason,
    )


@router.get("/parameters", response_model=List[ParameterSpecOut])
def list_parameters(classifier: ParameterClassifier = Depends(get_classifier)):
    """Tabla de referencia completa, en orden de display."""
    return [ParameterSpecOut(**spec.to_dict()) for spec in classifier.table.as_list()]


@router.get("/parameters/{key}", response_model=ParameterSpecOut)
def get_parameter(key: str, classifier: ParameterClassifier = Depends(get_classifier)):
    spec = classifier.table.get(key)
    if spec is None:
        raise HTTPException(status_code=404, detail=f"Unknown parameter '{key}'")
    return ParameterSpecOut(**spec.to_dict())


@router.post("/classify", response_model=ClassificationOut)
def classify_reading(payload: ReadingIn, classifier: ParameterClassifier = Depends(get_classifier)):
    """Clasifica una lectura. Nunca falla por el valor: devuelve unknown/invalid."""
    result = classifier.evaluate(payload.parameter, payload.value)
    logger.debug(
        "[CLASSIFY] parameter=%s status=%s", payload.parameter, result.status.value,
    )
    return _to_out(result)


@router.post("/classify/batch", response_model=BulkClassificationOut)
def classify_readings(payload: BulkReadingsIn, classifier: ParameterClassifier = Depends(get_classifier)):
    results = [classifier.evaluate(r.parameter, r.value) for r in payload.readings]
    return BulkClassificationOut(results=[_to_out(r) for r in results])
