"""Mapeo Status → DisplayClass (clase CSS para colorear la página)."""

from __future__ import annotations

from typing import Union

from .models import DisplayClass, ParameterStatus

_DISPLAY_BY_STATUS = {
    ParameterStatus.IDEAL: DisplayClass.OK,
    ParameterStatus.PREFERRED: DisplayClass.OK,
    ParameterStatus.OPTIMAL: DisplayClass.OK,
    ParameterStatus.ACCEPTABLE: DisplayClass.ACCEPTABLE,
    ParameterStatus.ELEVATED: DisplayClass.ELEVATED,
    ParameterStatus.LOW: DisplayClass.ELEVATED,
    ParameterStatus.WARNING: DisplayClass.WARNING,
    ParameterStatus.HIGH: DisplayClass.DANGER,
    ParameterStatus.DANGER: DisplayClass.DANGER,
    ParameterStatus.UNKNOWN: DisplayClass.UNKNOWN,
    ParameterStatus.INVALID: DisplayClass.UNKNOWN,
}


def status_to_display_class(status: Union[ParameterStatus, str, None]) -> DisplayClass:
    """Función total: cualquier entrada no reconocida → DisplayClass.UNKNOWN."""
    try:
        key = ParameterStatus(status)
    except (ValueError, TypeError):
        return DisplayClass.UNKNOWN
    return _DISPLAY_BY_STATUS[key]
