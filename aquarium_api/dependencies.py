"""Singletons del proceso: clasificador y runtime offline.

Se construyen perezosamente desde Settings. En tests se reemplazan con
``app.dependency_overrides`` o ``reset_dependencies()``.
"""

from __future__ import annotations

import logging
from typing import Optional

from common.config import get_settings
from .classification import ParameterClassifier, get_table_provider
from .offline import OfflineConfig, OfflineRuntime

logger = logging.getLogger(__name__)

_classifier: Optional[ParameterClassifier] = None
_offline_runtime: Optional[OfflineRuntime] = None


def get_classifier() -> ParameterClassifier:
    global _classifier
    if _classifier is None:
        settings = get_settings()
        table = get_table_provider(settings.reference_table_file).load()
        _classifier = ParameterClassifier(table, strict=settings.strict_parsing)
        logger.info(
            "[CLASSIFY] Classifier ready parameters=%s strict=%s",
            list(table), settings.strict_parsing,
        )
    return _classifier


def get_offline_runtime() -> OfflineRuntime:
    global _offline_runtime
    if _offline_runtime is None:
        _offline_runtime = OfflineRuntime(OfflineConfig.from_env())
    return _offline_runtime


def reset_dependencies() -> None:
    """Olvida los singletons (tests)."""
    global _classifier, _offline_runtime
    _classifier = None
    _offline_runtime = None
