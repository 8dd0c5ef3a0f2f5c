"""CLI: clasificación de lecturas y chequeo del manifiesto offline.

Uso:
    python -m jobs.cli classify ph 7.0
    python -m jobs.cli table
    python -m jobs.cli check-manifest --version v1.1
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from aquarium_api.classification import ParameterClassifier, get_table_provider
from aquarium_api.offline import AssetFetchFailure, InMemoryCacheStore, OfflineConfig, OfflineRuntime
from common.config import get_settings

logger = logging.getLogger(__name__)


def _build_classifier() -> ParameterClassifier:
    settings = get_settings()
    table = get_table_provider(settings.reference_table_file).load()
    return ParameterClassifier(table, strict=settings.strict_parsing)


def cmd_classify(args: argparse.Namespace) -> int:
    result = _build_classifier().evaluate(args.parameter, args.value)
    print(f"{result.parameter}: {result.status.value} ({result.display_class.value}) - {result.reason}")
    return 0


def cmd_table(args: argparse.Namespace) -> int:
    for spec in _build_classifier().table.as_list():
        low = "-" if spec.min_value is None else f"{spec.min_value:g}"
        high = "-" if spec.max_value is None else f"{spec.max_value:g}"
        alt = ""
        if spec.alt_unit:
            alt_high = "" if spec.alt_max is None else f"-{spec.alt_max:g}"
            alt = f" / {spec.alt_min:g}{alt_high} {spec.alt_unit}"
        print(f"{spec.key:<8} {spec.label:<28} {low}..{high} {spec.unit}{alt}")
    return 0


async def _check_manifest(version: Optional[str]) -> int:
    # Store descartable: solo se verifica que el install completo funcione
    runtime = OfflineRuntime(OfflineConfig.from_env(), store=InMemoryCacheStore())
    try:
        controller = await runtime.deploy(version)
    except AssetFetchFailure as e:
        logger.error("Manifest check failed: %s", e)
        return 1
    finally:
        await runtime.aclose()

    logger.info(
        "Manifest OK: %s (%d assets)", controller.cache_name, len(controller.assets),
    )
    return 0


def cmd_check_manifest(args: argparse.Namespace) -> int:
    return asyncio.run(_check_manifest(args.version))


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )

    p = argparse.ArgumentParser(description="Aquarium tracker tools")
    sub = p.add_subparsers(dest="command", required=True)

    p_classify = sub.add_parser("classify", help="classify a single reading")
    p_classify.add_argument("parameter")
    p_classify.add_argument("value")
    p_classify.set_defaults(func=cmd_classify)

    p_table = sub.add_parser("table", help="print the reference table")
    p_table.set_defaults(func=cmd_table)

    p_check = sub.add_parser("check-manifest", help="fetch every offline asset once")
    p_check.add_argument("--version", default=None, help="version tag (default: OFFLINE_CACHE_VERSION)")
    p_check.set_defaults(func=cmd_check_manifest)

    args = p.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
