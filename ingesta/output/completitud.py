# ingesta/output/completitud.py
#
# Completitud validation: asserts that the staging sources are present and
# non-empty before the DuckDB build begins.
#
# Design decisions:
#   - Pure guard function: it reads files but never writes. Raised exceptions
#     are the only side effect.
#   - cargos is required: an empty dim_cargo would publish an empty org chart,
#     which is worse than keeping yesterday's file.
#   - relaciones is optional: a brand-new console may have positions but no
#     reporting lines yet. The builder then returns an empty tree, which is
#     the correct rendering. A warning is logged instead of aborting.
#   - The error message always names the offending source.
from __future__ import annotations

from pathlib import Path

import polars as pl

from ingesta.log import log
from ingesta.staging.parquet_writer import ruta_staging

REQUIRED_SOURCES: tuple[str, ...] = ("cargos",)

OPTIONAL_SOURCES: tuple[str, ...] = ("relaciones",)


class CompletitudError(Exception):
    """Raised when a required staging file is missing or empty."""


def validar_completitud(staging_dir: Path) -> None:
    """Assert that every required staging Parquet file exists and has rows.

    Raises:
        CompletitudError: if any required file is absent or has zero rows.
            The message names the offending file.
    """
    for source in REQUIRED_SOURCES:
        path = ruta_staging(staging_dir, source)

        if not path.exists():
            raise CompletitudError(f"Missing staging file: {source}.parquet (expected at {path})")

        if _contar_filas(path) == 0:
            raise CompletitudError(
                f"Empty staging file: {source}.parquet (0 rows). Re-run the download step."
            )

    for source in OPTIONAL_SOURCES:
        path = ruta_staging(staging_dir, source)
        if not path.exists():
            log(f"  WARNING: optional source '{source}' missing; tables stay empty.")
        elif _contar_filas(path) == 0:
            log(f"  WARNING: optional source '{source}' has 0 rows; the org chart will be empty.")


def _contar_filas(path: Path) -> int:
    return int(pl.scan_parquet(path).select(pl.len()).collect().item())
