# ingesta/staging/parquet_writer.py
#
# Name-based Parquet read/write for staging data.
#
# Design decisions:
#   - Staging files are addressed by source name ("cargos", "relaciones"),
#     the same keys used by completitud.REQUIRED_SOURCES and
#     build_duckdb.STAGING_TO_TABLE, so the three never drift apart.
#   - The rest of the pipeline never calls polars directly for file I/O,
#     keeping the storage format swappable.
#   - No schema enforcement here: that is the validate step's job.
from __future__ import annotations

from pathlib import Path

import polars as pl


def ruta_staging(staging_dir: Path, nombre: str) -> Path:
    return staging_dir / f"{nombre}.parquet"


def escribir_staging(df: pl.DataFrame, staging_dir: Path, nombre: str) -> Path:
    """Write `df` as staging_dir/<nombre>.parquet, creating the directory if needed.

    Returns:
        The written path.
    """
    path = ruta_staging(staging_dir, nombre)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.write_parquet(path)
    return path


def leer_staging(staging_dir: Path, nombre: str) -> pl.DataFrame:
    """Read staging_dir/<nombre>.parquet.

    Raises:
        FileNotFoundError: if the staging file does not exist (raised by Polars).
    """
    return pl.read_parquet(ruta_staging(staging_dir, nombre))
