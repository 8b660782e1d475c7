# ingesta/main.py
#
# Pipeline orchestrator: refreshes the org chart DuckDB from the
# administrative console.
#
# Design decisions:
#   - run_pipeline is the single entry point. skip_download=True reuses the
#     existing staging parquets, so tests can exercise integridad + build
#     without the network.
#   - Strict order:
#       1. Download cargos and relaciones in parallel (IO-bound, two requests
#          streams against the same console).
#       2. Parse + validate each into a staging parquet.
#       3. Report hierarchy integrity counts (never aborts: the builder
#          tolerates every problem it counts).
#       4. Validate completitud of the staging files.
#       5. Build DuckDB atomically.
#   - Each step logs progress to stdout through ingesta.log.
#
# Invariant: the DuckDB file is never replaced unless both downloads
# succeeded and completitud validation passed.
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import polars as pl

from ingesta.config import PipelineConfig, load_config
from ingesta.log import log
from ingesta.output.build_duckdb import build_duckdb, contar_filas
from ingesta.output.completitud import validar_completitud
from ingesta.sources.admin_api.download import download_cargos, download_relaciones
from ingesta.sources.admin_api.parse import SCHEMA_RELACIONES, parse_cargos, parse_relaciones
from ingesta.sources.admin_api.validate import validate_cargos, validate_relaciones
from ingesta.staging.parquet_writer import escribir_staging, leer_staging, ruta_staging
from ingesta.transform.integridad import ReporteIntegridad, evaluar_integridad


def run_pipeline(config: PipelineConfig, *, skip_download: bool = False) -> Path:
    """Execute the full pipeline and produce the DuckDB database.

    Args:
        config: Pipeline configuration.
        skip_download: If True, read the existing staging parquets instead of
            calling the console API.

    Returns:
        Path to the final DuckDB database file.

    Raises:
        ingesta.output.completitud.CompletitudError: if the cargos staging
            file is missing or empty.
        httpx.HTTPError: if the console API fails during download.
    """
    staging_dir = config.staging_dir
    staging_dir.mkdir(parents=True, exist_ok=True)

    if not skip_download:
        _run_sources(config)

    log("Validating completitud...")
    validar_completitud(staging_dir)

    log("Checking hierarchy integrity...")
    reporte = _reportar_integridad(staging_dir)
    log(f"  {reporte.relaciones_activas:,} relaciones activas evaluadas")
    if not reporte.tiene_problemas:
        log("  Integridad OK")

    log("Building DuckDB...")
    output_path = build_duckdb(staging_dir, config.duckdb_output_path)
    for table_name, count in contar_filas(output_path).items():
        log(f"  {table_name}: {count:,} rows")
    log(f"Done. DuckDB written to: {output_path}")
    return output_path


def _run_sources(config: PipelineConfig) -> None:
    """Download both collections in parallel, then parse + validate to staging."""
    raw_dir = config.raw_dir
    raw_dir.mkdir(parents=True, exist_ok=True)

    log("Downloading cargos and relaciones...")
    with ThreadPoolExecutor(max_workers=2) as pool:
        cargos_future = pool.submit(
            download_cargos,
            config.admin_api_url,
            raw_dir,
            config.download_timeout,
            config.page_size,
            config.admin_api_token,
        )
        relaciones_future = pool.submit(
            download_relaciones,
            config.admin_api_url,
            raw_dir,
            config.download_timeout,
            config.page_size,
            config.admin_api_token,
        )
        # .result() re-raises download errors and aborts the pipeline
        cargos_raw = cargos_future.result()
        relaciones_raw = relaciones_future.result()

    log("Parsing and validating...")
    cargos_df = validate_cargos(parse_cargos(cargos_raw))
    escribir_staging(cargos_df, config.staging_dir, "cargos")
    log(f"  Parsed cargos: {len(cargos_df):,} rows")

    relaciones_df = validate_relaciones(parse_relaciones(relaciones_raw))
    escribir_staging(relaciones_df, config.staging_dir, "relaciones")
    log(f"  Parsed relaciones: {len(relaciones_df):,} rows")


def _reportar_integridad(staging_dir: Path) -> ReporteIntegridad:
    cargos_df = leer_staging(staging_dir, "cargos")
    if ruta_staging(staging_dir, "relaciones").exists():
        relaciones_df = leer_staging(staging_dir, "relaciones")
    else:
        relaciones_df = pl.DataFrame(schema=SCHEMA_RELACIONES)

    reporte = evaluar_integridad(cargos_df, relaciones_df)
    for linea in reporte.lineas():
        log(f"  WARNING: {linea}")
    return reporte


if __name__ == "__main__":
    run_pipeline(load_config())
