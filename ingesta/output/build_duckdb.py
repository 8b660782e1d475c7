# ingesta/output/build_duckdb.py
#
# Atomic DuckDB build: staging Parquet files -> final .duckdb artifact.
#
# Design decisions:
#   - Atomicity is guaranteed by writing to a .tmp.duckdb first and only
#     renaming to the final path when the build succeeds. If anything fails,
#     the tmp file is deleted and the previous output file is untouched: the
#     API never serves a half-loaded org chart.
#   - Schema is read from schema.sql at build time so the SQL file remains
#     the single source of truth for table structure (the API test suite
#     loads the same file).
#   - Staging files are loaded via DuckDB's native read_parquet(), selecting
#     only the columns shared by the parquet and the table.
#   - Rows are inserted ORDER BY primary key. The API repository orders by pk
#     too, which keeps the rendered tree stable between builds.
from __future__ import annotations

from pathlib import Path

import duckdb

from ingesta.log import log
from ingesta.staging.parquet_writer import ruta_staging

SCHEMA_PATH = Path(__file__).parent / "schema.sql"

# staging source name -> (DuckDB table, primary key column)
STAGING_TO_TABLE: dict[str, tuple[str, str]] = {
    "cargos": ("dim_cargo", "pk_cargo"),
    "relaciones": ("bridge_cargo_jefe", "pk_relacion"),
}


def build_duckdb(staging_dir: Path, output_path: Path) -> Path:
    """Build the DuckDB database atomically from staging Parquet files.

    Steps:
        1. Create a temporary .duckdb file.
        2. Execute schema.sql.
        3. Load each staging Parquet that exists into its table.
        4. Close the connection.
        5. Atomically rename the tmp file to output_path.

    Returns:
        The final output_path after a successful rename.

    Raises:
        Any exception from duckdb or the filesystem propagates unchanged after
        cleaning up the tmp file.
    """
    tmp_path = output_path.with_suffix(".tmp.duckdb")
    output_path.parent.mkdir(parents=True, exist_ok=True)

    # Stale tmp from a previous crashed run.
    if tmp_path.exists():
        tmp_path.unlink()

    try:
        conn = duckdb.connect(str(tmp_path))
        try:
            conn.execute(SCHEMA_PATH.read_text(encoding="utf-8"))
            _load_staging_data(conn, staging_dir)
        finally:
            conn.close()

        tmp_path.replace(output_path)
        return output_path

    except Exception:
        if tmp_path.exists():
            tmp_path.unlink()
        raise


def _load_staging_data(conn: duckdb.DuckDBPyConnection, staging_dir: Path) -> None:
    """Load every existing staging Parquet file into its DuckDB table.

    Missing files are skipped: completitud.validar_completitud has already
    decided whether their absence is fatal.
    """
    loaded = 0
    for source, (table_name, pk_col) in STAGING_TO_TABLE.items():
        parquet_path = ruta_staging(staging_dir, source)
        if not parquet_path.exists():
            continue

        log(f"  Loading {source} -> {table_name}...")

        table_cols = [
            row[0]
            for row in conn.execute(
                "SELECT column_name FROM information_schema.columns "
                "WHERE table_name = ? ORDER BY ordinal_position",
                [table_name],
            ).fetchall()
        ]

        # S608 noqa: table_name / pk_col come from STAGING_TO_TABLE and
        # posix_path is a local path built by the pipeline.
        posix_path = parquet_path.as_posix()
        parquet_cols = {
            row[0]
            for row in conn.execute(
                f"SELECT name FROM parquet_schema('{posix_path}')"  # noqa: S608
            ).fetchall()
        }

        shared_cols = [c for c in table_cols if c in parquet_cols]
        if not shared_cols:
            continue

        cols_sql = ", ".join(shared_cols)
        conn.execute(
            f"INSERT INTO {table_name} ({cols_sql}) "  # noqa: S608
            f"SELECT {cols_sql} FROM read_parquet('{posix_path}') ORDER BY {pk_col}"
        )
        loaded += 1

    log(f"  DuckDB: {loaded} tables loaded")


def contar_filas(output_path: Path) -> dict[str, int]:
    """Open the finished DuckDB read-only and return row counts per table."""
    conn = duckdb.connect(str(output_path), read_only=True)
    try:
        counts: dict[str, int] = {}
        for (table_name,) in conn.execute("SHOW TABLES").fetchall():
            # S608 noqa: table_name comes from SHOW TABLES, not from user input.
            row = conn.execute(f"SELECT COUNT(*) FROM {table_name}").fetchone()  # noqa: S608
            counts[table_name] = int(row[0]) if row else 0
        return counts
    finally:
        conn.close()
