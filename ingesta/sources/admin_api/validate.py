# ingesta/sources/admin_api/validate.py
#
# Validate and clean the cargos / relaciones staging frames.
#
# Design decisions:
#   - Only structurally unusable rows are dropped (null or non-positive ids,
#     cargos without a name). Graph-level problems are NOT fixed here:
#     self-loops, cycles, dangling references and children with several
#     supervisors are legitimate input for the hierarchy builder, which
#     labels them, and for the integridad report, which counts them.
#   - Deduplication keeps the first occurrence of each primary key, so the
#     console's own ordering decides which copy survives.
#   - Id -1 is reserved for the virtual root of the rendered tree; the
#     positive-id rule keeps it out of dim_cargo.
#
# Invariants:
#   - pk_cargo / pk_relacion are unique and > 0 in every surviving row.
#   - nombre is stripped and non-empty.
from __future__ import annotations

import polars as pl

from ingesta.log import log


def validate_cargos(df: pl.DataFrame) -> pl.DataFrame:
    """Steps: drop bad ids, strip + require nombre, dedup on pk_cargo."""
    total = len(df)
    df = df.filter(pl.col("pk_cargo").is_not_null() & (pl.col("pk_cargo") > 0))
    df = df.with_columns(pl.col("nombre").str.strip_chars().alias("nombre"))
    df = df.filter(pl.col("nombre").is_not_null() & (pl.col("nombre").str.len_chars() > 0))
    df = df.unique(subset=["pk_cargo"], keep="first", maintain_order=True)

    if len(df) < total:
        log(f"  cargos: {total - len(df):,} fila(s) descartada(s) en la validacion")
    return df


def validate_relaciones(df: pl.DataFrame) -> pl.DataFrame:
    """Steps: drop rows with null or non-positive ids, dedup on pk_relacion."""
    total = len(df)
    df = df.filter(
        pl.col("pk_relacion").is_not_null()
        & (pl.col("pk_relacion") > 0)
        & pl.col("fk_cargo").is_not_null()
        & pl.col("fk_jefe_cargo").is_not_null()
    )
    df = df.unique(subset=["pk_relacion"], keep="first", maintain_order=True)

    if len(df) < total:
        log(f"  relaciones: {total - len(df):,} fila(s) descartada(s) en la validacion")
    return df
