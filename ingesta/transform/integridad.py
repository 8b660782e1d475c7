# ingesta/transform/integridad.py
#
# Hierarchy integrity counts for the operator.
#
# Design decisions:
#   - The hierarchy builder never fails on bad data: a relation that points
#     at a missing or deactivated cargo is silently left out of the tree. This
#     report makes that loss visible at ingestion time, as counts, before the
#     new DuckDB file is published.
#   - Only ACTIVE relations are evaluated: they are the ones rendered by the
#     default view ("Mostrar Inactivos" off).
#   - Counts are computed with Polars joins against dim_cargo; nothing is
#     removed or corrected here.
#
# Invariants:
#   - evaluar_integridad is pure: same frames in, same report out.
#   - relaciones_huerfanas and relaciones_con_cargo_inactivo are disjoint.
from __future__ import annotations

from dataclasses import dataclass

import polars as pl


@dataclass(frozen=True)
class ReporteIntegridad:
    relaciones_activas: int
    relaciones_huerfanas: int            # cargo o jefe inexistente en dim_cargo
    relaciones_con_cargo_inactivo: int   # ambos existen, alguno esta inactivo
    autorreferencias: int                # cargo reporta a si mismo
    cargos_con_multiples_jefes: int      # mas de una relacion activa como subordinado

    @property
    def tiene_problemas(self) -> bool:
        return any(
            (
                self.relaciones_huerfanas,
                self.relaciones_con_cargo_inactivo,
                self.autorreferencias,
                self.cargos_con_multiples_jefes,
            )
        )

    def lineas(self) -> list[str]:
        """Mensajes para log(), uno por problema encontrado."""
        lineas: list[str] = []
        if self.relaciones_huerfanas:
            lineas.append(f"{self.relaciones_huerfanas:,} relacion(es) referencian cargos inexistentes")
        if self.relaciones_con_cargo_inactivo:
            lineas.append(
                f"{self.relaciones_con_cargo_inactivo:,} relacion(es) activas apuntan a cargos inactivos "
                "(no se muestran sin 'Mostrar Inactivos')"
            )
        if self.autorreferencias:
            lineas.append(f"{self.autorreferencias:,} cargo(s) se reportan a si mismos")
        if self.cargos_con_multiples_jefes:
            lineas.append(f"{self.cargos_con_multiples_jefes:,} cargo(s) con mas de un jefe activo")
        return lineas


def evaluar_integridad(cargos_df: pl.DataFrame, relaciones_df: pl.DataFrame) -> ReporteIntegridad:
    """Count the data-quality problems of the active hierarchy.

    Args:
        cargos_df:     Validated dim_cargo frame (pk_cargo, nombre, activo).
        relaciones_df: Validated bridge_cargo_jefe frame
                       (pk_relacion, fk_cargo, fk_jefe_cargo, activo).
    """
    activas = relaciones_df.filter(pl.col("activo"))
    situacion = cargos_df.select(pl.col("pk_cargo"), pl.col("activo"))

    con_situacion = activas.join(
        situacion.rename({"pk_cargo": "fk_cargo", "activo": "_cargo_activo"}),
        on="fk_cargo",
        how="left",
    ).join(
        situacion.rename({"pk_cargo": "fk_jefe_cargo", "activo": "_jefe_activo"}),
        on="fk_jefe_cargo",
        how="left",
    )

    falta_extremo = pl.col("_cargo_activo").is_null() | pl.col("_jefe_activo").is_null()
    huerfanas = con_situacion.filter(falta_extremo).height
    con_inactivo = con_situacion.filter(
        ~falta_extremo & ~(pl.col("_cargo_activo") & pl.col("_jefe_activo"))
    ).height

    autorreferencias = activas.filter(pl.col("fk_cargo") == pl.col("fk_jefe_cargo")).height
    multiples_jefes = (
        activas.group_by("fk_cargo").agg(pl.len().alias("_n")).filter(pl.col("_n") > 1).height
    )

    return ReporteIntegridad(
        relaciones_activas=activas.height,
        relaciones_huerfanas=huerfanas,
        relaciones_con_cargo_inactivo=con_inactivo,
        autorreferencias=autorreferencias,
        cargos_con_multiples_jefes=multiples_jefes,
    )
