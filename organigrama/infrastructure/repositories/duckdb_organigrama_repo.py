# organigrama/infrastructure/repositories/duckdb_organigrama_repo.py
from __future__ import annotations

import duckdb

from organigrama.domain.jerarquia.entities import Cargo, RelacionJerarquica


class DuckDBOrganigramaRepo:
    """Lee dim_cargo y bridge_cargo_jefe. Ordena por pk para que el arbol sea
    deterministico entre llamadas."""

    def __init__(self, conn: duckdb.DuckDBPyConnection) -> None:
        self._conn = conn

    def listar_cargos(self) -> list[Cargo]:
        rows = self._conn.execute(
            """
            SELECT pk_cargo, nombre, activo
            FROM dim_cargo
            ORDER BY pk_cargo
        """
        ).fetchall()
        return [self._hidratar_cargo(r) for r in rows]

    def listar_relaciones(self) -> list[RelacionJerarquica]:
        rows = self._conn.execute(
            """
            SELECT pk_relacion, fk_cargo, fk_jefe_cargo, activo
            FROM bridge_cargo_jefe
            ORDER BY pk_relacion
        """
        ).fetchall()
        return [self._hidratar_relacion(r) for r in rows]

    def buscar_relacion(self, relacion_id: int) -> RelacionJerarquica | None:
        row = self._conn.execute(
            """
            SELECT pk_relacion, fk_cargo, fk_jefe_cargo, activo
            FROM bridge_cargo_jefe
            WHERE pk_relacion = ?
        """,
            [relacion_id],
        ).fetchone()
        return self._hidratar_relacion(row) if row else None

    def _hidratar_cargo(self, row: tuple) -> Cargo:  # type: ignore[type-arg]
        return Cargo(
            id=int(row[0]),
            nombre=str(row[1]),
            activo=bool(row[2]),
        )

    def _hidratar_relacion(self, row: tuple) -> RelacionJerarquica:  # type: ignore[type-arg]
        return RelacionJerarquica(
            id=int(row[0]),
            cargo_id=int(row[1]),
            jefe_cargo_id=int(row[2]),
            activo=bool(row[3]),
        )
