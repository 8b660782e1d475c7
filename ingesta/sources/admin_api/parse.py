# ingesta/sources/admin_api/parse.py
#
# Parse the raw console JSON into typed staging DataFrames.
#
# Design decisions:
#   - The console serialises ids as numbers, but older endpoints return them
#     as numeric strings. Ids are coerced to Int64; anything that is not an
#     integer becomes null and is dropped by the validate step.
#   - `estado == 1` is the only "active" value. Any other value, including a
#     missing field, is treated as inactive, matching the console frontend.
#   - Embedded objects (`cargo`, `jefeCargo`) that the relations endpoint may
#     include are ignored: dim_cargo is the single source for position names.
#
# Invariants:
#   - parse_cargos output columns:     pk_cargo (Int64), nombre (Utf8), activo (Boolean).
#   - parse_relaciones output columns: pk_relacion, fk_cargo, fk_jefe_cargo (Int64),
#                                      activo (Boolean).
#   - Row order follows the order of the raw file.
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import polars as pl

SCHEMA_CARGOS: dict[str, pl.DataType] = {
    "pk_cargo": pl.Int64(),
    "nombre": pl.Utf8(),
    "activo": pl.Boolean(),
}

SCHEMA_RELACIONES: dict[str, pl.DataType] = {
    "pk_relacion": pl.Int64(),
    "fk_cargo": pl.Int64(),
    "fk_jefe_cargo": pl.Int64(),
    "activo": pl.Boolean(),
}


def parse_cargos(raw_path: Path) -> pl.DataFrame:
    """Parse cargos.json (console `/positions`) into a dim_cargo staging frame."""
    rows = [
        {
            "pk_cargo": _a_entero(r.get("id")),
            "nombre": str(r["nombre"]) if r.get("nombre") is not None else None,
            "activo": _activo(r.get("estado")),
        }
        for r in _cargar_registros(raw_path)
    ]
    return pl.DataFrame(rows, schema=SCHEMA_CARGOS)


def parse_relaciones(raw_path: Path) -> pl.DataFrame:
    """Parse relaciones.json (console `/organigrama`) into a bridge_cargo_jefe staging frame."""
    rows = [
        {
            "pk_relacion": _a_entero(r.get("id")),
            "fk_cargo": _a_entero(r.get("cargoId")),
            "fk_jefe_cargo": _a_entero(r.get("jefeCargoId")),
            "activo": _activo(r.get("estado")),
        }
        for r in _cargar_registros(raw_path)
    ]
    return pl.DataFrame(rows, schema=SCHEMA_RELACIONES)


def _cargar_registros(raw_path: Path) -> list[dict[str, Any]]:
    payload: Any = json.loads(raw_path.read_text(encoding="utf-8"))
    if isinstance(payload, dict):
        payload = payload.get("data") or []
    return [r for r in payload if isinstance(r, dict)]


def _a_entero(valor: Any) -> int | None:
    if valor is None or isinstance(valor, bool):
        return None
    if isinstance(valor, float):
        return int(valor) if valor.is_integer() else None
    try:
        return int(str(valor).strip())
    except ValueError:
        return None


def _activo(estado: Any) -> bool:
    return _a_entero(estado) == 1
