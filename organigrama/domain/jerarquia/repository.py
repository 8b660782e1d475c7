# organigrama/domain/jerarquia/repository.py
from __future__ import annotations

from typing import Protocol

from .entities import Cargo, RelacionJerarquica


class OrganigramaRepository(Protocol):
    """Listados completos, inactivos incluidos: filtrar le corresponde al dominio."""

    def listar_cargos(self) -> list[Cargo]: ...

    def listar_relaciones(self) -> list[RelacionJerarquica]: ...

    def buscar_relacion(self, relacion_id: int) -> RelacionJerarquica | None: ...
