# organigrama/application/services/arbol_service.py
from __future__ import annotations

from organigrama.domain.jerarquia.entities import Cargo, NodoArbol, RelacionJerarquica, ResultadoArbol
from organigrama.domain.jerarquia.repository import OrganigramaRepository
from organigrama.domain.jerarquia.services import construir_arbol, filtrar

from ..dtos.arbol_dto import ArbolDTO, DiagnosticoDTO, NodoArbolDTO
from ..dtos.cargo_dto import CargoDTO, RelacionDTO


class ArbolService:
    def __init__(self, organigrama_repo: OrganigramaRepository) -> None:
        self._organigrama_repo = organigrama_repo

    def obtener_arbol(self, incluir_inactivos: bool = False) -> ArbolDTO:
        resultado = construir_arbol(
            self._organigrama_repo.listar_relaciones(),
            self._organigrama_repo.listar_cargos(),
            incluir_inactivos=incluir_inactivos,
        )
        return _a_arbol_dto(resultado, incluir_inactivos)

    def listar_cargos(self, incluir_inactivos: bool = False) -> list[CargoDTO]:
        _, cargos = filtrar([], self._organigrama_repo.listar_cargos(), incluir_inactivos)
        return [_a_cargo_dto(c) for c in cargos]

    def listar_relaciones(self, incluir_inactivos: bool = False) -> list[RelacionDTO]:
        relaciones, _ = filtrar(self._organigrama_repo.listar_relaciones(), [], incluir_inactivos)
        return [_a_relacion_dto(r) for r in relaciones]

    def buscar_relacion(self, relacion_id: int) -> RelacionDTO | None:
        relacion = self._organigrama_repo.buscar_relacion(relacion_id)
        return _a_relacion_dto(relacion) if relacion is not None else None


def _a_arbol_dto(resultado: ResultadoArbol, incluir_inactivos: bool) -> ArbolDTO:
    return ArbolDTO(
        arbol=[_a_nodo_dto(n) for n in resultado.arbol],
        diagnosticos=[
            DiagnosticoDTO(tipo=d.tipo.value, descripcion=d.descripcion, ids=list(d.ids))
            for d in resultado.diagnosticos
        ],
        resumen=resultado.resumen(),
        total_cargos=resultado.total_cargos,
        incluir_inactivos=incluir_inactivos,
    )


def _a_nodo_dto(nodo: NodoArbol) -> NodoArbolDTO:
    return NodoArbolDTO(
        name=nodo.nombre,
        attributes=dict(nodo.atributos),
        children=[_a_nodo_dto(h) for h in nodo.hijos] or None,
        id=nodo.id,
        edgeId=nodo.org_id,
    )


def _a_cargo_dto(cargo: Cargo) -> CargoDTO:
    return CargoDTO(id=cargo.id, nombre=cargo.nombre, activo=cargo.activo)


def _a_relacion_dto(relacion: RelacionJerarquica) -> RelacionDTO:
    return RelacionDTO(
        id=relacion.id,
        cargo_id=relacion.cargo_id,
        jefe_cargo_id=relacion.jefe_cargo_id,
        activo=relacion.activo,
    )
