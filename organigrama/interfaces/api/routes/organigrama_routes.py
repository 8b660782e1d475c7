# organigrama/interfaces/api/routes/organigrama_routes.py
from fastapi import APIRouter, Depends, HTTPException, Query

from organigrama.application.dtos.arbol_dto import ArbolDTO
from organigrama.application.dtos.cargo_dto import RelacionDTO
from organigrama.application.services.arbol_service import ArbolService
from organigrama.domain.jerarquia.value_objects import IdRegistro
from organigrama.interfaces.api.dependencies import get_arbol_service

router = APIRouter()


@router.get("/organigrama/arbol", response_model=ArbolDTO, response_model_exclude_none=True)
def get_arbol(
    incluir_inactivos: bool = Query(False),  # noqa: B008
    service: ArbolService = Depends(get_arbol_service),  # noqa: B008
) -> ArbolDTO:
    return service.obtener_arbol(incluir_inactivos=incluir_inactivos)


@router.get("/organigrama/relaciones", response_model=list[RelacionDTO])
def get_relaciones(
    incluir_inactivos: bool = Query(False),  # noqa: B008
    service: ArbolService = Depends(get_arbol_service),  # noqa: B008
) -> list[RelacionDTO]:
    return service.listar_relaciones(incluir_inactivos=incluir_inactivos)


@router.get("/organigrama/relaciones/{relacion_raw}", response_model=RelacionDTO)
def get_relacion(
    relacion_raw: str,
    service: ArbolService = Depends(get_arbol_service),  # noqa: B008
) -> RelacionDTO:
    try:
        relacion_id = IdRegistro(relacion_raw)
    except ValueError as err:
        raise HTTPException(status_code=422, detail="ID de relacion invalido") from err

    relacion = service.buscar_relacion(relacion_id.valor)
    if relacion is None:
        raise HTTPException(status_code=404, detail="Relacion no encontrada")
    return relacion
