# organigrama/interfaces/api/routes/cargo_routes.py
from fastapi import APIRouter, Depends, Query

from organigrama.application.dtos.cargo_dto import CargoDTO
from organigrama.application.services.arbol_service import ArbolService
from organigrama.interfaces.api.dependencies import get_arbol_service

router = APIRouter()


@router.get("/cargos", response_model=list[CargoDTO])
def get_cargos(
    incluir_inactivos: bool = Query(False),  # noqa: B008
    service: ArbolService = Depends(get_arbol_service),  # noqa: B008
) -> list[CargoDTO]:
    return service.listar_cargos(incluir_inactivos=incluir_inactivos)
