# organigrama/application/dtos/arbol_dto.py
from pydantic import BaseModel, Field


class NodoArbolDTO(BaseModel):
    """Formato consumido por el renderizador (react-d3-tree): name/attributes/children."""
    name: str
    attributes: dict[str, str | int]
    children: list["NodoArbolDTO"] | None = None   # None se omite en la respuesta
    id: int
    edgeId: int | None = None   # relacion que cuelga al nodo de su jefe (igual a attributes.OrgID)


class DiagnosticoDTO(BaseModel):
    tipo: str            # "RELACION_HUERFANA" | "REFERENCIA_CIRCULAR" | "CICLO_AISLADO" | "MULTIPLES_JEFES"
    descripcion: str
    ids: list[int] = Field(default_factory=list)


class ArbolDTO(BaseModel):
    arbol: list[NodoArbolDTO]
    diagnosticos: list[DiagnosticoDTO] = Field(default_factory=list)
    resumen: dict[str, int] = Field(default_factory=dict)
    total_cargos: int = 0
    incluir_inactivos: bool = False


NodoArbolDTO.model_rebuild()
