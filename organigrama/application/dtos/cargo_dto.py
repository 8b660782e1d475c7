# organigrama/application/dtos/cargo_dto.py
from pydantic import BaseModel


class CargoDTO(BaseModel):
    id: int
    nombre: str
    activo: bool


class RelacionDTO(BaseModel):
    id: int
    cargo_id: int        # subordinado
    jefe_cargo_id: int   # superior
    activo: bool
