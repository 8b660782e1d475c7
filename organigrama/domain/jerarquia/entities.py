# organigrama/domain/jerarquia/entities.py
from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import StrEnum

ID_RAIZ_VIRTUAL = -1


@dataclass(frozen=True)
class Cargo:
    """Cargo (posicion) del organigrama. Solo lectura: lo crea y desactiva el
    modulo administrativo de cargos."""
    id: int
    nombre: str
    activo: bool = True

    def __post_init__(self) -> None:
        if self.id == ID_RAIZ_VIRTUAL:
            raise ValueError(f"Cargo invalido: id {ID_RAIZ_VIRTUAL} esta reservado para la raiz virtual")


@dataclass(frozen=True)
class RelacionJerarquica:
    """Arista "cargo_id reporta a jefe_cargo_id". No garantiza un unico jefe
    activo por cargo: eso le corresponde a quien graba la relacion."""
    id: int
    cargo_id: int
    jefe_cargo_id: int
    activo: bool = True


@dataclass
class NodoArbol:
    """Nodo renderizable. Se arma desde cero en cada llamada a construir_arbol
    y no se modifica despues de devuelto."""
    nombre: str
    atributos: dict[str, str | int]
    id: int
    hijos: list[NodoArbol] = field(default_factory=list)
    org_id: int | None = None

    def recorrer(self) -> Iterator[NodoArbol]:
        """Preorden sin recursion (arboles profundos no agotan la pila)."""
        pendientes: list[NodoArbol] = [self]
        while pendientes:
            nodo = pendientes.pop()
            yield nodo
            pendientes.extend(reversed(nodo.hijos))


class TipoDiagnostico(StrEnum):
    RELACION_HUERFANA = "RELACION_HUERFANA"
    REFERENCIA_CIRCULAR = "REFERENCIA_CIRCULAR"
    CICLO_AISLADO = "CICLO_AISLADO"
    MULTIPLES_JEFES = "MULTIPLES_JEFES"


@dataclass(frozen=True)
class Diagnostico:
    """Problema de calidad de datos encontrado al armar el arbol. Nunca
    interrumpe el armado: se devuelve junto con el resultado."""
    tipo: TipoDiagnostico
    descripcion: str
    ids: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        if not self.descripcion.strip():
            raise ValueError("Diagnostico exige descripcion no vacia")


@dataclass(frozen=True)
class ResultadoArbol:
    """Arbol (0 o 1 raiz virtual) + diagnosticos observables por tests y operadores."""
    arbol: list[NodoArbol]
    diagnosticos: tuple[Diagnostico, ...] = ()
    total_cargos: int = 0

    def contar(self, tipo: TipoDiagnostico) -> int:
        return sum(1 for d in self.diagnosticos if d.tipo is tipo)

    def resumen(self) -> dict[str, int]:
        return {tipo.value: self.contar(tipo) for tipo in TipoDiagnostico}
