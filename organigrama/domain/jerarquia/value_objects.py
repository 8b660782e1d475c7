# organigrama/domain/jerarquia/value_objects.py
from __future__ import annotations

from dataclasses import dataclass

_ESTADO_ACTIVO = 1
_ESTADO_INACTIVO = 0


def _a_entero(raw: object) -> int:
    """Convierte ids/flags del sistema administrativo (int o texto numerico)."""
    if isinstance(raw, bool):
        return int(raw)
    if isinstance(raw, int):
        return raw
    texto = str(raw).strip()
    if not texto.lstrip("-").isdigit():
        raise ValueError(f"valor no numerico: {raw!r}")
    return int(texto)


@dataclass(frozen=True)
class IdRegistro:
    """Value Object para ids de cargo/relacion. Siempre positivo: -1 esta reservado
    para la raiz virtual del organigrama."""

    _valor: int

    def __init__(self, raw: object) -> None:
        try:
            valor = _a_entero(raw)
        except ValueError as err:
            raise ValueError(f"ID invalido: {err}") from err
        if valor <= 0:
            raise ValueError(f"ID invalido: {valor} (se esperaba entero positivo)")
        object.__setattr__(self, "_valor", valor)

    @property
    def valor(self) -> int:
        return self._valor

    def __int__(self) -> int:
        return self._valor


@dataclass(frozen=True)
class Estado:
    """Flag `estado` del sistema administrativo: 1 = activo, 0 = inactivo."""

    _valor: int

    def __init__(self, raw: object) -> None:
        try:
            valor = _a_entero(raw)
        except ValueError as err:
            raise ValueError(f"Estado invalido: {err}") from err
        if valor not in (_ESTADO_ACTIVO, _ESTADO_INACTIVO):
            raise ValueError(f"Estado invalido: {valor} (se esperaba 0 o 1)")
        object.__setattr__(self, "_valor", valor)

    @property
    def activo(self) -> bool:
        return self._valor == _ESTADO_ACTIVO

    @property
    def rotulo(self) -> str:
        """Rotulo del atributo `Estado` en los nodos del arbol."""
        return "Activo" if self.activo else "Inactivo"
