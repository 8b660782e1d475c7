# tests/domain/test_componentes_jerarquia.py
#
# Tests for the individual steps wired together by construir_arbol.
from organigrama.domain.jerarquia.entities import Cargo, NodoArbol, RelacionJerarquica, TipoDiagnostico
from organigrama.domain.jerarquia.services import (
    cargos_relevantes,
    construir_nodo,
    envolver_raiz_virtual,
    filtrar,
    identificar_raices,
    indexar,
    marcar_visitados,
    recuperar_ciclos_aislados,
)


def _rel(id_: int, hijo: int, jefe: int, activo: bool = True) -> RelacionJerarquica:
    return RelacionJerarquica(id=id_, cargo_id=hijo, jefe_cargo_id=jefe, activo=activo)


def _preparar(cargos: list[Cargo], relaciones: list[RelacionJerarquica]):  # type: ignore[no-untyped-def]
    indice = indexar(relaciones)
    return cargos_relevantes(cargos, indice), indice


# ---------- filtrar ----------


def test_filtrar_descarta_inactivos_por_su_propia_flag() -> None:
    cargos = [Cargo(1, "A"), Cargo(2, "B", activo=False)]
    relaciones = [_rel(1, 2, 1), _rel(2, 1, 2, activo=False)]

    rels, cars = filtrar(relaciones, cargos, incluir_inactivos=False)

    assert [r.id for r in rels] == [1]
    assert [c.id for c in cars] == [1]


def test_filtrar_con_inactivos_devuelve_copias_completas() -> None:
    cargos = [Cargo(1, "A", activo=False)]
    relaciones = [_rel(1, 1, 1, activo=False)]

    rels, cars = filtrar(relaciones, cargos, incluir_inactivos=True)

    assert rels == relaciones
    assert cars == cargos
    assert rels is not relaciones


# ---------- indexar ----------


def test_indexar_conserva_orden_y_duplicados_de_hijos() -> None:
    indice = indexar([_rel(1, 2, 1), _rel(2, 3, 1), _rel(3, 2, 1)])

    assert indice.hijos_de == {1: [2, 3, 2]}
    assert indice.ids_relevantes == frozenset({1, 2, 3})


def test_indexar_relacion_de_hijo_queda_con_la_ultima() -> None:
    indice = indexar([_rel(7, 3, 1), _rel(8, 3, 2)])

    assert indice.relacion_de_hijo == {3: 8}


# ---------- cargos_relevantes / identificar_raices ----------


def test_cargos_relevantes_ignora_cargos_sin_relaciones_y_duplicados() -> None:
    cargos = [Cargo(3, "C"), Cargo(1, "A"), Cargo(9, "Suelto"), Cargo(1, "A bis")]
    relevantes, _ = _preparar(cargos, [_rel(1, 3, 1)])

    assert list(relevantes) == [3, 1]
    assert relevantes[1].nombre == "A"


def test_identificar_raices_excluye_todo_cargo_que_es_hijo() -> None:
    cargos = [Cargo(1, "A"), Cargo(2, "B"), Cargo(3, "C")]
    relaciones = [_rel(1, 2, 1), _rel(2, 3, 3)]
    relevantes, _ = _preparar(cargos, relaciones)

    assert [c.id for c in identificar_raices(relevantes, relaciones)] == [1]


# ---------- construir_nodo ----------


def test_construir_nodo_referencia_suelta_devuelve_none() -> None:
    relevantes, indice = _preparar([Cargo(1, "A")], [_rel(1, 1, 99)])

    assert construir_nodo(99, relevantes, indice) is None


def test_construir_nodo_ramas_hermanas_no_comparten_camino() -> None:
    """Diamante 1 -> {2, 3} -> 4: el 4 aparece dos veces y ninguna es ciclo."""
    cargos = [Cargo(i, f"C{i}") for i in range(1, 5)]
    relaciones = [_rel(1, 2, 1), _rel(2, 3, 1), _rel(3, 4, 2), _rel(4, 4, 3)]
    relevantes, indice = _preparar(cargos, relaciones)
    diagnosticos: list = []

    nodo = construir_nodo(1, relevantes, indice, diagnosticos)

    assert nodo is not None
    nietos = [n.hijos[0].nombre for n in nodo.hijos]
    assert nietos == ["C4", "C4"]
    assert diagnosticos == []


def test_construir_nodo_corta_ciclo_y_registra_camino() -> None:
    cargos = [Cargo(1, "A"), Cargo(2, "B")]
    relevantes, indice = _preparar(cargos, [_rel(1, 2, 1), _rel(2, 1, 2)])
    diagnosticos: list = []

    nodo = construir_nodo(1, relevantes, indice, diagnosticos)

    assert nodo is not None
    assert nodo.hijos[0].hijos[0].nombre == "A (Ciclo)"
    assert [d.ids for d in diagnosticos] == [(1, 2, 1)]
    assert diagnosticos[0].tipo is TipoDiagnostico.REFERENCIA_CIRCULAR


def test_construir_nodo_sin_acumulador_no_falla() -> None:
    relevantes, indice = _preparar([Cargo(5, "X")], [_rel(1, 5, 5)])

    nodo = construir_nodo(5, relevantes, indice)

    assert nodo is not None
    assert nodo.hijos[0].nombre == "X (Ciclo)"


# ---------- marcar_visitados / recuperar_ciclos_aislados ----------


def test_marcar_visitados_acumula_sobre_el_mismo_set() -> None:
    arbol = NodoArbol("A", {}, 1, [NodoArbol("B", {}, 2), NodoArbol("C", {}, 3, [NodoArbol("D", {}, 4)])])
    visitados = {99}

    devuelto = marcar_visitados(arbol, visitados)

    assert devuelto is visitados
    assert visitados == {1, 2, 3, 4, 99}


def test_recuperar_ciclos_aislados_omite_lo_ya_visitado() -> None:
    cargos = [Cargo(1, "A"), Cargo(2, "B")]
    relevantes, indice = _preparar(cargos, [_rel(1, 2, 1), _rel(2, 1, 2)])

    assert recuperar_ciclos_aislados(relevantes, indice, {1, 2}) == []

    visitados: set[int] = set()
    recuperados = recuperar_ciclos_aislados(relevantes, indice, visitados)
    assert [n.nombre for n in recuperados] == ["A (Ciclo Aislado)"]
    assert visitados == {1, 2}


# ---------- envolver_raiz_virtual ----------


def test_envolver_raiz_virtual_sin_arboles_devuelve_lista_vacia() -> None:
    assert envolver_raiz_virtual([]) == []


def test_envolver_raiz_virtual_agrupa_todos_los_arboles() -> None:
    arboles = [NodoArbol("A", {}, 1), NodoArbol("B", {}, 2)]

    (raiz,) = envolver_raiz_virtual(arboles)

    assert raiz.id == -1
    assert raiz.nombre == "Organización"
    assert raiz.atributos == {"Tipo": "Raíz Virtual"}
    assert raiz.hijos == arboles
