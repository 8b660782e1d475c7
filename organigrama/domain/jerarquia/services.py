# organigrama/domain/jerarquia/services.py
#
# Pure domain service: flat "cargo reporta a jefe" relations -> one renderable tree.
#
# Design decisions:
#   - Everything here is a pure function. No IO, no logging, no module-level
#     state. The repository (shell) fetches cargos and relaciones; callers
#     decide what to do with the diagnostics returned in ResultadoArbol.
#   - The pipeline is split in small public steps (filtrar, indexar,
#     identificar_raices, construir_nodo, marcar_visitados,
#     recuperar_ciclos_aislados, envolver_raiz_virtual) so each one can be
#     tested in isolation. construir_arbol only wires them together.
#   - Two distinct visitation scopes:
#       * per-path membership, used for cycle detection. An id joins the path
#         when its subtree starts and leaves it when the subtree ends, so
#         siblings on divergent branches never see each other.
#       * a cross-tree "already rendered" set, owned by construir_arbol and
#         passed explicitly to marcar_visitados / recuperar_ciclos_aislados.
#   - construir_nodo walks with an explicit stack instead of Python recursion:
#     a long reporting chain must not hit the interpreter recursion limit.
#   - Malformed data never raises. Dangling references are dropped, cycles are
#     cut with a terminal "(Ciclo)" node, unreachable cycles are force-rooted.
#     Each case is reported as a Diagnostico.
#
# Invariants:
#   - construir_arbol is deterministic: same ordered inputs, same output.
#   - Child order inside a node follows the order of the relation list.
#   - Declared roots and recovered cycles follow the order of the cargo list.
#   - Every cargo that survives filtering and takes part in at least one
#     filtered relation appears in the output.
#   - Output is [] or a single virtual root with id -1.
from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass

from .entities import (
    ID_RAIZ_VIRTUAL,
    Cargo,
    Diagnostico,
    NodoArbol,
    RelacionJerarquica,
    ResultadoArbol,
    TipoDiagnostico,
)
from .value_objects import Estado

NOMBRE_RAIZ_VIRTUAL = "Organización"
TIPO_RAIZ_VIRTUAL = "Raíz Virtual"
AVISO_REFERENCIA_CIRCULAR = "Referencia Circular"
AVISO_CICLO_AISLADO = "Ciclo Aislado"


@dataclass(frozen=True)
class IndiceJerarquico:
    """Indices derivados de las relaciones filtradas.

    hijos_de:          jefe -> hijos, en el orden de la lista de relaciones (con duplicados).
    relacion_de_hijo:  hijo -> id de la ultima relacion procesada para el.
    ids_relevantes:    todo id que aparece como jefe o como hijo.
    """
    hijos_de: dict[int, list[int]]
    relacion_de_hijo: dict[int, int]
    ids_relevantes: frozenset[int]


def construir_arbol(
    relaciones: Sequence[RelacionJerarquica],
    cargos: Sequence[Cargo],
    incluir_inactivos: bool = False,
) -> ResultadoArbol:
    """Arma el organigrama completo a partir de los listados crudos.

    Args:
        relaciones:         Todas las relaciones, inactivas incluidas.
        cargos:             Todos los cargos, inactivos incluidos.
        incluir_inactivos:  Toggle "Mostrar Inactivos" de la UI.

    Returns:
        ResultadoArbol con `arbol` vacio o con una unica raiz virtual (id -1),
        y los diagnosticos de relaciones huerfanas, ciclos y multiples jefes.
    """
    relaciones_filtradas, cargos_filtrados = filtrar(relaciones, cargos, incluir_inactivos)
    indice = indexar(relaciones_filtradas)
    relevantes = cargos_relevantes(cargos_filtrados, indice)

    diagnosticos: list[Diagnostico] = []
    diagnosticos.extend(_detectar_relaciones_huerfanas(relaciones_filtradas, relevantes))
    diagnosticos.extend(_detectar_multiples_jefes(relaciones_filtradas))

    arboles: list[NodoArbol] = []
    visitados: set[int] = set()
    for raiz in identificar_raices(relevantes, relaciones_filtradas):
        nodo = construir_nodo(raiz.id, relevantes, indice, diagnosticos)
        if nodo is not None:
            arboles.append(nodo)
            marcar_visitados(nodo, visitados)

    arboles.extend(recuperar_ciclos_aislados(relevantes, indice, visitados, diagnosticos))

    return ResultadoArbol(
        arbol=envolver_raiz_virtual(arboles),
        diagnosticos=tuple(diagnosticos),
        total_cargos=len(relevantes),
    )


def filtrar(
    relaciones: Sequence[RelacionJerarquica],
    cargos: Sequence[Cargo],
    incluir_inactivos: bool,
) -> tuple[list[RelacionJerarquica], list[Cargo]]:
    """Sin inactivos: descarta relaciones y cargos inactivos, cada uno por su propia flag.

    Un cargo inactivo desaparece aunque una relacion activa lo siga apuntando; la
    relacion queda huerfana y construir_arbol la cuenta.
    """
    if incluir_inactivos:
        return list(relaciones), list(cargos)
    return [r for r in relaciones if r.activo], [c for c in cargos if c.activo]


def indexar(relaciones: Sequence[RelacionJerarquica]) -> IndiceJerarquico:
    hijos_de: dict[int, list[int]] = {}
    relacion_de_hijo: dict[int, int] = {}
    ids_relevantes: set[int] = set()

    for relacion in relaciones:
        ids_relevantes.add(relacion.jefe_cargo_id)
        ids_relevantes.add(relacion.cargo_id)
        hijos_de.setdefault(relacion.jefe_cargo_id, []).append(relacion.cargo_id)
        # last-write-wins: con dos jefes activos queda la ultima relacion
        relacion_de_hijo[relacion.cargo_id] = relacion.id

    return IndiceJerarquico(
        hijos_de=hijos_de,
        relacion_de_hijo=relacion_de_hijo,
        ids_relevantes=frozenset(ids_relevantes),
    )


def cargos_relevantes(cargos: Sequence[Cargo], indice: IndiceJerarquico) -> dict[int, Cargo]:
    """Cargos filtrados que participan de alguna relacion, en el orden de la lista de cargos.

    Ids repetidos en la lista de cargos: vale la primera aparicion.
    """
    relevantes: dict[int, Cargo] = {}
    for cargo in cargos:
        if cargo.id in indice.ids_relevantes:
            relevantes.setdefault(cargo.id, cargo)
    return relevantes


def identificar_raices(
    relevantes: Mapping[int, Cargo],
    relaciones: Sequence[RelacionJerarquica],
) -> list[Cargo]:
    """Cargos que nunca aparecen como hijo en ninguna relacion filtrada."""
    hijos = {r.cargo_id for r in relaciones}
    return [cargo for cargo in relevantes.values() if cargo.id not in hijos]


def construir_nodo(
    cargo_id: int,
    relevantes: Mapping[int, Cargo],
    indice: IndiceJerarquico,
    diagnosticos: list[Diagnostico] | None = None,
) -> NodoArbol | None:
    """Arma el subarbol de cargo_id en profundidad, cortando ciclos.

    Returns:
        None si cargo_id no esta entre los cargos relevantes (referencia suelta).
        Un id que reaparece en el camino actual se vuelve nodo terminal "<nombre> (Ciclo)".
    """
    cargo = relevantes.get(cargo_id)
    if cargo is None:
        return None

    raiz = _nodo_cargo(cargo)
    camino: list[int] = [cargo_id]
    en_camino: set[int] = {cargo_id}
    pila: list[tuple[NodoArbol, Iterator[int]]] = [(raiz, iter(indice.hijos_de.get(cargo_id, ())))]

    while pila:
        padre, pendientes = pila[-1]
        hijo_id = next(pendientes, None)
        if hijo_id is None:
            pila.pop()
            en_camino.discard(camino.pop())
            continue

        hijo_cargo = relevantes.get(hijo_id)
        if hijo_cargo is None:
            continue

        if hijo_id in en_camino:
            _anexar(padre, _nodo_ciclo(hijo_cargo), indice)
            if diagnosticos is not None:
                ruta = " -> ".join(str(i) for i in [*camino, hijo_id])
                diagnosticos.append(
                    Diagnostico(
                        tipo=TipoDiagnostico.REFERENCIA_CIRCULAR,
                        descripcion=f"Ciclo detectado: [{ruta}]",
                        ids=(*camino, hijo_id),
                    )
                )
            continue

        hijo = _nodo_cargo(hijo_cargo)
        _anexar(padre, hijo, indice)
        camino.append(hijo_id)
        en_camino.add(hijo_id)
        pila.append((hijo, iter(indice.hijos_de.get(hijo_id, ()))))

    return raiz


def marcar_visitados(nodo: NodoArbol, visitados: set[int]) -> set[int]:
    """Acumula en `visitados` el id de todos los nodos del subarbol. Devuelve el mismo set."""
    visitados.update(n.id for n in nodo.recorrer())
    return visitados


def recuperar_ciclos_aislados(
    relevantes: Mapping[int, Cargo],
    indice: IndiceJerarquico,
    visitados: set[int],
    diagnosticos: list[Diagnostico] | None = None,
) -> list[NodoArbol]:
    """Fuerza como raiz cada cargo relevante que ninguna raiz declarada alcanzo.

    Solo pasa cuando todo cargo de un ciclo tiene jefe (ej.: A->B->C->A sin
    entrada externa), o cuando el unico jefe de un cargo es una referencia suelta.
    El punto de corte es el primer cargo del ciclo en la lista de cargos.
    """
    recuperados: list[NodoArbol] = []
    for cargo in relevantes.values():
        if cargo.id in visitados:
            continue
        nodo = construir_nodo(cargo.id, relevantes, indice, diagnosticos)
        if nodo is None:
            continue
        alcanzados = marcar_visitados(nodo, set())
        visitados.update(alcanzados)

        nodo.nombre = f"{nodo.nombre} (Ciclo Aislado)"
        nodo.atributos["Warning"] = AVISO_CICLO_AISLADO
        recuperados.append(nodo)

        if diagnosticos is not None:
            diagnosticos.append(
                Diagnostico(
                    tipo=TipoDiagnostico.CICLO_AISLADO,
                    descripcion=(
                        f"Cargo {cargo.id} ({cargo.nombre}) inalcanzable desde las raices; "
                        f"forzado como raiz de {len(alcanzados)} cargo(s)"
                    ),
                    ids=tuple(sorted(alcanzados)),
                )
            )
    return recuperados


def envolver_raiz_virtual(arboles: list[NodoArbol]) -> list[NodoArbol]:
    if not arboles:
        return []
    return [
        NodoArbol(
            nombre=NOMBRE_RAIZ_VIRTUAL,
            atributos={"Tipo": TIPO_RAIZ_VIRTUAL},
            id=ID_RAIZ_VIRTUAL,
            hijos=list(arboles),
        )
    ]


def _nodo_cargo(cargo: Cargo) -> NodoArbol:
    return NodoArbol(
        nombre=cargo.nombre,
        atributos={"Estado": Estado(cargo.activo).rotulo, "ID": cargo.id},
        id=cargo.id,
    )


def _nodo_ciclo(cargo: Cargo) -> NodoArbol:
    return NodoArbol(
        nombre=f"{cargo.nombre} (Ciclo)",
        atributos={"Warning": AVISO_REFERENCIA_CIRCULAR, "ID": cargo.id},
        id=cargo.id,
    )


def _anexar(padre: NodoArbol, hijo: NodoArbol, indice: IndiceJerarquico) -> None:
    # OrgID le indica a la UI que relacion borrar para desvincular al hijo de su jefe
    org_id = indice.relacion_de_hijo.get(hijo.id)
    if org_id is not None:
        hijo.atributos["OrgID"] = org_id
        hijo.org_id = org_id
    padre.hijos.append(hijo)


def _detectar_relaciones_huerfanas(
    relaciones: Sequence[RelacionJerarquica],
    relevantes: Mapping[int, Cargo],
) -> list[Diagnostico]:
    diagnosticos: list[Diagnostico] = []
    for relacion in relaciones:
        faltantes = [
            i for i in (relacion.cargo_id, relacion.jefe_cargo_id) if i not in relevantes
        ]
        if not faltantes:
            continue
        diagnosticos.append(
            Diagnostico(
                tipo=TipoDiagnostico.RELACION_HUERFANA,
                descripcion=(
                    f"Relacion {relacion.id} ({relacion.cargo_id} -> {relacion.jefe_cargo_id}) "
                    f"referencia cargo(s) inexistente(s) o filtrado(s): "
                    f"{', '.join(str(i) for i in dict.fromkeys(faltantes))}"
                ),
                ids=(relacion.id, relacion.cargo_id, relacion.jefe_cargo_id),
            )
        )
    return diagnosticos


def _detectar_multiples_jefes(relaciones: Sequence[RelacionJerarquica]) -> list[Diagnostico]:
    por_hijo: dict[int, list[int]] = {}
    for relacion in relaciones:
        por_hijo.setdefault(relacion.cargo_id, []).append(relacion.id)

    return [
        Diagnostico(
            tipo=TipoDiagnostico.MULTIPLES_JEFES,
            descripcion=(
                f"Cargo {cargo_id} tiene {len(relacion_ids)} relaciones como subordinado; "
                f"OrgID usa la ultima ({relacion_ids[-1]})"
            ),
            ids=(cargo_id, *relacion_ids),
        )
        for cargo_id, relacion_ids in por_hijo.items()
        if len(relacion_ids) > 1
    ]
