# tests/integration/test_api_organigrama.py
from fastapi.testclient import TestClient


def _por_nombre(nodos: list[dict]) -> dict[str, dict]:
    return {n["name"]: n for n in nodos}


def test_arbol_tiene_una_raiz_virtual(client: TestClient) -> None:
    response = client.get("/api/organigrama/arbol")
    assert response.status_code == 200
    data = response.json()
    assert len(data["arbol"]) == 1
    raiz = data["arbol"][0]
    assert raiz["id"] == -1
    assert raiz["name"] == "Organización"
    assert raiz["attributes"] == {"Tipo": "Raíz Virtual"}
    assert "edgeId" not in raiz


def test_arbol_por_defecto_oculta_inactivos_y_recupera_ciclos(client: TestClient) -> None:
    data = client.get("/api/organigrama/arbol").json()
    raiz = data["arbol"][0]

    assert [h["name"] for h in raiz["children"]] == [
        "Direccion General",
        "Vendedor (Ciclo Aislado)",
        "Auditor (Ciclo Aislado)",
    ]
    direccion = raiz["children"][0]
    assert [h["name"] for h in direccion["children"]] == ["Gerencia de Operaciones"]

    auditor = _por_nombre(raiz["children"])["Auditor (Ciclo Aislado)"]
    adjunto = auditor["children"][0]
    assert adjunto["attributes"]["OrgID"] == 15
    assert adjunto["edgeId"] == 15
    terminal = adjunto["children"][0]
    assert terminal["name"] == "Auditor (Ciclo)"
    assert terminal["attributes"]["Warning"] == "Referencia Circular"
    assert data["total_cargos"] == 6
    assert data["incluir_inactivos"] is False


def test_arbol_hoja_no_incluye_children(client: TestClient) -> None:
    raiz = client.get("/api/organigrama/arbol").json()["arbol"][0]
    operaciones = raiz["children"][0]["children"][0]
    analista = operaciones["children"][0]

    assert analista["name"] == "Analista"
    assert analista["attributes"] == {"Estado": "Activo", "ID": 3, "OrgID": 11}
    assert analista["edgeId"] == 11
    assert "children" not in analista


def test_arbol_expone_diagnosticos_y_resumen(client: TestClient) -> None:
    data = client.get("/api/organigrama/arbol").json()

    assert data["resumen"] == {
        "RELACION_HUERFANA": 2,
        "REFERENCIA_CIRCULAR": 1,
        "CICLO_AISLADO": 2,
        "MULTIPLES_JEFES": 0,
    }
    huerfanas = [d for d in data["diagnosticos"] if d["tipo"] == "RELACION_HUERFANA"]
    assert [d["ids"][0] for d in huerfanas] == [12, 13]


def test_arbol_con_inactivos(client: TestClient) -> None:
    data = client.get("/api/organigrama/arbol", params={"incluir_inactivos": True}).json()
    raiz = data["arbol"][0]

    assert [h["name"] for h in raiz["children"]] == ["Direccion General", "Auditor (Ciclo Aislado)"]
    direccion = raiz["children"][0]
    hijos = _por_nombre(direccion["children"])
    assert list(hijos) == ["Gerencia de Operaciones", "Gerencia Comercial", "Analista"]
    assert hijos["Gerencia Comercial"]["attributes"]["Estado"] == "Inactivo"
    # OrgID del Analista es la ultima relacion procesada (16), en ambas apariciones
    assert hijos["Analista"]["attributes"]["OrgID"] == 16
    assert hijos["Gerencia de Operaciones"]["children"][0]["attributes"]["OrgID"] == 16
    assert data["resumen"]["MULTIPLES_JEFES"] == 1
    assert data["total_cargos"] == 7


def test_relaciones_listado(client: TestClient) -> None:
    activas = client.get("/api/organigrama/relaciones").json()
    todas = client.get("/api/organigrama/relaciones", params={"incluir_inactivos": True}).json()

    assert [r["id"] for r in activas] == [10, 11, 12, 13, 14, 15]
    assert len(todas) == 7
    assert todas[-1] == {"id": 16, "cargo_id": 3, "jefe_cargo_id": 1, "activo": False}


def test_relacion_por_id(client: TestClient) -> None:
    response = client.get("/api/organigrama/relaciones/16")
    assert response.status_code == 200
    assert response.json()["activo"] is False


def test_relacion_inexistente_retorna_404(client: TestClient) -> None:
    response = client.get("/api/organigrama/relaciones/999")
    assert response.status_code == 404


def test_relacion_id_invalido_retorna_422(client: TestClient) -> None:
    for raw in ("abc", "0", "-1"):
        response = client.get(f"/api/organigrama/relaciones/{raw}")
        assert response.status_code == 422
        assert response.json()["detail"] == "ID de relacion invalido"


def test_cargos_listado(client: TestClient) -> None:
    activos = client.get("/api/cargos").json()
    todos = client.get("/api/cargos", params={"incluir_inactivos": True}).json()

    assert len(activos) == 7
    assert all(c["activo"] for c in activos)
    assert len(todos) == 8
    assert {"id": 4, "nombre": "Gerencia Comercial", "activo": False} in todos


def test_headers_de_seguridad(client: TestClient) -> None:
    response = client.get("/api/cargos")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
