# tests/integration/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator
from pathlib import Path

import duckdb
import pytest
from fastapi.testclient import TestClient

SCHEMA_PATH = Path(__file__).parent.parent.parent / "ingesta" / "output" / "schema.sql"

# Deshabilitar rate limit en tests
os.environ["API_RATE_LIMIT_PER_MINUTE"] = "0"


@pytest.fixture(scope="session")
def test_db() -> Generator[duckdb.DuckDBPyConnection, None, None]:
    """DuckDB in-memory con el esquema de la ingesta y un organigrama deterministico.

    Direccion General
      +- Gerencia de Operaciones (rel 10)
      |    +- Analista (rel 11; rel 16 inactiva la cuelga tambien de 1)
      +- Gerencia Comercial [inactivo] (rel 12)
           +- Vendedor (rel 13)
    Auditor <-> Auditor Adjunto (rels 14, 15): ciclo sin raiz
    """
    conn = duckdb.connect(":memory:")
    conn.execute(SCHEMA_PATH.read_text(encoding="utf-8"))

    conn.execute("""
        INSERT INTO dim_cargo VALUES
        (1, 'Direccion General', TRUE),
        (2, 'Gerencia de Operaciones', TRUE),
        (3, 'Analista', TRUE),
        (4, 'Gerencia Comercial', FALSE),
        (5, 'Vendedor', TRUE),
        (6, 'Auditor', TRUE),
        (7, 'Auditor Adjunto', TRUE),
        (8, 'Cargo sin relaciones', TRUE)
    """)

    conn.execute("""
        INSERT INTO bridge_cargo_jefe VALUES
        (10, 2, 1, TRUE),
        (11, 3, 2, TRUE),
        (12, 4, 1, TRUE),
        (13, 5, 4, TRUE),
        (14, 6, 7, TRUE),
        (15, 7, 6, TRUE),
        (16, 3, 1, FALSE)
    """)

    yield conn
    conn.close()


@pytest.fixture(scope="session")
def client(test_db: duckdb.DuckDBPyConnection) -> Generator[TestClient, None, None]:
    """TestClient de FastAPI con DuckDB in-memory inyectado."""
    from organigrama.infrastructure import duckdb_connection
    duckdb_connection.set_connection(test_db)

    # Limpiar cache de settings para tomar API_RATE_LIMIT_PER_MINUTE=0
    from organigrama.infrastructure.config import get_settings
    get_settings.cache_clear()

    from organigrama.interfaces.api.main import app
    with TestClient(app) as c:
        yield c
