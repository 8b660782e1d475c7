# organigrama/interfaces/api/dependencies.py
from organigrama.application.services.arbol_service import ArbolService
from organigrama.infrastructure.duckdb_connection import get_connection
from organigrama.infrastructure.repositories.duckdb_organigrama_repo import DuckDBOrganigramaRepo


def get_arbol_service() -> ArbolService:
    return ArbolService(organigrama_repo=DuckDBOrganigramaRepo(get_connection()))
