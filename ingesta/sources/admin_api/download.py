# ingesta/sources/admin_api/download.py
#
# IO-only: page through the administrative console "list-all" endpoints and
# save each collection as one raw JSON file.
#
# Design decisions:
#   - Both collections come back unfiltered (inactive rows included):
#     filtering is the hierarchy builder's job, not the fetch call's.
#   - The console answers `{"data": [...], "meta": {"totalPages": N}}` for
#     paginated resources and a bare JSON array for some legacy ones. Both
#     shapes are accepted; a bare array is treated as the only page.
#   - HTTP errors propagate. A partial org chart is worse than no refresh:
#     the previous DuckDB file stays in place when the pipeline aborts.
#   - The raw file is written to <name>.json.tmp and renamed only after all
#     pages arrived, so a crashed run never leaves a truncated raw file.
#   - `transport` lets tests plug an httpx.MockTransport without patching.
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import httpx

from ingesta.log import log

RUTA_CARGOS = "/positions"
RUTA_RELACIONES = "/organigrama"

_MAX_PAGES = 1000


def download_cargos(
    base_url: str,
    raw_dir: Path,
    timeout: int = 60,
    page_size: int = 1000,
    token: str | None = None,
    transport: httpx.BaseTransport | None = None,
) -> Path:
    """Download every cargo (position) into raw_dir/cargos.json."""
    return _download_coleccion(
        base_url, RUTA_CARGOS, raw_dir / "cargos.json", timeout, page_size, token, transport
    )


def download_relaciones(
    base_url: str,
    raw_dir: Path,
    timeout: int = 60,
    page_size: int = 1000,
    token: str | None = None,
    transport: httpx.BaseTransport | None = None,
) -> Path:
    """Download every hierarchy relation into raw_dir/relaciones.json."""
    return _download_coleccion(
        base_url, RUTA_RELACIONES, raw_dir / "relaciones.json", timeout, page_size, token, transport
    )


def _download_coleccion(
    base_url: str,
    ruta: str,
    destino: Path,
    timeout: int,
    page_size: int,
    token: str | None,
    transport: httpx.BaseTransport | None,
) -> Path:
    """Fetch all pages of one collection and write them as {"data": [...]}.

    Returns:
        Path to the written JSON file.

    Raises:
        httpx.HTTPStatusError: on any non-2xx answer.
        httpx.TransportError: on network failures.
    """
    headers = {"Accept": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"

    registros: list[dict[str, Any]] = []
    with httpx.Client(
        base_url=base_url,
        headers=headers,
        timeout=timeout,
        transport=transport,
        follow_redirects=True,
    ) as client:
        page = 1
        while page <= _MAX_PAGES:
            response = client.get(ruta, params={"page": page, "limit": page_size})
            response.raise_for_status()
            payload: Any = response.json()

            if isinstance(payload, list):
                registros.extend(payload)
                break

            page_registros: list[dict[str, Any]] = payload.get("data") or []
            if not page_registros:
                break
            registros.extend(page_registros)

            meta = payload.get("meta") or {}
            total_pages = int(meta.get("totalPages") or 1)
            if page >= total_pages:
                break
            page += 1

    destino.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = destino.with_suffix(".json.tmp")
    tmp_path.write_text(json.dumps({"data": registros}, ensure_ascii=False), encoding="utf-8")
    tmp_path.replace(destino)

    log(f"  {ruta}: {len(registros):,} registros")
    return destino
