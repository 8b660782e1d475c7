# organigrama/interfaces/api/main.py
from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from organigrama.infrastructure.config import get_settings
from organigrama.interfaces.api.middleware.rate_limit import RateLimitMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    from organigrama.infrastructure.duckdb_connection import get_connection
    get_connection()  # valida conexion en el startup
    yield


app = FastAPI(
    title="Organigrama API",
    debug=get_settings().debug,
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url=None,
)


@app.middleware("http")
async def add_security_headers(request: Request, call_next: object) -> Response:
    response = await call_next(request)  # type: ignore[misc]
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    return response  # type: ignore[return-value]


app.add_middleware(RateLimitMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(get_settings().cors_origins),
    allow_methods=["GET"],
    allow_headers=["*"],
)

from organigrama.interfaces.api.routes.cargo_routes import router as cargo_router  # noqa: E402
from organigrama.interfaces.api.routes.organigrama_routes import router as organigrama_router  # noqa: E402

app.include_router(organigrama_router, prefix="/api")
app.include_router(cargo_router, prefix="/api")
