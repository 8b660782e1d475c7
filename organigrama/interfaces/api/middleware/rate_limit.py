# organigrama/interfaces/api/middleware/rate_limit.py
from __future__ import annotations

import time
from collections import defaultdict

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from organigrama.infrastructure.config import get_settings

_VENTANA_SEGUNDOS = 60.0


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Ventana deslizante de 60s por IP. Con X-API-Key no se aplica el limite."""

    def __init__(self, app: object) -> None:
        super().__init__(app)  # type: ignore[arg-type]
        self._requests: dict[str, list[float]] = defaultdict(list)
        self._ultima_poda = time.time()

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        settings = get_settings()

        # 0 = sin limite (usado en tests)
        if settings.rate_limit_per_minute == 0:
            return await call_next(request)

        # clientes de servicio (p. ej. la ingesta) se identifican con API key
        if request.headers.get("X-API-Key"):
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        now = time.time()
        if now - self._ultima_poda >= _VENTANA_SEGUNDOS:
            self.podar_inactivas(now)

        recientes = [t for t in self._requests[client_ip] if now - t < _VENTANA_SEGUNDOS]
        if len(recientes) >= settings.rate_limit_per_minute:
            self._requests[client_ip] = recientes
            return Response(
                content='{"detail": "Limite de solicitudes excedido. Intente de nuevo en 1 minuto."}',
                status_code=429,
                media_type="application/json",
                headers={"Retry-After": str(int(_VENTANA_SEGUNDOS - (now - recientes[0])) + 1)},
            )

        recientes.append(now)
        self._requests[client_ip] = recientes
        return await call_next(request)

    def podar_inactivas(self, now: float) -> None:
        """Descarta las IPs sin solicitudes dentro de la ventana actual."""
        inactivas = [
            ip for ip, tiempos in self._requests.items()
            if not tiempos or now - tiempos[-1] >= _VENTANA_SEGUNDOS
        ]
        for ip in inactivas:
            del self._requests[ip]
        self._ultima_poda = now
