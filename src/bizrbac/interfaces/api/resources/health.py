"""Health check endpoints."""

import falcon.asgi


class HealthResource:
    """Liveness, and readiness with the engine's operational counters.

    Failed audit writes never fail a request; ``audit_failures`` counts them.
    """

    def __init__(self, audit_logger=None, cache=None) -> None:
        self._audit_logger = audit_logger
        self._cache = cache

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        resp.media = {"status": "ok"}
        resp.status = falcon.HTTP_200

    async def on_get_ready(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        body = {"status": "ready"}
        if self._audit_logger is not None:
            body["audit_failures"] = self._audit_logger.failures
        if self._cache is not None:
            body["cached_users"] = len(self._cache)
        resp.media = body
        resp.status = falcon.HTTP_200
