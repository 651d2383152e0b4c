"""aiohttp application: /auth and /healthz endpoints, plus an API key middleware."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from aiohttp import web

from keygate.auth import API_KEY_SCHEME, AuthErrorKind, AuthHeaderError, get_api_key
from keygate.config import split_prefixes

log = logging.getLogger(__name__)

ERROR_HEADER = "X-Keygate-Error"

_ERROR_TEXT = {
    AuthErrorKind.NO_AUTH_HEADER: "missing authorization header",
    AuthErrorKind.MALFORMED_HEADER: "malformed authorization header",
}

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def unauthorized(exc: AuthHeaderError) -> web.Response:
    """Build the 401 response for a rejected Authorization header."""
    return web.Response(
        status=401,
        text=_ERROR_TEXT[exc.kind],
        headers={
            "WWW-Authenticate": API_KEY_SCHEME,
            ERROR_HEADER: exc.kind.value,
        },
    )


async def healthz(request: web.Request) -> web.Response:
    return web.Response(text="ok")


async def auth(request: web.Request) -> web.Response:
    forward_header: str = request.app["config"]["auth"]["forward_header"]
    try:
        key = get_api_key(request.headers)
    except AuthHeaderError as exc:
        log.debug("Auth rejected for %s: %s", request.remote, exc.kind.value)
        return unauthorized(exc)
    return web.Response(status=200, text="ok", headers={forward_header: key})


def _is_under(path: str, prefix: str) -> bool:
    """Match ``prefix`` on a path-segment boundary: /api covers /api and /api/x, not /apiary."""
    base = prefix.rstrip("/")
    return path == base or path.startswith(base + "/")


def api_key_middleware(protected_prefixes: str | Iterable[str]) -> Callable[..., Any]:
    """Require an ApiKey header on paths under any of ``protected_prefixes``.

    A single string is read as a comma-separated list. The extracted key is
    stored as ``request["api_key"]``.
    """
    prefixes = split_prefixes(
        protected_prefixes if isinstance(protected_prefixes, str) else list(protected_prefixes)
    )

    @web.middleware
    async def middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
        if not any(_is_under(request.path, prefix) for prefix in prefixes):
            return await handler(request)
        try:
            request["api_key"] = get_api_key(request.headers)
        except AuthHeaderError as exc:
            log.debug("Blocked %s: %s", request.path, exc.kind.value)
            return unauthorized(exc)
        return await handler(request)

    return middleware


def create_app(config: dict[str, Any]) -> web.Application:
    app = web.Application(
        middlewares=[api_key_middleware(config["auth"]["protected_prefixes"])]
    )
    app["config"] = config

    app.router.add_get("/auth", auth)
    app.router.add_get("/healthz", healthz)
    return app
