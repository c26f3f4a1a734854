"""aiohttp integration for authenticating Mini App requests.

The Mini App sends its raw initData in the Authorization header:

    Authorization: tma <initData>

The middleware validates it, applies the configured max age and stores
the WebAppInitData on ``request["init_data"]``.
"""

import logging
import time

from aiohttp import web

from .config import AuthConfig
from .errors import InitDataError
from .models import WebAppInitData, WebAppUser
from .validate import validate_init_data

logger = logging.getLogger(__name__)

PUBLIC_PATHS = {"/api/health"}


def _unauthorized(error: str) -> web.Response:
    return web.json_response({"error": error}, status=401)


def authenticate(config: AuthConfig, authorization: str) -> tuple[WebAppInitData | None, str]:
    """Validate an Authorization header value and return (init_data, error)."""
    prefix = f"{config.auth_scheme} "
    if not authorization.startswith(prefix):
        return None, "missing or invalid Authorization header"

    try:
        init_data = validate_init_data(config.bot_token, authorization[len(prefix):])
    except InitDataError as e:
        return None, str(e)

    if config.max_age_seconds:
        elapsed = init_data.elapsed_since_auth()
        if elapsed is None:
            return None, "auth_date is in the future"
        if elapsed.total_seconds() > config.max_age_seconds:
            return None, "expired"

    return init_data, ""


@web.middleware
async def init_data_middleware(request: web.Request, handler) -> web.Response:
    """Reject requests without valid initData, except public paths."""
    if request.path in PUBLIC_PATHS:
        return await handler(request)

    config: AuthConfig = request.app["config"]
    init_data, error = authenticate(config, request.headers.get("Authorization", ""))
    if init_data is None:
        logger.info("Rejected %s %s: %s", request.method, request.path, error)
        return _unauthorized(error)

    request["init_data"] = init_data
    return await handler(request)


@web.middleware
async def logging_middleware(request: web.Request, handler) -> web.Response:
    """Log all incoming requests."""
    start = time.time()
    try:
        response = await handler(request)
        elapsed = (time.time() - start) * 1000
        logger.info("%s %s → %s (%.0fms)", request.method, request.path, response.status, elapsed)
        return response
    except Exception as e:
        elapsed = (time.time() - start) * 1000
        logger.error("%s %s → ERROR: %s (%.0fms)", request.method, request.path, e, elapsed)
        raise


def _user_to_dict(user: WebAppUser | None) -> dict | None:
    return user.model_dump(exclude_none=True) if user else None


async def handle_health(request: web.Request) -> web.Response:
    """GET /api/health — simple health check, no auth required."""
    return web.json_response({"status": "ok", "time": int(time.time())})


async def handle_me(request: web.Request) -> web.Response:
    """GET /api/me — return the authenticated user and initData age."""
    init_data: WebAppInitData = request["init_data"]
    elapsed = init_data.elapsed_since_auth()
    return web.json_response({
        "user": _user_to_dict(init_data.user),
        "receiver": _user_to_dict(init_data.receiver),
        "start_param": init_data.start_param,
        "auth_date": init_data.auth_date,
        "elapsed_seconds": int(elapsed.total_seconds()) if elapsed is not None else None,
    })


def create_web_app(config: AuthConfig) -> web.Application:
    """Create and configure the aiohttp web application."""
    app = web.Application(middlewares=[logging_middleware, init_data_middleware])
    app["config"] = config

    app.router.add_get("/api/health", handle_health)
    app.router.add_get("/api/me", handle_me)

    return app
