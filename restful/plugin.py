"""Wiring of the resource helpers into a FastAPI application."""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import FastAPI
from fastapi import Request

from restful.core.config import get_settings
from restful.core.errors import default_http_error
from restful.core.errors import register_error_handlers
from restful.tools import RequestContext
from restful.tools import Restful

logger = logging.getLogger(__name__)

_FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def _read_body(request: Request) -> dict[str, Any]:
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(_FORM_CONTENT_TYPES):
        form = await request.form()
        return dict(form)

    raw = await request.body()
    if not raw:
        return {}
    try:
        payload = json.loads(raw)
    except ValueError:
        raise default_http_error() from None
    if not isinstance(payload, dict):
        raise default_http_error()
    return payload


async def request_context(request: Request) -> RequestContext:
    """Collect path, query and body parameters of ``request``.

    Repeated query keys keep their last value.
    """
    return RequestContext(
        params=dict(request.path_params),
        query=dict(request.query_params),
        body=await _read_body(request),
    )


async def get_restful(request: Request) -> Restful:
    """Provide the request-scoped toolbox as a FastAPI dependency."""
    return Restful(await request_context(request))


def setup_restful(app: FastAPI) -> FastAPI:
    """Install the structured error boundary on ``app``.

    Installing twice on the same app is refused.
    """
    if getattr(app.state, "restful_installed", False):
        raise RuntimeError(
            "restful is already installed on this app; remove the duplicate setup_restful() call"
        )
    register_error_handlers(app)
    app.state.restful_installed = True
    logger.debug("Installed restful error handlers on %s with settings=%s", app.title, get_settings().safe_for_logging())
    return app
