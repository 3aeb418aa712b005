"""FastAPI application exposing device status and wake routes.

Routes:
    GET /               status page for every configured server
    GET /wol/{index}    send a magic packet (Basic auth), then the status page
    GET /api/status     status view as JSON

Outcomes of the wake route map onto HTTP as follows:
    400 "Invalid index"                 index is not an integer or out of range
    401 "Unauthorized"                  missing/wrong password, with a Basic challenge
    400 "Server does not support WOL"   server has no MAC configured
    500 "Failed to send WOL packet"     the magic packet could not be sent
"""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from fastapi.templating import Jinja2Templates

from starburst import __version__
from starburst.core.dispatcher import ActionDispatcher
from starburst.core.errors import (
    IndexOutOfRangeError,
    TransportError,
    UnauthorizedError,
    UnsupportedDeviceError,
)
from starburst.core.model import GatewayConfig
from starburst.transports.base import ProbeTransport, WakeTransport

TEMPLATES_DIR = Path(__file__).parent / "templates"
LOGGER = logging.getLogger(__name__)


def create_app(
    config: GatewayConfig,
    *,
    probe_transport: ProbeTransport | None = None,
    wake_transport: WakeTransport | None = None,
    verbose: bool = False,
) -> FastAPI:
    dispatcher = ActionDispatcher(
        config,
        probe_transport=probe_transport,
        wake_transport=wake_transport,
    )
    templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

    app = FastAPI(
        title=config.name or "Starburst",
        version=__version__,
        docs_url=None,
        redoc_url=None,
    )

    if verbose:
        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            response = await call_next(request)
            LOGGER.info("%s %s - %d", request.method, request.url, response.status_code)
            return response

    @app.exception_handler(IndexOutOfRangeError)
    async def invalid_index(request: Request, exc: IndexOutOfRangeError):
        return PlainTextResponse("Invalid index", status_code=400)

    @app.exception_handler(UnauthorizedError)
    async def unauthorized(request: Request, exc: UnauthorizedError):
        return PlainTextResponse(
            "Unauthorized",
            status_code=401,
            headers={"WWW-Authenticate": exc.challenge},
        )

    @app.exception_handler(UnsupportedDeviceError)
    async def unsupported_device(request: Request, exc: UnsupportedDeviceError):
        return PlainTextResponse("Server does not support WOL", status_code=400)

    @app.exception_handler(TransportError)
    async def transport_failed(request: Request, exc: TransportError):
        return PlainTextResponse("Failed to send WOL packet", status_code=500)

    def render(request: Request, view):
        return templates.TemplateResponse(
            request,
            "index.html",
            {"name": view.name or "", "servers": view.devices},
        )

    @app.get("/")
    async def index(request: Request):
        return render(request, await dispatcher.status())

    @app.get("/wol/{index}")
    async def wake(request: Request, index: str):
        if not (index.isascii() and index.isdigit()):
            return PlainTextResponse("Invalid index", status_code=400)
        device_index = int(index)
        view = await dispatcher.wake(device_index, request.headers.get("Authorization"))
        return render(request, view)

    @app.get("/api/status")
    async def status():
        view = await dispatcher.status()
        return view.to_dict()

    return app
