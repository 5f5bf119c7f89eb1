from __future__ import annotations

import os
from uuid import uuid4

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from modelgate.core.config.settings import GatewaySettings
from modelgate.core.http.client import close_http_client
from modelgate.core.logging import configure_logging
from modelgate.core.logging.context import log_context
from modelgate.core.routing.catalog import catalog_names

from .deps import get_settings
from .routes_generate import router as generate_router

app = FastAPI(title="modelgate")
configure_logging()

app.include_router(generate_router, tags=["generate"])


@app.exception_handler(RequestValidationError)
async def invalid_inputs_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"message": "Invalid Inputs!!"})


@app.middleware("http")
async def request_context_middleware(request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid4())
    with log_context(request_id=request_id, route=request.url.path):
        response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


@app.on_event("shutdown")
def shutdown() -> None:
    close_http_client()


@app.get("/healthz")
def healthz(settings: GatewaySettings = Depends(get_settings)) -> dict[str, object]:
    credentials = settings.credentials_present()
    return {
        "ok": credentials["gemini"],
        "credentials": credentials,
        "catalog": catalog_names(settings.catalog),
    }


def run() -> None:
    uvicorn.run(
        "modelgate.apps.api.main:app",
        host=os.getenv("MODELGATE_HOST", "127.0.0.1"),
        port=int(os.getenv("MODELGATE_PORT", "8000")),
    )
