import os
import sys
import time
import logging
from typing import Any, Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel
from prometheus_client import (
    Counter,
    Histogram,
    CollectorRegistry,
    generate_latest,
    CONTENT_TYPE_LATEST,
)

CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
REPO_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, ".."))
sys.path.insert(0, REPO_ROOT)

from api.openrouter import BlueprintServiceError, generate_blueprint
from blueprint.render import render_svg
from blueprint.schema import InvalidBlueprintError, parse_blueprint

# Real environment wins over .env values
load_dotenv(".env")
load_dotenv(os.path.join("backend", ".env"))

logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger("blueprint_api")

DEFAULT_CORS_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:5174",
    "http://127.0.0.1:5174",
]
CORS_ORIGINS = [
    o.strip() for o in os.environ.get("CORS_ORIGINS", "").split(",") if o.strip()
] or DEFAULT_CORS_ORIGINS

SVG_MEDIA_TYPE = "image/svg+xml"


# Prometheus metrics
PROM_REGISTRY = CollectorRegistry()
REQUEST_COUNT = Counter(
    "request_total", "Total HTTP requests", ["method", "endpoint", "http_status"],
    registry=PROM_REGISTRY,
)
REQUEST_LATENCY = Histogram(
    "request_latency_seconds", "Latency of HTTP requests", ["endpoint"],
    registry=PROM_REGISTRY,
)
ERROR_COUNT = Counter(
    "request_errors_total", "Total HTTP errors",
    registry=PROM_REGISTRY,
)
RENDER_COUNT = Counter(
    "blueprint_renders_total", "Blueprints rendered to SVG", ["outcome"],
    registry=PROM_REGISTRY,
)


class Metadata(BaseModel):
    processing_time: float


class PromptRequest(BaseModel):
    prompt: str = ""


class ErrorResponse(BaseModel):
    code: str
    message: str
    details: Optional[Any] = None
    metadata: Metadata


app = FastAPI(title="Blueprint Renderer API", version="1.0.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Origin", "Content-Type", "Authorization"],
    expose_headers=["Content-Length"],
    max_age=12 * 60 * 60,
)


@app.middleware("http")
async def metrics_middleware(request: Request, call_next):
    start_time = time.perf_counter()
    request.state.start_time = start_time
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
    except Exception as exc:
        ERROR_COUNT.inc()
        logger.exception("Unhandled exception during request: %s", exc)
        raise
    finally:
        duration = time.perf_counter() - start_time
        endpoint = request.url.path
        REQUEST_COUNT.labels(request.method, endpoint, status_code).inc()
        REQUEST_LATENCY.labels(endpoint).observe(duration)
        logger.info(
            "%s %s -> %s in %.3fs",
            request.method,
            endpoint,
            status_code,
            duration,
        )
    return response


def _processing_time(request: Request) -> float:
    return time.perf_counter() - getattr(
        request.state, "start_time", time.perf_counter()
    )


def _error_details(errors):
    # raw inputs may hold non-JSON values such as inf
    return [{k: v for k, v in err.items() if k not in ("input", "ctx")} for err in errors]


def _error_response(request: Request, status_code: int, content: dict) -> JSONResponse:
    content["metadata"] = {"processing_time": _processing_time(request)}
    return JSONResponse(status_code=status_code, content=content)


@app.get("/health")
def health():
    return {"ok": True}


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    logger.warning("HTTPException %s: %s", exc.status_code, exc.detail)
    detail = exc.detail
    if isinstance(detail, dict):
        content = dict(detail)
    else:
        content = {"code": "error", "message": str(detail)}
    return _error_response(request, exc.status_code, content)


@app.exception_handler(BlueprintServiceError)
async def service_exception_handler(request: Request, exc: BlueprintServiceError):
    logger.warning("%s (%s): %s", type(exc).__name__, exc.status_code, exc.message)
    return _error_response(
        request, exc.status_code, {"code": exc.code, "message": exc.message}
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    return _error_response(
        request, 500, {"code": "internal_error", "message": "Internal server error"}
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning("Validation error: %s", exc)
    return _error_response(
        request,
        422,
        {
            "code": "validation_error",
            "message": "Invalid request",
            "details": _error_details(exc.errors()),
        },
    )


@app.get("/metrics")
def metrics():
    return Response(generate_latest(PROM_REGISTRY), media_type=CONTENT_TYPE_LATEST)


@app.post(
    "/api/blueprint",
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
def create_blueprint(req: PromptRequest):
    return generate_blueprint(req.prompt)


@app.post(
    "/api/render",
    response_class=Response,
    responses={
        200: {"content": {SVG_MEDIA_TYPE: {}}},
        422: {"model": ErrorResponse},
    },
)
async def render(request: Request):
    body = await request.body()
    try:
        blueprint = parse_blueprint(body.decode("utf-8"))
    except (UnicodeDecodeError, InvalidBlueprintError) as e:
        RENDER_COUNT.labels("invalid").inc()
        raise HTTPException(
            status_code=422,
            detail={
                "code": "invalid_blueprint",
                "message": "Invalid blueprint JSON",
                "details": getattr(e, "errors", None) or str(e),
            },
        )
    RENDER_COUNT.labels("ok").inc()
    logger.info("Rendering blueprint with %d room(s)", len(blueprint.rooms))
    return Response(content=render_svg(blueprint), media_type=SVG_MEDIA_TYPE)


def main():
    import uvicorn

    host = os.environ.get("HOST", "0.0.0.0").strip() or "0.0.0.0"
    port = os.environ.get("PORT", "").strip().lstrip(":") or "5000"
    uvicorn.run(app, host=host, port=int(port))


if __name__ == "__main__":
    main()
