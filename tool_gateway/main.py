import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

import httpx
import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import get_settings
from .logging import setup_logging
from .middleware import AccessLogMiddleware, SecurityHeadersMiddleware
from .auth import validate_auth_settings
from .auth.exceptions import AuthError, MissingCredentialError
from .registry import load_tool_registry
from .gateway import router as gateway_router
from .gateway.exceptions import (
    UnknownToolError,
    PayloadTooLargeError,
    ClientDisconnectedError,
)
from .openapi import router as openapi_router

settings = get_settings()
setup_logging(settings.LOG_LEVEL, json_output=settings.LOG_JSON)
logger = structlog.get_logger("gateway")

_PROCESS_STARTED = time.monotonic()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: both the secret and the tool config are required to serve traffic
    current = get_settings()
    validate_auth_settings(current)
    app.state.registry = load_tool_registry(current.TOOLS_CONFIG_PATH)
    logger.info("registry_loaded", tool_count=len(app.state.registry), path=current.TOOLS_CONFIG_PATH)

    # Per-request timeouts are applied by the dispatcher
    app.state.http_client = httpx.AsyncClient(timeout=None)

    yield

    await app.state.http_client.aclose()

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    lifespan=lifespan,
    debug=settings.DEBUG,
    # The API description is synthesized from the tool registry instead
    openapi_url=None,
    docs_url=None,
    redoc_url=None,
)

app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in settings.CORS_ALLOW_ORIGINS.split(",") if origin.strip()],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(AccessLogMiddleware, debug=settings.DEBUG_GATEWAY)


def _error_response(status_code: int, code: str, detail: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": code, "detail": detail})


# Global exception handlers
@app.exception_handler(MissingCredentialError)
async def missing_credential_handler(request: Request, exc: MissingCredentialError):
    return _error_response(401, exc.code, exc.message)

@app.exception_handler(AuthError)
async def auth_error_handler(request: Request, exc: AuthError):
    return _error_response(403, exc.code, exc.message)

@app.exception_handler(UnknownToolError)
async def unknown_tool_handler(request: Request, exc: UnknownToolError):
    return _error_response(404, exc.code, exc.message)

@app.exception_handler(PayloadTooLargeError)
async def payload_too_large_handler(request: Request, exc: PayloadTooLargeError):
    return _error_response(413, exc.code, exc.message)

@app.exception_handler(ClientDisconnectedError)
async def client_disconnected_handler(request: Request, exc: ClientDisconnectedError):
    return _error_response(499, exc.code, exc.message)

@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("gateway_error", path=request.url.path)
    return _error_response(500, "INTERNAL_ERROR", "Internal gateway error")


@app.get("/health")
async def health_check():
    return {
        "status": "ok",
        "uptime": round(time.monotonic() - _PROCESS_STARTED, 3),
        "version": settings.APP_VERSION,
        "time": datetime.now(timezone.utc).isoformat(),
    }

# Include routers
app.include_router(gateway_router)
app.include_router(openapi_router)


def serve() -> None:
    """Run the gateway with uvicorn, over TLS when certificates are available."""
    ssl_options = {}
    key_path, cert_path = settings.SSL_KEY_PATH, settings.SSL_CERT_PATH
    if key_path and cert_path and Path(key_path).is_file() and Path(cert_path).is_file():
        ssl_options = {"ssl_keyfile": key_path, "ssl_certfile": cert_path}
    else:
        logger.warning("ssl_disabled", reason="certificates not found, serving plain HTTP")

    scheme = "https" if ssl_options else "http"
    logger.info("gateway_listening", url=f"{scheme}://{settings.HOST}:{settings.PORT}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None, **ssl_options)
