"""Chat Completion Proxy - Main FastAPI application."""

import json
from contextlib import asynccontextmanager
from typing import Optional

import httpx
import uvicorn
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .config import Settings, get_settings
from .converters import convert_request, convert_response
from .errors import error_response
from .logger import SanitizingLogger, create_sanitized_logger, normalize_level
from .models.chat import ClientResponse
from .upstream import UpstreamClient
from .utils import (
    extract_proxy_auth_key,
    generate_request_id,
    get_current_timestamp,
    validate_api_key,
)
from .validation import validate_chat_request

router = APIRouter()


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_logger(request: Request) -> SanitizingLogger:
    return request.app.state.logger


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client


async def verify_api_key(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    logger: SanitizingLogger = Depends(get_logger),
) -> None:
    """Reject callers without the configured proxy api-key, if one is set."""
    if not settings.auth_key:
        return

    client_key = extract_proxy_auth_key(request.headers)
    if not validate_api_key(client_key, settings.auth_key):
        logger.warning("Invalid proxy authentication key provided by client")
        raise HTTPException(status_code=401, detail="Unauthorized: Invalid API key")


@router.post(
    "/chat/completions",
    tags=["Chat"],
    summary="Create a chat completion",
    responses={
        200: {"model": ClientResponse, "description": "Successful chat completion"},
        400: {"description": "Bad request - validation error"},
        401: {"description": "Unauthorized - invalid or missing API key"},
        500: {"description": "Internal server error"},
    },
    dependencies=[Depends(verify_api_key)],
)
async def chat_completion(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    logger: SanitizingLogger = Depends(get_logger),
    http_client: httpx.AsyncClient = Depends(get_http_client),
):
    """Validate a chat completion request and proxy it upstream."""
    request_id = generate_request_id()

    try:
        body = await request.json()
    except ValueError:
        logger.info(f"Request {request_id}: body is not valid JSON")
        return JSONResponse(status_code=400, content={"error": "Request body must be valid JSON"})

    logger.info(f"Received request payload: {json.dumps(body)}")

    validated = validate_chat_request(body)
    if validated.is_err():
        logger.info(f"Validation error: {validated.error.message}")
        return error_response(validated.error)

    upstream_request = convert_request(validated.value)
    logger.info(f"Outbound request payload: {json.dumps(upstream_request.to_payload())}")

    if await request.is_disconnected():
        raise HTTPException(status_code=499, detail="Client disconnected")

    async with UpstreamClient(
        api_key=settings.hugging_face_api_key,
        url=settings.upstream_url,
        timeout=settings.request_timeout,
        client=http_client,
        logger=logger,
    ) as upstream:
        result = await upstream.complete(upstream_request, request_id)

    if result.is_err():
        failure = json.dumps(result.error.as_log_dict(), default=str)
        logger.error(f"Received response payload (failure): {failure}")
        return error_response(result.error)

    logger.info(f"Received response payload (success): {json.dumps(result.value)}")
    return JSONResponse(status_code=200, content=convert_response(result.value).to_payload())


@router.get("/health")
async def health_check(settings: Settings = Depends(get_app_settings)):
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": get_current_timestamp(),
        "version": __version__,
        "config": {
            "upstream_api_configured": bool(settings.hugging_face_api_key),
            "api_key_validation": bool(settings.auth_key),
            "use_third_party_router": settings.use_third_party_router,
        },
    }


@router.get("/")
async def root(settings: Settings = Depends(get_app_settings)):
    """Root endpoint with API information."""
    return {
        "message": f"Chat Completion Proxy v{__version__}",
        "status": "running",
        "config": {
            "upstream_url": settings.upstream_url,
            "api_key_configured": bool(settings.hugging_face_api_key),
            "api_key_validation": bool(settings.auth_key),
        },
        "endpoints": {
            "chat_completions": "/chat/completions",
            "health": "/health",
            "docs": "/api-docs",
        },
    }


def create_app(
    settings: Optional[Settings] = None,
    logger: Optional[SanitizingLogger] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """Build the application.

    The shared HTTP client, injected or not, is closed on shutdown. A logger
    is only closed when it was built here; an injected one stays open for
    its owner.
    """
    settings = settings or get_settings()
    owns_logger = logger is None
    if owns_logger:
        logger = create_sanitized_logger(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        app.state.http_client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(settings.request_timeout)
        )
        logger.info("Chat Completion Proxy starting up...")
        logger.info(f"   Server: {settings.host}:{settings.port}")
        logger.info(f"   Target API: {settings.upstream_url}")
        logger.info(f"   Third-party router: {'Enabled' if settings.use_third_party_router else 'Disabled'}")
        logger.info(f"   API Key Validation: {'Enabled' if settings.auth_key else 'Disabled'}")
        yield
        await app.state.http_client.aclose()
        logger.info("Chat Completion Proxy shutting down...")
        if owns_logger:
            logger.close()

    app = FastAPI(
        title="Chat Completion Proxy",
        description="API proxy for Hugging Face chat completions with security and validation",
        version=__version__,
        docs_url="/api-docs",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.logger = logger

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.url.path}: {exc!r}")
        return JSONResponse(
            status_code=500,
            content={"error": {"status": 500, "message": "Internal server error"}},
        )

    app.include_router(router)
    return app


def main():
    """Main entry point for simple testing and development."""
    settings = get_settings()
    print("Starting Chat Completion Proxy...")
    print(f"Server will start at http://{settings.host}:{settings.port}")
    print("For production use: uvicorn chat_proxy.main:create_app --factory --host 0.0.0.0 --port 3000")
    print()

    uvicorn.run(
        "chat_proxy.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=normalize_level(settings.log_level),
        reload=False,
    )


if __name__ == "__main__":
    main()
