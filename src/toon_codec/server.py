"""FastAPI service exposing the TOON codec over HTTP."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from pydantic import BaseModel, Field

from toon_codec.decoder import decode
from toon_codec.encoder import encode
from toon_codec.errors import FormatError, NestingDepthError, ToonError
from toon_codec.estimator import compare
from toon_codec.logging import bind_context, clear_context, configure_logging, get_logger
from toon_codec.models import EncodeOptions, SizeComparison
from toon_codec.settings import settings
from toon_codec.transformer import JSON_CONTENT_TYPE, TOON_CONTENT_TYPE, to_json

logger = get_logger(__name__)


# ============================================================================
# Request/Response Models
# ============================================================================


class EncodeRequest(BaseModel):
    """Request body for encoding a value."""

    value: Any = None
    indent: int | None = Field(default=None, ge=1)
    include_size_banner: bool | None = None


class CompareRequest(BaseModel):
    """Request body for comparing JSON and TOON sizes."""

    value: Any = None


class HealthResponse(BaseModel):
    """Response body for health check."""

    status: str
    version: str
    max_depth: int


# ============================================================================
# Application Lifespan
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    configure_logging(json_output=settings.json_logs, log_level=settings.log_level)
    logger.info("toon-codec service started", host=settings.host, port=settings.port)
    yield
    logger.info("toon-codec service shutdown complete")


# ============================================================================
# FastAPI Application
# ============================================================================

app = FastAPI(
    title="toon-codec",
    description="Convert JSON to and from TOON (Token-Oriented Object Notation)",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def bind_request_context(request: Request, call_next):
    """Attach the request path to every log event of the request."""
    clear_context()
    bind_context(path=request.url.path, method=request.method)
    return await call_next(request)


@app.exception_handler(ToonError)
async def toon_error_handler(request: Request, exc: ToonError) -> JSONResponse:
    """Report codec failures as 422 with the offending line when known."""
    line = exc.line if isinstance(exc, (FormatError, NestingDepthError)) else None
    logger.warning(
        "TOON conversion failed",
        error=str(exc),
        error_type=type(exc).__name__,
    )
    return JSONResponse(
        status_code=422,
        content={"detail": str(exc), "error_type": type(exc).__name__, "line": line},
    )


# ============================================================================
# Endpoints
# ============================================================================


@app.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Health check endpoint."""
    from toon_codec import __version__

    return HealthResponse(status="ok", version=__version__, max_depth=settings.max_depth)


@app.post("/encode", response_class=PlainTextResponse)
async def encode_value(body: EncodeRequest) -> PlainTextResponse:
    """Encode a JSON value into TOON text."""
    options = EncodeOptions(
        indent=body.indent or settings.indent,
        include_size_banner=(
            settings.include_size_banner
            if body.include_size_banner is None
            else body.include_size_banner
        ),
        max_depth=settings.max_depth,
    )
    text = encode(body.value, options)
    return PlainTextResponse(text, media_type=TOON_CONTENT_TYPE)


@app.post("/decode")
async def decode_text(request: Request) -> Response:
    """Decode a TOON request body into a JSON value."""
    raw = await request.body()
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise FormatError("Request body is not valid UTF-8") from e
    value = decode(text, settings.decode_options)
    return Response(to_json(value), media_type=JSON_CONTENT_TYPE)


@app.post("/compare", response_model=SizeComparison)
async def compare_value(body: CompareRequest) -> SizeComparison:
    """Compare estimated token counts of generic JSON and TOON."""
    return compare(body.value, settings.encode_options)
