from __future__ import annotations

import re
import uuid
from contextlib import asynccontextmanager

import anyio
import requests
import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError, field_validator
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from vegmenu.core.config import settings
from vegmenu.core.errors import ExternalAPIError
from vegmenu.core.logging import configure_logging, request_id_ctx
from vegmenu.core.sentry import init_sentry
from vegmenu.pipeline import (
    ClassifyResponse,
    MenuItem,
    MenuProcessingResult,
    classify_menu_items,
    process_menu_text,
)
from vegmenu.rag import qdrant_repo
from vegmenu.rag.knowledge_base import IngredientKnowledgeBase

configure_logging(settings.log_level)
logger = structlog.get_logger(__name__)

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_sentry()
    if getattr(app.state, "knowledge_base", None) is None:
        app.state.knowledge_base = IngredientKnowledgeBase()
    if not settings.openai_api_key:
        logger.warning("openai_api_key_missing")
    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)
limiter = Limiter(key_func=get_remote_address)
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)


def sanitize_menu_text(value: str, max_length: int) -> str:
    """Drop control characters other than newlines/tabs and enforce a size limit."""
    cleaned = _CONTROL_CHARS.sub("", value).replace("\r\n", "\n")
    if len(cleaned) > max_length:
        raise ValueError(f"text too long (max {max_length} characters)")
    return cleaned


class MenuTextRequest(BaseModel):
    text: str
    request_id: str | None = Field(default=None, max_length=128)

    @field_validator("text")
    @classmethod
    def validate_text(cls, value: str) -> str:
        return sanitize_menu_text(value, max_length=settings.max_text_length)


class ClassifyRequest(BaseModel):
    items: list[MenuItem]
    request_id: str = Field(..., min_length=1, max_length=128)

    @field_validator("items")
    @classmethod
    def validate_items(cls, value: list[MenuItem]) -> list[MenuItem]:
        if len(value) > settings.max_items_per_request:
            raise ValueError(
                f"too many items (max {settings.max_items_per_request})"
            )
        return value


def _knowledge_base(request: Request) -> IngredientKnowledgeBase | None:
    return getattr(request.app.state, "knowledge_base", None)


@app.middleware("http")
async def add_request_context(request: Request, call_next):
    request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
    request.state.request_id = request_id
    token = request_id_ctx.set(request_id)
    try:
        response = await call_next(request)
    finally:
        request_id_ctx.reset(token)
    response.headers["x-request-id"] = request_id
    return response


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.warning("request_validation_failed", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(exc.errors())})


@app.exception_handler(ValidationError)
async def pydantic_validation_handler(request: Request, exc: ValidationError):
    logger.warning("pydantic_validation_failed", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(exc.errors())})


@app.exception_handler(ExternalAPIError)
async def external_api_handler(request: Request, exc: ExternalAPIError):
    logger.warning(
        "external_api_failed",
        path=request.url.path,
        service=exc.service,
        status_code=exc.status_code,
    )
    return JSONResponse(
        status_code=503,
        content={"detail": f"Upstream {exc.service} error"},
    )


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    logger.warning("rate_limit_exceeded", path=request.url.path)
    return JSONResponse(
        status_code=429,
        content={"detail": "Rate limit exceeded. Please slow down."},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("unhandled_exception", path=request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/menu/text", response_model=MenuProcessingResult, response_model_exclude_none=True)
@limiter.limit(settings.api_rate_limit)
async def process_menu(request: Request, payload: MenuTextRequest) -> MenuProcessingResult:
    request_id = payload.request_id or request.state.request_id
    return await process_menu_text(
        payload.text,
        request_id,
        knowledge_base=_knowledge_base(request),
    )


@app.post("/classify", response_model=ClassifyResponse, response_model_exclude_none=True)
@limiter.limit(settings.api_rate_limit)
async def classify(request: Request, payload: ClassifyRequest) -> ClassifyResponse:
    return await classify_menu_items(
        payload.items,
        payload.request_id,
        knowledge_base=_knowledge_base(request),
    )


@app.get("/ready")
async def ready() -> JSONResponse:
    checks: dict[str, dict[str, str]] = {}
    status_code = 200

    def set_failure(name: str, error: Exception) -> None:
        nonlocal status_code
        checks[name] = {"status": "error", "error": str(error)}
        status_code = 503

    async def run_check(name: str, func) -> None:
        try:
            with anyio.fail_after(1.5):
                await anyio.to_thread.run_sync(func)
            checks[name] = {"status": "ok"}
        except Exception as exc:  # noqa: BLE001 - narrow errors not needed for health
            set_failure(name, exc)

    def check_qdrant() -> None:
        if not qdrant_repo.collection_exists(settings.ingredient_collection):
            raise RuntimeError(f"collection {settings.ingredient_collection} missing")

    def check_openai() -> None:
        if not settings.openai_api_key:
            raise RuntimeError("openai_api_key missing")
        response = requests.get(
            "https://api.openai.com/v1/models",
            headers={"Authorization": f"Bearer {settings.openai_api_key}"},
            timeout=1.5,
        )
        response.raise_for_status()

    await run_check("qdrant", check_qdrant)
    await run_check("openai", check_openai)

    overall = "ok" if status_code == 200 else "error"
    return JSONResponse(status_code=status_code, content={"status": overall, "checks": checks})


@app.post("/knowledge-base/reset")
@limiter.limit(settings.api_rate_limit)
async def reset_knowledge_base(request: Request) -> dict[str, str]:
    """Forget a cached initialization result so the next request probes again."""
    knowledge_base = _knowledge_base(request)
    if knowledge_base is None:
        return {"state": "missing"}
    knowledge_base.reset()
    logger.info("knowledge_base_reset", collection=knowledge_base.collection)
    return {"state": knowledge_base.state.value}
