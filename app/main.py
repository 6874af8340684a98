"""
Точка входа FastAPI.

lifespan: открыть папку контента (DATA_DIR) при старте, отпустить при остановке.
Порядок middleware: rate limit на запись, затем CORS.
Все ошибки отдаются как ErrorResponse: HTTPException, 422 от битого тела запроса,
ContentStoreError (диск), всё остальное — 500.
Роутеры: health, content (/api/data/*), uploads (резюме), settings (GitHub токен).
"""
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.content_store import ContentStoreError, close_content_store, open_content_store
from app.middleware.rate_limit import RateLimitMiddleware
from app.routers import content, health, settings as settings_router, uploads
from app.schemas.common import ErrorResponse, SuccessResponse

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting up: content in %s, assets in %s", settings.DATA_DIR, settings.PUBLIC_DIR)
    open_content_store()
    yield
    logger.info("Shutting down: releasing content store")
    close_content_store()


app = FastAPI(
    title="Portfolio Content API",
    description="Контент портфолио в JSON-файлах: чтение/запись по доменам, резюме, GitHub токен.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
# Добавлен последним — срабатывает первым, до CORS
app.add_middleware(RateLimitMiddleware)


def _error(status_code: int, error: str, message: str) -> JSONResponse:
    body = ErrorResponse(error=error, message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception on %s: %s", request.url.path, exc)
    return _error(500, "internal_server_error", "An unexpected error occurred")


@app.exception_handler(ContentStoreError)
async def storage_exception_handler(request: Request, exc: ContentStoreError):
    # Роутеры сами ловят ошибки записи; сюда попадает то, что они пропустили
    logger.error("Storage error on %s: %s", request.url.path, exc)
    return _error(500, "storage_error", str(exc))


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    detail = exc.detail
    if isinstance(detail, dict) and "error" in detail and "message" in detail:
        return _error(exc.status_code, detail["error"], detail["message"])
    return _error(exc.status_code, "request_failed", str(detail) if detail else "Request failed")


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Битое тело запроса: первые три ошибки вида "body.skills: Input should be a valid list"."""
    parts = [
        f"{'.'.join(str(p) for p in e.get('loc', ()))}: {e.get('msg', '')}"
        for e in exc.errors()[:3]
    ]
    return _error(422, "validation_error", "; ".join(parts) or "Validation failed")


@app.get("/", response_model=SuccessResponse[dict])
def root():
    return SuccessResponse(data={"message": "Portfolio Content API", "docs": "/docs", "health": "/health"})


app.include_router(health.router)
app.include_router(content.router)
app.include_router(uploads.router)
app.include_router(settings_router.router)


def run() -> None:
    """Запуск сервера: portfolio-content или python -m app.main."""
    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
