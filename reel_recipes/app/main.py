# reel_recipes/app/main.py
from __future__ import annotations

import logging
import sys

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from reel_recipes import __version__
from reel_recipes.app.config import get_settings
from reel_recipes.app.routers.recipes import router as recipes_router
from reel_recipes.services.errors import (
    ExtractionError,
    PipelineTimeoutError,
    RateLimitedError,
    RecipeNotFoundError,
    ServiceError,
    StorageError,
    UnknownError,
    ValidationError,
)

log = logging.getLogger("app")

CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]

# Most specific class first
ERROR_STATUS_CODES: list[tuple[type[ServiceError], int]] = [
    (ValidationError, 400),
    (RecipeNotFoundError, 404),
    (RateLimitedError, 429),
    (ExtractionError, 502),
    (StorageError, 502),
    (PipelineTimeoutError, 504),
    (UnknownError, 500),
]


def status_code_for(error: ServiceError) -> int:
    for error_type, status_code in ERROR_STATUS_CODES:
        if isinstance(error, error_type):
            return status_code
    return 500


def configure_logging(level: str = "INFO") -> None:
    # Plain stdout logging, good for dev and containers
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


app = FastAPI(title="Reel Recipes API", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=CORS_ALLOW_HEADERS,
)

app.include_router(recipes_router)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    return JSONResponse(
        status_code=status_code_for(exc),
        content={"error": exc.public_message},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    log.info("request.invalid path=%s errors=%s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": "Invalid request"})


@app.on_event("startup")
async def startup() -> None:
    # Fails fast with ConfigurationError instead of on the first request
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    log.info("startup env=%s store=%s model=%s", settings.APP_ENV, settings.RECIPE_STORE, settings.GEMINI_MODEL)


@app.get("/health")
def health():
    return {"ok": True}
