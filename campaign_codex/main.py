import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy.exc import SQLAlchemyError

from campaign_codex.api.v1.api import api_router
from campaign_codex.core.config import settings
from campaign_codex.core.exceptions import CodexError
from campaign_codex.core.logging import configure_logging
from campaign_codex.core.messages import ServerMessages
from campaign_codex.core.rate_limit import limiter
from campaign_codex.db.session import run_migrations

configure_logging()
logger = logging.getLogger(__name__)

VALUE_ERROR_PREFIX = "Value error, "

app = FastAPI(
    title=settings.PROJECT_NAME,
    docs_url=f"{settings.API_PREFIX}/docs",
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    redoc_url=None,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.API_PREFIX)


def _validation_detail(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    if first.get("type") == "missing":
        field = next((str(part) for part in reversed(first.get("loc", ())) if isinstance(part, str)), "value")
        return f"{field} is required"
    message = str(first.get("msg", "Invalid request"))
    if message.startswith(VALUE_ERROR_PREFIX):
        message = message[len(VALUE_ERROR_PREFIX):]
    return message


@app.exception_handler(CodexError)
async def codex_error_handler(request: Request, exc: CodexError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": _validation_detail(exc)})


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": ServerMessages.INTERNAL_ERROR},
    )


@app.on_event("startup")
async def on_startup() -> None:
    if settings.RUN_MIGRATIONS_ON_STARTUP:
        await run_migrations()
    logger.info("%s started", settings.PROJECT_NAME)
