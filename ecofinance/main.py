"""
FastAPI application factory
"""
import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from ecofinance.config import get_settings
from ecofinance.infrastructure.db.session import check_db_connection
from ecofinance.api.routes import auth, user, transactions, categories, dashboard, reports

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SERVER_ERROR_MESSAGE = "Ошибка сервера"


class ErrorLoggingMiddleware(BaseHTTPMiddleware):
    """Catches every unhandled exception: full traceback to the log, generic 500 to the client."""

    async def dispatch(self, request, call_next):
        try:
            return await call_next(request)
        except Exception:
            tb_str = traceback.format_exc()
            logger.error(f"\n{'='*60}\nERROR on {request.method} {request.url.path}\n{tb_str}{'='*60}")
            return JSONResponse({"message": SERVER_ERROR_MESSAGE}, status_code=500)


def _first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Некорректные данные"
    msg = str(errors[0].get("msg", "Некорректные данные"))
    # pydantic prefixes messages of ValueError raised in validators
    return msg.removeprefix("Value error, ")


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        {"message": exc.detail},
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse({"message": _first_validation_message(exc)}, status_code=400)


def create_app() -> FastAPI:
    """
    Application factory - создаёт и настраивает FastAPI приложение

    Returns:
        Настроенный FastAPI app
    """
    settings = get_settings()

    app = FastAPI(
        title="EcoFinance",
        debug=settings.DEBUG,
    )

    app.add_middleware(ErrorLoggingMiddleware)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Routers
    app.include_router(auth.router)
    app.include_router(user.router)
    app.include_router(transactions.router)
    app.include_router(categories.router)
    app.include_router(dashboard.router)
    app.include_router(reports.router)

    # Health checks
    @app.get("/health", response_class=PlainTextResponse, tags=["system"])
    def health():
        """Health check endpoint"""
        return "ok"

    @app.get("/ready", response_class=PlainTextResponse, tags=["system"])
    def ready():
        """Readiness check endpoint (проверяет доступность БД)"""
        check_db_connection()
        return "ok"

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "ecofinance.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )
