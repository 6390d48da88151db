from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError

from ledger.api.middleware.error_handler import (
    handle_generic_error,
    handle_integrity_error,
    handle_transaction_import_error,
    handle_validation_error,
)
from ledger.api.middleware.logging import RequestLoggingMiddleware
from ledger.api.v1 import router as v1_router
from ledger.api.v1.health import router as health_router
from ledger.config import settings
from ledger.core.exceptions import TransactionImportError
from ledger.core.logging import setup_logging
from ledger.db.session import async_engine


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level, json_logs=settings.log_json)
    yield
    await async_engine.dispose()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Ledger API",
        description="CSV transaction import and balance",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(RequestLoggingMiddleware)

    # Register exception handlers (most specific first)
    app.add_exception_handler(TransactionImportError, handle_transaction_import_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(IntegrityError, handle_integrity_error)
    app.add_exception_handler(Exception, handle_generic_error)

    app.include_router(health_router)
    app.include_router(v1_router)

    return app


app = create_app()
