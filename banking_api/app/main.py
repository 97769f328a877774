import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .api.exceptions import register_exception_handlers
from .api.routes import router as accounts_router, transaction_router
from .core.config import get_settings
from .core.db import init_db

settings = get_settings()
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info(
        "app.startup",
        extra={
            "transfer_max_attempts": settings.transfer_max_attempts,
            "transfer_retry_delay_ms": settings.transfer_retry_delay_ms,
            "default_starting_balance": str(settings.default_starting_balance),
        },
    )
    yield

app = FastAPI(
    title=settings.app_name,
    description="Accounts and money transfers under optimistic concurrency control.",
    lifespan=lifespan,
)

app.include_router(accounts_router)
app.include_router(transaction_router)
register_exception_handlers(app)

@app.get("/health")
def read_health() -> dict[str, str]:
    return {"status": "ok"}
