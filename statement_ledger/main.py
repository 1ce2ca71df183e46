"""
Statement Ledger — FastAPI Application.

This is the entry point for the application.
All routers are registered here.
"""

from fastapi import FastAPI

from statement_ledger.config import get_settings
from statement_ledger.logging_config import setup_logging
from statement_ledger.api.health import router as health_router
from statement_ledger.api.statements import router as statements_router

settings = get_settings()
setup_logging(settings.LOG_LEVEL)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Deposits, withdrawals and transfers with derived balances",
)

# Register routers
app.include_router(health_router)
app.include_router(statements_router)
