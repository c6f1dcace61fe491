"""
ERP Ledger: FastAPI application.

This is the entry point for the application.
All routers are registered here.
"""

from fastapi import FastAPI

from erp_ledger.config import get_settings
from erp_ledger.logging_config import configure_logging
from erp_ledger.api.health import router as health_router
from erp_ledger.api.accounts import router as accounts_router
from erp_ledger.api.journal import router as journal_router
from erp_ledger.api.periods import router as periods_router
from erp_ledger.api.audit import router as audit_router

settings = get_settings()
configure_logging(settings.LOG_LEVEL)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Double-entry general ledger for a multi-tenant ERP",
)

# Register routers
app.include_router(health_router)
app.include_router(accounts_router)
app.include_router(journal_router)
app.include_router(periods_router)
app.include_router(audit_router)
