import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from prospectflow.core.config import APP_NAME, APP_VERSION, CORS_ORIGINS, DATABASE_URL, LOG_LEVEL, RUN_MIGRATIONS
from prospectflow.core.logging_config import setup_logging

# ✅ Import All API Routes
from prospectflow.api.routes import (
    auth,
    companies,
    contacts,
    job_openings,
    settings,
    blog,
    billing,
    ai,
    health,
)

setup_logging(LOG_LEVEL)
logger = logging.getLogger(__name__)


# ============================================
# ✅ FASTAPI APP INIT
# ============================================

app = FastAPI(title=APP_NAME, version=APP_VERSION)

# ✅ CORS - only the configured frontend origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Authorization", "Content-Type"],
)


# ============================================
# ✅ REGISTER ALL ROUTERS
# ============================================

app.include_router(auth.router)
app.include_router(companies.router)
app.include_router(contacts.router)
app.include_router(job_openings.router)
app.include_router(settings.router)
app.include_router(blog.router)
app.include_router(billing.router)
app.include_router(ai.router)
app.include_router(health.router)


# ============================================
# ✅ STARTUP
# ============================================

@app.on_event("startup")
def on_startup():
    if RUN_MIGRATIONS:
        from prospectflow.db.migrate import run_migrations
        run_migrations()
    elif DATABASE_URL.startswith("sqlite"):
        # Local dev without Alembic
        from prospectflow.db.init_db import init_db
        init_db()
    logger.info(f"{APP_NAME} {APP_VERSION} started")


# ============================================
# ✅ HEALTH CHECK ROOT ENDPOINT
# ============================================

@app.get("/")
def root():
    return {"status": "ProspectFlow API running"}
