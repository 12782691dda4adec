"""
Customer Transaction History — FastAPI Application Entry Point

Aggregates routers, configures middleware, and initializes the database on
startup.
"""
import os
import time
from datetime import datetime

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from txn_history.config import get_settings
from txn_history.database import get_db, init_db
from txn_history.routes import customer_router
from txn_history.schemas.schemas import HealthResponse
from txn_history.services.table_source import source_factory

settings = get_settings()

# ─── Application Instance ───────────────────────────────────────────
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description=(
        "Read-only lookup of a customer's Razorpay payments, orders and refunds "
        "by email and/or phone."
    ),
    docs_url="/docs",
    redoc_url="/redoc",
)

# ─── Startup ─────────────────────────────────────────────────────────
BOOT_TIME = time.time()


@app.on_event("startup")
def on_startup():
    """Initialize database tables and log boot info."""
    if settings.DATA_SOURCE == "database":
        init_db()

    os.makedirs(settings.LOG_DIR, exist_ok=True)

    boot_msg = (
        f"\n{'='*60}\n"
        f"  {settings.APP_NAME} v{settings.APP_VERSION}\n"
        f"  TIME: {datetime.now().isoformat()}\n"
        f"  DATA SOURCE: {settings.DATA_SOURCE}\n"
        f"  DATABASE: {settings.DATABASE_URL}\n"
        f"  TABLES: {settings.PAYMENTS_TABLE}, {settings.ORDERS_TABLE}, {settings.REFUNDS_TABLE}\n"
        f"  DEBUG: {settings.DEBUG}\n"
        f"{'='*60}\n"
    )
    print(boot_msg)

    log_file = os.path.join(settings.LOG_DIR, "server.log")
    with open(log_file, "a", encoding="utf-8") as f:
        f.write(boot_msg)


# ─── Middleware ──────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every API request with timing."""
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 1)

    if request.url.path.startswith("/api"):
        print(f"  -> {request.method} {request.url.path} -> {response.status_code} ({duration}ms)")

    return response


# ─── API Routers ─────────────────────────────────────────────────────
app.include_router(customer_router)


@app.get("/health", tags=["Health"], response_model=HealthResponse)
def deep_health(db: Session = Depends(get_db)):
    """Detailed health check: database reachability and table sizes."""
    db_ok = False
    try:
        db.execute(text("SELECT 1"))
        db_ok = True
    except SQLAlchemyError:
        db_ok = False

    tables = {}
    tables_ok = True
    open_table = source_factory(settings, db)
    for name in (settings.PAYMENTS_TABLE, settings.ORDERS_TABLE, settings.REFUNDS_TABLE):
        count = open_table(name).row_count()
        tables_ok = tables_ok and count.success
        tables[name] = count.data if count.success else None

    healthy = tables_ok and (db_ok or settings.DATA_SOURCE != "database")
    return HealthResponse(
        status="healthy" if healthy else "degraded",
        database="connected" if db_ok else "disconnected",
        data_source=settings.DATA_SOURCE,
        tables=tables,
        uptime_seconds=round(time.time() - BOOT_TIME, 1),
        version=settings.APP_VERSION,
    )
