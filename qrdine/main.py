import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, status

from qrdine.core.db import init_db, close_db
from qrdine.api.v1.tenants import router as tenants_router
from qrdine.api.v1.menu import router as menu_router
from qrdine.api.v1.orders import router as orders_router
from qrdine.api.v1.ratings import router as ratings_router
from qrdine.api.v1.analytics import router as analytics_router
from qrdine.core.config import LOG_FORMAT, LOG_LEVEL, PROJECT_NAME, VERSION
from qrdine.core.exception_handlers import setup_exception_handlers

logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
log = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handles startup and shutdown events."""
    log.info(f"Starting {PROJECT_NAME} v{VERSION}...")
    await init_db()
    yield
    await close_db()
    log.info(f"{PROJECT_NAME} stopped.")

app = FastAPI(
    title=PROJECT_NAME,
    version=VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.include_router(tenants_router, prefix="/api/v1/tenants", tags=["Restaurants"])
app.include_router(menu_router, prefix="/api/v1/menu", tags=["Menu Catalog"])
app.include_router(orders_router, prefix="/api/v1/orders", tags=["Order Lifecycle"])
app.include_router(ratings_router, prefix="/api/v1/ratings", tags=["Ratings"])
app.include_router(analytics_router, prefix="/api/v1/analytics", tags=["Analytics"])

setup_exception_handlers(app)


@app.get("/health", status_code=status.HTTP_200_OK)
async def health_check():
    """Simple health check endpoint."""
    return {"status": "ok", "app_name": PROJECT_NAME}
