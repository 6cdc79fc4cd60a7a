"""
DAZMerch Storefront - Backend API
Catalog, cart, checkout, reviews and admin back-office over Supabase
"""
import logging
import time
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables before settings are read
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.api import admin, auth, cart, checkout, orders, products, profile
from storefront.core.config import settings
from storefront.core.database import get_db_connection_with_retry, CONNECTION_TIMEOUT
from storefront.core.rate_limit import RateLimitMiddleware

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description=settings.API_DESCRIPTION,
    debug=settings.API_DEBUG,
)

ALLOWED_ORIGINS = settings.get_allowed_origins()

app.add_middleware(RateLimitMiddleware)

# CORS is added last so it wraps every response, including 429s
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials="*" not in ALLOWED_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(products.router, prefix="/api/v1/products", tags=["Products"])
app.include_router(cart.router, prefix="/api/v1/cart", tags=["Cart"])
app.include_router(checkout.router, prefix="/api/v1/checkout", tags=["Checkout"])
app.include_router(orders.router, prefix="/api/v1/orders", tags=["Orders"])
app.include_router(profile.router, prefix="/api/v1/profile", tags=["Profile"])
app.include_router(admin.router, prefix="/api/v1/admin", tags=["Admin"])
app.include_router(auth.router)


@app.get("/")
async def root():
    """Root endpoint - API status banner"""
    return {
        "message": "DAZMerch API - Storefront",
        "status": "online",
        "version": settings.API_VERSION,
    }


@app.get("/health")
async def health():
    """Health check endpoint for monitoring - tests database connectivity"""
    start_time = time.time()

    db_status = "unknown"
    db_latency_ms = None
    db_error = None

    try:
        # Minimal retry, this has to answer fast
        conn = get_db_connection_with_retry(max_retries=1, retry_delay=0.5)
        cursor = conn.cursor()

        db_start = time.time()
        cursor.execute("SELECT 1")
        cursor.fetchone()
        db_latency_ms = round((time.time() - db_start) * 1000, 2)

        cursor.close()
        conn.close()
        db_status = "connected"
    except Exception as e:
        logger.warning(f"Health check database failure: {e}")
        db_status = "disconnected"
        db_error = str(e)

    total_latency_ms = round((time.time() - start_time) * 1000, 2)

    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "service": "dazmerch-api",
        "version": settings.API_VERSION,
        "database": {
            "status": db_status,
            "latency_ms": db_latency_ms,
            "error": db_error,
            "connection_timeout_s": CONNECTION_TIMEOUT
        },
        "total_latency_ms": total_latency_ms
    }


@app.get("/api/v1/status")
async def api_status():
    """Which managed services are configured"""
    return {
        "supabase": {
            "connected": bool(settings.SUPABASE_URL),
            "status": "configured" if settings.SUPABASE_URL else "not_configured",
            "auth_tokens": "configured" if settings.SUPABASE_JWT_SECRET else "not_configured",
        },
        "database": {
            "status": "configured" if settings.DATABASE_URL else "not_configured",
        },
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("storefront.main:app", host=settings.API_HOST, port=settings.API_PORT)
