# backend/main.py
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

load_dotenv()

from config import settings
from database import dispose_engine, init_db
from utils.errors import setup_error_handlers

# Routers
from routes.auth import router as auth_router
from routes.users import router as users_router
from routes.products import router as products_router
from routes.cart import router as cart_router
from routes.orders import router as orders_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("caffinity")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Schema is created idempotently, the pool lives until shutdown
    init_db()
    logger.info("Database ready")
    yield
    dispose_engine()


app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION, lifespan=lifespan)

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_error_handlers(app)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info("%s %s", request.method, request.url.path)
    return await call_next(request)


# Router registration
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(products_router)
app.include_router(cart_router)
app.include_router(orders_router)


@app.get("/api/health")
def health():
    return {
        "success": True,
        "status": "OK",
        "message": "Caffinity API is running",
        "version": settings.APP_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/")
def read_root():
    return {
        "success": True,
        "message": "Welcome to Caffinity Coffee Shop API",
        "version": settings.APP_VERSION,
        "endpoints": {
            "auth": [
                "POST /api/auth/register",
                "POST /api/auth/login",
                "GET /api/auth/profile (requires auth)",
                "PUT /api/auth/profile (requires auth)",
            ],
            "products": ["GET /api/products", "GET /api/products/flash-sale", "GET /api/products/:id"],
            "users": [
                "GET /api/users",
                "GET /api/users/:id",
                "PUT /api/users/:id (requires auth)",
                "GET /api/users/profile (requires auth)",
                "GET /api/users/debug/db-check",
            ],
            "cart": [
                "GET /api/cart/user/:user_id",
                "POST /api/cart",
                "PUT /api/cart/:id",
                "DELETE /api/cart/:id",
                "DELETE /api/cart/clear/:user_id",
                "GET /api/cart/summary/:user_id",
            ],
            "orders": [
                "POST /api/orders",
                "GET /api/orders",
                "GET /api/orders/:id",
                "PUT /api/orders/:id/confirm",
            ],
            "debug": ["GET /api/health"],
        },
        "documentation": "Check /api/health for service status",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT)
