import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.config import settings
from app.database import create_tables, engine
from app.error_handlers import register_error_handlers
from app.middleware import RequestLogMiddleware
from app.routers import products

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    if settings.AUTO_CREATE_TABLES:
        await create_tables()
        logger.info("Database tables ensured")
    logger.info("Product catalog API started (env=%s)", settings.APP_ENV)
    yield
    # Shutdown
    await engine.dispose()

app = FastAPI(
    title="Simple Product Listing API",
    description="Product catalog CRUD API for a small e-commerce shop",
    version=VERSION,
    lifespan=lifespan,
)

# Middleware
app.add_middleware(RequestLogMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Routers
app.include_router(products.router)

@app.get("/health")
async def health():
    return {"status": "healthy", "version": VERSION}
