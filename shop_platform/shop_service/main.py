"""
Shop service - users, products, orders and placements over HTTP
"""
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from .config import settings
from .db import dispose_db, init_db
from .error_handlers import register_error_handlers
from .routes import health, orders, products, tokens, users
from .utils.logging_setup import configure_logging
from .utils.mailer import Mailer

configure_logging(settings.LOG_LEVEL, settings.LOG_DIR)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the database and the mailer on startup, release them on shutdown"""
    try:
        init_db()
    except SQLAlchemyError as e:
        logger.critical("Cannot establish database connection: %s", e)
        raise SystemExit(1) from e

    app.state.mailer = Mailer(sender=settings.MAIL_SENDER)
    logger.info("Shop service started")
    try:
        yield
    finally:
        app.state.mailer.close()
        dispose_db()


app = FastAPI(
    title="Shop Service",
    description="Users, products and orders with stock-aware placements",
    version="1.0.0",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Include routers
app.include_router(health.router)
app.include_router(tokens.router)
app.include_router(users.router)
app.include_router(products.router)
app.include_router(orders.router)


@app.get("/")
def root():
    """Root endpoint"""
    return {
        "service": "Shop Service",
        "version": "1.0.0",
        "status": "running"
    }
