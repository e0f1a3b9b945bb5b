"""
Wine Cellar API

FastAPI backend for a personal wine cellar: bottle entries, drink windows
and Wikipedia-assisted wine recognition.

Usage:
    uvicorn main:app --reload
"""

# Load environment variables from .env file FIRST
from dotenv import load_dotenv
load_dotenv()

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from cellar.config import Config

# Configure logging from environment
logging.basicConfig(
    level=getattr(logging, Config.log_level(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)
logger.info(f"Starting with LOG_LEVEL={Config.log_level()}, DEV_MODE={Config.is_dev()}")
from fastapi.middleware.cors import CORSMiddleware

from cellar.db import ensure_schema
from cellar.routes import recognize_router, wines_router

# Startup state - set to True once the service can take requests
_is_ready = False


def is_ready() -> bool:
    """Check if the service is ready to handle requests."""
    return _is_ready


def set_ready(ready: bool = True):
    """Set the service ready state."""
    global _is_ready
    _is_ready = ready


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    # Migrate the cellar database before taking traffic
    ensure_schema(Config.database_path())
    set_ready(True)
    logger.info("Service ready to handle requests")
    yield
    set_ready(False)


app = FastAPI(
    title="Wine Cellar API",
    description="Track your cellar and identify bottles",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for the web client
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",  # Local Next.js dev
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def warmup_middleware(request: Request, call_next):
    """Return 503 with retry hint if service is still warming up."""
    if request.url.path in ("/health", "/", "/docs", "/openapi.json"):
        return await call_next(request)

    if not is_ready():
        return JSONResponse(
            status_code=503,
            content={
                "error": "Service warming up",
                "message": "The server is starting up. Please retry in a few seconds.",
                "retry_after": 10,
            },
            headers={"Retry-After": "10"},
        )

    return await call_next(request)


# Include routers
app.include_router(recognize_router, tags=["recognize"])
app.include_router(wines_router, tags=["wines"])


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Wine Cellar API",
        "version": "0.1.0",
        "docs": "/docs",
    }


@app.get("/health")
async def health():
    """Health check endpoint for container probes."""
    return {"status": "healthy"}
