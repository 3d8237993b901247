#!/usr/bin/env python3
"""
HazCom Compliance API - FastAPI Application

Usage:
    python -m web.backend.app

Then open:
    - http://localhost:8080/docs - API Documentation (Swagger UI)
    - http://localhost:8080/redoc - Alternative API Documentation
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from .config import get_config
from .dependencies import close_app_context
from .exceptions import register_exception_handlers
from .rate_limit import add_rate_limit_handlers
from .routers import compliance_router, scan_router, sds_router, uploads_router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Load configuration
config = get_config()


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    logger.info("Shutting down: draining SDS cache write-backs")
    close_app_context()


# Create FastAPI app
app = FastAPI(
    title="HazCom Compliance API",
    description="SDS lookup, SDS uploads and OSHA HazCom compliance scoring",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

add_rate_limit_handlers(app)
register_exception_handlers(app)

# Include routers
app.include_router(sds_router)
app.include_router(uploads_router)
app.include_router(compliance_router)
app.include_router(scan_router)

# Uploaded SDS files; the directory is created on first upload
app.mount(
    config.uploads.public_url_prefix,
    StaticFiles(directory=config.uploads.directory, check_dir=False),
    name="sds-uploads"
)


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "hazcom-compliance"}


def main():
    """Run the web server."""
    import uvicorn

    logger.info(f"Starting HazCom Compliance API on {config.web.host}:{config.web.port}")
    logger.info(f"API Docs: http://{config.web.host}:{config.web.port}/docs")

    uvicorn.run(
        "web.backend.app:app",
        host=config.web.host,
        port=config.web.port,
        reload=False,
        log_level="info"
    )


if __name__ == "__main__":
    main()
