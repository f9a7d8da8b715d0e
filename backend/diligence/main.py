"""
Nexus Due Diligence - FastAPI Application Entry Point
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from diligence.config import settings
from diligence.api.v1.endpoints import due_diligence, health
from diligence.logger import logger
from diligence.services.verification.registry import default_registry

# Create app
app = FastAPI(
    title=settings.APP_NAME,
    description="Sequential partner verification with aggregate risk classification",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, prefix="/api/v1")
app.include_router(due_diligence.router, prefix="/api/v1/due-diligence")


@app.on_event("startup")
async def startup():
    """Log the check catalog on startup."""
    registry = default_registry()
    logger.info(f"Starting {settings.APP_NAME}...")
    logger.info(
        f"Check catalog: {len(registry.automated())} automated, {len(registry.manual())} manual"
    )


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "app": settings.APP_NAME,
        "version": "1.0.0",
        "docs": "/docs"
    }
