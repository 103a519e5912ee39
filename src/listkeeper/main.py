# src/listkeeper/main.py
"""Main entry point for the Listkeeper example application."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from listkeeper.api.v1 import items_router, lists_router
from listkeeper.core.settings import settings

# Initialize FastAPI app
app = FastAPI(
    title="Listkeeper API",
    description="Manually reorderable todo lists with dense positions",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Include API routers
app.include_router(lists_router, prefix="/api/v1")
app.include_router(items_router, prefix="/api/v1")


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("listkeeper.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
