"""
FastAPI backend exposing the knowledge graph pipeline to the notes UI.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routers import graph
from config.settings import settings
from knowledge.singletons import cleanup_singletons, get_analysis_cache, get_extraction_tables

logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle manager for FastAPI application."""
    logger.info("Starting knowledge graph API...")

    tables = get_extraction_tables()
    logger.info(
        f"Extraction tables ready: {len(tables.entity_patterns)} entity types, "
        f"{len(tables.gazetteer)} gazetteer names"
    )
    if get_analysis_cache() is None:
        logger.info("Analysis cache disabled")

    yield

    logger.info("Shutting down knowledge graph API...")
    cleanup_singletons()


app = FastAPI(
    title="Notes Knowledge Graph API",
    description="Entity and relation mining over stored notes",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(graph.router, prefix="/api/graph", tags=["graph"])


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.log_level.lower(),
    )
