"""Bundle diagnostics API main entry point."""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..config import config
from ..decoders.signatures import CATALOG
from .routes import health, diagnostics

# Configure logging
logging.basicConfig(
    level=getattr(logging, config.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info(
        f"Starting bundle diagnostics API for EntryPoint {config.entry_point_address} "
        f"({len(CATALOG)} known signatures)"
    )
    yield
    logger.info("Shutting down bundle diagnostics API")


app = FastAPI(
    title="Bundle Diagnostics API",
    description="Revert and EntryPoint bundle diagnostics",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routes
app.include_router(health.router)
app.include_router(diagnostics.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Bundle Diagnostics API",
        "version": "0.1.0",
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "bundle_diag.api.main:app",
        host=config.api_host,
        port=config.api_port,
        reload=True,
        log_level=config.log_level.lower(),
    )
