import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import Depends, FastAPI, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from product_catalog.api.api import api_router
from product_catalog.api.errors import register_exception_handlers
from product_catalog.api.middleware import add_cors, add_request_context
from product_catalog.core.config import settings
from product_catalog.database.session import check_connection, get_db, init_db

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler()
    ]
)

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.PROJECT_NAME} ({settings.ENVIRONMENT})")
    init_db()
    yield
    logger.info(f"Shutting down {settings.PROJECT_NAME}")


# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Product catalog service: filtered listing, search and sample data generation",
    version=VERSION,
    openapi_url="/openapi.json",
    docs_url="/docs",
    lifespan=lifespan,
)

add_request_context(app)
add_cors(app, settings.BACKEND_CORS_ORIGINS)
register_exception_handlers(app)

# Include API router
app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/")
async def root():
    """Root endpoint that returns a welcome message and API status."""
    return {
        "message": f"Welcome to {settings.PROJECT_NAME}",
        "status": "running",
        "version": VERSION,
        "docs_url": "/docs",
    }


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Health check endpoint for monitoring and load balancers."""
    timestamp = datetime.now(timezone.utc).isoformat()
    if check_connection(db):
        return {"status": "healthy", "database": "connected", "timestamp": timestamp}
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "unhealthy", "database": "disconnected", "timestamp": timestamp},
    )


if __name__ == "__main__":
    uvicorn.run("product_catalog.main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)
