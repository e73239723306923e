from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
import os
import uvicorn

from . import routers
from .config import settings
from .database import init_db, check_db_connection

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="TidyTap API",
    description="Household task management API",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    """Create tables when the app starts"""
    logger.info("Starting TidyTap API")
    init_db()


# Include routers
app.include_router(routers.auth.router, prefix="/api/auth", tags=["authentication"])
app.include_router(
    routers.households.router, prefix="/api/households", tags=["households"]
)
app.include_router(routers.tasks.router, prefix="/api/tasks", tags=["tasks"])
app.include_router(routers.templates.router, prefix="/api/templates", tags=["templates"])
app.include_router(routers.assistant.router, prefix="/api/assistant", tags=["assistant"])
app.include_router(
    routers.suggestions.router, prefix="/api/suggestions", tags=["suggestions"]
)


@app.get("/")
async def root():
    return {"message": "Welcome to TidyTap API", "status": "running"}


@app.get("/health")
async def health_check():
    connections = check_db_connection()
    return {
        "status": "healthy" if connections["sqlalchemy"] else "degraded",
        "service": "tidytap-api",
        "version": "1.0.0",
        "connections": connections,
    }


if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=True,
        reload_dirs=["app"],
    )
