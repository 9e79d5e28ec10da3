"""FastAPI application entry point"""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from typing import Optional
import logging

from projecthub.config.settings import settings
from projecthub.errors import DirectoryLoadError
from projecthub.orchestrator import ProjectHubOrchestrator
from projecthub.services.search import filter_projects

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description="Directory of a user's GitHub Pages projects",
    version=settings.APP_VERSION
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# Global orchestrator instance
orchestrator = ProjectHubOrchestrator()


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
        "endpoints": {
            "health": "/api/health",
            "projects": "/api/projects?q=",
        }
    }


@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "project-hub",
        "version": settings.APP_VERSION
    }


@app.get("/api/projects")
async def list_projects(q: Optional[str] = None):
    """
    Reconciled project directory

    Query params:
        q: Case-insensitive search over project names and descriptions
    """
    try:
        directory = await orchestrator.load_directory()
    except DirectoryLoadError as e:
        raise HTTPException(status_code=503, detail=str(e))

    visible = filter_projects(directory.projects, q)
    payload = directory.to_dict()
    payload["projects"] = [project.to_dict() for project in visible]
    payload["total"] = len(directory.projects)
    payload["visible"] = len(visible)
    return payload


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "projecthub.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
