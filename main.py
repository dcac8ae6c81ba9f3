import logging
import os
from datetime import datetime
from typing import Any, Dict, List

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from database import ProjectRepository, db
from schemas import MemberAdd, Project, ProjectCreate, TaskCreate, TaskStatusUpdate
from service import ProjectNotFound, ProjectService

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="University Project Tracker API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -----------------------------
# Helpers
# -----------------------------

def get_service() -> ProjectService:
    return ProjectService(ProjectRepository(db["projects"]))


def error_body(status: int, error: str, message: str) -> Dict[str, Any]:
    return {
        "timestamp": datetime.now().isoformat(),
        "status": status,
        "error": error,
        "message": message,
    }


def describe_validation(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts)


# -----------------------------
# Error handlers
# -----------------------------
@app.exception_handler(ProjectNotFound)
async def handle_not_found(request: Request, exc: ProjectNotFound):
    return JSONResponse(status_code=404, content=error_body(404, "Resource not found", str(exc)))


@app.exception_handler(RequestValidationError)
async def handle_validation(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content=error_body(400, "Bad request", describe_validation(exc)))


@app.exception_handler(Exception)
async def handle_unexpected(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content=error_body(500, "Internal server error", str(exc)))


# -----------------------------
# Project endpoints
# -----------------------------
@app.get("/projects", response_model=List[Project])
def list_projects(service: ProjectService = Depends(get_service)):
    return service.list_projects()


@app.get("/projects/search", response_model=List[Project])
def search_projects(title: str, service: ProjectService = Depends(get_service)):
    return service.search_by_title(title)


@app.get("/projects/status/{status}", response_model=List[Project])
def projects_by_status(status: str, service: ProjectService = Depends(get_service)):
    return service.filter_by_status(status)


@app.get("/projects/member/{member}", response_model=List[Project])
def projects_by_member(member: str, service: ProjectService = Depends(get_service)):
    return service.find_by_member(member)


@app.get("/projects/subject/{subject}", response_model=List[Project])
def projects_by_subject(subject: str, service: ProjectService = Depends(get_service)):
    return service.find_by_subject(subject)


@app.get("/projects/{project_id}", response_model=Project)
def get_project(project_id: str, service: ProjectService = Depends(get_service)):
    return service.get_project(project_id)


@app.post("/projects", response_model=Project, status_code=201)
def create_project(body: ProjectCreate, service: ProjectService = Depends(get_service)):
    return service.create_project(body)


@app.put("/projects/{project_id}", response_model=Project)
def update_project(project_id: str, body: ProjectCreate, service: ProjectService = Depends(get_service)):
    return service.update_project(project_id, body)


@app.delete("/projects/{project_id}")
def delete_project(project_id: str, service: ProjectService = Depends(get_service)):
    service.delete_project(project_id)
    return {"deleted": True, "message": "Project deleted successfully"}


# -----------------------------
# Task endpoints
# -----------------------------
@app.post("/projects/{project_id}/tasks", response_model=Project, status_code=201)
def add_task(project_id: str, body: TaskCreate, service: ProjectService = Depends(get_service)):
    return service.add_task(project_id, body)


@app.put("/projects/{project_id}/tasks/{task_id}/status", response_model=Project)
def set_task_status(project_id: str, task_id: str, body: TaskStatusUpdate,
                    service: ProjectService = Depends(get_service)):
    return service.set_task_status(project_id, task_id, body.status)


@app.delete("/projects/{project_id}/tasks/{task_id}", response_model=Project)
def remove_task(project_id: str, task_id: str, service: ProjectService = Depends(get_service)):
    return service.remove_task(project_id, task_id)


# -----------------------------
# Member endpoints
# -----------------------------
@app.post("/projects/{project_id}/members", response_model=Project)
def add_member(project_id: str, body: MemberAdd, service: ProjectService = Depends(get_service)):
    return service.add_member(project_id, body.member)


# -----------------------------
# Health/Test
# -----------------------------
@app.get("/")
def read_root():
    return {"message": "University Project Tracker API running"}


@app.get("/test")
def test_database():
    response = {
        "backend": "✅ Running",
        "database": "❌ Not Available",
        "database_url": "✅ Set" if os.getenv("DATABASE_URL") else "❌ Not Set (using default)",
        "database_name": "✅ Set" if os.getenv("DATABASE_NAME") else "❌ Not Set (using default)",
        "connection_status": "Not Connected",
        "collections": []
    }
    try:
        collections = db.list_collection_names()
        response["collections"] = collections[:10]
        response["database"] = "✅ Connected & Working"
        response["connection_status"] = "Connected"
    except Exception as e:
        response["database"] = f"⚠️ Connected but Error: {str(e)[:50]}"
    return response


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
