"""
Document Schemas for the University Project Tracker

A Project is stored as a single MongoDB document in the "projects" collection.
Tasks are embedded inside their project and have no collection of their own.
"""
from datetime import date
from enum import Enum
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator


class TaskStatus(str, Enum):
    TO_DO = "TO_DO"
    DOING = "DOING"
    DONE = "DONE"


class TaskPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class ProjectStatus(str, Enum):
    IN_PROGRESS = "IN_PROGRESS"
    LATE = "LATE"
    DONE = "DONE"


def new_task_id() -> str:
    return str(uuid4())


def unique_members(members: List[str]) -> List[str]:
    """Drop repeated names, keeping the first occurrence."""
    seen = set()
    result = []
    for m in members:
        if m not in seen:
            seen.add(m)
            result.append(m)
    return result


# Tasks
class Task(BaseModel):
    id: str = Field(default_factory=new_task_id, description="UUID, generated once")
    title: Optional[str] = None
    description: Optional[str] = None
    assignee: Optional[str] = None
    status: TaskStatus = TaskStatus.TO_DO
    priority: TaskPriority = TaskPriority.MEDIUM
    deadline: Optional[date] = None
    is_late: bool = Field(False, description="Derived from deadline and status")


# Projects
class Project(BaseModel):
    id: Optional[str] = Field(None, description="Hex ObjectId assigned by the store")
    title: str
    description: Optional[str] = None
    subject: Optional[str] = None
    creation_date: date = Field(default_factory=date.today)
    deadline: Optional[date] = None
    members: List[str] = Field(default_factory=list)
    tasks: List[Task] = Field(default_factory=list)
    completion_percent: float = Field(0.0, ge=0, le=100, description="Derived")
    status: ProjectStatus = Field(ProjectStatus.IN_PROGRESS, description="Derived")


# -----------------------------
# Request bodies
# -----------------------------
class ProjectCreate(BaseModel):
    """Caller-editable project fields, used by both create and update."""
    title: str
    description: Optional[str] = None
    subject: Optional[str] = None
    deadline: Optional[date] = None
    members: List[str] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Project title is required")
        return v

    @field_validator("members")
    @classmethod
    def members_unique(cls, v: List[str]) -> List[str]:
        return unique_members(v)


class TaskCreate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    assignee: Optional[str] = None
    status: TaskStatus = TaskStatus.TO_DO
    priority: TaskPriority = TaskPriority.MEDIUM
    deadline: Optional[date] = None

    def to_task(self) -> Task:
        return Task(**self.model_dump())


class TaskStatusUpdate(BaseModel):
    status: TaskStatus


class MemberAdd(BaseModel):
    member: str
