"""
Derived fields of a project and its tasks.

Every function here is pure: it takes the entity and the current date and
returns new values, leaving its inputs untouched.
"""
from datetime import date
from typing import List, Optional

from schemas import Project, ProjectStatus, Task, TaskStatus


def compute_completion(tasks: List[Task]) -> float:
    if not tasks:
        return 0.0
    done = sum(1 for t in tasks if t.status == TaskStatus.DONE)
    return done / len(tasks) * 100


def task_is_late(task: Task, today: date) -> bool:
    # A finished task is never late, whatever its deadline says.
    if task.status == TaskStatus.DONE or task.deadline is None:
        return False
    return today > task.deadline


def compute_status(deadline: Optional[date], completion: float, today: date) -> ProjectStatus:
    if deadline is not None and today > deadline and completion < 100:
        return ProjectStatus.LATE
    if completion >= 100:
        return ProjectStatus.DONE
    return ProjectStatus.IN_PROGRESS


def refresh_task(task: Task, today: date) -> Task:
    return task.model_copy(update={"is_late": task_is_late(task, today)})


def refresh(project: Project, today: date) -> Project:
    """Recompute task lateness, then completion, then status."""
    tasks = [refresh_task(t, today) for t in project.tasks]
    completion = compute_completion(tasks)
    return project.model_copy(update={
        "tasks": tasks,
        "completion_percent": completion,
        "status": compute_status(project.deadline, completion, today),
    })
