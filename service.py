import logging
from datetime import date
from typing import Callable, List

from database import ProjectRepository
from progress import refresh, refresh_task
from schemas import Project, ProjectCreate, TaskCreate, TaskStatus

logger = logging.getLogger(__name__)


class ProjectNotFound(Exception):
    def __init__(self, project_id: str):
        self.project_id = project_id
        super().__init__(f"Project not found with id: {project_id}")


class ProjectService:
    """
    Keeps a project and its embedded tasks consistent with their derived
    fields. Every project handed back to a caller, or written to the store,
    has been through progress.refresh against today's date.
    """

    def __init__(self, repository: ProjectRepository, today: Callable[[], date] = date.today):
        self.repository = repository
        self.today = today

    def _refresh(self, project: Project) -> Project:
        return refresh(project, self.today())

    # -----------------------------
    # Projects
    # -----------------------------
    def list_projects(self) -> List[Project]:
        return [self._refresh(p) for p in self.repository.find_all()]

    def get_project(self, project_id: str) -> Project:
        project = self.repository.find_by_id(project_id)
        if project is None:
            raise ProjectNotFound(project_id)
        return self._refresh(project)

    def create_project(self, draft: ProjectCreate) -> Project:
        project = Project(**draft.model_dump(), creation_date=self.today())
        saved = self.repository.save(self._refresh(project))
        logger.info("Created project %s (%r)", saved.id, saved.title)
        return saved

    def update_project(self, project_id: str, draft: ProjectCreate) -> Project:
        existing = self.get_project(project_id)
        # Tasks are managed through their own operations and stay as they are.
        updated = existing.model_copy(update=draft.model_dump())
        saved = self.repository.save(self._refresh(updated))
        logger.info("Updated project %s", project_id)
        return saved

    def delete_project(self, project_id: str) -> None:
        project = self.get_project(project_id)
        self.repository.delete(project)
        logger.info("Deleted project %s", project_id)

    # -----------------------------
    # Tasks
    # -----------------------------
    def add_task(self, project_id: str, draft: TaskCreate) -> Project:
        project = self.get_project(project_id)
        task = refresh_task(draft.to_task(), self.today())
        project.tasks.append(task)
        saved = self.repository.save(self._refresh(project))
        logger.info("Added task %s to project %s", task.id, project_id)
        return saved

    def set_task_status(self, project_id: str, task_id: str, status: TaskStatus) -> Project:
        project = self.get_project(project_id)
        for task in project.tasks:
            if task.id == task_id:
                task.status = status
                break
        else:
            logger.debug("Task %s not in project %s; status left as is", task_id, project_id)
        saved = self.repository.save(self._refresh(project))
        logger.info("Set task %s of project %s to %s", task_id, project_id, status.value)
        return saved

    def remove_task(self, project_id: str, task_id: str) -> Project:
        project = self.get_project(project_id)
        project.tasks = [t for t in project.tasks if t.id != task_id]
        saved = self.repository.save(self._refresh(project))
        logger.info("Removed task %s from project %s", task_id, project_id)
        return saved

    # -----------------------------
    # Members
    # -----------------------------
    def add_member(self, project_id: str, member: str) -> Project:
        project = self.get_project(project_id)
        if member in project.members:
            logger.debug("%r already a member of project %s", member, project_id)
            return project
        project.members.append(member)
        saved = self.repository.save(project)
        logger.info("Added member %r to project %s", member, project_id)
        return saved

    # -----------------------------
    # Lookups
    # -----------------------------
    def filter_by_status(self, status: str) -> List[Project]:
        # Matches the status as last written. A project whose deadline has
        # passed since its last save still reports IN_PROGRESS here until
        # some write recomputes it. Results are returned as stored.
        return self.repository.find_by_status(status)

    def find_by_member(self, member: str) -> List[Project]:
        return [self._refresh(p) for p in self.repository.find_by_member(member)]

    def find_by_subject(self, subject: str) -> List[Project]:
        return [self._refresh(p) for p in self.repository.find_by_subject(subject)]

    def search_by_title(self, text: str) -> List[Project]:
        return [self._refresh(p) for p in self.repository.find_by_title_containing(text)]
