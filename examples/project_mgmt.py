"""
Project management demo backed by an in-memory repository.

    openaci examples.project_mgmt:create_router
    curl -d "how is the mobile app project doing? as a markdown table" localhost:8080
"""

from __future__ import annotations

import os
import uuid
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Literal

from pydantic import BaseModel

from openaci.http import HttpIntentRouter
from openaci.intent import IntentRequest

TaskPriority = Literal["low", "medium", "high"]
TaskStatus = Literal["todo", "in_progress", "done"]


@dataclass
class Task:
    name: str
    priority: TaskPriority = "medium"
    status: TaskStatus = "todo"
    due_date: date | None = None


@dataclass
class Milestone:
    name: str
    due_date: date


@dataclass
class Project:
    name: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    tasks: list[Task] = field(default_factory=list)
    milestones: list[Milestone] = field(default_factory=list)


class ProjectRepository:
    """In-memory project store."""

    def __init__(self):
        self._projects: dict[str, Project] = {}

    def save(self, project: Project) -> None:
        self._projects[project.id] = project

    def get(self, project_id: str) -> Project | None:
        return self._projects.get(project_id)

    def find_by_name(self, name: str) -> Project | None:
        needle = name.lower()
        for project in self._projects.values():
            if needle in project.name.lower():
                return project
        return None


def seed_data(repository: ProjectRepository) -> None:
    paypal = Project("PayPal integration")
    paypal.tasks.append(Task("Implement PayPal checkout"))
    repository.save(paypal)

    mobile_app = Project("Mobile App")
    mobile_app.tasks.extend([
        Task("Design Welcome Screen", "high", "in_progress"),
        Task("Create user authentication system", "high", "todo"),
        Task("Develop offline mode functionality", "medium", "in_progress"),
        Task("Implement push notifications", "medium", "todo"),
        Task("Optimize app performance", "high", "todo"),
        Task("Conduct user testing", "medium", "todo"),
        Task("Fix bugs", "medium", "in_progress"),
    ])
    mobile_app.milestones.append(Milestone("Beta Release", date.today() + timedelta(days=10)))
    repository.save(mobile_app)


class CreateProject(BaseModel):
    name: str
    tasks: list[str] | None = None


class AddTask(BaseModel):
    project_id: str | None = None
    project_name: str | None = None
    task: str


class CheckProjectStatus(BaseModel):
    project_id: str | None = None
    project_name: str | None = None


NOT_FOUND = "I couldn't find a project with that name. Please try again."


def create_router(repository: ProjectRepository | None = None) -> HttpIntentRouter:
    if repository is None:
        repository = ProjectRepository()
        seed_data(repository)

    router = HttpIntentRouter(model=os.environ.get("OPENAI_MODEL", "gpt-4o-mini"))

    def resolve(project_id: str | None, project_name: str | None) -> Project | None:
        if project_name:
            project = repository.find_by_name(project_name)
            if project:
                return project
        return repository.get(project_id) if project_id else None

    @router.intent("Create a project", CreateProject)
    async def create_project(request: IntentRequest) -> Project:
        project = Project(request.entities.name)
        project.tasks.extend(Task(name) for name in request.entities.tasks or [])
        repository.save(project)
        return project

    @router.intent("Add task to a project", AddTask)
    async def add_task(request: IntentRequest) -> Project | str:
        project = resolve(request.entities.project_id, request.entities.project_name)
        if project is None:
            return NOT_FOUND
        project.tasks.append(Task(request.entities.task))
        return project

    @router.intent("Check status of a project", CheckProjectStatus)
    async def check_status(request: IntentRequest) -> Project | str:
        project = resolve(request.entities.project_id, request.entities.project_name)
        return project or NOT_FOUND

    return router


if __name__ == "__main__":
    create_router().listen(port=int(os.environ.get("PORT", "8080")))
