"""
Tests for the bundled example apps.

Handlers are invoked directly; the model is never called.
"""

import pytest

from examples.project_mgmt import (
    AddTask,
    CheckProjectStatus,
    CreateProject,
    NOT_FOUND,
    Project,
    ProjectRepository,
    create_router,
    seed_data,
)
from examples.simplest import Name, router as simplest_router
from openaci.intent.router import IntentRequest


@pytest.fixture
def repository() -> ProjectRepository:
    repo = ProjectRepository()
    seed_data(repo)
    return repo


class TestSimplest:
    """Tests for the base64 example."""

    @pytest.mark.asyncio
    async def test_convert_name(self):
        spec = simplest_router.intents["convert_name_to_base64"]
        result = await spec.handler(IntentRequest(
            utterance="please base64 encode Alice",
            intent=spec.intent,
            entities=Name(name="Alice"),
        ))
        assert result == "QWxpY2U="


class TestProjectRepository:
    """Tests for the in-memory project store."""

    def test_find_by_name_is_case_insensitive_substring(self, repository: ProjectRepository):
        project = repository.find_by_name("mobile")
        assert project is not None
        assert project.name == "Mobile App"
        assert len(project.tasks) == 7
        assert project.milestones[0].name == "Beta Release"

    def test_get_by_id(self, repository: ProjectRepository):
        project = Project("Website")
        repository.save(project)
        assert repository.get(project.id) is project
        assert repository.get("missing") is None


class TestProjectIntents:
    """Tests for the project management handlers."""

    @pytest.fixture
    def router(self, repository: ProjectRepository):
        return create_router(repository)

    def test_registered_intents(self, router):
        assert set(router.intents) == {
            "cannot_fulfill_intent",
            "create_a_project",
            "add_task_to_a_project",
            "check_status_of_a_project",
        }

    @pytest.mark.asyncio
    async def test_create_project(self, router, repository: ProjectRepository):
        spec = router.intents["create_a_project"]
        project = await spec.handler(IntentRequest(
            utterance="create project Launch with tasks Plan and Ship",
            intent=spec.intent,
            entities=CreateProject(name="Launch", tasks=["Plan", "Ship"]),
        ))
        assert repository.find_by_name("launch") is project
        assert [task.name for task in project.tasks] == ["Plan", "Ship"]

    @pytest.mark.asyncio
    async def test_add_task(self, router, repository: ProjectRepository):
        spec = router.intents["add_task_to_a_project"]
        project = await spec.handler(IntentRequest(
            utterance="add 'Refund flow' to the paypal project",
            intent=spec.intent,
            entities=AddTask(project_name="paypal", task="Refund flow"),
        ))
        assert project.tasks[-1].name == "Refund flow"

    @pytest.mark.asyncio
    async def test_check_status_unknown(self, router):
        spec = router.intents["check_status_of_a_project"]
        result = await spec.handler(IntentRequest(
            utterance="status of the rocket project",
            intent=spec.intent,
            entities=CheckProjectStatus(project_name="rocket"),
        ))
        assert result == NOT_FOUND
