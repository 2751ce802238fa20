import uuid

import httpx
import pytest
from beanie import init_beanie
from mongomock_motor import AsyncMongoMockClient
from pydantic import SecretStr

from judgepool import crud, models, notifications, schemas
from judgepool.config import settings
from judgepool.main import app

ADMIN_KEY = "test-admin-key"


class RecordingDispatcher(notifications.NotificationDispatcher):
    def __init__(self):
        self.events: list[schemas.NotificationEvent] = []

    async def send(self, event: schemas.NotificationEvent) -> None:
        self.events.append(event)


@pytest.fixture(autouse=True)
async def db():
    client = AsyncMongoMockClient()
    await init_beanie(database=client[f"judgepool_test_{uuid.uuid4().hex}"], document_models=models.DB_MODELS)
    yield


@pytest.fixture(autouse=True)
def dispatcher():
    previous = notifications.get_dispatcher()
    recording = RecordingDispatcher()
    notifications.set_dispatcher(recording)
    yield recording
    notifications.set_dispatcher(previous)


@pytest.fixture
async def group() -> models.JudgingGroup:
    group = await crud.group.create(obj_in=schemas.JudgingGroupCreate(name="Spring Hackathon"))
    assert group.id is not None
    await crud.criterion.save_criteria(
        group_id=group.id,
        criteria=[
            schemas.CriterionSave(question="How original is the idea?", order=0),
            schemas.CriterionSave(question="How polished is the execution?", order=1),
        ],
    )
    await crud.group.add_submissions(
        group_id=group.id,
        submissions=[
            schemas.SubmissionRef(submission_id="s1", title="First app", slug="first-app"),
            schemas.SubmissionRef(submission_id="s2", title="Second app", slug="second-app"),
            schemas.SubmissionRef(submission_id="s3", title="Third app", slug="third-app"),
        ],
    )
    return group


@pytest.fixture
def register_judge(group):
    async def f(name: str) -> models.Judge:
        judge, _ = await crud.judge.register(group_id=group.id, name=name)
        return judge

    return f


@pytest.fixture
def score_all(group):
    """Score every criterion of the group for one submission."""

    async def f(judge: models.Judge, submission_id: str, score: int = 7) -> list[models.JudgeScore]:
        scores = []
        for criterion in await crud.criterion.get_by_group(group_id=group.id):
            scores.append(
                await crud.judge_score.submit_score(
                    judge=judge, submission_id=submission_id, criterion_id=criterion.id, score=score
                )
            )
        return scores

    return f


@pytest.fixture
async def client(monkeypatch):
    monkeypatch.setattr(settings, "admin_api_key", SecretStr(ADMIN_KEY))
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"X-API-Key": ADMIN_KEY}
