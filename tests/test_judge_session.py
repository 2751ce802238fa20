import asyncio
import datetime

import pytest
from beanie import PydanticObjectId

from judgepool import crud, models, schemas, security
from judgepool.config import settings
from judgepool.utils import utcnow


def test_normalize_judge_name():
    assert security.normalize_judge_name("Ada L. Lovelace 2nd") == "adallovelacend"
    assert security.normalize_judge_name("  ÉVA ") == "va"


async def test_register_normalizes_name(group):
    judge, token = await crud.judge.register(group_id=group.id, name="Ada Lovelace", email="ada@example.com")
    assert judge.name == "adalovelace"
    assert judge.email == "ada@example.com"
    assert judge.session_token == token
    assert judge.identity_key == security.derive_judge_key(group.id, "adalovelace")


async def test_register_name_too_short(group):
    with pytest.raises(crud.InvalidJudgeNameError) as exc_info:
        await crud.judge.register(group_id=group.id, name="A1 !")
    assert "at least 2 letters" in str(exc_info.value)


async def test_register_unknown_group():
    with pytest.raises(crud.GroupNotFoundError):
        await crud.judge.register(group_id=PydanticObjectId(), name="ada")


async def test_register_resumes_same_judge_with_new_token(group):
    first, first_token = await crud.judge.register(group_id=group.id, name="Ada")
    second, second_token = await crud.judge.register(group_id=group.id, name="  a-d-a ")
    assert first.id == second.id
    assert first_token != second_token
    with pytest.raises(crud.SessionExpiredError):
        await crud.judge.validate_session(token=first_token)
    assert (await crud.judge.validate_session(token=second_token)).id == first.id


async def test_concurrent_registrations_converge(group):
    results = await asyncio.gather(
        crud.judge.register(group_id=group.id, name="grace"),
        crud.judge.register(group_id=group.id, name="Grace"),
    )
    assert results[0][0].id == results[1][0].id
    assert await models.Judge.find_many(models.Judge.group_id == group.id).count() == 1


async def test_register_password_gated_group():
    gated = await crud.group.create(
        obj_in=schemas.JudgingGroupCreate(name="Finals", is_public=False, judge_password="let-me-judge")
    )
    with pytest.raises(crud.InvalidGroupPasswordError):
        await crud.judge.register(group_id=gated.id, name="ada")
    with pytest.raises(crud.InvalidGroupPasswordError):
        await crud.judge.register(group_id=gated.id, name="ada", password="wrong")
    judge, _ = await crud.judge.register(group_id=gated.id, name="ada", password="let-me-judge")
    assert judge.group_id == gated.id


async def test_register_closed_group(group):
    await crud.group.update(db_obj=group, obj_in={"is_active": False})
    with pytest.raises(crud.JudgingClosedError) as exc_info:
        await crud.judge.register(group_id=group.id, name="ada")
    assert "not currently active" in str(exc_info.value)


async def test_register_before_start(group):
    await crud.group.update(db_obj=group, obj_in={"start_date": utcnow() + datetime.timedelta(days=1)})
    with pytest.raises(crud.JudgingClosedError) as exc_info:
        await crud.judge.register(group_id=group.id, name="ada")
    assert "not started" in str(exc_info.value)


async def test_validate_session_unknown_token(group):
    with pytest.raises(crud.SessionExpiredError):
        await crud.judge.validate_session(token="not-a-token")


async def test_validate_session_after_end_date(group):
    _, token = await crud.judge.register(group_id=group.id, name="ada")
    await crud.group.update(db_obj=group, obj_in={"end_date": utcnow() - datetime.timedelta(minutes=1)})
    with pytest.raises(crud.SessionExpiredError) as exc_info:
        await crud.judge.validate_session(token=token)
    assert "ended" in str(exc_info.value)


async def test_validate_session_inactive_or_deleted_group(group):
    _, token = await crud.judge.register(group_id=group.id, name="ada")
    await crud.group.update(db_obj=group, obj_in={"is_active": False})
    with pytest.raises(crud.SessionExpiredError):
        await crud.judge.validate_session(token=token)
    await crud.group.remove(id=group.id)
    with pytest.raises(crud.SessionExpiredError):
        await crud.judge.validate_session(token=token)


async def test_validate_session_idle_timeout(group, monkeypatch):
    judge, token = await crud.judge.register(group_id=group.id, name="ada")
    await judge.set({models.Judge.last_active_at: utcnow() - datetime.timedelta(hours=2)})
    assert (await crud.judge.validate_session(token=token)).id == judge.id
    monkeypatch.setattr(settings, "session_idle_timeout", 3600)
    with pytest.raises(crud.SessionExpiredError):
        await crud.judge.validate_session(token=token)


async def test_heartbeat_is_throttled(group):
    judge, token = await crud.judge.register(group_id=group.id, name="ada")
    stored = await crud.judge.get(judge.id)
    assert stored is not None
    beat = await crud.judge.heartbeat(token=token, client_timestamp=utcnow())
    assert beat.last_active_at == stored.last_active_at
    assert beat.last_client_timestamp is None


async def test_heartbeat_updates_liveness(group, monkeypatch):
    judge, token = await crud.judge.register(group_id=group.id, name="ada")
    await judge.set({models.Judge.last_active_at: utcnow() - datetime.timedelta(minutes=5)})
    client_timestamp = datetime.datetime(2025, 4, 1, 12, 0, tzinfo=datetime.timezone.utc)
    await crud.judge.heartbeat(token=token, client_timestamp=client_timestamp)
    stored = await crud.judge.get(judge.id)
    assert stored is not None
    assert stored.last_active_at > utcnow() - datetime.timedelta(minutes=1)
    assert stored.last_client_timestamp == datetime.datetime(2025, 4, 1, 12, 0)


async def test_heartbeat_with_expired_session(group):
    with pytest.raises(crud.SessionExpiredError):
        await crud.judge.heartbeat(token="gone")


async def test_remove_judge_resets_owned_submissions(group, register_judge, score_all):
    ada = await register_judge("ada")
    await score_all(ada, "s1")
    await crud.submission_note.add_note(group_id=group.id, submission_id="s1", judge_id=ada.id, content="Solid")
    await crud.submission_status.mark_complete(group_id=group.id, submission_id="s1", judge_id=ada.id)

    await crud.judge.remove(id=ada.id)

    status = await crud.submission_status.get_by_submission(group_id=group.id, submission_id="s1")
    assert status is not None
    assert status.state == "pending"
    assert status.owner_judge_id is None
    assert await models.JudgeScore.find_many(models.JudgeScore.judge_id == ada.id).count() == 0
    assert await models.SubmissionNote.find_many(models.SubmissionNote.judge_id == ada.id).count() == 0
    with pytest.raises(crud.JudgeNotFoundError):
        await crud.judge.remove(id=ada.id)


async def test_remove_judge_drops_replies_to_their_notes(group, register_judge):
    ada = await register_judge("ada")
    grace = await register_judge("grace")
    thread = await crud.submission_note.add_note(
        group_id=group.id, submission_id="s1", judge_id=ada.id, content="Demo crashed for me"
    )
    await crud.submission_note.add_note(
        group_id=group.id, submission_id="s1", judge_id=grace.id, content="Works here", reply_to_id=thread.id
    )
    own = await crud.submission_note.add_note(group_id=group.id, submission_id="s1", judge_id=grace.id, content="Nice")
    await crud.submission_note.add_note(
        group_id=group.id, submission_id="s1", judge_id=ada.id, content="Agreed", reply_to_id=own.id
    )

    await crud.judge.remove(id=ada.id)

    remaining = await models.SubmissionNote.find_many(models.SubmissionNote.group_id == group.id).to_list()
    assert [n.content for n in remaining] == ["Nice"]
    threads = await crud.submission_note.list_notes(group_id=group.id, submission_id="s1")
    assert [(t.note.content, len(t.replies)) for t in threads] == [("Nice", 0)]
