import pytest
from beanie import PydanticObjectId

from judgepool import crud, models, schemas
from judgepool.enums import NotificationType


@pytest.mark.parametrize("score", [0, 11, -3, 5.5, True, "7", None])
def test_validate_score_rejects(score):
    with pytest.raises(crud.InvalidScoreError):
        crud.validate_score(score)


@pytest.mark.parametrize("score", [1, 5, 10])
def test_validate_score_accepts(score):
    assert crud.validate_score(score) == score


async def test_invalid_score_checked_before_lookups(group, register_judge):
    ada = await register_judge("ada")
    with pytest.raises(crud.InvalidScoreError):
        await crud.judge_score.submit_score(
            judge=ada, submission_id="unknown", criterion_id=PydanticObjectId(), score=42
        )
    assert await models.JudgeScore.find_all().count() == 0


async def test_score_round_trip(group, register_judge):
    ada = await register_judge("ada")
    first, second = await crud.criterion.get_by_group(group_id=group.id)
    await crud.judge_score.submit_score(
        judge=ada, submission_id="s1", criterion_id=second.id, score=4, comment="  Rough edges  "
    )
    await crud.judge_score.submit_score(judge=ada, submission_id="s1", criterion_id=first.id, score=9)

    scores = await crud.judge_score.get_judge_scores(judge_id=ada.id, submission_id="s1")
    assert [(s.criterion_id, s.score, s.comment) for s in scores] == [
        (first.id, 9, None),
        (second.id, 4, "Rough edges"),
    ]


async def test_resubmitting_overwrites(group, register_judge):
    ada = await register_judge("ada")
    criterion, _ = await crud.criterion.get_by_group(group_id=group.id)
    await crud.judge_score.submit_score(
        judge=ada, submission_id="s1", criterion_id=criterion.id, score=3, comment="meh"
    )
    updated = await crud.judge_score.submit_score(
        judge=ada, submission_id="s1", criterion_id=criterion.id, score=8, comment="   "
    )
    assert updated.score == 8
    assert updated.comment is None
    assert await models.JudgeScore.find_many(models.JudgeScore.judge_id == ada.id).count() == 1


async def test_scores_are_per_judge(group, register_judge):
    ada = await register_judge("ada")
    grace = await register_judge("grace")
    criterion, _ = await crud.criterion.get_by_group(group_id=group.id)
    await crud.judge_score.submit_score(judge=ada, submission_id="s1", criterion_id=criterion.id, score=3)
    await crud.judge_score.submit_score(judge=grace, submission_id="s1", criterion_id=criterion.id, score=10)
    assert [s.score for s in await crud.judge_score.get_judge_scores(judge_id=ada.id, submission_id="s1")] == [3]
    assert [s.score for s in await crud.judge_score.get_judge_scores(judge_id=grace.id, submission_id="s1")] == [10]


async def test_score_unknown_criterion_or_submission(group, register_judge):
    ada = await register_judge("ada")
    other = await crud.group.create(obj_in=schemas.JudgingGroupCreate(name="Other group"))
    (foreign,) = await crud.criterion.save_criteria(
        group_id=other.id, criteria=[schemas.CriterionSave(question="Elsewhere?")]
    )
    with pytest.raises(crud.CriterionNotFoundError):
        await crud.judge_score.submit_score(judge=ada, submission_id="s1", criterion_id=foreign.id, score=5)

    criterion, _ = await crud.criterion.get_by_group(group_id=group.id)
    with pytest.raises(crud.SubmissionNotFoundError):
        await crud.judge_score.submit_score(judge=ada, submission_id="s404", criterion_id=criterion.id, score=5)


async def test_comment_too_long(group, register_judge):
    ada = await register_judge("ada")
    criterion, _ = await crud.criterion.get_by_group(group_id=group.id)
    with pytest.raises(crud.InvalidInputError):
        await crud.judge_score.submit_score(
            judge=ada, submission_id="s1", criterion_id=criterion.id, score=5, comment="x" * 5000
        )


async def test_is_fully_scored(group, register_judge, score_all):
    ada = await register_judge("ada")
    criteria_ids = await crud.criterion.get_ids_by_group(group_id=group.id)
    assert not await crud.judge_score.is_fully_scored(judge_id=ada.id, submission_id="s1", criteria_ids=set())
    assert not await crud.judge_score.is_fully_scored(
        judge_id=ada.id, submission_id="s1", criteria_ids=criteria_ids
    )

    first, _ = await crud.criterion.get_by_group(group_id=group.id)
    await crud.judge_score.submit_score(judge=ada, submission_id="s1", criterion_id=first.id, score=6)
    assert not await crud.judge_score.is_fully_scored(
        judge_id=ada.id, submission_id="s1", criteria_ids=criteria_ids
    )

    scores = await score_all(ada, "s1")
    assert await crud.judge_score.is_fully_scored(judge_id=ada.id, submission_id="s1", criteria_ids=criteria_ids)

    await crud.judge_score.set_hidden(score_id=scores[0].id, hidden=True)
    assert not await crud.judge_score.is_fully_scored(
        judge_id=ada.id, submission_id="s1", criteria_ids=criteria_ids
    )


async def test_set_hidden_unknown_score():
    with pytest.raises(crud.ScoreNotFoundError):
        await crud.judge_score.set_hidden(score_id=PydanticObjectId(), hidden=True)


async def test_remove_score_resets_completed_submission(group, register_judge, score_all):
    ada = await register_judge("ada")
    scores = await score_all(ada, "s1")
    await crud.submission_status.mark_complete(group_id=group.id, submission_id="s1", judge_id=ada.id)

    removed = await crud.judge_score.remove(id=scores[1].id)
    assert removed.submission_id == "s1"
    assert [s.id for s in await crud.judge_score.get_judge_scores(judge_id=ada.id, submission_id="s1")] == [
        scores[0].id
    ]
    status = await crud.submission_status.reset_if_incomplete(group_id=group.id, submission_id="s1")
    assert (status.state, status.owner_judge_id) == ("pending", None)

    with pytest.raises(crud.ScoreNotFoundError):
        await crud.judge_score.remove(id=scores[1].id)


async def test_submit_score_dispatches_event(group, register_judge, dispatcher):
    ada = await register_judge("ada")
    criterion, _ = await crud.criterion.get_by_group(group_id=group.id)
    await crud.judge_score.submit_score(judge=ada, submission_id="s2", criterion_id=criterion.id, score=5)
    assert [(e.type, e.submission_id, e.judge_id) for e in dispatcher.events] == [
        (NotificationType.score_submitted, "s2", ada.id)
    ]


async def test_failing_dispatcher_does_not_fail_scoring(group, register_judge, dispatcher, monkeypatch):
    async def broken_send(event):
        raise ConnectionError("queue is down")

    monkeypatch.setattr(dispatcher, "send", broken_send)
    ada = await register_judge("ada")
    criterion, _ = await crud.criterion.get_by_group(group_id=group.id)
    score = await crud.judge_score.submit_score(judge=ada, submission_id="s1", criterion_id=criterion.id, score=5)
    assert score.score == 5
