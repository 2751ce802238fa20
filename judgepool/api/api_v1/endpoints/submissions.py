from fastapi import APIRouter
from starlette import status

from judgepool import crud, models, schemas
from judgepool.api import deps

router = APIRouter()


def _note_info(note: models.SubmissionNote, judge: models.Judge) -> schemas.NoteInfo:
    return schemas.NoteInfo(
        id=note.id,  # type: ignore
        judge_id=note.judge_id,
        judge_name=judge.name,
        content=note.content,
        reply_to_id=note.reply_to_id,
        mentions=note.mentions,
        created_at=note.created_at,
    )


@router.get("", response_model=list[schemas.JudgeSubmissionInfo])
async def list_submissions(judge: deps.CurrentJudgeDep) -> list[schemas.JudgeSubmissionInfo]:
    """Submissions of your group that are still open, plus the ones you completed."""
    return await crud.submission_status.pool_for_judge(group_id=judge.group_id, judge_id=judge.id)  # type: ignore


@router.get("/{submission_id}/status", response_model=schemas.JudgeSubmissionStatus)
async def get_status(judge: deps.CurrentJudgeDep, submission_id: str) -> schemas.JudgeSubmissionStatus:
    return await crud.submission_status.status_for_judge(
        group_id=judge.group_id, submission_id=submission_id, judge_id=judge.id  # type: ignore
    )


@router.post("/{submission_id}/complete", response_model=schemas.JudgeSubmissionStatus)
async def complete_submission(judge: deps.CurrentJudgeDep, submission_id: str) -> schemas.JudgeSubmissionStatus:
    assert judge.id is not None
    submission_status = await crud.submission_status.mark_complete(
        group_id=judge.group_id, submission_id=submission_id, judge_id=judge.id
    )
    return await crud.submission_status.to_judge_status(submission_status, judge.id)


@router.post("/{submission_id}/reopen", response_model=schemas.JudgeSubmissionStatus)
async def reopen_submission(judge: deps.CurrentJudgeDep, submission_id: str) -> schemas.JudgeSubmissionStatus:
    assert judge.id is not None
    submission_status = await crud.submission_status.reopen(
        group_id=judge.group_id, submission_id=submission_id, judge_id=judge.id
    )
    return await crud.submission_status.to_judge_status(submission_status, judge.id)


@router.post("/{submission_id}/skip", response_model=schemas.JudgeSubmissionStatus)
async def skip_submission(judge: deps.CurrentJudgeDep, submission_id: str) -> schemas.JudgeSubmissionStatus:
    assert judge.id is not None
    submission_status = await crud.submission_status.set_skip(
        group_id=judge.group_id, submission_id=submission_id, judge_id=judge.id
    )
    return await crud.submission_status.to_judge_status(submission_status, judge.id)


@router.post("/{submission_id}/resume", response_model=schemas.JudgeSubmissionStatus)
async def resume_submission(judge: deps.CurrentJudgeDep, submission_id: str) -> schemas.JudgeSubmissionStatus:
    assert judge.id is not None
    submission_status = await crud.submission_status.resume(
        group_id=judge.group_id, submission_id=submission_id, judge_id=judge.id
    )
    return await crud.submission_status.to_judge_status(submission_status, judge.id)


@router.post("/{submission_id}/scores", response_model=schemas.ScoreInfo)
async def submit_score(
    judge: deps.CurrentJudgeDep, submission_id: str, score_in: schemas.ScoreSubmitRequest
) -> schemas.ScoreInfo:
    score = await crud.judge_score.submit_score(
        judge=judge,
        submission_id=submission_id,
        criterion_id=score_in.criterion_id,
        score=score_in.score,
        comment=score_in.comment,
    )
    return schemas.ScoreInfo.model_validate(score, from_attributes=True)


@router.get("/{submission_id}/scores", response_model=list[schemas.ScoreInfo])
async def get_scores(judge: deps.CurrentJudgeDep, submission_id: str) -> list[schemas.ScoreInfo]:
    scores = await crud.judge_score.get_judge_scores(judge_id=judge.id, submission_id=submission_id)  # type: ignore
    return [schemas.ScoreInfo.model_validate(s, from_attributes=True) for s in scores]


@router.post("/{submission_id}/notes", response_model=schemas.NoteInfo, status_code=status.HTTP_201_CREATED)
async def add_note(
    judge: deps.CurrentJudgeDep, submission_id: str, note_in: schemas.NoteCreateRequest
) -> schemas.NoteInfo:
    note = await crud.submission_note.add_note(
        group_id=judge.group_id,
        submission_id=submission_id,
        judge_id=judge.id,  # type: ignore
        content=note_in.content,
        reply_to_id=note_in.reply_to_id,
    )
    return _note_info(note, judge)


@router.get("/{submission_id}/notes", response_model=list[schemas.NoteThread])
async def list_notes(judge: deps.CurrentJudgeDep, submission_id: str) -> list[schemas.NoteThread]:
    return await crud.submission_note.list_notes(group_id=judge.group_id, submission_id=submission_id)
