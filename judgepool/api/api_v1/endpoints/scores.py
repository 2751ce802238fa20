from beanie import PydanticObjectId
from fastapi import APIRouter, Depends

from judgepool import crud, models, schemas
from judgepool.api import deps

router = APIRouter(dependencies=[Depends(deps.get_admin)])


async def _resulting_status(score: models.JudgeScore) -> schemas.SubmissionStatusInfo:
    # A score of the judge who completed the submission may no longer add up to a full scoring
    submission_status = await crud.submission_status.reset_if_incomplete(
        group_id=score.group_id, submission_id=score.submission_id
    )
    if submission_status is None:
        raise crud.SubmissionNotFoundError("Submission not found in judging group")
    (info,) = await crud.submission_status.to_infos([submission_status])
    return info


@router.post("/{score_id}/visibility", response_model=schemas.SubmissionStatusInfo)
async def set_score_visibility(
    score_id: PydanticObjectId, visibility_in: schemas.ScoreVisibilityRequest
) -> schemas.SubmissionStatusInfo:
    """Hide or show a score, and return the resulting status of its submission.

    Hiding a score of the judge who completed the submission sends it back to pending.
    """
    score = await crud.judge_score.set_hidden(score_id=score_id, hidden=visibility_in.is_hidden)
    return await _resulting_status(score)


@router.delete("/{score_id}", response_model=schemas.SubmissionStatusInfo)
async def delete_score(score_id: PydanticObjectId) -> schemas.SubmissionStatusInfo:
    """Delete a score, and return the resulting status of its submission."""
    score = await crud.judge_score.remove(id=score_id)
    return await _resulting_status(score)
