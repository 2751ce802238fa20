from beanie import PydanticObjectId
from fastapi import APIRouter, Depends
from starlette import status

from judgepool import crud, models, schemas
from judgepool.api import deps

router = APIRouter(dependencies=[Depends(deps.get_admin)])


async def _group_info(group: models.JudgingGroup) -> schemas.JudgingGroupInfo:
    assert group.id is not None
    return schemas.JudgingGroupInfo(
        id=group.id,
        name=group.name,
        slug=group.slug,
        description=group.description,
        is_public=group.is_public,
        is_active=group.is_active,
        start_date=group.start_date,
        end_date=group.end_date,
        submission_count=await crud.group.count_submissions(group_id=group.id),
        judge_count=await crud.group.count_judges(group_id=group.id),
    )


@router.post("", response_model=schemas.JudgingGroupInfo, status_code=status.HTTP_201_CREATED)
async def create_group(group_in: schemas.JudgingGroupCreate) -> schemas.JudgingGroupInfo:
    group = await crud.group.create(obj_in=group_in)
    return await _group_info(group)


@router.get("", response_model=list[schemas.JudgingGroupInfo])
async def list_groups(skip: int = 0, limit: int = 100) -> list[schemas.JudgingGroupInfo]:
    return [await _group_info(group) for group in await crud.group.get_multi(skip=skip, limit=limit)]


@router.get("/{group_id}", response_model=schemas.JudgingGroupInfo)
async def get_group(group: deps.GroupDep) -> schemas.JudgingGroupInfo:
    return await _group_info(group)


@router.patch("/{group_id}", response_model=schemas.JudgingGroupInfo)
async def update_group(group: deps.GroupDep, group_in: schemas.JudgingGroupUpdate) -> schemas.JudgingGroupInfo:
    group = await crud.group.update(db_obj=group, obj_in=group_in)
    return await _group_info(group)


@router.delete("/{group_id}", response_model=dict[str, str])
async def delete_group(group: deps.GroupDep) -> dict[str, str]:
    await crud.group.remove(id=group.id)  # type: ignore
    return {"detail": f"Judging group with id '{group.id}' and slug '{group.slug}' deleted"}


@router.put("/{group_id}/criteria", response_model=list[schemas.CriterionInfo])
async def save_criteria(group: deps.GroupDep, criteria_in: schemas.CriteriaSaveRequest) -> list[schemas.CriterionInfo]:
    assert group.id is not None
    criteria = await crud.criterion.save_criteria(group_id=group.id, criteria=criteria_in.criteria)
    # New criteria can leave completed submissions without a full scoring
    await crud.submission_status.reset_group_if_incomplete(group_id=group.id)
    return [schemas.CriterionInfo.model_validate(c, from_attributes=True) for c in criteria]


@router.get("/{group_id}/criteria", response_model=list[schemas.CriterionInfo])
async def list_criteria(group: deps.GroupDep) -> list[schemas.CriterionInfo]:
    criteria = await crud.criterion.get_by_group(group_id=group.id)  # type: ignore
    return [schemas.CriterionInfo.model_validate(c, from_attributes=True) for c in criteria]


@router.post("/{group_id}/submissions", response_model=schemas.SubmissionsAddResponse)
async def add_submissions(
    group: deps.GroupDep, submissions_in: schemas.SubmissionsAddRequest
) -> schemas.SubmissionsAddResponse:
    return await crud.group.add_submissions(group_id=group.id, submissions=submissions_in.submissions)  # type: ignore


@router.get("/{group_id}/submissions", response_model=list[schemas.GroupSubmissionInfo])
async def list_submissions(group: deps.GroupDep) -> list[schemas.GroupSubmissionInfo]:
    entries = await crud.group.get_submissions(group_id=group.id)  # type: ignore
    return [schemas.GroupSubmissionInfo.model_validate(e, from_attributes=True) for e in entries]


@router.delete("/{group_id}/submissions/{submission_id}", response_model=dict[str, str])
async def remove_submission(group: deps.GroupDep, submission_id: str) -> dict[str, str]:
    await crud.group.remove_submission(group_id=group.id, submission_id=submission_id)  # type: ignore
    return {"detail": f"Submission '{submission_id}' removed from judging group '{group.slug}'"}


@router.get("/{group_id}/statuses", response_model=list[schemas.SubmissionStatusInfo])
async def list_statuses(group: deps.GroupDep) -> list[schemas.SubmissionStatusInfo]:
    statuses = await crud.submission_status.list_by_group(group_id=group.id)  # type: ignore
    return await crud.submission_status.to_infos(statuses)


@router.get("/{group_id}/progress", response_model=schemas.GroupProgress)
async def get_group_progress(group: deps.GroupDep) -> schemas.GroupProgress:
    return await crud.progress.group_progress(group_id=group.id)  # type: ignore


@router.get("/{group_id}/judges", response_model=list[schemas.JudgeTrackingInfo])
async def list_judges(group: deps.GroupDep) -> list[schemas.JudgeTrackingInfo]:
    return await crud.progress.judge_tracking(group_id=group.id)  # type: ignore


@router.delete("/{group_id}/judges/{judge_id}", response_model=dict[str, str])
async def remove_judge(group: deps.GroupDep, judge_id: PydanticObjectId) -> dict[str, str]:
    judge = await crud.judge.get(judge_id)
    if judge is None or judge.group_id != group.id:
        raise crud.JudgeNotFoundError("Judge not found in judging group")
    await crud.judge.remove(id=judge_id)
    return {"detail": f"Judge '{judge.name}' removed from judging group '{group.slug}'"}


@router.get("/{group_id}/export", response_model=list[schemas.ExportRow])
async def export_scores(group: deps.GroupDep) -> list[schemas.ExportRow]:
    return await crud.export.rows_for_group(group_id=group.id)  # type: ignore


@router.get("/{group_id}/note-counts", response_model=dict[str, int])
async def note_counts(group: deps.GroupDep) -> dict[str, int]:
    return await crud.submission_note.count_by_submission(group_id=group.id)  # type: ignore


@router.get("/{group_id}/results", response_model=schemas.GroupResults)
async def get_results(group: deps.GroupDep) -> schemas.GroupResults:
    return await crud.progress.group_results(group_id=group.id)  # type: ignore


@router.get("/{group_id}/results/{submission_id}", response_model=schemas.SubmissionResults)
async def get_submission_results(group: deps.GroupDep, submission_id: str) -> schemas.SubmissionResults:
    return await crud.progress.submission_results(group_id=group.id, submission_id=submission_id)  # type: ignore
