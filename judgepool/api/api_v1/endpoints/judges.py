from fastapi import APIRouter, Depends

from judgepool import crud, models, schemas
from judgepool.api import deps
from judgepool.config import settings

router = APIRouter()


def _judge_info(judge: models.Judge) -> schemas.JudgeInfo:
    return schemas.JudgeInfo.model_validate(judge, from_attributes=True)


@router.get("/groups/by-slug/{slug}", response_model=schemas.PublicGroupInfo)
async def get_public_group(slug: str) -> schemas.PublicGroupInfo:
    group = await crud.group.get_by_slug(slug=slug)
    if group is None:
        raise crud.GroupNotFoundError("Judging group not found")
    return schemas.PublicGroupInfo(
        id=group.id,  # type: ignore
        name=group.name,
        slug=group.slug,
        description=group.description,
        is_public=group.is_public,
        is_open=crud.group.is_open(group),
        start_date=group.start_date,
        end_date=group.end_date,
    )


@router.post(
    "/groups/{group_id}/register",
    response_model=schemas.JudgeSessionResponse,
    dependencies=[Depends(deps.rate_limit_client(settings.register_rate_limit))],
)
async def register(group: deps.GroupDep, register_in: schemas.JudgeRegisterRequest) -> schemas.JudgeSessionResponse:
    judge, token = await crud.judge.register(
        group_id=group.id,  # type: ignore
        name=register_in.name,
        email=register_in.email,
        password=register_in.password,
    )
    return schemas.JudgeSessionResponse(
        judge_id=judge.id,  # type: ignore
        group_id=judge.group_id,
        name=judge.name,
        session_token=token,
    )


@router.get("/session", response_model=schemas.JudgeInfo)
async def get_session(judge: deps.CurrentJudgeDep) -> schemas.JudgeInfo:
    return _judge_info(judge)


@router.post("/heartbeat", response_model=schemas.JudgeInfo)
async def heartbeat(token: deps.SessionTokenDep, heartbeat_in: schemas.HeartbeatRequest) -> schemas.JudgeInfo:
    judge = await crud.judge.heartbeat(token=token, client_timestamp=heartbeat_in.client_timestamp)
    return _judge_info(judge)


@router.get("/progress", response_model=schemas.JudgeProgress)
async def get_progress(judge: deps.CurrentJudgeDep) -> schemas.JudgeProgress:
    return await crud.progress.judge_progress(judge_id=judge.id, group_id=judge.group_id)  # type: ignore


@router.get("/group-progress", response_model=schemas.GroupProgress)
async def get_group_progress(judge: deps.CurrentJudgeDep) -> schemas.GroupProgress:
    return await crud.progress.group_progress(group_id=judge.group_id)


@router.get("/criteria", response_model=list[schemas.CriterionInfo])
async def list_criteria(judge: deps.CurrentJudgeDep) -> list[schemas.CriterionInfo]:
    criteria = await crud.criterion.get_by_group(group_id=judge.group_id)
    return [schemas.CriterionInfo.model_validate(c, from_attributes=True) for c in criteria]
