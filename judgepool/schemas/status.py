import datetime

from beanie import PydanticObjectId
from pydantic import BaseModel

from judgepool.enums import SubmissionState


class SubmissionStatusInfo(BaseModel):
    submission_id: str
    state: SubmissionState
    owner_judge_id: PydanticObjectId | None = None
    owner_name: str | None = None
    last_modified_at: datetime.datetime
    version: int


class JudgeSubmissionStatus(SubmissionStatusInfo):
    can_edit: bool
    owned_by_me: bool


class JudgeSubmissionInfo(BaseModel):
    submission_id: str
    title: str
    slug: str | None = None
    url: str | None = None
    state: SubmissionState
    owned_by_me: bool
