import datetime
from typing import Annotated

from beanie import PydanticObjectId
from pydantic import BaseModel, StringConstraints, field_validator, model_validator

from judgepool.utils import to_naive_utc

GroupName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=128)]


class JudgingGroupBase(BaseModel):
    description: str | None = None
    is_public: bool = True
    is_active: bool = True
    start_date: datetime.datetime | None = None
    end_date: datetime.datetime | None = None

    @field_validator("start_date", "end_date")
    @classmethod
    def _as_naive_utc(cls, value: datetime.datetime | None) -> datetime.datetime | None:
        return to_naive_utc(value)

    @model_validator(mode="after")
    def check_window(self) -> "JudgingGroupBase":
        if self.start_date is not None and self.end_date is not None and self.end_date <= self.start_date:
            raise ValueError("The judging window must end after it starts")
        return self


class JudgingGroupCreate(JudgingGroupBase):
    name: GroupName
    judge_password: str | None = None

    @model_validator(mode="after")
    def check_password(self) -> "JudgingGroupCreate":
        if not self.is_public and not self.judge_password:
            raise ValueError("A password-gated group needs a judge password")
        return self

    model_config = {
        "json_schema_extra": {
            "example": {
                "name": "Spring Hackathon 2025",
                "description": "Final round",
                "is_public": False,
                "judge_password": "let-me-judge",
                "end_date": "2025-04-30T23:59:59Z",
            },
        }
    }


class JudgingGroupUpdate(BaseModel):
    name: GroupName | None = None
    description: str | None = None
    is_public: bool | None = None
    is_active: bool | None = None
    judge_password: str | None = None
    start_date: datetime.datetime | None = None
    end_date: datetime.datetime | None = None

    @field_validator("start_date", "end_date")
    @classmethod
    def _as_naive_utc(cls, value: datetime.datetime | None) -> datetime.datetime | None:
        return to_naive_utc(value)


class JudgingGroupInfo(JudgingGroupBase):
    id: PydanticObjectId
    name: str
    slug: str
    submission_count: int = 0
    judge_count: int = 0


class PublicGroupInfo(BaseModel):
    id: PydanticObjectId
    name: str
    slug: str
    description: str | None
    is_public: bool
    is_open: bool
    start_date: datetime.datetime | None
    end_date: datetime.datetime | None


class SubmissionRef(BaseModel):
    submission_id: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
    title: str
    slug: str | None = None
    url: str | None = None


class SubmissionsAddRequest(BaseModel):
    submissions: list[SubmissionRef]


class SubmissionsAddResponse(BaseModel):
    added: int
    skipped: int
    errors: list[str] = []


class GroupSubmissionInfo(SubmissionRef):
    added_at: datetime.datetime
