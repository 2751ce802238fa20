import datetime

from beanie import PydanticObjectId
from pydantic import BaseModel, EmailStr


class JudgeRegisterRequest(BaseModel):
    name: str
    email: EmailStr | None = None
    password: str | None = None

    model_config = {
        "json_schema_extra": {
            "example": {"name": "Ada Lovelace", "email": "ada@example.com", "password": "let-me-judge"},
        }
    }


class JudgeSessionResponse(BaseModel):
    judge_id: PydanticObjectId
    group_id: PydanticObjectId
    name: str
    session_token: str


class JudgeInfo(BaseModel):
    id: PydanticObjectId
    group_id: PydanticObjectId
    name: str
    email: str | None = None
    last_active_at: datetime.datetime
    created_at: datetime.datetime

    class Config:
        from_attributes = True


class HeartbeatRequest(BaseModel):
    client_timestamp: datetime.datetime | None = None


class JudgeTrackingInfo(JudgeInfo):
    scores_count: int
    submissions_judged: int
    submissions_completed: int
    notes_count: int
    average_score: float | None = None
    last_score_at: datetime.datetime | None = None
