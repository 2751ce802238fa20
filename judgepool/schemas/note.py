import datetime

from beanie import PydanticObjectId
from pydantic import BaseModel


class NoteCreateRequest(BaseModel):
    content: str
    reply_to_id: PydanticObjectId | None = None

    model_config = {
        "json_schema_extra": {
            "example": {"content": "@grace can you double-check the demo video?", "reply_to_id": None},
        }
    }


class NoteInfo(BaseModel):
    id: PydanticObjectId
    judge_id: PydanticObjectId
    judge_name: str
    content: str
    reply_to_id: PydanticObjectId | None = None
    mentions: list[str] = []
    created_at: datetime.datetime


class NoteThread(BaseModel):
    note: NoteInfo
    replies: list[NoteInfo] = []
