import datetime

from beanie import Document, PydanticObjectId
from pydantic import Field
from pymongo import IndexModel

from judgepool.utils import utcnow


class SubmissionNote(Document):
    group_id: PydanticObjectId
    submission_id: str
    judge_id: PydanticObjectId
    content: str
    # Always points at a top-level note, replies are never nested deeper
    reply_to_id: PydanticObjectId | None = None
    mentions: list[str] = []
    created_at: datetime.datetime = Field(default_factory=utcnow)

    class Settings:
        name = "submission_note"
        indexes = [
            IndexModel(["group_id", "submission_id", "created_at"], name="note_group_submission_created_index"),
        ]
