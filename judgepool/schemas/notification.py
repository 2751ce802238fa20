import datetime

from beanie import PydanticObjectId
from pydantic import BaseModel, Field

from judgepool.enums import NotificationType
from judgepool.utils import utcnow


class NotificationEvent(BaseModel):
    type: NotificationType
    group_id: PydanticObjectId
    submission_id: str
    judge_id: PydanticObjectId
    note_id: PydanticObjectId | None = None
    mentions: list[str] = []
    # Excerpt of the note that triggered the event, trimmed for digests
    excerpt: str | None = None
    timestamp: datetime.datetime = Field(default_factory=utcnow)
