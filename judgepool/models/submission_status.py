import datetime
from typing import Annotated

from beanie import Document, Indexed, PydanticObjectId
from pydantic import Field
from pymongo import IndexModel

from judgepool.enums import SubmissionState
from judgepool.utils import utcnow


class SubmissionStatus(Document):
    """Shared status of one submission within one group.

    All judges of the group read and write the same document, so every change goes
    through a conditional update in `crud.submission_status`.
    """

    group_id: Annotated[PydanticObjectId, Indexed()]
    submission_id: str
    state: SubmissionState = SubmissionState.pending
    owner_judge_id: PydanticObjectId | None = None
    last_modified_by: PydanticObjectId | None = None
    last_modified_at: datetime.datetime = Field(default_factory=utcnow)
    version: int = 0

    class Settings:
        name = "submission_status"
        indexes = [
            IndexModel(["group_id", "submission_id"], unique=True, name="status_group_submission_unique_index"),
            IndexModel(["group_id", "owner_judge_id"], name="status_group_owner_index"),
        ]
