import datetime
from typing import Annotated

from beanie import Document, Indexed, PydanticObjectId
from pydantic import Field
from pymongo import IndexModel

from judgepool.utils import utcnow


class GroupSubmission(Document):
    group_id: Annotated[PydanticObjectId, Indexed()]
    # Identifier of the submission in the external story catalog
    submission_id: str
    title: str
    slug: str | None = None
    url: str | None = None
    added_at: datetime.datetime = Field(default_factory=utcnow)

    class Settings:
        name = "group_submission"
        indexes = [
            IndexModel(["group_id", "submission_id"], unique=True, name="group_submission_unique_index"),
        ]
