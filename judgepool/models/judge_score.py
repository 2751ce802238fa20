import datetime
from typing import Annotated

from beanie import Document, Indexed, PydanticObjectId
from pydantic import Field
from pymongo import IndexModel

from judgepool.utils import utcnow


class JudgeScore(Document):
    judge_id: Annotated[PydanticObjectId, Indexed()]
    group_id: PydanticObjectId
    submission_id: str
    criterion_id: PydanticObjectId
    score: int
    comment: str | None = None
    is_hidden: bool = False
    created_at: datetime.datetime = Field(default_factory=utcnow)
    updated_at: datetime.datetime = Field(default_factory=utcnow)

    class Settings:
        name = "judge_score"
        indexes = [
            IndexModel(
                ["judge_id", "submission_id", "criterion_id"],
                unique=True,
                name="score_judge_submission_criterion_unique_index",
            ),
            IndexModel(["group_id", "submission_id"], name="score_group_submission_index"),
            IndexModel(["criterion_id"], name="score_criterion_index"),
        ]
