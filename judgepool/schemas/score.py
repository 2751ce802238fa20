import datetime

from beanie import PydanticObjectId
from pydantic import BaseModel, StrictInt


class ScoreSubmitRequest(BaseModel):
    criterion_id: PydanticObjectId
    score: StrictInt
    comment: str | None = None

    model_config = {
        "json_schema_extra": {
            "example": {"criterion_id": "5eb7cf5a86d9755df3a6c593", "score": 8, "comment": "Great demo"},
        }
    }


class ScoreInfo(BaseModel):
    criterion_id: PydanticObjectId
    score: StrictInt
    comment: str | None = None
    updated_at: datetime.datetime


class ScoreVisibilityRequest(BaseModel):
    is_hidden: bool
