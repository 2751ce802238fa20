from typing import Annotated

from beanie import PydanticObjectId
from pydantic import BaseModel, Field, StringConstraints

Question = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=500)]


class CriterionBase(BaseModel):
    question: Question
    description: str | None = None
    weight: Annotated[float, Field(gt=0)] = 1.0
    order: int = 0


class CriterionSave(CriterionBase):
    # Existing criteria keep their id, new ones leave it empty
    id: PydanticObjectId | None = None


class CriteriaSaveRequest(BaseModel):
    criteria: list[CriterionSave]

    model_config = {
        "json_schema_extra": {
            "example": {
                "criteria": [
                    {"question": "How original is the idea?", "order": 0},
                    {"question": "How polished is the execution?", "description": "UX and stability", "order": 1},
                ]
            },
        }
    }


class CriterionInfo(CriterionBase):
    id: PydanticObjectId
    group_id: PydanticObjectId

    class Config:
        from_attributes = True
