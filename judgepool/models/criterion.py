from typing import Annotated

from beanie import Document, Indexed, PydanticObjectId
from pymongo import IndexModel


class JudgingCriterion(Document):
    group_id: Annotated[PydanticObjectId, Indexed()]
    question: str
    description: str | None = None
    weight: float = 1.0
    order: int = 0

    class Settings:
        name = "judging_criterion"
        indexes = [
            IndexModel(["group_id", "order"], name="criterion_group_order_index"),
        ]
