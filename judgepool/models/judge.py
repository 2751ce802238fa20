import datetime
from typing import Annotated

from beanie import Document, Indexed, PydanticObjectId
from pydantic import Field
from pymongo import IndexModel

from judgepool.utils import utcnow


class Judge(Document):
    group_id: Annotated[PydanticObjectId, Indexed()]
    name: str
    # sha256 of (group id, normalized name), see security.derive_judge_key
    identity_key: Indexed(str, unique=True)  # type: ignore
    email: str | None = None
    session_token: Indexed(str, unique=True)  # type: ignore
    last_active_at: datetime.datetime = Field(default_factory=utcnow)
    last_client_timestamp: datetime.datetime | None = None
    created_at: datetime.datetime = Field(default_factory=utcnow)

    class Settings:
        name = "judge"
        indexes = [
            IndexModel(["group_id", "name"], unique=True, name="judge_group_name_unique_index"),
        ]
