import datetime

from beanie import Document, Indexed
from pydantic import Field

from judgepool.utils import utcnow


class JudgingGroup(Document):
    name: str
    slug: Indexed(str, unique=True)  # type: ignore
    description: str | None = None
    is_public: bool = True
    judge_password_hash: str | None = None
    is_active: bool = True
    start_date: datetime.datetime | None = None
    end_date: datetime.datetime | None = None
    created_at: datetime.datetime = Field(default_factory=utcnow)

    class Settings:
        name = "judging_group"
