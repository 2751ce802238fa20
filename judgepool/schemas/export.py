import datetime

from pydantic import BaseModel


class ExportRow(BaseModel):
    judge_name: str
    judge_email: str | None = None
    judge_username: str | None = None
    submission_title: str
    submission_slug: str | None = None
    criterion_question: str
    criterion_description: str | None = None
    score: int
    total_score_for_submission: int
    comment: str | None = None
    judge_notes: str = ""
    is_hidden: bool
    submitted_at: datetime.datetime
