from pydantic import BaseModel

from judgepool.enums import SubmissionState


class SubmissionProgress(BaseModel):
    submission_id: str
    title: str
    state: SubmissionState
    criteria_scored: int
    total_criteria: int
    is_fully_scored: bool
    owned_by_me: bool


class JudgeProgress(BaseModel):
    completed: int
    total: int
    percent: float
    per_submission: list[SubmissionProgress] = []


class GroupProgress(BaseModel):
    completed_by_anyone: int
    pending: int
    skipped: int
    total: int
    percent: float
