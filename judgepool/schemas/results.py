from beanie import PydanticObjectId
from pydantic import BaseModel

from judgepool.enums import SubmissionState


class SubmissionRanking(BaseModel):
    submission_id: str
    title: str
    slug: str | None = None
    state: SubmissionState
    total_score: int
    average_score: float
    score_count: int
    completion_percent: float
    max_possible_score: int


class CriterionBreakdown(BaseModel):
    criterion_id: PydanticObjectId
    question: str
    average_score: float
    score_count: int


class GroupResults(BaseModel):
    total_scores: int
    average_score: float | None = None
    judge_count: int
    submission_count: int
    criteria_count: int
    completion_percent: float
    rankings: list[SubmissionRanking] = []
    criteria_breakdown: list[CriterionBreakdown] = []


class JudgeCriterionScore(BaseModel):
    criterion_id: PydanticObjectId
    question: str
    score: int
    comment: str | None = None


class JudgeScoreSummary(BaseModel):
    judge_id: PydanticObjectId
    judge_name: str
    scores: list[JudgeCriterionScore]
    total: int
    average: float


class CriterionJudgeScore(BaseModel):
    judge_id: PydanticObjectId
    judge_name: str
    score: int
    comment: str | None = None


class CriterionScoreSummary(BaseModel):
    criterion_id: PydanticObjectId
    question: str
    scores: list[CriterionJudgeScore]
    average: float


class SubmissionResults(BaseModel):
    submission_id: str
    title: str
    slug: str | None = None
    url: str | None = None
    state: SubmissionState
    owner_name: str | None = None
    total_score: int
    average_score: float
    score_count: int
    max_possible_score: int
    by_judge: list[JudgeScoreSummary] = []
    by_criterion: list[CriterionScoreSummary] = []
