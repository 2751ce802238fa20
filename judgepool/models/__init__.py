from .judging_group import JudgingGroup  # noqa: I001
from .group_submission import GroupSubmission
from .criterion import JudgingCriterion
from .judge import Judge
from .submission_status import SubmissionStatus
from .judge_score import JudgeScore
from .submission_note import SubmissionNote

__all__ = [
    "JudgingGroup",
    "GroupSubmission",
    "JudgingCriterion",
    "Judge",
    "SubmissionStatus",
    "JudgeScore",
    "SubmissionNote",
]

DB_MODELS = [
    JudgingGroup,
    GroupSubmission,
    JudgingCriterion,
    Judge,
    SubmissionStatus,
    JudgeScore,
    SubmissionNote,
]
