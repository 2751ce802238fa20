from .base import (  # noqa: I001
    AlreadyOwnedError,
    CRUDBase,
    CRUDError,
    CriterionInUseError,
    CriterionNotFoundError,
    DuplicateGroupError,
    GroupNotFoundError,
    IncompleteScoringError,
    InvalidGroupPasswordError,
    InvalidGroupSettingsError,
    InvalidInputError,
    InvalidJudgeNameError,
    InvalidNoteError,
    InvalidScoreError,
    InvalidTransitionError,
    JudgeNotFoundError,
    JudgingClosedError,
    NotFoundError,
    NotOwnerError,
    ScoreNotFoundError,
    SessionExpiredError,
    StaleNoteError,
    StatusConflictError,
    SubmissionNotFoundError,
)
from .crud_group import CRUDJudgingGroup, group
from .crud_criterion import criterion
from .crud_judge import judge
from .crud_score import judge_score, validate_score
from .crud_status import CRUDSubmissionStatus, submission_status
from .crud_progress import progress
from .crud_note import extract_mentions, submission_note
from .crud_export import export

__all__ = [
    "CRUDBase",
    "CRUDError",
    "CRUDJudgingGroup",
    "CRUDSubmissionStatus",
    "AlreadyOwnedError",
    "CriterionInUseError",
    "CriterionNotFoundError",
    "DuplicateGroupError",
    "GroupNotFoundError",
    "IncompleteScoringError",
    "InvalidGroupPasswordError",
    "InvalidGroupSettingsError",
    "InvalidInputError",
    "InvalidJudgeNameError",
    "InvalidNoteError",
    "InvalidScoreError",
    "InvalidTransitionError",
    "JudgeNotFoundError",
    "JudgingClosedError",
    "NotFoundError",
    "NotOwnerError",
    "ScoreNotFoundError",
    "SessionExpiredError",
    "StaleNoteError",
    "StatusConflictError",
    "SubmissionNotFoundError",
    "criterion",
    "export",
    "extract_mentions",
    "group",
    "judge",
    "judge_score",
    "progress",
    "submission_note",
    "submission_status",
    "validate_score",
]
