from .criterion import CriteriaSaveRequest, CriterionInfo, CriterionSave
from .export import ExportRow
from .group import (
    GroupSubmissionInfo,
    JudgingGroupCreate,
    JudgingGroupInfo,
    JudgingGroupUpdate,
    PublicGroupInfo,
    SubmissionRef,
    SubmissionsAddRequest,
    SubmissionsAddResponse,
)
from .judge import HeartbeatRequest, JudgeInfo, JudgeRegisterRequest, JudgeSessionResponse, JudgeTrackingInfo
from .note import NoteCreateRequest, NoteInfo, NoteThread
from .notification import NotificationEvent
from .progress import GroupProgress, JudgeProgress, SubmissionProgress
from .results import (
    CriterionBreakdown,
    CriterionJudgeScore,
    CriterionScoreSummary,
    GroupResults,
    JudgeCriterionScore,
    JudgeScoreSummary,
    SubmissionRanking,
    SubmissionResults,
)
from .score import ScoreInfo, ScoreSubmitRequest, ScoreVisibilityRequest
from .status import JudgeSubmissionInfo, JudgeSubmissionStatus, SubmissionStatusInfo

__all__ = [
    "CriteriaSaveRequest",
    "CriterionInfo",
    "CriterionSave",
    "ExportRow",
    "GroupSubmissionInfo",
    "JudgingGroupCreate",
    "JudgingGroupInfo",
    "JudgingGroupUpdate",
    "PublicGroupInfo",
    "SubmissionRef",
    "SubmissionsAddRequest",
    "SubmissionsAddResponse",
    "HeartbeatRequest",
    "JudgeInfo",
    "JudgeRegisterRequest",
    "JudgeSessionResponse",
    "JudgeTrackingInfo",
    "NoteCreateRequest",
    "NoteInfo",
    "NoteThread",
    "NotificationEvent",
    "GroupProgress",
    "JudgeProgress",
    "SubmissionProgress",
    "CriterionBreakdown",
    "CriterionJudgeScore",
    "CriterionScoreSummary",
    "GroupResults",
    "JudgeCriterionScore",
    "JudgeScoreSummary",
    "SubmissionRanking",
    "SubmissionResults",
    "ScoreInfo",
    "ScoreSubmitRequest",
    "ScoreVisibilityRequest",
    "JudgeSubmissionInfo",
    "JudgeSubmissionStatus",
    "SubmissionStatusInfo",
]
