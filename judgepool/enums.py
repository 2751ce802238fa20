import enum


class SubmissionState(str, enum.Enum):
    pending = "pending"
    completed = "completed"
    skip = "skip"


class NotificationType(str, enum.Enum):
    note_added = "note_added"
    score_submitted = "score_submitted"
    submission_completed = "submission_completed"
