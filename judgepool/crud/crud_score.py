import logging
from typing import Any

from beanie import PydanticObjectId, UpdateResponse
from beanie.operators import In, Set
from pymongo.errors import DuplicateKeyError

from judgepool import models, notifications, schemas
from judgepool.config import settings
from judgepool.enums import NotificationType
from judgepool.utils import utcnow

from .base import CRUDBase, InvalidInputError, InvalidScoreError, ScoreNotFoundError, SubmissionNotFoundError
from .crud_criterion import criterion as crud_criterion
from .crud_group import group as crud_group
from .crud_judge import judge as crud_judge

logger = logging.getLogger(__name__)


def validate_score(score: Any) -> int:
    # bool is a subclass of int and is rejected explicitly
    if isinstance(score, bool) or not isinstance(score, int):
        raise InvalidScoreError("Score must be an integer")
    if not settings.min_score <= score <= settings.max_score:
        raise InvalidScoreError(f"Score must be between {settings.min_score} and {settings.max_score}")
    return score


class CRUDJudgeScore(CRUDBase[models.JudgeScore, schemas.ScoreSubmitRequest, schemas.ScoreSubmitRequest]):
    async def submit_score(
        self,
        *,
        judge: models.Judge,
        submission_id: str,
        criterion_id: PydanticObjectId,
        score: Any,
        comment: str | None = None,
    ) -> models.JudgeScore:
        score = validate_score(score)
        comment = comment.strip() if comment is not None else None
        if not comment:
            comment = None
        elif len(comment) > settings.max_comment_length:
            raise InvalidInputError(f"Comment must be at most {settings.max_comment_length} characters")

        await crud_criterion.get_in_group(group_id=judge.group_id, criterion_id=criterion_id)
        if await crud_group.get_submission(group_id=judge.group_id, submission_id=submission_id) is None:
            raise SubmissionNotFoundError("Submission not found in judging group")

        assert judge.id is not None
        now = utcnow()
        key = (
            self.model.judge_id == judge.id,
            self.model.submission_id == submission_id,
            self.model.criterion_id == criterion_id,
        )
        fields = {self.model.score: score, self.model.comment: comment, self.model.updated_at: now}
        db_obj = await self.model.find_one(*key).update(Set(fields), response_type=UpdateResponse.NEW_DOCUMENT)
        if db_obj is None:
            new_score = self.model(
                judge_id=judge.id,
                group_id=judge.group_id,
                submission_id=submission_id,
                criterion_id=criterion_id,
                score=score,
                comment=comment,
                created_at=now,
                updated_at=now,
            )
            try:
                db_obj = await new_score.insert()
            except DuplicateKeyError:
                db_obj = await self.model.find_one(*key).update(
                    Set(fields), response_type=UpdateResponse.NEW_DOCUMENT
                )
                if db_obj is None:
                    raise

        await crud_judge.mark_active(judge=judge)
        await notifications.get_dispatcher().dispatch(
            schemas.NotificationEvent(
                type=NotificationType.score_submitted,
                group_id=judge.group_id,
                submission_id=submission_id,
                judge_id=judge.id,
            )
        )
        return db_obj

    async def get_judge_scores(self, *, judge_id: PydanticObjectId, submission_id: str) -> list[models.JudgeScore]:
        scores = await self.model.find_many(
            self.model.judge_id == judge_id, self.model.submission_id == submission_id
        ).to_list()
        if not scores:
            return []
        criteria = await crud_criterion.get_by_group(group_id=scores[0].group_id)
        position = {c.id: i for i, c in enumerate(criteria)}
        return sorted(scores, key=lambda s: position.get(s.criterion_id, len(position)))

    async def is_fully_scored(
        self, *, judge_id: PydanticObjectId, submission_id: str, criteria_ids: set[PydanticObjectId]
    ) -> bool:
        if not criteria_ids:
            return False
        scored = await self.model.find_many(
            self.model.judge_id == judge_id,
            self.model.submission_id == submission_id,
            self.model.is_hidden == False,  # noqa: E712
            In(self.model.criterion_id, list(criteria_ids)),
        ).to_list()
        return {s.criterion_id for s in scored} >= criteria_ids

    async def get_by_judge_and_group(
        self, *, judge_id: PydanticObjectId, group_id: PydanticObjectId
    ) -> list[models.JudgeScore]:
        return await self.model.find_many(self.model.judge_id == judge_id, self.model.group_id == group_id).to_list()

    async def get_by_group(self, *, group_id: PydanticObjectId) -> list[models.JudgeScore]:
        return await self.model.find_many(self.model.group_id == group_id).to_list()

    async def set_hidden(self, *, score_id: PydanticObjectId, hidden: bool) -> models.JudgeScore:
        db_obj = await self.get(score_id)
        if db_obj is None:
            raise ScoreNotFoundError("Score not found")
        db_obj.is_hidden = hidden
        await db_obj.set({self.model.is_hidden: hidden})
        logger.info("Score %s is now %s", score_id, "hidden" if hidden else "visible")
        return db_obj

    async def remove(self, *, id: PydanticObjectId) -> models.JudgeScore:
        db_obj = await self.get(id)
        if db_obj is None:
            raise ScoreNotFoundError("Score not found")
        await db_obj.delete()
        logger.info("Deleted score %s of judge %s on submission %s", id, db_obj.judge_id, db_obj.submission_id)
        return db_obj


judge_score = CRUDJudgeScore(models.JudgeScore)
