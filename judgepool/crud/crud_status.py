import logging
from collections.abc import Sequence
from typing import Any

from beanie import PydanticObjectId, UpdateResponse
from beanie.operators import NE, Eq, Inc, Or, Set

from judgepool import models, notifications, schemas
from judgepool.enums import NotificationType, SubmissionState
from judgepool.utils import utcnow

from .base import (
    AlreadyOwnedError,
    CRUDBase,
    IncompleteScoringError,
    InvalidTransitionError,
    NotOwnerError,
    SubmissionNotFoundError,
)
from .crud_criterion import criterion as crud_criterion
from .crud_group import group as crud_group
from .crud_judge import judge as crud_judge
from .crud_score import judge_score as crud_judge_score

logger = logging.getLogger(__name__)


class CRUDSubmissionStatus(CRUDBase[models.SubmissionStatus, schemas.SubmissionRef, schemas.SubmissionRef]):
    """Shared status record of every pool submission.

    Each transition is one `find_one_and_update` whose filter carries the precondition,
    so concurrent callers never overwrite each other. A transition that does not match
    re-reads the record only to pick the error to raise.
    """

    def _key(self, group_id: PydanticObjectId, submission_id: str) -> tuple[Any, Any]:
        return (self.model.group_id == group_id, self.model.submission_id == submission_id)

    async def _transition(
        self,
        filters: Sequence[Any],
        *,
        state: SubmissionState,
        owner_judge_id: PydanticObjectId | None,
        modified_by: PydanticObjectId | None,
    ) -> models.SubmissionStatus | None:
        return await self.model.find_one(*filters).update(
            Set(
                {
                    self.model.state: state,
                    self.model.owner_judge_id: owner_judge_id,
                    self.model.last_modified_by: modified_by,
                    self.model.last_modified_at: utcnow(),
                }
            ),
            Inc({self.model.version: 1}),
            response_type=UpdateResponse.NEW_DOCUMENT,
        )

    async def get_by_submission(
        self, *, group_id: PydanticObjectId, submission_id: str
    ) -> models.SubmissionStatus | None:
        return await self.model.find_one(*self._key(group_id, submission_id))

    async def get_or_raise(self, *, group_id: PydanticObjectId, submission_id: str) -> models.SubmissionStatus:
        status = await self.get_by_submission(group_id=group_id, submission_id=submission_id)
        if status is None:
            raise SubmissionNotFoundError("Submission not found in judging group")
        return status

    async def mark_complete(
        self, *, group_id: PydanticObjectId, submission_id: str, judge_id: PydanticObjectId
    ) -> models.SubmissionStatus:
        status = await self.get_or_raise(group_id=group_id, submission_id=submission_id)
        if status.state == SubmissionState.completed:
            if status.owner_judge_id == judge_id:
                return status
            raise AlreadyOwnedError("Submission was already completed by another judge")

        criteria_ids = await crud_criterion.get_ids_by_group(group_id=group_id)
        if not await crud_judge_score.is_fully_scored(
            judge_id=judge_id, submission_id=submission_id, criteria_ids=criteria_ids
        ):
            raise IncompleteScoringError("Score every criterion before completing the submission")

        updated = await self._transition(
            (
                *self._key(group_id, submission_id),
                Or(NE(self.model.state, SubmissionState.completed), Eq(self.model.owner_judge_id, judge_id)),
            ),
            state=SubmissionState.completed,
            owner_judge_id=judge_id,
            modified_by=judge_id,
        )
        if updated is None:
            current = await self.get_or_raise(group_id=group_id, submission_id=submission_id)
            if current.state == SubmissionState.completed and current.owner_judge_id == judge_id:
                return current
            raise AlreadyOwnedError("Submission was already completed by another judge")

        logger.info("Judge %s completed submission %s in group %s", judge_id, submission_id, group_id)
        await notifications.get_dispatcher().dispatch(
            schemas.NotificationEvent(
                type=NotificationType.submission_completed,
                group_id=group_id,
                submission_id=submission_id,
                judge_id=judge_id,
            )
        )
        return updated

    async def reopen(
        self, *, group_id: PydanticObjectId, submission_id: str, judge_id: PydanticObjectId
    ) -> models.SubmissionStatus:
        updated = await self._transition(
            (
                *self._key(group_id, submission_id),
                self.model.state == SubmissionState.completed,
                self.model.owner_judge_id == judge_id,
            ),
            state=SubmissionState.pending,
            owner_judge_id=None,
            modified_by=judge_id,
        )
        if updated is None:
            await self.get_or_raise(group_id=group_id, submission_id=submission_id)
            raise NotOwnerError("Only the judge who completed the submission can reopen it")
        logger.info("Judge %s reopened submission %s in group %s", judge_id, submission_id, group_id)
        return updated

    async def _toggle(
        self, *, group_id: PydanticObjectId, submission_id: str, judge_id: PydanticObjectId, state: SubmissionState
    ) -> models.SubmissionStatus:
        updated = await self._transition(
            (*self._key(group_id, submission_id), NE(self.model.state, SubmissionState.completed)),
            state=state,
            owner_judge_id=None,
            modified_by=judge_id,
        )
        if updated is None:
            current = await self.get_or_raise(group_id=group_id, submission_id=submission_id)
            if current.owner_judge_id == judge_id:
                raise InvalidTransitionError("Reopen the submission before changing its state")
            raise AlreadyOwnedError("Submission was already completed by another judge")
        logger.info("Judge %s set submission %s in group %s to %s", judge_id, submission_id, group_id, state.value)
        return updated

    async def set_skip(
        self, *, group_id: PydanticObjectId, submission_id: str, judge_id: PydanticObjectId
    ) -> models.SubmissionStatus:
        return await self._toggle(
            group_id=group_id, submission_id=submission_id, judge_id=judge_id, state=SubmissionState.skip
        )

    async def resume(
        self, *, group_id: PydanticObjectId, submission_id: str, judge_id: PydanticObjectId
    ) -> models.SubmissionStatus:
        return await self._toggle(
            group_id=group_id, submission_id=submission_id, judge_id=judge_id, state=SubmissionState.pending
        )

    async def reset_if_incomplete(
        self, *, group_id: PydanticObjectId, submission_id: str
    ) -> models.SubmissionStatus | None:
        """Move a completed submission back to pending once its owner lost full scoring."""
        status = await self.get_by_submission(group_id=group_id, submission_id=submission_id)
        if status is None or status.state != SubmissionState.completed or status.owner_judge_id is None:
            return status
        criteria_ids = await crud_criterion.get_ids_by_group(group_id=group_id)
        if await crud_judge_score.is_fully_scored(
            judge_id=status.owner_judge_id, submission_id=submission_id, criteria_ids=criteria_ids
        ):
            return status
        updated = await self._transition(
            (
                *self._key(group_id, submission_id),
                self.model.state == SubmissionState.completed,
                self.model.owner_judge_id == status.owner_judge_id,
            ),
            state=SubmissionState.pending,
            owner_judge_id=None,
            modified_by=None,
        )
        if updated is None:
            return await self.get_by_submission(group_id=group_id, submission_id=submission_id)
        logger.warning(
            "Submission %s in group %s went back to pending, judge %s no longer holds a full scoring",
            submission_id,
            group_id,
            status.owner_judge_id,
        )
        return updated

    async def reset_group_if_incomplete(self, *, group_id: PydanticObjectId) -> int:
        reset = 0
        completed = await self.model.find_many(
            self.model.group_id == group_id, self.model.state == SubmissionState.completed
        ).to_list()
        for status in completed:
            updated = await self.reset_if_incomplete(group_id=group_id, submission_id=status.submission_id)
            if updated is not None and updated.state == SubmissionState.pending:
                reset += 1
        return reset

    @staticmethod
    def is_visible_to(status: models.SubmissionStatus, judge_id: PydanticObjectId) -> bool:
        return status.state != SubmissionState.completed or status.owner_judge_id == judge_id

    is_editable_by = is_visible_to

    async def list_by_group(self, *, group_id: PydanticObjectId) -> list[models.SubmissionStatus]:
        return (
            await self.model.find_many(self.model.group_id == group_id)
            .sort(+self.model.submission_id)
            .to_list()
        )

    async def list_for_judge(
        self, *, group_id: PydanticObjectId, judge_id: PydanticObjectId
    ) -> list[models.SubmissionStatus]:
        return (
            await self.model.find_many(
                self.model.group_id == group_id,
                Or(NE(self.model.state, SubmissionState.completed), Eq(self.model.owner_judge_id, judge_id)),
            )
            .sort(+self.model.submission_id)
            .to_list()
        )

    async def to_infos(self, statuses: list[models.SubmissionStatus]) -> list[schemas.SubmissionStatusInfo]:
        names = await crud_judge.get_names(ids=[s.owner_judge_id for s in statuses if s.owner_judge_id is not None])
        return [
            schemas.SubmissionStatusInfo(
                submission_id=s.submission_id,
                state=s.state,
                owner_judge_id=s.owner_judge_id,
                owner_name=names.get(s.owner_judge_id) if s.owner_judge_id is not None else None,
                last_modified_at=s.last_modified_at,
                version=s.version,
            )
            for s in statuses
        ]

    async def status_for_judge(
        self, *, group_id: PydanticObjectId, submission_id: str, judge_id: PydanticObjectId
    ) -> schemas.JudgeSubmissionStatus:
        status = await self.get_or_raise(group_id=group_id, submission_id=submission_id)
        return await self.to_judge_status(status, judge_id)

    async def to_judge_status(
        self, status: models.SubmissionStatus, judge_id: PydanticObjectId
    ) -> schemas.JudgeSubmissionStatus:
        (info,) = await self.to_infos([status])
        return schemas.JudgeSubmissionStatus(
            **info.model_dump(),
            can_edit=self.is_editable_by(status, judge_id),
            owned_by_me=status.owner_judge_id == judge_id,
        )

    async def pool_for_judge(
        self, *, group_id: PydanticObjectId, judge_id: PydanticObjectId
    ) -> list[schemas.JudgeSubmissionInfo]:
        """Pool submissions visible to the judge, in the order they were added."""
        visible = {s.submission_id: s for s in await self.list_for_judge(group_id=group_id, judge_id=judge_id)}
        return [
            schemas.JudgeSubmissionInfo(
                submission_id=entry.submission_id,
                title=entry.title,
                slug=entry.slug,
                url=entry.url,
                state=visible[entry.submission_id].state,
                owned_by_me=visible[entry.submission_id].owner_judge_id == judge_id,
            )
            for entry in await crud_group.get_submissions(group_id=group_id)
            if entry.submission_id in visible
        ]


submission_status = CRUDSubmissionStatus(models.SubmissionStatus)
