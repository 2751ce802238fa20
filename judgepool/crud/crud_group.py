import datetime
import logging
from typing import Any

from beanie import PydanticObjectId
from pymongo.errors import DuplicateKeyError

from judgepool import models, schemas, security
from judgepool.utils import generate_slug, utcnow

from .base import (
    CRUDBase,
    DuplicateGroupError,
    GroupNotFoundError,
    InvalidGroupPasswordError,
    InvalidGroupSettingsError,
    JudgingClosedError,
    SubmissionNotFoundError,
)

logger = logging.getLogger(__name__)


class CRUDJudgingGroup(CRUDBase[models.JudgingGroup, schemas.JudgingGroupCreate, schemas.JudgingGroupUpdate]):
    async def get_or_raise(self, id: PydanticObjectId) -> models.JudgingGroup:
        db_obj = await self.get(id)
        if db_obj is None:
            raise GroupNotFoundError("Judging group not found")
        return db_obj

    async def get_by_slug(self, *, slug: str) -> models.JudgingGroup | None:
        return await self.model.find_one(self.model.slug == slug)

    async def create(self, *, obj_in: schemas.JudgingGroupCreate) -> models.JudgingGroup:
        slug = generate_slug(obj_in.name) or "group"
        if await self.get_by_slug(slug=slug) is not None:
            slug = f"{slug}-{str(int(utcnow().timestamp()))[-5:]}"
        db_obj = self.model(
            name=obj_in.name,
            slug=slug,
            description=obj_in.description,
            is_public=obj_in.is_public,
            judge_password_hash=security.hash_password(obj_in.judge_password) if obj_in.judge_password else None,
            is_active=obj_in.is_active,
            start_date=obj_in.start_date,
            end_date=obj_in.end_date,
        )
        try:
            await db_obj.create()
        except DuplicateKeyError:
            raise DuplicateGroupError(f"A judging group with slug '{slug}' already exists")
        logger.info("Created judging group %s (%s)", db_obj.id, slug)
        return db_obj

    async def update(
        self, *, db_obj: models.JudgingGroup, obj_in: schemas.JudgingGroupUpdate | dict[str, Any]
    ) -> models.JudgingGroup:
        if isinstance(obj_in, dict):
            update_data = dict(obj_in)
        else:
            update_data = obj_in.model_dump(exclude_unset=True)
        if "judge_password" in update_data:
            password = update_data.pop("judge_password")
            update_data["judge_password_hash"] = security.hash_password(password) if password else None

        # Checked against the group as it will be stored, not just the fields being changed
        is_public = update_data.get("is_public", db_obj.is_public)
        password_hash = update_data.get("judge_password_hash", db_obj.judge_password_hash)
        if not is_public and password_hash is None:
            raise InvalidGroupSettingsError("A password-gated group needs a judge password")
        start_date = update_data.get("start_date", db_obj.start_date)
        end_date = update_data.get("end_date", db_obj.end_date)
        if start_date is not None and end_date is not None and end_date <= start_date:
            raise InvalidGroupSettingsError("The judging window must end after it starts")
        return await super().update(db_obj=db_obj, obj_in=update_data)

    async def remove(self, *, id: PydanticObjectId) -> models.JudgingGroup | None:
        db_obj = await self.get(id)
        if db_obj is None:
            return None
        # Dependents first, the group document goes last
        await models.JudgeScore.find_many(models.JudgeScore.group_id == id).delete()
        await models.SubmissionNote.find_many(models.SubmissionNote.group_id == id).delete()
        await models.SubmissionStatus.find_many(models.SubmissionStatus.group_id == id).delete()
        await models.GroupSubmission.find_many(models.GroupSubmission.group_id == id).delete()
        await models.JudgingCriterion.find_many(models.JudgingCriterion.group_id == id).delete()
        await models.Judge.find_many(models.Judge.group_id == id).delete()
        await db_obj.delete()
        logger.info("Deleted judging group %s", id)
        return db_obj

    @staticmethod
    def is_open(group: models.JudgingGroup, now: datetime.datetime | None = None) -> bool:
        now = now or utcnow()
        if not group.is_active:
            return False
        if group.start_date is not None and now < group.start_date:
            return False
        if group.end_date is not None and now > group.end_date:
            return False
        return True

    @staticmethod
    def check_judging_window(group: models.JudgingGroup, now: datetime.datetime | None = None) -> None:
        now = now or utcnow()
        if not group.is_active:
            raise JudgingClosedError("Judging for this group is not currently active")
        if group.start_date is not None and now < group.start_date:
            raise JudgingClosedError("Judging has not started yet")
        if group.end_date is not None and now > group.end_date:
            raise JudgingClosedError("Judging period has ended")

    @staticmethod
    def check_judge_password(group: models.JudgingGroup, password: str | None) -> None:
        if group.is_public or group.judge_password_hash is None:
            return
        if not password or not security.verify_password(password, group.judge_password_hash):
            raise InvalidGroupPasswordError("Invalid password for this judging group")

    async def add_submissions(
        self, *, group_id: PydanticObjectId, submissions: list[schemas.SubmissionRef]
    ) -> schemas.SubmissionsAddResponse:
        """Add submissions to the group pool, each starting out as `pending`."""
        await self.get_or_raise(group_id)
        added = 0
        skipped = 0
        errors: list[str] = []
        for submission in submissions:
            entry = models.GroupSubmission(
                group_id=group_id,
                submission_id=submission.submission_id,
                title=submission.title,
                slug=submission.slug,
                url=submission.url,
            )
            try:
                await entry.insert()
            except DuplicateKeyError:
                skipped += 1
                continue
            try:
                await models.SubmissionStatus(group_id=group_id, submission_id=submission.submission_id).insert()
            except DuplicateKeyError:
                # A status left behind by an earlier membership is reused as is
                errors.append(f"Submission {submission.submission_id} already had a status, kept it")
            added += 1
        logger.info("Added %d submissions to group %s (%d skipped)", added, group_id, skipped)
        return schemas.SubmissionsAddResponse(added=added, skipped=skipped, errors=errors)

    async def remove_submission(self, *, group_id: PydanticObjectId, submission_id: str) -> models.GroupSubmission:
        entry = await self.get_submission(group_id=group_id, submission_id=submission_id)
        if entry is None:
            raise SubmissionNotFoundError("Submission not found in judging group")
        await models.JudgeScore.find_many(
            models.JudgeScore.group_id == group_id, models.JudgeScore.submission_id == submission_id
        ).delete()
        await models.SubmissionNote.find_many(
            models.SubmissionNote.group_id == group_id, models.SubmissionNote.submission_id == submission_id
        ).delete()
        await models.SubmissionStatus.find_many(
            models.SubmissionStatus.group_id == group_id, models.SubmissionStatus.submission_id == submission_id
        ).delete()
        await entry.delete()
        return entry

    @staticmethod
    async def get_submission(*, group_id: PydanticObjectId, submission_id: str) -> models.GroupSubmission | None:
        return await models.GroupSubmission.find_one(
            models.GroupSubmission.group_id == group_id,
            models.GroupSubmission.submission_id == submission_id,
        )

    @staticmethod
    async def get_submissions(*, group_id: PydanticObjectId) -> list[models.GroupSubmission]:
        return (
            await models.GroupSubmission.find_many(models.GroupSubmission.group_id == group_id)
            .sort(+models.GroupSubmission.added_at, +models.GroupSubmission.id)
            .to_list()
        )

    @staticmethod
    async def count_submissions(*, group_id: PydanticObjectId) -> int:
        return await models.GroupSubmission.find_many(models.GroupSubmission.group_id == group_id).count()

    @staticmethod
    async def count_judges(*, group_id: PydanticObjectId) -> int:
        return await models.Judge.find_many(models.Judge.group_id == group_id).count()


group = CRUDJudgingGroup(models.JudgingGroup)
