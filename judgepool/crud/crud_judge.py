import datetime
import logging
from typing import Any

from beanie import PydanticObjectId, UpdateResponse
from beanie.operators import In, Inc, Set
from pymongo.errors import DuplicateKeyError

from judgepool import models, schemas, security
from judgepool.config import settings
from judgepool.enums import SubmissionState
from judgepool.utils import to_naive_utc, utcnow

from .base import CRUDBase, InvalidJudgeNameError, JudgeNotFoundError, SessionExpiredError
from .crud_group import group as crud_group

logger = logging.getLogger(__name__)


class CRUDJudge(CRUDBase[models.Judge, schemas.JudgeRegisterRequest, schemas.JudgeRegisterRequest]):
    async def register(
        self,
        *,
        group_id: PydanticObjectId,
        name: str,
        email: str | None = None,
        password: str | None = None,
    ) -> tuple[models.Judge, str]:
        """Register a judge in a group, or resume the judge with the same normalized name.

        Every call issues a fresh session token, which replaces the previous one.
        """
        normalized_name = security.normalize_judge_name(name)
        if len(normalized_name) < settings.judge_name_min_length:
            raise InvalidJudgeNameError(
                f"Judge name must contain at least {settings.judge_name_min_length} letters"
            )
        group = await crud_group.get_or_raise(group_id)
        crud_group.check_judging_window(group)
        crud_group.check_judge_password(group, password)

        identity_key = security.derive_judge_key(group_id, normalized_name)
        token = security.create_session_token()
        now = utcnow()
        fields: dict[Any, Any] = {self.model.session_token: token, self.model.last_active_at: now}
        if email is not None:
            fields[self.model.email] = email

        judge = await self._resume(identity_key, fields)
        if judge is None:
            new_judge = self.model(
                group_id=group_id,
                name=normalized_name,
                identity_key=identity_key,
                email=email,
                session_token=token,
                last_active_at=now,
                created_at=now,
            )
            try:
                judge = await new_judge.insert()
                logger.info("Registered judge %s in group %s", judge.id, group_id)
            except DuplicateKeyError:
                # A concurrent registration with the same name won the insert
                judge = await self._resume(identity_key, fields)
                if judge is None:
                    raise
        else:
            logger.info("Judge %s resumed a session in group %s", judge.id, group_id)
        return judge, token

    async def _resume(self, identity_key: str, fields: dict[Any, Any]) -> models.Judge | None:
        return await self.model.find_one(self.model.identity_key == identity_key).update(
            Set(fields), response_type=UpdateResponse.NEW_DOCUMENT
        )

    async def get_by_token(self, *, token: str) -> models.Judge | None:
        return await self.model.find_one(self.model.session_token == token)

    async def validate_session(self, *, token: str) -> models.Judge:
        judge = await self.get_by_token(token=token)
        if judge is None:
            raise SessionExpiredError("Session is not valid, please register again")
        group = await models.JudgingGroup.get(judge.group_id)
        if group is None or not group.is_active:
            raise SessionExpiredError("Judging group is no longer active")
        now = utcnow()
        if group.end_date is not None and now > group.end_date:
            raise SessionExpiredError("Judging period has ended")
        if settings.session_idle_timeout is not None:
            if now - judge.last_active_at > datetime.timedelta(seconds=settings.session_idle_timeout):
                raise SessionExpiredError("Session expired after inactivity, please register again")
        return judge

    async def heartbeat(self, *, token: str, client_timestamp: datetime.datetime | None = None) -> models.Judge:
        judge = await self.validate_session(token=token)
        now = utcnow()
        if now - judge.last_active_at < datetime.timedelta(seconds=settings.heartbeat_min_interval):
            return judge
        judge.last_active_at = now
        judge.last_client_timestamp = to_naive_utc(client_timestamp)
        await judge.set(
            {
                self.model.last_active_at: judge.last_active_at,
                self.model.last_client_timestamp: judge.last_client_timestamp,
            }
        )
        return judge

    async def mark_active(self, *, judge: models.Judge) -> None:
        judge.last_active_at = utcnow()
        await judge.set({self.model.last_active_at: judge.last_active_at})

    async def list_by_group(self, *, group_id: PydanticObjectId) -> list[models.Judge]:
        return await self.model.find_many(self.model.group_id == group_id).sort(+self.model.name).to_list()

    async def get_names(self, *, ids: list[PydanticObjectId]) -> dict[PydanticObjectId, str]:
        if not ids:
            return {}
        judges = await self.model.find_many(In(self.model.id, list(set(ids)))).to_list()
        return {j.id: j.name for j in judges}  # type: ignore

    async def remove(self, *, id: PydanticObjectId) -> models.Judge:
        judge = await self.get(id)
        if judge is None:
            raise JudgeNotFoundError("Judge not found")
        await models.JudgeScore.find_many(models.JudgeScore.judge_id == id).delete()
        own_notes = await models.SubmissionNote.find_many(models.SubmissionNote.judge_id == id).to_list()
        thread_ids = [note.id for note in own_notes if note.reply_to_id is None]
        if thread_ids:
            # Replies of other judges go with the thread they answered
            await models.SubmissionNote.find_many(In(models.SubmissionNote.reply_to_id, thread_ids)).delete()
        await models.SubmissionNote.find_many(models.SubmissionNote.judge_id == id).delete()
        await models.SubmissionStatus.find_many(models.SubmissionStatus.owner_judge_id == id).update(
            Set(
                {
                    models.SubmissionStatus.state: SubmissionState.pending,
                    models.SubmissionStatus.owner_judge_id: None,
                    models.SubmissionStatus.last_modified_by: None,
                    models.SubmissionStatus.last_modified_at: utcnow(),
                }
            ),
            Inc({models.SubmissionStatus.version: 1}),
        )
        await judge.delete()
        logger.info("Removed judge %s from group %s", id, judge.group_id)
        return judge


judge = CRUDJudge(models.Judge)
