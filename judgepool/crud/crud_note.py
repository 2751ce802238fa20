import logging
import re
from collections import defaultdict

from beanie import PydanticObjectId

from judgepool import models, notifications, schemas
from judgepool.config import settings
from judgepool.enums import NotificationType

from .base import CRUDBase, InvalidNoteError, StaleNoteError, SubmissionNotFoundError
from .crud_group import group as crud_group
from .crud_judge import judge as crud_judge

logger = logging.getLogger(__name__)

MENTION_PATTERN = re.compile(r"(?:^|\s)@([A-Za-z0-9_.]+)")
EXCERPT_LENGTH = 240


def extract_mentions(content: str) -> list[str]:
    mentions: list[str] = []
    for handle in MENTION_PATTERN.findall(content):
        # Trailing dots are sentence punctuation, not part of the handle
        handle = handle.rstrip(".")
        if handle and handle not in mentions:
            mentions.append(handle)
    return mentions


class CRUDSubmissionNote(CRUDBase[models.SubmissionNote, schemas.NoteCreateRequest, schemas.NoteCreateRequest]):
    async def add_note(
        self,
        *,
        group_id: PydanticObjectId,
        submission_id: str,
        judge_id: PydanticObjectId,
        content: str,
        reply_to_id: PydanticObjectId | None = None,
    ) -> models.SubmissionNote:
        content = content.strip()
        if not content:
            raise InvalidNoteError("Note cannot be empty")
        if len(content) > settings.max_note_length:
            raise InvalidNoteError(f"Note must be at most {settings.max_note_length} characters")
        if await crud_group.get_submission(group_id=group_id, submission_id=submission_id) is None:
            raise SubmissionNotFoundError("Submission not found in judging group")

        if reply_to_id is not None:
            parent = await self.get(reply_to_id)
            if parent is None or parent.group_id != group_id or parent.submission_id != submission_id:
                raise StaleNoteError("The note you are replying to no longer exists")
            # Threads are two levels deep, a reply to a reply joins the top-level thread
            reply_to_id = parent.reply_to_id or parent.id

        mentions = extract_mentions(content)
        note = await self.model(
            group_id=group_id,
            submission_id=submission_id,
            judge_id=judge_id,
            content=content,
            reply_to_id=reply_to_id,
            mentions=mentions,
        ).insert()

        await notifications.get_dispatcher().dispatch(
            schemas.NotificationEvent(
                type=NotificationType.note_added,
                group_id=group_id,
                submission_id=submission_id,
                judge_id=judge_id,
                note_id=note.id,
                mentions=mentions,
                excerpt=content[:EXCERPT_LENGTH],
            )
        )
        return note

    async def list_notes(self, *, group_id: PydanticObjectId, submission_id: str) -> list[schemas.NoteThread]:
        notes = (
            await self.model.find_many(self.model.group_id == group_id, self.model.submission_id == submission_id)
            .sort(+self.model.created_at, +self.model.id)
            .to_list()
        )
        names = await crud_judge.get_names(ids=[n.judge_id for n in notes])

        def to_info(note: models.SubmissionNote) -> schemas.NoteInfo:
            return schemas.NoteInfo(
                id=note.id,  # type: ignore
                judge_id=note.judge_id,
                judge_name=names.get(note.judge_id, "unknown"),
                content=note.content,
                reply_to_id=note.reply_to_id,
                mentions=note.mentions,
                created_at=note.created_at,
            )

        replies: dict[PydanticObjectId, list[schemas.NoteInfo]] = defaultdict(list)
        for note in notes:
            if note.reply_to_id is not None:
                replies[note.reply_to_id].append(to_info(note))
        return [
            schemas.NoteThread(note=to_info(note), replies=replies[note.id])  # type: ignore
            for note in notes
            if note.reply_to_id is None
        ]

    async def count_by_submission(self, *, group_id: PydanticObjectId) -> dict[str, int]:
        counts: dict[str, int] = defaultdict(int)
        for note in await self.get_by_group(group_id=group_id):
            counts[note.submission_id] += 1
        return dict(counts)

    async def get_by_group(self, *, group_id: PydanticObjectId) -> list[models.SubmissionNote]:
        return (
            await self.model.find_many(self.model.group_id == group_id)
            .sort(+self.model.created_at, +self.model.id)
            .to_list()
        )


submission_note = CRUDSubmissionNote(models.SubmissionNote)
