from collections import defaultdict

from beanie import PydanticObjectId

from judgepool import schemas

from .crud_criterion import criterion as crud_criterion
from .crud_group import group as crud_group
from .crud_judge import judge as crud_judge
from .crud_note import submission_note as crud_submission_note
from .crud_score import judge_score as crud_judge_score


class CRUDExport:
    async def rows_for_group(self, *, group_id: PydanticObjectId) -> list[schemas.ExportRow]:
        """One row per score of the group, hidden ones included and flagged.

        Rows are sorted by judge name, then newest score first. `judge_notes` holds the
        judge's top-level notes on the submission, oldest first.
        """
        await crud_group.get_or_raise(group_id)
        scores = await crud_judge_score.get_by_group(group_id=group_id)
        judges = {j.id: j for j in await crud_judge.list_by_group(group_id=group_id)}
        submissions = {s.submission_id: s for s in await crud_group.get_submissions(group_id=group_id)}
        criteria = {c.id: c for c in await crud_criterion.get_by_group(group_id=group_id)}

        totals: dict[tuple[PydanticObjectId, str], int] = defaultdict(int)
        for score in scores:
            if not score.is_hidden:
                totals[(score.judge_id, score.submission_id)] += score.score

        notes: dict[tuple[PydanticObjectId, str], list[str]] = defaultdict(list)
        for note in await crud_submission_note.get_by_group(group_id=group_id):
            if note.reply_to_id is None:
                notes[(note.judge_id, note.submission_id)].append(
                    f"[{note.created_at.strftime('%b %d, %H:%M')}] {note.content}"
                )

        rows = []
        for score in scores:
            judge = judges.get(score.judge_id)
            submission = submissions.get(score.submission_id)
            criterion = criteria.get(score.criterion_id)
            if judge is None or submission is None or criterion is None:
                continue
            rows.append(
                schemas.ExportRow(
                    judge_name=judge.name,
                    judge_email=judge.email,
                    judge_username=None,
                    submission_title=submission.title,
                    submission_slug=submission.slug,
                    criterion_question=criterion.question,
                    criterion_description=criterion.description,
                    score=score.score,
                    total_score_for_submission=totals[(score.judge_id, score.submission_id)],
                    comment=score.comment,
                    judge_notes=" | ".join(notes[(score.judge_id, score.submission_id)]),
                    is_hidden=score.is_hidden,
                    submitted_at=score.updated_at,
                )
            )
        rows.sort(key=lambda r: r.submitted_at, reverse=True)
        rows.sort(key=lambda r: r.judge_name)
        return rows


export = CRUDExport()
