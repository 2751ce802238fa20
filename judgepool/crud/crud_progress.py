from collections import defaultdict

from beanie import PydanticObjectId

from judgepool import models, schemas
from judgepool.config import settings
from judgepool.enums import SubmissionState
from judgepool.utils import percentage

from .base import SubmissionNotFoundError
from .crud_criterion import criterion as crud_criterion
from .crud_group import group as crud_group
from .crud_judge import judge as crud_judge
from .crud_score import judge_score as crud_judge_score
from .crud_status import submission_status as crud_submission_status


class CRUDProgress:
    """Progress metrics, recomputed from statuses, pool membership and scores on every call."""

    async def judge_progress(self, *, judge_id: PydanticObjectId, group_id: PydanticObjectId) -> schemas.JudgeProgress:
        pool = await crud_group.get_submissions(group_id=group_id)
        statuses = {s.submission_id: s for s in await crud_submission_status.list_by_group(group_id=group_id)}
        criteria_ids = await crud_criterion.get_ids_by_group(group_id=group_id)
        scored: dict[str, set[PydanticObjectId]] = defaultdict(set)
        for score in await crud_judge_score.get_by_judge_and_group(judge_id=judge_id, group_id=group_id):
            if not score.is_hidden and score.criterion_id in criteria_ids:
                scored[score.submission_id].add(score.criterion_id)

        per_submission = []
        for entry in pool:
            status = statuses.get(entry.submission_id)
            if status is None or not crud_submission_status.is_visible_to(status, judge_id):
                continue
            criteria_scored = len(scored[entry.submission_id])
            per_submission.append(
                schemas.SubmissionProgress(
                    submission_id=entry.submission_id,
                    title=entry.title,
                    state=status.state,
                    criteria_scored=criteria_scored,
                    total_criteria=len(criteria_ids),
                    is_fully_scored=bool(criteria_ids) and criteria_scored == len(criteria_ids),
                    owned_by_me=status.owner_judge_id == judge_id,
                )
            )
        completed = sum(1 for p in per_submission if p.owned_by_me)
        total = len(per_submission)
        return schemas.JudgeProgress(
            completed=completed, total=total, percent=percentage(completed, total), per_submission=per_submission
        )

    async def group_progress(self, *, group_id: PydanticObjectId) -> schemas.GroupProgress:
        pool_ids = {entry.submission_id for entry in await crud_group.get_submissions(group_id=group_id)}
        counts = {state: 0 for state in SubmissionState}
        for status in await crud_submission_status.list_by_group(group_id=group_id):
            if status.submission_id in pool_ids:
                counts[status.state] += 1
        total = len(pool_ids)
        completed = counts[SubmissionState.completed]
        return schemas.GroupProgress(
            completed_by_anyone=completed,
            pending=counts[SubmissionState.pending],
            skipped=counts[SubmissionState.skip],
            total=total,
            percent=percentage(completed, total),
        )

    async def judge_tracking(self, *, group_id: PydanticObjectId) -> list[schemas.JudgeTrackingInfo]:
        judges = await crud_judge.list_by_group(group_id=group_id)
        scores = await crud_judge_score.get_by_group(group_id=group_id)
        statuses = await crud_submission_status.list_by_group(group_id=group_id)
        notes = await models.SubmissionNote.find_many(models.SubmissionNote.group_id == group_id).to_list()

        scores_by_judge: dict[PydanticObjectId, list[models.JudgeScore]] = defaultdict(list)
        for score in scores:
            scores_by_judge[score.judge_id].append(score)
        completed_by_judge: dict[PydanticObjectId, int] = defaultdict(int)
        for status in statuses:
            if status.state == SubmissionState.completed and status.owner_judge_id is not None:
                completed_by_judge[status.owner_judge_id] += 1
        notes_by_judge: dict[PydanticObjectId, int] = defaultdict(int)
        for note in notes:
            notes_by_judge[note.judge_id] += 1

        tracking = []
        for judge in judges:
            assert judge.id is not None
            judge_scores = scores_by_judge[judge.id]
            tracking.append(
                schemas.JudgeTrackingInfo(
                    id=judge.id,
                    group_id=judge.group_id,
                    name=judge.name,
                    email=judge.email,
                    last_active_at=judge.last_active_at,
                    created_at=judge.created_at,
                    scores_count=len(judge_scores),
                    submissions_judged=len({s.submission_id for s in judge_scores}),
                    submissions_completed=completed_by_judge[judge.id],
                    notes_count=notes_by_judge[judge.id],
                    average_score=(
                        round(sum(s.score for s in judge_scores) / len(judge_scores), 2) if judge_scores else None
                    ),
                    last_score_at=max((s.updated_at for s in judge_scores), default=None),
                )
            )
        return tracking

    async def group_results(self, *, group_id: PydanticObjectId) -> schemas.GroupResults:
        """Rankings by total score and a per-criterion breakdown. Hidden scores are left out."""
        pool = await crud_group.get_submissions(group_id=group_id)
        criteria = await crud_criterion.get_by_group(group_id=group_id)
        judge_count = await crud_group.count_judges(group_id=group_id)
        statuses = {s.submission_id: s for s in await crud_submission_status.list_by_group(group_id=group_id)}
        scores = await self._visible_scores(group_id=group_id, criteria=criteria)

        by_submission: dict[str, list[int]] = defaultdict(list)
        by_criterion: dict[PydanticObjectId, list[int]] = defaultdict(list)
        for score in scores:
            by_submission[score.submission_id].append(score.score)
            by_criterion[score.criterion_id].append(score.score)

        expected_per_submission = judge_count * len(criteria)
        rankings = []
        for entry in pool:
            values = by_submission[entry.submission_id]
            status = statuses.get(entry.submission_id)
            rankings.append(
                schemas.SubmissionRanking(
                    submission_id=entry.submission_id,
                    title=entry.title,
                    slug=entry.slug,
                    state=status.state if status is not None else SubmissionState.pending,
                    total_score=sum(values),
                    average_score=_average(values),
                    score_count=len(values),
                    completion_percent=percentage(len(values), expected_per_submission),
                    max_possible_score=expected_per_submission * settings.max_score,
                )
            )
        rankings.sort(key=lambda r: r.total_score, reverse=True)

        return schemas.GroupResults(
            total_scores=len(scores),
            average_score=_average([s.score for s in scores]) if scores else None,
            judge_count=judge_count,
            submission_count=len(pool),
            criteria_count=len(criteria),
            completion_percent=percentage(len(scores), expected_per_submission * len(pool)),
            rankings=rankings,
            criteria_breakdown=[
                schemas.CriterionBreakdown(
                    criterion_id=c.id,  # type: ignore
                    question=c.question,
                    average_score=_average(by_criterion[c.id]),  # type: ignore
                    score_count=len(by_criterion[c.id]),  # type: ignore
                )
                for c in criteria
            ],
        )

    async def submission_results(
        self, *, group_id: PydanticObjectId, submission_id: str
    ) -> schemas.SubmissionResults:
        """Scores of one submission grouped by judge and by criterion. Hidden scores are left out."""
        entry = await crud_group.get_submission(group_id=group_id, submission_id=submission_id)
        if entry is None:
            raise SubmissionNotFoundError("Submission not found in judging group")
        status = await crud_submission_status.get_or_raise(group_id=group_id, submission_id=submission_id)
        criteria = await crud_criterion.get_by_group(group_id=group_id)
        judge_count = await crud_group.count_judges(group_id=group_id)
        scores = [
            s
            for s in await self._visible_scores(group_id=group_id, criteria=criteria)
            if s.submission_id == submission_id
        ]
        judge_ids = [s.judge_id for s in scores]
        if status.owner_judge_id is not None:
            judge_ids.append(status.owner_judge_id)
        names = await crud_judge.get_names(ids=judge_ids)

        position = {c.id: i for i, c in enumerate(criteria)}
        questions = {c.id: c.question for c in criteria}
        scores.sort(key=lambda s: (names.get(s.judge_id, ""), position[s.criterion_id]))

        judge_scores: dict[PydanticObjectId, list[models.JudgeScore]] = defaultdict(list)
        criterion_scores: dict[PydanticObjectId, list[models.JudgeScore]] = defaultdict(list)
        for score in scores:
            judge_scores[score.judge_id].append(score)
            criterion_scores[score.criterion_id].append(score)

        values = [s.score for s in scores]
        return schemas.SubmissionResults(
            submission_id=entry.submission_id,
            title=entry.title,
            slug=entry.slug,
            url=entry.url,
            state=status.state,
            owner_name=names.get(status.owner_judge_id) if status.owner_judge_id is not None else None,
            total_score=sum(values),
            average_score=_average(values),
            score_count=len(values),
            max_possible_score=judge_count * len(criteria) * settings.max_score,
            by_judge=[
                schemas.JudgeScoreSummary(
                    judge_id=judge_id,
                    judge_name=names.get(judge_id, "unknown"),
                    scores=[
                        schemas.JudgeCriterionScore(
                            criterion_id=s.criterion_id,
                            question=questions[s.criterion_id],
                            score=s.score,
                            comment=s.comment,
                        )
                        for s in items
                    ],
                    total=sum(s.score for s in items),
                    average=_average([s.score for s in items]),
                )
                for judge_id, items in judge_scores.items()
            ],
            by_criterion=[
                schemas.CriterionScoreSummary(
                    criterion_id=c.id,  # type: ignore
                    question=c.question,
                    scores=[
                        schemas.CriterionJudgeScore(
                            judge_id=s.judge_id,
                            judge_name=names.get(s.judge_id, "unknown"),
                            score=s.score,
                            comment=s.comment,
                        )
                        for s in criterion_scores[c.id]  # type: ignore
                    ],
                    average=_average([s.score for s in criterion_scores[c.id]]),  # type: ignore
                )
                for c in criteria
            ],
        )

    @staticmethod
    async def _visible_scores(
        *, group_id: PydanticObjectId, criteria: list[models.JudgingCriterion]
    ) -> list[models.JudgeScore]:
        criteria_ids = {c.id for c in criteria}
        return [
            s
            for s in await crud_judge_score.get_by_group(group_id=group_id)
            if not s.is_hidden and s.criterion_id in criteria_ids
        ]


def _average(values: list[int]) -> float:
    return round(sum(values) / len(values), 2) if values else 0.0


progress = CRUDProgress()
