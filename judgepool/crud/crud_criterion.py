import logging

from beanie import PydanticObjectId
from beanie.operators import In

from judgepool import models, schemas

from .base import CRUDBase, CriterionInUseError, CriterionNotFoundError

logger = logging.getLogger(__name__)


class CRUDCriterion(CRUDBase[models.JudgingCriterion, schemas.CriterionSave, schemas.CriterionSave]):
    async def get_by_group(self, *, group_id: PydanticObjectId) -> list[models.JudgingCriterion]:
        return (
            await self.model.find_many(self.model.group_id == group_id)
            .sort(+self.model.order, +self.model.id)
            .to_list()
        )

    async def get_ids_by_group(self, *, group_id: PydanticObjectId) -> set[PydanticObjectId]:
        return {c.id for c in await self.get_by_group(group_id=group_id)}  # type: ignore

    async def get_in_group(
        self, *, group_id: PydanticObjectId, criterion_id: PydanticObjectId
    ) -> models.JudgingCriterion:
        criterion = await self.get(criterion_id)
        if criterion is None or criterion.group_id != group_id:
            raise CriterionNotFoundError("Criterion not found in judging group")
        return criterion

    @staticmethod
    async def _has_scores(criterion_ids: list[PydanticObjectId]) -> bool:
        if not criterion_ids:
            return False
        return await models.JudgeScore.find_one(In(models.JudgeScore.criterion_id, criterion_ids)) is not None

    async def save_criteria(
        self, *, group_id: PydanticObjectId, criteria: list[schemas.CriterionSave]
    ) -> list[models.JudgingCriterion]:
        """Replace the criteria set of a group.

        Criteria with an `id` are updated in place, the others are created, and existing
        criteria missing from `criteria` are deleted. Deleting a criterion that already
        has scores raises `CriterionInUseError` before anything is written.
        """
        existing = {c.id: c for c in await self.get_by_group(group_id=group_id)}
        for item in criteria:
            if item.id is not None and item.id not in existing:
                raise CriterionNotFoundError(f"Criterion {item.id} not found in judging group")
        kept_ids = {item.id for item in criteria if item.id is not None}
        to_delete = [cid for cid in existing if cid not in kept_ids]
        if await self._has_scores(to_delete):  # type: ignore
            raise CriterionInUseError("Cannot delete a criterion that already has scores")

        for cid in to_delete:
            await existing[cid].delete()
        for item in criteria:
            data = item.model_dump(exclude={"id"})
            if item.id is not None:
                await self.update(db_obj=existing[item.id], obj_in=data)
            else:
                await self.model(group_id=group_id, **data).create()
        logger.info("Saved %d criteria for group %s (%d deleted)", len(criteria), group_id, len(to_delete))
        return await self.get_by_group(group_id=group_id)

    async def remove(self, *, id: PydanticObjectId) -> models.JudgingCriterion | None:
        if await self._has_scores([id]):
            raise CriterionInUseError("Cannot delete a criterion that already has scores")
        return await super().remove(id=id)


criterion = CRUDCriterion(models.JudgingCriterion)
