from typing import Dict, List
from loguru import logger

from parkfinder.application.repositories import AbstractChartDataRepository
from parkfinder.domain.common import ChartKind
from parkfinder.domain.exceptions import NotFoundError

CHART_LABELS = {
    ChartKind.CAPACITY: "Capacity data",
    ChartKind.USAGE: "Usage data",
    ChartKind.TREND: "Trend data",
}


class VisualizationService:
    """Editable data sets behind the parking dashboard charts."""

    def __init__(
        self,
        capacity_repo: AbstractChartDataRepository,
        usage_repo: AbstractChartDataRepository,
        trend_repo: AbstractChartDataRepository,
    ):
        self.repos: Dict[ChartKind, AbstractChartDataRepository] = {
            ChartKind.CAPACITY: capacity_repo,
            ChartKind.USAGE: usage_repo,
            ChartKind.TREND: trend_repo,
        }

    async def list_items(self, kind: ChartKind) -> List:
        return await self.repos[kind].get_all()

    async def get_item(self, kind: ChartKind, item_id: int):
        item = await self.repos[kind].get_by_id(item_id)
        if not item:
            raise NotFoundError(CHART_LABELS[kind], item_id)
        return item

    async def create_item(self, kind: ChartKind, item):
        created = await self.repos[kind].add(item)
        logger.debug(f"Added {kind.value} row {created.id}")
        return created

    async def update_item(self, kind: ChartKind, item_id: int, item):
        await self.get_item(kind, item_id)
        item.id = item_id
        return await self.repos[kind].update(item)

    async def delete_item(self, kind: ChartKind, item_id: int) -> None:
        if not await self.repos[kind].delete(item_id):
            raise NotFoundError(CHART_LABELS[kind], item_id)
        logger.debug(f"Deleted {kind.value} row {item_id}")
