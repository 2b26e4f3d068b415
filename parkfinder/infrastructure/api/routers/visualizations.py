"""CRUD endpoints for the dashboard chart data.

The three data sets share one set of handlers; ``_add_chart_routes`` binds
them to each set's path, schemas and entity type.
"""
from fastapi import APIRouter, Depends, HTTPException, Response, status
from typing import List

from parkfinder.application.services.visualization_service import VisualizationService
from parkfinder.domain.common import ChartKind
from parkfinder.domain.entities import CapacityData, UsageData, TrendData
from parkfinder.infrastructure.api.dependencies import get_visualization_service
from parkfinder.infrastructure.api.routers.errors import http_error
from parkfinder.infrastructure.api.schemas.visualizations import (
    CapacityDataCreate, CapacityDataUpdate, CapacityDataResponse,
    UsageDataCreate, UsageDataUpdate, UsageDataResponse,
    TrendDataCreate, TrendDataUpdate, TrendDataResponse,
)

router = APIRouter(prefix="/api/visualizations", tags=["visualizations"])


def _add_chart_routes(path, kind, entity, create_schema, update_schema, response_schema):
    label = f"{kind.value} data"

    @router.get(path, response_model=List[response_schema], name=f"list_{kind.value}_data")
    async def list_items(service: VisualizationService = Depends(get_visualization_service)):
        try:
            return await service.list_items(kind)
        except Exception as e:
            raise http_error(e, f"fetch {label}")

    @router.get(path + "/{item_id}", response_model=response_schema, name=f"get_{kind.value}_data")
    async def get_item(item_id: int, service: VisualizationService = Depends(get_visualization_service)):
        try:
            return await service.get_item(kind, item_id)
        except Exception as e:
            raise http_error(e, f"fetch {label}")

    @router.post(path, response_model=response_schema, status_code=status.HTTP_201_CREATED,
                 name=f"create_{kind.value}_data")
    async def create_item(
        data: create_schema,
        service: VisualizationService = Depends(get_visualization_service)
    ):
        try:
            return await service.create_item(kind, entity(**data.model_dump()))
        except Exception as e:
            raise http_error(e, f"create {label}")

    @router.put(path + "/{item_id}", status_code=status.HTTP_204_NO_CONTENT, name=f"update_{kind.value}_data")
    async def update_item(
        item_id: int,
        data: update_schema,
        service: VisualizationService = Depends(get_visualization_service)
    ):
        if data.id != item_id:
            raise HTTPException(status_code=400, detail="ID mismatch")
        try:
            await service.update_item(kind, item_id, entity(**data.model_dump(exclude={"id"})))
        except Exception as e:
            raise http_error(e, f"update {label}")
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @router.delete(path + "/{item_id}", status_code=status.HTTP_204_NO_CONTENT,
                   name=f"delete_{kind.value}_data")
    async def delete_item(item_id: int, service: VisualizationService = Depends(get_visualization_service)):
        try:
            await service.delete_item(kind, item_id)
        except Exception as e:
            raise http_error(e, f"delete {label}")
        return Response(status_code=status.HTTP_204_NO_CONTENT)


_add_chart_routes("/capacity", ChartKind.CAPACITY, CapacityData,
                  CapacityDataCreate, CapacityDataUpdate, CapacityDataResponse)
_add_chart_routes("/usage", ChartKind.USAGE, UsageData,
                  UsageDataCreate, UsageDataUpdate, UsageDataResponse)
_add_chart_routes("/trends", ChartKind.TREND, TrendData,
                  TrendDataCreate, TrendDataUpdate, TrendDataResponse)
