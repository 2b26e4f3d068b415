from fastapi import APIRouter, Depends, HTTPException, Response, status
from typing import List

from parkfinder.application.services.parking_spot_service import ParkingSpotService
from parkfinder.domain.entities import ParkingSpot
from parkfinder.infrastructure.api.dependencies import get_parking_spot_service
from parkfinder.infrastructure.api.routers.errors import http_error
from parkfinder.infrastructure.api.schemas.parking import (
    ParkingSpotCreate, ParkingSpotUpdate, ParkingSpotResponse, SearchRequest, ImportSpotRequest
)

router = APIRouter(prefix="/api/parking-spots", tags=["parking-spots"])


def _to_entity(data: ParkingSpotCreate) -> ParkingSpot:
    return ParkingSpot(
        name=data.name,
        address=data.address,
        city=data.city,
        price=data.price,
        available_spots=data.available_spots,
        latitude=data.latitude,
        longitude=data.longitude,
        rating=data.rating,
    )


@router.get("", response_model=List[ParkingSpotResponse])
async def list_parking_spots(service: ParkingSpotService = Depends(get_parking_spot_service)):
    try:
        return await service.list_spots()
    except Exception as e:
        raise http_error(e, "fetch parking spots")


@router.post("/search", response_model=List[ParkingSpotResponse])
async def search_parking_spots(
    search: SearchRequest,
    service: ParkingSpotService = Depends(get_parking_spot_service)
):
    try:
        return await service.search(search.location, search.radius)
    except Exception as e:
        raise http_error(e, "search parking spots")


@router.post("/import", response_model=ParkingSpotResponse)
async def import_parking_spot(
    request: ImportSpotRequest,
    response: Response,
    service: ParkingSpotService = Depends(get_parking_spot_service)
):
    try:
        spot, created = await service.import_spot(request.source, request.external_id)
    except Exception as e:
        raise http_error(e, "import parking spot")
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return spot


@router.get("/{spot_id}", response_model=ParkingSpotResponse)
async def get_parking_spot(
    spot_id: int,
    service: ParkingSpotService = Depends(get_parking_spot_service)
):
    try:
        return await service.get_spot(spot_id)
    except Exception as e:
        raise http_error(e, "fetch parking spot")


@router.post("", response_model=ParkingSpotResponse, status_code=status.HTTP_201_CREATED)
async def create_parking_spot(
    spot_data: ParkingSpotCreate,
    service: ParkingSpotService = Depends(get_parking_spot_service)
):
    try:
        return await service.create_spot(_to_entity(spot_data))
    except Exception as e:
        raise http_error(e, "create parking spot")


@router.put("/{spot_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_parking_spot(
    spot_id: int,
    spot_data: ParkingSpotUpdate,
    service: ParkingSpotService = Depends(get_parking_spot_service)
):
    if spot_data.id != spot_id:
        raise HTTPException(status_code=400, detail="ID mismatch")
    try:
        await service.update_spot(spot_id, _to_entity(spot_data))
    except Exception as e:
        raise http_error(e, "update parking spot")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{spot_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_parking_spot(
    spot_id: int,
    service: ParkingSpotService = Depends(get_parking_spot_service)
):
    try:
        await service.delete_spot(spot_id)
    except Exception as e:
        raise http_error(e, "delete parking spot")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
