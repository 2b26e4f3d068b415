from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from typing import List, Optional

from parkfinder.application.services.reservation_service import ReservationService
from parkfinder.infrastructure.api.dependencies import get_reservation_service
from parkfinder.infrastructure.api.routers.errors import http_error
from parkfinder.infrastructure.api.schemas.parking import (
    ReservationCreate, ReservationUpdate, ReservationResponse, QuoteRequest, QuoteResponse
)

router = APIRouter(prefix="/api/reservations", tags=["reservations"])


def _require_user(user_id: Optional[int]) -> int:
    if not user_id:
        raise HTTPException(status_code=401, detail="User ID is required")
    return user_id


@router.get("", response_model=List[ReservationResponse])
async def list_reservations(
    user_id: Optional[int] = Query(default=None, alias="userId"),
    service: ReservationService = Depends(get_reservation_service)
):
    user_id = _require_user(user_id)
    try:
        return await service.list_for_user(user_id)
    except Exception as e:
        raise http_error(e, "fetch reservations")


@router.post("/quote", response_model=QuoteResponse)
async def quote_reservation(
    request: QuoteRequest,
    service: ReservationService = Depends(get_reservation_service)
):
    try:
        return await service.quote_for_spot(request.parking_spot_id, request.duration)
    except Exception as e:
        raise http_error(e, "quote reservation")


@router.get("/{reservation_id}", response_model=ReservationResponse)
async def get_reservation(
    reservation_id: int,
    service: ReservationService = Depends(get_reservation_service)
):
    try:
        return await service.get_reservation(reservation_id)
    except Exception as e:
        raise http_error(e, "fetch reservation")


@router.post("", response_model=ReservationResponse, status_code=status.HTTP_201_CREATED)
async def create_reservation(
    reservation_data: ReservationCreate,
    service: ReservationService = Depends(get_reservation_service)
):
    try:
        return await service.create_reservation(
            user_id=reservation_data.user_id,
            parking_spot_id=reservation_data.parking_spot_id,
            date=reservation_data.date,
            start_time=reservation_data.start_time,
            duration=reservation_data.duration,
            vehicle_type=reservation_data.vehicle_type,
            license_plate=reservation_data.license_plate,
        )
    except Exception as e:
        raise http_error(e, "create reservation")


@router.put("/{reservation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_reservation(
    reservation_id: int,
    changes: ReservationUpdate,
    user_id: Optional[int] = Query(default=None, alias="userId"),
    service: ReservationService = Depends(get_reservation_service)
):
    user_id = _require_user(user_id)
    try:
        await service.update_reservation(reservation_id, user_id, **changes.model_dump(exclude_unset=True))
    except Exception as e:
        raise http_error(e, "update reservation")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{reservation_id}/cancel", response_model=ReservationResponse)
async def cancel_reservation(
    reservation_id: int,
    user_id: Optional[int] = Query(default=None, alias="userId"),
    service: ReservationService = Depends(get_reservation_service)
):
    user_id = _require_user(user_id)
    try:
        return await service.cancel_reservation(reservation_id, user_id)
    except Exception as e:
        raise http_error(e, "cancel reservation")


@router.delete("/{reservation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_reservation(
    reservation_id: int,
    user_id: Optional[int] = Query(default=None, alias="userId"),
    service: ReservationService = Depends(get_reservation_service)
):
    user_id = _require_user(user_id)
    try:
        await service.delete_reservation(reservation_id, user_id)
    except Exception as e:
        raise http_error(e, "delete reservation")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
