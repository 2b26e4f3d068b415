from datetime import date, time
from decimal import Decimal
from typing import List, Optional
from loguru import logger

from parkfinder.application.repositories import (
    AbstractUserRepository,
    AbstractParkingSpotRepository,
    AbstractReservationRepository,
)
from parkfinder.config.settings_env import settings
from parkfinder.domain.common import ReservationStatus, PaymentStatus
from parkfinder.domain.entities import ParkingSpot, Reservation
from parkfinder.domain.exceptions import NotFoundError, OwnershipError, InvalidStateError
from parkfinder.shared.utils import to_decimal

EDITABLE_FIELDS = ("parking_spot_id", "date", "start_time", "duration", "vehicle_type", "license_plate")

OUTCOME_TO_STATUS = {
    PaymentStatus.SUCCEEDED: ReservationStatus.CONFIRMED,
    PaymentStatus.FAILED: ReservationStatus.FAILED,
}


class PriceQuote:
    def __init__(self, hourly_rate: Decimal, duration: int, subtotal: Decimal, service_fee: Decimal, total: Decimal):
        self.hourly_rate = hourly_rate
        self.duration = duration
        self.subtotal = subtotal
        self.service_fee = service_fee
        self.total = total


def normalize_plate(license_plate: Optional[str]) -> str:
    return (license_plate or "").strip().upper()


class ReservationService:
    def __init__(
        self,
        reservation_repo: AbstractReservationRepository,
        parking_spot_repo: AbstractParkingSpotRepository,
        user_repo: AbstractUserRepository,
        service_fee: Decimal = settings.SERVICE_FEE,
    ):
        self.reservation_repo = reservation_repo
        self.parking_spot_repo = parking_spot_repo
        self.user_repo = user_repo
        self.service_fee = to_decimal(service_fee)

    def quote(self, spot: ParkingSpot, duration: int) -> PriceQuote:
        if duration < 1:
            raise ValueError("Duration must be at least 1 hour")
        rate = to_decimal(spot.price)
        subtotal = to_decimal(rate * duration)
        return PriceQuote(
            hourly_rate=rate,
            duration=duration,
            subtotal=subtotal,
            service_fee=self.service_fee,
            total=to_decimal(subtotal + self.service_fee),
        )

    async def quote_for_spot(self, parking_spot_id: int, duration: int) -> PriceQuote:
        return self.quote(await self._get_spot(parking_spot_id), duration)

    async def create_reservation(
        self,
        user_id: int,
        parking_spot_id: int,
        date: date,
        start_time: time,
        duration: int,
        vehicle_type: str,
        license_plate: str,
    ) -> Reservation:
        license_plate = normalize_plate(license_plate)
        if duration < 1:
            raise ValueError("Duration must be at least 1 hour")
        if not license_plate:
            raise ValueError("License plate is required")

        spot = await self._get_spot(parking_spot_id)
        if not await self.user_repo.get_by_id(user_id):
            raise NotFoundError("User", user_id)

        reservation = Reservation(
            user_id=user_id,
            parking_spot_id=spot.id,
            date=date,
            start_time=start_time,
            duration=duration,
            vehicle_type=vehicle_type,
            license_plate=license_plate,
            # Whatever total the client computed is ignored
            total_price=self.quote(spot, duration).total,
            status=ReservationStatus.PENDING,
        )
        created = await self.reservation_repo.add(reservation)
        created.parking_spot = spot

        logger.info(
            f"Reservation {created.id} created for user {user_id} at spot {spot.id}: "
            f"{duration}h, total ${created.total_price}"
        )
        return created

    async def get_reservation(self, reservation_id: int) -> Reservation:
        reservation = await self.reservation_repo.get_by_id(reservation_id)
        if not reservation:
            raise NotFoundError("Reservation", reservation_id)
        reservation.parking_spot = await self.parking_spot_repo.get_by_id(reservation.parking_spot_id)
        return reservation

    async def list_for_user(self, user_id: int) -> List[Reservation]:
        reservations = await self.reservation_repo.get_by_user(user_id)
        spots = {}
        for reservation in reservations:
            if reservation.parking_spot_id not in spots:
                spots[reservation.parking_spot_id] = await self.parking_spot_repo.get_by_id(reservation.parking_spot_id)
            reservation.parking_spot = spots[reservation.parking_spot_id]
        return reservations

    async def update_reservation(self, reservation_id: int, user_id: int, **changes) -> Reservation:
        """Edit booking details. Price is recomputed; status and payment are left alone."""
        reservation = await self._get_owned(reservation_id, user_id)

        for field, value in changes.items():
            if field not in EDITABLE_FIELDS:
                raise ValueError(f"Field '{field}' cannot be changed")
            if value is None:
                continue
            if field == "license_plate":
                value = normalize_plate(value)
                if not value:
                    raise ValueError("License plate is required")
            setattr(reservation, field, value)

        if reservation.duration < 1:
            raise ValueError("Duration must be at least 1 hour")

        spot = await self._get_spot(reservation.parking_spot_id)
        reservation.total_price = self.quote(spot, reservation.duration).total

        updated = await self.reservation_repo.update(reservation)
        updated.parking_spot = spot
        logger.info(f"Reservation {reservation_id} updated, total now ${updated.total_price}")
        return updated

    async def cancel_reservation(self, reservation_id: int, user_id: int) -> Reservation:
        reservation = await self._get_owned(reservation_id, user_id)
        if reservation.status == ReservationStatus.CANCELLED:
            raise InvalidStateError(f"Reservation {reservation_id} is already cancelled")

        reservation.status = ReservationStatus.CANCELLED
        updated = await self.reservation_repo.update(reservation)
        logger.info(f"Reservation {reservation_id} cancelled by user {user_id}")
        return updated

    async def delete_reservation(self, reservation_id: int, user_id: int) -> None:
        await self._get_owned(reservation_id, user_id)
        await self.reservation_repo.delete(reservation_id)
        logger.info(f"Reservation {reservation_id} deleted by user {user_id}")

    async def transition(self, reservation_id: int, outcome: PaymentStatus) -> Reservation:
        """Apply a resolved payment outcome to a reservation."""
        reservation = await self.reservation_repo.get_by_id(reservation_id)
        if not reservation:
            raise NotFoundError("Reservation", reservation_id)

        target = OUTCOME_TO_STATUS.get(PaymentStatus(outcome))
        if target is None:
            raise InvalidStateError(f"Payment outcome '{outcome}' does not resolve a reservation")

        if reservation.status == target:
            return reservation
        if reservation.status != ReservationStatus.PENDING:
            logger.warning(
                f"Reservation {reservation_id} is {reservation.status.value}; "
                f"ignoring payment outcome {PaymentStatus(outcome).value}"
            )
            return reservation

        reservation.status = target
        updated = await self.reservation_repo.update(reservation)
        logger.info(f"Reservation {reservation_id} is now {target.value}")
        return updated

    async def link_payment(self, reservation_id: int, payment_id: int) -> Reservation:
        reservation = await self.reservation_repo.get_by_id(reservation_id)
        if not reservation:
            raise NotFoundError("Reservation", reservation_id)
        reservation.payment_id = payment_id
        return await self.reservation_repo.update(reservation)

    async def _get_spot(self, parking_spot_id: int) -> ParkingSpot:
        spot = await self.parking_spot_repo.get_by_id(parking_spot_id)
        if not spot:
            raise NotFoundError("Parking spot", parking_spot_id)
        return spot

    async def _get_owned(self, reservation_id: int, user_id: int) -> Reservation:
        reservation = await self.reservation_repo.get_by_id(reservation_id)
        if not reservation:
            raise NotFoundError("Reservation", reservation_id)
        if reservation.user_id != user_id:
            raise OwnershipError(f"Reservation {reservation_id} belongs to another user")
        return reservation
