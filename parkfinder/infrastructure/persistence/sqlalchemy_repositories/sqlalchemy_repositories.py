from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, and_
from sqlalchemy.exc import IntegrityError

from parkfinder.domain.entities import (
    User,
    ParkingSpot,
    Reservation,
    Payment,
    Favorite,
    CapacityData,
    UsageData,
    TrendData,
)
from parkfinder.domain.exceptions import DuplicateUsernameError
from parkfinder.domain.common import SpotSource, ReservationStatus, PaymentStatus, PaymentMethod
from parkfinder.infrastructure.persistence.models.models import (
    User as ORMUser,
    ParkingSpot as ORMParkingSpot,
    Reservation as ORMReservation,
    Payment as ORMPayment,
    Favorite as ORMFavorite,
    CapacityData as ORMCapacityData,
    UsageData as ORMUsageData,
    TrendData as ORMTrendData,
)
from parkfinder.application.repositories import (
    AbstractUserRepository,
    AbstractParkingSpotRepository,
    AbstractReservationRepository,
    AbstractFavoriteRepository,
    AbstractPaymentRepository,
    AbstractChartDataRepository,
)


def _to_user(orm_user: ORMUser) -> User:
    return User(id=orm_user.id, username=orm_user.username, name=orm_user.name, email=orm_user.email)


def _to_spot(orm_spot: ORMParkingSpot) -> ParkingSpot:
    return ParkingSpot(
        id=orm_spot.id,
        name=orm_spot.name,
        address=orm_spot.address,
        city=orm_spot.city,
        price=orm_spot.price,
        available_spots=orm_spot.available_spots,
        latitude=orm_spot.latitude,
        longitude=orm_spot.longitude,
        source=SpotSource(orm_spot.source),
        external_id=orm_spot.external_id,
        rating=orm_spot.rating,
        created_at=orm_spot.created_at,
        updated_at=orm_spot.updated_at,
    )


def _to_reservation(orm_reservation: ORMReservation) -> Reservation:
    return Reservation(
        id=orm_reservation.id,
        user_id=orm_reservation.user_id,
        parking_spot_id=orm_reservation.parking_spot_id,
        date=orm_reservation.date,
        start_time=orm_reservation.start_time,
        duration=orm_reservation.duration,
        vehicle_type=orm_reservation.vehicle_type,
        license_plate=orm_reservation.license_plate,
        total_price=orm_reservation.total_price,
        status=ReservationStatus(orm_reservation.status),
        payment_id=orm_reservation.payment_id,
        created_at=orm_reservation.created_at,
    )


def _to_payment(orm_payment: ORMPayment) -> Payment:
    return Payment(
        id=orm_payment.id,
        user_id=orm_payment.user_id,
        amount=orm_payment.amount,
        payment_method=PaymentMethod(orm_payment.payment_method),
        payment_status=PaymentStatus(orm_payment.payment_status),
        stripe_payment_intent_id=orm_payment.stripe_payment_intent_id,
        last_four=orm_payment.last_four,
        card_brand=orm_payment.card_brand,
        transaction_date=orm_payment.transaction_date,
    )


def _to_favorite(orm_favorite: ORMFavorite) -> Favorite:
    return Favorite(
        id=orm_favorite.id,
        user_id=orm_favorite.user_id,
        parking_spot_id=orm_favorite.parking_spot_id,
    )


class SQLAlchemyUserRepository(AbstractUserRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_all(self) -> List[User]:
        result = await self.session.execute(select(ORMUser).order_by(ORMUser.id))
        return [_to_user(u) for u in result.scalars().all()]

    async def get_by_id(self, user_id: int) -> Optional[User]:
        orm_user = await self.session.get(ORMUser, user_id)
        return _to_user(orm_user) if orm_user else None

    async def get_by_username(self, username: str) -> Optional[User]:
        result = await self.session.execute(select(ORMUser).where(ORMUser.username == username))
        orm_user = result.scalars().first()
        return _to_user(orm_user) if orm_user else None

    async def add(self, user: User) -> User:
        orm_user = ORMUser(username=user.username, name=user.name, email=user.email)
        self.session.add(orm_user)
        try:
            await self.session.flush()
        except IntegrityError:
            await self.session.rollback()
            raise DuplicateUsernameError(user.username)
        await self.session.refresh(orm_user)
        await self.session.commit()
        return _to_user(orm_user)

    async def update(self, user: User) -> User:
        orm_user = await self.session.get(ORMUser, user.id)
        if not orm_user:
            raise ValueError(f"User with ID {user.id} not found.")
        orm_user.username = user.username
        orm_user.name = user.name
        orm_user.email = user.email
        try:
            await self.session.flush()
        except IntegrityError:
            await self.session.rollback()
            raise DuplicateUsernameError(user.username)
        await self.session.refresh(orm_user)
        await self.session.commit()
        return _to_user(orm_user)

    async def delete(self, user_id: int) -> bool:
        # Everything the user owns goes with it through ON DELETE CASCADE
        result = await self.session.execute(delete(ORMUser).where(ORMUser.id == user_id))
        await self.session.commit()
        self.session.expunge_all()
        return result.rowcount > 0



class SQLAlchemyParkingSpotRepository(AbstractParkingSpotRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_all(self) -> List[ParkingSpot]:
        result = await self.session.execute(select(ORMParkingSpot).order_by(ORMParkingSpot.id))
        return [_to_spot(s) for s in result.scalars().all()]

    async def get_by_id(self, spot_id: int) -> Optional[ParkingSpot]:
        result = await self.session.execute(
            select(ORMParkingSpot).where(ORMParkingSpot.id == spot_id)
        )
        orm_spot = result.scalars().first()
        return _to_spot(orm_spot) if orm_spot else None

    async def get_by_external_id(self, source: SpotSource, external_id: str) -> Optional[ParkingSpot]:
        result = await self.session.execute(
            select(ORMParkingSpot).where(
                and_(
                    ORMParkingSpot.source == SpotSource(source).value,
                    ORMParkingSpot.external_id == external_id,
                )
            )
        )
        orm_spot = result.scalars().first()
        return _to_spot(orm_spot) if orm_spot else None

    async def add(self, spot: ParkingSpot) -> ParkingSpot:
        orm_spot = ORMParkingSpot(
            name=spot.name,
            address=spot.address,
            city=spot.city,
            price=spot.price,
            available_spots=spot.available_spots,
            latitude=spot.latitude,
            longitude=spot.longitude,
            source=SpotSource(spot.source).value,
            external_id=spot.external_id,
            rating=spot.rating,
        )
        self.session.add(orm_spot)
        await self.session.flush()
        await self.session.refresh(orm_spot)
        await self.session.commit()
        return _to_spot(orm_spot)

    async def update(self, spot: ParkingSpot) -> ParkingSpot:
        orm_spot = await self.session.get(ORMParkingSpot, spot.id)
        if orm_spot:
            orm_spot.name = spot.name
            orm_spot.address = spot.address
            orm_spot.city = spot.city
            orm_spot.price = spot.price
            orm_spot.available_spots = spot.available_spots
            orm_spot.latitude = spot.latitude
            orm_spot.longitude = spot.longitude
            orm_spot.rating = spot.rating
            await self.session.flush()
            await self.session.refresh(orm_spot)
            await self.session.commit()
            return _to_spot(orm_spot)
        raise ValueError(f"Parking spot with ID {spot.id} not found.")

    async def delete(self, spot_id: int) -> bool:
        # Reservations and favorites go with it through ON DELETE CASCADE
        result = await self.session.execute(
            delete(ORMParkingSpot).where(ORMParkingSpot.id == spot_id)
        )
        await self.session.commit()
        self.session.expunge_all()
        return result.rowcount > 0


class SQLAlchemyReservationRepository(AbstractReservationRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, reservation_id: int) -> Optional[Reservation]:
        result = await self.session.execute(
            select(ORMReservation).where(ORMReservation.id == reservation_id)
        )
        orm_reservation = result.scalars().first()
        return _to_reservation(orm_reservation) if orm_reservation else None

    async def get_by_user(self, user_id: int) -> List[Reservation]:
        result = await self.session.execute(
            select(ORMReservation)
            .where(ORMReservation.user_id == user_id)
            .order_by(ORMReservation.created_at.desc(), ORMReservation.id.desc())
        )
        return [_to_reservation(r) for r in result.scalars().all()]

    async def get_by_payment_id(self, payment_id: int) -> List[Reservation]:
        result = await self.session.execute(
            select(ORMReservation).where(ORMReservation.payment_id == payment_id)
        )
        return [_to_reservation(r) for r in result.scalars().all()]

    async def add(self, reservation: Reservation) -> Reservation:
        orm_reservation = ORMReservation(
            user_id=reservation.user_id,
            parking_spot_id=reservation.parking_spot_id,
            date=reservation.date,
            start_time=reservation.start_time,
            duration=reservation.duration,
            vehicle_type=reservation.vehicle_type,
            license_plate=reservation.license_plate,
            total_price=reservation.total_price,
            status=ReservationStatus(reservation.status).value,
            payment_id=reservation.payment_id,
        )
        self.session.add(orm_reservation)
        await self.session.flush()
        await self.session.refresh(orm_reservation)
        await self.session.commit()
        return _to_reservation(orm_reservation)

    async def update(self, reservation: Reservation) -> Reservation:
        orm_reservation = await self.session.get(ORMReservation, reservation.id)
        if orm_reservation:
            orm_reservation.parking_spot_id = reservation.parking_spot_id
            orm_reservation.date = reservation.date
            orm_reservation.start_time = reservation.start_time
            orm_reservation.duration = reservation.duration
            orm_reservation.vehicle_type = reservation.vehicle_type
            orm_reservation.license_plate = reservation.license_plate
            orm_reservation.total_price = reservation.total_price
            orm_reservation.status = ReservationStatus(reservation.status).value
            orm_reservation.payment_id = reservation.payment_id
            await self.session.flush()
            await self.session.refresh(orm_reservation)
            await self.session.commit()
            return _to_reservation(orm_reservation)
        raise ValueError(f"Reservation with ID {reservation.id} not found.")

    async def delete(self, reservation_id: int) -> bool:
        result = await self.session.execute(
            delete(ORMReservation).where(ORMReservation.id == reservation_id)
        )
        await self.session.commit()
        return result.rowcount > 0


class SQLAlchemyFavoriteRepository(AbstractFavoriteRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, favorite_id: int) -> Optional[Favorite]:
        orm_favorite = await self.session.get(ORMFavorite, favorite_id)
        return _to_favorite(orm_favorite) if orm_favorite else None

    async def get_by_user(self, user_id: int) -> List[Favorite]:
        result = await self.session.execute(
            select(ORMFavorite).where(ORMFavorite.user_id == user_id).order_by(ORMFavorite.id)
        )
        return [_to_favorite(f) for f in result.scalars().all()]

    async def get_by_user_and_spot(self, user_id: int, parking_spot_id: int) -> Optional[Favorite]:
        result = await self.session.execute(
            select(ORMFavorite).where(
                and_(
                    ORMFavorite.user_id == user_id,
                    ORMFavorite.parking_spot_id == parking_spot_id,
                )
            )
        )
        orm_favorite = result.scalars().first()
        return _to_favorite(orm_favorite) if orm_favorite else None

    async def get_or_create(self, favorite: Favorite) -> Tuple[Favorite, bool]:
        existing = await self.get_by_user_and_spot(favorite.user_id, favorite.parking_spot_id)
        if existing:
            return existing, False

        orm_favorite = ORMFavorite(user_id=favorite.user_id, parking_spot_id=favorite.parking_spot_id)
        self.session.add(orm_favorite)
        try:
            await self.session.flush()
            await self.session.commit()
        except IntegrityError:
            # A concurrent request inserted the same pair first; the constraint decides
            await self.session.rollback()
            existing = await self.get_by_user_and_spot(favorite.user_id, favorite.parking_spot_id)
            if existing is None:
                raise
            return existing, False
        return _to_favorite(orm_favorite), True

    async def delete(self, favorite_id: int) -> bool:
        result = await self.session.execute(
            delete(ORMFavorite).where(ORMFavorite.id == favorite_id)
        )
        await self.session.commit()
        return result.rowcount > 0


class SQLAlchemyPaymentRepository(AbstractPaymentRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, payment_id: int) -> Optional[Payment]:
        orm_payment = await self.session.get(ORMPayment, payment_id)
        return _to_payment(orm_payment) if orm_payment else None

    async def get_by_user(self, user_id: int) -> List[Payment]:
        result = await self.session.execute(
            select(ORMPayment)
            .where(ORMPayment.user_id == user_id)
            .order_by(ORMPayment.transaction_date.desc(), ORMPayment.id.desc())
        )
        return [_to_payment(p) for p in result.scalars().all()]

    async def get_by_intent_id(self, intent_id: str) -> Optional[Payment]:
        result = await self.session.execute(
            select(ORMPayment).where(ORMPayment.stripe_payment_intent_id == intent_id)
        )
        orm_payment = result.scalars().first()
        return _to_payment(orm_payment) if orm_payment else None

    async def add(self, payment: Payment) -> Payment:
        orm_payment = ORMPayment(
            user_id=payment.user_id,
            amount=payment.amount,
            payment_method=PaymentMethod(payment.payment_method).value,
            payment_status=PaymentStatus(payment.payment_status).value,
            stripe_payment_intent_id=payment.stripe_payment_intent_id,
            last_four=payment.last_four,
            card_brand=payment.card_brand,
        )
        self.session.add(orm_payment)
        await self.session.flush()
        await self.session.refresh(orm_payment)
        await self.session.commit()
        return _to_payment(orm_payment)

    async def update_status(
        self,
        payment_id: int,
        status: PaymentStatus,
        card_brand: Optional[str] = None,
        last_four: Optional[str] = None,
    ) -> Payment:
        orm_payment = await self.session.get(ORMPayment, payment_id)
        if orm_payment:
            # Amount is never touched here; status and card details change together
            orm_payment.payment_status = PaymentStatus(status).value
            if card_brand is not None:
                orm_payment.card_brand = card_brand
            if last_four is not None:
                orm_payment.last_four = last_four
            await self.session.flush()
            await self.session.refresh(orm_payment)
            await self.session.commit()
            return _to_payment(orm_payment)
        raise ValueError(f"Payment with ID {payment_id} not found.")


class SQLAlchemyChartDataRepository(AbstractChartDataRepository):
    """Plain CRUD over one chart table; subclasses name the table, entity and columns."""

    model = None
    entity = None
    fields: Tuple[str, ...] = ()

    def __init__(self, session: AsyncSession):
        self.session = session

    def _to_entity(self, orm_item):
        return self.entity(id=orm_item.id, **{field: getattr(orm_item, field) for field in self.fields})

    async def get_all(self) -> list:
        result = await self.session.execute(select(self.model).order_by(self.model.id))
        return [self._to_entity(item) for item in result.scalars().all()]

    async def get_by_id(self, item_id: int):
        orm_item = await self.session.get(self.model, item_id)
        return self._to_entity(orm_item) if orm_item else None

    async def add(self, item):
        orm_item = self.model(**{field: getattr(item, field) for field in self.fields})
        self.session.add(orm_item)
        await self.session.flush()
        await self.session.refresh(orm_item)
        await self.session.commit()
        return self._to_entity(orm_item)

    async def update(self, item):
        orm_item = await self.session.get(self.model, item.id)
        if not orm_item:
            raise ValueError(f"{self.entity.__name__} with ID {item.id} not found.")
        for field in self.fields:
            setattr(orm_item, field, getattr(item, field))
        await self.session.flush()
        await self.session.refresh(orm_item)
        await self.session.commit()
        return self._to_entity(orm_item)

    async def delete(self, item_id: int) -> bool:
        result = await self.session.execute(delete(self.model).where(self.model.id == item_id))
        await self.session.commit()
        return result.rowcount > 0


class SQLAlchemyCapacityDataRepository(SQLAlchemyChartDataRepository):
    model = ORMCapacityData
    entity = CapacityData
    fields = ("name", "capacity", "available")


class SQLAlchemyUsageDataRepository(SQLAlchemyChartDataRepository):
    model = ORMUsageData
    entity = UsageData
    fields = ("name", "value")


class SQLAlchemyTrendDataRepository(SQLAlchemyChartDataRepository):
    model = ORMTrendData
    entity = TrendData
    fields = ("time", "available")
