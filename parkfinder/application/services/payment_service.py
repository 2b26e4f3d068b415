from decimal import Decimal
from typing import List, Optional
from loguru import logger

from parkfinder.application.providers import AbstractPaymentGateway, ProviderIntent
from parkfinder.application.repositories import (
    AbstractPaymentRepository,
    AbstractReservationRepository,
    AbstractUserRepository,
)
from parkfinder.application.services.reservation_service import ReservationService
from parkfinder.config.settings_env import settings
from parkfinder.domain.common import PaymentStatus, PaymentMethod, ReservationStatus
from parkfinder.domain.entities import Payment
from parkfinder.domain.exceptions import NotFoundError, OwnershipError, InvalidStateError, PaymentProviderError
from parkfinder.shared.utils import to_decimal, to_minor_units

SUCCEEDED_EVENT = "payment_intent.succeeded"
FAILED_EVENT = "payment_intent.payment_failed"


def outcome_for_intent(intent: ProviderIntent) -> PaymentStatus:
    """Collapse the provider's intent lifecycle into our three payment states."""
    if intent.status == "succeeded":
        return PaymentStatus.SUCCEEDED
    if intent.status == "canceled":
        return PaymentStatus.FAILED
    if intent.status == "requires_payment_method" and intent.last_payment_error:
        return PaymentStatus.FAILED
    return PaymentStatus.PENDING


class OpenedPayment:
    def __init__(self, client_secret: Optional[str], intent_id: str, payment: Payment):
        self.client_secret = client_secret
        self.intent_id = intent_id
        self.payment = payment


class PaymentStatusReport:
    def __init__(self, status: str, amount: Decimal, payment: Optional[Payment]):
        self.status = status
        self.amount = amount
        self.payment = payment


class PaymentService:
    def __init__(
        self,
        payment_repo: AbstractPaymentRepository,
        reservation_repo: AbstractReservationRepository,
        reservation_service: ReservationService,
        user_repo: AbstractUserRepository,
        gateway: AbstractPaymentGateway,
        currency: str = settings.PAYMENT_CURRENCY,
    ):
        self.payment_repo = payment_repo
        self.reservation_repo = reservation_repo
        self.reservation_service = reservation_service
        self.user_repo = user_repo
        self.gateway = gateway
        self.currency = currency

    async def open_payment(
        self,
        amount,
        user_id: Optional[int],
        reservation_id: Optional[int] = None,
        payment_method: PaymentMethod = PaymentMethod.CREDIT_CARD,
    ) -> OpenedPayment:
        if amount is None or to_decimal(amount) <= 0:
            raise ValueError("Amount is required")
        if not user_id:
            raise ValueError("User ID is required")
        amount = to_decimal(amount)

        if not await self.user_repo.get_by_id(user_id):
            raise NotFoundError("User", user_id)

        if reservation_id is not None:
            reservation = await self.reservation_repo.get_by_id(reservation_id)
            if not reservation:
                raise NotFoundError("Reservation", reservation_id)
            if reservation.user_id != user_id:
                raise OwnershipError(f"Reservation {reservation_id} belongs to another user")
            # Settled and abandoned reservations are never charged again
            if reservation.status != ReservationStatus.PENDING:
                raise InvalidStateError(
                    f"Reservation {reservation_id} is {reservation.status.value} and cannot be paid"
                )
            if amount != reservation.total_price:
                logger.warning(
                    f"Client amount ${amount} differs from reservation {reservation_id} "
                    f"total ${reservation.total_price}; charging the reservation total"
                )
                amount = reservation.total_price

        metadata = {"user_id": str(user_id)}
        if reservation_id is not None:
            metadata["reservation_id"] = str(reservation_id)

        # Provider first: if the local write fails afterwards, confirm/webhook reconcile it
        intent = await self.gateway.create_intent(to_minor_units(amount), self.currency, metadata)

        payment = await self.payment_repo.add(Payment(
            user_id=user_id,
            amount=amount,
            payment_method=PaymentMethod(payment_method),
            payment_status=PaymentStatus.PENDING,
            stripe_payment_intent_id=intent.id,
        ))
        if reservation_id is not None:
            await self.reservation_service.link_payment(reservation_id, payment.id)

        logger.info(f"Opened payment {payment.id} (intent {intent.id}) for user {user_id}: ${amount}")
        return OpenedPayment(client_secret=intent.client_secret, intent_id=intent.id, payment=payment)

    async def confirm(self, intent_id: str) -> PaymentStatusReport:
        intent = await self.gateway.retrieve_intent(intent_id)
        payment = await self.reconcile(intent, outcome_for_intent(intent))
        return PaymentStatusReport(
            status=intent.status,
            amount=(Decimal(intent.amount_cents) / 100).quantize(Decimal("0.01")),
            payment=payment,
        )

    async def handle_webhook(self, payload: bytes, signature: Optional[str]) -> Optional[Payment]:
        event = self.gateway.parse_event(payload, signature)

        if event.type == SUCCEEDED_EVENT:
            outcome = PaymentStatus.SUCCEEDED
        elif event.type == FAILED_EVENT:
            outcome = PaymentStatus.FAILED
        else:
            logger.info(f"Unhandled event type {event.type}")
            return None

        if event.intent is None:
            raise ValueError(f"Event {event.type} carries no payment intent")
        return await self.reconcile(event.intent, outcome)

    async def reconcile(self, intent: ProviderIntent, outcome: PaymentStatus) -> Optional[Payment]:
        """Bring the local payment and its reservations in line with the provider.

        Safe to call any number of times with the same outcome.
        """
        payment = await self.payment_repo.get_by_intent_id(intent.id)
        if not payment:
            logger.warning(f"No local payment for intent {intent.id}")
            return None

        if outcome == PaymentStatus.PENDING:
            return payment

        if payment.payment_status.is_terminal and payment.payment_status != outcome:
            logger.warning(
                f"Payment {payment.id} already {payment.payment_status.value}; "
                f"ignoring {outcome.value} for intent {intent.id}"
            )
            return payment

        if payment.payment_status != outcome:
            card_brand, last_four = None, None
            if outcome == PaymentStatus.SUCCEEDED and payment.payment_method == PaymentMethod.CREDIT_CARD:
                if intent.card_brand is None:
                    intent = await self._with_card_details(intent)
                card_brand, last_four = intent.card_brand, intent.last_four
            payment = await self.payment_repo.update_status(
                payment.id, outcome, card_brand=card_brand, last_four=last_four
            )
            logger.info(f"Payment {payment.id} is now {outcome.value}")

        for reservation in await self.reservation_repo.get_by_payment_id(payment.id):
            await self.reservation_service.transition(reservation.id, outcome)

        return payment

    async def _with_card_details(self, intent: ProviderIntent) -> ProviderIntent:
        """Webhook payloads only reference the charge by id, so fetch the expanded intent."""
        try:
            return await self.gateway.retrieve_intent(intent.id)
        except PaymentProviderError as e:
            logger.warning(f"Could not fetch card details for intent {intent.id}: {e}")
            return intent

    async def list_payments(self, user_id: int) -> List[Payment]:
        return await self.payment_repo.get_by_user(user_id)

    async def get_payment(self, payment_id: int) -> Payment:
        payment = await self.payment_repo.get_by_id(payment_id)
        if not payment:
            raise NotFoundError("Payment", payment_id)
        return payment
