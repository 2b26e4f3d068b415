from fastapi import APIRouter, Depends, HTTPException, Query, Request
from typing import List, Optional

from parkfinder.application.services.payment_service import PaymentService
from parkfinder.infrastructure.api.dependencies import get_payment_service
from parkfinder.infrastructure.api.routers.errors import http_error
from parkfinder.infrastructure.api.schemas.payments import (
    PaymentIntentRequest, PaymentIntentResponse, PaymentResponse, PaymentStatusResponse, WebhookAck
)

router = APIRouter(prefix="/api", tags=["payments"])


@router.post("/create-payment-intent", response_model=PaymentIntentResponse, response_model_by_alias=True)
async def create_payment_intent(
    request: PaymentIntentRequest,
    service: PaymentService = Depends(get_payment_service)
):
    try:
        opened = await service.open_payment(
            amount=request.amount,
            user_id=request.user_id,
            reservation_id=request.reservation_id,
            payment_method=request.payment_method,
        )
    except Exception as e:
        raise http_error(e, "create payment intent")
    return PaymentIntentResponse(
        client_secret=opened.client_secret,
        id=opened.intent_id,
        payment_id=opened.payment.id,
    )


@router.get("/payment-status/{intent_id}", response_model=PaymentStatusResponse)
async def get_payment_status(
    intent_id: str,
    service: PaymentService = Depends(get_payment_service)
):
    try:
        return await service.confirm(intent_id)
    except Exception as e:
        raise http_error(e, "check payment status")


@router.get("/payments", response_model=List[PaymentResponse])
async def list_payments(
    user_id: Optional[int] = Query(default=None, alias="userId"),
    service: PaymentService = Depends(get_payment_service)
):
    if not user_id:
        raise HTTPException(status_code=400, detail="User ID is required")
    try:
        return await service.list_payments(user_id)
    except Exception as e:
        raise http_error(e, "fetch payments")


@router.get("/payments/{payment_id}", response_model=PaymentResponse)
async def get_payment(
    payment_id: int,
    service: PaymentService = Depends(get_payment_service)
):
    try:
        return await service.get_payment(payment_id)
    except Exception as e:
        raise http_error(e, "fetch payment")


@router.delete("/payments/{payment_id}")
async def delete_payment(
    payment_id: int,
    service: PaymentService = Depends(get_payment_service)
):
    try:
        await service.get_payment(payment_id)
    except Exception as e:
        raise http_error(e, "delete payment")
    # Payment rows are only ever settled by reconciliation
    raise HTTPException(status_code=501, detail="Deleting payments is not supported")


@router.post("/webhook", response_model=WebhookAck)
async def payment_webhook(
    request: Request,
    service: PaymentService = Depends(get_payment_service)
):
    payload = await request.body()
    signature = request.headers.get("stripe-signature")
    try:
        await service.handle_webhook(payload, signature)
    except Exception as e:
        raise http_error(e, "process webhook")
    return WebhookAck(received=True)
