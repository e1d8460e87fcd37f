"""
Order payload builder.

Turns a validated cart state into the order service's submission payload.
Preconditions are checked before anything leaves the process; a failure
raises OrderValidationError and no network call is made.
"""
import logging
import uuid
from typing import Any, Dict, Optional

from django.conf import settings

from cart.state import CartState
from payments.money import to_decimal, to_json_number
from pos_backend.choices import Channel, PaymentMethod, PaymentStatus

from ..exceptions import OrderValidationError
from ..serializers import OrderSubmissionSerializer

logger = logging.getLogger(__name__)


def generate_client_id() -> str:
    """Idempotency key for one submission attempt."""
    return uuid.uuid4().hex


class OrderPayloadBuilder:

    def __init__(self, default_tax_rate=None):
        self.default_tax_rate = (
            default_tax_rate if default_tax_rate is not None else settings.POS_DEFAULT_TAX_RATE
        )

    def check_preconditions(self, state: CartState) -> None:
        errors = {}
        if not state.lines:
            errors["items"] = ["Add at least one item before checkout."]
        if state.channel == Channel.RESELLER and not state.reseller_id:
            errors["resellerId"] = ["Select a reseller for reseller orders."]
        if state.payment.status == PaymentStatus.VOID:
            errors["paymentStatus"] = ["A new order cannot be submitted as void."]
        elif state.channel == Channel.RETAIL and state.payment.status == PaymentStatus.UNPAID:
            errors["paymentStatus"] = ["Retail orders must be paid."]
        if errors:
            logger.info(f"[OrderPayloadBuilder.check_preconditions] Rejected cart: {sorted(errors)}")
            raise OrderValidationError(errors)

    def effective_tax_rate(self, state: CartState):
        return state.tax_rate if state.tax_rate is not None else self.default_tax_rate

    def build(self, state: CartState, client_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Build the submission payload.

        A fresh client id is generated unless one is passed in; callers
        generate a new one for every attempt, including retries.
        """
        self.check_preconditions(state)

        payment = state.payment
        is_reseller = state.channel == Channel.RESELLER
        due_date = None
        if is_reseller and payment.status == PaymentStatus.UNPAID and payment.due_date:
            due_date = payment.due_date.isoformat()

        payload = {
            "channel": str(state.channel),
            "resellerId": state.reseller_id if is_reseller else None,
            "paymentMethod": str(payment.method),
            "paymentStatus": str(payment.status),
            "dueDate": due_date,
            "note": state.note,
            "customerName": state.customer_name,
            "items": [
                {
                    "menuId": line.menu_id,
                    "variantKey": line.variant_key,
                    "quantity": line.quantity,
                    "unitPrice": line.unit_price,
                    "channel": str(line.channel),
                }
                for line in state.lines
            ],
            "discount": {"mode": str(state.discount.mode), "value": to_json_number(state.discount.value)},
            "taxRate": float(to_decimal(self.effective_tax_rate(state))),
            "bypassServed": state.bypass_served,
            "amountReceived": payment.amount_received if payment.method == PaymentMethod.CASH else None,
            "clientId": client_id or generate_client_id(),
        }

        serializer = OrderSubmissionSerializer(data=payload)
        if not serializer.is_valid():
            logger.info(f"[OrderPayloadBuilder.build] Payload failed validation: {serializer.errors}")
            raise OrderValidationError(serializer.errors)
        return payload
