import logging
from typing import Any, Dict, Optional

from cart.services import CartService
from pos_backend.exceptions import RemoteServiceError

from ..clients import OrderServiceClient
from ..signals import order_submission_failed, order_submitted
from .payload_builder import OrderPayloadBuilder

logger = logging.getLogger(__name__)


class OrderSubmissionService:
    """
    Checkout for one register session.

    On acceptance the cart is cleared and `order_submitted` is sent. On a
    remote failure the cart is left as it was, `order_submission_failed` is
    sent and the error propagates; the payload and its client id are
    discarded. Callers must not start a second submission for the same cart
    while one is in flight.
    """

    def __init__(
        self,
        cart: CartService,
        client: Optional[OrderServiceClient] = None,
        builder: Optional[OrderPayloadBuilder] = None,
    ):
        self.cart = cart
        self.client = client or OrderServiceClient()
        self.builder = builder or OrderPayloadBuilder(default_tax_rate=cart.default_tax_rate)

    def submit(self) -> Dict[str, Any]:
        state = self.cart.state
        payload = self.builder.build(state)
        totals = self.cart.totals()
        client_id = payload["clientId"]

        try:
            order = self.client.create_order(payload)
        except RemoteServiceError as e:
            logger.warning(f"[OrderSubmissionService.submit] Submission {client_id} failed: {e.message}")
            order_submission_failed.send(sender=self.__class__, client_id=client_id, payload=payload, error=e)
            raise

        logger.info(
            f"[OrderSubmissionService.submit] Order accepted for session {self.cart.session_id} "
            f"(client id {client_id}, grand total {totals.grand_total})"
        )
        self.cart.clear()
        order_submitted.send(sender=self.__class__, order=order, client_id=client_id, totals=totals)
        return order
