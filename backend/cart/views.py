"""
POS cart API views.

Computes totals for a cart state posted by the register. The register owns
the cart; nothing is stored by these endpoints.
"""

from django.conf import settings
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView
import logging

from orders.calculators import compute_totals
from payments.money import format_money

from .serializers import CartStateSerializer, CartTotalsSerializer

logger = logging.getLogger(__name__)


class CartTotalsView(APIView):
    """
    POST /api/pos/cart/totals/

    Returns subtotal, discount, tax, grand total and change due for the
    posted cart state.
    """

    permission_classes = [AllowAny]

    def post(self, request):
        serializer = CartStateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        state = serializer.save()

        totals = compute_totals(state, settings.POS_DEFAULT_TAX_RATE)
        logger.debug(f"[CartTotalsView.post] {len(state.lines)} lines -> grand total {totals.grand_total}")

        return Response(
            {
                "currency": settings.POS_CURRENCY,
                "totals": CartTotalsSerializer(totals).data,
                "display": {
                    "grand_total": format_money(settings.POS_CURRENCY, totals.grand_total),
                    "change_due": format_money(settings.POS_CURRENCY, totals.change_due),
                },
            },
            status=status.HTTP_200_OK,
        )
