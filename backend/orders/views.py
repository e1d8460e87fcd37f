import logging

from django.conf import settings
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from cart.serializers import CartStateSerializer, CartTotalsSerializer

from .calculators import compute_totals
from .services import OrderPayloadBuilder

logger = logging.getLogger(__name__)


class OrderPreviewView(APIView):
    """
    POST /api/pos/orders/preview/

    Builds and validates the submission payload for a posted cart state
    without sending it. Validation failures come back as 400 with field
    errors.
    """

    permission_classes = [AllowAny]

    def post(self, request):
        serializer = CartStateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        state = serializer.save()

        builder = OrderPayloadBuilder(default_tax_rate=settings.POS_DEFAULT_TAX_RATE)
        payload = builder.build(state)
        totals = compute_totals(state, builder.default_tax_rate)

        return Response(
            {"payload": payload, "totals": CartTotalsSerializer(totals).data},
            status=status.HTTP_200_OK,
        )
