import logging

from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from .calculators import PurchaseOrderTotalCalculator
from .purchase_orders import CatalogItem
from .serializers import PurchaseOrderQuoteSerializer

logger = logging.getLogger(__name__)


class PurchaseOrderQuoteView(APIView):
    """
    POST /api/procurements/purchase-orders/quote/

    Prices a purchase order against the posted catalog and returns the
    creation payload with its frozen totals. Unresolvable items give 422.
    """

    permission_classes = [AllowAny]

    def post(self, request):
        serializer = PurchaseOrderQuoteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        catalog = [CatalogItem.from_dict(item) for item in data["catalog"]]
        order = PurchaseOrderTotalCalculator(catalog).calculate(
            data["supplierId"],
            [{"catalog_item_id": item["catalogItemId"], "quantity": item["quantity"]} for item in data["items"]],
            extra_totals=data["totals"],
            status=data["status"],
            issued_at=data["issuedAt"],
        )
        return Response(order.to_payload(), status=status.HTTP_200_OK)
