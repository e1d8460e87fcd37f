from rest_framework import serializers

from pos_backend.choices import PurchaseOrderStatus


class CatalogItemSerializer(serializers.Serializer):
    id = serializers.CharField(max_length=64)
    supplier_id = serializers.CharField(max_length=64)
    name = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    base_uom = serializers.CharField(max_length=32, required=False, default="pcs")
    purchase_price = serializers.IntegerField(min_value=0)
    is_active = serializers.BooleanField(required=False, default=True)


class PurchaseOrderItemSerializer(serializers.Serializer):
    catalogItemId = serializers.CharField(max_length=64)
    quantity = serializers.IntegerField(min_value=1)


class PurchaseOrderQuoteSerializer(serializers.Serializer):
    """
    Quote request: the items to order plus the supplier catalog snapshot
    they are priced against.
    """

    supplierId = serializers.CharField(max_length=64)
    status = serializers.ChoiceField(
        choices=[PurchaseOrderStatus.DRAFT, PurchaseOrderStatus.PENDING], default=PurchaseOrderStatus.DRAFT
    )
    items = PurchaseOrderItemSerializer(many=True, allow_empty=False)
    catalog = CatalogItemSerializer(many=True)
    totals = serializers.DictField(required=False, default=dict)
    issuedAt = serializers.DateTimeField(required=False, allow_null=True, default=None)
