from rest_framework import serializers

from payments.money import RATE_DECIMAL_PLACES
from pos_backend.choices import Channel, DiscountMode, PaymentMethod, PaymentStatus


class OrderItemPayloadSerializer(serializers.Serializer):
    menuId = serializers.CharField(max_length=64)
    variantKey = serializers.CharField(allow_null=True, required=False)
    quantity = serializers.IntegerField(min_value=1)
    unitPrice = serializers.IntegerField(min_value=0)
    channel = serializers.ChoiceField(choices=Channel.choices)


class OrderDiscountPayloadSerializer(serializers.Serializer):
    mode = serializers.ChoiceField(choices=DiscountMode.choices)
    value = serializers.DecimalField(max_digits=19, decimal_places=RATE_DECIMAL_PLACES, min_value=0)

    def validate(self, data):
        if data["mode"] == DiscountMode.PERCENTAGE and data["value"] > 100:
            raise serializers.ValidationError({"value": "Percentage discount cannot exceed 100."})
        if data["mode"] == DiscountMode.NOMINAL and data["value"] != int(data["value"]):
            raise serializers.ValidationError({"value": "Nominal discount must be a whole amount."})
        return data


class OrderSubmissionSerializer(serializers.Serializer):
    """
    Validates the order submission wire payload before it is sent.

    Field names follow the order service's camelCase contract.
    """

    channel = serializers.ChoiceField(choices=Channel.choices)
    resellerId = serializers.CharField(allow_null=True)
    paymentMethod = serializers.ChoiceField(choices=PaymentMethod.choices)
    paymentStatus = serializers.ChoiceField(choices=[PaymentStatus.PAID, PaymentStatus.UNPAID])
    dueDate = serializers.DateField(allow_null=True)
    note = serializers.CharField(max_length=500, allow_blank=True)
    customerName = serializers.CharField(max_length=140, allow_blank=True)
    items = OrderItemPayloadSerializer(many=True, allow_empty=False)
    discount = OrderDiscountPayloadSerializer()
    taxRate = serializers.DecimalField(max_digits=6, decimal_places=RATE_DECIMAL_PLACES, min_value=0, max_value=1)
    bypassServed = serializers.BooleanField()
    amountReceived = serializers.IntegerField(min_value=0, allow_null=True)
    clientId = serializers.RegexField(r"^[A-Za-z0-9_-]{8,64}$")

    def validate(self, data):
        if data["channel"] == Channel.RESELLER and not data.get("resellerId"):
            raise serializers.ValidationError({"resellerId": "Reseller is required for reseller orders."})
        if data["channel"] == Channel.RETAIL and data["paymentStatus"] == PaymentStatus.UNPAID:
            raise serializers.ValidationError({"paymentStatus": "Retail orders must be paid."})
        if data["dueDate"] and not (
            data["channel"] == Channel.RESELLER and data["paymentStatus"] == PaymentStatus.UNPAID
        ):
            raise serializers.ValidationError({"dueDate": "Due date applies only to unpaid reseller orders."})
        if data["paymentMethod"] != PaymentMethod.CASH and data.get("amountReceived") is not None:
            raise serializers.ValidationError({"amountReceived": "Amount received applies only to cash."})
        return data
