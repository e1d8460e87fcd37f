"""
Cart serializers for the POS API.

These serializers validate a posted cart state and turn it into the
in-memory CartState used by the calculators. `save()` builds the state; it
does not persist anything.
"""

import uuid

from rest_framework import serializers

from payments.money import RATE_DECIMAL_PLACES, normalize_tax_rate
from pos_backend.choices import Channel, DiscountMode, PaymentMethod, PaymentStatus

from .state import CartDiscount, CartLine, CartPayment, CartState


class CartLineSerializer(serializers.Serializer):
    line_id = serializers.CharField(required=False, max_length=64)
    menu_id = serializers.CharField(max_length=64)
    name = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    unit_price = serializers.IntegerField(min_value=0)
    quantity = serializers.IntegerField(min_value=1, default=1)
    channel = serializers.ChoiceField(choices=Channel.choices, required=False)
    variant_key = serializers.CharField(required=False, allow_null=True, default=None)
    variant_label = serializers.CharField(required=False, allow_null=True, default=None)
    size = serializers.CharField(required=False, allow_null=True, default=None)
    temperature = serializers.CharField(required=False, allow_null=True, default=None)


class CartDiscountSerializer(serializers.Serializer):
    mode = serializers.ChoiceField(choices=DiscountMode.choices, default=DiscountMode.NONE)
    value = serializers.DecimalField(
        max_digits=19, decimal_places=RATE_DECIMAL_PLACES, min_value=0, default=0
    )

    def validate(self, data):
        if data["mode"] == DiscountMode.PERCENTAGE and data["value"] > 100:
            raise serializers.ValidationError({"value": "Percentage discount cannot exceed 100."})
        if data["mode"] == DiscountMode.NOMINAL and data["value"] != int(data["value"]):
            raise serializers.ValidationError({"value": "Nominal discount must be a whole amount."})
        return data


class CartPaymentSerializer(serializers.Serializer):
    method = serializers.ChoiceField(choices=PaymentMethod.choices, default=PaymentMethod.CASH)
    status = serializers.ChoiceField(choices=PaymentStatus.choices, default=PaymentStatus.PAID)
    due_date = serializers.DateField(required=False, allow_null=True, default=None)
    amount_received = serializers.IntegerField(min_value=0, default=0)


class CartStateSerializer(serializers.Serializer):
    """
    Validates a full POS cart state.

    Lines without a channel inherit the cart's channel.
    """

    lines = CartLineSerializer(many=True, required=False, default=list)
    discount = CartDiscountSerializer(required=False)
    tax_rate = serializers.DecimalField(
        max_digits=6,
        decimal_places=RATE_DECIMAL_PLACES,
        min_value=0,
        max_value=1,
        required=False,
        allow_null=True,
        default=None,
    )
    payment = CartPaymentSerializer(required=False)
    channel = serializers.ChoiceField(choices=Channel.choices, default=Channel.RETAIL)
    reseller_id = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)
    customer_name = serializers.CharField(required=False, allow_blank=True, default="")
    note = serializers.CharField(required=False, allow_blank=True, default="")
    bypass_served = serializers.BooleanField(required=False, default=False)

    def create(self, validated_data):
        channel = validated_data["channel"]
        discount = validated_data.get("discount") or {}
        payment = validated_data.get("payment") or {}
        tax_rate = validated_data.get("tax_rate")

        return CartState(
            lines=[
                CartLine(
                    line_id=line.get("line_id") or uuid.uuid4().hex,
                    menu_id=line["menu_id"],
                    name=line.get("name", ""),
                    unit_price=line["unit_price"],
                    quantity=line["quantity"],
                    channel=line.get("channel") or channel,
                    variant_key=line.get("variant_key"),
                    variant_label=line.get("variant_label"),
                    size=line.get("size"),
                    temperature=line.get("temperature"),
                )
                for line in validated_data.get("lines", [])
            ],
            discount=CartDiscount.from_dict(discount),
            tax_rate=normalize_tax_rate(tax_rate) if tax_rate is not None else None,
            payment=CartPayment(
                method=payment.get("method", PaymentMethod.CASH),
                status=payment.get("status", PaymentStatus.PAID),
                due_date=payment.get("due_date"),
                amount_received=payment.get("amount_received", 0),
            ),
            channel=channel,
            reseller_id=validated_data.get("reseller_id") or None,
            customer_name=validated_data.get("customer_name", "").strip(),
            note=validated_data.get("note", ""),
            bypass_served=validated_data.get("bypass_served", False),
        )


class CartTotalsSerializer(serializers.Serializer):
    subtotal = serializers.IntegerField()
    discount_amount = serializers.IntegerField()
    net_total = serializers.IntegerField()
    tax = serializers.IntegerField()
    grand_total = serializers.IntegerField()
    change_due = serializers.IntegerField()
    item_count = serializers.IntegerField()
