from rest_framework import serializers

from pos_backend.choices import Channel

from .exceptions import InvalidVariantConfigError
from .variants import build_variant_config


class VariantConfigSerializer(serializers.Serializer):
    """
    Validates a raw variant configuration and exposes the built VariantConfig
    as `validated_data["config"]`.
    """

    allowed_sizes = serializers.ListField(child=serializers.CharField(), allow_empty=False)
    allowed_temperatures = serializers.ListField(child=serializers.CharField(), allow_empty=False)
    default_size = serializers.CharField(required=False, allow_null=True, default=None)
    default_temperature = serializers.CharField(required=False, allow_null=True, default=None)
    prices = serializers.DictField(required=False, default=dict)

    def validate(self, attrs):
        try:
            attrs["config"] = build_variant_config(attrs)
        except InvalidVariantConfigError as exc:
            raise serializers.ValidationError({exc.field or "non_field_errors": [exc.message]})
        return attrs


class VariantOptionsRequestSerializer(serializers.Serializer):
    variants = VariantConfigSerializer()
    channel = serializers.ChoiceField(choices=Channel.choices, default=Channel.RETAIL)


class VariantOptionSerializer(serializers.Serializer):
    key = serializers.CharField()
    size = serializers.CharField()
    temperature = serializers.CharField()
    price = serializers.IntegerField()
    label = serializers.CharField()
