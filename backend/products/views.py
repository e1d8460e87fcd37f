import logging

from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from .pricing import list_sellable_options, resolve_default_option
from .serializers import VariantOptionSerializer, VariantOptionsRequestSerializer

logger = logging.getLogger(__name__)


class VariantOptionsView(APIView):
    """
    POST /api/products/variant-options/

    Lists the sellable size/temperature options of a variant configuration
    for one channel, together with the option picked by default.
    """

    permission_classes = [AllowAny]

    def post(self, request):
        serializer = VariantOptionsRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        config = serializer.validated_data["variants"]["config"]
        channel = serializer.validated_data["channel"]

        options = list_sellable_options(config, channel)
        default = resolve_default_option(config, channel)
        logger.debug(f"[VariantOptionsView.post] {len(options)} sellable options on {channel}")

        return Response(
            {
                "channel": channel,
                "options": VariantOptionSerializer(options, many=True).data,
                "default": VariantOptionSerializer(default).data if default else None,
            },
            status=status.HTTP_200_OK,
        )
