from django.conf import settings

from pos_backend.remote import RemoteServiceClient


class OrderServiceClient(RemoteServiceClient):
    """Client for the external order-creation service."""

    service_name = "Order service"

    def __init__(self, base_url=None, timeout=None, session=None):
        super().__init__(base_url or settings.POS_ORDER_SERVICE_URL, timeout=timeout, session=session)

    def create_order(self, payload):
        return self._make_request("POST", "", payload)
