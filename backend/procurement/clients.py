from django.conf import settings

from pos_backend.remote import RemoteServiceClient


class PurchaseOrderClient(RemoteServiceClient):
    """Client for the external purchase-order service."""

    service_name = "Purchase order service"

    def __init__(self, base_url=None, timeout=None, session=None):
        super().__init__(base_url or settings.POS_PROCUREMENT_SERVICE_URL, timeout=timeout, session=session)

    def create(self, payload):
        return self._make_request("POST", "", payload)

    def update(self, order_id, changes):
        return self._make_request("PATCH", f"/{order_id}", changes)

    def delete(self, order_id):
        return self._make_request("DELETE", f"/{order_id}")
