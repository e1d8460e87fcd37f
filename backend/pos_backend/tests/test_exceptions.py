"""
Exception Handler Tests

Run with: pytest backend/pos_backend/tests/test_exceptions.py -v
"""
from rest_framework.exceptions import ValidationError

from orders.exceptions import OrderValidationError
from pos_backend.exceptions import RemoteServiceError, pos_exception_handler
from procurement.exceptions import CatalogResolutionError, PurchaseOrderLockedError


class TestPosExceptionHandler:

    def test_validation_error_is_400(self):
        response = pos_exception_handler(OrderValidationError({"items": ["empty"]}), {})
        assert response.status_code == 400
        assert response.data["error"]["code"] == "order_invalid"
        assert response.data["error"]["details"] == {"items": ["empty"]}

    def test_remote_error_is_502(self):
        response = pos_exception_handler(RemoteServiceError("Order service is unreachable"), {})
        assert response.status_code == 502

    def test_catalog_resolution_is_422(self):
        assert pos_exception_handler(CatalogResolutionError("x"), {}).status_code == 422

    def test_locked_is_409(self):
        assert pos_exception_handler(PurchaseOrderLockedError("po-1"), {}).status_code == 409

    def test_drf_errors_keep_default_handling(self):
        response = pos_exception_handler(ValidationError({"quantity": ["bad"]}), {})
        assert response.status_code == 400
        assert response.data == {"quantity": ["bad"]}

    def test_unknown_errors_are_not_handled(self):
        assert pos_exception_handler(KeyError("x"), {}) is None

    def test_health_check(self, api_client):
        response = api_client.get("/api/health/")
        assert response.status_code == 200
