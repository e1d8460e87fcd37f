"""
Purchase Order Tests

Covers pricing against the supplier catalog, the frozen totals snapshot,
status changes with rollback and completion receipts.

Run with: pytest backend/procurement/tests/test_purchase_orders.py -v
"""
import pytest

from pos_backend.exceptions import RemoteServiceError
from procurement.calculators import (
    PurchaseOrderTotalCalculator,
    StockLevel,
    compute_stock_receipts,
)
from procurement.exceptions import (
    CatalogResolutionError,
    InvalidPurchaseOrderError,
    PurchaseOrderLockedError,
)
from procurement.purchase_orders import CatalogItem
from procurement.services import PurchaseOrderService
from procurement.signals import purchase_order_completed, purchase_order_created


@pytest.fixture
def catalog():
    return [
        CatalogItem(id="beans", supplier_id="sup-1", name="Coffee beans", purchase_price=15000, base_uom="g"),
        CatalogItem(id="milk", supplier_id="sup-1", name="Milk", purchase_price=8000, base_uom="ml"),
        CatalogItem(id="cups", supplier_id="sup-2", name="Cups", purchase_price=500),
        CatalogItem(id="syrup", supplier_id="sup-1", name="Syrup", purchase_price=30000, is_active=False),
    ]


class FakePurchaseOrderClient:

    def __init__(self):
        self.created = []
        self.updates = []
        self.deleted = []
        self.fail_updates = False

    def create(self, payload):
        self.created.append(payload)
        return {"id": f"po-{len(self.created)}", **payload}

    def update(self, order_id, changes):
        if self.fail_updates:
            raise RemoteServiceError("Purchase order service responded with status 500", status_code=500)
        self.updates.append((order_id, changes))
        return {"id": order_id, **changes}

    def delete(self, order_id):
        self.deleted.append(order_id)
        return {}


@pytest.fixture
def client():
    return FakePurchaseOrderClient()


@pytest.fixture
def service(client):
    return PurchaseOrderService(client=client)


# ============================================================================
# CALCULATOR
# ============================================================================

class TestPurchaseOrderTotalCalculator:

    def test_line_totals_and_grand_total(self, catalog):
        order = PurchaseOrderTotalCalculator(catalog).calculate(
            "sup-1",
            [{"catalog_item_id": "beans", "quantity": 3}, {"catalog_item_id": "milk", "quantity": 5}],
        )
        assert [line.line_total for line in order.lines] == [45000, 40000]
        assert order.totals.grand_total == 85000
        assert order.status == "draft"
        assert order.issued_at is not None

    def test_unknown_item_rejects_whole_order(self, catalog):
        with pytest.raises(CatalogResolutionError) as exc_info:
            PurchaseOrderTotalCalculator(catalog).calculate(
                "sup-1",
                [{"catalog_item_id": "beans", "quantity": 1}, {"catalog_item_id": "sugar", "quantity": 1}],
            )
        assert exc_info.value.catalog_item_id == "sugar"

    def test_inactive_item_rejected(self, catalog):
        with pytest.raises(CatalogResolutionError):
            PurchaseOrderTotalCalculator(catalog).calculate("sup-1", [{"catalog_item_id": "syrup", "quantity": 1}])

    def test_other_suppliers_item_rejected(self, catalog):
        with pytest.raises(CatalogResolutionError):
            PurchaseOrderTotalCalculator(catalog).calculate("sup-1", [{"catalog_item_id": "cups", "quantity": 1}])

    @pytest.mark.parametrize("quantity", [0, -2, "abc"])
    def test_quantity_below_one_rejected(self, catalog, quantity):
        with pytest.raises(InvalidPurchaseOrderError):
            PurchaseOrderTotalCalculator(catalog).calculate(
                "sup-1", [{"catalog_item_id": "beans", "quantity": quantity}]
            )

    def test_caller_grand_total_never_overrides(self, catalog):
        order = PurchaseOrderTotalCalculator(catalog).calculate(
            "sup-1",
            [{"catalogItemId": "beans", "quantity": 2}],
            extra_totals={"grand_total": 1, "shipping_note": "by truck"},
        )
        assert order.totals.to_dict() == {"shipping_note": "by truck", "grand_total": 30000}

    def test_payload_shape(self, catalog):
        order = PurchaseOrderTotalCalculator(catalog).calculate("sup-1", [{"catalog_item_id": "milk", "quantity": 2}])
        payload = order.to_payload()
        assert payload["supplierId"] == "sup-1"
        assert payload["items"] == [{"catalogItemId": "milk", "quantity": 2, "price": 8000}]
        assert payload["totals"] == {"grand_total": 16000}
        assert "issuedAt" in payload

    def test_snapshot_ignores_later_catalog_changes(self, catalog):
        calculator = PurchaseOrderTotalCalculator(catalog)
        order = calculator.calculate("sup-1", [{"catalog_item_id": "beans", "quantity": 2}])
        calculator.catalog["beans"] = CatalogItem(id="beans", supplier_id="sup-1", name="Coffee beans", purchase_price=99000)
        completed = order.with_status("complete")
        assert completed.lines[0].price == 15000
        assert completed.totals.grand_total == 30000


class TestStockReceipts:

    def test_weighted_average_cost(self, catalog):
        order = PurchaseOrderTotalCalculator(catalog).calculate("sup-1", [{"catalog_item_id": "beans", "quantity": 10}])
        receipts = compute_stock_receipts(order, {"beans": StockLevel(current_stock=5, avg_cost=12000)})
        # (5 * 12000 + 10 * 15000) / 15 = 14000
        assert receipts[0].new_stock == 15
        assert receipts[0].new_avg_cost == 14000

    def test_average_rounds_half_up(self, catalog):
        order = PurchaseOrderTotalCalculator(catalog).calculate("sup-1", [{"catalog_item_id": "milk", "quantity": 1}])
        # (1 * 8001 + 1 * 8000) / 2 = 8000.5
        receipts = compute_stock_receipts(order, {"milk": StockLevel(current_stock=1, avg_cost=8001)})
        assert receipts[0].new_avg_cost == 8001

    def test_first_receipt_takes_purchase_price(self, catalog):
        order = PurchaseOrderTotalCalculator(catalog).calculate("sup-1", [{"catalog_item_id": "milk", "quantity": 4}])
        receipts = compute_stock_receipts(order, {})
        assert (receipts[0].new_stock, receipts[0].new_avg_cost) == (4, 8000)


# ============================================================================
# SERVICE
# ============================================================================

class TestPurchaseOrderService:

    def test_create_submits_caches_and_signals(self, service, client, catalog):
        created = []

        def on_created(sender, **kwargs):
            created.append(kwargs["purchase_order"])

        purchase_order_created.connect(on_created)
        try:
            order = service.create_purchase_order(
                "sup-1", [{"catalog_item_id": "beans", "quantity": 1}], catalog
            )
        finally:
            purchase_order_created.disconnect(on_created)

        assert order.id == "po-1"
        assert client.created[0]["totals"] == {"grand_total": 15000}
        assert service.get_cached("po-1").totals.grand_total == 15000
        assert created == [order]

    def test_unresolvable_order_is_never_sent(self, service, client, catalog):
        with pytest.raises(CatalogResolutionError):
            service.create_purchase_order("sup-1", [{"catalog_item_id": "cups", "quantity": 1}], catalog)
        assert client.created == []

    def test_complete_stamps_and_sends_receipts(self, service, client, catalog):
        order = service.create_purchase_order("sup-1", [{"catalog_item_id": "milk", "quantity": 2}], catalog)
        received = []

        def on_completed(sender, **kwargs):
            received.append(kwargs["receipts"])

        purchase_order_completed.connect(on_completed)
        try:
            completed = service.update_status(order, "complete", {"milk": StockLevel(current_stock=2, avg_cost=7000)})
        finally:
            purchase_order_completed.disconnect(on_completed)

        assert completed.status == "complete"
        assert completed.completed_at is not None
        assert client.updates == [("po-1", {"status": "complete"})]
        assert service.get_cached("po-1").status == "complete"
        assert received[0][0].new_avg_cost == 7500

    def test_failed_update_rolls_back(self, service, client, catalog):
        order = service.create_purchase_order("sup-1", [{"catalog_item_id": "milk", "quantity": 2}], catalog)
        client.fail_updates = True

        with pytest.raises(RemoteServiceError):
            service.update_status(order, "pending")
        assert service.get_cached("po-1").status == "draft"

    def test_completed_order_is_locked(self, service, catalog):
        order = service.create_purchase_order("sup-1", [{"catalog_item_id": "milk", "quantity": 2}], catalog)
        completed = service.update_status(order, "complete")

        with pytest.raises(PurchaseOrderLockedError):
            service.update_status(completed, "pending")
        with pytest.raises(PurchaseOrderLockedError):
            service.delete_purchase_order(completed)

    def test_delete_draft(self, service, client, catalog):
        order = service.create_purchase_order("sup-1", [{"catalog_item_id": "milk", "quantity": 2}], catalog)
        service.delete_purchase_order(order)
        assert client.deleted == ["po-1"]
        assert service.get_cached("po-1") is None


# ============================================================================
# API
# ============================================================================

class TestPurchaseOrderQuoteAPI:

    url = "/api/procurements/purchase-orders/quote/"

    def catalog_payload(self):
        return [
            {"id": "beans", "supplier_id": "sup-1", "name": "Coffee beans", "purchase_price": 15000},
            {"id": "milk", "supplier_id": "sup-1", "name": "Milk", "purchase_price": 8000},
            {"id": "cups", "supplier_id": "sup-2", "name": "Cups", "purchase_price": 500},
        ]

    def test_quote(self, api_client):
        response = api_client.post(
            self.url,
            {
                "supplierId": "sup-1",
                "items": [{"catalogItemId": "beans", "quantity": 3}, {"catalogItemId": "milk", "quantity": 5}],
                "catalog": self.catalog_payload(),
                "totals": {"grand_total": 5},
            },
            format="json",
        )
        assert response.status_code == 200
        assert response.data["totals"] == {"grand_total": 85000}

    def test_unresolvable_item_is_422(self, api_client):
        response = api_client.post(
            self.url,
            {
                "supplierId": "sup-1",
                "items": [{"catalogItemId": "cups", "quantity": 1}],
                "catalog": self.catalog_payload(),
            },
            format="json",
        )
        assert response.status_code == 422
        assert response.data["error"]["details"] == {"catalogItemId": "cups"}

    def test_zero_quantity_is_400(self, api_client):
        response = api_client.post(
            self.url,
            {
                "supplierId": "sup-1",
                "items": [{"catalogItemId": "beans", "quantity": 0}],
                "catalog": self.catalog_payload(),
            },
            format="json",
        )
        assert response.status_code == 400
