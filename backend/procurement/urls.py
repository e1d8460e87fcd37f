from django.urls import path

from .views import PurchaseOrderQuoteView

app_name = "procurement"

urlpatterns = [
    # POST /api/procurements/purchase-orders/quote/ - Price a purchase order
    path("purchase-orders/quote/", PurchaseOrderQuoteView.as_view(), name="purchase-order-quote"),
]
