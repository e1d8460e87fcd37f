from django.urls import path

from .views import OrderPreviewView

app_name = "orders"

urlpatterns = [
    # POST /api/pos/orders/preview/ - Build the submission payload for a cart state
    path("preview/", OrderPreviewView.as_view(), name="order-preview"),
]
