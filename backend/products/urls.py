from django.urls import path

from .views import VariantOptionsView

app_name = "products"

urlpatterns = [
    # POST /api/products/variant-options/ - List sellable variant options for a channel
    path("variant-options/", VariantOptionsView.as_view(), name="variant-options"),
]
