"""
URL configuration for the pos_backend project.
"""

from django.http import JsonResponse
from django.urls import include, path


def health_check(request):
    """Simple health check endpoint that doesn't require authentication"""
    return JsonResponse({"status": "ok", "message": "Backend is running"})


urlpatterns = [
    path("api/health/", health_check, name="health_check"),
    path("api/products/", include("products.urls")),
    path("api/pos/cart/", include("cart.urls")),
    path("api/pos/orders/", include("orders.urls")),
    path("api/procurements/", include("procurement.urls")),
]
