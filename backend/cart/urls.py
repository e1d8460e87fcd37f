"""
URL configuration for cart app.
"""

from django.urls import path

from .views import CartTotalsView

app_name = 'cart'

urlpatterns = [
    # POST /api/pos/cart/totals/ - Compute totals for a posted cart state
    path('totals/', CartTotalsView.as_view(), name='cart-totals'),
]
