from django.dispatch import Signal

# Sent with `purchase_order` once the purchase-order service accepts it.
purchase_order_created = Signal()

# Sent with `purchase_order` and `receipts` (stock level and average cost
# per line) when an order moves to complete.
purchase_order_completed = Signal()
