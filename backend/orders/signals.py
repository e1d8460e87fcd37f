from django.dispatch import Signal

# Sent with `order` (remote response), `client_id` and `totals` after the
# order service accepts a submission. Listeners close the payment UI.
order_submitted = Signal()

# Sent with `client_id`, `payload` and `error` when the order service call
# fails. The cart is left untouched.
order_submission_failed = Signal()
