"""
Shared enumerations for the POS core.

Values are the lowercase strings used on the wire by the order and
purchase-order services.
"""

from django.db import models


class Channel(models.TextChoices):
    """Sales context selecting which price column applies."""

    RETAIL = "retail", "Retail"
    RESELLER = "reseller", "Reseller"


class DiscountMode(models.TextChoices):
    NONE = "none", "No discount"
    PERCENTAGE = "percentage", "Percentage"
    NOMINAL = "nominal", "Nominal"


class PaymentMethod(models.TextChoices):
    CASH = "cash", "Cash"
    TRANSFER = "transfer", "Transfer"


class PaymentStatus(models.TextChoices):
    PAID = "paid", "Paid"
    UNPAID = "unpaid", "Unpaid"
    VOID = "void", "Void"


class PurchaseOrderStatus(models.TextChoices):
    DRAFT = "draft", "Draft"
    PENDING = "pending", "Pending"
    COMPLETE = "complete", "Complete"
