"""Order domain constants.

Any of the five statuses may be set by an administrator at any time;
there is no transition table.  Every change is recorded in the status
history, including repeats of the current status.
"""

from django.db import models


class OrderStatus(models.TextChoices):
    ORDER_PLACED = "order_placed", "Order Placed"
    IN_PRINTING = "in_printing", "In Printing"
    ORDER_DISPATCHED = "order_dispatched", "Order Dispatched"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"


class PaymentStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    COMPLETED = "completed", "Completed"
    FAILED = "failed", "Failed"
    REFUNDED = "refunded", "Refunded"


class CheckoutStage(models.TextChoices):
    RECEIVED = "received"
    VALIDATING = "validating"
    AUTHORIZING = "authorizing"
    AUTHORIZED = "authorized"
    DECLINED = "declined"
    PERSISTING = "persisting"
    PERSISTED = "persisted"
    PERSIST_FAILED = "persist_failed"
    FINALIZING = "finalizing"
    DONE = "done"


REQUIRED_CHECKOUT_SECTIONS = (
    "paymentData",
    "customerInfo",
    "shippingInfo",
    "cartItems",
    "pricing",
)

PAYMENT_METHOD_CARD = "Credit Card"
INITIAL_HISTORY_NOTE = "Order placed"
SEQUENCE_WIDTH = 3
PRICING_TOLERANCE = "0.01"
RECENT_ORDERS_LIMIT = 5
DEFAULT_STATS_PERIOD_DAYS = 30
MAX_STATS_PERIOD_DAYS = 3650

# Bounds of the order columns; checkout input is held to them before charging.
MAX_MONEY = "99999999.99"
MAX_LINE_QUANTITY = 2_147_483_647
