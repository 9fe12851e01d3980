from django.db import models


class PaymentMethod(models.TextChoices):
    ONLINE = "online", "Online"
    COD = "cod", "Cash on Delivery"


class PaymentStatus(models.TextChoices):
    PAID = "paid", "Paid"
    PENDING = "pending", "Pending"


class PaymentState(models.TextChoices):
    """Single source for the (method, status) pair stored on an order."""
    PAID = "paid", "Paid online"
    COD = "cod", "Cash on delivery"

    @property
    def method(self) -> str:
        return PaymentMethod.ONLINE if self is PaymentState.PAID else PaymentMethod.COD

    @property
    def status(self) -> str:
        return PaymentStatus.PAID if self is PaymentState.PAID else PaymentStatus.PENDING


class Order(models.Model):
    order_id = models.CharField(max_length=40, db_index=True)  # prefix + epoch ms
    customer = models.JSONField(default=dict, blank=True)
    items = models.JSONField(default=list, blank=True)

    # Client-supplied and stored as sent; never recomputed from items
    subtotal = models.FloatField(null=True, blank=True)
    shipping = models.FloatField(null=True, blank=True)
    total = models.FloatField(null=True, blank=True)

    payment_method = models.CharField(max_length=16, choices=PaymentMethod.choices)
    payment_status = models.CharField(max_length=16, choices=PaymentStatus.choices)
    payment = models.JSONField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-created_at",)

    @property
    def payment_state(self) -> PaymentState:
        return PaymentState.PAID if self.payment_method == PaymentMethod.ONLINE else PaymentState.COD

    @property
    def is_paid(self) -> bool:
        return self.payment_state is PaymentState.PAID

    @property
    def customer_name(self) -> str:
        customer = self.customer if isinstance(self.customer, dict) else {}
        return str(customer.get("name") or "")

    def __str__(self):
        return f"{self.order_id} ({self.payment_method}/{self.payment_status})"
