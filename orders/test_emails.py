from django.core import mail
from django.test import TestCase, override_settings

from .emails import send_order_notification
from .models import Order


@override_settings(
    EMAIL_BACKEND="django.core.mail.backends.locmem.EmailBackend",
    EMAIL_HOST_USER="orders@herbsayurmed.test",
    ORDERS_NOTIFY_EMAIL="orders@herbsayurmed.test",
)
class OrderNotificationEmailTests(TestCase):
    def _order(self, **kwargs):
        fields = {
            "order_id": "HSM1700000000000",
            "customer": {
                "name": "Asha Verma",
                "phone": "9876543210",
                "email": "asha@example.com",
                "address": "12 MG Road",
                "city": "Lucknow",
                "state": "UP",
                "pincode": "226001",
            },
            "items": [{"name": "Tulsi Drops", "qty": 2, "price": 199}],
            "subtotal": 398.0,
            "shipping": 50.0,
            "total": 448.0,
            "payment_method": "cod",
            "payment_status": "pending",
        }
        fields.update(kwargs)
        return Order.objects.create(**fields)

    def test_text_and_html_parts(self):
        order = self._order()
        sent = send_order_notification(order)

        self.assertEqual(sent, 1)
        msg = mail.outbox[0]
        self.assertEqual(msg.subject, "🛍️ New Order HSM1700000000000 from Asha Verma")
        self.assertEqual(msg.from_email, "Herbsayurmed <orders@herbsayurmed.test>")
        self.assertIn("Order ID: HSM1700000000000", msg.body)
        self.assertIn("COD (Pending)", msg.body)
        self.assertIn("Tulsi Drops (x2) - ₹398", msg.body)
        self.assertIn("12 MG Road, Lucknow, UP - 226001", msg.body)
        self.assertIn("Total: ₹448\n", msg.body)

        html, mimetype = msg.alternatives[0]
        self.assertEqual(mimetype, "text/html")
        self.assertIn("Order #HSM1700000000000", html)
        self.assertIn("2x Tulsi Drops", html)

    def test_paid_order_labelled_paid(self):
        order = self._order(payment_method="online", payment_status="paid", payment={"razorpay_payment_id": "pay_1"})
        send_order_notification(order)
        self.assertIn("PAID", mail.outbox[0].body)
        self.assertNotIn("COD (Pending)", mail.outbox[0].body)

    def test_malformed_items_do_not_break_rendering(self):
        order = self._order(items=[{"name": "Gift", "qty": "one", "price": None}, "junk"])
        send_order_notification(order)
        self.assertIn("Gift (xone) - ₹-", mail.outbox[0].body)

    def test_fractional_amounts_rendered_as_sent(self):
        order = self._order(subtotal=10.555, shipping=0.0, total=0.125)
        send_order_notification(order)
        body = mail.outbox[0].body
        self.assertIn("Subtotal: ₹10.555\n", body)
        self.assertIn("Shipping: ₹0\n", body)
        self.assertIn("Total: ₹0.125\n", body)

    @override_settings(ORDERS_NOTIFY_EMAIL="", EMAIL_HOST_USER="")
    def test_no_mailbox_configured(self):
        order = self._order()
        with self.assertLogs("orders.emails", level="WARNING"):
            self.assertEqual(send_order_notification(order), 0)
        self.assertEqual(len(mail.outbox), 0)
