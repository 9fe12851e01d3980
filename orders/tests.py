import json
from smtplib import SMTPException
from unittest.mock import MagicMock, patch

from django.core import mail
from django.db import DatabaseError
from django.test import TestCase, override_settings

from payments.utils import compute_payment_signature

from . import services, utils
from .models import Order, PaymentState


def _order_data(**overrides):
    data = {
        "customer": {
            "name": "Asha Verma",
            "phone": "9876543210",
            "email": "asha@example.com",
            "address": "12 MG Road",
            "city": "Lucknow",
            "state": "UP",
            "pincode": "226001",
        },
        "items": [
            {"name": "Tulsi Drops", "qty": 2, "price": 199},
            {"name": "Ashwagandha Churna", "qty": 1, "price": 349},
        ],
        "subtotal": 747,
        "shipping": 50,
        "total": 797,
    }
    data.update(overrides)
    return data


def _signed_payment(secret="s3cr3t", order_id="order_abc", payment_id="pay_xyz"):
    return {
        "razorpay_order_id": order_id,
        "razorpay_payment_id": payment_id,
        "razorpay_signature": compute_payment_signature(order_id, payment_id, secret),
    }


@override_settings(
    EMAIL_BACKEND="django.core.mail.backends.locmem.EmailBackend",
    EMAIL_HOST_USER="orders@herbsayurmed.test",
    ORDERS_NOTIFY_EMAIL="orders@herbsayurmed.test",
    RAZORPAY_KEY_SECRET="s3cr3t",
)
class SaveOrderTests(TestCase):
    def _post(self, payload):
        return self.client.post("/save-order", data=json.dumps(payload), content_type="application/json")

    def test_cod_order_saved_without_verification(self):
        with patch("orders.services.verify_payment_signature") as verify:
            resp = self._post({"orderData": _order_data()})

        verify.assert_not_called()
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["message"], "Order placed successfully")

        order = Order.objects.get()
        self.assertEqual(order.order_id, body["orderId"])
        self.assertTrue(order.order_id.startswith("HSM"))
        self.assertEqual(order.payment_method, "cod")
        self.assertEqual(order.payment_status, "pending")
        self.assertIsNone(order.payment)
        self.assertEqual(order.payment_state, PaymentState.COD)
        self.assertEqual(order.total, 797)
        self.assertEqual(order.customer["city"], "Lucknow")
        self.assertEqual(len(order.items), 2)

    def test_valid_signature_saved_as_paid(self):
        payment = _signed_payment()
        resp = self._post({"orderData": _order_data(), "payment": payment})

        self.assertEqual(resp.status_code, 200)
        order = Order.objects.get()
        self.assertEqual(order.payment_method, "online")
        self.assertEqual(order.payment_status, "paid")
        self.assertEqual(order.payment, payment)
        self.assertTrue(order.is_paid)

    def test_mismatched_signature_rejected_and_not_saved(self):
        payment = _signed_payment(secret="wrong-secret")
        with self.assertLogs("orders.services", level="ERROR"):
            resp = self._post({"orderData": _order_data(), "payment": payment})

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Invalid payment signature"})
        self.assertFalse(Order.objects.exists())
        self.assertEqual(len(mail.outbox), 0)

    def test_payment_without_signature_skips_verification(self):
        # Known gap: unsigned payment details are stored as paid
        payment = {"razorpay_order_id": "order_abc", "razorpay_payment_id": "pay_xyz"}
        with patch("orders.services.verify_payment_signature") as verify:
            with self.assertLogs("orders.services", level="WARNING"):
                resp = self._post({"orderData": _order_data(), "payment": payment})

        verify.assert_not_called()
        self.assertEqual(resp.status_code, 200)
        order = Order.objects.get()
        self.assertEqual(order.payment_method, "online")
        self.assertEqual(order.payment_status, "paid")

    def test_empty_payment_object_counts_as_online(self):
        with patch("orders.services.verify_payment_signature") as verify:
            with self.assertLogs("orders.services", level="WARNING"):
                resp = self._post({"orderData": _order_data(), "payment": {}})

        verify.assert_not_called()
        self.assertEqual(resp.status_code, 200)
        order = Order.objects.get()
        self.assertEqual(order.payment_method, "online")
        self.assertEqual(order.payment_status, "paid")
        self.assertEqual(order.payment, {})

    def test_merchant_notified(self):
        resp = self._post({"orderData": _order_data()})

        self.assertEqual(len(mail.outbox), 1)
        msg = mail.outbox[0]
        self.assertEqual(msg.to, ["orders@herbsayurmed.test"])
        self.assertIn(resp.json()["orderId"], msg.subject)
        self.assertIn("Asha Verma", msg.subject)

    def test_notification_failure_does_not_fail_save(self):
        with patch("orders.emails.EmailMultiAlternatives.send", side_effect=SMTPException("relay down")):
            with self.assertLogs("orders.services", level="ERROR") as cm:
                resp = self._post({"orderData": _order_data(), "payment": _signed_payment()})

        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertTrue(body["success"])
        self.assertTrue(body["orderId"])
        self.assertEqual(Order.objects.get().order_id, body["orderId"])
        self.assertIn(body["orderId"], cm.output[0])

    def test_persistence_failure_reported(self):
        with patch.object(Order, "save", side_effect=DatabaseError("db down")):
            with self.assertLogs("orders.views", level="ERROR"):
                resp = self._post({"orderData": _order_data()})

        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"error": "Failed to save order", "details": "db down"})
        self.assertEqual(len(mail.outbox), 0)

    def test_totals_are_trusted_from_client(self):
        resp = self._post({"orderData": _order_data(subtotal=1, shipping=0, total=1)})

        self.assertEqual(resp.status_code, 200)
        order = Order.objects.get()
        self.assertEqual(order.subtotal, 1)
        self.assertEqual(order.total, 1)

    def test_fractional_and_large_totals_stored_as_sent(self):
        resp = self._post({"orderData": _order_data(subtotal=10.555, shipping=12345678901.5, total=0.125)})

        self.assertEqual(resp.status_code, 200)
        order = Order.objects.get()
        self.assertEqual(order.subtotal, 10.555)
        self.assertEqual(order.shipping, 12345678901.5)
        self.assertEqual(order.total, 0.125)

    def test_non_numeric_total_fails_save(self):
        with self.assertLogs("orders.views", level="ERROR"):
            resp = self._post({"orderData": _order_data(total="lots")})

        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json()["error"], "Failed to save order")
        self.assertFalse(Order.objects.exists())

    def test_sequential_orders_get_distinct_ids(self):
        first = self._post({"orderData": _order_data()}).json()["orderId"]
        second = self._post({"orderData": _order_data()}).json()["orderId"]
        self.assertNotEqual(first, second)
        self.assertEqual(Order.objects.count(), 2)

    def test_invalid_json_rejected(self):
        resp = self.client.post("/save-order", data="{oops", content_type="application/json")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Invalid JSON body"})

    def test_missing_order_data_rejected(self):
        resp = self._post({"payment": _signed_payment()})
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(Order.objects.exists())

    def test_get_not_allowed(self):
        self.assertEqual(self.client.get("/save-order").status_code, 405)


class GenerateOrderIdTests(TestCase):
    def setUp(self):
        utils._last_ms = 0

    def tearDown(self):
        utils._last_ms = 0

    def test_prefix_and_millisecond_timestamp(self):
        with patch("orders.utils.time.time", return_value=4102444800.0):
            self.assertEqual(utils.generate_order_id("HSM"), "HSM4102444800000")

    def test_ids_differ_when_clock_moves(self):
        with patch("orders.utils.time.time", side_effect=[4102444800.0, 4102444800.5]):
            first = utils.generate_order_id("HSM")
            second = utils.generate_order_id("HSM")
        self.assertEqual(first, "HSM4102444800000")
        self.assertEqual(second, "HSM4102444800500")

    def test_same_millisecond_still_increases(self):
        with patch("orders.utils.time.time", return_value=4102444800.0):
            first = utils.generate_order_id("HSM")
            second = utils.generate_order_id("HSM")
        self.assertEqual(first, "HSM4102444800000")
        self.assertEqual(second, "HSM4102444800001")

    @override_settings(ORDER_ID_PREFIX="TST")
    def test_prefix_from_settings(self):
        self.assertTrue(utils.generate_order_id().startswith("TST"))


@override_settings(
    EMAIL_BACKEND="django.core.mail.backends.locmem.EmailBackend",
    ORDERS_NOTIFY_EMAIL="orders@herbsayurmed.test",
    RAZORPAY_KEY_SECRET="s3cr3t",
)
class PlaceOrderTests(TestCase):
    def test_custom_notifier_receives_saved_order(self):
        notify = MagicMock()
        order = services.place_order(_order_data(), notify=notify)

        notify.assert_called_once_with(order)
        self.assertIsNotNone(order.pk)
        self.assertEqual(len(mail.outbox), 0)

    def test_default_notifier_resolved_at_call_time(self):
        with patch("orders.services.send_order_notification") as notify:
            order = services.place_order(_order_data())
        notify.assert_called_once_with(order)

    def test_empty_payment_maps_to_paid_state(self):
        self.assertEqual(services.payment_state_for({}), PaymentState.PAID)
        self.assertEqual(services.payment_state_for(None), PaymentState.COD)
