import hashlib
import hmac
import json
from unittest.mock import MagicMock, patch

from django.core.exceptions import ImproperlyConfigured
from django.test import SimpleTestCase, TestCase, override_settings
from requests import ConnectionError as RequestsConnectionError

from . import utils
from .integrations import razorpay
from .integrations.razorpay import RazorpayClient, RazorpayError


class FakeResponse:
    def __init__(self, status_code=200, data=None):
        self.status_code = status_code
        self._data = data

    def json(self):
        if self._data is None:
            raise ValueError("no json")
        return self._data


class PaymentSignatureTests(SimpleTestCase):
    """Tests for the Razorpay checkout signature helpers."""

    def _reference(self):
        return hmac.new(b"s3cr3t", b"order_abc|pay_xyz", hashlib.sha256).hexdigest()

    def test_signature_matches_hmac_sha256_of_ids(self):
        sig = utils.compute_payment_signature("order_abc", "pay_xyz", "s3cr3t")
        self.assertEqual(sig, self._reference())
        self.assertEqual(sig, sig.lower())
        self.assertEqual(len(sig), 64)

    def test_signature_is_deterministic(self):
        first = utils.compute_payment_signature("order_abc", "pay_xyz", "s3cr3t")
        second = utils.compute_payment_signature("order_abc", "pay_xyz", "s3cr3t")
        self.assertEqual(first, second)

    def test_exact_signature_verifies(self):
        self.assertTrue(
            utils.verify_payment_signature("order_abc", "pay_xyz", self._reference(), secret="s3cr3t")
        )

    def test_single_character_mutation_fails(self):
        good = self._reference()
        for i in (0, len(good) // 2, len(good) - 1):
            swapped = "0" if good[i] != "0" else "1"
            bad = good[:i] + swapped + good[i + 1:]
            self.assertFalse(
                utils.verify_payment_signature("order_abc", "pay_xyz", bad, secret="s3cr3t"), bad
            )

    def test_comparison_is_exact(self):
        good = self._reference()
        self.assertFalse(utils.verify_payment_signature("order_abc", "pay_xyz", good.upper(), secret="s3cr3t"))
        self.assertFalse(utils.verify_payment_signature("order_abc", "pay_xyz", f" {good}", secret="s3cr3t"))
        self.assertFalse(utils.verify_payment_signature("order_abc", "pay_xyz", "", secret="s3cr3t"))

    def test_swapped_ids_fail(self):
        self.assertFalse(
            utils.verify_payment_signature("pay_xyz", "order_abc", self._reference(), secret="s3cr3t")
        )

    @override_settings(RAZORPAY_KEY_SECRET="s3cr3t")
    def test_secret_defaults_to_settings(self):
        self.assertTrue(utils.verify_payment_signature("order_abc", "pay_xyz", self._reference()))

    @override_settings(RAZORPAY_KEY_SECRET="")
    def test_missing_secret_raises(self):
        with self.assertLogs("payments.utils", level="ERROR"):
            with self.assertRaises(ImproperlyConfigured):
                utils.verify_payment_signature("order_abc", "pay_xyz", "sig")


class RazorpayClientTests(SimpleTestCase):
    def setUp(self):
        self.gateway = RazorpayClient("rzp_test_key", "s3cr3t", base_url="https://api.razorpay.test/v1/")

    def tearDown(self):
        self.gateway.close()

    def test_create_order_posts_amount_in_paise(self):
        gateway_order = {"id": "order_abc", "amount": 49950, "currency": "INR", "status": "created"}
        with patch.object(self.gateway.session, "post", return_value=FakeResponse(200, gateway_order)) as post, \
                patch("payments.integrations.razorpay.time.time", return_value=1700000000.0):
            result = self.gateway.create_order(499.5)

        self.assertEqual(result, gateway_order)
        post.assert_called_once_with(
            "https://api.razorpay.test/v1/orders",
            json={"amount": 49950, "currency": "INR", "receipt": "order_rcptid_1700000000000"},
            timeout=30,
        )

    def test_currency_passed_through(self):
        with patch.object(self.gateway.session, "post", return_value=FakeResponse(200, {"id": "o"})) as post:
            self.gateway.create_order("10", "USD")
        payload = post.call_args.kwargs["json"]
        self.assertEqual(payload["currency"], "USD")
        self.assertEqual(payload["amount"], 1000)

    def test_empty_currency_defaults_to_inr(self):
        with patch.object(self.gateway.session, "post", return_value=FakeResponse(200, {"id": "o"})) as post:
            self.gateway.create_order(1, "")
        self.assertEqual(post.call_args.kwargs["json"]["currency"], "INR")

    def test_session_uses_key_pair(self):
        self.assertEqual(self.gateway.session.auth.username, "rzp_test_key")
        self.assertEqual(self.gateway.session.auth.password, "s3cr3t")

    def test_invalid_amounts_rejected_without_calling_gateway(self):
        with patch.object(self.gateway.session, "post") as post:
            for amount in (0, -5, "abc", None, True, "NaN"):
                with self.assertRaises(RazorpayError, msg=repr(amount)):
                    self.gateway.create_order(amount)
        post.assert_not_called()

    def test_gateway_error_description_surfaced(self):
        body = {"error": {"code": "BAD_REQUEST_ERROR", "description": "Authentication failed"}}
        with patch.object(self.gateway.session, "post", return_value=FakeResponse(401, body)):
            with self.assertRaisesMessage(RazorpayError, "Authentication failed"):
                self.gateway.create_order(100)

    def test_gateway_error_without_body(self):
        with patch.object(self.gateway.session, "post", return_value=FakeResponse(502)):
            with self.assertRaisesMessage(RazorpayError, "HTTP 502"):
                self.gateway.create_order(100)

    def test_non_object_json_rejected(self):
        with patch.object(self.gateway.session, "post", return_value=FakeResponse(200, ["order_abc"])):
            with self.assertRaisesMessage(RazorpayError, "Gateway returned an unexpected response"):
                self.gateway.create_order(100)

    def test_network_failure_wrapped(self):
        with patch.object(self.gateway.session, "post", side_effect=RequestsConnectionError("refused")):
            with self.assertRaisesMessage(RazorpayError, "Gateway request failed: refused"):
                self.gateway.create_order(100)

    @override_settings(RAZORPAY_KEY_ID="rzp_live_abc", RAZORPAY_KEY_SECRET="x", RAZORPAY_BASE_URL="https://rzp.example/v1")
    def test_get_client_builds_from_settings(self):
        razorpay.set_client(None)
        try:
            client = razorpay.get_client()
            self.assertIs(client, razorpay.get_client())
            self.assertEqual(client.key_id, "rzp_live_abc")
            self.assertEqual(client.base_url, "https://rzp.example/v1")
        finally:
            razorpay.set_client(None)


@override_settings(RAZORPAY_KEY_ID="rzp_test_key", RAZORPAY_KEY_SECRET="s3cr3t")
class PaymentViewsTests(TestCase):
    def _post(self, payload):
        return self.client.post("/create-order", data=json.dumps(payload), content_type="application/json")

    def test_create_order_returns_gateway_order(self):
        gateway_order = {"id": "order_abc", "amount": 50000, "currency": "INR"}
        fake = MagicMock()
        fake.create_order.return_value = gateway_order
        with patch("payments.views.get_client", return_value=fake):
            resp = self._post({"amount": 500})

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), gateway_order)
        fake.create_order.assert_called_once_with(500, None)

    def test_create_order_failure_returns_details(self):
        fake = MagicMock()
        fake.create_order.side_effect = RazorpayError("Authentication failed")
        with patch("payments.views.get_client", return_value=fake):
            resp = self._post({"amount": 500, "currency": "INR"})

        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"error": "Failed to create order", "details": "Authentication failed"})

    def test_unexpected_gateway_body_returns_json_error(self):
        gateway = RazorpayClient("rzp_test_key", "s3cr3t", base_url="https://api.razorpay.test/v1")
        self.addCleanup(gateway.close)
        with patch.object(gateway.session, "post", return_value=FakeResponse(200, "ok")), \
                patch("payments.views.get_client", return_value=gateway):
            resp = self._post({"amount": 500})

        self.assertEqual(resp.status_code, 500)
        self.assertEqual(
            resp.json(), {"error": "Failed to create order", "details": "Gateway returned an unexpected response"}
        )

    def test_create_order_rejects_bad_json(self):
        resp = self.client.post("/create-order", data="not json", content_type="application/json")
        self.assertEqual(resp.status_code, 400)

    def test_create_order_requires_post(self):
        self.assertEqual(self.client.get("/create-order").status_code, 405)

    def test_key_endpoint_exposes_only_key_id(self):
        resp = self.client.get("/get-razorpay-key")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"key": "rzp_test_key"})
        self.assertNotIn("s3cr3t", resp.content.decode())

    def test_trailing_slash_accepted(self):
        self.assertEqual(self.client.get("/get-razorpay-key/").status_code, 200)
