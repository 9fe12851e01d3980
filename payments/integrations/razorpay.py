import logging
import time
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

import requests
from django.conf import settings
from requests import RequestException
from requests.auth import HTTPBasicAuth

logger = logging.getLogger(__name__)

COMMON_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}
DEFAULT_CURRENCY = "INR"


class RazorpayError(Exception): pass


def _amount_subunits(amount) -> int:
    """Convert a major-unit amount (rupees) to paise.

    Accepts ints, floats, Decimals and numeric strings. Booleans, NaN,
    zero and negative values are rejected.
    """
    if isinstance(amount, bool) or amount is None:
        raise RazorpayError("Invalid amount value")
    try:
        value = Decimal(str(amount).strip())
    except (InvalidOperation, ValueError):
        raise RazorpayError("Invalid amount value")
    if not value.is_finite() or value <= 0:
        raise RazorpayError("Invalid amount value")
    return int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _receipt_id() -> str:
    return f"order_rcptid_{int(time.time() * 1000)}"


def _error_message(resp) -> str:
    try:
        data = resp.json()
    except ValueError:
        data = {}
    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict) and error.get("description"):
        return str(error["description"])
    return f"HTTP {resp.status_code}"


class RazorpayClient:
    """Thin client for the Razorpay Orders API.

    Holds its own ``requests.Session`` authenticated with the key pair, so a
    process builds one at startup (see :func:`get_client`) and reuses it.
    """

    def __init__(self, key_id: str, key_secret: str, base_url: str = "https://api.razorpay.com/v1",
                 timeout: float = 30):
        self.key_id = key_id
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.auth = HTTPBasicAuth(key_id, key_secret)
        self.session.headers.update(COMMON_HEADERS)

    def create_order(self, amount, currency=None) -> dict:
        """Create a gateway order and return Razorpay's order object as-is."""
        payload = {
            "amount": _amount_subunits(amount),
            "currency": currency or DEFAULT_CURRENCY,
            "receipt": _receipt_id(),
        }
        url = f"{self.base_url}/orders"
        try:
            resp = self.session.post(url, json=payload, timeout=self.timeout)
        except RequestException as e:
            raise RazorpayError(f"Gateway request failed: {e}")
        if resp.status_code != 200:
            raise RazorpayError(_error_message(resp))
        try:
            data = resp.json()
        except ValueError:
            raise RazorpayError("Gateway returned a non-JSON response")
        if not isinstance(data, dict):
            raise RazorpayError("Gateway returned an unexpected response")
        return data

    def close(self) -> None:
        self.session.close()


_client = None


def get_client() -> RazorpayClient:
    """Return the process-wide client, building it from settings on first use."""
    global _client
    if _client is None:
        _client = RazorpayClient(
            key_id=settings.RAZORPAY_KEY_ID,
            key_secret=settings.RAZORPAY_KEY_SECRET,
            base_url=getattr(settings, "RAZORPAY_BASE_URL", "https://api.razorpay.com/v1"),
            timeout=getattr(settings, "RAZORPAY_TIMEOUT", 30),
        )
    return _client


def set_client(client) -> None:
    """Swap the process-wide client (tests, or a custom transport)."""
    global _client
    if _client is not None and _client is not client:
        _client.close()
    _client = client
