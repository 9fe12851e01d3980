"""Razorpay payment signature helpers."""

import hashlib
import hmac
import logging

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

logger = logging.getLogger(__name__)


def compute_payment_signature(gateway_order_id: str, gateway_payment_id: str, secret: str) -> str:
    """Return the hex HMAC-SHA256 Razorpay signs a successful checkout with.

    The signed message is ``"<order_id>|<payment_id>"`` keyed with the
    account's key secret.
    """
    msg = f"{gateway_order_id}|{gateway_payment_id}".encode()
    return hmac.new(secret.encode(), msg, hashlib.sha256).hexdigest()


def verify_payment_signature(gateway_order_id: str, gateway_payment_id: str,
                             supplied_signature: str, secret: str = None) -> bool:
    """
    Recompute the checkout signature and compare it with the one the client
    sent back. The comparison is exact: no trimming or case folding.

    ``secret`` defaults to ``settings.RAZORPAY_KEY_SECRET``. If that is
    missing the function logs an error and raises
    :class:`ImproperlyConfigured`.
    """

    if secret is None:
        secret = getattr(settings, "RAZORPAY_KEY_SECRET", "")
    if not secret:
        logger.error("RAZORPAY_KEY_SECRET missing in settings")
        raise ImproperlyConfigured(
            "RAZORPAY_KEY_SECRET setting is required to verify payment signatures"
        )

    expected = compute_payment_signature(gateway_order_id, gateway_payment_id, secret)
    return hmac.compare_digest(expected.encode(), str(supplied_signature or "").encode())
