import logging

from payments.utils import verify_payment_signature
from .emails import send_order_notification
from .models import Order, PaymentState
from .utils import generate_order_id

logger = logging.getLogger(__name__)


class InvalidPaymentSignature(Exception): pass


def _to_amount(name: str, value):
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError(f"Invalid {name} value: {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid {name} value: {value!r}")


def payment_state_for(payment) -> PaymentState:
    return PaymentState.COD if payment is None else PaymentState.PAID


def build_order(order_data: dict, payment, order_id: str) -> Order:
    state = payment_state_for(payment)
    return Order(
        order_id=order_id,
        customer=order_data.get("customer") or {},
        items=order_data.get("items") or [],
        subtotal=_to_amount("subtotal", order_data.get("subtotal")),
        shipping=_to_amount("shipping", order_data.get("shipping")),
        total=_to_amount("total", order_data.get("total")),
        payment_method=state.method,
        payment_status=state.status,
        payment=payment,
    )


def _check_signature(payment) -> None:
    """Verify the checkout signature when the client sent one.

    A payment without ``razorpay_signature`` is not checked at all and the
    order is still stored as paid online. Known gap: a client can skip
    verification by leaving the signature out.
    """
    if payment is None:
        return
    if not isinstance(payment, dict) or not payment.get("razorpay_signature"):
        logger.warning("Payment details without a signature; storing as online without verification")
        return

    ok = verify_payment_signature(
        payment.get("razorpay_order_id", ""),
        payment.get("razorpay_payment_id", ""),
        payment["razorpay_signature"],
    )
    if not ok:
        logger.error("Payment verification failed for razorpay_order_id=%s", payment.get("razorpay_order_id"))
        raise InvalidPaymentSignature("Invalid payment signature")
    logger.info("Payment signature verified for razorpay_order_id=%s", payment.get("razorpay_order_id"))


def place_order(order_data: dict, payment=None, notify=None) -> Order:
    """Verify (when signed), persist and announce a checkout.

    Raises :class:`InvalidPaymentSignature` before anything is written when
    the signature does not match. Database errors propagate. Notification
    errors are logged and never fail the call.
    """
    notify = notify or send_order_notification
    order_id = generate_order_id()
    _check_signature(payment)

    order = build_order(order_data, payment, order_id)
    order.save()
    logger.info("Order %s saved (pk=%s, %s)", order.order_id, order.pk, order.payment_method)

    try:
        notify(order)
        logger.info("Order email sent for %s", order.order_id)
    except Exception:
        logger.exception("Order email failed for %s (order is saved)", order.order_id)

    return order
