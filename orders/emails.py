import logging
from decimal import Decimal, InvalidOperation
from typing import List

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string
from django.utils import timezone

logger = logging.getLogger(__name__)


def _merchant_recipients() -> List[str]:
    raw = getattr(settings, "ORDERS_NOTIFY_EMAIL", None) or getattr(settings, "EMAIL_HOST_USER", "")
    return [e.strip() for e in (raw or "").split(",") if e and e.strip()]


def _from_address() -> str:
    addr = getattr(settings, "EMAIL_HOST_USER", None) or getattr(settings, "DEFAULT_FROM_EMAIL", "")
    name = getattr(settings, "ORDERS_FROM_NAME", "Herbsayurmed")
    return f"{name} <{addr}>" if addr else name


def _line_total(price, qty):
    try:
        return Decimal(str(price)) * Decimal(str(qty))
    except (InvalidOperation, ValueError):
        return None


def _amount(value):
    # 797.0 -> 797, 0.125 stays as sent
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _item_rows(items) -> list:
    rows = []
    for item in items or []:
        if not isinstance(item, dict):
            continue
        qty = item.get("qty", item.get("quantity"))
        rows.append({
            "name": item.get("name", ""),
            "qty": qty,
            "line_total": _line_total(item.get("price"), qty),
        })
    return rows


def build_context(order) -> dict:
    return {
        "order": order,
        "customer": order.customer if isinstance(order.customer, dict) else {},
        "items": _item_rows(order.items),
        "is_paid": order.is_paid,
        "subtotal": _amount(order.subtotal),
        "shipping": _amount(order.shipping),
        "total": _amount(order.total),
        "payment_label": "PAID ✅" if order.is_paid else "COD (Pending)",
        "created_at": timezone.localtime(order.created_at) if order.created_at else None,
    }


def send_order_notification(order, connection=None) -> int:
    """Email the merchant a text + HTML summary of a saved order.

    Errors from rendering or the mail relay propagate; callers decide
    whether a failed notification matters.
    """
    recipients = _merchant_recipients()
    if not recipients:
        logger.warning("No merchant mailbox configured; skipping notification for %s", order.order_id)
        return 0

    context = build_context(order)
    subject = f"🛍️ New Order {order.order_id} from {order.customer_name}"
    text_body = render_to_string("emails/order_notification.txt", context)
    html_body = render_to_string("emails/order_notification.html", context)

    msg = EmailMultiAlternatives(subject, text_body, _from_address(), recipients, connection=connection)
    msg.attach_alternative(html_body, "text/html")
    return msg.send(fail_silently=False)
