import json
import logging

from django.conf import settings
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from .integrations.razorpay import RazorpayError, get_client

logger = logging.getLogger(__name__)


def _json_body(request):
    try: return json.loads(request.body.decode("utf-8"))
    except Exception: return None


@csrf_exempt
@require_POST
def create_order_view(request):
    body = _json_body(request)
    if not isinstance(body, dict):
        return JsonResponse({"error": "Invalid JSON body"}, status=400)

    amount = body.get("amount")
    logger.info("Creating Razorpay order for amount=%s", amount)
    try:
        order = get_client().create_order(amount, body.get("currency"))
    except RazorpayError as e:
        logger.error("Razorpay order creation failed for amount=%s: %s", amount, e)
        return JsonResponse({"error": "Failed to create order", "details": str(e)}, status=500)

    logger.info("Razorpay order created: %s", order.get("id"))
    return JsonResponse(order, safe=False)


@require_GET
def razorpay_key_view(request):
    """Public key id for the checkout widget. The secret never leaves the server."""
    return JsonResponse({"key": settings.RAZORPAY_KEY_ID})
