import json
import logging

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from .services import InvalidPaymentSignature, place_order

logger = logging.getLogger(__name__)


def _json_body(request):
    try: return json.loads(request.body.decode("utf-8"))
    except Exception: return None


@csrf_exempt
@require_POST
def save_order_view(request):
    body = _json_body(request)
    if not isinstance(body, dict):
        return JsonResponse({"error": "Invalid JSON body"}, status=400)
    order_data = body.get("orderData")
    if not isinstance(order_data, dict):
        return JsonResponse({"error": "orderData is required"}, status=400)
    payment = body.get("payment")

    customer = order_data.get("customer")
    logger.info(
        "Received order: customer=%s total=%s paymentMethod=%s",
        customer.get("name") if isinstance(customer, dict) else None,
        order_data.get("total"),
        "cod" if payment is None else "online",
    )

    try:
        order = place_order(order_data, payment)
    except InvalidPaymentSignature:
        return JsonResponse({"error": "Invalid payment signature"}, status=400)
    except Exception as e:
        logger.exception("Error saving order")
        return JsonResponse({"error": "Failed to save order", "details": str(e)}, status=500)

    return JsonResponse({
        "success": True,
        "orderId": order.order_id,
        "message": "Order placed successfully",
    })
