import atexit
import logging

from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)


class PaymentsConfig(AppConfig):
    name = "payments"
    default_auto_field = "django.db.models.BigAutoField"

    def ready(self):
        from .integrations import razorpay

        logger.info(
            "Razorpay Key ID: %s",
            "Configured" if getattr(settings, "RAZORPAY_KEY_ID", "") else "Missing",
        )
        if not getattr(settings, "RAZORPAY_KEY_SECRET", ""):
            logger.warning("RAZORPAY_KEY_SECRET is missing; payment signatures cannot be verified")
        # Release the gateway session on interpreter exit
        atexit.register(razorpay.set_client, None)
