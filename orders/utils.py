import threading
import time

from django.conf import settings

_lock = threading.Lock()
_last_ms = 0


def generate_order_id(prefix=None):
    """Return ``prefix`` + epoch milliseconds, e.g. ``HSM1718000000000``.

    Strictly increasing within one process: if the clock has not moved past
    the last issued value, the last value + 1 is used. Separate processes
    can still collide.
    """
    global _last_ms
    if prefix is None:
        prefix = getattr(settings, "ORDER_ID_PREFIX", "HSM")
    with _lock:
        now_ms = int(time.time() * 1000)
        _last_ms = now_ms if now_ms > _last_ms else _last_ms + 1
        return f"{prefix}{_last_ms}"
