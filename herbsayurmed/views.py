from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.http import require_GET


@require_GET
def health_view(request):
    # Liveness only; no dependency checks. timezone.now() is UTC with USE_TZ
    now = timezone.now()
    return JsonResponse({
        "status": "Server is running",
        "timestamp": now.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
    })
