from django.http import JsonResponse
from django.utils import timezone


def health(request):
    return JsonResponse({
        "status": "OK",
        "message": "Community Event API is running",
        "timestamp": timezone.now().isoformat(),
    })
