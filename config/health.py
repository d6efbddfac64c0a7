from django.http import JsonResponse


def health_check(request):
    return JsonResponse({"status": "OK", "message": "PayTrack API is running"})


def api_route_not_found(request, *args, **kwargs):
    return JsonResponse({"detail": "Route not found."}, status=404)
