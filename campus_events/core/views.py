from django.http import JsonResponse

from .handlers import GENERIC_ERROR_MESSAGE


def page_not_found(request, exception=None):
    return JsonResponse(
        {"success": False, "message": "Route not found", "code": "not_found"},
        status=404,
    )


def server_error(request):
    return JsonResponse(
        {"success": False, "message": GENERIC_ERROR_MESSAGE, "code": "internal_error"},
        status=500,
    )
