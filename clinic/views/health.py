import logging

from django.db import DatabaseError, connections
from django.http import JsonResponse

from clinic.exceptions import InternalError

logger = logging.getLogger(__name__)


def index(request):
    return JsonResponse({"message": "SmartHealthcare API is running!"})


def healthz(request):
    try:
        with connections["default"].cursor() as c:
            c.execute("SELECT 1")
            row = c.fetchone()
    except DatabaseError:
        logger.exception("Health check could not reach the database")
        return JsonResponse(
            {"ok": False, "code": InternalError.default_code, "error": "Database unavailable"},
            status=500,
        )
    return JsonResponse({"ok": True, "db": bool(row and row[0] == 1)})
