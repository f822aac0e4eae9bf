# backend/arena_core/middleware.py
import logging
import time

from django.conf import settings

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware:
    """
    Logs one line per request: method, path, status, duration and user.
    With DEBUG_LOG_REQUESTS the request body and DRF response data are logged too.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        started = time.monotonic()
        verbose = getattr(settings, "DEBUG_LOG_REQUESTS", False)

        if verbose:
            try:
                payload = request.body.decode("utf-8") if request.body else ""
            except UnicodeDecodeError:
                payload = "<binary>"
            logger.debug("[REQUEST] %s %s payload=%s", request.method, request.get_full_path(), payload)

        response = self.get_response(request)

        elapsed_ms = (time.monotonic() - started) * 1000
        user = getattr(request, "user", None)
        user_id = user.pk if user is not None and user.is_authenticated else None
        status_code = getattr(response, "status_code", 0)
        log = logger.warning if status_code >= 500 else logger.info
        log(
            "[request] %s %s status=%s ms=%.1f user=%s",
            request.method, request.get_full_path(), status_code, elapsed_ms, user_id,
        )

        if verbose:
            logger.debug("[RESPONSE] %s data=%s", request.get_full_path(), getattr(response, "data", "<non DRF response>"))
        return response
