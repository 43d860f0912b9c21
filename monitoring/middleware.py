import logging
import time

from .monitor import monitor
from api_responses import fail

logger = logging.getLogger(__name__)


class RequestLogMiddleware:
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        monitor.track_request()
        started = time.monotonic()
        logger.info("Incoming request %s %s from %s",
                    request.method, request.path, request.META.get("REMOTE_ADDR"))

        response = self.get_response(request)

        duration_ms = int((time.monotonic() - started) * 1000)
        level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(level, "Request completed %s %s %s %sms",
                   request.method, request.path, response.status_code, duration_ms)
        return response


class ErrorEnvelopeMiddleware:
    """Uncaught view exceptions become a logged 500 in the usual error envelope."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        monitor.track_error()
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return fail("Internal server error", "SERVER_ERROR", 500)
